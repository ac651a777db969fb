"""
File repository port interface defining the contract for file operations.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from workspace_agent.entities.file import File


class FileRepositoryPort(ABC):
    """Port interface for filesystem primitives scoped to one project root."""

    @property
    @abstractmethod
    def root(self) -> Optional[str]:
        """Absolute project root, or None when no workspace is open."""
        pass

    @abstractmethod
    def stat(self, path: str) -> File:
        """
        Inspect an entry.

        Args:
            path: Absolute path under the root

        Returns:
            File entity describing the entry

        Raises:
            FileNotFoundInWorkspaceError: If the entry doesn't exist
        """
        pass

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        Read a UTF-8 text file.

        Args:
            path: Absolute path under the root

        Returns:
            File content

        Raises:
            FileNotFoundInWorkspaceError: If the file doesn't exist
            IOFailureError: If the file cannot be read or decoded
        """
        pass

    @abstractmethod
    def write_text(self, path: str, content: str) -> File:
        """
        Create or overwrite a text file with UTF-8 content.

        Args:
            path: Absolute path under the root
            content: Text content to write (UTF-8)

        Returns:
            A File entity representing the written file
        """
        pass

    @abstractmethod
    def mkdir(self, path: str) -> File:
        """
        Create a directory (and parents) at the given path.

        Args:
            path: Directory path to create

        Returns:
            A File entity representing the directory
        """
        pass

    @abstractmethod
    def find_files(
        self,
        pattern: str,
        exclude: Iterable[str] = (),
        max_results: Optional[int] = None,
        include_directories: bool = False,
    ) -> list[File]:
        """
        Glob-search under the root. Hidden (dot) entries are included.

        Args:
            pattern: Root-relative glob (``*`` is one level, ``**`` recurses)
            exclude: Directory names to skip anywhere in the tree
            max_results: Stop after this many entries
            include_directories: Also return matching directories

        Returns:
            Matching File entities

        Raises:
            FileRepositoryError: If search fails
        """
        pass
