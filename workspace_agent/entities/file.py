"""
File domain entity.
"""

import os

from workspace_agent.entities.tool import FileInfo
from workspace_agent.exceptions import FileNotFoundInWorkspaceError, IOFailureError


class File:
    """
    Workspace entry (file or directory) addressed relative to the project root.
    """

    def __init__(self, path: str, root: str):
        """
        Initialize the File entity.

        Args:
            path: Absolute path to the entry
            root: Absolute project root the entry lives under

        Raises:
            FileNotFoundInWorkspaceError: If the entry doesn't exist
            IOFailureError: If the entry cannot be inspected
        """
        if not path or not isinstance(path, str):
            raise IOFailureError("Path must be a non-empty string")

        if not os.path.exists(path):
            raise FileNotFoundInWorkspaceError(f"File does not exist: {path}")

        self.path = os.path.abspath(path)
        self.root = os.path.abspath(root)
        self.name = os.path.basename(self.path)
        self.is_dir = os.path.isdir(self.path)
        self.size = self._find_file_size()

    @property
    def relative_path(self) -> str:
        """Root-relative path with forward slashes."""
        return os.path.relpath(self.path, self.root).replace(os.sep, "/")

    def _find_file_size(self) -> int:
        """Get the file size in bytes."""
        if self.is_dir:
            # Do not compute directory size to avoid expensive traversal
            return 0
        try:
            return os.path.getsize(self.path)
        except OSError as e:
            raise IOFailureError(f"Cannot get file size: {e}")

    def to_info(self) -> FileInfo:
        return FileInfo(
            name=self.name,
            path=self.relative_path,
            is_directory=self.is_dir,
            size=self.size,
        )

    def __str__(self) -> str:
        """String representation of the File."""
        return f"File(path='{self.relative_path}', size={self.size}, dir={self.is_dir})"

    def __repr__(self) -> str:
        """Detailed string representation of the File."""
        return f"File(path='{self.path}')"
