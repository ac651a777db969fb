"""
Local file system adapter implementation for file operations.
"""

import logging
import os
from typing import Iterable, Optional

from typing_extensions import override

from workspace_agent.entities.file import File
from workspace_agent.exceptions import (
    FileNotFoundInWorkspaceError,
    FileRepositoryError,
    IOFailureError,
    NoWorkspaceError,
)
from workspace_agent.ports.files.file_repository_port import FileRepositoryPort
from workspace_agent.utils.workspace import glob_to_regex


class LocalFileSystemAdapter(FileRepositoryPort):
    """Local file system implementation of the file repository port."""

    def __init__(self, root: Optional[str], logger: logging.Logger | None = None):
        """
        Initialize the adapter.

        Args:
            root: Project root; None means no workspace is open
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self._root = os.path.abspath(root) if root else None
        self._logger: logging.Logger = logger or logging.getLogger(__name__)

    @property
    @override
    def root(self) -> Optional[str]:
        return self._root

    def _require_root(self) -> str:
        if not self._root:
            raise NoWorkspaceError("No workspace folder is open.")
        return self._root

    @override
    def stat(self, path: str) -> File:
        return File(path, self._require_root())

    @override
    def read_text(self, path: str) -> str:
        try:
            with open(path, "r", encoding="utf-8", errors="strict", newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise FileNotFoundInWorkspaceError(f"File not found: {path}")
        except IsADirectoryError:
            raise IOFailureError(f"Path is a directory: {path}")
        except UnicodeDecodeError:
            raise IOFailureError("File is not valid UTF-8 text")
        except OSError as e:
            raise IOFailureError(f"Failed to read {path}: {e}")

    @override
    def write_text(self, path: str, content: str) -> File:
        root = self._require_root()
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise IOFailureError(f"Failed to write {path}: {e}")
        return File(path, root)

    @override
    def mkdir(self, path: str) -> File:
        root = self._require_root()
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise IOFailureError(f"Failed to create directory {path}: {e}")
        return File(path, root)

    def _create_file_entities(
        self, file_paths: list[str], include_directories: bool
    ) -> list[File]:
        """
        Create File entities from a list of file paths.

        Args:
            file_paths: List of file paths to convert to File entities
            include_directories: Keep directories as well as regular files

        Returns:
            List of File entities
        """
        root = self._require_root()
        files: list[File] = []
        for file_path in file_paths:
            if not (os.path.isfile(file_path) or (include_directories and os.path.isdir(file_path))):
                continue
            try:
                files.append(File(file_path, root))
            except FileRepositoryError as e:
                # Log the error but continue with other files
                self._logger.warning(f"Could not process file {file_path}: {e}")
        return files

    @override
    def find_files(
        self,
        pattern: str,
        exclude: Iterable[str] = (),
        max_results: Optional[int] = None,
        include_directories: bool = False,
    ) -> list[File]:
        root = self._require_root()
        try:
            matched = self._walk_matches(root, pattern, set(exclude))
            files = self._create_file_entities(matched, include_directories)
        except FileRepositoryError:
            raise
        except Exception as e:
            raise FileRepositoryError(
                f"Failed to search files in {root} with pattern {pattern}: {str(e)}"
            )
        if max_results is not None:
            files = files[:max_results]
        self._logger.debug(f"Glob '{pattern}' matched {len(files)} entries")
        return files

    def _walk_matches(self, root: str, pattern: str, exclude: set[str]) -> list[str]:
        """
        Walk the tree below the pattern's literal prefix, dot-entries included.

        Args:
            root: Project root
            pattern: Root-relative glob
            exclude: Directory names never descended into

        Returns:
            Sorted absolute paths whose root-relative form matches the pattern
        """
        pattern = pattern.replace("\\", "/")
        while pattern.startswith("./"):
            pattern = pattern[2:]
        regex = glob_to_regex(pattern, ignore_case=False)
        segments = pattern.split("/")

        prefix: list[str] = []
        for segment in segments[:-1]:
            if "*" in segment or "?" in segment:
                break
            prefix.append(segment)
        base = os.path.normpath(os.path.join(root, *prefix))
        if base != root and not base.startswith(root + os.sep):
            return []
        if exclude.intersection(os.path.relpath(base, root).split(os.sep)):
            return []
        # Without '**' nothing deeper than the pattern itself can match
        max_depth = None if "**" in pattern else len(segments)

        matched: list[str] = []
        for dirpath, dirnames, filenames in os.walk(base):
            rel_dir = os.path.relpath(dirpath, root)
            depth = 0 if rel_dir == os.curdir else len(rel_dir.split(os.sep))
            dirnames[:] = [d for d in dirnames if d not in exclude]
            for name in dirnames + filenames:
                full_path = os.path.join(dirpath, name)
                relative = os.path.relpath(full_path, root).replace(os.sep, "/")
                if regex.match(relative):
                    matched.append(full_path)
            if max_depth is not None and depth + 1 >= max_depth:
                dirnames[:] = []
        return sorted(matched)
