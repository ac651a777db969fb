"""
Use case implementing the five file tools against the validated path space.
"""

import logging
import os
from typing import Callable, Optional

from workspace_agent.config.settings import DEFAULT_MAX_FILE_READ_SIZE
from workspace_agent.entities.tool import (
    EditResult,
    FileContent,
    FileInfo,
    FileListResult,
    SearchMatch,
    SearchResult,
    ToolName,
    ToolPayload,
    ToolResult,
)
from workspace_agent.exceptions import (
    ContentMismatchError,
    FileNotFoundInWorkspaceError,
    FileRepositoryError,
    IOFailureError,
    NoWorkspaceError,
    PathValidationError,
    SizeLimitError,
    ToolErrorKind,
)
from workspace_agent.ports.files.file_repository_port import FileRepositoryPort
from workspace_agent.utils.diff import generate_unified_diff
from workspace_agent.utils.workspace import PathValidator, ValidationResult

LIST_MAX_RESULTS = 100
SEARCH_MAX_FILES = 50
SEARCH_MAX_MATCHES = 50
SEARCH_LINE_MAX_CHARS = 200
# Directory names never descended into
EXCLUDED_DIRECTORIES = ("node_modules", ".git")


class FileOperationsUseCase:
    """Read, write, edit, list and search files under the project root.

    Every public method returns a :class:`ToolResult`; failures are captured
    as ``success=False`` with an error kind and never raised to the caller.
    """

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        path_validator: PathValidator,
        max_file_read_size: int = DEFAULT_MAX_FILE_READ_SIZE,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the use case.

        Args:
            file_repository: Repository for file operations
            path_validator: Validator confining paths to the project root
            max_file_read_size: Largest file ``read`` accepts, in bytes
            logger: Logger instance to use for logging
        """
        self._file_repository = file_repository
        self._path_validator = path_validator
        self._max_file_read_size = max_file_read_size
        self._logger = logger or logging.getLogger(__name__)

    # ------------------------- boundary -------------------------

    def _run(self, tool_name: ToolName, operation: Callable[[], ToolPayload]) -> ToolResult:
        try:
            return ToolResult.ok(tool_name, operation())
        except FileRepositoryError as e:
            self._logger.warning(f"{tool_name.value} failed: {e}")
            return ToolResult.failure(tool_name, str(e), e.kind)
        except Exception as e:
            self._logger.error(f"Unexpected error in {tool_name.value}: {e}")
            return ToolResult.failure(
                tool_name, f"{tool_name.value} failed: {e}", ToolErrorKind.IO_FAILURE
            )

    def _validate(self, path: Optional[str]) -> ValidationResult:
        validation = self._path_validator.validate(path)
        if validation.valid:
            return validation
        if validation.error_kind == ToolErrorKind.NO_WORKSPACE:
            raise NoWorkspaceError(validation.error or "No workspace folder is open.")
        raise PathValidationError(validation.error or f"Invalid path: {path}")

    def _is_allowed(self, relative_path: str) -> bool:
        return self._path_validator.validate(relative_path).valid

    # ------------------------- read -------------------------

    def read_file(
        self, path: str, start_line: Optional[int] = None, end_line: Optional[int] = None
    ) -> ToolResult:
        """
        Read a file with 1-based line numbers.

        Args:
            path: File path relative to the project root
            start_line: First line to return (1-based, default 1)
            end_line: Last line to return (inclusive, default last line)

        Returns:
            ToolResult carrying a FileContent on success
        """
        return self._run(ToolName.READ_FILE, lambda: self._read(path, start_line, end_line))

    def _read(self, path: str, start_line: Optional[int], end_line: Optional[int]) -> FileContent:
        validation = self._validate(path)
        self._logger.info(f"Reading file: {validation.normalized_path}")

        try:
            entry = self._file_repository.stat(validation.full_path)
        except FileNotFoundInWorkspaceError:
            raise FileNotFoundInWorkspaceError(f"File not found: {path}")
        if entry.is_dir:
            raise IOFailureError(f"Path is a directory, not a file: {path}")

        if entry.size > self._max_file_read_size:
            raise SizeLimitError(
                f"File too large ({round(entry.size / 1024)}KB). "
                f"Maximum readable size is {round(self._max_file_read_size / 1024)}KB."
            )

        lines = self._file_repository.read_text(validation.full_path).split("\n")
        start = max(1, start_line if start_line is not None else 1) - 1
        end = max(0, min(len(lines), end_line if end_line is not None else len(lines)))
        selected = lines[start:end]

        numbered = "\n".join(
            f"{start + idx + 1:>4}│ {line}" for idx, line in enumerate(selected)
        )
        return FileContent(
            path=validation.normalized_path,
            content=numbered,
            line_count=len(selected),
            truncated=end < len(lines) or start > 0,
        )

    # ------------------------- write -------------------------

    def write_file(self, path: str, content: str) -> ToolResult:
        """
        Create or overwrite a file, creating parent directories as needed.

        Returns:
            ToolResult carrying a confirmation string on success
        """
        return self._run(ToolName.WRITE_FILE, lambda: self._write(path, content))

    def _write(self, path: str, content: str) -> str:
        validation = self._validate(path)
        self._logger.info(f"Writing file: {validation.normalized_path}")
        self._file_repository.mkdir(os.path.dirname(validation.full_path))
        self._file_repository.write_text(validation.full_path, content)
        return f"File written: {validation.normalized_path}"

    # ------------------------- edit -------------------------

    def edit_file(self, path: str, search_content: str, replace_content: str) -> ToolResult:
        """
        Propose replacing the first occurrence of ``search_content``.

        The file on disk is left untouched; the returned EditResult is in the
        proposed state until the approval step applies or rejects it.

        Returns:
            ToolResult carrying an EditResult on success
        """
        return self._run(
            ToolName.EDIT_FILE, lambda: self._edit(path, search_content, replace_content)
        )

    def _edit(self, path: str, search_content: str, replace_content: str) -> EditResult:
        validation = self._validate(path)
        self._logger.info(f"Preparing edit: {validation.normalized_path}")

        try:
            original = self._file_repository.read_text(validation.full_path)
        except FileNotFoundInWorkspaceError:
            raise FileNotFoundInWorkspaceError(f"File not found: {path}")

        if not search_content:
            raise ContentMismatchError("searchContent must not be empty.")
        if search_content not in original:
            raise ContentMismatchError(
                "Search content not found in file. Read the file again and retry "
                "with text copied exactly."
            )

        new_content = original.replace(search_content, replace_content, 1)
        return EditResult(
            path=validation.normalized_path,
            original_content=original,
            new_content=new_content,
            diff=generate_unified_diff(validation.normalized_path, original, new_content),
        )

    # ------------------------- list -------------------------

    def list_files(self, directory: Optional[str] = None, pattern: Optional[str] = None) -> ToolResult:
        """
        List entries matching a glob under a directory.

        Args:
            directory: Directory relative to the root (default ".")
            pattern: Glob relative to the directory (default "*")

        Returns:
            ToolResult carrying a FileListResult on success
        """
        return self._run(ToolName.LIST_FILES, lambda: self._list(directory, pattern))

    def _list(self, directory: Optional[str], pattern: Optional[str]) -> FileListResult:
        directory = directory or "."
        pattern = pattern or "*"
        validation = self._validate(directory)
        search_pattern = (
            pattern
            if validation.normalized_path in (".", "")
            else f"{validation.normalized_path}/{pattern}"
        )
        self._logger.info(f"Listing files with pattern: {search_pattern}")

        entries = self._file_repository.find_files(
            search_pattern,
            exclude=EXCLUDED_DIRECTORIES,
            max_results=LIST_MAX_RESULTS,
            include_directories=True,
        )
        infos: list[FileInfo] = [
            e.to_info() for e in entries if self._is_allowed(e.relative_path)
        ]
        infos.sort(key=lambda info: info.path)
        self._logger.info(f"Found {len(infos)} entries")
        return FileListResult(directory=directory, files=infos, total_count=len(infos))

    # ------------------------- search -------------------------

    def search_files(
        self, query: str, path: Optional[str] = None, file_pattern: Optional[str] = None
    ) -> ToolResult:
        """
        Case-insensitive substring search across files.

        Args:
            query: Text to look for
            path: Directory to search under (default: the whole root)
            file_pattern: Glob for candidate files (default "**/*")

        Returns:
            ToolResult carrying a SearchResult on success
        """
        return self._run(ToolName.SEARCH_FILES, lambda: self._search(query, path, file_pattern))

    def _search(self, query: str, path: Optional[str], file_pattern: Optional[str]) -> SearchResult:
        file_pattern = file_pattern or "**/*"
        validation = self._validate(path or ".")
        search_pattern = (
            f"{validation.normalized_path}/{file_pattern}"
            if path and validation.normalized_path not in (".", "")
            else file_pattern
        )
        self._logger.info(f"Searching for '{query}' in files matching: {search_pattern}")

        files = self._file_repository.find_files(
            search_pattern, exclude=EXCLUDED_DIRECTORIES, max_results=SEARCH_MAX_FILES
        )
        needle = query.lower()
        matches: list[SearchMatch] = []
        for entry in files:
            if not self._is_allowed(entry.relative_path):
                continue
            try:
                content = self._file_repository.read_text(entry.path)
            except FileRepositoryError as e:
                self._logger.debug(f"Skipping unreadable file {entry.relative_path}: {e}")
                continue
            for idx, line in enumerate(content.split("\n")):
                if needle in line.lower():
                    matches.append(
                        SearchMatch(
                            path=entry.relative_path,
                            line=idx + 1,
                            content=line.strip()[:SEARCH_LINE_MAX_CHARS],
                        )
                    )
            if len(matches) >= SEARCH_MAX_MATCHES:
                break

        matches = matches[:SEARCH_MAX_MATCHES]
        self._logger.info(f"Found {len(matches)} matches for '{query}'")
        return SearchResult(query=query, matches=matches, total_matches=len(matches))
