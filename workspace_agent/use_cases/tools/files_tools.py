"""
The five file tools mapped onto the File Operations use case.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from typing_extensions import assert_never

from workspace_agent.entities.tool import (
    EditFileParams,
    ListFilesParams,
    ReadFileParams,
    SearchFilesParams,
    ToolCall,
    ToolName,
    ToolResult,
    WriteFileParams,
)
from workspace_agent.exceptions import ToolErrorKind, UnknownToolError
from workspace_agent.ports.llm.tools_port import ToolsHandlerPort, ToolSpec
from workspace_agent.use_cases.files.file_operations import FileOperationsUseCase


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "parameters"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


class FilesToolsHandler(ToolsHandlerPort):
    """Handler for file-related tools that can be called by an LLM."""

    def __init__(
        self,
        file_operations: FileOperationsUseCase,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the files tools handler.

        Args:
            file_operations: Use case implementing the file tools
            logger: Logger instance to use for logging
        """
        self._file_operations = file_operations
        self._logger = logger or logging.getLogger(__name__)

    def available_tools(self) -> list[ToolSpec]:
        """
        Get a list of available file tools.

        Returns:
            List of tool specifications for file operations
        """
        return [
            {
                "name": ToolName.READ_FILE.value,
                "description": "Read a text file. Lines are returned with 1-based line numbers.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "path": {
                            "type": "string",
                            "description": "File path relative to the project root",
                        },
                        "startLine": {
                            "type": "integer",
                            "description": "First line to read (1-based, optional)",
                        },
                        "endLine": {
                            "type": "integer",
                            "description": "Last line to read, inclusive (optional)",
                        },
                    },
                    "required": ["path"],
                },
            },
            {
                "name": ToolName.WRITE_FILE.value,
                "description": "Create a file or overwrite it entirely. Parent directories are created.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string"},
                        "content": {
                            "type": "string",
                            "description": "Full new file content",
                        },
                    },
                    "required": ["path", "content"],
                },
            },
            {
                "name": ToolName.EDIT_FILE.value,
                "description": (
                    "Replace the first occurrence of searchContent with replaceContent. "
                    "The change is shown to the user as a diff and applied only after approval."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string"},
                        "searchContent": {
                            "type": "string",
                            "description": "Exact text to find, copied from the file",
                        },
                        "replaceContent": {
                            "type": "string",
                            "description": "Text to put in its place",
                        },
                    },
                    "required": ["path", "searchContent", "replaceContent"],
                },
            },
            {
                "name": ToolName.LIST_FILES.value,
                "description": "List files and directories matching a glob pattern.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "directory": {
                            "type": "string",
                            "description": "Directory relative to the root (default '.')",
                        },
                        "pattern": {
                            "type": "string",
                            "description": "Glob pattern (default '*', use '**/*' to recurse)",
                        },
                    },
                },
            },
            {
                "name": ToolName.SEARCH_FILES.value,
                "description": "Case-insensitive text search across files.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "query": {"type": "string", "description": "Text to find"},
                        "path": {
                            "type": "string",
                            "description": "Directory to search under (default: whole project)",
                        },
                        "filePattern": {
                            "type": "string",
                            "description": "Glob for files to search (default '**/*')",
                        },
                    },
                    "required": ["query"],
                },
            },
        ]

    def dispatch(self, tool_call: ToolCall) -> ToolResult:
        """
        Dispatch a tool invocation to the file operations use case.

        Args:
            tool_call: Parsed invocation

        Returns:
            Result of the tool invocation. Invalid parameters are reported as a
            failed result so the model can correct them.

        Raises:
            UnknownToolError: If the tool name is unknown
        """
        name = tool_call.tool_name
        if name is None:
            raise UnknownToolError(f"unknown tool: {tool_call.name}")

        self._logger.info(f"Executing {name.value} tool with parameters: {tool_call.parameters}")
        args = tool_call.parameters
        ops = self._file_operations
        try:
            if name is ToolName.READ_FILE:
                read = ReadFileParams.model_validate(args)
                return ops.read_file(read.path, read.start_line, read.end_line)
            elif name is ToolName.WRITE_FILE:
                write = WriteFileParams.model_validate(args)
                return ops.write_file(write.path, write.content)
            elif name is ToolName.EDIT_FILE:
                edit = EditFileParams.model_validate(args)
                return ops.edit_file(edit.path, edit.search_content, edit.replace_content)
            elif name is ToolName.LIST_FILES:
                listing = ListFilesParams.model_validate(args)
                return ops.list_files(listing.directory, listing.pattern)
            elif name is ToolName.SEARCH_FILES:
                search = SearchFilesParams.model_validate(args)
                return ops.search_files(search.query, search.path, search.file_pattern)
            else:
                assert_never(name)
        except ValidationError as e:
            message = f"Invalid parameters for {name.value}: {_describe_validation_error(e)}"
            self._logger.warning(message)
            return ToolResult.failure(name, message, ToolErrorKind.INVALID_PARAMETERS)
