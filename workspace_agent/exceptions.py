"""
Custom exceptions for the application.
"""

from enum import Enum


class ToolErrorKind(str, Enum):
    """Machine-readable category attached to a failed tool result."""

    NO_WORKSPACE = "no_workspace"
    PATH_REJECTED = "path_rejected"
    NOT_FOUND = "not_found"
    TOO_LARGE = "too_large"
    SEARCH_CONTENT_ABSENT = "search_content_absent"
    IO_FAILURE = "io_failure"
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_PARAMETERS = "invalid_parameters"
    EXECUTION_FAILED = "execution_failed"


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class LLMError(BaseAppError):
    """Exception raised for LLM-related errors."""

    pass


class TransportError(LLMError):
    """Exception raised when the completion stream or network fails mid-turn."""

    pass


class FileRepositoryError(BaseAppError):
    """Exception raised for file repository errors."""

    kind: ToolErrorKind = ToolErrorKind.IO_FAILURE


class NoWorkspaceError(FileRepositoryError):
    """Raised when no project root is configured."""

    kind = ToolErrorKind.NO_WORKSPACE


class PathValidationError(FileRepositoryError):
    """Raised when a path escapes the project root or hits the blocklist."""

    kind = ToolErrorKind.PATH_REJECTED


class FileNotFoundInWorkspaceError(FileRepositoryError):
    """Raised when a file does not exist under the project root."""

    kind = ToolErrorKind.NOT_FOUND


class SizeLimitError(FileRepositoryError):
    """Raised when a file exceeds the configured read size."""

    kind = ToolErrorKind.TOO_LARGE


class ContentMismatchError(FileRepositoryError):
    """Raised when an edit's search content is absent from the file."""

    kind = ToolErrorKind.SEARCH_CONTENT_ABSENT


class IOFailureError(FileRepositoryError):
    """Raised for any other filesystem failure."""

    kind = ToolErrorKind.IO_FAILURE


class UnknownToolError(BaseAppError):
    """Exception raised when a tool name is not part of the tool set."""

    pass


class MalformedToolCallError(BaseAppError):
    """Exception raised when a tool call's parameters cannot be decoded."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors."""

    pass


class EditStateError(BaseAppError):
    """Exception raised for an invalid proposed/applied/rejected transition."""

    pass
