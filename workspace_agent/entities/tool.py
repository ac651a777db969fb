"""
Tool-call domain entities: invocations, per-tool parameters and results.

All models serialize with camelCase aliases (``toolCallId``, ``textContent``)
because that is the shape the model and the host surfaces exchange, while
Python code uses the snake_case attribute names.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from workspace_agent.exceptions import EditStateError, ToolErrorKind


class ToolName(str, Enum):
    """The fixed set of tools the model may invoke."""

    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    EDIT_FILE = "edit_file"
    LIST_FILES = "list_files"
    SEARCH_FILES = "search_files"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) names, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ------------------------- parameters -------------------------


class ReadFileParams(_WireModel):
    path: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None


class WriteFileParams(_WireModel):
    path: str
    content: str


class EditFileParams(_WireModel):
    path: str
    search_content: str
    replace_content: str


class ListFilesParams(_WireModel):
    directory: Optional[str] = None
    pattern: Optional[str] = None


class SearchFilesParams(_WireModel):
    query: str = Field(min_length=1)
    path: Optional[str] = None
    file_pattern: Optional[str] = None


# ------------------------- invocation -------------------------


class ToolCall(_WireModel):
    """A single tool invocation extracted from model output."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    @property
    def tool_name(self) -> Optional[ToolName]:
        """The enum member for ``name``, or None if the name is unknown."""
        try:
            return ToolName(self.name)
        except ValueError:
            return None


# ------------------------- payloads -------------------------


class FileContent(_WireModel):
    path: str
    content: str
    line_count: int
    truncated: bool


class FileInfo(_WireModel):
    name: str
    path: str
    is_directory: bool
    size: Optional[int] = None


class FileListResult(_WireModel):
    directory: str
    files: list[FileInfo]
    total_count: int


class SearchMatch(_WireModel):
    path: str
    line: int
    content: str
    context: Optional[str] = None


class SearchResult(_WireModel):
    query: str
    matches: list[SearchMatch]
    total_matches: int


class EditStatus(str, Enum):
    PROPOSED = "proposed"
    APPLIED = "applied"
    REJECTED = "rejected"


class EditResult(_WireModel):
    """A proposed edit. Nothing is written until it is approved."""

    path: str
    original_content: str
    new_content: str
    diff: str
    status: EditStatus = EditStatus.PROPOSED

    @computed_field(alias="applied")  # type: ignore[prop-decorator]
    @property
    def applied(self) -> bool:
        return self.status == EditStatus.APPLIED

    def mark_applied(self) -> None:
        self._transition(EditStatus.APPLIED)

    def mark_rejected(self) -> None:
        self._transition(EditStatus.REJECTED)

    def _transition(self, target: EditStatus) -> None:
        if self.status != EditStatus.PROPOSED:
            raise EditStateError(
                f"Edit for {self.path} is already {self.status.value}; cannot mark {target.value}"
            )
        self.status = target


ToolPayload = Union[FileContent, FileListResult, SearchResult, EditResult, str]


class ToolResult(_WireModel):
    """Outcome of one tool call. ``result`` iff success, ``error`` otherwise."""

    tool_call_id: str = ""
    tool_name: str
    success: bool
    result: Optional[ToolPayload] = None
    error: Optional[str] = None
    error_kind: Optional[ToolErrorKind] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "ToolResult":
        if self.success and self.result is None:
            raise ValueError("successful tool result requires a result payload")
        if not self.success and not self.error:
            raise ValueError("failed tool result requires an error message")
        return self

    @classmethod
    def ok(cls, tool_name: Union[ToolName, str], result: ToolPayload) -> "ToolResult":
        return cls(tool_name=_name_of(tool_name), success=True, result=result)

    @classmethod
    def failure(
        cls,
        tool_name: Union[ToolName, str],
        error: str,
        kind: ToolErrorKind = ToolErrorKind.EXECUTION_FAILED,
    ) -> "ToolResult":
        return cls(
            tool_name=_name_of(tool_name), success=False, error=error, error_kind=kind
        )


def _name_of(tool_name: Union[ToolName, str]) -> str:
    return tool_name.value if isinstance(tool_name, ToolName) else str(tool_name)


# ------------------------- conversation -------------------------


class ParsedResponse(_WireModel):
    text_content: str
    tool_calls: list[ToolCall] = Field(default_factory=list)

    @computed_field(alias="hasToolCalls")  # type: ignore[prop-decorator]
    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0


class ConversationMessage(_WireModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
