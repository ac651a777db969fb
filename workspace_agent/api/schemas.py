"""
Pydantic models for API requests and responses.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

from workspace_agent.entities.tool import (
    ConversationMessage,
    EditResult,
    FileInfo,
    ToolCall,
    ToolResult,
)
from workspace_agent.use_cases.agent.tool_result_formatter import (
    describe_tool_call,
    format_tool_result_for_display,
)


class AgentRunRequest(BaseModel):
    """Schema for an agent request."""

    message: str = Field(..., min_length=1, description="User request")
    history: List[ConversationMessage] = Field(
        default_factory=list, description="Earlier messages of the conversation"
    )
    model: Optional[str] = Field(None, description="Model override")
    max_iterations: Optional[int] = Field(
        None, ge=1, description="Maximum tool-calling turns before giving up"
    )


class ToolStep(BaseModel):
    """Schema representing one tool invocation step."""

    id: str = Field(..., description="Tool call id")
    name: str = Field(..., description="Tool name")
    parameters: dict[str, Any] = Field(..., description="Parameters passed to the tool")
    description: str = Field(..., description="Human-readable summary of the call")
    success: bool = Field(..., description="Whether the tool succeeded")
    summary: str = Field(..., description="Human-readable summary of the result")
    error_kind: Optional[str] = Field(None, description="Failure category")

    @classmethod
    def from_call(cls, tool_call: ToolCall, result: ToolResult) -> "ToolStep":
        return cls(
            id=tool_call.id,
            name=tool_call.name,
            parameters=tool_call.parameters,
            description=describe_tool_call(tool_call),
            success=result.success,
            summary=format_tool_result_for_display(result),
            error_kind=result.error_kind.value if result.error_kind else None,
        )


class EditPayload(BaseModel):
    """Schema for a proposed or applied edit."""

    path: str
    original_content: str
    new_content: str
    diff: str
    status: str

    @classmethod
    def from_entity(cls, edit: EditResult) -> "EditPayload":
        return cls(
            path=edit.path,
            original_content=edit.original_content,
            new_content=edit.new_content,
            diff=edit.diff,
            status=edit.status.value,
        )


class AgentRunResponse(BaseModel):
    """Schema for the outcome of an agent request."""

    text: str = Field(..., description="Final assistant message")
    stop_reason: Literal["completed", "budget_exhausted", "cancelled", "error"]
    iterations: int = Field(..., description="Model turns used")
    error: Optional[str] = Field(None, description="Error message when stop_reason is error")
    steps: List[ToolStep] = Field(
        default_factory=list, description="Tool invocation steps and results"
    )
    edits: List[EditPayload] = Field(
        default_factory=list, description="Edits awaiting approval"
    )


class ApplyEditRequest(BaseModel):
    """Schema for applying a reviewed edit."""

    path: str = Field(..., description="Root-relative path of the edited file")
    new_content: str = Field(..., description="Full content to write")
    original_content: str = Field(..., description="Content the edit was computed from")
    diff: str = Field("", description="Diff shown to the reviewer")


class ApplyEditResponse(BaseModel):
    """Schema for the result of an apply request."""

    path: str
    status: str


class FileListResponse(BaseModel):
    """Schema for file list response."""

    directory: str = Field(..., description="Listed directory")
    files: List[FileInfo] = Field(..., description="List of files")
    total_count: int = Field(..., description="Number of entries returned")


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str = Field(..., description="Error message")
