"""
FastAPI router definitions for the API endpoints.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse
from typing_extensions import override

from workspace_agent.api.dependencies import (
    get_agent_loop,
    get_apply_edit_uc,
    get_file_operations_uc,
)
from workspace_agent.api.schemas import (
    AgentRunRequest,
    AgentRunResponse,
    ApplyEditRequest,
    ApplyEditResponse,
    EditPayload,
    ErrorResponse,
    FileListResponse,
    ToolStep,
)
from workspace_agent.entities.tool import EditResult, FileListResult, ToolCall, ToolResult
from workspace_agent.exceptions import ConfigurationError, EditStateError
from workspace_agent.ports.agent.agent_events_port import AgentEventsPort
from workspace_agent.use_cases.agent.agent_loop import AgentRunResult, CancellationToken
from workspace_agent.use_cases.agent.tool_result_formatter import (
    describe_tool_call,
    format_tool_result_for_display,
)

router = APIRouter()


class _StepRecorder(AgentEventsPort):
    """Collects tool steps for the JSON response."""

    def __init__(self):
        self.steps: list[ToolStep] = []

    @override
    def on_tool_result(self, tool_call: ToolCall, result: ToolResult) -> None:
        self.steps.append(ToolStep.from_call(tool_call, result))


def _sse(event: str, data: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


class _SSEEvents(_StepRecorder):
    """Forwards agent events to an asyncio queue as server-sent events."""

    def __init__(self, queue: "asyncio.Queue[Optional[str]]"):
        super().__init__()
        self._queue = queue

    @override
    def on_token(self, token: str) -> None:
        self._queue.put_nowait(_sse("token", {"content": token}))

    @override
    def on_thinking(self, content: str) -> None:
        self._queue.put_nowait(_sse("thinking", {"content": content}))

    @override
    def on_task_start(self, task_id: str, title: str, description: str) -> None:
        self._queue.put_nowait(
            _sse("task_start", {"task_id": task_id, "title": title, "description": description})
        )

    @override
    def on_task_complete(self, task_id: str) -> None:
        self._queue.put_nowait(_sse("task_complete", {"task_id": task_id}))

    @override
    def on_tool_call(self, tool_call: ToolCall) -> None:
        payload = tool_call.to_dict()
        payload["description"] = describe_tool_call(tool_call)
        self._queue.put_nowait(_sse("tool_call", payload))

    @override
    def on_tool_result(self, tool_call: ToolCall, result: ToolResult) -> None:
        super().on_tool_result(tool_call, result)
        payload = result.to_dict()
        payload["summary"] = format_tool_result_for_display(result)
        self._queue.put_nowait(_sse("tool_result", payload))

    @override
    def on_complete(self, final_response: str) -> None:
        self._queue.put_nowait(_sse("complete", {"text": final_response}))

    @override
    def on_error(self, error: Exception) -> None:
        self._queue.put_nowait(_sse("error", {"error": str(error)}))


def _to_response(result: AgentRunResult, steps: list[ToolStep]) -> AgentRunResponse:
    return AgentRunResponse(
        text=result.final_response,
        stop_reason=result.stop_reason.value,
        iterations=result.iterations,
        error=result.error,
        steps=steps,
        edits=[EditPayload.from_entity(e) for e in result.edits],
    )


@router.post(
    "/agent/run",
    response_model=AgentRunResponse,
    responses={500: {"model": ErrorResponse}},
)
async def run_agent(body: AgentRunRequest):
    """
    Run one agent request and return the final text with a trace of tool calls.

    Proposed edits are returned unapplied; send them to ``/edits/apply`` after review.
    """
    try:
        agent_loop = get_agent_loop(model=body.model, max_iterations=body.max_iterations)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    recorder = _StepRecorder()
    result = await agent_loop.run(body.message, events=recorder, history=body.history)
    return _to_response(result, recorder.steps)


@router.get("/agent/run/stream")
async def run_agent_stream(
    message: str = Query(..., min_length=1),
    model: Optional[str] = Query(None),
    max_iterations: Optional[int] = Query(None, ge=1),
):
    """Server-Sent Events (SSE) stream of an agent request.

    Emits events:
    - token / thinking: {content}
    - task_start: {task_id, title, description}; task_complete: {task_id}
    - tool_call: {id, name, parameters, description}
    - tool_result: {toolCallId, toolName, success, result|error, summary}
    - complete: {text}; error: {error}
    - final: the same body as ``POST /agent/run``
    - done: {}
    """
    try:
        agent_loop = get_agent_loop(model=model, max_iterations=max_iterations)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
    events = _SSEEvents(queue)
    cancellation = CancellationToken()

    async def worker() -> None:
        try:
            result = await agent_loop.run(message, events=events, cancellation=cancellation)
            final = _to_response(result, events.steps)
            queue.put_nowait(_sse("final", final.model_dump(mode="json")))
        except Exception as e:
            queue.put_nowait(_sse("error", {"error": str(e)}))
        finally:
            queue.put_nowait(_sse("done", {}))
            queue.put_nowait(None)

    async def gen() -> AsyncIterator[str]:
        task = asyncio.create_task(worker())
        try:
            while True:
                item = await queue.get()
                if item is None:
                    break
                yield item
        finally:
            # Client went away: stop at the next turn boundary
            cancellation.cancel()
            await task

    return StreamingResponse(gen(), media_type="text/event-stream")


@router.post(
    "/edits/apply",
    response_model=ApplyEditResponse,
    responses={409: {"model": ErrorResponse}},
)
def apply_edit(body: ApplyEditRequest):
    """
    Apply a reviewed edit by writing its new content.

    Raises:
        HTTPException: If the path is rejected or the write fails
    """
    edit = EditResult(
        path=body.path,
        original_content=body.original_content,
        new_content=body.new_content,
        diff=body.diff,
    )
    try:
        applied = get_apply_edit_uc().approve(edit)
    except EditStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not applied:
        raise HTTPException(status_code=409, detail=f"Could not apply edit to {body.path}")
    return ApplyEditResponse(path=edit.path, status=edit.status.value)


@router.get(
    "/files", response_model=FileListResponse, responses={400: {"model": ErrorResponse}}
)
def list_files(
    directory: str = Query(".", description="Directory relative to the project root"),
    pattern: str = Query("*", description="Glob pattern (e.g., '**/*.py')"),
):
    """
    List files in a directory of the project.

    Raises:
        HTTPException: If the directory is rejected or listing fails
    """
    result = get_file_operations_uc().list_files(directory, pattern)
    if not result.success or not isinstance(result.result, FileListResult):
        raise HTTPException(status_code=400, detail=result.error or "Listing failed")
    listing = result.result
    return FileListResponse(
        directory=listing.directory, files=listing.files, total_count=listing.total_count
    )
