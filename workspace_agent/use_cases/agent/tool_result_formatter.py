"""
Text renderings of tool calls and results, for the model and for people.
"""

from workspace_agent.entities.tool import (
    EditResult,
    FileContent,
    FileListResult,
    SearchResult,
    ToolCall,
    ToolName,
    ToolResult,
)

CONTINUE_INSTRUCTION = (
    "Continue with the task using these results. "
    "If the task is complete, reply to the user without any tool calls."
)


def _format_output(result: ToolResult) -> str:
    payload = result.result
    if isinstance(payload, FileContent):
        header = f"File: {payload.path}\nLines: {payload.line_count}\n"
        if payload.truncated:
            header += "(partial content)\n"
        return f"{header}\n{payload.content}"
    if isinstance(payload, EditResult):
        return (
            f"File: {payload.path}\nProposed changes (pending user approval):\n{payload.diff}"
        )
    if isinstance(payload, FileListResult):
        listing = "\n".join(
            f"  {'[dir]' if f.is_directory else '[file]'} {f.path}" for f in payload.files
        )
        return f"Directory: {payload.directory}\nTotal: {payload.total_count} entries\n\n{listing}"
    if isinstance(payload, SearchResult):
        if not payload.matches:
            return f'No matches for "{payload.query}"'
        lines = "\n".join(f"  {m.path}:{m.line}: {m.content}" for m in payload.matches)
        return f'Matches for "{payload.query}": {payload.total_matches}\n\n{lines}'
    return "" if payload is None else str(payload)


def format_tool_result_for_model(result: ToolResult) -> str:
    """Render one result as a ``<tool_result>`` block."""
    lines = [
        "<tool_result>",
        f"<tool_call_id>{result.tool_call_id}</tool_call_id>",
        f"<tool_name>{result.tool_name}</tool_name>",
        f"<success>{'true' if result.success else 'false'}</success>",
    ]
    if result.success:
        lines.extend(["<output>", _format_output(result), "</output>"])
    else:
        lines.append(f"<error>{result.error}</error>")
    lines.append("</tool_result>")
    return "\n".join(lines)


def format_tool_results_message(results: list[ToolResult]) -> str:
    """Build the synthetic user message that feeds results back to the model."""
    blocks = "\n\n".join(format_tool_result_for_model(r) for r in results)
    return f"Tool results:\n\n{blocks}\n\n{CONTINUE_INSTRUCTION}"


def format_tool_result_for_display(result: ToolResult) -> str:
    """One-line summary of a result."""
    if not result.success:
        return f"Error: {result.error}"
    payload = result.result
    if isinstance(payload, FileContent):
        return f"{payload.path} ({payload.line_count} lines)"
    if isinstance(payload, EditResult):
        return f"Edit ready for {payload.path}"
    if isinstance(payload, FileListResult):
        return f"{payload.directory}: {payload.total_count} entries"
    if isinstance(payload, SearchResult):
        return f'"{payload.query}": {payload.total_matches} matches'
    if isinstance(payload, str):
        return payload
    return "Done"


def describe_tool_call(tool_call: ToolCall) -> str:
    params = tool_call.parameters
    name = tool_call.tool_name
    if name is ToolName.READ_FILE:
        return f"Reading file: {params.get('path', '')}"
    if name is ToolName.WRITE_FILE:
        return f"Writing file: {params.get('path', '')}"
    if name is ToolName.EDIT_FILE:
        return f"Editing file: {params.get('path', '')}"
    if name is ToolName.LIST_FILES:
        return f"Listing files: {params.get('directory') or '.'}"
    if name is ToolName.SEARCH_FILES:
        return f'Searching: "{params.get("query", "")}"'
    return f"Tool call: {tool_call.name}"
