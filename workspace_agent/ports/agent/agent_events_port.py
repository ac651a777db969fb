"""
Observer port for agent-loop progress.
"""

from workspace_agent.entities.tool import ToolCall, ToolResult


class AgentEventsPort:
    """Receives agent-loop notifications. Every callback defaults to a no-op.

    Callbacks are purely observational: nothing they return feeds back into
    the loop.
    """

    def on_token(self, token: str) -> None:
        pass

    def on_thinking(self, content: str) -> None:
        pass

    def on_task_start(self, task_id: str, title: str, description: str) -> None:
        pass

    def on_task_complete(self, task_id: str) -> None:
        pass

    def on_tool_call(self, tool_call: ToolCall) -> None:
        pass

    def on_tool_result(self, tool_call: ToolCall, result: ToolResult) -> None:
        pass

    def on_complete(self, final_response: str) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass
