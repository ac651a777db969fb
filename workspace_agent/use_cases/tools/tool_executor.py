"""
Sequential, order-preserving execution of a batch of tool calls.
"""

import logging
from typing import Callable, Optional

from workspace_agent.entities.tool import ToolCall, ToolResult
from workspace_agent.exceptions import ToolErrorKind, UnknownToolError
from workspace_agent.ports.llm.tools_port import ToolsHandlerPort

OnToolStart = Callable[[ToolCall], None]
OnToolComplete = Callable[[ToolCall, ToolResult], None]


class ToolExecutor:
    """Runs tool calls one after another through a tools handler.

    No exception escapes ``execute``: unknown tools and handler failures are
    turned into failed results so sibling calls in the batch still run.
    """

    def __init__(
        self, tools_handler: ToolsHandlerPort, logger: Optional[logging.Logger] = None
    ):
        self._tools_handler = tools_handler
        self._logger = logger or logging.getLogger(__name__)

    def execute(self, tool_call: ToolCall) -> ToolResult:
        try:
            result = self._tools_handler.dispatch(tool_call)
        except UnknownToolError:
            self._logger.warning(f"Unknown tool requested: {tool_call.name}")
            result = ToolResult.failure(
                tool_call.name, f"unknown tool: {tool_call.name}", ToolErrorKind.UNKNOWN_TOOL
            )
        except Exception as e:
            self._logger.error(f"Tool {tool_call.name} raised: {e}")
            result = ToolResult.failure(
                tool_call.name,
                f"{tool_call.name} failed: {e}",
                ToolErrorKind.EXECUTION_FAILED,
            )
        result.tool_call_id = tool_call.id
        return result

    def execute_all(
        self,
        tool_calls: list[ToolCall],
        on_start: Optional[OnToolStart] = None,
        on_complete: Optional[OnToolComplete] = None,
    ) -> list[ToolResult]:
        """
        Execute calls in order, one result per call.

        Args:
            tool_calls: Calls in document order
            on_start: Called before each call runs
            on_complete: Called with each call and its result

        Returns:
            Results in the same order as ``tool_calls``
        """
        results: list[ToolResult] = []
        for tool_call in tool_calls:
            if on_start:
                on_start(tool_call)
            result = self.execute(tool_call)
            if on_complete:
                on_complete(tool_call, result)
            results.append(result)
        succeeded = sum(1 for r in results if r.success)
        self._logger.info(f"Executed {len(results)} tool calls, {succeeded} succeeded")
        return results
