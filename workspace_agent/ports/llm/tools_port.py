"""
Port and types for tools the model can invoke, independent of the provider.
"""

from abc import ABC, abstractmethod
from typing import TypedDict

from workspace_agent.entities.tool import ToolCall, ToolResult


class ToolSpec(TypedDict):
    """Specification for a tool that can be called by an LLM."""

    name: str
    description: str
    parameters: dict[str, object]  # JSON Schema


class ToolsHandlerPort(ABC):
    """
    Port interface for handling LLM tools.

    This port exposes available tools and dispatches tool invocations to appropriate use cases.
    """

    @abstractmethod
    def available_tools(self) -> list[ToolSpec]:
        """
        Get a list of available tools.

        Returns:
            List of tool specifications
        """
        pass

    @abstractmethod
    def dispatch(self, tool_call: ToolCall) -> ToolResult:
        """
        Dispatch a tool invocation to the appropriate use case.

        Args:
            tool_call: Parsed invocation

        Returns:
            Result of the tool invocation

        Raises:
            UnknownToolError: If the tool name is unknown
        """
        pass
