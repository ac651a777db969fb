"""
LLM port interface defining the contract for streaming completion sources.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator, Literal, Optional

from pydantic import BaseModel

from workspace_agent.entities.tool import ConversationMessage

StreamEventType = Literal["token", "thinking", "final_response", "error"]


class StreamEvent(BaseModel):
    """One event from a completion stream."""

    type: StreamEventType
    content: str = ""
    message: str = ""
    error: str = ""

    @classmethod
    def token(cls, content: str) -> "StreamEvent":
        return cls(type="token", content=content)

    @classmethod
    def thinking(cls, content: str) -> "StreamEvent":
        return cls(type="thinking", content=content)

    @classmethod
    def final(cls, message: str) -> "StreamEvent":
        return cls(type="final_response", message=message)

    @classmethod
    def failure(cls, error: str) -> "StreamEvent":
        return cls(type="error", error=error)


class CompletionStreamPort(ABC):
    """Port interface for a hosted model that streams its reply."""

    @abstractmethod
    def stream_completion(
        self,
        conversation: list[ConversationMessage],
        model: Optional[str] = None,
        system_instructions: Optional[str] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream a completion for the conversation.

        Args:
            conversation: Messages so far, oldest first
            model: Model name override (defaults to the configured model)
            system_instructions: System message to prepend

        Returns:
            Async generator of token / thinking / final_response / error events.
            Transport failures are reported as an ``error`` event.
        """
        pass

    def get_model_info(self) -> dict[str, Any]:
        """
        Get information about the current model configuration.

        Returns:
            Dictionary with model configuration details
        """
        return {"provider": "Unknown", "model": "Unknown"}

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None
