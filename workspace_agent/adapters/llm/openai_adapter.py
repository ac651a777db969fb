"""
OpenAI adapter implementation for streaming completions.
"""

import logging
from typing import Any, AsyncGenerator, Optional, cast

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam
from typing_extensions import override

from workspace_agent.config.settings import Settings
from workspace_agent.entities.tool import ConversationMessage
from workspace_agent.ports.llm.llm_port import CompletionStreamPort, StreamEvent


class OpenAIStreamAdapter(CompletionStreamPort):
    """OpenAI implementation of the completion stream port."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[AsyncOpenAI] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the OpenAI adapter.

        Args:
            settings: Application settings (model, API key and base URL)
            client: Preconfigured client; built from settings when omitted
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self.model: str = settings.openai_model
        self.api_base: Optional[str] = settings.openai_api_base
        self._logger: logging.Logger = logger or logging.getLogger(__name__)

        # The key is only required once a real client has to be built
        self.client: AsyncOpenAI = client or AsyncOpenAI(
            api_key=settings.require_openai_api_key(), base_url=self.api_base
        )

    def _prepare_messages(
        self,
        conversation: list[ConversationMessage],
        system_instructions: Optional[str],
    ) -> list[ChatCompletionMessageParam]:
        """
        Prepare the messages for the OpenAI API.

        Args:
            conversation: Conversation messages, oldest first
            system_instructions: Optional system message placed first

        Returns:
            List of message dictionaries
        """
        messages: list[dict[str, str]] = []
        if system_instructions:
            messages.append({"role": "system", "content": system_instructions})
        for message in conversation:
            messages.append({"role": message.role, "content": message.content})
        return cast(list[ChatCompletionMessageParam], messages)

    @staticmethod
    def _reasoning_of(delta: Any) -> str:
        # OpenAI-compatible servers expose reasoning under different names
        for attr in ("reasoning_content", "reasoning"):
            value = getattr(delta, attr, None)
            if isinstance(value, str) and value:
                return value
        return ""

    @override
    async def stream_completion(
        self,
        conversation: list[ConversationMessage],
        model: Optional[str] = None,
        system_instructions: Optional[str] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream a completion from the OpenAI model.

        Yields token events as content arrives, thinking events for reasoning
        deltas, then one final_response event with the full text. Any failure
        is reported as a single error event and ends the stream.
        """
        model_name = model or self.model
        messages = self._prepare_messages(conversation, system_instructions)
        collected: list[str] = []
        self._logger.debug(
            f"Streaming completion from {model_name} with {len(messages)} messages"
        )
        try:
            stream = await self.client.chat.completions.create(
                model=model_name,
                messages=messages,
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                reasoning = self._reasoning_of(delta)
                if reasoning:
                    yield StreamEvent.thinking(reasoning)
                content = delta.content or ""
                if content:
                    collected.append(content)
                    yield StreamEvent.token(content)
        except Exception as e:
            self._logger.error(f"Completion stream failed: {str(e)}")
            yield StreamEvent.failure(f"Failed to generate response: {str(e)}")
            return

        yield StreamEvent.final("".join(collected))

    @override
    def get_model_info(self) -> dict[str, Any]:
        return {
            "provider": "OpenAI",
            "model": self.model,
            "api_base": self.api_base or "https://api.openai.com/v1",
        }

    @override
    async def aclose(self) -> None:
        await self.client.close()
