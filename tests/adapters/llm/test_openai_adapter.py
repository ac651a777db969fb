"""
Tests for the OpenAIStreamAdapter.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from workspace_agent.adapters.llm.openai_adapter import OpenAIStreamAdapter
from workspace_agent.config.settings import Settings
from workspace_agent.entities.tool import ConversationMessage
from workspace_agent.exceptions import ConfigurationError


def _chunk(content=None, reasoning=None):
    delta = SimpleNamespace(content=content, reasoning_content=reasoning)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta)])


class _FakeStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)


def _client(create):
    client = MagicMock()
    client.chat.completions.create = create
    client.close = AsyncMock()
    return client


async def _collect(adapter, **kwargs):
    conversation = [ConversationMessage(role="user", content="hi")]
    return [event async for event in adapter.stream_completion(conversation, **kwargs)]


@pytest.fixture
def adapter_settings():
    return Settings(openai_api_key="test-key", openai_model="gpt-test")


class TestOpenAIStreamAdapter:
    """Test cases for the OpenAI streaming adapter."""

    @pytest.mark.asyncio
    async def test_streams_tokens_then_final(self, adapter_settings, mock_logger):
        """Test that content deltas become tokens followed by the full text."""
        create = AsyncMock(
            return_value=_FakeStream([_chunk("Hel"), _chunk("lo"), SimpleNamespace(choices=[])])
        )
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(create), logger=mock_logger)

        events = await _collect(adapter)

        assert [(e.type, e.content) for e in events[:2]] == [("token", "Hel"), ("token", "lo")]
        assert events[-1].type == "final_response"
        assert events[-1].message == "Hello"

    @pytest.mark.asyncio
    async def test_reasoning_becomes_thinking(self, adapter_settings, mock_logger):
        """Test that reasoning deltas are reported as thinking events."""
        create = AsyncMock(return_value=_FakeStream([_chunk(reasoning="pondering"), _chunk("ok")]))
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(create), logger=mock_logger)

        events = await _collect(adapter)

        assert [e.type for e in events] == ["thinking", "token", "final_response"]
        assert events[0].content == "pondering"
        assert events[-1].message == "ok"

    @pytest.mark.asyncio
    async def test_messages_include_system_instructions(self, adapter_settings, mock_logger):
        """Test the request sent to the API."""
        create = AsyncMock(return_value=_FakeStream([]))
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(create), logger=mock_logger)

        await _collect(adapter, system_instructions="be brief", model="other-model")

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "other-model"
        assert kwargs["stream"] is True
        assert kwargs["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    @pytest.mark.asyncio
    async def test_default_model(self, adapter_settings, mock_logger):
        """Test that the configured model is used without an override."""
        create = AsyncMock(return_value=_FakeStream([]))
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(create), logger=mock_logger)

        await _collect(adapter)

        assert create.call_args.kwargs["model"] == "gpt-test"
        assert "system" not in [m["role"] for m in create.call_args.kwargs["messages"]]

    @pytest.mark.asyncio
    async def test_transport_failure_is_an_error_event(self, adapter_settings, mock_logger):
        """Test that API failures end the stream with one error event."""
        create = AsyncMock(side_effect=ConnectionError("network down"))
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(create), logger=mock_logger)

        events = await _collect(adapter)

        assert len(events) == 1
        assert events[0].type == "error"
        assert "network down" in events[0].error
        mock_logger.error.assert_called()

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self, adapter_settings, mock_logger):
        """Test releasing the HTTP client."""
        client = _client(AsyncMock())
        adapter = OpenAIStreamAdapter(adapter_settings, client=client, logger=mock_logger)

        await adapter.aclose()

        client.close.assert_awaited_once()

    def test_missing_api_key(self, mock_logger):
        """Test that building a real client requires an API key."""
        settings = Settings(openai_api_key=None)

        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            OpenAIStreamAdapter(settings, logger=mock_logger)

    def test_model_info(self, adapter_settings, mock_logger):
        """Test the model description."""
        adapter = OpenAIStreamAdapter(adapter_settings, client=_client(AsyncMock()), logger=mock_logger)

        info = adapter.get_model_info()

        assert info["provider"] == "OpenAI"
        assert info["model"] == "gpt-test"
