"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile
from typing import AsyncGenerator, Optional, Union
from unittest.mock import MagicMock

import pytest

from workspace_agent.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from workspace_agent.config.settings import DEFAULT_BLOCKED_PATTERNS, Settings
from workspace_agent.container import DependencyContainer
from workspace_agent.entities.tool import ConversationMessage, ToolCall, ToolResult
from workspace_agent.ports.agent.agent_events_port import AgentEventsPort
from workspace_agent.ports.llm.llm_port import CompletionStreamPort, StreamEvent
from workspace_agent.use_cases.files.file_operations import FileOperationsUseCase
from workspace_agent.utils.workspace import PathValidator

WORKSPACE_FILES = {
    "package.json": '{"name": "demo"}',
    "tsconfig.json": '{"compilerOptions": {}}',
    "README.md": "# Demo\n\nA small project.",
    "f.txt": "foo\nbaz",
    "src/a.ts": "line one\nline two\n// TODO: first\nline four\nline five",
    "src/b.ts": "export const b = 1;\n// todo: second",
    "src/util/helpers.py": "def helper():\n    return 42\n",
    ".env": "OPENAI_API_KEY=secret",
    "certs/server.pem": "-----BEGIN CERTIFICATE-----",
    "node_modules/lib/index.ts": "// TODO: vendored",
}


@pytest.fixture
def temp_directory():
    """
    Create a temporary project tree for testing file operations.

    Returns:
        Path to the temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        for rel_path, content in WORKSPACE_FILES.items():
            full_path = os.path.join(temp_dir, *rel_path.split("/"))
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        yield os.path.realpath(temp_dir)


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def path_validator(temp_directory):
    return PathValidator(temp_directory, DEFAULT_BLOCKED_PATTERNS)


@pytest.fixture
def file_repository(temp_directory, mock_logger):
    return LocalFileSystemAdapter(temp_directory, mock_logger)


@pytest.fixture
def file_operations(file_repository, path_validator, mock_logger):
    return FileOperationsUseCase(file_repository, path_validator, 100_000, mock_logger)


@pytest.fixture
def settings(temp_directory):
    return Settings(
        workspace_root=temp_directory,
        blocked_file_patterns=list(DEFAULT_BLOCKED_PATTERNS),
        max_iterations=10,
        enable_file_operations=True,
        openai_api_key="test-key",
    )


@pytest.fixture
def dependency_container(settings, mock_logger):
    """
    Create a dependency container over the temporary project.

    Returns:
        DependencyContainer instance with mocked logger
    """
    return DependencyContainer(settings, logger=mock_logger)


class ScriptedCompletionClient(CompletionStreamPort):
    """Replays canned responses, one per turn; the last one repeats."""

    def __init__(self, responses: list[Union[str, Exception]], chunk_size: int = 7):
        self.responses = responses
        self.chunk_size = chunk_size
        self.requests: list[dict] = []
        self.closed = False

    async def stream_completion(
        self,
        conversation: list[ConversationMessage],
        model: Optional[str] = None,
        system_instructions: Optional[str] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        self.requests.append(
            {
                "conversation": list(conversation),
                "model": model,
                "system_instructions": system_instructions,
            }
        )
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, Exception):
            yield StreamEvent.failure(str(response))
            return
        for start in range(0, len(response), self.chunk_size):
            yield StreamEvent.token(response[start : start + self.chunk_size])
        yield StreamEvent.final(response)

    async def aclose(self) -> None:
        self.closed = True


class RecordingEvents(AgentEventsPort):
    """Display sink that records every notification in order."""

    def __init__(self):
        self.events: list[tuple] = []

    def names(self) -> list[str]:
        return [event[0] for event in self.events]

    def of(self, name: str) -> list[tuple]:
        return [event for event in self.events if event[0] == name]

    def on_token(self, token: str) -> None:
        self.events.append(("token", token))

    def on_thinking(self, content: str) -> None:
        self.events.append(("thinking", content))

    def on_task_start(self, task_id: str, title: str, description: str) -> None:
        self.events.append(("task_start", task_id, title, description))

    def on_task_complete(self, task_id: str) -> None:
        self.events.append(("task_complete", task_id))

    def on_tool_call(self, tool_call: ToolCall) -> None:
        self.events.append(("tool_call", tool_call))

    def on_tool_result(self, tool_call: ToolCall, result: ToolResult) -> None:
        self.events.append(("tool_result", tool_call, result))

    def on_complete(self, final_response: str) -> None:
        self.events.append(("complete", final_response))

    def on_error(self, error: Exception) -> None:
        self.events.append(("error", error))


@pytest.fixture
def scripted_client():
    """Factory for completion clients replaying the given responses."""
    return ScriptedCompletionClient


@pytest.fixture
def recording_events():
    return RecordingEvents()
