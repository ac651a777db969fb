"""
The agent loop: stream a reply, run any tool calls it contains, feed the
results back, and repeat until the model answers without tools.
"""

import logging
import re
import threading
import uuid
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from workspace_agent.config.settings import DEFAULT_MAX_ITERATIONS
from workspace_agent.entities.tool import (
    ConversationMessage,
    EditResult,
    ParsedResponse,
    ToolResult,
)
from workspace_agent.exceptions import LLMError, TransportError
from workspace_agent.ports.agent.agent_events_port import AgentEventsPort
from workspace_agent.ports.llm.llm_port import CompletionStreamPort
from workspace_agent.ports.llm.tools_port import ToolsHandlerPort
from workspace_agent.use_cases.agent.prompts import build_system_instructions
from workspace_agent.use_cases.agent.tool_call_parser import ToolCallParser
from workspace_agent.use_cases.agent.tool_result_formatter import (
    format_tool_results_message,
)
from workspace_agent.use_cases.tools.tool_executor import ToolExecutor

BUDGET_EXHAUSTED_NOTICE = (
    "Stopped after reaching the maximum number of tool iterations. "
    "Ask me to continue if the task is not finished."
)
TASK_TITLE_MAX_CHARS = 50


class AgentState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    PARSING_OUTPUT = "parsing_output"
    EXECUTING_TOOLS = "executing_tools"
    FINALIZING = "finalizing"


class StopReason(str, Enum):
    COMPLETED = "completed"
    BUDGET_EXHAUSTED = "budget_exhausted"
    CANCELLED = "cancelled"
    ERROR = "error"


class CancellationToken:
    """Cooperative cancellation, checked between turns."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class AgentRunResult:
    final_response: str
    stop_reason: StopReason
    iterations: int
    conversation: list[ConversationMessage]
    tool_results: list[ToolResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def edits(self) -> list[EditResult]:
        """Edits proposed during the run, in execution order."""
        return [r.result for r in self.tool_results if isinstance(r.result, EditResult)]


def derive_task_title(description: str) -> str:
    lines = description.strip().splitlines()
    first_line = re.sub(r"\s+", " ", lines[0]).strip() if lines else ""
    if len(first_line) > TASK_TITLE_MAX_CHARS:
        return first_line[:TASK_TITLE_MAX_CHARS] + "..."
    return first_line


class AgentLoopUseCase:
    """Runs one user request through as many model turns as it needs.

    States move ``AWAITING_MODEL -> PARSING_OUTPUT`` and then either
    ``EXECUTING_TOOLS -> AWAITING_MODEL`` or ``FINALIZING``. A turn without
    tool calls is the only normal exit; the iteration budget bounds the
    number of tool-calling turns.
    """

    def __init__(
        self,
        completion_client: CompletionStreamPort,
        tool_executor: ToolExecutor,
        parser: ToolCallParser,
        tools_handler: ToolsHandlerPort,
        instructions: str,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        model: Optional[str] = None,
        enable_tools: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the agent loop.

        Args:
            completion_client: Streaming model client, owned by the caller
            tool_executor: Executor for parsed tool calls
            parser: Parser for tool call blocks
            tools_handler: Source of the tool manual in the system message
            instructions: Base system instructions
            max_iterations: Iteration budget per request
            model: Model override passed to the client
            enable_tools: When False every reply is final (plain chat)
            logger: Logger instance to use for logging
        """
        self._completion_client = completion_client
        self._tool_executor = tool_executor
        self._parser = parser
        self._tools_handler = tools_handler
        self._instructions = instructions
        self._max_iterations = max_iterations
        self._model = model
        self._enable_tools = enable_tools
        self._logger = logger or logging.getLogger(__name__)
        self.state = AgentState.FINALIZING

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    def system_instructions(self) -> str:
        tools = self._tools_handler.available_tools() if self._enable_tools else []
        return build_system_instructions(self._instructions, tools)

    async def _stream_turn(
        self,
        conversation: list[ConversationMessage],
        system_instructions: str,
        events: AgentEventsPort,
    ) -> str:
        """Drain one completion stream and return the full response text."""
        tokens: list[str] = []
        final_message = ""
        stream = self._completion_client.stream_completion(
            conversation, model=self._model, system_instructions=system_instructions
        )
        try:
            async with aclosing(stream):
                async for event in stream:
                    if event.type == "token":
                        tokens.append(event.content)
                        events.on_token(event.content)
                    elif event.type == "thinking":
                        events.on_thinking(event.content)
                    elif event.type == "final_response":
                        final_message = event.message
                    elif event.type == "error":
                        raise TransportError(event.error or "Completion stream failed")
        except LLMError:
            raise
        except Exception as e:
            raise TransportError(f"Completion stream failed: {e}") from e
        return "".join(tokens) if tokens else final_message

    async def run(
        self,
        user_message: str,
        events: Optional[AgentEventsPort] = None,
        cancellation: Optional[CancellationToken] = None,
        history: Optional[list[ConversationMessage]] = None,
    ) -> AgentRunResult:
        """
        Process one user request.

        Args:
            user_message: The user's request
            events: Display sink for progress notifications
            cancellation: Token checked before each model turn
            history: Earlier messages of the same conversation

        Returns:
            AgentRunResult describing how the run ended. Transport failures
            end the run with ``StopReason.ERROR`` instead of raising.
        """
        events = events or AgentEventsPort()
        conversation = list(history or [])
        conversation.append(ConversationMessage(role="user", content=user_message))
        system_instructions = self.system_instructions()

        response_parts: list[str] = []
        tool_results: list[ToolResult] = []
        task_id: Optional[str] = None
        iterations = 0

        def finish(reason: StopReason, error: Optional[str] = None) -> AgentRunResult:
            self.state = AgentState.FINALIZING
            return AgentRunResult(
                final_response="\n\n".join(response_parts),
                stop_reason=reason,
                iterations=iterations,
                conversation=conversation,
                tool_results=tool_results,
                error=error,
            )

        try:
            while iterations < self._max_iterations:
                if cancellation and cancellation.cancelled:
                    self._logger.info("Agent run cancelled")
                    events.on_complete("\n\n".join(response_parts))
                    return finish(StopReason.CANCELLED)

                iterations += 1
                self.state = AgentState.AWAITING_MODEL
                self._logger.debug(f"Agent turn {iterations}/{self._max_iterations}")
                response = await self._stream_turn(conversation, system_instructions, events)

                self.state = AgentState.PARSING_OUTPUT
                if self._enable_tools:
                    parsed = self._parser.parse(response)
                else:
                    parsed = ParsedResponse(text_content=response.strip())

                if not parsed.has_tool_calls:
                    if parsed.text_content:
                        response_parts.append(parsed.text_content)
                    conversation.append(ConversationMessage(role="assistant", content=response))
                    final_response = "\n\n".join(response_parts)
                    events.on_complete(final_response)
                    return finish(StopReason.COMPLETED)

                self.state = AgentState.EXECUTING_TOOLS
                if task_id is None:
                    task_id = f"task_{uuid.uuid4().hex[:12]}"
                    description = parsed.text_content or user_message
                    events.on_task_start(task_id, derive_task_title(description), description)
                if parsed.text_content:
                    response_parts.append(parsed.text_content)

                results = self._tool_executor.execute_all(
                    parsed.tool_calls,
                    on_start=events.on_tool_call,
                    on_complete=events.on_tool_result,
                )
                tool_results.extend(results)
                conversation.append(ConversationMessage(role="assistant", content=response))
                conversation.append(
                    ConversationMessage(role="user", content=format_tool_results_message(results))
                )

            self._logger.warning(
                f"Iteration budget of {self._max_iterations} exhausted without a final answer"
            )
            if not response_parts:
                response_parts.append(BUDGET_EXHAUSTED_NOTICE)
            events.on_complete("\n\n".join(response_parts))
            return finish(StopReason.BUDGET_EXHAUSTED)
        except LLMError as e:
            self._logger.error(f"Agent run aborted: {e}")
            events.on_error(e)
            return finish(StopReason.ERROR, str(e))
        finally:
            if task_id is not None:
                events.on_task_complete(task_id)
