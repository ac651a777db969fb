"""
Extraction of ``<tool_call>`` blocks from model output.

A call is embedded as::

    <tool_call>
    <name>read_file</name>
    <parameters>{"path": "src/index.ts"}</parameters>
    </tool_call>
"""

import json
import logging
import re
import uuid
from typing import Any, Optional

from workspace_agent.entities.tool import ParsedResponse, ToolCall, ToolName
from workspace_agent.exceptions import MalformedToolCallError

TOOL_CALL_PATTERN = re.compile(
    r"<tool_call>\s*<name>(\w+)</name>\s*<parameters>([\s\S]*?)</parameters>\s*</tool_call>"
)
_EMPTY_CODE_FENCE = re.compile(r"```[\w-]*\s*```")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def generate_tool_call_id() -> str:
    return f"tool_{uuid.uuid4().hex[:12]}"


def format_tool_call(name: str, parameters: dict[str, Any]) -> str:
    """Embed one call in the block syntax understood by :class:`ToolCallParser`.

    Angle brackets inside the JSON are written as ``\\u003c`` / ``\\u003e`` so
    parameter text can never close the block early.
    """
    blob = json.dumps(parameters, ensure_ascii=False)
    blob = blob.replace("<", "\\u003c").replace(">", "\\u003e")
    return f"<tool_call>\n<name>{name}</name>\n<parameters>{blob}</parameters>\n</tool_call>"


class ToolCallParser:
    """Parses model output into prose and tool calls."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def _decode_parameters(self, raw: str) -> dict[str, Any]:
        try:
            parameters = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedToolCallError(f"Tool call parameters are not valid JSON: {e}")
        if not isinstance(parameters, dict):
            raise MalformedToolCallError("Tool call parameters must be a JSON object")
        return parameters

    def parse(self, output: str) -> ParsedResponse:
        """
        Split a complete model response into text and tool calls.

        Unknown tool names and unparseable parameters are logged and dropped;
        the rest of the response is still returned.

        Args:
            output: Full model response (never a partial stream)

        Returns:
            ParsedResponse with calls in document order
        """
        tool_calls: list[ToolCall] = []
        for match in TOOL_CALL_PATTERN.finditer(output):
            name, raw_parameters = match.group(1), match.group(2).strip()
            if name not in ToolName.values():
                self._logger.warning(f"Dropping call to unknown tool: {name}")
                continue
            try:
                parameters = self._decode_parameters(raw_parameters)
            except MalformedToolCallError as e:
                self._logger.warning(f"Dropping {name} call: {e}")
                continue
            tool_calls.append(
                ToolCall(id=generate_tool_call_id(), name=name, parameters=parameters)
            )

        text = TOOL_CALL_PATTERN.sub("", output)
        text = _EMPTY_CODE_FENCE.sub("", text)
        text = _EXTRA_BLANK_LINES.sub("\n\n", text).strip()

        if tool_calls:
            self._logger.debug(f"Parsed {len(tool_calls)} tool calls")
        return ParsedResponse(text_content=text, tool_calls=tool_calls)
