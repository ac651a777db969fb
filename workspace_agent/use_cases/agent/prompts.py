"""
System instructions sent with every completion request.
"""

import json

from workspace_agent.ports.llm.tools_port import ToolSpec
from workspace_agent.use_cases.agent.tool_call_parser import format_tool_call

TOOL_USAGE_RULES = """\
To work with files, embed tool calls in your reply using exactly this format:

{example}

Rules:
- Paths are relative to the project root.
- Read a file before editing it, and copy searchContent exactly from what you read.
- You may issue several tool calls in one reply; they run in order.
- Results come back in a message starting with "Tool results:".
- When the task is done, answer without any tool calls."""


def _describe_tool(tool: ToolSpec) -> str:
    schema = json.dumps(tool["parameters"], ensure_ascii=False)
    return f"### {tool['name']}\n{tool['description']}\nParameters (JSON Schema): {schema}"


def build_system_instructions(base: str, tools: list[ToolSpec]) -> str:
    """
    Combine the configured instructions with a manual for the given tools.

    Args:
        base: Configured assistant instructions
        tools: Tools the model may call; empty for plain chat

    Returns:
        The system message text
    """
    if not tools:
        return base
    example = format_tool_call("read_file", {"path": "src/index.ts"})
    manual = "\n\n".join(_describe_tool(t) for t in tools)
    return f"{base}\n\n## Tools\n\n{manual}\n\n{TOOL_USAGE_RULES.format(example=example)}"
