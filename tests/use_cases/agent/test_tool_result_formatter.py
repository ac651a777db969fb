"""
Tests for tool result rendering and the system instructions.
"""

from workspace_agent.entities.tool import (
    EditResult,
    FileContent,
    FileInfo,
    FileListResult,
    SearchMatch,
    SearchResult,
    ToolCall,
    ToolName,
    ToolResult,
)
from workspace_agent.exceptions import ToolErrorKind
from workspace_agent.use_cases.agent.prompts import build_system_instructions
from workspace_agent.use_cases.agent.tool_result_formatter import (
    CONTINUE_INSTRUCTION,
    describe_tool_call,
    format_tool_result_for_display,
    format_tool_result_for_model,
    format_tool_results_message,
)
from workspace_agent.use_cases.tools.files_tools import FilesToolsHandler


def _with_id(result: ToolResult, call_id: str) -> ToolResult:
    result.tool_call_id = call_id
    return result


def _read_result() -> ToolResult:
    content = FileContent(path="src/a.ts", content="   1│ line one\n   2│ line two", line_count=2, truncated=True)
    return _with_id(ToolResult.ok(ToolName.READ_FILE, content), "tool_1")


class TestFormatForModel:
    """Test cases for the text fed back to the model."""

    def test_file_content_block(self):
        """Test rendering a successful read."""
        assert format_tool_result_for_model(_read_result()) == (
            "<tool_result>\n"
            "<tool_call_id>tool_1</tool_call_id>\n"
            "<tool_name>read_file</tool_name>\n"
            "<success>true</success>\n"
            "<output>\n"
            "File: src/a.ts\n"
            "Lines: 2\n"
            "(partial content)\n"
            "\n"
            "   1│ line one\n"
            "   2│ line two\n"
            "</output>\n"
            "</tool_result>"
        )

    def test_failure_block(self):
        """Test rendering a failed call."""
        result = _with_id(
            ToolResult.failure("read_file", "File not found: x", ToolErrorKind.NOT_FOUND), "tool_2"
        )

        text = format_tool_result_for_model(result)

        assert "<success>false</success>" in text
        assert "<error>File not found: x</error>" in text
        assert "<output>" not in text

    def test_edit_block_mentions_pending_approval(self):
        """Test rendering a proposed edit."""
        edit = EditResult(path="f.txt", original_content="a", new_content="b", diff="-a\n+b")
        text = format_tool_result_for_model(ToolResult.ok(ToolName.EDIT_FILE, edit))

        assert "pending user approval" in text
        assert "-a\n+b" in text

    def test_listing_and_search(self):
        """Test rendering listings and search matches."""
        listing = FileListResult(
            directory=".",
            files=[
                FileInfo(name="src", path="src", is_directory=True),
                FileInfo(name="a.json", path="a.json", is_directory=False, size=2),
            ],
            total_count=2,
        )
        search = SearchResult(
            query="TODO",
            matches=[SearchMatch(path="src/a.ts", line=3, content="// TODO: first")],
            total_matches=1,
        )

        listing_text = format_tool_result_for_model(ToolResult.ok(ToolName.LIST_FILES, listing))
        search_text = format_tool_result_for_model(ToolResult.ok(ToolName.SEARCH_FILES, search))

        assert "  [dir] src\n  [file] a.json" in listing_text
        assert "  src/a.ts:3: // TODO: first" in search_text

    def test_empty_search(self):
        """Test rendering a search with no hits."""
        search = SearchResult(query="zzz", matches=[], total_matches=0)
        assert 'No matches for "zzz"' in format_tool_result_for_model(
            ToolResult.ok(ToolName.SEARCH_FILES, search)
        )

    def test_results_message_is_deterministic(self):
        """Test the synthetic user message wrapping several results."""
        results = [
            _read_result(),
            _with_id(ToolResult.failure("edit_file", "nope", ToolErrorKind.SEARCH_CONTENT_ABSENT), "tool_2"),
        ]

        message = format_tool_results_message(results)

        assert message == format_tool_results_message(results)
        assert message.startswith("Tool results:\n\n<tool_result>")
        assert message.endswith(CONTINUE_INSTRUCTION)
        assert message.index("tool_1") < message.index("tool_2")


class TestFormatForDisplay:
    """Test cases for the short human-facing summaries."""

    def test_summaries(self):
        """Test one-line summaries per payload type."""
        assert format_tool_result_for_display(_read_result()) == "src/a.ts (2 lines)"
        assert format_tool_result_for_display(ToolResult.ok("write_file", "File written: a")) == "File written: a"
        assert format_tool_result_for_display(ToolResult.failure("read_file", "boom")) == "Error: boom"

    def test_describe_tool_call(self):
        """Test the task titles shown for each tool."""
        assert describe_tool_call(ToolCall(id="1", name="read_file", parameters={"path": "a"})) == "Reading file: a"
        assert describe_tool_call(ToolCall(id="1", name="list_files")) == "Listing files: ."
        assert describe_tool_call(ToolCall(id="1", name="search_files", parameters={"query": "x"})) == 'Searching: "x"'
        assert describe_tool_call(ToolCall(id="1", name="mystery")) == "Tool call: mystery"


class TestSystemInstructions:
    """Test cases for the system message."""

    def test_without_tools(self):
        """Test that plain chat sends only the base instructions."""
        assert build_system_instructions("Be helpful.", []) == "Be helpful."

    def test_with_tools(self, file_operations, mock_logger):
        """Test that every tool and the call syntax are described."""
        tools = FilesToolsHandler(file_operations, mock_logger).available_tools()

        text = build_system_instructions("Be helpful.", tools)

        assert text.startswith("Be helpful.\n\n## Tools")
        for name in ToolName.values():
            assert f"### {name}" in text
        assert "<tool_call>\n<name>read_file</name>" in text
        assert "Tool results:" in text
