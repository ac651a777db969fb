from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.padding import Padding
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax
from rich.table import Table
from typing_extensions import override

from workspace_agent.config.settings import Settings
from workspace_agent.container import DependencyContainer
from workspace_agent.entities.tool import ConversationMessage, EditResult, ToolCall, ToolResult
from workspace_agent.exceptions import BaseAppError
from workspace_agent.ports.agent.agent_events_port import AgentEventsPort
from workspace_agent.use_cases.agent.agent_loop import (
    AgentRunResult,
    CancellationToken,
    StopReason,
)
from workspace_agent.use_cases.agent.tool_result_formatter import (
    describe_tool_call,
    format_tool_result_for_display,
)
from workspace_agent.utils.diff import count_changes


class ConsoleEvents(AgentEventsPort):
    """Prints agent progress to a rich console."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._streaming = False

    def _end_stream(self) -> None:
        if self._streaming:
            self._console.print()
            self._streaming = False

    @override
    def on_token(self, token: str) -> None:
        self._streaming = True
        self._console.print(token, end="", style="dim", markup=False, highlight=False)

    @override
    def on_task_start(self, task_id: str, title: str, description: str) -> None:
        self._end_stream()
        self._console.print(f"[bold cyan]Task:[/bold cyan] {title}", highlight=False)

    @override
    def on_tool_call(self, tool_call: ToolCall) -> None:
        self._end_stream()
        self._console.print(f"[cyan]▶ {describe_tool_call(tool_call)}[/cyan]", highlight=False)

    @override
    def on_tool_result(self, tool_call: ToolCall, result: ToolResult) -> None:
        summary = format_tool_result_for_display(result)
        if result.success:
            self._console.print(f"  [green]✅ {summary}[/green]", highlight=False)
        else:
            self._console.print(f"  [red]⚠ {summary}[/red]", highlight=False)

    @override
    def on_complete(self, final_response: str) -> None:
        self._end_stream()

    @override
    def on_error(self, error: Exception) -> None:
        self._end_stream()
        self._console.print(f"[red]Error:[/red] {error}", highlight=False)


def _parse_slash(line: str) -> tuple[str, list[str]]:
    parts = line.strip().split()
    cmd = parts[0][1:].lower()
    args = parts[1:]
    return cmd, args


def _print_help(console: Console) -> None:
    tbl = Table(title="Commands", box=box.MINIMAL_DOUBLE_HEAD)
    tbl.add_column("Command", style="cyan", no_wrap=True)
    tbl.add_column("Description")
    tbl.add_row("/help", "Show this help")
    tbl.add_row("/status", "Show current settings")
    tbl.add_row("/clear", "Clear conversation")
    tbl.add_row("/exit", "Exit")
    console.print(tbl)


def _print_status(console: Console, settings: Settings, history_len: int) -> None:
    stbl = Table(title="Status", box=box.SIMPLE_HEAVY)
    stbl.add_column("Setting", style="cyan", no_wrap=True)
    stbl.add_column("Value")
    stbl.add_row("workspace", settings.workspace_root)
    stbl.add_row("model", settings.openai_model)
    stbl.add_row("api base", settings.openai_api_base)
    stbl.add_row("max iterations", str(settings.max_iterations))
    stbl.add_row("file operations", "on" if settings.enable_file_operations else "off")
    stbl.add_row("auto-apply edits", "on" if settings.auto_apply_edits else "off")
    stbl.add_row("messages", str(history_len))
    console.print(stbl)


def _render_response(console: Console, text: str, *, plain: bool = False) -> None:
    if plain:
        console.print(text, markup=False, highlight=False)
        return
    console.print(
        Panel(
            Padding(Markdown(text), (0, 1)),
            title="🤖 assistant",
            border_style="magenta",
            box=box.ROUNDED,
            expand=True,
        )
    )


def _review_edits(
    console: Console,
    container: DependencyContainer,
    edits: list[EditResult],
    *,
    auto_apply: bool,
    plain: bool,
) -> None:
    """Show each proposed edit and apply the ones the user accepts."""
    apply_edit_uc = container.get_apply_edit_use_case()
    for edit in edits:
        added, removed = count_changes(edit.diff)
        title = f"📝 {edit.path} (+{added} -{removed})"
        if plain:
            console.print(title, markup=False)
            console.print(edit.diff, markup=False, highlight=False)
        else:
            console.print(
                Panel(Syntax(edit.diff, "diff", word_wrap=True), title=title, border_style="yellow")
            )
        if auto_apply or Confirm.ask(f"Apply edit to {edit.path}?", default=False):
            if apply_edit_uc.approve(edit):
                console.print(f"[green]💾 Applied {edit.path}[/green]", highlight=False)
            else:
                console.print(f"[red]Could not apply edit to {edit.path}[/red]", highlight=False)
        else:
            apply_edit_uc.reject(edit)
            console.print(f"[yellow]Skipped {edit.path}[/yellow]", highlight=False)


def _build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.root:
        overrides["workspace_root"] = os.path.abspath(os.path.expanduser(args.root))
    if args.model:
        overrides["openai_model"] = args.model
    if args.max_iterations is not None:
        overrides["max_iterations"] = args.max_iterations
    if args.system:
        overrides["instructions"] = args.system
    if args.auto_apply is not None:
        overrides["auto_apply_edits"] = args.auto_apply
    return Settings(**overrides)


def interactive_main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="workspace-agent",
        description="Interactive coding agent working on the files of one project.",
    )
    parser.add_argument("--root", default=None, help="Project root (default: current directory)")
    parser.add_argument("--model", default=None, help="Model name override")
    parser.add_argument(
        "--max-iterations", type=int, default=None, help="Max tool-calling turns per request"
    )
    parser.add_argument("--system", default=None, help="Override system instructions")
    parser.add_argument(
        "--auto-apply",
        dest="auto_apply",
        action="store_true",
        default=None,
        help="Apply proposed edits without asking",
    )
    parser.add_argument(
        "--no-auto-apply",
        dest="auto_apply",
        action="store_false",
        help="Ask before applying each proposed edit",
    )
    parser.set_defaults(auto_apply=None)
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Render assistant messages as plain text (no Markdown/Panel)",
    )
    parser.add_argument("--verbose", action="store_true", help="Show info logs")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    console = Console(highlight=True, soft_wrap=True)
    try:
        settings = _build_settings(args)
    except BaseAppError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 2

    container = DependencyContainer(settings)
    try:
        container.get_completion_client()
    except BaseAppError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 2

    console.print(
        Panel(
            f"Workspace: {settings.workspace_root}\n"
            "Type /help for commands. Ctrl+C stops after the current turn.",
            title="Workspace Agent",
            border_style="cyan",
            box=box.ROUNDED,
        )
    )

    events = ConsoleEvents(console)
    history: list[ConversationMessage] = []
    cancellation = CancellationToken()

    def _sigint_handler(signum, frame):  # type: ignore[no-untyped-def]
        cancellation.cancel()
        console.print("\n[yellow]Cancelling after the current turn...[/yellow]")

    # One event loop for the session so the HTTP client stays bound to it
    loop = asyncio.new_event_loop()
    try:
        while True:
            try:
                prompt = console.input("[cyan]🧑 you> [/cyan]").strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            if not prompt:
                continue

            if prompt.startswith("/"):
                cmd, _ = _parse_slash(prompt)
                if cmd in ("h", "help"):
                    _print_help(console)
                elif cmd == "status":
                    _print_status(console, settings, len(history))
                elif cmd == "clear":
                    history = []
                    console.print("[green]Conversation cleared.[/green]")
                elif cmd in ("exit", "quit", "q"):
                    break
                else:
                    console.print(f"[red]Unknown command:[/red] /{cmd}")
                continue

            cancellation = CancellationToken()
            previous = signal.signal(signal.SIGINT, _sigint_handler)
            try:
                agent_loop = container.create_agent_loop()
                result: AgentRunResult = loop.run_until_complete(
                    agent_loop.run(prompt, events=events, cancellation=cancellation, history=history)
                )
            finally:
                signal.signal(signal.SIGINT, previous)

            if result.stop_reason is StopReason.ERROR:
                continue
            history = result.conversation
            if result.final_response:
                _render_response(console, result.final_response, plain=args.plain)
            if result.stop_reason is StopReason.BUDGET_EXHAUSTED:
                console.print("[yellow]Iteration budget reached.[/yellow]")
            if result.edits:
                _review_edits(
                    console,
                    container,
                    result.edits,
                    auto_apply=settings.auto_apply_edits,
                    plain=args.plain,
                )
    finally:
        loop.run_until_complete(container.close())
        loop.close()

    return 0


def main(argv: Optional[list[str]] = None) -> int:  # pragma: no cover
    return interactive_main(argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
