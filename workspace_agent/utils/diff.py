"""
Line-level unified diff for proposed edits.

This is a lookahead heuristic, not a minimal edit script: it walks both
sides in lockstep and, on a mismatch, searches a small window for the
nearest line pair where the two sides agree again. The text is meant for a
human reviewer and for the model; the edit itself is carried by the stored
new content, never by re-applying this diff.
"""

from dataclasses import dataclass
from typing import Literal

RESYNC_WINDOW = 5
MAX_UNSYNCED_STEPS = 10
CONTEXT_LINES = 3

OpKind = Literal[" ", "-", "+"]


@dataclass(frozen=True)
class _Op:
    kind: OpKind
    text: str
    old_index: int  # index of the next original line at this op
    new_index: int  # index of the next modified line at this op


def _find_resync(
    original: list[str], modified: list[str], i: int, j: int, window: int
) -> tuple[int, int] | None:
    """Nearest (di, dj) with original[i+di] == modified[j+dj], by di + dj."""
    for total in range(1, 2 * (window - 1) + 1):
        for di in range(0, min(total, window - 1) + 1):
            dj = total - di
            if dj >= window:
                continue
            if i + di < len(original) and j + dj < len(modified):
                if original[i + di] == modified[j + dj]:
                    return di, dj
    return None


def _edit_script(original: list[str], modified: list[str]) -> list[_Op]:
    ops: list[_Op] = []
    i = j = 0
    unsynced = 0

    def delete(n: int) -> None:
        nonlocal i
        for _ in range(n):
            ops.append(_Op("-", original[i], i, j))
            i += 1

    def add(n: int) -> None:
        nonlocal j
        for _ in range(n):
            ops.append(_Op("+", modified[j], i, j))
            j += 1

    while i < len(original) or j < len(modified):
        if i < len(original) and j < len(modified) and original[i] == modified[j]:
            ops.append(_Op(" ", original[i], i, j))
            i += 1
            j += 1
            unsynced = 0
            continue

        if i >= len(original):
            add(len(modified) - j)
            break
        if j >= len(modified):
            delete(len(original) - i)
            break

        resync = None
        if unsynced < MAX_UNSYNCED_STEPS:
            resync = _find_resync(original, modified, i, j, RESYNC_WINDOW)
        if resync is not None:
            di, dj = resync
            delete(di)
            add(dj)
            unsynced = 0
        else:
            # one-for-one until the sides agree again
            delete(1)
            add(1)
            unsynced += 1

    return ops


def _group_hunks(ops: list[_Op], context: int) -> list[list[_Op]]:
    changed = [k for k, op in enumerate(ops) if op.kind != " "]
    if not changed:
        return []

    hunks: list[list[_Op]] = []
    start = max(0, changed[0] - context)
    end = min(len(ops), changed[0] + context + 1)
    for k in changed[1:]:
        if k - context <= end:
            end = min(len(ops), k + context + 1)
        else:
            hunks.append(ops[start:end])
            start = max(0, k - context)
            end = min(len(ops), k + context + 1)
    hunks.append(ops[start:end])
    return hunks


def _range(start_index: int, count: int) -> str:
    # unified convention: an empty range points at the line before it
    start = start_index + 1 if count > 0 else start_index
    return f"{start},{count}"


def generate_unified_diff(path: str, original_content: str, new_content: str) -> str:
    """
    Build a unified diff between two versions of a file.

    Args:
        path: Root-relative path used in the ``---``/``+++`` headers
        original_content: Content before the edit
        new_content: Content after the edit

    Returns:
        Diff text; only the two headers when nothing changed
    """
    original = original_content.split("\n")
    modified = new_content.split("\n")

    lines = [f"--- a/{path}", f"+++ b/{path}"]
    for hunk in _group_hunks(_edit_script(original, modified), CONTEXT_LINES):
        old_count = sum(1 for op in hunk if op.kind != "+")
        new_count = sum(1 for op in hunk if op.kind != "-")
        first = hunk[0]
        lines.append(
            f"@@ -{_range(first.old_index, old_count)} "
            f"+{_range(first.new_index, new_count)} @@"
        )
        lines.extend(f"{op.kind}{op.text}" for op in hunk)
    return "\n".join(lines)


def count_changes(diff_text: str) -> tuple[int, int]:
    """Return (added, removed) line counts of a diff produced above."""
    added = removed = 0
    for line in diff_text.split("\n")[2:]:
        if line.startswith("@@"):
            continue
        if line.startswith("+"):
            added += 1
        elif line.startswith("-"):
            removed += 1
    return added, removed
