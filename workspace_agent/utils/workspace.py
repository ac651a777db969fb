"""Workspace root utilities to constrain file access.

Every path the model hands us goes through :class:`PathValidator` before any
I/O. Validation is pure string work on the path; it never touches the disk.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from workspace_agent.exceptions import ToolErrorKind


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    normalized_path: str
    full_path: str
    error: Optional[str] = None
    error_kind: Optional[ToolErrorKind] = None


def glob_to_regex(pattern: str, ignore_case: bool = True) -> re.Pattern[str]:
    """Translate a glob (``**``, ``*``, ``?``) into an anchored regex."""
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE if ignore_case else 0)


class PathValidator:
    """Confines paths to a project root and applies the blocklist."""

    def __init__(self, root: Optional[str], blocked_patterns: Iterable[str] = ()):
        self._root = os.path.abspath(root) if root else None
        self._blocked = [(p, glob_to_regex(p)) for p in blocked_patterns]

    @property
    def root(self) -> Optional[str]:
        return self._root

    def validate(self, raw_path: Optional[str]) -> ValidationResult:
        raw = str(raw_path or "")
        normalized = raw.replace("\\", "/")

        if not self._root:
            return ValidationResult(
                valid=False,
                normalized_path=normalized,
                full_path=normalized,
                error="No workspace folder is open.",
                error_kind=ToolErrorKind.NO_WORKSPACE,
            )

        if os.path.isabs(normalized):
            full_path = os.path.normpath(normalized)
        else:
            full_path = os.path.normpath(os.path.join(self._root, normalized))

        try:
            relative = os.path.relpath(full_path, self._root)
        except ValueError:
            # different drive on Windows
            relative = full_path

        if (
            relative == os.pardir
            or relative.startswith(os.pardir + os.sep)
            or os.path.isabs(relative)
        ):
            return ValidationResult(
                valid=False,
                normalized_path=normalized,
                full_path=full_path,
                error="Cannot access files outside the workspace.",
                error_kind=ToolErrorKind.PATH_REJECTED,
            )

        relative = relative.replace(os.sep, "/")
        basename = relative.rsplit("/", 1)[-1]
        for pattern, regex in self._blocked:
            if regex.match(relative) or regex.match(basename):
                return ValidationResult(
                    valid=False,
                    normalized_path=normalized,
                    full_path=full_path,
                    error=f"Access to this file is blocked for security reasons: {pattern}",
                    error_kind=ToolErrorKind.PATH_REJECTED,
                )

        return ValidationResult(
            valid=True,
            normalized_path=relative,
            full_path=full_path,
        )
