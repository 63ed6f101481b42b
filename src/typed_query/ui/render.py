"""Output rendering abstraction for the typed-query CLI.

File: src/typed_query/ui/render.py
Last updated: 2026-10-18

Purpose
- Provide a thin rendering layer for deterministic plain-text CLI output.

Functional requirements
- Every method writes to the configured stream (stdout by default) so tests can capture it.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Sequence


class CLIRenderer:
    """Plain-text writer for command output."""

    def __init__(self, *, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _emit(self, line: str = "") -> None:
        print(line, file=self.stream)

    def heading(self, text: str) -> None:
        self._emit(text)

    def text(self, line: str) -> None:
        self._emit(line)

    def kv(self, key: str, value: object) -> None:
        self._emit(f"{key}: {value}")

    def section(self, title: str) -> None:
        """Blank line, then ``title``."""

        self._emit()
        self._emit(title)

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Left-aligned columns separated by two spaces; nothing is printed for zero rows."""

        if not rows:
            return
        grid = [list(headers)] + [[str(cell) for cell in row] for row in rows]
        widths = [
            max(len(line[col]) if col < len(line) else 0 for line in grid)
            for col in range(len(headers))
        ]

        if title:
            self.section(title)
        for index, line in enumerate(grid):
            cells = [
                (line[col] if col < len(line) else "").ljust(width)
                for col, width in enumerate(widths)
            ]
            self._emit("  " + "  ".join(cells).rstrip())
            if index == 0:
                self._emit("  " + "  ".join("-" * width for width in widths))

    def ok(self, label: str) -> None:
        self._emit(f"  OK  {label}")

    def fail(self, label: str) -> None:
        self._emit(f"  FAIL  {label}")


def create_renderer(*, stream: TextIO | None = None) -> CLIRenderer:
    return CLIRenderer(stream=stream)


__all__ = ["CLIRenderer", "create_renderer"]
