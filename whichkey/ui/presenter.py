"""Presenter contract and a plain-text presenter.

A presenter shows a list of completion entries without taking input focus.
Repeated render() calls before clear() replace the previous content.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Protocol, TextIO

from ..core.completion import CompletionEntry

BOX_WIDTH = 120
ITEMS_PER_ROW = 2
KEY_WIDTH = 6
DESCRIPTION_WIDTH = 45
CONTINUE_HINT = "Continue typing your key sequence... (sequence timeout applies)"


class Presenter(Protocol):
    """Renders and clears completion entries."""

    def render(self, title: str, entries: Sequence[CompletionEntry]) -> None:
        ...

    def clear(self) -> None:
        ...


def format_entry(entry: CompletionEntry) -> str:
    """Format one entry as a fixed-width cell."""
    description = entry.description
    if entry.group and entry.group != description:
        description = f"[{entry.group}] {description}"
    return f"{entry.label.ljust(KEY_WIDTH)} → {description[:DESCRIPTION_WIDTH].ljust(DESCRIPTION_WIDTH)}"


def format_disclosure(title: str, entries: Sequence[CompletionEntry]) -> list[str]:
    """Lay out entries as a boxed two-column table.

    Args:
        title: Header text, e.g. 'Which-key: After "<leader>"'.
        entries: Entries in display order.

    Returns:
        The lines to display, without trailing newlines.
    """
    inner = BOX_WIDTH - 2
    lines = [
        "╔" + "═" * inner + "╗",
        "║" + f"  {title}".ljust(inner) + "║",
        "╠" + "═" * inner + "╣",
    ]
    for i in range(0, len(entries), ITEMS_PER_ROW):
        row = " │ ".join(format_entry(entry) for entry in entries[i:i + ITEMS_PER_ROW])
        lines.append("║  " + row.ljust(BOX_WIDTH - 4) + "║")
    lines.append("╚" + "═" * inner + "╝")
    lines.append("")
    lines.append(CONTINUE_HINT)
    return lines


class StreamPresenter:
    """Presenter writing the boxed table to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self.visible: bool = False

    def render(self, title: str, entries: Sequence[CompletionEntry]) -> None:
        self._stream.write("\n".join(format_disclosure(title, entries)) + "\n")
        self._stream.flush()
        self.visible = True

    def clear(self) -> None:
        self.visible = False
