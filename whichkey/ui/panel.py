"""Textual widgets for showing completions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable

from rich.text import Text
from textual.message_pump import MessagePump
from textual.timer import Timer
from textual.widgets import Static

from ..core.completion import CompletionEntry
from .presenter import format_entry


class WhichKeyPanel(Static):
    """Non-focusable panel listing the completions for the pending keys."""

    can_focus = False

    DEFAULT_CSS = """
    WhichKeyPanel {
        dock: bottom;
        width: 100%;
        height: auto;
        max-height: 12;
        background: $surface;
        border: solid $primary;
        padding: 0 1;
    }
    """

    def __init__(self, *, id: str | None = "which-key-panel", classes: str | None = None) -> None:
        super().__init__("", id=id, classes=classes)
        self.display = False
        self.heading: str = ""
        self.entries: list[CompletionEntry] = []

    def show_entries(self, heading: str, entries: Sequence[CompletionEntry]) -> None:
        """Replace the listed entries and show the panel."""
        self.heading = heading
        self.entries = list(entries)
        lines = [heading, ""]
        lines.extend(format_entry(entry).rstrip() for entry in self.entries)
        self.update(Text("\n".join(lines)))
        self.display = True

    def hide_entries(self) -> None:
        self.heading = ""
        self.entries = []
        self.update("")
        self.display = False


class PanelPresenter:
    """Presenter backed by a WhichKeyPanel."""

    def __init__(self, panel: WhichKeyPanel) -> None:
        self.panel = panel

    def render(self, title: str, entries: Sequence[CompletionEntry]) -> None:
        self.panel.show_entries(title, entries)

    def clear(self) -> None:
        self.panel.hide_entries()


# textual timers divide by their interval
MIN_TIMER_DELAY = 0.001


class _TextualTimerHandle:
    def __init__(self, timer: Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class TextualTimerFactory:
    """TimerFactory scheduling callbacks through a textual node's timers."""

    def __init__(self, node: MessagePump) -> None:
        self._node = node

    def call_later(self, delay: float, callback: Callable[[], None]) -> _TextualTimerHandle:
        return _TextualTimerHandle(self._node.set_timer(max(MIN_TIMER_DELAY, delay), callback))
