"""Textual demo application for whichkey.

A minimal modal editor shell: keys are routed through KeySequenceHost,
completions appear in a non-focusable panel at the bottom, and executed
commands are listed in the log.
"""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.events import Key
from textual.widgets import Static

from .config import WhichKeyConfig
from .core.completion import describe_action
from .core.keymap import ActionSummary, KeymapProvider, Mode, join_keys
from .host import KeySequenceHost
from .service import WhichKeyService
from .ui.panel import PanelPresenter, TextualTimerFactory, WhichKeyPanel

NAMED_KEYS = {"space", "escape", "enter", "tab", "backspace"}
MAX_LOG_LINES = 20


class WhichKeyApp(App):
    """Demo host for the which-key engine."""

    TITLE = "whichkey"

    CSS = """
    #main-container {
        width: 100%;
        height: 100%;
    }

    #command-log {
        height: 1fr;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        background: $boost;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        config: WhichKeyConfig | None = None,
        keymap: KeymapProvider | None = None,
    ) -> None:
        super().__init__()
        self._config = config or WhichKeyConfig()
        self._keymap = keymap
        self.editor_mode: Mode = Mode.NORMAL
        self.executed: list[ActionSummary] = []
        self.service: WhichKeyService | None = None
        self.host: KeySequenceHost | None = None

    @property
    def which_key_panel(self) -> WhichKeyPanel:
        return self.query_one(WhichKeyPanel)

    @property
    def status_bar(self) -> Static:
        return self.query_one("#status-bar", Static)

    @property
    def command_log(self) -> Static:
        return self.query_one("#command-log", Static)

    def compose(self) -> ComposeResult:
        with Vertical(id="main-container"):
            yield Static("", id="command-log")
            yield Static("", id="status-bar")
        yield WhichKeyPanel()

    def on_mount(self) -> None:
        timers = TextualTimerFactory(self)
        self.service = WhichKeyService(
            PanelPresenter(self.which_key_panel),
            timers,
            config=self._config,
            keymap=self._keymap,
        )
        self.host = KeySequenceHost(self.service, self._dispatch, timers)
        self._update_status_bar()

    def on_unmount(self) -> None:
        if self.host is not None:
            self.host.dispose()

    def on_key(self, event: Key) -> None:
        if self.host is None:
            return
        key = self._convert_key(event)

        if key == "escape":
            self.host.reset()
            self.editor_mode = Mode.NORMAL
            self._update_status_bar()
            return

        result = self.host.feed(self.editor_mode, key)
        if not result.consumed and self.editor_mode == Mode.NORMAL and key == "i":
            self.editor_mode = Mode.INSERT
        if result.consumed:
            event.prevent_default()
            event.stop()
        self._update_status_bar()

    def _convert_key(self, event: Key) -> str:
        """Convert a Textual Key event to a key token."""
        key = event.key
        if key in NAMED_KEYS:
            return key
        if event.character and len(event.character) == 1 and event.character.isprintable():
            return event.character
        return key

    def _dispatch(self, action: ActionSummary) -> None:
        self.executed.append(action)
        lines = [describe_action(a) for a in self.executed[-MAX_LOG_LINES:]]
        self.command_log.update(Text("\n".join(lines)))

    def _update_status_bar(self) -> None:
        pending = join_keys(self.host.pending) if self.host is not None else ""
        parts: list[Any] = [self.editor_mode.value]
        if pending:
            parts.append(pending)
        self.status_bar.update(Text("  ".join(parts)))
