"""Which-key service: the entry points a host editor calls.

The host feeds every keystroke to its remapping engine. Whenever the engine
reports that the pending sequence could still extend, the host forwards the
keys and mode here; on a definite match or a definite non-match the
disclosure is canceled.

Usage:
    service = WhichKeyService(presenter, timers, config=config)

    # In the key handler:
    keep_waiting = service.handle_signal(signal, mode, keys)
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, auto

from .config import WhichKeyConfig
from .core.completion import CompletionBuilder, CompletionEntry
from .core.groups import GroupResolver
from .core.keymap import ActionSummary, Binding, BindingIndex, KeymapProvider, Mode
from .core.repeat import RepeatTracker
from .core.scheduler import DisclosureScheduler, DisclosureState
from .core.timers import TimerFactory
from .ui.presenter import Presenter


class RemapSignal(Enum):
    """Per-keystroke classification from the remapping engine."""

    SEQUENCE_STILL_EXTENDABLE = auto()
    DEFINITE_MATCH_EXECUTED = auto()
    DEFINITE_NO_MATCH = auto()


class WhichKeyService:
    """Owns the disclosure scheduler and the repeat slot for one host session."""

    def __init__(
        self,
        presenter: Presenter,
        timers: TimerFactory,
        config: WhichKeyConfig | None = None,
        keymap: KeymapProvider | None = None,
    ) -> None:
        self._config = config or WhichKeyConfig()
        self._index = BindingIndex(keymap)
        self._builder = CompletionBuilder(self._index, GroupResolver(self._config.groups))
        self._scheduler = DisclosureScheduler(
            self._builder, presenter, timers, lambda: self._config
        )
        self._repeat = RepeatTracker()
        self._disposed = False

    @property
    def config(self) -> WhichKeyConfig:
        return self._config

    @property
    def index(self) -> BindingIndex:
        return self._index

    @property
    def state(self) -> DisclosureState:
        return self._scheduler.state

    def update_config(self, config: WhichKeyConfig) -> None:
        """Apply new options. Disabling takes effect on the next cancel."""
        self._config = config
        self._builder.groups = GroupResolver(config.groups)

    def completions(self, mode: Mode, prefix: Sequence[str]) -> list[CompletionEntry]:
        """Get the completions for prefix without scheduling anything."""
        return self._builder.build(mode, prefix)

    def request_disclosure(self, mode: Mode, prefix: Sequence[str]) -> None:
        if self._disposed:
            return
        self._scheduler.request_disclosure(mode, prefix)

    def cancel_disclosure(self) -> None:
        self._scheduler.cancel_disclosure()

    def has_pending_completions(self, mode: Mode, prefix: Sequence[str]) -> bool:
        """Check whether user bindings still extend prefix.

        Built-in action resolvers cannot see user bindings, so a True result
        overrides their "no possible match".
        """
        return self._scheduler.has_pending_completions(mode, prefix)

    def handle_signal(self, signal: RemapSignal, mode: Mode, keys: Sequence[str]) -> bool:
        """React to the remapping engine's verdict for the pending keys.

        Returns:
            True if the host should keep waiting for more keys.
        """
        if signal == RemapSignal.SEQUENCE_STILL_EXTENDABLE:
            self.request_disclosure(mode, keys)
            return True
        if signal == RemapSignal.DEFINITE_NO_MATCH and self.has_pending_completions(mode, keys):
            self.request_disclosure(mode, keys)
            return True
        self.cancel_disclosure()
        return False

    def record_repeatable(self, binding: Binding) -> bool:
        """Remember binding's action for the repeat trigger if it is repeatable."""
        return self._repeat.record(binding)

    def fetch_repeatable(self) -> ActionSummary | None:
        return self._repeat.fetch()

    def dispose(self) -> None:
        """Cancel the outstanding timer and clear the presenter."""
        self._scheduler.dispose()
        self._disposed = True
