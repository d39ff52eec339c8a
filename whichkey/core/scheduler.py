"""Debounced disclosure state machine.

States:
    Idle               nothing scheduled, nothing shown
    Pending(prefix)    a timer is outstanding for prefix
    Shown(prefix)      the presenter is displaying completions for prefix

Every request cancels the outstanding timer before scheduling a new one,
so at most one timer exists and only the last prefix typed inside the
delay window reaches the presenter.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from .completion import CompletionBuilder, CompletionEntry
from .errors import report_error
from .keymap import Mode, join_keys
from .timers import TimerFactory, TimerHandle

if TYPE_CHECKING:
    from ..config import WhichKeyConfig
    from ..ui.presenter import Presenter


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    prefix: tuple[str, ...]
    handle: TimerHandle


@dataclass(frozen=True)
class Shown:
    prefix: tuple[str, ...]


DisclosureState = Union[Idle, Pending, Shown]


def disclosure_title(prefix: Sequence[str]) -> str:
    return f'Which-key: After "{join_keys(prefix)}"'


class DisclosureScheduler:
    """Decides when completions are shown, updated, and hidden."""

    def __init__(
        self,
        builder: CompletionBuilder,
        presenter: Presenter,
        timers: TimerFactory,
        get_config: Callable[[], WhichKeyConfig],
    ) -> None:
        self._builder = builder
        self._presenter = presenter
        self._timers = timers
        self._get_config = get_config
        self._state: DisclosureState = Idle()
        # Tracks whether the presenter currently holds content, across Pending
        self._visible: bool = False

    @property
    def state(self) -> DisclosureState:
        """Current disclosure state."""
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._visible

    def request_disclosure(self, mode: Mode, prefix: Sequence[str]) -> None:
        """Schedule completions for prefix to be shown after the configured delay.

        Called on every keystroke that leaves the sequence extendable.
        """
        config = self._get_config()
        if not config.enabled:
            return

        self._cancel_timer()

        prefix = tuple(prefix)
        entries = self._builder.build(mode, prefix)
        if not entries:
            self._hide()
            self._state = Idle()
            return

        holder: list[TimerHandle] = []

        def fire() -> None:
            # A superseded timer that still fires must not render
            state = self._state
            if not holder or not isinstance(state, Pending) or state.handle is not holder[0]:
                return
            self._on_timer(prefix, entries)

        handle = self._timers.call_later(config.delay_seconds, fire)
        holder.append(handle)
        self._state = Pending(prefix, handle)

    def has_pending_completions(self, mode: Mode, prefix: Sequence[str]) -> bool:
        """Check whether any user binding could still complete prefix."""
        return self._builder.has_completions(mode, prefix)

    def cancel_disclosure(self) -> None:
        """Cancel any pending timer and hide shown completions. Idempotent."""
        self._cancel_timer()
        self._hide()
        self._state = Idle()

    def dispose(self) -> None:
        """Release the timer and clear the presenter."""
        self.cancel_disclosure()

    def _on_timer(self, prefix: tuple[str, ...], entries: list[CompletionEntry]) -> None:
        if not self._get_config().enabled:
            self._state = Idle()
            return
        try:
            self._presenter.render(disclosure_title(prefix), entries)
        except Exception as exc:
            report_error(f"Failed to show completions: {exc}")
        self._visible = True
        self._state = Shown(prefix)

    def _cancel_timer(self) -> None:
        state = self._state
        if isinstance(state, Pending):
            try:
                state.handle.cancel()
            except Exception as exc:
                report_error(f"Failed to cancel timer: {exc}")

    def _hide(self) -> None:
        if not self._visible:
            return
        self._visible = False
        try:
            self._presenter.clear()
        except Exception as exc:
            report_error(f"Failed to hide completions: {exc}")
