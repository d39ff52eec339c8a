"""Reference key-sequence host.

Plays the part of an editor's input handler and remapping engine: it
accumulates pending keys, classifies each keystroke against the user
bindings, dispatches completed bindings, and keeps the which-key service
informed. Editors with their own remapper call WhichKeyService directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .core.errors import report_error
from .core.keymap import LEADER, ActionSummary, Binding, Mode
from .core.timers import TimerFactory, TimerHandle
from .service import RemapSignal, WhichKeyService

REPEAT_SEQUENCE = (LEADER, LEADER)


@dataclass
class FeedResult:
    """Outcome of feeding one key."""

    signal: RemapSignal
    keys: tuple[str, ...] = ()               # Pending keys after this key, or the resolved sequence
    binding: Binding | None = None           # Binding executed by this key
    action: ActionSummary | None = None      # Action dispatched by this key
    repeated: bool = False                   # Key completed the repeat trigger

    @property
    def consumed(self) -> bool:
        return self.signal != RemapSignal.DEFINITE_NO_MATCH


class KeySequenceHost:
    """Turns keystrokes into binding executions and disclosure signals."""

    def __init__(
        self,
        service: WhichKeyService,
        dispatch: Callable[[ActionSummary], None],
        timers: TimerFactory,
    ) -> None:
        self._service = service
        self._dispatch = dispatch
        self._timers = timers
        self._pending: tuple[str, ...] = ()
        self._pending_mode: Mode = Mode.NORMAL
        self._timeout: TimerHandle | None = None

    @property
    def pending(self) -> tuple[str, ...]:
        """Keys typed so far in the unresolved sequence."""
        return self._pending

    def translate_key(self, key: str) -> str:
        """Map the configured leader key to the <leader> token."""
        if key == self._service.config.leader:
            return LEADER
        return key

    def feed(self, mode: Mode, key: str) -> FeedResult:
        """Process one keystroke.

        Args:
            mode: The editing mode the key was typed in.
            key: The key name, e.g. "space", "f", "ctrl+w".

        Returns:
            FeedResult describing how the key resolved.
        """
        self._cancel_timeout()
        if self._pending and mode != self._pending_mode:
            self._pending = ()

        keys = self._pending + (self.translate_key(key),)
        index = self._service.index
        exact = index.exact(mode, keys)

        extendable = self._is_extendable(mode, keys)
        if (
            keys == REPEAT_SEQUENCE
            and exact is None
            and not extendable
            and self._service.config.repeat_trigger_enabled
        ):
            return self._repeat_last(mode)

        if extendable:
            self._pending = keys
            self._pending_mode = mode
            self._service.handle_signal(RemapSignal.SEQUENCE_STILL_EXTENDABLE, mode, keys)
            self._arm_timeout()
            return FeedResult(RemapSignal.SEQUENCE_STILL_EXTENDABLE, keys=keys)

        self._pending = ()
        if exact is not None:
            self._service.handle_signal(RemapSignal.DEFINITE_MATCH_EXECUTED, mode, keys)
            return self._execute(exact, keys)

        self._service.handle_signal(RemapSignal.DEFINITE_NO_MATCH, mode, keys)
        return FeedResult(RemapSignal.DEFINITE_NO_MATCH, keys=keys)

    def reset(self) -> None:
        """Drop pending keys and hide any disclosure."""
        self._cancel_timeout()
        self._pending = ()
        self._service.cancel_disclosure()

    def dispose(self) -> None:
        self.reset()
        self._service.dispose()

    def _is_extendable(self, mode: Mode, keys: tuple[str, ...]) -> bool:
        if self._service.has_pending_completions(mode, keys):
            return True
        # A lone leader waits for a possible second tap
        return keys == (LEADER,) and self._service.config.repeat_trigger_enabled

    def _repeat_last(self, mode: Mode) -> FeedResult:
        self._pending = ()
        self._service.handle_signal(RemapSignal.DEFINITE_MATCH_EXECUTED, mode, REPEAT_SEQUENCE)
        action = self._service.fetch_repeatable()
        if action is not None:
            self._run(action)
        return FeedResult(
            RemapSignal.DEFINITE_MATCH_EXECUTED,
            keys=REPEAT_SEQUENCE,
            action=action,
            repeated=True,
        )

    def _execute(self, binding: Binding, keys: tuple[str, ...]) -> FeedResult:
        if binding.action is not None:
            self._run(binding.action)
        self._service.record_repeatable(binding)
        return FeedResult(
            RemapSignal.DEFINITE_MATCH_EXECUTED,
            keys=keys,
            binding=binding,
            action=binding.action,
        )

    def _run(self, action: ActionSummary) -> None:
        try:
            self._dispatch(action)
        except Exception as exc:
            report_error(f"Command failed: {exc}")

    def _arm_timeout(self) -> None:
        delay = self._service.config.sequence_timeout_seconds
        self._timeout = self._timers.call_later(delay, self._on_timeout)

    def _cancel_timeout(self) -> None:
        if self._timeout is not None:
            self._timeout.cancel()
            self._timeout = None

    def _on_timeout(self) -> None:
        """Resolve the pending sequence when no further key arrived in time."""
        self._timeout = None
        keys, mode = self._pending, self._pending_mode
        self._pending = ()
        if not keys:
            return
        exact = self._service.index.exact(mode, keys)
        if exact is not None:
            self._service.handle_signal(RemapSignal.DEFINITE_MATCH_EXECUTED, mode, keys)
            self._execute(exact, keys)
        else:
            self._service.cancel_disclosure()
