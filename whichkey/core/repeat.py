"""Last repeatable command.

A single slot holding the action of the most recently executed binding
flagged as repeatable. The host recognizes its repeat trigger and
dispatches whatever fetch() returns; nothing here executes commands.
"""

from __future__ import annotations

from .keymap import ActionSummary, Binding


class RepeatTracker:
    """Single-slot store for the last repeatable action."""

    def __init__(self) -> None:
        self._last: ActionSummary | None = None

    def record(self, binding: Binding) -> bool:
        """Store the binding's action if the binding is repeatable.

        Returns True if the slot was overwritten.
        """
        if not binding.repeatable or binding.action is None:
            return False
        self._last = binding.action
        return True

    def fetch(self) -> ActionSummary | None:
        """Get the last recorded action, or None if nothing was recorded."""
        return self._last
