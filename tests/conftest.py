"""Pytest fixtures for whichkey tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from whichkey.core.keymap import (
    Binding,
    KeymapTable,
    LabelAction,
    StaticKeymapProvider,
    reset_keymap,
)


class FakeTimer:
    """Timer handle driven by FakeClock."""

    def __init__(self, when_ms: int, callback) -> None:
        self.when_ms = when_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Manual clock implementing the TimerFactory protocol.

    Time is kept in whole milliseconds so comparisons are exact.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self.timers: list[FakeTimer] = []

    @property
    def now(self) -> float:
        return self.now_ms / 1000

    def call_later(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(self.now_ms + round(delay * 1000), callback)
        self.timers.append(timer)
        return timer

    @property
    def outstanding(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance_ms(self, milliseconds: int) -> None:
        """Move time forward, firing due timers in order."""
        target = self.now_ms + milliseconds
        while True:
            due = [t for t in self.outstanding if t.when_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when_ms)
            self.now_ms = timer.when_ms
            timer.fired = True
            timer.callback()
        self.now_ms = target

    def advance(self, seconds: float) -> None:
        self.advance_ms(round(seconds * 1000))


class RecordingPresenter:
    """Presenter that records calls."""

    def __init__(self) -> None:
        self.renders: list[tuple[str, list]] = []
        self.clears = 0

    def render(self, title: str, entries: Sequence) -> None:
        self.renders.append((title, list(entries)))

    def clear(self) -> None:
        self.clears += 1


class BrokenPresenter(RecordingPresenter):
    """Presenter whose every call fails."""

    def render(self, title: str, entries: Sequence) -> None:
        super().render(title, entries)
        raise RuntimeError("surface unavailable")

    def clear(self) -> None:
        super().clear()
        raise RuntimeError("surface unavailable")


def make_binding(*keys: str, label: str | None = None, repeatable: bool = False, action=None) -> Binding:
    if action is None and label is not None:
        action = LabelAction(label)
    return Binding(sequence=keys, action=action, label=label, repeatable=repeatable)


def make_keymap(normal: list[Binding] | None = None, **tables: list[Binding]) -> StaticKeymapProvider:
    data = {KeymapTable.NORMAL: normal or []}
    for name, bindings in tables.items():
        data[KeymapTable(name)] = bindings
    return StaticKeymapProvider("test", data)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def files_keymap() -> StaticKeymapProvider:
    """Leader bindings for files and windows."""
    return make_keymap(
        [
            make_binding("<leader>", "f", "f", label="Find Files"),
            make_binding("<leader>", "f", "r", label="Recent Files"),
            make_binding("<leader>", "w", "v", label="Vertical Split"),
        ]
    )


@pytest.fixture(autouse=True)
def reset_keymap_after_test():
    """Reset keymap after each test to avoid cross-test pollution."""
    yield
    reset_keymap()
