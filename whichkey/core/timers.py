"""Cancelable delayed callbacks.

The disclosure scheduler only needs "run this later, unless canceled".
Hosts supply a TimerFactory bound to their event loop: asyncio here, a
textual node in whichkey.ui.panel, or a manual clock in tests.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be canceled."""

    def cancel(self) -> None:
        ...


class TimerFactory(Protocol):
    """Schedules callbacks on the host's event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioTimerFactory:
    """TimerFactory backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)
