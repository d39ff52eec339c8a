"""Core, UI-agnostic models and helpers for whichkey."""

from .completion import CompletionBuilder, CompletionEntry, describe_action, title_case_command
from .errors import KeymapError, report_error
from .groups import GroupResolver
from .keymap import (
    LEADER,
    ActionSummary,
    Binding,
    BindingIndex,
    CommandsAction,
    KeymapProvider,
    KeymapTable,
    KeysAction,
    LabelAction,
    Mode,
    StaticKeymapProvider,
    get_keymap,
    reset_keymap,
    set_keymap,
)
from .keymap_manager import KeymapManager
from .repeat import RepeatTracker
from .scheduler import DisclosureScheduler, DisclosureState, Idle, Pending, Shown
from .timers import AsyncioTimerFactory, TimerFactory, TimerHandle

__all__ = [
    "LEADER",
    "ActionSummary",
    "AsyncioTimerFactory",
    "Binding",
    "BindingIndex",
    "CommandsAction",
    "CompletionBuilder",
    "CompletionEntry",
    "DisclosureScheduler",
    "DisclosureState",
    "GroupResolver",
    "Idle",
    "KeymapError",
    "KeymapManager",
    "KeymapProvider",
    "KeymapTable",
    "KeysAction",
    "LabelAction",
    "Mode",
    "Pending",
    "RepeatTracker",
    "Shown",
    "StaticKeymapProvider",
    "TimerFactory",
    "TimerHandle",
    "describe_action",
    "get_keymap",
    "report_error",
    "reset_keymap",
    "set_keymap",
    "title_case_command",
]
