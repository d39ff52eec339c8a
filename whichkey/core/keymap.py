"""User keymap model.

Defines the multi-key bindings the disclosure engine reads, per editing
mode. Bindings are owned by whoever supplies the keymap (a JSON file via
KeymapManager, or a host's own remapper); the engine only reads them.

Actions are a closed set of three payload shapes:
- LabelAction: a plain human label
- CommandsAction: one or more command identifiers
- KeysAction: redirect to another key sequence
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

LEADER = "<leader>"


class Mode(Enum):
    """Editing modes."""

    NORMAL = "NORMAL"
    INSERT = "INSERT"
    VISUAL = "VISUAL"
    VISUAL_LINE = "V-LINE"
    VISUAL_BLOCK = "V-BLOCK"
    OPERATOR_PENDING = "OP-PENDING"
    COMMAND = "COMMAND"
    REPLACE = "REPLACE"


VISUAL_MODES = (Mode.VISUAL, Mode.VISUAL_LINE, Mode.VISUAL_BLOCK)


class KeymapTable(Enum):
    """Binding tables a keymap provides. Several modes can share one table."""

    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    OPERATOR_PENDING = "operator_pending"


def table_for_mode(mode: Mode) -> KeymapTable | None:
    """Get the binding table used in a mode, or None if the mode has none."""
    if mode == Mode.NORMAL:
        return KeymapTable.NORMAL
    if mode == Mode.INSERT:
        return KeymapTable.INSERT
    if mode in VISUAL_MODES:
        return KeymapTable.VISUAL
    if mode == Mode.OPERATOR_PENDING:
        return KeymapTable.OPERATOR_PENDING
    return None


@dataclass(frozen=True)
class LabelAction:
    """Action described only by a human label."""

    label: str


@dataclass(frozen=True)
class CommandsAction:
    """Action running commands. Each command is an id or a {"command": id, ...} mapping."""

    commands: tuple[Any, ...]


@dataclass(frozen=True)
class KeysAction:
    """Action that replays another key sequence."""

    keys: tuple[str, ...]


ActionSummary = Union[LabelAction, CommandsAction, KeysAction]


@dataclass(frozen=True)
class Binding:
    """A configured multi-key binding."""

    sequence: tuple[str, ...]          # Keys, e.g. ("<leader>", "f", "f")
    action: ActionSummary | None = None
    label: str | None = None           # Overrides the action's description
    repeatable: bool = False           # Eligible for the repeat trigger

    def __post_init__(self) -> None:
        if not self.sequence:
            raise ValueError("Binding sequence must not be empty")
        # Accept lists from callers while keeping the dataclass hashable
        object.__setattr__(self, "sequence", tuple(self.sequence))

    @property
    def key_string(self) -> str:
        """The sequence joined into a single string."""
        return join_keys(self.sequence)


def join_keys(keys: Iterable[str]) -> str:
    """Join key tokens into their display string."""
    return "".join(keys)


class KeymapProvider(ABC):
    """Abstract base class for keymap providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the keymap name."""
        pass

    @abstractmethod
    def get_table(self, table: KeymapTable) -> list[Binding]:
        """Get all bindings in a table."""
        pass

    def get_bindings(self, mode: Mode) -> list[Binding]:
        """Get the bindings active in a mode."""
        table = table_for_mode(mode)
        if table is None:
            return []
        return self.get_table(table)


class StaticKeymapProvider(KeymapProvider):
    """Keymap provider backed by in-memory tables."""

    def __init__(
        self,
        name: str = "default",
        tables: Mapping[KeymapTable, Sequence[Binding]] | None = None,
    ) -> None:
        self._name = name
        self._tables = {table: list(bindings) for table, bindings in (tables or {}).items()}

    @property
    def name(self) -> str:
        return self._name

    def get_table(self, table: KeymapTable) -> list[Binding]:
        return list(self._tables.get(table, []))


@dataclass
class BindingIndex:
    """Read-only view over a keymap's per-mode binding tables.

    Without an explicit provider the global keymap is read on every call,
    so a keymap loaded later is picked up.
    """

    provider: KeymapProvider | None = None

    def bindings(self, mode: Mode) -> list[Binding]:
        """All bindings for a mode."""
        provider = self.provider or get_keymap()
        return provider.get_bindings(mode)

    def extending(self, mode: Mode, prefix: Sequence[str]) -> list[Binding]:
        """Bindings whose sequence is strictly longer than, and starts with, prefix."""
        prefix = tuple(prefix)
        depth = len(prefix)
        return [
            binding
            for binding in self.bindings(mode)
            if len(binding.sequence) > depth and binding.sequence[:depth] == prefix
        ]

    def exact(self, mode: Mode, keys: Sequence[str]) -> Binding | None:
        """The first binding whose sequence equals keys."""
        keys = tuple(keys)
        for binding in self.bindings(mode):
            if binding.sequence == keys:
                return binding
        return None


# Global keymap instance
_keymap_provider: KeymapProvider | None = None


def get_keymap() -> KeymapProvider:
    """Get the current keymap provider."""
    global _keymap_provider
    if _keymap_provider is None:
        _keymap_provider = StaticKeymapProvider()
    return _keymap_provider


def set_keymap(provider: KeymapProvider) -> None:
    """Set the keymap provider (for testing or custom keymaps)."""
    global _keymap_provider
    _keymap_provider = provider


def reset_keymap() -> None:
    """Reset to the default (empty) keymap provider."""
    global _keymap_provider
    _keymap_provider = None
