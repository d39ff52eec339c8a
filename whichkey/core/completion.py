"""Completion entries for a partially typed key sequence.

Given a mode and the keys typed so far, lists every user binding that could
still complete the sequence as a "next keys -> description" entry.
"""

from __future__ import annotations

import locale
import re
import unicodedata
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import report_error
from .groups import GroupResolver
from .keymap import (
    ActionSummary,
    Binding,
    BindingIndex,
    CommandsAction,
    KeysAction,
    LabelAction,
    Mode,
    join_keys,
)

FALLBACK_DESCRIPTION = "Custom mapping"
REDIRECT_ARROW = "→"
GROUP_MARKER = "…"

_WORD_SPLIT = re.compile(r"[._\-\s]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass(frozen=True)
class CompletionEntry:
    """One candidate completion shown to the user."""

    label: str                   # Remaining keys after the prefix, joined
    description: str
    group: str | None = None


def title_case_command(command: str) -> str:
    """Expand a dotted command identifier into capitalized words.

    >>> title_case_command("workbench.action.quickOpen")
    'Workbench Action Quick Open'
    """
    words: list[str] = []
    for part in _WORD_SPLIT.split(command):
        if not part:
            continue
        words.extend(word for word in _CAMEL_BOUNDARY.split(part) if word)
    return " ".join(word[0].upper() + word[1:] for word in words)


def _first_command_id(commands: Sequence[Any]) -> str | None:
    if not commands:
        return None
    first = commands[0]
    if isinstance(first, str):
        return first or None
    if isinstance(first, Mapping):
        command = first.get("command")
        if isinstance(command, str) and command:
            return command
    return None


def describe_action(action: ActionSummary | None) -> str:
    """Get a human-readable description for an action payload."""
    if isinstance(action, LabelAction):
        if isinstance(action.label, str) and action.label:
            return action.label
    elif isinstance(action, CommandsAction):
        command = _first_command_id(action.commands)
        if command:
            return title_case_command(command)
    elif isinstance(action, KeysAction):
        if action.keys:
            return f"{REDIRECT_ARROW} {join_keys(action.keys)}"
    return FALLBACK_DESCRIPTION


def describe_binding(binding: Binding) -> str:
    """Get the description for a binding, preferring its own label."""
    if isinstance(binding.label, str) and binding.label:
        return binding.label
    try:
        return describe_action(binding.action)
    except Exception:
        return FALLBACK_DESCRIPTION


def _base_letters(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _sort_key(entry: CompletionEntry) -> tuple[str, str]:
    """Base letters first, then locale collation of the folded label."""
    folded = entry.label.casefold()
    return _base_letters(folded), locale.strxfrm(folded)


class CompletionBuilder:
    """Builds the sorted completion entries for a mode and typed prefix."""

    def __init__(
        self,
        index: BindingIndex | None = None,
        groups: GroupResolver | None = None,
    ) -> None:
        self.index = index or BindingIndex()
        self.groups = groups or GroupResolver()

    def build(self, mode: Mode, prefix: Sequence[str]) -> list[CompletionEntry]:
        """List completions for the typed prefix.

        Only bindings strictly extending the prefix are included. Bindings
        repeating an already seen full sequence are dropped. Bindings more
        than one key deeper under a configured group collapse into a single
        "<key>…" entry described by the group label. Entries are sorted by
        label; labels equal up to case keep table order.
        """
        try:
            return self._build(mode, tuple(prefix))
        except Exception as exc:
            report_error(f"Failed to build completions: {exc}")
            return []

    def _build(self, mode: Mode, prefix: tuple[str, ...]) -> list[CompletionEntry]:
        entries: list[CompletionEntry] = []
        seen: set[str] = set()
        collapsed: set[str] = set()

        for binding in self.index.extending(mode, prefix):
            full_key = binding.key_string
            if full_key in seen:
                continue
            seen.add(full_key)

            remaining = binding.sequence[len(prefix):]
            group = self.groups.group_label(binding.sequence, prefix)
            if group is not None and len(remaining) > 1:
                next_key = remaining[0]
                if next_key not in collapsed:
                    collapsed.add(next_key)
                    entries.append(CompletionEntry(f"{next_key}{GROUP_MARKER}", group, group))
                continue

            entries.append(
                CompletionEntry(
                    label=join_keys(remaining),
                    description=describe_binding(binding),
                    group=group,
                )
            )

        entries.sort(key=_sort_key)
        return entries

    def has_completions(self, mode: Mode, prefix: Sequence[str]) -> bool:
        """Check whether any binding extends the typed prefix."""
        return bool(self.build(mode, prefix))
