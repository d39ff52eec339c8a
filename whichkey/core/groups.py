"""Group labels for key prefixes.

Users map key-sequence prefixes to display labels, e.g.
``{"<leader>c": "Code", "<leader>g": "Git"}``. A group applies to a
completion candidate only at exact depth one: the group's key must be the
typed prefix plus exactly the next key of the candidate. Deeper groups
(``"<leader>cd"``) never label a shallower candidate and vice versa.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .errors import report_error
from .keymap import join_keys


def normalize_group_key(raw: str) -> str:
    """Normalize a configured group key to the joined key string.

    Keys may be written joined (``"<leader>c"``) or whitespace separated
    (``"<leader> c"``).
    """
    return "".join(raw.split())


class GroupResolver:
    """Resolves group labels using the exact-depth-one rule."""

    def __init__(self, groups: Mapping[Any, Any] | None = None) -> None:
        candidates: dict[str, dict[str, str]] = {}
        for raw_key, label in (groups or {}).items():
            if not isinstance(raw_key, str) or not isinstance(label, str):
                continue
            key = normalize_group_key(raw_key)
            if key:
                candidates.setdefault(key, {})[raw_key] = label

        self._labels: dict[str, str] = {}
        for key, by_raw_key in candidates.items():
            winner = min(by_raw_key, key=lambda k: (-len(k), k))
            if len(by_raw_key) > 1:
                names = ", ".join(f"'{k}'" for k in sorted(by_raw_key))
                report_error(f"Group keys {names} all label '{key}'; using '{winner}'")
            self._labels[key] = by_raw_key[winner]

    def __len__(self) -> int:
        return len(self._labels)

    def group_label(self, sequence: Sequence[str], prefix: Sequence[str]) -> str | None:
        """Get the group label for a candidate sequence under the typed prefix.

        Args:
            sequence: The candidate binding's full key sequence.
            prefix: The keys typed so far.

        Returns:
            The label of the group whose key is prefix plus the candidate's
            next key, or None.
        """
        depth = len(prefix) + 1
        if len(sequence) < depth:
            return None
        return self._labels.get(join_keys(sequence[:depth]))
