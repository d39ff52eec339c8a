"""Error types and stderr reporting."""

from __future__ import annotations

import sys


class KeymapError(ValueError):
    """Raised when a keymap document is structurally invalid."""


def report_error(message: str) -> None:
    """Report a recoverable failure without interrupting the caller."""
    print(f"[whichkey] {message}", file=sys.stderr)
