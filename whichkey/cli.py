#!/usr/bin/env python3
"""whichkey - discover multi-key bindings as you type."""

from __future__ import annotations

import argparse
import locale
import sys
from pathlib import Path

from .config import SettingsStore, WhichKeyConfig
from .core.errors import KeymapError, report_error
from .core.keymap_manager import KeymapManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whichkey",
        description="Show which multi-key bindings can complete the keys typed so far",
    )
    parser.add_argument(
        "--keymap",
        metavar="PATH",
        help="Keymap JSON file (default: the keymap named in settings)",
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings JSON file (default: ~/.whichkey/settings.json)",
    )
    parser.add_argument(
        "--delay",
        type=int,
        metavar="MS",
        help="Delay before showing completions, in milliseconds",
    )
    parser.add_argument(
        "--disable",
        action="store_true",
        help="Disable the completion panel",
    )
    parser.add_argument(
        "--no-repeat",
        action="store_true",
        help="Disable the <leader><leader> repeat trigger",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        report_error(f"Using default collation: {exc}")

    store = SettingsStore(Path(args.settings).expanduser()) if args.settings else SettingsStore.get_instance()
    manager = KeymapManager(settings_store=store)
    settings = manager.initialize()

    if args.keymap:
        try:
            manager.load_file(Path(args.keymap))
        except KeymapError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    config = WhichKeyConfig.from_settings(settings)
    if args.delay is not None:
        if args.delay < 0:
            print("Error: --delay must not be negative", file=sys.stderr)
            return 1
        config.delay_ms = args.delay
    if args.disable:
        config.enabled = False
    if args.no_repeat:
        config.repeat_trigger_enabled = False

    from .app import WhichKeyApp

    WhichKeyApp(config=config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
