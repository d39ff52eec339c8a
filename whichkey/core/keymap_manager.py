"""Keymap management utilities for whichkey."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import KeymapError, report_error
from .keymap import (
    ActionSummary,
    Binding,
    CommandsAction,
    KeymapProvider,
    KeymapTable,
    KeysAction,
    LabelAction,
    StaticKeymapProvider,
    reset_keymap,
    set_keymap,
)

if TYPE_CHECKING:
    from ..config import SettingsStoreProtocol

KEYMAP_SETTINGS_KEY = "keymap"
BINDING_FIELDS = {"before", "label", "commands", "after", "repeatable"}


class FileBasedKeymapProvider(StaticKeymapProvider):
    """Keymap provider loaded from a JSON file."""

    def __init__(
        self,
        name: str,
        tables: dict[KeymapTable, list[Binding]],
        path: Path | None = None,
    ):
        super().__init__(name, tables)
        self.path = path


class KeymapManager:
    """Loads the user keymap named in settings and installs it globally."""

    def __init__(
        self,
        settings_store: SettingsStoreProtocol | None = None,
        keymap_dir: Path | None = None,
    ) -> None:
        from ..config import KEYMAP_DIR, SettingsStore

        self._settings_store = settings_store or SettingsStore.get_instance()
        self._keymap_dir = keymap_dir or KEYMAP_DIR
        self._keymap_name: str | None = None
        self._keymap_path: Path | None = None

    def initialize(self) -> dict:
        """Initialize keymap from settings.

        Returns:
            The loaded settings dictionary.
        """
        settings = self._settings_store.load_all()
        self.load_keymap(settings)
        return settings

    def load_keymap(self, settings: dict) -> None:
        """Load the keymap named by settings["keymap"], if any.

        Failures are reported and leave the current keymap in place.
        """
        keymap_name = settings.get(KEYMAP_SETTINGS_KEY)
        if not keymap_name or not isinstance(keymap_name, str):
            return
        if keymap_name.strip() in ("", "default"):
            return

        try:
            path = self._resolve_keymap_path(keymap_name.strip())
            self.load_file(path, keymap_name.strip())
        except KeymapError as exc:
            report_error(f"Failed to load keymap '{keymap_name}': {exc}")

    def load_file(self, path: Path, keymap_name: str | None = None) -> KeymapProvider:
        """Load and install a keymap from a JSON file.

        Raises:
            KeymapError: If the file is missing or invalid.
        """
        path = path.expanduser()
        if not path.exists():
            raise KeymapError(f"Keymap file not found: {path}")

        name = keymap_name or path.stem
        keymap = load_keymap_file(path, name)
        set_keymap(keymap)
        self._keymap_name = name
        self._keymap_path = path.resolve()
        return keymap

    def _resolve_keymap_path(self, keymap_name: str) -> Path:
        """Resolve a keymap name to a file path.

        Absolute and ~ paths are used as given; bare names are looked up as
        <name>.json in the keymap directory.
        """
        if keymap_name.startswith(("~", "/")) or Path(keymap_name).is_absolute():
            return Path(keymap_name).expanduser()

        name = Path(keymap_name).stem
        return self._keymap_dir / f"{name}.json"

    def get_keymap_name(self) -> str | None:
        """Get the name of the loaded keymap, or None for the default."""
        return self._keymap_name

    def get_keymap_path(self) -> Path | None:
        """Get the path of the loaded keymap file, or None for the default."""
        return self._keymap_path

    def reset_to_default(self) -> None:
        """Reset to the default (empty) keymap."""
        reset_keymap()
        self._keymap_name = None
        self._keymap_path = None


def load_keymap_file(path: Path, name: str) -> FileBasedKeymapProvider:
    """Read a keymap JSON file.

    Raises:
        KeymapError: If the file cannot be read or is structurally invalid.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:
        raise KeymapError(f"Failed to read keymap JSON: {exc}") from exc
    provider = parse_keymap(payload, name)
    provider.path = path
    return provider


def parse_keymap(payload: Any, name: str) -> FileBasedKeymapProvider:
    """Parse a keymap document.

    The document maps table names ("normal", "insert", "visual",
    "operator_pending") to lists of binding objects, optionally wrapped in a
    "keymap" object. Malformed bindings are skipped with a warning.

    Raises:
        KeymapError: If the document or a table is not the expected type.
    """
    if not isinstance(payload, dict):
        raise KeymapError("Keymap file must contain a JSON object.")

    keymap_data = payload.get("keymap", payload)
    if not isinstance(keymap_data, dict):
        raise KeymapError('Keymap file "keymap" must be a JSON object.')

    tables: dict[KeymapTable, list[Binding]] = {}
    for table in KeymapTable:
        data = keymap_data.get(table.value, [])
        if not isinstance(data, list):
            raise KeymapError(f'"{table.value}" must be a list.')
        tables[table] = _parse_bindings(table.value, data)

    return FileBasedKeymapProvider(name, tables)


def _parse_bindings(table_name: str, data: list[Any]) -> list[Binding]:
    bindings = []
    for i, item in enumerate(data):
        try:
            bindings.append(parse_binding(item))
        except KeymapError as exc:
            report_error(f"Skipping {table_name} binding at index {i}: {exc}")
    return bindings


def parse_binding(item: Any) -> Binding:
    """Parse one binding object.

    Raises:
        KeymapError: If the binding is invalid.
    """
    if not isinstance(item, dict):
        raise KeymapError("binding must be an object")

    before = item.get("before")
    if not isinstance(before, list) or not before or not all(
        isinstance(key, str) and key for key in before
    ):
        raise KeymapError('"before" must be a non-empty list of keys')

    label = item.get("label")
    if label is not None and not isinstance(label, str):
        raise KeymapError('"label" must be a string')

    repeatable = item.get("repeatable", False)
    if not isinstance(repeatable, bool):
        raise KeymapError('"repeatable" must be a boolean')

    return Binding(
        sequence=tuple(before),
        action=_parse_action(item, label),
        label=label or None,
        repeatable=repeatable,
    )


def _parse_action(item: dict, label: str | None) -> ActionSummary | None:
    commands = item.get("commands")
    if isinstance(commands, list) and commands:
        return CommandsAction(tuple(commands))
    if isinstance(commands, str) and commands:
        return CommandsAction((commands,))

    after = item.get("after")
    if isinstance(after, list) and after and all(isinstance(key, str) for key in after):
        return KeysAction(tuple(after))

    if label:
        return LabelAction(label)
    return None
