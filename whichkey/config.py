"""Configuration management for whichkey.

Settings live in a JSON file under the config directory. The which-key
options are read from its "whichkey" object into a WhichKeyConfig; invalid
values fall back to defaults instead of failing.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .core.errors import report_error

CONFIG_DIR = Path(os.environ.get("WHICHKEY_CONFIG_DIR") or Path.home() / ".whichkey").expanduser()
SETTINGS_PATH = CONFIG_DIR / "settings.json"
KEYMAP_DIR = CONFIG_DIR / "keymaps"

WHICHKEY_SETTINGS_KEY = "whichkey"
DEFAULT_DELAY_MS = 200
DEFAULT_SEQUENCE_TIMEOUT_MS = 1000


@dataclass
class WhichKeyConfig:
    """Options for the disclosure engine."""

    enabled: bool = True
    delay_ms: int = DEFAULT_DELAY_MS
    groups: dict[str, str] = field(default_factory=dict)
    repeat_trigger_enabled: bool = True
    leader: str = "space"            # Key that produces the <leader> token
    sequence_timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS

    @property
    def delay_seconds(self) -> float:
        return max(0, self.delay_ms) / 1000

    @property
    def sequence_timeout_seconds(self) -> float:
        return max(0, self.sequence_timeout_ms) / 1000

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> WhichKeyConfig:
        """Build a config from a settings dictionary.

        Args:
            settings: Settings dictionary, which-key options under "whichkey".

        Returns:
            WhichKeyConfig with malformed values replaced by defaults.
        """
        config = cls()
        data = settings.get(WHICHKEY_SETTINGS_KEY) if isinstance(settings, dict) else None
        if not isinstance(data, dict):
            return config

        enabled = data.get("enable", data.get("enabled"))
        if isinstance(enabled, bool):
            config.enabled = enabled

        delay = data.get("delay")
        if isinstance(delay, (int, float)) and not isinstance(delay, bool):
            config.delay_ms = max(0, int(delay))

        groups = data.get("groups")
        if isinstance(groups, dict):
            config.groups = {
                key: label
                for key, label in groups.items()
                if isinstance(key, str) and isinstance(label, str)
            }

        repeat = data.get("repeatTrigger", data.get("repeat_trigger_enabled"))
        if isinstance(repeat, bool):
            config.repeat_trigger_enabled = repeat

        leader = data.get("leader")
        if isinstance(leader, str) and leader:
            config.leader = leader

        timeout = data.get("timeout")
        if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
            config.sequence_timeout_ms = max(0, int(timeout))

        return config

    def to_settings(self) -> dict[str, Any]:
        """Serialize to the settings "whichkey" object."""
        return {
            "enable": self.enabled,
            "delay": self.delay_ms,
            "groups": dict(self.groups),
            "repeatTrigger": self.repeat_trigger_enabled,
            "leader": self.leader,
            "timeout": self.sequence_timeout_ms,
        }


class SettingsStoreProtocol(Protocol):
    """Anything that can load and save the settings dictionary."""

    def load_all(self) -> dict:
        ...

    def save_all(self, settings: dict) -> None:
        ...


class SettingsStore:
    """JSON file backed settings store."""

    _instance: SettingsStore | None = None

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or SETTINGS_PATH

    @classmethod
    def get_instance(cls) -> SettingsStore:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_all(self) -> dict:
        """Load all settings, or an empty dict if the file is missing or invalid."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            report_error(f"Failed to read settings {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def save_all(self, settings: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(settings, indent=2), encoding="utf-8")


def load_settings() -> dict:
    """Load settings from the default settings file."""
    return SettingsStore.get_instance().load_all()


def save_settings(settings: dict) -> None:
    """Save settings to the default settings file."""
    SettingsStore.get_instance().save_all(settings)


def load_whichkey_config(settings_store: SettingsStoreProtocol | None = None) -> WhichKeyConfig:
    """Load the which-key options from settings."""
    store = settings_store or SettingsStore.get_instance()
    return WhichKeyConfig.from_settings(store.load_all())
