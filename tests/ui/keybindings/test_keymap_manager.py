"""Tests for the KeymapManager."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from whichkey.core.errors import KeymapError
from whichkey.core.keymap import (
    CommandsAction,
    KeymapTable,
    KeysAction,
    LabelAction,
    Mode,
    get_keymap,
)
from whichkey.core.keymap_manager import KeymapManager, parse_binding, parse_keymap


class MockSettingsStore:
    """Mock settings store for testing."""

    def __init__(self, settings: dict | None = None):
        self.settings = settings or {}

    def load_all(self) -> dict:
        return self.settings

    def save_all(self, settings: dict) -> None:
        self.settings = settings


def write_keymap(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


KEYMAP_DATA = {
    "keymap": {
        "normal": [
            {"before": ["<leader>", "f", "f"], "commands": ["workbench.action.quickOpen"]},
            {"before": ["<leader>", "w", "v"], "label": "Vertical Split", "repeatable": True},
        ],
        "visual": [
            {"before": ["<leader>", "y"], "after": ["\"", "+", "y"]},
        ],
    }
}


class TestKeymapManager:
    """Test the KeymapManager class."""

    def test_initialize_with_no_keymap(self, tmp_path: Path):
        """Should keep the default keymap when none is specified."""
        manager = KeymapManager(settings_store=MockSettingsStore({}), keymap_dir=tmp_path)

        settings = manager.initialize()

        assert settings == {}
        assert manager.get_keymap_name() is None
        assert manager.get_keymap_path() is None
        assert get_keymap().get_bindings(Mode.NORMAL) == []

    def test_initialize_with_default_keymap_setting(self, tmp_path: Path):
        manager = KeymapManager(
            settings_store=MockSettingsStore({"keymap": "default"}), keymap_dir=tmp_path
        )

        manager.initialize()

        assert manager.get_keymap_name() is None

    def test_load_keymap_from_absolute_path(self, tmp_path: Path):
        keymap_file = write_keymap(tmp_path / "mine.json", KEYMAP_DATA)
        manager = KeymapManager(
            settings_store=MockSettingsStore({"keymap": str(keymap_file)}), keymap_dir=tmp_path
        )

        manager.initialize()

        assert manager.get_keymap_name() == str(keymap_file)
        assert manager.get_keymap_path() == keymap_file.resolve()

        normal = get_keymap().get_bindings(Mode.NORMAL)
        assert [b.sequence for b in normal] == [("<leader>", "f", "f"), ("<leader>", "w", "v")]
        assert normal[0].action == CommandsAction(("workbench.action.quickOpen",))
        assert normal[1].action == LabelAction("Vertical Split")
        assert normal[1].repeatable is True

        visual = get_keymap().get_bindings(Mode.VISUAL_LINE)
        assert visual[0].action == KeysAction(("\"", "+", "y"))

    def test_load_keymap_by_name(self, tmp_path: Path):
        write_keymap(tmp_path / "vimlike.json", KEYMAP_DATA)
        manager = KeymapManager(
            settings_store=MockSettingsStore({"keymap": "vimlike"}), keymap_dir=tmp_path
        )

        manager.initialize()

        assert manager.get_keymap_path() == (tmp_path / "vimlike.json").resolve()
        assert get_keymap().name == "vimlike"

    def test_load_keymap_with_invalid_json(self, tmp_path: Path, capsys):
        """Should handle invalid JSON gracefully."""
        keymap_file = tmp_path / "invalid.json"
        keymap_file.write_text("not valid json", encoding="utf-8")
        manager = KeymapManager(
            settings_store=MockSettingsStore({"keymap": str(keymap_file)}), keymap_dir=tmp_path
        )

        manager.initialize()

        captured = capsys.readouterr()
        assert "Failed to load keymap" in captured.err
        assert manager.get_keymap_name() is None

    def test_load_keymap_with_missing_file(self, tmp_path: Path, capsys):
        manager = KeymapManager(
            settings_store=MockSettingsStore({"keymap": str(tmp_path / "nope.json")}),
            keymap_dir=tmp_path,
        )

        manager.initialize()

        assert "Keymap file not found" in capsys.readouterr().err
        assert manager.get_keymap_name() is None

    def test_malformed_binding_is_skipped(self, tmp_path: Path, capsys):
        keymap_file = write_keymap(
            tmp_path / "partial.json",
            {
                "normal": [
                    {"before": []},
                    {"before": ["g", "g"], "label": "Top"},
                    "not an object",
                ]
            },
        )
        manager = KeymapManager(settings_store=MockSettingsStore({}), keymap_dir=tmp_path)

        manager.load_file(keymap_file)

        assert [b.sequence for b in get_keymap().get_bindings(Mode.NORMAL)] == [("g", "g")]
        err = capsys.readouterr().err
        assert "Skipping normal binding at index 0" in err
        assert "Skipping normal binding at index 2" in err

    def test_reset_to_default(self, tmp_path: Path):
        keymap_file = write_keymap(tmp_path / "mine.json", KEYMAP_DATA)
        manager = KeymapManager(settings_store=MockSettingsStore({}), keymap_dir=tmp_path)
        manager.load_file(keymap_file)

        manager.reset_to_default()

        assert manager.get_keymap_name() is None
        assert get_keymap().get_bindings(Mode.NORMAL) == []


class TestParseKeymap:
    def test_rejects_non_object(self):
        with pytest.raises(KeymapError, match="JSON object"):
            parse_keymap([], "bad")

    def test_rejects_non_list_table(self):
        with pytest.raises(KeymapError, match='"insert" must be a list'):
            parse_keymap({"insert": {}}, "bad")

    def test_missing_tables_are_empty(self):
        provider = parse_keymap({}, "empty")

        assert all(provider.get_table(table) == [] for table in KeymapTable)

    def test_binding_without_action(self):
        binding = parse_binding({"before": ["<leader>", "z"]})

        assert binding.action is None
        assert binding.label is None

    def test_commands_take_priority_over_after(self):
        binding = parse_binding(
            {"before": ["x", "y"], "commands": [{"command": "a.b"}], "after": ["d", "d"]}
        )

        assert binding.action == CommandsAction(({"command": "a.b"},))

    @pytest.mark.parametrize(
        "item",
        [
            {"before": "gg"},
            {"before": ["g", 1]},
            {"before": ["g"], "label": 3},
            {"before": ["g"], "repeatable": "yes"},
        ],
    )
    def test_invalid_binding(self, item):
        with pytest.raises(KeymapError):
            parse_binding(item)
