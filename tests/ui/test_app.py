"""Integration tests driving the textual demo app."""

from __future__ import annotations

import pytest

from conftest import make_binding, make_keymap
from whichkey.app import WhichKeyApp
from whichkey.config import WhichKeyConfig
from whichkey.core.keymap import LabelAction, Mode


def build_app(**options) -> WhichKeyApp:
    keymap = make_keymap(
        [
            make_binding("<leader>", "f", "f", label="Find Files"),
            make_binding("<leader>", "f", "r", label="Recent Files", repeatable=True),
        ]
    )
    config = WhichKeyConfig(delay_ms=0, **options)
    return WhichKeyApp(config=config, keymap=keymap)


@pytest.mark.asyncio
async def test_panel_shows_completions_without_focus():
    app = build_app()
    async with app.run_test() as pilot:
        await pilot.press("space", "f")
        await pilot.pause(0.2)

        panel = app.which_key_panel
        assert panel.display
        assert [e.label for e in panel.entries] == ["f", "r"]
        assert app.focused is not panel


@pytest.mark.asyncio
async def test_completing_sequence_runs_and_hides_panel():
    app = build_app()
    async with app.run_test() as pilot:
        await pilot.press("space", "f")
        await pilot.pause(0.2)
        await pilot.press("r")
        await pilot.pause()

        assert app.executed == [LabelAction("Recent Files")]
        assert not app.which_key_panel.display

        await pilot.press("space", "space")
        await pilot.pause()

        assert app.executed == [LabelAction("Recent Files"), LabelAction("Recent Files")]


@pytest.mark.asyncio
async def test_disabled_panel_stays_hidden():
    app = build_app(enabled=False)
    async with app.run_test() as pilot:
        await pilot.press("space", "f")
        await pilot.pause(0.2)

        assert not app.which_key_panel.display
        assert app.host.pending == ("<leader>", "f")
        assert app.editor_mode == Mode.NORMAL
