"""Tests for completion presenters."""

from __future__ import annotations

import io

from whichkey.core.completion import CompletionEntry
from whichkey.ui.presenter import BOX_WIDTH, StreamPresenter, format_disclosure, format_entry


class TestFormatDisclosure:
    def test_box_layout(self):
        entries = [
            CompletionEntry("f", "Find Files"),
            CompletionEntry("r", "Recent Files"),
            CompletionEntry("w…", "Windows", "Windows"),
        ]

        lines = format_disclosure('Which-key: After "<leader>"', entries)

        assert lines[0].startswith("╔") and lines[0].endswith("╗")
        assert 'Which-key: After "<leader>"' in lines[1]
        # Two entries per row
        assert "Find Files" in lines[3] and "Recent Files" in lines[3]
        assert "Windows" in lines[4]
        assert lines[5].startswith("╚")
        assert all(len(line) == BOX_WIDTH for line in lines[:6])

    def test_long_description_is_cut(self):
        entry = CompletionEntry("x", "d" * 80)

        assert format_entry(entry).count("d") == 45

    def test_group_prefix_shown_for_member_entries(self):
        assert "[Code] Comment" in format_entry(CompletionEntry("c", "Comment", "Code"))
        assert "[Code]" not in format_entry(CompletionEntry("c…", "Code", "Code"))


class TestStreamPresenter:
    def test_render_writes_and_clear_hides(self):
        stream = io.StringIO()
        presenter = StreamPresenter(stream)

        presenter.render("Which-key: After \"g\"", [CompletionEntry("g", "Top")])

        assert presenter.visible
        assert "Top" in stream.getvalue()

        presenter.clear()
        assert not presenter.visible

    def test_clear_writes_nothing(self):
        stream = io.StringIO()
        presenter = StreamPresenter(stream)
        presenter.render("Which-key: After \"g\"", [CompletionEntry("g", "Top")])
        written = stream.getvalue()

        presenter.clear()
        presenter.clear()

        assert stream.getvalue() == written
