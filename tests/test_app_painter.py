"""Tests for the markdown painter helpers in app.py (no Streamlit session needed)."""

from __future__ import annotations

import pytest

import app as app_mod
from services.text_blocks import Bold, Code, Link, Plain, parse_inline


class TestRunsToMarkdown:
    def test_round_trips_formatting(self):
        runs = parse_inline("**Heap** is `32GB` max, see [docs](https://elastic.co)")
        assert app_mod._runs_to_markdown(runs) == "**Heap** is `32GB` max, see [docs ↗](https://elastic.co)"

    def test_plain_text_escaped(self):
        assert app_mod._runs_to_markdown((Plain("a*b_c #1"),)) == r"a\*b\_c \#1"

    def test_empty_bold_dropped(self):
        assert app_mod._runs_to_markdown((Bold(""), Code("x"))) == "`x`"

    def test_link_label_escaped(self):
        assert app_mod._runs_to_markdown((Link("[x]", "u"),)) == r"[\[x\] ↗](u)"

    def test_unknown_run_rejected(self):
        with pytest.raises(TypeError):
            app_mod._runs_to_markdown(("raw string",))  # type: ignore[arg-type]


class TestViewMode:
    def test_labels_unique(self):
        labels = [v.value for v in app_mod.ViewMode]
        assert len(labels) == len(set(labels))

    def test_navigation_offers_only_pages_with_views(self):
        assert app_mod.NAV_OPTIONS == [
            "Learning Path", "AI Tutor", "Architecture Sandbox", "Mock Interview", "Quiz",
        ]
        assert "Flashcards" not in app_mod.NAV_OPTIONS

    def test_every_node_type_has_icon_and_color(self):
        from config import NODE_TYPE_COLORS
        from services.architecture_service import NodeType

        for node_type in NodeType:
            assert node_type in app_mod.NODE_ICONS
            assert node_type.value in NODE_TYPE_COLORS
