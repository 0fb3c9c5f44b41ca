"""Tests for the markdown-subset renderer (pure, no API calls)."""

from __future__ import annotations

import pytest

from services.text_blocks import (
    Blank,
    Bold,
    Callout,
    Code,
    CodeOrDiagramLine,
    Heading,
    Link,
    ListItem,
    Paragraph,
    Plain,
    parse_inline,
    render,
    render_chat,
    render_module,
    runs_to_text,
)


# ──────────────────────────────────────────────────────────────
# parse_inline
# ──────────────────────────────────────────────────────────────

class TestParseInline:
    def test_plain_text_single_run(self):
        assert parse_inline("just words") == (Plain("just words"),)

    def test_empty_string_no_runs(self):
        assert parse_inline("") == ()

    def test_bold_then_code(self):
        assert parse_inline("**bold** and `code`") == (Bold("bold"), Plain(" and "), Code("code"))

    def test_link_only(self):
        assert parse_inline("[Google](https://x)") == (Link("Google", "https://x"),)

    def test_link_in_sentence(self):
        runs = parse_inline("See [Docs](https://elastic.co/docs) now")
        assert runs == (Plain("See "), Link("Docs", "https://elastic.co/docs"), Plain(" now"))

    def test_stray_backtick_is_plain(self):
        assert parse_inline("a ` b") == (Plain("a ` b"),)

    def test_empty_backticks_not_code(self):
        assert parse_inline("``") == (Plain("``"),)

    def test_unclosed_bold_is_plain(self):
        assert parse_inline("**never closed") == (Plain("**never closed"),)

    def test_incomplete_link_is_plain(self):
        assert parse_inline("[label] (not a link)") == (Plain("[label] (not a link)"),)

    def test_leftmost_span_wins(self):
        # the code span opens first, so the asterisks inside it stay literal
        assert parse_inline("`a **b**` c") == (Code("a **b**"), Plain(" c"))

    def test_spans_do_not_overlap(self):
        runs = parse_inline("**x** `y` [z](u)")
        assert runs == (Bold("x"), Plain(" "), Code("y"), Plain(" "), Link("z", "u"))

    def test_adjacent_spans_have_no_empty_plain(self):
        assert parse_inline("`a``b`") == (Code("a"), Code("b"))

    def test_link_label_extends_to_first_close_paren_marker(self):
        assert parse_inline("[a] b [c](d)") == (Link("a] b [c", "d"),)


# ──────────────────────────────────────────────────────────────
# render — module ruleset
# ──────────────────────────────────────────────────────────────

class TestRenderModule:
    def test_plain_lines_and_blanks(self):
        blocks = render_module("first\n\nsecond")
        assert blocks == [Paragraph((Plain("first"),)), Blank(), Paragraph((Plain("second"),))]

    def test_heading_level_one(self):
        assert render_module("# Title") == [Heading(1, (Plain("Title"),))]

    @pytest.mark.parametrize("line, level", [("## Two", 2), ("### Three", 3), ("#### Four", 3)])
    def test_heading_levels_capped(self, line, level):
        (block,) = render_module(line)
        assert isinstance(block, Heading)
        assert block.level == level

    def test_heading_beats_diagram(self):
        (block,) = render_module("## Nodes | Shards")
        assert isinstance(block, Heading)

    @pytest.mark.parametrize("line", ["###", "# ", "##   "])
    def test_hashes_only_is_paragraph(self, line):
        assert render_module(line) == [Paragraph((Plain(line),))]

    def test_heading_without_space(self):
        assert render_module("#Title") == [Heading(1, (Plain("Title"),))]

    def test_indented_hash_is_not_heading(self):
        (block,) = render_module("  # not a heading")
        assert isinstance(block, Paragraph)

    def test_callout(self):
        (block,) = render_module("> **Tip:** keep shards small")
        assert block == Callout((Bold("Tip:"), Plain(" keep shards small")))
        assert block.kind == "tip"

    def test_diagram_markers(self):
        blocks = render_module("+--+\n| a |\nA --> B")
        assert blocks == [
            CodeOrDiagramLine("+--+"),
            CodeOrDiagramLine("| a |"),
            CodeOrDiagramLine("A --> B"),
        ]

    def test_fence_line_backticks_stripped(self):
        assert render_module("```json") == [CodeOrDiagramLine("json")]

    def test_diagram_line_not_inline_resolved(self):
        assert render_module("| **x** |") == [CodeOrDiagramLine("| **x** |")]

    def test_list_marker_inside_diagram_is_literal(self):
        assert render_module("- a | b") == [CodeOrDiagramLine("- a | b")]

    def test_bullets(self):
        blocks = render_module("- `node.roles`  \n• Beats")
        assert blocks == [ListItem(None, (Code("node.roles"),)), ListItem(None, (Plain("Beats"),))]

    def test_numbered_item(self):
        assert render_module("  12. Size the heap") == [ListItem(12, (Plain("Size the heap"),))]

    def test_interior_whitespace_preserved(self):
        assert render_module("- a   b") == [ListItem(None, (Plain("a   b"),))]

    def test_number_without_period_is_paragraph(self):
        (block,) = render_module("2024 was big")
        assert isinstance(block, Paragraph)

    def test_whitespace_only_line_is_blank(self):
        assert render_module("   ") == [Blank()]

    def test_default_ruleset_is_module(self):
        assert render("# T") == render_module("# T")

    def test_unknown_ruleset_rejected(self):
        with pytest.raises(ValueError):
            render("x", "html")  # type: ignore[arg-type]


# ──────────────────────────────────────────────────────────────
# render — chat ruleset
# ──────────────────────────────────────────────────────────────

class TestRenderChat:
    def test_heading_falls_through_to_paragraph(self):
        assert render_chat("# Title") == [Paragraph((Plain("# Title"),))]

    def test_three_space_indent_is_code(self):
        assert render_chat("   GET _cluster/health") == [CodeOrDiagramLine("   GET _cluster/health")]

    def test_backticks_kept_verbatim(self):
        assert render_chat("a | `b`") == [CodeOrDiagramLine("a | `b`")]

    def test_no_list_support(self):
        assert render_chat("- item") == [Paragraph((Plain("- item"),))]

    def test_callout(self):
        assert render_chat(" > Prove it.") == [Callout((Plain("Prove it."),))]

    def test_empty_line_blank(self):
        assert render_chat("") == [Blank()]


# ──────────────────────────────────────────────────────────────
# Properties
# ──────────────────────────────────────────────────────────────

class TestRenderProperties:
    def test_one_block_per_line(self):
        text = "# H\n- a\n1. b\n> tip\n| x |\n\nplain"
        assert len(render_module(text)) == len(text.split("\n"))

    def test_no_cross_line_state(self):
        first = "**open\n`code`"
        second = "close**\n[a](b)"
        assert render_module(first + "\n\n" + second) == (
            render_module(first) + [Blank()] + render_module(second)
        )

    def test_deterministic(self):
        text = "## Shards\n> keep them 20-50GB"
        assert render_module(text) == render_module(text)

    def test_runs_to_text(self):
        runs = parse_inline("**Heap** < `32GB` see [docs](u)")
        assert runs_to_text(runs) == "Heap < 32GB see docs"
