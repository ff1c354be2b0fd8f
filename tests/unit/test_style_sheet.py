#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for text styles, themes and style sheets."""

import pytest

from mdview.constants import DEFAULT_FONT_SIZE, SCRIPT_SCALE, SUBSCRIPT_BASELINE_SHIFT, SUPERSCRIPT_BASELINE_SHIFT
from mdview.style import BlockStyle, StyleSheet, TextStyle, Theme


@pytest.mark.unit
class TestTextStyle:
    """Tests for style merging."""

    def test_merge_overrides_non_none_fields(self):
        base = TextStyle(font_size=14.0, color="#000000")
        merged = base.merge(TextStyle(color="#ff0000"))
        assert merged == TextStyle(font_size=14.0, color="#ff0000")

    def test_merge_none_returns_self(self):
        base = TextStyle(font_size=14.0)
        assert base.merge(None) is base

    def test_merge_empty_style_returns_self(self):
        base = TextStyle(font_size=14.0)
        assert base.merge(TextStyle()) is base


@pytest.mark.unit
class TestStyleSheet:
    """Tests for per-tag style lookup."""

    def test_from_theme_covers_parser_tags(self, style_sheet):
        for tag in ["p", "em", "strong", "del", "a", "code", "sub", "sup", "h1", "h6", "th", "td", "li"]:
            assert style_sheet.style_for(tag) is not None, tag

    def test_unknown_tag(self, style_sheet):
        assert style_sheet.style_for("marquee") is None
        assert style_sheet.block_style_for("marquee") is None

    def test_script_styles(self, style_sheet):
        sub = style_sheet.base.merge(style_sheet.style_for("sub"))
        sup = style_sheet.base.merge(style_sheet.style_for("sup"))
        assert sub.baseline_shift == SUBSCRIPT_BASELINE_SHIFT
        assert sup.baseline_shift == SUPERSCRIPT_BASELINE_SHIFT
        assert sub.font_size == pytest.approx(DEFAULT_FONT_SIZE * SCRIPT_SCALE)

    def test_theme_font_size_scales_headings(self):
        small = StyleSheet.from_theme(Theme(font_size=10.0))
        large = StyleSheet.from_theme(Theme(font_size=20.0))
        assert large.style_for("h1").font_size == pytest.approx(2 * small.style_for("h1").font_size)

    def test_value_equality(self):
        assert StyleSheet.from_theme() == StyleSheet.from_theme()
        assert StyleSheet.from_theme() != StyleSheet.from_theme(Theme(font_size=20.0))

    def test_equal_sheets_hash_equal(self):
        assert hash(StyleSheet.from_theme()) == hash(StyleSheet.from_theme())
        cache = {StyleSheet.from_theme(): "default"}
        assert cache[StyleSheet.from_theme()] == "default"

    def test_usable_in_sets(self):
        sheets = {StyleSheet.from_theme(), StyleSheet.from_theme(), StyleSheet.from_theme(Theme(font_size=20.0))}
        assert len(sheets) == 2

    def test_mappings_read_only(self, style_sheet):
        with pytest.raises(TypeError):
            style_sheet.text_styles["p"] = TextStyle()

    def test_code_style_merges_base(self, style_sheet):
        assert style_sheet.code.font_family == "monospace"
        assert style_sheet.code.color == style_sheet.base.color

    def test_copy_with_merges_mappings(self, style_sheet):
        custom = style_sheet.copy_with(text_styles={"mark": TextStyle(background_color="#ffff00")})
        assert custom.style_for("mark").background_color == "#ffff00"
        assert custom.style_for("p") == style_sheet.style_for("p")
        assert style_sheet.style_for("mark") is None

    def test_caller_mapping_is_copied(self):
        styles = {"p": TextStyle(font_size=12.0)}
        sheet = StyleSheet(text_styles=styles)
        styles["p"] = TextStyle(font_size=99.0)
        assert sheet.base.font_size == 12.0

    def test_base_defaults_to_empty_style(self):
        assert StyleSheet().base == TextStyle()

    def test_block_styles(self, style_sheet):
        assert isinstance(style_sheet.block_style_for("pre"), BlockStyle)
        assert style_sheet.block_style_for("table").border_width == 1.0


@pytest.mark.unit
class TestValidation:
    """Tests for invalid style values."""

    def test_non_positive_font_size(self):
        with pytest.raises(ValueError):
            Theme(font_size=0)

    def test_negative_list_indent(self):
        with pytest.raises(ValueError):
            StyleSheet(list_indent=-1.0)
