#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the pygments syntax highlighter."""

import sys

import pytest

from mdview.exceptions import DependencyError
from mdview.render.highlight import PygmentsHighlighter

pytest.importorskip("pygments")


@pytest.mark.unit
class TestPygmentsHighlighter:
    """Tests for token spans produced by pygments."""

    def test_text_preserved(self):
        span = PygmentsHighlighter(language="python").format("x = 1")
        assert span.to_plain_text() == "x = 1"

    def test_tokens_styled(self):
        span = PygmentsHighlighter(language="python").format("def f():\n    return 1")
        assert len(span.children) > 1
        assert any(child.style.color for child in span.children)

    def test_root_span_uses_code_font(self):
        span = PygmentsHighlighter(language="python", font_family="Fira Code").format("x")
        assert span.style.font_family == "Fira Code"

    def test_trailing_newline_kept_when_present(self):
        assert PygmentsHighlighter(language="python").format("x\n").to_plain_text() == "x\n"

    def test_unknown_language_falls_back_to_plain_text(self):
        span = PygmentsHighlighter(language="no-such-language").format("a < b")
        assert span.to_plain_text() == "a < b"

    def test_adjacent_tokens_with_same_style_merged(self):
        span = PygmentsHighlighter(language="text").format("plain words only")
        assert len(span.children) == 1

    def test_missing_pygments(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pygments", None)
        with pytest.raises(DependencyError) as exc_info:
            PygmentsHighlighter(language="python").format("x")
        assert exc_info.value.component == "highlight"
