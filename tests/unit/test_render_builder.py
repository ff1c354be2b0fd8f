#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the render tree builder."""

import pytest
from utils import MINIMAL_PNG_BYTES, MINIMAL_PNG_DATA_URI, find_nodes, plain_texts, text_spans

from mdview.ast import Element, Text
from mdview.constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_IMAGE_ERROR_TEXT,
    DEFAULT_IMAGE_PLACEHOLDER_TEXT,
    SCRIPT_SCALE,
    SUBSCRIPT_BASELINE_SHIFT,
)
from mdview.exceptions import ValidationError
from mdview.options import RenderOptions
from mdview.parsers import parse_markdown
from mdview.render import (
    BlockContainer,
    DefaultBuilderDelegate,
    Divider,
    ImageView,
    ListItemView,
    RenderTreeBuilder,
    RichText,
    TableView,
    TextSpan,
    build_render_tree,
)


class FakeHighlighter:
    """Highlighter recording its input."""

    def __init__(self):
        self.calls = []

    def format(self, source):
        self.calls.append(source)
        return TextSpan(text=source.upper())


class RecordingLoader:
    """Image loader keeping views pending for the test to resolve."""

    def __init__(self):
        self.views = []

    def load(self, view):
        self.views.append(view)


class FailingLoader:
    def load(self, view):
        raise RuntimeError("network down")


def _paragraph(*children):
    return Element("p", list(children))


@pytest.mark.unit
class TestBuildBasics:
    """Tests for block structure and preconditions."""

    def test_none_rejected(self, style_sheet):
        with pytest.raises(ValidationError):
            RenderTreeBuilder(style_sheet).build(None)

    def test_missing_style_sheet_rejected(self):
        with pytest.raises(ValidationError):
            RenderTreeBuilder(None)

    def test_empty_document(self, style_sheet):
        assert RenderTreeBuilder(style_sheet).build([]) == []

    def test_headings_and_paragraphs(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("# Title\n\nBody"))
        assert [block.tag for block in blocks] == ["h1", "p"]
        title = text_spans(blocks[0])[0]
        assert title.style.font_weight == "bold"
        assert title.style.font_size > style_sheet.base.font_size

    def test_document_order(self, style_sheet):
        nodes = [_paragraph(Text("one")), Element("hr"), _paragraph(Text("two"))]
        blocks = RenderTreeBuilder(style_sheet).build(nodes)
        assert isinstance(blocks[1], Divider)
        assert plain_texts(blocks) == ["one", "two"]

    def test_top_level_text_wrapped_in_paragraph(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build([Text("loose")])
        assert blocks == [RichText(TextSpan(style=style_sheet.base, children=[TextSpan("loose", style_sheet.base)]))]

    def test_whitespace_only_runs_dropped(self, style_sheet):
        assert RenderTreeBuilder(style_sheet).build([Text("  \n ")]) == []

    def test_idempotent(self, style_sheet, sample_markdown, scripts_options):
        nodes = parse_markdown(sample_markdown, scripts_options)
        first = RenderTreeBuilder(style_sheet).build(nodes)
        second = RenderTreeBuilder(style_sheet).build(nodes)
        assert first == second

    def test_build_render_tree_function(self, style_sheet):
        blocks = build_render_tree([_paragraph(Text("x"))], style_sheet)
        assert plain_texts(blocks) == ["x"]


@pytest.mark.unit
class TestInlineStyles:
    """Tests for style resolution of inline elements."""

    def test_subscript_span(self, style_sheet):
        nodes = [_paragraph(Text("H"), Element.text("sub", "2"), Text("O"))]
        blocks = RenderTreeBuilder(style_sheet).build(nodes)
        assert len(blocks) == 1
        spans = text_spans(blocks[0])
        assert [span.text for span in spans] == ["H", "2", "O"]
        assert spans[1].style.baseline_shift == SUBSCRIPT_BASELINE_SHIFT
        assert spans[1].style.font_size == pytest.approx(DEFAULT_FONT_SIZE * SCRIPT_SCALE)
        assert spans[0].style == spans[2].style == style_sheet.base

    def test_subscript_from_markdown(self, style_sheet, scripts_options):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("H<sub>2</sub>O", scripts_options))
        spans = text_spans(blocks[0])
        assert "".join(span.text for span in spans) == "H2O"
        sub = next(span for span in spans if span.text == "2")
        assert sub.style.baseline_shift == SUBSCRIPT_BASELINE_SHIFT

    def test_nested_styles_accumulate(self, style_sheet):
        nodes = [_paragraph(Element("strong", [Element.text("em", "both")]))]
        span = text_spans(RenderTreeBuilder(style_sheet).build(nodes)[0])[0]
        assert span.style.font_weight == "bold"
        assert span.style.font_style == "italic"

    def test_unknown_tag_inherits_style(self, style_sheet):
        nodes = [_paragraph(Element.text("strong", "a"), Element("strong", [Element.text("blink", "b")]))]
        spans = text_spans(RenderTreeBuilder(style_sheet).build(nodes)[0])
        assert spans[1].text == "b"
        assert spans[1].style == spans[0].style

    def test_unknown_block_tag_renders_children(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build([Element("aside", [Text("note")])])
        assert plain_texts(blocks) == ["note"]

    def test_inline_code(self, style_sheet):
        span = text_spans(RenderTreeBuilder(style_sheet).build([_paragraph(Element.text("code", "x"))])[0])[0]
        assert span.style.font_family == "monospace"

    def test_soft_break_becomes_space(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("a\nb"))
        assert plain_texts(blocks) == ["a b"]

    def test_custom_soft_break(self, style_sheet):
        builder = RenderTreeBuilder(style_sheet, options=RenderOptions(soft_break="\n"))
        assert plain_texts(builder.build(parse_markdown("a\nb"))) == ["a\nb"]

    def test_line_break(self, style_sheet):
        nodes = [_paragraph(Text("a"), Element("br"), Text("b"))]
        assert plain_texts(RenderTreeBuilder(style_sheet).build(nodes)) == ["a\nb"]

    def test_raw_html_kept_as_text(self, style_sheet):
        nodes = [_paragraph(Text("x"), Element.text("html", "<kbd>"))]
        assert plain_texts(RenderTreeBuilder(style_sheet).build(nodes)) == ["x<kbd>"]


@pytest.mark.unit
class TestLinks:
    """Tests for link recognizers."""

    def test_one_recognizer_per_link(self, style_sheet):
        taps = []
        delegate = DefaultBuilderDelegate(on_tap_link=taps.append)
        nodes = parse_markdown("[a](https://a.example) and [b](https://b.example)")
        blocks = RenderTreeBuilder(style_sheet, delegate).build(nodes)
        recognizers = list(blocks[0].iter_recognizers())
        assert [recognizer.href for recognizer in recognizers] == ["https://a.example", "https://b.example"]
        assert len(delegate.recognizers) == 2
        recognizers[1].tap()
        assert taps == ["https://b.example"]

    def test_link_spans_share_recognizer(self, style_sheet):
        nodes = parse_markdown("[**bold** text](https://example.com)")
        spans = text_spans(RenderTreeBuilder(style_sheet).build(nodes)[0])
        assert len(spans) == 2
        assert spans[0].recognizer is spans[1].recognizer
        assert spans[0].style.font_weight == "bold"
        assert spans[1].style.decoration == "underline"

    def test_text_outside_link_has_no_recognizer(self, style_sheet):
        nodes = parse_markdown("before [link](u) after")
        spans = text_spans(RenderTreeBuilder(style_sheet).build(nodes)[0])
        assert spans[0].recognizer is None
        assert spans[-1].recognizer is None

    def test_empty_link_creates_no_recognizer(self, style_sheet):
        delegate = DefaultBuilderDelegate()
        RenderTreeBuilder(style_sheet, delegate).build([_paragraph(Element("a", [], {"href": "u"}))])
        assert len(delegate.recognizers) == 0

    def test_whitespace_link_creates_no_recognizer(self, style_sheet):
        delegate = DefaultBuilderDelegate()
        link = Element("a", [Text(" ")], {"href": "u"})
        blocks = RenderTreeBuilder(style_sheet, delegate).build([_paragraph(link)])
        assert blocks == []
        assert len(delegate.recognizers) == 0

    def test_image_only_link_keeps_recognizer(self, style_sheet):
        delegate = DefaultBuilderDelegate()
        link = Element("a", [Element("img", [], {"src": "resource://logo", "alt": ""})], {"href": "u"})
        blocks = RenderTreeBuilder(style_sheet, delegate).build([_paragraph(link)])
        assert len(delegate.recognizers) == 1
        assert blocks[0].recognizer is list(delegate.recognizers)[0]


@pytest.mark.unit
class TestCodeBlocks:
    """Tests for ``pre`` elements."""

    def test_default_code_style(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("```\nx = 1\n```"))
        block = blocks[0]
        assert isinstance(block, BlockContainer)
        assert block.tag == "pre"
        assert block.style == style_sheet.block_style_for("pre")
        assert block.children == [RichText(TextSpan(text="x = 1", style=style_sheet.code), tag="pre")]

    def test_highlighter_output_used_verbatim(self, style_sheet):
        highlighter = FakeHighlighter()
        delegate = DefaultBuilderDelegate(syntax_highlighter=highlighter)
        blocks = RenderTreeBuilder(style_sheet, delegate).build(parse_markdown("```python\na\nb\n```"))
        assert highlighter.calls == ["a\nb"]
        assert blocks[0].children[0].span == TextSpan(text="A\nB")

    def test_code_block_keeps_newlines(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("```\na\nb\n```"))
        assert blocks[0].children[0].to_plain_text() == "a\nb"


@pytest.mark.unit
class TestLists:
    """Tests for list items, bullets and depth."""

    def test_bullets_and_depth(self, style_sheet):
        nodes = [
            Element(
                "ul",
                [
                    Element("li", [Text("a")]),
                    Element("li", [Text("b"), Element("ul", [Element("li", [Text("c")])])]),
                ],
            )
        ]
        blocks = RenderTreeBuilder(style_sheet).build(nodes)
        assert blocks[0].tag == "ul"
        items = find_nodes(blocks, ListItemView)
        assert [(item.bullet, item.depth) for item in items] == [("•", 0), ("•", 0), ("•", 1)]
        assert items[2].indent == style_sheet.list_indent
        assert plain_texts(items[2].children) == ["c"]

    def test_ordered_list_start(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("3. a\n4. b\n5. c"))
        assert [item.bullet for item in find_nodes(blocks, ListItemView)] == ["3.", "4.", "5."]

    def test_invalid_start_falls_back(self, style_sheet):
        nodes = [Element("ol", [Element("li", [Text("a")])], {"start": "x"})]
        assert find_nodes(RenderTreeBuilder(style_sheet).build(nodes), ListItemView)[0].bullet == "1."

    def test_custom_bullet(self, style_sheet):
        builder = RenderTreeBuilder(style_sheet, options=RenderOptions(bullet="-"))
        assert find_nodes(builder.build(parse_markdown("- a")), ListItemView)[0].bullet == "-"

    def test_depth_not_leaked_between_lists(self, style_sheet):
        nodes = parse_markdown("- a\n  - b\n\nparagraph\n\n- c")
        items = find_nodes(RenderTreeBuilder(style_sheet).build(nodes), ListItemView)
        assert [item.depth for item in items] == [0, 1, 0]


@pytest.mark.unit
class TestBlocks:
    """Tests for quotes, tables and dividers."""

    def test_block_quote(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("> quoted"))
        assert blocks[0].tag == "blockquote"
        assert blocks[0].style == style_sheet.block_style_for("blockquote")
        assert plain_texts(blocks[0].children) == ["quoted"]

    def test_table(self, style_sheet):
        nodes = parse_markdown("| A | B |\n|:--|--:|\n| 1 | 2 |\n| 3 | 4 |")
        table = RenderTreeBuilder(style_sheet).build(nodes)[0]
        assert isinstance(table, TableView)
        assert table.column_count == 2
        assert [row.is_header for row in table.rows] == [True, False, False]
        header = table.rows[0].cells[0]
        assert header.is_header
        assert header.align == "left"
        assert text_spans(header.children[0])[0].style.font_weight == "bold"
        assert plain_texts(list(table.rows[2].cells)) == ["3", "4"]

    def test_divider(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build([Element("hr")])
        assert blocks == [Divider(style_sheet.block_style_for("hr"))]


@pytest.mark.unit
class TestImages:
    """Tests for image views."""

    def test_pending_image_shows_placeholder(self, style_sheet):
        blocks = RenderTreeBuilder(style_sheet).build(parse_markdown("![alt](https://example.com/a.png#64x32)"))
        image = blocks[0]
        assert isinstance(image, ImageView)
        assert image.status == "pending"
        assert image.alt == "alt"
        assert (image.width, image.height) == (64.0, 32.0)
        assert plain_texts([image.child]) == [DEFAULT_IMAGE_PLACEHOLDER_TEXT]

    def test_loader_exception_shows_error(self, style_sheet):
        builder = RenderTreeBuilder(style_sheet, image_loader=FailingLoader())
        image = builder.build(parse_markdown("![x](https://example.com/a.png)"))[0]
        assert image.status == "failed"
        assert isinstance(image.error, RuntimeError)
        assert plain_texts([image.child]) == [DEFAULT_IMAGE_ERROR_TEXT]

    def test_custom_placeholder_and_error(self, style_sheet):
        calls = []

        def placeholder(*, context, url, height, width):
            calls.append(("placeholder", url, width, height))
            return RichText(TextSpan(text="..."))

        def error(*, context, url, error, height, width):
            calls.append(("error", url, type(error).__name__))
            return RichText(TextSpan(text="!"))

        delegate = DefaultBuilderDelegate(image_placeholder=placeholder, image_error=error)
        loader = RecordingLoader()
        builder = RenderTreeBuilder(style_sheet, delegate, image_loader=loader)
        image = builder.build(parse_markdown("![x](https://example.com/a.png#10x20)"))[0]
        assert calls == [("placeholder", "https://example.com/a.png", 10.0, 20.0)]

        loader.views[0].fail(IOError("404"))
        assert calls[-1] == ("error", "https://example.com/a.png", "OSError")
        assert image.child == RichText(TextSpan(text="!"))

    def test_async_completion(self, style_sheet):
        loader = RecordingLoader()
        image = RenderTreeBuilder(style_sheet, image_loader=loader).build(parse_markdown("![x](https://e.com/a.png)"))[0]
        seen = []
        image.add_listener(lambda view: seen.append(view.status))
        loader.views[0].complete(MINIMAL_PNG_BYTES)
        assert seen == ["loaded"]
        assert image.child is None

    def test_data_image_loaded(self, style_sheet):
        image = RenderTreeBuilder(style_sheet).build([_paragraph(Element.empty("img", src=MINIMAL_PNG_DATA_URI))])[0]
        assert image.status == "loaded"
        assert image.data == MINIMAL_PNG_BYTES

    def test_relative_file_resolved_against_directory(self, style_sheet, temp_dir):
        (temp_dir / "pic.png").write_bytes(MINIMAL_PNG_BYTES)
        blocks = build_render_tree(parse_markdown("![p](pic.png)"), style_sheet, image_directory=temp_dir)
        assert blocks[0].source.kind == "file"
        assert blocks[0].status == "loaded"

    def test_malformed_source_does_not_raise(self, style_sheet):
        image = RenderTreeBuilder(style_sheet).build([_paragraph(Element.empty("img", src="not-a-valid-uri###"))])[0]
        assert image.source.kind == "resource"
        assert image.status == "pending"

    def test_image_splits_paragraph(self, style_sheet):
        nodes = [_paragraph(Text("before"), Element.empty("img", src="https://e.com/a.png"), Text("after"))]
        blocks = RenderTreeBuilder(style_sheet).build(nodes)
        assert [type(block) for block in blocks] == [RichText, ImageView, RichText]
        assert plain_texts([blocks[0], blocks[2]]) == ["before", "after"]

    def test_image_tap_outside_link(self, style_sheet):
        taps = []
        delegate = DefaultBuilderDelegate(on_tap_image=lambda kind, path, uri: taps.append((kind, path, uri.scheme)))
        image = RenderTreeBuilder(style_sheet, delegate).build(parse_markdown("![x](https://e.com/a.png)"))[0]
        assert image.recognizer is None
        image.tap()
        assert taps == [("http", "https://e.com/a.png", "https")]

    def test_image_inside_link_uses_link_recognizer(self, style_sheet):
        link_taps, image_taps = [], []
        delegate = DefaultBuilderDelegate(
            on_tap_link=link_taps.append,
            on_tap_image=lambda *args: image_taps.append(args),
        )
        nodes = parse_markdown("[![x](https://e.com/a.png)](https://target.example)")
        image = find_nodes(RenderTreeBuilder(style_sheet, delegate).build(nodes), ImageView)[0]
        assert image.recognizer is not None
        image.tap()
        assert link_taps == ["https://target.example"]
        assert image_taps == []
