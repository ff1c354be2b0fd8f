#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/builder.py
"""Render tree builder.

The :class:`RenderTreeBuilder` walks a parsed node tree in document order
and produces the ordered list of :class:`~mdview.render.nodes.RenderedNode`
objects consumed by a layout.

Dispatch goes through a tag to handler table; tags without a handler use
the default handler, which renders the children with the style inherited
from the nearest ancestor. Per-element state (resolved style, list depth,
enclosing link recognizer) travels down the recursion in an immutable
context, so one build never leaks state into another.

Inline content accumulates into runs of :class:`~mdview.render.nodes.TextSpan`
objects; every block-level node flushes the pending run into a
:class:`~mdview.render.nodes.RichText` block first.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from mdview.ast import Element, Node, Text, iter_elements
from mdview.constants import (
    DEFAULT_IMAGE_ERROR_TEXT,
    DEFAULT_IMAGE_PLACEHOLDER_TEXT,
    HEADING_TAGS,
    ImageKind,
)
from mdview.exceptions import ValidationError
from mdview.options.markdown import RenderOptions
from mdview.render.highlight import SyntaxHighlighter
from mdview.render.images import DefaultImageLoader, ImageLoader, ImageSource, parse_image_source
from mdview.render.nodes import (
    BlockContainer,
    Divider,
    ImageView,
    ListItemView,
    RenderedNode,
    RichText,
    TableCellView,
    TableRowView,
    TableView,
    TextSpan,
)
from mdview.render.recognizers import RecognizerPool, TapGestureRecognizer, TapLinkCallback
from mdview.style.sheet import StyleSheet, TextStyle
from mdview.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

TapImageCallback = Callable[[ImageKind, str, Any], None]
ImagePlaceholderBuilder = Callable[..., RenderedNode]
ImageErrorBuilder = Callable[..., RenderedNode]


class BuilderDelegate(Protocol):
    """Collaborator supplying recognizers, code formatting and image fallbacks."""

    def create_link_recognizer(self, href: str) -> TapGestureRecognizer:
        """Return a fresh recognizer for a link to ``href``."""
        ...

    def format_code(self, style_sheet: StyleSheet, code: str) -> TextSpan:
        """Return the formatted span for the text of a ``pre`` element."""
        ...

    def on_tap_image(self, kind: ImageKind, path: str, uri: Any) -> None:
        """Handle a tap on an image outside any link."""
        ...

    def image_placeholder(
        self, *, context: ImageSource, url: str, height: Optional[float], width: Optional[float]
    ) -> RenderedNode:
        """Return the node displayed while an image loads."""
        ...

    def image_error(
        self, *, context: ImageSource, url: str, error: Any, height: Optional[float], width: Optional[float]
    ) -> RenderedNode:
        """Return the node displayed after an image failed to load."""
        ...


def _text_block(text: str) -> RichText:
    return RichText(TextSpan(text=text), tag="p")


def _has_visible_content(element: Element) -> bool:
    return bool(element.text_content.strip()) or any(True for _ in iter_elements(element.children, "img"))


class DefaultBuilderDelegate:
    """Builder delegate wiring user callbacks with built-in fallbacks.

    Parameters
    ----------
    recognizers : RecognizerPool or None
        Pool owning the link recognizers of the build; a new pool calling
        ``on_tap_link`` when None
    on_tap_link : callable or None
        Link tap callback, used when ``recognizers`` is None
    on_tap_image : callable or None
        Called with ``(kind, path, uri)`` when an image outside a link is tapped
    syntax_highlighter : SyntaxHighlighter or None
        Formats ``pre`` contents; the style sheet's code style is used when None
    image_placeholder : callable or None
        Builds the loading placeholder; ``"Loading image"`` text when None
    image_error : callable or None
        Builds the error node; ``"Error loading image"`` text when None

    """

    def __init__(
        self,
        recognizers: Optional[RecognizerPool] = None,
        on_tap_link: Optional[TapLinkCallback] = None,
        on_tap_image: Optional[TapImageCallback] = None,
        syntax_highlighter: Optional[SyntaxHighlighter] = None,
        image_placeholder: Optional[ImagePlaceholderBuilder] = None,
        image_error: Optional[ImageErrorBuilder] = None,
    ) -> None:
        self.recognizers = recognizers if recognizers is not None else RecognizerPool(on_tap=on_tap_link)
        self.tap_image_callback = on_tap_image
        self.syntax_highlighter = syntax_highlighter
        self.placeholder_builder = image_placeholder
        self.error_builder = image_error

    def create_link_recognizer(self, href: str) -> TapGestureRecognizer:
        return self.recognizers.create(href)

    def format_code(self, style_sheet: StyleSheet, code: str) -> TextSpan:
        if self.syntax_highlighter is not None:
            return self.syntax_highlighter.format(code)
        return TextSpan(text=code, style=style_sheet.code)

    def on_tap_image(self, kind: ImageKind, path: str, uri: Any) -> None:
        if self.tap_image_callback is not None:
            self.tap_image_callback(kind, path, uri)

    def image_placeholder(
        self, *, context: ImageSource, url: str, height: Optional[float], width: Optional[float]
    ) -> RenderedNode:
        if self.placeholder_builder is not None:
            return self.placeholder_builder(context=context, url=url, height=height, width=width)
        return _text_block(DEFAULT_IMAGE_PLACEHOLDER_TEXT)

    def image_error(
        self, *, context: ImageSource, url: str, error: Any, height: Optional[float], width: Optional[float]
    ) -> RenderedNode:
        if self.error_builder is not None:
            return self.error_builder(context=context, url=url, error=error, height=height, width=width)
        return _text_block(DEFAULT_IMAGE_ERROR_TEXT)


@dataclass(frozen=True)
class _Context:
    """Per-element build state passed down the recursion."""

    style: TextStyle
    list_depth: int = 0
    recognizer: Optional[TapGestureRecognizer] = None


class _BlockCollector:
    """Collects the blocks of one element, grouping inline spans into runs."""

    def __init__(self, tag: str, style: TextStyle) -> None:
        self.tag = tag
        self.style = style
        self.blocks: list[RenderedNode] = []
        self._spans: list[TextSpan] = []

    def add_span(self, span: TextSpan) -> None:
        self._spans.append(span)

    def add_block(self, block: RenderedNode) -> None:
        self.flush()
        self.blocks.append(block)

    def flush(self) -> None:
        spans, self._spans = self._spans, []
        if not spans or not "".join(span.to_plain_text() for span in spans).strip():
            return
        self.blocks.append(RichText(TextSpan(style=self.style, children=spans), tag=self.tag))

    def finish(self) -> list[RenderedNode]:
        self.flush()
        return self.blocks


Handler = Callable[[Element, _Context, _BlockCollector], None]


class RenderTreeBuilder:
    """Build render trees from parsed node trees.

    Parameters
    ----------
    style_sheet : StyleSheet
        Styles resolved per element tag
    delegate : BuilderDelegate or None
        Recognizer, code formatting and image fallback collaborator; a
        :class:`DefaultBuilderDelegate` when None
    options : RenderOptions or None
        Build options (image directory, bullets, soft breaks)
    image_loader : ImageLoader or None
        Resolves image views; :class:`~mdview.render.images.DefaultImageLoader` when None

    Examples
    --------
        >>> from mdview.parsers import parse_markdown
        >>> builder = RenderTreeBuilder(StyleSheet.from_theme())
        >>> blocks = builder.build(parse_markdown("# Title\\n\\nBody"))
        >>> [block.tag for block in blocks]
        ['h1', 'p']

    """

    def __init__(
        self,
        style_sheet: StyleSheet,
        delegate: Optional[BuilderDelegate] = None,
        options: Optional[RenderOptions] = None,
        image_loader: Optional[ImageLoader] = None,
    ) -> None:
        if style_sheet is None:
            raise ValidationError("A style sheet is required to build a render tree", parameter_name="style_sheet")
        self.style_sheet = style_sheet
        self.delegate: BuilderDelegate = delegate if delegate is not None else DefaultBuilderDelegate()
        self.options = options or RenderOptions()
        self.image_loader: ImageLoader = image_loader if image_loader is not None else DefaultImageLoader()

        self._handlers: dict[str, Handler] = {
            "p": self._build_text_block,
            **{tag: self._build_text_block for tag in HEADING_TAGS},
            "pre": self._build_code_block,
            "blockquote": self._build_block_quote,
            "ul": self._build_list,
            "ol": self._build_list,
            "li": self._build_orphan_list_item,
            "table": self._build_table,
            "hr": self._build_divider,
            "em": self._build_inline,
            "strong": self._build_inline,
            "del": self._build_inline,
            "code": self._build_inline,
            "sub": self._build_inline,
            "sup": self._build_inline,
            "a": self._build_link,
            "img": self._build_image,
            "br": self._build_line_break,
            "html": self._build_inline,
        }

    def build(self, nodes: Optional[list[Node]]) -> list[RenderedNode]:
        """Build the render tree for ``nodes``.

        Parameters
        ----------
        nodes : list of Node
            Root nodes in document order

        Returns
        -------
        list of RenderedNode
            Blocks in document order; empty for an empty document

        Raises
        ------
        ValidationError
            If ``nodes`` is None

        """
        if nodes is None:
            raise ValidationError("Cannot build a render tree for an absent document", parameter_name="nodes")

        root = _Context(style=self.style_sheet.base)
        collector = _BlockCollector("p", root.style)
        with debug_timer(logger, "Render tree build"):
            for node in nodes:
                self._visit(node, root, collector)
        return collector.finish()

    def _visit(self, node: Node, ctx: _Context, out: _BlockCollector) -> None:
        if isinstance(node, Text):
            out.add_span(self._text_span(node.text, ctx))
        elif isinstance(node, Element):
            handler = self._handlers.get(node.tag, self._build_default)
            handler(node, ctx, out)
        else:
            logger.debug("Skipping unsupported node type %s", type(node).__name__)

    def _visit_children(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        for child in element.children:
            self._visit(child, ctx, out)

    def _resolve(self, tag: str, ctx: _Context) -> _Context:
        """Layer the tag's style over the inherited one; unknown tags inherit unchanged."""
        style = self.style_sheet.style_for(tag)
        if style is None:
            return ctx
        return replace(ctx, style=ctx.style.merge(style))

    def _text_span(self, text: str, ctx: _Context) -> TextSpan:
        return TextSpan(text=text.replace("\n", self.options.soft_break), style=ctx.style, recognizer=ctx.recognizer)

    def _build_children(self, tag: str, element: Element, ctx: _Context) -> list[RenderedNode]:
        return self._build_nodes(tag, element.children, ctx)

    def _build_nodes(self, tag: str, nodes: list[Node], ctx: _Context) -> list[RenderedNode]:
        inner = _BlockCollector(tag, ctx.style)
        for node in nodes:
            self._visit(node, ctx, inner)
        return inner.finish()

    # Block-level handlers

    def _build_text_block(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        resolved = self._resolve(element.tag, ctx)
        for block in self._build_children(element.tag, element, resolved):
            out.add_block(block)

    def _build_code_block(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        span = self.delegate.format_code(self.style_sheet, element.text_content)
        block_style = self.style_sheet.block_style_for("pre")
        out.add_block(BlockContainer("pre", [RichText(span, tag="pre")], block_style))

    def _build_block_quote(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        resolved = self._resolve("blockquote", ctx)
        children = self._build_children("p", element, resolved)
        out.add_block(BlockContainer("blockquote", children, self.style_sheet.block_style_for("blockquote")))

    def _build_list(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        resolved = self._resolve(element.tag, ctx)
        number = self._list_start(element)
        items: list[RenderedNode] = []
        for child in element.children:
            if isinstance(child, Element) and child.tag == "li":
                bullet = f"{number}{self.options.ordered_suffix}" if element.tag == "ol" else self.options.bullet
                items.append(self._list_item(child, resolved, bullet))
                number += 1
            else:
                items.extend(self._build_nodes("li", [child], resolved))
        out.add_block(BlockContainer(element.tag, items, self.style_sheet.block_style_for(element.tag)))

    def _list_start(self, element: Element) -> int:
        try:
            return int(element.get("start", "1") or "1")
        except ValueError:
            logger.debug("Invalid ordered list start %r, using 1", element.get("start"))
            return 1

    def _list_item(self, element: Element, ctx: _Context, bullet: str) -> ListItemView:
        depth = ctx.list_depth
        item_ctx = replace(self._resolve("li", ctx), list_depth=depth + 1)
        children = self._build_children("li", element, item_ctx)
        return ListItemView(bullet=bullet, depth=depth, children=children, indent=depth * self.style_sheet.list_indent)

    def _build_orphan_list_item(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        out.add_block(self._list_item(element, ctx, self.options.bullet))

    def _build_table(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        rows: list[TableRowView] = []
        for child in element.children:
            if not isinstance(child, Element):
                continue
            if child.tag in ("thead", "tbody"):
                for row in child.children:
                    if isinstance(row, Element) and row.tag == "tr":
                        rows.append(self._table_row(row, ctx, child.tag == "thead"))
            elif child.tag == "tr":
                rows.append(self._table_row(child, ctx, False))
        out.add_block(TableView(rows, self.style_sheet.block_style_for("table")))

    def _table_row(self, row: Element, ctx: _Context, in_head: bool) -> TableRowView:
        cells: list[TableCellView] = []
        for cell in row.children:
            if not isinstance(cell, Element):
                continue
            is_header = in_head or cell.tag == "th"
            cell_ctx = self._resolve("th" if is_header else "td", ctx)
            children = self._build_children(cell.tag, cell, cell_ctx)
            cells.append(TableCellView(children=children, is_header=is_header, align=cell.get("align")))
        return TableRowView(cells=cells, is_header=in_head)

    def _build_divider(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        out.add_block(Divider(self.style_sheet.block_style_for("hr")))

    # Inline handlers

    def _build_inline(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        self._visit_children(element, self._resolve(element.tag, ctx), out)

    def _build_link(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        if not _has_visible_content(element):
            logger.debug("Link to %r has no visible content, no recognizer created", element.get("href"))
            self._visit_children(element, ctx, out)
            return
        recognizer = self.delegate.create_link_recognizer(element.get("href", "") or "")
        link_ctx = replace(self._resolve("a", ctx), recognizer=recognizer)
        self._visit_children(element, link_ctx, out)

    def _build_line_break(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        out.add_span(TextSpan(text="\n", style=ctx.style, recognizer=ctx.recognizer))

    def _build_image(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        source = parse_image_source(element.get("src", "") or "", self.options.image_directory)
        view = ImageView(
            source=source,
            alt=element.get("alt", "") or "",
            title=element.get("title"),
            recognizer=ctx.recognizer,
            on_tap=self.delegate.on_tap_image if ctx.recognizer is None else None,
            error_builder=partial(self._image_error, source),
        )
        view.child = self.delegate.image_placeholder(
            context=source, url=source.url, height=source.height, width=source.width
        )
        try:
            self.image_loader.load(view)
        except Exception as e:
            logger.warning("Image loader failed for %r: %s", source.url, e)
            view.fail(e)
        out.add_block(view)

    def _image_error(self, source: ImageSource, error: Any) -> RenderedNode:
        return self.delegate.image_error(
            context=source, url=source.url, error=error, height=source.height, width=source.width
        )

    def _build_default(self, element: Element, ctx: _Context, out: _BlockCollector) -> None:
        logger.debug("No handler for <%s>, rendering children with inherited style", element.tag)
        self._visit_children(element, self._resolve(element.tag, ctx), out)


def build_render_tree(
    nodes: Optional[list[Node]],
    style_sheet: StyleSheet,
    image_directory: Optional[Path] = None,
    delegate: Optional[BuilderDelegate] = None,
    image_loader: Optional[ImageLoader] = None,
) -> list[RenderedNode]:
    """Build the render tree for ``nodes`` in one call.

    Parameters
    ----------
    nodes : list of Node
        Root nodes from the Markdown parser
    style_sheet : StyleSheet
        Styles resolved per element tag
    image_directory : Path or None
        Base directory for relative image paths
    delegate : BuilderDelegate or None
        Collaborator for recognizers, code and image fallbacks
    image_loader : ImageLoader or None
        Resolves image views

    Returns
    -------
    list of RenderedNode
        Blocks in document order

    """
    options = RenderOptions(image_directory=image_directory)
    return RenderTreeBuilder(style_sheet, delegate, options, image_loader).build(nodes)
