#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/printer.py
"""Plain text dump of render trees.

Used by the command line interface and handy in tests: the dump shows the
block structure, span styles that differ from the parent span, link targets
and image states.

"""

from __future__ import annotations

from dataclasses import fields
from typing import Optional

from mdview.render.nodes import (
    BlockContainer,
    Column,
    Divider,
    ImageView,
    ListItemView,
    ListView,
    RenderedNode,
    RichText,
    TableCellView,
    TableRowView,
    TableView,
    TextSpan,
)
from mdview.style.sheet import TextStyle


def _style_delta(style: Optional[TextStyle], parent: Optional[TextStyle]) -> str:
    if style is None or style == parent:
        return ""
    changed = []
    for f in fields(TextStyle):
        value = getattr(style, f.name)
        if value is not None and (parent is None or getattr(parent, f.name) != value):
            changed.append(f"{f.name}={value}")
    return f" [{', '.join(changed)}]" if changed else ""


class RenderTreePrinter:
    """Render tree visitor producing an indented outline.

    Examples
    --------
        >>> printer = RenderTreePrinter()
        >>> print(printer.print(blocks))
        rich_text <h1>
          'Title' [font_size=23.8, font_weight=bold]

    """

    def __init__(self, indent: str = "  ", show_styles: bool = True) -> None:
        self.indent = indent
        self.show_styles = show_styles
        self._depth = 0
        self._lines: list[str] = []

    def print(self, nodes: list[RenderedNode]) -> str:
        """Return the outline of ``nodes`` as a string."""
        self._lines = []
        self._depth = 0
        for node in nodes:
            node.accept(self)
        return "\n".join(self._lines)

    def _emit(self, line: str) -> None:
        self._lines.append(f"{self.indent * self._depth}{line}")

    def _nested(self, children: list) -> None:
        self._depth += 1
        for child in children:
            child.accept(self)
        self._depth -= 1

    def _span(self, span: TextSpan, parent: Optional[TextStyle]) -> None:
        if span.text:
            style = _style_delta(span.style, parent) if self.show_styles else ""
            link = f" -> {span.recognizer.href}" if span.recognizer is not None else ""
            self._emit(f"{span.text!r}{style}{link}")
        for child in span.children:
            self._span(child, span.style or parent)

    def visit_rich_text(self, node: RichText) -> None:
        self._emit(f"rich_text <{node.tag}>")
        self._depth += 1
        self._span(node.span, None)
        self._depth -= 1

    def visit_block_container(self, node: BlockContainer) -> None:
        self._emit(f"block <{node.tag}>")
        self._nested(node.children)

    def visit_list_item(self, node: ListItemView) -> None:
        self._emit(f"list_item {node.bullet!r} depth={node.depth}")
        self._nested(node.children)

    def visit_table(self, node: TableView) -> None:
        self._emit(f"table columns={node.column_count}")
        self._nested(node.rows)

    def visit_table_row(self, node: TableRowView) -> None:
        self._emit("header_row" if node.is_header else "row")
        self._nested(node.cells)

    def visit_table_cell(self, node: TableCellView) -> None:
        align = f" align={node.align}" if node.align else ""
        self._emit(f"cell{align}")
        self._nested(node.children)

    def visit_divider(self, node: Divider) -> None:
        self._emit("divider")

    def visit_image(self, node: ImageView) -> None:
        size = f" {node.width:g}x{node.height:g}" if node.width is not None and node.height is not None else ""
        link = f" -> {node.recognizer.href}" if node.recognizer is not None else ""
        self._emit(f"image {node.source.kind} {node.source.path!r} {node.status}{size}{link}")
        self._nested([node.child] if node.child is not None else [])

    def visit_column(self, node: Column) -> None:
        self._emit("column")
        self._nested(node.children)

    def visit_list_view(self, node: ListView) -> None:
        self._emit(f"list_view padding={node.padding:g}")
        self._nested(node.children)


def dump_render_tree(nodes: list[RenderedNode], show_styles: bool = True) -> str:
    """Return an indented outline of a render tree."""
    return RenderTreePrinter(show_styles=show_styles).print(nodes)
