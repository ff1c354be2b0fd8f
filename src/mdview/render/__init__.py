#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/__init__.py
"""Render tree construction for parsed Markdown documents."""

from mdview.render.builder import (
    BuilderDelegate,
    DefaultBuilderDelegate,
    RenderTreeBuilder,
    build_render_tree,
)
from mdview.render.highlight import PygmentsHighlighter, SyntaxHighlighter
from mdview.render.images import (
    DefaultImageLoader,
    ImageLoader,
    ImageSource,
    decode_data_uri,
    parse_image_source,
    parse_size_hint,
)
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
from mdview.render.printer import RenderTreePrinter, dump_render_tree
from mdview.render.recognizers import RecognizerPool, TapGestureRecognizer

__all__ = [
    "BlockContainer",
    "BuilderDelegate",
    "Column",
    "DefaultBuilderDelegate",
    "DefaultImageLoader",
    "Divider",
    "ImageLoader",
    "ImageSource",
    "ImageView",
    "ListItemView",
    "ListView",
    "PygmentsHighlighter",
    "RecognizerPool",
    "RenderTreeBuilder",
    "RenderTreePrinter",
    "RenderedNode",
    "RichText",
    "SyntaxHighlighter",
    "TableCellView",
    "TableRowView",
    "TableView",
    "TapGestureRecognizer",
    "TextSpan",
    "build_render_tree",
    "decode_data_uri",
    "dump_render_tree",
    "parse_image_source",
    "parse_size_hint",
]
