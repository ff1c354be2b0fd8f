"""mdview - Markdown to render tree library.

mdview parses Markdown (CommonMark plus GFM tables and strikethrough) into a
generic element tree and turns that tree into a render tree of styled text
spans, lists, tables, code blocks and images, ready to be laid out by a
display layer.

Pipeline
--------
1. :func:`~mdview.parsers.parse_markdown` produces ``Text``/``Element`` nodes;
   an :class:`~mdview.extensions.ExtensionSet` adds custom syntax such as
   ``<sub>``/``<sup>`` spans.
2. :class:`~mdview.render.RenderTreeBuilder` resolves a
   :class:`~mdview.style.StyleSheet` per element and creates link
   recognizers, image views and code spans.
3. :class:`~mdview.widget.MarkdownBody` and :class:`~mdview.widget.Markdown`
   own the result across updates and release link recognizers.

Examples
--------
    >>> from mdview import render_to_text
    >>> print(render_to_text("H<sub>2</sub>O", extension_set="scripts", show_styles=False))
    rich_text <p>
      'H'
      '2'
      'O'

    >>> from mdview import MarkdownBody
    >>> view = MarkdownBody("[docs](https://example.com)", on_tap_link=print)
    >>> view.mount()
    >>> view.live_recognizers[0].tap()
    https://example.com

"""
#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "0.1.0"

from mdview.api import parse, render, render_to_text
from mdview.ast import Element, Node, Text
from mdview.exceptions import (
    DependencyError,
    FileAccessError,
    FileError,
    InvalidOptionsError,
    MdViewError,
    ParsingError,
    RecognizerDisposedError,
    RenderingError,
    ValidationError,
    WidgetDisposedError,
)
from mdview.extensions import ExtensionSet, build_extension_set, get_extension_set, register_extension_set
from mdview.options import MarkdownParserOptions, RenderOptions
from mdview.parsers import MarkdownParser, parse_markdown
from mdview.render import RenderTreeBuilder, build_render_tree, dump_render_tree
from mdview.style import StyleSheet, TextStyle, Theme
from mdview.widget import Markdown, MarkdownBody, MarkdownView, ViewState

__all__ = [
    "__version__",
    "DependencyError",
    "Element",
    "ExtensionSet",
    "FileAccessError",
    "FileError",
    "InvalidOptionsError",
    "Markdown",
    "MarkdownBody",
    "MarkdownParser",
    "MarkdownParserOptions",
    "MarkdownView",
    "MdViewError",
    "Node",
    "ParsingError",
    "RecognizerDisposedError",
    "RenderOptions",
    "RenderTreeBuilder",
    "RenderingError",
    "StyleSheet",
    "Text",
    "TextStyle",
    "Theme",
    "ValidationError",
    "ViewState",
    "WidgetDisposedError",
    "build_extension_set",
    "build_render_tree",
    "dump_render_tree",
    "get_extension_set",
    "parse",
    "parse_markdown",
    "register_extension_set",
    "render",
    "render_to_text",
]
