#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/api.py
"""High-level convenience functions for parsing and rendering Markdown.

These functions cover the common one-shot cases. Applications displaying a
document over time (re-parsing on changes, releasing link recognizers)
should use :class:`~mdview.widget.MarkdownBody` or
:class:`~mdview.widget.Markdown` instead.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from mdview.ast import Node
from mdview.exceptions import MdViewError, RenderingError
from mdview.extensions.registry import EMPTY_EXTENSION_SET, ExtensionSet, get_extension_set
from mdview.options.markdown import MarkdownParserOptions, RenderOptions
from mdview.parsers.markdown import MarkdownParser
from mdview.render.builder import DefaultBuilderDelegate, RenderTreeBuilder
from mdview.render.highlight import SyntaxHighlighter
from mdview.render.images import ImageLoader
from mdview.render.nodes import RenderedNode
from mdview.render.printer import dump_render_tree
from mdview.style.sheet import StyleSheet, Theme

logger = logging.getLogger(__name__)

MarkdownSource = Union[str, Path, IO[bytes], IO[str], bytes]


def _resolve_extension_set(extension_set: Union[ExtensionSet, str, None]) -> ExtensionSet:
    if extension_set is None:
        return EMPTY_EXTENSION_SET
    if isinstance(extension_set, str):
        return get_extension_set(extension_set)
    return extension_set


def parse(
    source: MarkdownSource,
    *,
    extension_set: Union[ExtensionSet, str, None] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    **kwargs: Any,
) -> list[Node]:
    """Parse Markdown into the generic node tree.

    Parameters
    ----------
    source : str, Path, IO, or bytes
        Markdown text, or a path/stream/bytes holding it
    extension_set : ExtensionSet or str, optional
        Extension set or the name of a registered one
    parser_options : MarkdownParserOptions, optional
        Pre-configured parser options
    kwargs : Any
        Individual parser options overriding ``parser_options``

    Returns
    -------
    list of Node
        Root nodes in document order

    Examples
    --------
        >>> nodes = parse("H<sub>2</sub>O", extension_set="scripts")
        >>> nodes[0].children[1].tag
        'sub'

    """
    options = parser_options or MarkdownParserOptions()
    if extension_set is not None:
        kwargs["extension_set"] = _resolve_extension_set(extension_set)
    if kwargs:
        options = options.create_updated(**kwargs)
    return MarkdownParser(options).parse(source)


def render(
    source: MarkdownSource,
    *,
    style_sheet: Optional[StyleSheet] = None,
    theme: Optional[Theme] = None,
    extension_set: Union[ExtensionSet, str, None] = None,
    image_directory: Optional[Union[Path, str]] = None,
    syntax_highlighter: Optional[SyntaxHighlighter] = None,
    image_loader: Optional[ImageLoader] = None,
    delegate: Optional[DefaultBuilderDelegate] = None,
) -> list[RenderedNode]:
    """Parse Markdown and build its render tree.

    Parameters
    ----------
    source : str, Path, IO, or bytes
        Markdown text, or a path/stream/bytes holding it
    style_sheet : StyleSheet, optional
        Explicit style sheet; derived from ``theme`` when None
    theme : Theme, optional
        Theme for the default style sheet
    extension_set : ExtensionSet or str, optional
        Extension set or the name of a registered one
    image_directory : Path or str, optional
        Base directory for relative image paths
    syntax_highlighter : SyntaxHighlighter, optional
        Formats code blocks; ignored when ``delegate`` is given
    image_loader : ImageLoader, optional
        Resolves image views
    delegate : DefaultBuilderDelegate, optional
        Builder delegate; its recognizer pool owns the link recognizers
        and stays open after the call

    Returns
    -------
    list of RenderedNode
        Blocks in document order

    Raises
    ------
    ValidationError
        If the source is None or the extension set name is unknown
    ParsingError
        If the Markdown cannot be parsed
    RenderingError
        If building the render tree fails unexpectedly

    Notes
    -----
    Every link in the tree carries a live :class:`TapGestureRecognizer`.
    Without a ``delegate`` those recognizers belong to a pool this function
    does not return, so they are never released. Callers that must release
    them pass their own :class:`DefaultBuilderDelegate` and call
    ``delegate.recognizers.dispose_all()`` when done, or display the document
    through a :class:`~mdview.widget.MarkdownView`, which owns its pools.

    """
    nodes = parse(source, extension_set=extension_set)
    sheet = style_sheet or StyleSheet.from_theme(theme)
    builder_delegate = delegate or DefaultBuilderDelegate(syntax_highlighter=syntax_highlighter)
    options = RenderOptions(image_directory=Path(image_directory) if image_directory is not None else None)
    try:
        return RenderTreeBuilder(sheet, builder_delegate, options, image_loader).build(nodes)
    except Exception as e:
        if delegate is None:
            builder_delegate.recognizers.dispose_all()
        if isinstance(e, MdViewError):
            raise
        raise RenderingError(f"Render tree build failed: {e!r}", original_error=e) from e


def render_to_text(source: MarkdownSource, *, show_styles: bool = True, **kwargs: Any) -> str:
    """Parse and render Markdown, returning the render tree dump.

    Accepts the same keyword arguments as :func:`render`. Link recognizers
    created here are released once the dump is written.
    """
    if kwargs.get("delegate") is not None:
        return dump_render_tree(render(source, **kwargs), show_styles=show_styles)
    delegate = DefaultBuilderDelegate(syntax_highlighter=kwargs.pop("syntax_highlighter", None))
    kwargs["delegate"] = delegate
    try:
        return dump_render_tree(render(source, **kwargs), show_styles=show_styles)
    finally:
        delegate.recognizers.dispose_all()
