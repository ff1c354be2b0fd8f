#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/widget.py
"""Markdown views owning parsed render trees and their link recognizers.

A :class:`MarkdownView` holds Markdown source plus its configuration, parses
it into rendered children and owns the tap recognizers created for links.
Two concrete layouts are provided:

- :class:`MarkdownBody` lays children out in a non-scrolling column; a
  single child is returned as-is
- :class:`Markdown` lays children out in a scrolling list with padding

Lifecycle
---------
A view starts ``IDLE``. :meth:`MarkdownView.mount` performs the first parse
(state ``PARSED``). :meth:`MarkdownView.update` and
:meth:`MarkdownView.set_theme` re-parse only when the inputs of the build
changed. :meth:`MarkdownView.dispose` releases every live recognizer and is
terminal; any later call raises :class:`~mdview.exceptions.WidgetDisposedError`.

Every re-parse builds into a fresh recognizer pool. Only when the build
succeeds are the previous recognizers released and the new children swapped
in; a failed build releases the fresh pool and leaves the previous children
displayed.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from mdview.constants import DEFAULT_LISTVIEW_PADDING
from mdview.exceptions import ValidationError, WidgetDisposedError
from mdview.extensions.registry import EMPTY_EXTENSION_SET, ExtensionSet
from mdview.options.markdown import MarkdownParserOptions, RenderOptions
from mdview.parsers.markdown import parse_markdown
from mdview.render.builder import (
    DefaultBuilderDelegate,
    ImageErrorBuilder,
    ImagePlaceholderBuilder,
    RenderTreeBuilder,
    TapImageCallback,
)
from mdview.render.highlight import SyntaxHighlighter
from mdview.render.images import ImageLoader
from mdview.render.nodes import Column, ImageView, ListView, RenderedNode
from mdview.render.recognizers import RecognizerPool, TapGestureRecognizer, TapLinkCallback
from mdview.style.sheet import StyleSheet, Theme

logger = logging.getLogger(__name__)

ViewListener = Callable[["MarkdownView"], None]

_UNSET: Any = object()


class ViewState(Enum):
    """Lifecycle state of a Markdown view."""

    IDLE = "idle"
    PARSED = "parsed"
    DISPOSED = "disposed"


def _iter_tree(nodes: list[RenderedNode]) -> Iterator[RenderedNode]:
    for node in nodes:
        yield node
        yield from _iter_tree(list(node.iter_children()))


class MarkdownView(ABC):
    """Base class for views displaying a parsed Markdown document.

    Parameters
    ----------
    data : str
        Markdown source
    style_sheet : StyleSheet or None
        Explicit style sheet; derived from ``theme`` when None
    theme : Theme or None
        Theme the default style sheet is derived from
    extension_set : ExtensionSet
        Extra syntax rules for the parser
    image_directory : Path or str or None
        Base directory for relative image paths
    on_tap_link : callable or None
        Called with the raw href when a link is tapped
    on_tap_image : callable or None
        Called with ``(kind, path, uri)`` when an image outside a link is tapped
    syntax_highlighter : SyntaxHighlighter or None
        Formats code blocks
    image_placeholder : callable or None
        Builds the node shown while an image loads
    image_error : callable or None
        Builds the node shown after an image failed to load
    image_loader : ImageLoader or None
        Resolves image views

    Examples
    --------
        >>> view = MarkdownBody("Visit [the site](https://example.com)", on_tap_link=print)
        >>> view.mount()
        >>> len(view.live_recognizers)
        1
        >>> view.dispose()

    """

    def __init__(
        self,
        data: str,
        *,
        style_sheet: Optional[StyleSheet] = None,
        theme: Optional[Theme] = None,
        extension_set: ExtensionSet = EMPTY_EXTENSION_SET,
        image_directory: Optional[Union[Path, str]] = None,
        on_tap_link: Optional[TapLinkCallback] = None,
        on_tap_image: Optional[TapImageCallback] = None,
        syntax_highlighter: Optional[SyntaxHighlighter] = None,
        image_placeholder: Optional[ImagePlaceholderBuilder] = None,
        image_error: Optional[ImageErrorBuilder] = None,
        image_loader: Optional[ImageLoader] = None,
    ) -> None:
        if data is None:
            raise ValidationError("Markdown view data must not be None", parameter_name="data")
        self.data = data
        self.style_sheet = style_sheet
        self.theme = theme
        self.extension_set = extension_set
        self.image_directory = Path(image_directory) if image_directory is not None else None
        self.on_tap_link = on_tap_link
        self.on_tap_image = on_tap_image
        self.syntax_highlighter = syntax_highlighter
        self.image_placeholder = image_placeholder
        self.image_error = image_error
        self.image_loader = image_loader

        self._state = ViewState.IDLE
        self._children: list[RenderedNode] = []
        self._recognizers: Optional[RecognizerPool] = None
        self._build_inputs: Optional[tuple] = None
        self._built_highlighter: Optional[SyntaxHighlighter] = None
        self._listeners: list[ViewListener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def children(self) -> list[RenderedNode]:
        """The rendered children of the last successful parse."""
        return list(self._children)

    @property
    def live_recognizers(self) -> list[TapGestureRecognizer]:
        """Recognizers owned by the displayed children."""
        return list(self._recognizers) if self._recognizers is not None else []

    @property
    def effective_style_sheet(self) -> StyleSheet:
        """The explicit style sheet, or the one derived from the theme."""
        if self.style_sheet is not None:
            return self.style_sheet
        return StyleSheet.from_theme(self.theme)

    def add_listener(self, listener: ViewListener) -> None:
        """Register a callback invoked after every re-parse and image state change."""
        self._listeners.append(listener)

    def mount(self) -> None:
        """Parse the source for the first time.

        Raises
        ------
        WidgetDisposedError
            If the view has been disposed

        """
        self._ensure_alive("mount")
        if self._state is ViewState.IDLE:
            self._parse()

    def update(
        self,
        data: Any = _UNSET,
        *,
        style_sheet: Any = _UNSET,
        extension_set: Any = _UNSET,
        image_directory: Any = _UNSET,
        syntax_highlighter: Any = _UNSET,
        on_tap_link: Any = _UNSET,
        on_tap_image: Any = _UNSET,
    ) -> bool:
        """Replace configuration and re-parse when the build inputs changed.

        Arguments left out keep their current value. Callback changes never
        trigger a re-parse; existing recognizers call the new callbacks.

        Returns
        -------
        bool
            True if the view was re-parsed

        Raises
        ------
        WidgetDisposedError
            If the view has been disposed

        """
        self._ensure_alive("update")
        if data is not _UNSET:
            if data is None:
                raise ValidationError("Markdown view data must not be None", parameter_name="data")
            self.data = data
        if style_sheet is not _UNSET:
            self.style_sheet = style_sheet
        if extension_set is not _UNSET:
            self.extension_set = extension_set
        if image_directory is not _UNSET:
            self.image_directory = Path(image_directory) if image_directory is not None else None
        if syntax_highlighter is not _UNSET:
            self.syntax_highlighter = syntax_highlighter
        if on_tap_link is not _UNSET:
            self.on_tap_link = on_tap_link
        if on_tap_image is not _UNSET:
            self.on_tap_image = on_tap_image
        return self._reparse_if_changed()

    def set_theme(self, theme: Optional[Theme]) -> bool:
        """Change the ambient theme.

        Only views without an explicit style sheet are affected, and only if
        the derived style sheet differs from the one last built with.

        Returns
        -------
        bool
            True if the view was re-parsed

        """
        self._ensure_alive("set_theme")
        self.theme = theme
        return self._reparse_if_changed()

    def build(self) -> RenderedNode:
        """Return the layout node wrapping the rendered children.

        Mounts the view first if it is still idle.
        """
        self._ensure_alive("build")
        if self._state is ViewState.IDLE:
            self._parse()
        return self.layout(self.children)

    def dispose(self) -> None:
        """Release every live recognizer; the view cannot be used afterwards.

        Raises
        ------
        WidgetDisposedError
            If the view has already been disposed

        """
        self._ensure_alive("dispose")
        if self._recognizers is not None:
            self._recognizers.dispose_all()
        self._recognizers = None
        self._children = []
        self._listeners.clear()
        self._state = ViewState.DISPOSED
        logger.debug("Disposed %s", type(self).__name__)

    @abstractmethod
    def layout(self, children: list[RenderedNode]) -> RenderedNode:
        """Arrange rendered children into a single layout node."""
        pass

    def _ensure_alive(self, operation: str) -> None:
        if self._state is ViewState.DISPOSED:
            raise WidgetDisposedError(operation)

    def _current_inputs(self) -> tuple:
        return (self.data, self.effective_style_sheet, self.extension_set, self.image_directory)

    def _reparse_if_changed(self) -> bool:
        if self._state is not ViewState.PARSED:
            return False
        if self._current_inputs() == self._build_inputs and self.syntax_highlighter is self._built_highlighter:
            logger.debug("Build inputs unchanged, keeping rendered children")
            return False
        self._parse()
        return True

    def _parse(self) -> None:
        inputs = self._current_inputs()
        data, style_sheet, extension_set, image_directory = inputs
        recognizers = RecognizerPool(on_tap=self._handle_link_tap)
        delegate = DefaultBuilderDelegate(
            recognizers,
            on_tap_image=self._handle_image_tap,
            syntax_highlighter=self.syntax_highlighter,
            image_placeholder=self.image_placeholder,
            image_error=self.image_error,
        )
        builder = RenderTreeBuilder(
            style_sheet,
            delegate,
            RenderOptions(image_directory=image_directory),
            self.image_loader,
        )
        try:
            nodes = parse_markdown(data, MarkdownParserOptions(extension_set=extension_set))
            children = builder.build(nodes)
        except Exception:
            logger.debug("Build failed, releasing %d new recognizers", len(recognizers))
            recognizers.dispose_all()
            raise

        previous = self._recognizers
        if previous is not None:
            previous.dispose_all()
        self._children = children
        self._recognizers = recognizers
        self._build_inputs = inputs
        self._built_highlighter = self.syntax_highlighter
        self._state = ViewState.PARSED

        for node in _iter_tree(children):
            if isinstance(node, ImageView) and node.status == "pending":
                node.add_listener(self._handle_image_change)
        logger.debug("Parsed %d blocks with %d link recognizers", len(children), len(recognizers))
        self._notify()

    def _handle_link_tap(self, href: str) -> None:
        if self.on_tap_link is not None:
            self.on_tap_link(href)

    def _handle_image_tap(self, kind: Any, path: str, uri: Any) -> None:
        if self.on_tap_image is not None:
            self.on_tap_image(kind, path, uri)

    def _handle_image_change(self, view: ImageView) -> None:
        # Views from a superseded build may still complete
        if self._state is ViewState.PARSED and any(node is view for node in _iter_tree(self._children)):
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


class MarkdownBody(MarkdownView):
    """Markdown view laid out as a non-scrolling column."""

    def layout(self, children: list[RenderedNode]) -> RenderedNode:
        if len(children) == 1:
            return children[0]
        return Column(children)


class Markdown(MarkdownView):
    """Markdown view laid out as a scrolling list with uniform padding.

    Parameters
    ----------
    data : str
        Markdown source
    padding : float, default 16.0
        Padding around the list
    **kwargs
        Options forwarded to :class:`MarkdownView`

    """

    def __init__(self, data: str, *, padding: float = DEFAULT_LISTVIEW_PADDING, **kwargs: Any) -> None:
        super().__init__(data, **kwargs)
        if padding < 0:
            raise ValidationError("padding must not be negative", parameter_name="padding", parameter_value=padding)
        self.padding = padding

    def layout(self, children: list[RenderedNode]) -> RenderedNode:
        return ListView(children, padding=self.padding)
