#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/nodes.py
"""Renderable node classes produced by the render tree builder.

The builder output is an ordered list of :class:`RenderedNode` objects in
document order. Inline formatting is expressed as a tree of
:class:`TextSpan` objects held by a :class:`RichText` block; every other
node is block-level.

Rendered nodes are plain dataclasses compared by value. Two builds of the
same source with the same style sheet produce equal trees.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Literal, Optional

from mdview.render.recognizers import TapGestureRecognizer
from mdview.style.sheet import BlockStyle, TextStyle

if TYPE_CHECKING:
    from mdview.render.images import ImageSource

logger = logging.getLogger(__name__)

ImageStatus = Literal["pending", "loaded", "failed"]
ErrorBuilder = Callable[[Any], "RenderedNode"]
ImageListener = Callable[["ImageView"], None]


@dataclass
class TextSpan:
    """A run of styled inline text, optionally with nested spans.

    Parameters
    ----------
    text : str or None
        Text of this span, rendered before its children
    style : TextStyle or None
        Resolved style of this span
    children : list of TextSpan
        Nested spans
    recognizer : TapGestureRecognizer or None
        Recognizer receiving taps on this span (set inside links)

    """

    text: Optional[str] = None
    style: Optional[TextStyle] = None
    children: list[TextSpan] = field(default_factory=list)
    recognizer: Optional[TapGestureRecognizer] = None

    def to_plain_text(self) -> str:
        """Return the concatenated text of the span and its children."""
        return (self.text or "") + "".join(child.to_plain_text() for child in self.children)

    def iter_spans(self) -> Iterator[TextSpan]:
        """Iterate over this span and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_spans()


class RenderedNode(ABC):
    """Base class for block-level renderable nodes."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor with ``visit_*`` methods for each node type."""
        pass

    def iter_children(self) -> Iterator[RenderedNode]:
        """Iterate over direct child nodes."""
        return iter(())

    def iter_recognizers(self) -> Iterator[TapGestureRecognizer]:
        """Iterate over the distinct recognizers referenced by this subtree."""
        seen: set[int] = set()
        for recognizer in self._collect_recognizers():
            if id(recognizer) not in seen:
                seen.add(id(recognizer))
                yield recognizer

    def _collect_recognizers(self) -> Iterator[TapGestureRecognizer]:
        for child in self.iter_children():
            yield from child._collect_recognizers()


@dataclass
class RichText(RenderedNode):
    """A block of inline text.

    Parameters
    ----------
    span : TextSpan
        Root span holding the inline content
    tag : str
        Tag of the element that produced the block (``p``, ``h1``, ``li``...)

    """

    span: TextSpan
    tag: str = "p"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_rich_text(self)

    def to_plain_text(self) -> str:
        return self.span.to_plain_text()

    def _collect_recognizers(self) -> Iterator[TapGestureRecognizer]:
        for span in self.span.iter_spans():
            if span.recognizer is not None:
                yield span.recognizer


@dataclass
class BlockContainer(RenderedNode):
    """A decorated block wrapping child blocks (block quotes, code blocks).

    Parameters
    ----------
    tag : str
        Tag of the element that produced the block
    children : list of RenderedNode
        Child blocks
    style : BlockStyle or None
        Decoration of the block

    """

    tag: str
    children: list[RenderedNode] = field(default_factory=list)
    style: Optional[BlockStyle] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_block_container(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.children)


@dataclass
class ListItemView(RenderedNode):
    """A list item with its bullet and nesting depth.

    Parameters
    ----------
    bullet : str
        Bullet text (``•`` or ``3.``)
    depth : int
        Nesting level, 0 for top-level lists
    children : list of RenderedNode
        Content of the item
    indent : float
        Horizontal indent derived from the depth

    """

    bullet: str
    depth: int
    children: list[RenderedNode] = field(default_factory=list)
    indent: float = 0.0

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.children)


@dataclass
class TableCellView(RenderedNode):
    """A table cell."""

    children: list[RenderedNode] = field(default_factory=list)
    is_header: bool = False
    align: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table_cell(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.children)


@dataclass
class TableRowView(RenderedNode):
    """A table row."""

    cells: list[TableCellView] = field(default_factory=list)
    is_header: bool = False

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table_row(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.cells)


@dataclass
class TableView(RenderedNode):
    """A table; header rows come first and are flagged."""

    rows: list[TableRowView] = field(default_factory=list)
    style: Optional[BlockStyle] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.rows)

    @property
    def column_count(self) -> int:
        """Number of columns of the widest row."""
        return max((len(row.cells) for row in self.rows), default=0)


@dataclass
class Divider(RenderedNode):
    """A horizontal rule."""

    style: Optional[BlockStyle] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_divider(self)


@dataclass
class ImageView(RenderedNode):
    """An image whose content is resolved by an image loader.

    The view starts ``pending`` and shows ``child`` (the placeholder). The
    loader later calls :meth:`complete` or :meth:`fail`; failure swaps the
    child for the node returned by ``error_builder``. Listeners registered
    with :meth:`add_listener` are notified on every state change.

    Parameters
    ----------
    source : ImageSource
        Classified image source
    alt : str
        Alternative text
    title : str or None
        Optional image title
    child : RenderedNode or None
        Node currently displayed in place of the image
    status : {"pending", "loaded", "failed"}
        Load state
    data : bytes or None
        Image bytes once loaded
    error : Any
        Load error once failed
    recognizer : TapGestureRecognizer or None
        Recognizer of the enclosing link, if any
    on_tap : callable or None
        Called with ``(kind, path, uri)`` on taps outside links
    error_builder : callable or None
        Builds the node displayed after a failure

    """

    source: ImageSource
    alt: str = ""
    title: Optional[str] = None
    child: Optional[RenderedNode] = None
    status: ImageStatus = "pending"
    data: Optional[bytes] = field(default=None, repr=False)
    error: Any = field(default=None, compare=False)
    recognizer: Optional[TapGestureRecognizer] = None
    on_tap: Optional[Callable[..., None]] = field(default=None, compare=False, repr=False)
    error_builder: Optional[ErrorBuilder] = field(default=None, compare=False, repr=False)
    _listeners: list[ImageListener] = field(default_factory=list, init=False, compare=False, repr=False)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_image(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter([self.child] if self.child is not None else [])

    def _collect_recognizers(self) -> Iterator[TapGestureRecognizer]:
        if self.recognizer is not None:
            yield self.recognizer
        yield from super()._collect_recognizers()

    @property
    def width(self) -> Optional[float]:
        return self.source.width

    @property
    def height(self) -> Optional[float]:
        return self.source.height

    def add_listener(self, listener: ImageListener) -> None:
        """Register a callback invoked whenever the load state changes."""
        self._listeners.append(listener)

    def complete(self, data: bytes) -> None:
        """Mark the image as loaded with ``data``; the placeholder is dropped."""
        self.status = "loaded"
        self.data = data
        self.child = None
        self._notify()

    def fail(self, error: Any) -> None:
        """Mark the image as failed and display the error node."""
        logger.debug("Image %r failed to load: %s", self.source.path, error)
        self.status = "failed"
        self.error = error
        self.child = self.error_builder(error) if self.error_builder is not None else None
        self._notify()

    def tap(self) -> None:
        """Dispatch a tap to the enclosing link or to the image tap callback."""
        if self.recognizer is not None:
            self.recognizer.tap()
        elif self.on_tap is not None:
            self.on_tap(self.source.kind, self.source.path, self.source.uri)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


@dataclass
class Column(RenderedNode):
    """Non-scrolling vertical layout of blocks."""

    children: list[RenderedNode] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_column(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.children)


@dataclass
class ListView(RenderedNode):
    """Scrolling vertical layout of blocks with uniform padding."""

    children: list[RenderedNode] = field(default_factory=list)
    padding: float = 0.0

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_view(self)

    def iter_children(self) -> Iterator[RenderedNode]:
        return iter(self.children)
