#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/ast/nodes.py
"""Generic node classes for parsed Markdown documents.

The Markdown parser produces a tree made of exactly two node kinds:

- ``Text`` holds a run of literal characters.
- ``Element`` holds an HTML-like tag name (``p``, ``h1``, ``a``, ``img``,
  ``sub``...), an ordered mapping of attributes and an ordered list of
  child nodes. Leaf elements such as ``img``, ``hr`` and ``br`` have no
  children.

Both kinds support the visitor pattern through :meth:`Node.accept`.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


class Node(ABC):
    """Base class for all document nodes."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with ``visit_text`` and ``visit_element`` methods

        Returns
        -------
        Any
            Result of the visitor method

        """
        pass

    @property
    @abstractmethod
    def text_content(self) -> str:
        """Concatenated text of this node and all of its descendants."""
        pass


@dataclass
class Text(Node):
    """A run of literal text.

    Parameters
    ----------
    text : str
        The text content

    """

    text: str

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)

    @property
    def text_content(self) -> str:
        """Return the text itself."""
        return self.text


@dataclass
class Element(Node):
    """A tagged element with attributes and children.

    Parameters
    ----------
    tag : str
        Element tag name (e.g., ``"p"``, ``"a"``, ``"sub"``)
    children : list of Node, default = empty list
        Ordered child nodes
    attributes : dict, default = empty dict
        Ordered attribute key/value pairs (e.g., ``{"href": "..."}``)

    Examples
    --------
        >>> link = Element("a", [Text("docs")], {"href": "https://example.com"})
        >>> link.text_content
        'docs'

    """

    tag: str
    children: list[Node] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def text(cls, tag: str, text: str) -> Element:
        """Create an element with a single text child.

        Parameters
        ----------
        tag : str
            Element tag name
        text : str
            Text of the single child

        Returns
        -------
        Element
            New element

        """
        return cls(tag, [Text(text)])

    @classmethod
    def empty(cls, tag: str, **attributes: str) -> Element:
        """Create a leaf element without children."""
        return cls(tag, [], dict(attributes))

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_element``."""
        return visitor.visit_element(self)

    @property
    def is_empty(self) -> bool:
        """Whether the element has no children."""
        return not self.children

    @property
    def text_content(self) -> str:
        """Return the concatenated text of all descendants."""
        return "".join(child.text_content for child in self.children)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an attribute value or ``default`` when missing."""
        return self.attributes.get(name, default)


def iter_elements(nodes: list[Node], tag: Optional[str] = None) -> Iterator[Element]:
    """Iterate over elements in document (pre-) order.

    Parameters
    ----------
    nodes : list of Node
        Root nodes to walk
    tag : str, optional
        Only yield elements with this tag

    Yields
    ------
    Element
        Matching elements

    """
    for node in nodes:
        if isinstance(node, Element):
            if tag is None or node.tag == tag:
                yield node
            yield from iter_elements(node.children, tag)
