#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/ast/visitors.py
"""Visitor pattern implementation for node tree traversal.

Because the parsed tree only has two node kinds, visitors implement
``visit_text`` and ``visit_element``. Tag-specific processing is left to
the visitor itself (the render tree builder uses a tag to handler table).

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from mdview.ast.nodes import Element, Node, Text


class NodeVisitor(ABC):
    """Abstract base class for node visitors.

    Examples
    --------
    Simple visitor that collects all link targets:

        >>> class LinkCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.hrefs = []
        ...
        ...     def visit_text(self, node):
        ...         pass
        ...
        ...     def visit_element(self, node):
        ...         if node.tag == "a":
        ...             self.hrefs.append(node.get("href"))
        ...         for child in node.children:
        ...             child.accept(self)

    """

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_element(self, node: Element) -> Any:
        """Visit an Element node."""
        pass


class TagCounter(NodeVisitor):
    """Count elements per tag in a node tree.

    Examples
    --------
        >>> counter = TagCounter()
        >>> counter.visit_all(nodes)
        >>> counter.counts.get("a", 0)
        2

    """

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def visit_all(self, nodes: list[Node]) -> dict[str, int]:
        """Visit every root node and return the accumulated counts."""
        for node in nodes:
            node.accept(self)
        return self.counts

    def visit_text(self, node: Text) -> None:
        pass

    def visit_element(self, node: Element) -> None:
        self.counts[node.tag] = self.counts.get(node.tag, 0) + 1
        for child in node.children:
            child.accept(self)


class TreePrinter(NodeVisitor):
    """Render a node tree as an indented outline for debugging."""

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self._depth = 0
        self._lines: list[str] = []

    def print(self, nodes: list[Node]) -> str:
        """Return the outline of ``nodes`` as a string."""
        self._lines = []
        self._depth = 0
        for node in nodes:
            node.accept(self)
        return "\n".join(self._lines)

    def visit_text(self, node: Text) -> None:
        self._lines.append(f"{self.indent * self._depth}{node.text!r}")

    def visit_element(self, node: Element) -> None:
        attrs = "".join(f" {key}={value!r}" for key, value in node.attributes.items())
        self._lines.append(f"{self.indent * self._depth}<{node.tag}{attrs}>")
        self._depth += 1
        for child in node.children:
            child.accept(self)
        self._depth -= 1
