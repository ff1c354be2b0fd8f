#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/ast/__init__.py
"""Generic document tree produced by the Markdown parser."""

from mdview.ast.nodes import Element, Node, Text, iter_elements
from mdview.ast.visitors import NodeVisitor, TagCounter, TreePrinter

__all__ = [
    "Element",
    "Node",
    "NodeVisitor",
    "TagCounter",
    "Text",
    "TreePrinter",
    "iter_elements",
]
