#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parsers producing the generic node tree."""

from mdview.parsers.base import BaseParser
from mdview.parsers.markdown import MarkdownParser, parse_markdown

__all__ = ["BaseParser", "MarkdownParser", "parse_markdown"]
