#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option dataclasses for parsing and render tree building."""

from mdview.options.base import BaseParserOptions, CloneFrozenMixin
from mdview.options.markdown import MarkdownParserOptions, RenderOptions

__all__ = [
    "BaseParserOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "RenderOptions",
]
