#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Style descriptors, themes and style sheets."""

from mdview.style.sheet import BlockStyle, StyleSheet, TextStyle, Theme

__all__ = ["BlockStyle", "StyleSheet", "TextStyle", "Theme"]
