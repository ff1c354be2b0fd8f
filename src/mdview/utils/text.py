#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/utils/text.py
"""Text preprocessing helpers applied before Markdown parsing."""

from __future__ import annotations

import re

_LINE_ENDING_RE = re.compile(r"\r\n?")


def normalize_newlines(text: str) -> str:
    r"""Convert ``\r\n`` and lone ``\r`` line endings to ``\n``.

    Examples
    --------
    >>> normalize_newlines("a\r\nb\rc")
    'a\nb\nc'

    """
    return _LINE_ENDING_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    r"""Split text into lines after newline normalization.

    A trailing newline does not produce an empty last line.

    Examples
    --------
    >>> split_lines("a\r\nb")
    ['a', 'b']
    >>> split_lines("")
    []

    """
    normalized = normalize_newlines(text)
    if not normalized:
        return []
    lines = normalized.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
