#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/highlight.py
"""Syntax highlighting of code blocks.

A syntax highlighter turns the text of a ``pre`` element into a styled
:class:`~mdview.render.nodes.TextSpan`. The builder uses the returned span
verbatim. :class:`PygmentsHighlighter` is provided for applications that
install the optional ``pygments`` dependency.

"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from mdview.constants import DEFAULT_CODE_FONT, DEFAULT_PYGMENTS_STYLE, DEPS_HIGHLIGHT
from mdview.render.nodes import TextSpan
from mdview.style.sheet import TextStyle
from mdview.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


class SyntaxHighlighter(Protocol):
    """Formats source code into a styled span."""

    def format(self, source: str) -> TextSpan:
        """Return the formatted span for ``source``."""
        ...


class PygmentsHighlighter:
    """Syntax highlighter backed by pygments lexers and styles.

    Parameters
    ----------
    language : str or None
        Lexer alias (e.g., ``"python"``); guessed from the source when None
    style : str
        Name of a pygments style (see https://pygments.org/styles/)
    font_family : str
        Font family applied to every token

    Examples
    --------
        >>> highlighter = PygmentsHighlighter(language="python")
        >>> span = highlighter.format("x = 1")
        >>> span.to_plain_text()
        'x = 1'

    """

    def __init__(
        self,
        language: Optional[str] = None,
        style: str = DEFAULT_PYGMENTS_STYLE,
        font_family: str = DEFAULT_CODE_FONT,
    ) -> None:
        self.language = language
        self.style = style
        self.font_family = font_family

    @requires_dependencies("highlight", DEPS_HIGHLIGHT)
    def format(self, source: str) -> TextSpan:
        """Tokenize ``source`` and return one child span per token run.

        Unknown languages fall back to the plain text lexer.
        """
        from pygments.lexers import get_lexer_by_name, guess_lexer
        from pygments.lexers.special import TextLexer
        from pygments.styles import get_style_by_name
        from pygments.util import ClassNotFound

        try:
            lexer = get_lexer_by_name(self.language) if self.language else guess_lexer(source)
        except ClassNotFound:
            logger.debug("No pygments lexer for %r, using plain text", self.language)
            lexer = TextLexer()
        style = get_style_by_name(self.style)

        children: list[TextSpan] = []
        for token_type, value in lexer.get_tokens(source):
            if not value:
                continue
            token_style = self._text_style(style.style_for_token(token_type))
            if children and children[-1].style == token_style:
                children[-1].text = (children[-1].text or "") + value
            else:
                children.append(TextSpan(text=value, style=token_style))

        # pygments always appends a newline
        if children and not source.endswith("\n"):
            last = children[-1]
            if last.text and last.text.endswith("\n"):
                last.text = last.text[:-1]
                if not last.text:
                    children.pop()

        return TextSpan(style=TextStyle(font_family=self.font_family), children=children)

    def _text_style(self, token_style: dict) -> TextStyle:
        return TextStyle(
            color=f"#{token_style['color']}" if token_style.get("color") else None,
            background_color=f"#{token_style['bgcolor']}" if token_style.get("bgcolor") else None,
            font_weight="bold" if token_style.get("bold") else None,
            font_style="italic" if token_style.get("italic") else None,
            decoration="underline" if token_style.get("underline") else None,
        )
