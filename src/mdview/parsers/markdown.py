#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/parsers/markdown.py
"""Markdown to node tree parser.

This module turns Markdown source into the generic ``Text``/``Element`` tree
using the mistune parser. The extension set from the parser options is
registered with mistune before each parse, so custom syntax such as
``<sub>`` and ``<sup>`` spans becomes dedicated elements instead of raw HTML.

Element tags follow HTML naming: ``p``, ``h1``-``h6``, ``em``, ``strong``,
``del``, ``code``, ``pre``, ``a``, ``img``, ``ul``, ``ol``, ``li``,
``blockquote``, ``table``/``thead``/``tbody``/``tr``/``th``/``td``, ``hr``,
``br`` and ``html`` for raw HTML that no rule consumed.

"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from mdview.ast import Element, Node, Text
from mdview.constants import DEPS_MARKDOWN
from mdview.exceptions import ParsingError
from mdview.extensions.syntax import SyntaxRule
from mdview.options.markdown import MarkdownParserOptions
from mdview.parsers.base import BaseParser, ParserInput
from mdview.utils.decorators import debug_timer, requires_dependencies
from mdview.utils.text import normalize_newlines

if TYPE_CHECKING:
    import mistune

logger = logging.getLogger(__name__)

# Token type used for nodes produced by extension syntax rules
EXTENSION_TOKEN = "mdview_extension"

_INLINE_RULES_BEFORE = "inline_html"
_BLOCK_RULES_BEFORE = "raw_html"


def _rule_parser(rule: SyntaxRule) -> Callable[[Any, re.Match[str], Any], int]:
    """Adapt a syntax rule to mistune's ``func(parser, match, state)`` protocol."""

    def parse_rule(parser: Any, m: re.Match[str], state: Any) -> int:
        state.append_token({"type": EXTENSION_TOKEN, "nodes": rule.apply(m)})
        return m.end()

    parse_rule.__name__ = f"parse_{rule.name}"
    return parse_rule


class MarkdownParser(BaseParser):
    r"""Parse Markdown into a list of generic document nodes.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> nodes = parser.parse("# Hello\n\nThis is **bold**.")
        >>> [node.tag for node in nodes]
        ['h1', 'p']

    With subscript and superscript spans:

        >>> from mdview.extensions import build_extension_set
        >>> options = MarkdownParserOptions(extension_set=build_extension_set())
        >>> MarkdownParser(options).parse("H<sub>2</sub>O")[0].children[1].tag
        'sub'

    """

    options_class = MarkdownParserOptions

    def __init__(self, options: MarkdownParserOptions | None = None):
        super().__init__(options)
        self.options: MarkdownParserOptions

        self._block_handlers: dict[str, Callable[[dict[str, Any]], Node | list[Node] | None]] = {
            "heading": self._process_heading,
            "paragraph": self._process_paragraph,
            "block_text": self._process_block_text,
            "block_code": self._process_code_block,
            "block_quote": self._process_block_quote,
            "list": self._process_list,
            "list_item": self._process_list_item,
            "table": self._process_table,
            "thematic_break": lambda token: Element.empty("hr"),
            "block_html": self._process_html,
            "blank_line": lambda token: None,
            EXTENSION_TOKEN: self._process_extension,
        }
        self._inline_handlers: dict[str, Callable[[dict[str, Any]], Node | list[Node] | None]] = {
            "text": lambda token: Text(token.get("raw", "")),
            "emphasis": lambda token: self._wrap_inline("em", token),
            "strong": lambda token: self._wrap_inline("strong", token),
            "strikethrough": lambda token: self._wrap_inline("del", token),
            "codespan": lambda token: Element.text("code", token.get("raw", "")),
            "link": self._process_link,
            "image": self._process_image,
            "linebreak": lambda token: Element.empty("br"),
            "softbreak": lambda token: Text("\n"),
            "inline_html": self._process_html,
            EXTENSION_TOKEN: self._process_extension,
        }

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, input_data: ParserInput) -> list[Node]:
        """Parse Markdown input into root nodes.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown text, or a path/stream/bytes holding it

        Returns
        -------
        list of Node
            Root nodes in document order

        Raises
        ------
        ValidationError
            If ``input_data`` is None
        ParsingError
            If mistune cannot tokenize the input

        """
        content = normalize_newlines(self._load_text_content(input_data))
        markdown = self._create_markdown()

        with debug_timer(logger, "Markdown parse"):
            try:
                tokens, _state = markdown.parse(content)
            except RecursionError as e:
                raise ParsingError(
                    "Markdown nesting is too deep to parse", stage="tokenize", original_error=e
                ) from e

        if not isinstance(tokens, list):
            raise ParsingError("mistune returned rendered output instead of tokens", stage="tokenize")
        return self._process_tokens(tokens)

    def _create_markdown(self) -> mistune.Markdown:
        """Create a mistune instance with plugins and extension rules registered."""
        import mistune

        plugins = []
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        if self.options.parse_tables:
            plugins.append("table")

        markdown = mistune.create_markdown(hard_wrap=self.options.hard_wrap, renderer=None, plugins=plugins)

        extension_set = self.options.extension_set
        for block_rule in extension_set.block_syntaxes:
            markdown.block.register(block_rule.name, block_rule.pattern, _rule_parser(block_rule), _BLOCK_RULES_BEFORE)
        for inline_rule in extension_set.inline_syntaxes:
            markdown.inline.register(
                inline_rule.name, inline_rule.pattern, _rule_parser(inline_rule), _INLINE_RULES_BEFORE
            )
        if not extension_set.is_empty:
            logger.debug(
                "Registered extension set %r (%d block, %d inline rules)",
                extension_set.name,
                len(extension_set.block_syntaxes),
                len(extension_set.inline_syntaxes),
            )
        return markdown

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process block-level mistune tokens into nodes."""
        return self._collect(tokens, self._block_handlers)

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline mistune tokens into nodes."""
        return self._collect(tokens, self._inline_handlers)

    def _collect(
        self,
        tokens: list[dict[str, Any]],
        handlers: dict[str, Callable[[dict[str, Any]], Node | list[Node] | None]],
    ) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            handler = handlers.get(token.get("type", ""))
            node = handler(token) if handler else self._process_unknown(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _process_unknown(self, token: dict[str, Any]) -> Node | list[Node] | None:
        """Keep the content of token types without a dedicated handler."""
        logger.debug("No handler for mistune token type %r", token.get("type"))
        children = token.get("children")
        if isinstance(children, list):
            return self._process_inline_tokens(children)
        raw = token.get("raw")
        if raw:
            return Text(raw)
        return None

    def _children(self, token: dict[str, Any]) -> list[dict[str, Any]]:
        children = token.get("children", [])
        return children if isinstance(children, list) else []

    def _attrs(self, token: dict[str, Any]) -> dict[str, Any]:
        attrs = token.get("attrs", {})
        return attrs if isinstance(attrs, dict) else {}

    def _wrap_inline(self, tag: str, token: dict[str, Any]) -> Element:
        return Element(tag, self._process_inline_tokens(self._children(token)))

    def _process_heading(self, token: dict[str, Any]) -> Element:
        """Process heading token into an ``h1``-``h6`` element."""
        level = self._attrs(token).get("level", 1)
        if not isinstance(level, int) or level < 1 or level > 6:
            level = 1
        return Element(f"h{level}", self._process_inline_tokens(self._children(token)))

    def _process_paragraph(self, token: dict[str, Any]) -> Element:
        return Element("p", self._process_inline_tokens(self._children(token)))

    def _process_block_text(self, token: dict[str, Any]) -> list[Node]:
        """Tight list items hold their inline content directly."""
        return self._process_inline_tokens(self._children(token))

    def _process_code_block(self, token: dict[str, Any]) -> Element:
        """Process a fenced or indented code block into ``pre > code``.

        The info string's first word becomes a ``language-*`` class on the
        inner ``code`` element.
        """
        code = token.get("raw", "")
        if code.endswith("\n"):
            code = code[:-1]

        attributes: dict[str, str] = {}
        info = self._attrs(token).get("info")
        if info and info.strip():
            attributes["class"] = f"language-{info.split()[0]}"
        return Element("pre", [Element("code", [Text(code)], attributes)])

    def _process_block_quote(self, token: dict[str, Any]) -> Element:
        return Element("blockquote", self._process_tokens(self._children(token)))

    def _process_list(self, token: dict[str, Any]) -> Element:
        """Process list token into ``ul`` or ``ol`` (with ``start`` when not 1)."""
        attrs = self._attrs(token)
        ordered = bool(attrs.get("ordered", False))
        attributes: dict[str, str] = {}
        start = attrs.get("start")
        if ordered and isinstance(start, int) and start != 1:
            attributes["start"] = str(start)
        return Element("ol" if ordered else "ul", self._process_tokens(self._children(token)), attributes)

    def _process_list_item(self, token: dict[str, Any]) -> Element:
        return Element("li", self._process_tokens(self._children(token)))

    def _process_table(self, token: dict[str, Any]) -> Element:
        """Process table token into ``table`` with ``thead``/``tbody`` sections."""
        sections: list[Node] = []
        for section in self._children(token):
            section_type = section.get("type", "")
            if section_type == "table_head":
                cells = self._process_table_cells(self._children(section), "th")
                sections.append(Element("thead", [Element("tr", cells)]))
            elif section_type == "table_body":
                rows: list[Node] = [
                    Element("tr", self._process_table_cells(self._children(row), "td"))
                    for row in self._children(section)
                ]
                sections.append(Element("tbody", rows))
        return Element("table", sections)

    def _process_table_cells(self, cell_tokens: list[dict[str, Any]], tag: str) -> list[Node]:
        cells: list[Node] = []
        for cell_token in cell_tokens:
            attributes: dict[str, str] = {}
            align = self._attrs(cell_token).get("align")
            if align:
                attributes["align"] = str(align)
            cells.append(Element(tag, self._process_inline_tokens(self._children(cell_token)), attributes))
        return cells

    def _process_link(self, token: dict[str, Any]) -> Element:
        attrs = self._attrs(token)
        attributes = {"href": attrs.get("url", "")}
        if attrs.get("title"):
            attributes["title"] = attrs["title"]
        return Element("a", self._process_inline_tokens(self._children(token)), attributes)

    def _process_image(self, token: dict[str, Any]) -> Element:
        """Process image token into a leaf ``img`` element; alt text comes from children."""
        attrs = self._attrs(token)
        alt = "".join(node.text_content for node in self._process_inline_tokens(self._children(token)))
        attributes = {"src": attrs.get("url", ""), "alt": alt}
        if attrs.get("title"):
            attributes["title"] = attrs["title"]
        return Element("img", [], attributes)

    def _process_html(self, token: dict[str, Any]) -> Optional[Element]:
        raw = token.get("raw", "")
        if not raw:
            return None
        return Element.text("html", raw)

    def _process_extension(self, token: dict[str, Any]) -> list[Node]:
        return list(token.get("nodes", []))


def parse_markdown(markdown_content: ParserInput, options: MarkdownParserOptions | None = None) -> list[Node]:
    r"""Parse Markdown text into root nodes.

    Parameters
    ----------
    markdown_content : str, Path, IO, or bytes
        Markdown to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    list of Node
        Root nodes in document order

    Examples
    --------
    >>> nodes = parse_markdown("# Hello\n\nWorld")
    >>> len(nodes)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
