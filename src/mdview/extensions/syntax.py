#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/extensions/syntax.py
"""Pluggable syntax rules layered onto the base Markdown grammar.

A syntax rule is a ``(name, pattern, action)`` triple. The pattern is a
regular expression registered with the mistune parser; when it matches,
the action turns the match into one or more document nodes. New syntaxes
are added by appending rules to an :class:`~mdview.extensions.registry.ExtensionSet`
rather than by subclassing a matcher.

Two inline rules ship with mdview:

- :data:`SUBSCRIPT_RULE` turns ``<sub>text</sub>`` into ``Element("sub")``
- :data:`SUPERSCRIPT_RULE` turns ``<sup>text</sup>`` into ``Element("sup")``

Spans do not nest: the text between the markers becomes a single ``Text``
child verbatim, so ``<sub>a<sup>b</sup></sub>`` yields a ``sub`` element
whose text still contains the ``<sup>`` markers.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from mdview.ast.nodes import Element, Node
from mdview.constants import SUBSCRIPT_TAG, SUPERSCRIPT_TAG

SyntaxAction = Callable[[re.Match[str]], list[Node]]

_RULE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class SyntaxRule:
    """A named pattern with an action producing document nodes.

    Parameters
    ----------
    name : str
        Unique rule name. Used as the mistune rule name and as the regex group
        name, so it must be a valid Python identifier.
    pattern : str
        Regular expression matched against the source text. Named groups must
        be prefixed with ``name`` to stay unique once mistune combines rules.
    action : callable
        Maps the match to the nodes to emit. Returning an empty list consumes
        the match without output.

    """

    name: str
    pattern: str
    action: SyntaxAction = field(compare=False)

    def __post_init__(self) -> None:
        """Validate the rule name and compile the pattern once."""
        if not _RULE_NAME_RE.match(self.name):
            raise ValueError(f"Syntax rule name must be an identifier, got {self.name!r}")
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise ValueError(f"Invalid pattern for syntax rule {self.name!r}: {e}") from e

    def apply(self, match: re.Match[str]) -> list[Node]:
        """Run the action for ``match``."""
        return self.action(match)


class InlineSyntaxRule(SyntaxRule):
    """A syntax rule matched within the inline content of a block."""


class BlockSyntaxRule(SyntaxRule):
    """A syntax rule matched at the start of a block.

    Block patterns are tried at line starts only; patterns should begin with a
    punctuation character so that they are not skipped by mistune's plain
    paragraph fast path.

    """


def tagged_span_rule(name: str, tag: str) -> InlineSyntaxRule:
    """Build an inline rule matching ``<tag>text</tag>`` spans.

    The match is non-greedy and requires at least one character between the
    markers; it does not cross line boundaries. The inner text is read from
    the captured group, so markers of any length work.

    Parameters
    ----------
    name : str
        Rule name
    tag : str
        Literal marker tag and the tag of the produced element

    Returns
    -------
    InlineSyntaxRule
        The new rule

    Examples
    --------
        >>> rule = tagged_span_rule("mark", "mark")
        >>> rule.apply(re.search(rule.pattern, "<mark>hi</mark>"))
        [Element(tag='mark', children=[Text(text='hi')], attributes={})]

    """
    group = f"{name}_text"
    escaped = re.escape(tag)
    pattern = rf"<{escaped}>(?P<{group}>.+?)</{escaped}>"

    def action(match: re.Match[str]) -> list[Node]:
        return [Element.text(tag, match.group(group))]

    return InlineSyntaxRule(name=name, pattern=pattern, action=action)


SUBSCRIPT_RULE = tagged_span_rule("subscript", SUBSCRIPT_TAG)
SUPERSCRIPT_RULE = tagged_span_rule("superscript", SUPERSCRIPT_TAG)
