#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/extensions/registry.py
"""Registry of named extension sets.

An :class:`ExtensionSet` bundles block and inline syntax rules into one
immutable configuration that the Markdown parser layers onto its grammar.
Sets are registered under a name so callers (and the CLI) can select them.

Built-in sets
-------------
- ``"none"``: no extensions (the parser default)
- ``"scripts"``: subscript and superscript spans, see :func:`build_extension_set`

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from mdview.constants import DEFAULT_EXTENSION_SET_NAME, SCRIPTS_EXTENSION_SET_NAME
from mdview.exceptions import ValidationError
from mdview.extensions.syntax import (
    SUBSCRIPT_RULE,
    SUPERSCRIPT_RULE,
    BlockSyntaxRule,
    InlineSyntaxRule,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtensionSet:
    """An immutable bundle of syntax rules.

    Parameters
    ----------
    name : str
        Display name of the set
    block_syntaxes : tuple of BlockSyntaxRule, default = ()
        Block rules, tried before mistune's raw HTML rule
    inline_syntaxes : tuple of InlineSyntaxRule, default = ()
        Inline rules, tried before mistune's inline HTML rule, in order

    """

    name: str
    block_syntaxes: tuple[BlockSyntaxRule, ...] = ()
    inline_syntaxes: tuple[InlineSyntaxRule, ...] = ()

    def __post_init__(self) -> None:
        """Reject duplicate rule names, which mistune would silently merge."""
        names = [rule.name for rule in (*self.block_syntaxes, *self.inline_syntaxes)]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate syntax rule names in extension set {self.name!r}: {duplicates}")

    @property
    def is_empty(self) -> bool:
        """Whether the set contains no rules."""
        return not self.block_syntaxes and not self.inline_syntaxes

    def extend(
        self,
        name: str,
        block_syntaxes: tuple[BlockSyntaxRule, ...] = (),
        inline_syntaxes: tuple[InlineSyntaxRule, ...] = (),
    ) -> ExtensionSet:
        """Return a new set with additional rules appended."""
        return ExtensionSet(
            name=name,
            block_syntaxes=self.block_syntaxes + tuple(block_syntaxes),
            inline_syntaxes=self.inline_syntaxes + tuple(inline_syntaxes),
        )


EMPTY_EXTENSION_SET = ExtensionSet(name=DEFAULT_EXTENSION_SET_NAME)


@lru_cache(maxsize=None)
def build_extension_set() -> ExtensionSet:
    """Return the extension set enabling subscript and superscript spans.

    The set has no block extensions and the subscript and superscript inline
    rules, in that order. It is built once per process and shared.

    Returns
    -------
    ExtensionSet
        The shared set

    """
    return ExtensionSet(
        name=SCRIPTS_EXTENSION_SET_NAME,
        block_syntaxes=(),
        inline_syntaxes=(SUBSCRIPT_RULE, SUPERSCRIPT_RULE),
    )


_REGISTRY: dict[str, ExtensionSet] = {
    DEFAULT_EXTENSION_SET_NAME: EMPTY_EXTENSION_SET,
    SCRIPTS_EXTENSION_SET_NAME: build_extension_set(),
}


def register_extension_set(extension_set: ExtensionSet, replace: bool = False) -> None:
    """Register an extension set under its name.

    Parameters
    ----------
    extension_set : ExtensionSet
        Set to register
    replace : bool, default = False
        Allow replacing an existing registration

    Raises
    ------
    ValidationError
        If the name is taken and ``replace`` is False

    """
    if extension_set.name in _REGISTRY and not replace:
        raise ValidationError(
            f"Extension set {extension_set.name!r} is already registered",
            parameter_name="extension_set",
            parameter_value=extension_set.name,
        )
    logger.debug("Registering extension set %r", extension_set.name)
    _REGISTRY[extension_set.name] = extension_set


def get_extension_set(name: str) -> ExtensionSet:
    """Look up a registered extension set by name.

    Raises
    ------
    ValidationError
        If no set is registered under ``name``

    """
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(_REGISTRY))
        raise ValidationError(
            f"Unknown extension set {name!r}. Available: {available}",
            parameter_name="extension_set",
            parameter_value=name,
        ) from None


def list_extension_sets() -> list[str]:
    """Return the sorted names of all registered extension sets."""
    return sorted(_REGISTRY)
