#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Extension syntax rules and named extension sets."""

from mdview.extensions.registry import (
    EMPTY_EXTENSION_SET,
    ExtensionSet,
    build_extension_set,
    get_extension_set,
    list_extension_sets,
    register_extension_set,
)
from mdview.extensions.syntax import (
    SUBSCRIPT_RULE,
    SUPERSCRIPT_RULE,
    BlockSyntaxRule,
    InlineSyntaxRule,
    SyntaxRule,
    tagged_span_rule,
)

__all__ = [
    "EMPTY_EXTENSION_SET",
    "SUBSCRIPT_RULE",
    "SUPERSCRIPT_RULE",
    "BlockSyntaxRule",
    "ExtensionSet",
    "InlineSyntaxRule",
    "SyntaxRule",
    "build_extension_set",
    "get_extension_set",
    "list_extension_sets",
    "register_extension_set",
    "tagged_span_rule",
]
