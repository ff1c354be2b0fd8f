#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and render tree building."""
# src/mdview/options/markdown.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mdview.constants import DEFAULT_BULLET, DEFAULT_ORDERED_SUFFIX, DEFAULT_SOFT_BREAK
from mdview.extensions.registry import EMPTY_EXTENSION_SET, ExtensionSet
from mdview.options.base import BaseParserOptions, CloneFrozenMixin


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-tree parsing.

    Parameters
    ----------
    extension_set : ExtensionSet, default EMPTY_EXTENSION_SET
        Extra block and inline syntax rules layered onto the grammar.
    parse_tables : bool, default True
        Whether to parse GFM pipe tables.
    parse_strikethrough : bool, default True
        Whether to parse ``~~text~~`` into ``del`` elements.
    hard_wrap : bool, default False
        Whether every newline inside a paragraph becomes a ``br`` element.

    """

    extension_set: ExtensionSet = field(
        default=EMPTY_EXTENSION_SET,
        metadata={"help": "Extension set with custom block and inline syntax rules", "importance": "core"},
    )
    parse_tables: bool = field(
        default=True,
        metadata={"help": "Parse table syntax (GFM pipe tables)", "cli_name": "no-parse-tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=True,
        metadata={
            "help": "Parse strikethrough syntax (~~text~~)",
            "cli_name": "no-parse-strikethrough",
            "importance": "core",
        },
    )
    hard_wrap: bool = field(
        default=False,
        metadata={"help": "Treat every newline inside a paragraph as a line break", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the extension set type."""
        super().__post_init__()
        if not isinstance(self.extension_set, ExtensionSet):
            raise ValueError(f"extension_set must be an ExtensionSet, got {type(self.extension_set).__name__}")


@dataclass(frozen=True)
class RenderOptions(CloneFrozenMixin):
    """Options for building render trees.

    Parameters
    ----------
    image_directory : Path or None, default None
        Base directory prefixed to relative local image paths.
    bullet : str, default "•"
        Marker used for unordered list items.
    ordered_suffix : str, default "."
        Suffix appended to ordered list item numbers.
    soft_break : str, default " "
        Text emitted for soft line breaks inside paragraphs.

    """

    image_directory: Optional[Path] = field(
        default=None,
        metadata={"help": "Base directory for relative image paths", "type": Path, "importance": "core"},
    )
    bullet: str = field(
        default=DEFAULT_BULLET,
        metadata={"help": "Bullet marker for unordered list items", "importance": "advanced"},
    )
    ordered_suffix: str = field(
        default=DEFAULT_ORDERED_SUFFIX,
        metadata={"help": "Suffix after ordered list numbers", "importance": "advanced"},
    )
    soft_break: str = field(
        default=DEFAULT_SOFT_BREAK,
        metadata={"help": "Text emitted for soft line breaks", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the bullet marker is empty.

        """
        if not self.bullet:
            raise ValueError("bullet must be a non-empty string")
        if self.image_directory is not None and not isinstance(self.image_directory, Path):
            object.__setattr__(self, "image_directory", Path(self.image_directory))
