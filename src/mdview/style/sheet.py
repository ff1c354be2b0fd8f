#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/style/sheet.py
"""Style descriptors and the per-tag style sheet.

A :class:`StyleSheet` maps element tags to :class:`TextStyle` descriptors
(font, color, decoration) and block tags to :class:`BlockStyle` decorations
(padding, background, border). Style sheets are immutable and compared by
value, so a view can tell whether a new sheet actually differs from the
current one.

Style sheets are passed explicitly to the render tree builder. A sheet can be
derived from a :class:`Theme` with :meth:`StyleSheet.from_theme`; there is no
process-wide style state.

"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

from mdview.constants import (
    DEFAULT_BLOCK_SPACING,
    DEFAULT_CODE_BACKGROUND,
    DEFAULT_CODE_FONT,
    DEFAULT_DIVIDER_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINK_COLOR,
    DEFAULT_LIST_INDENT,
    DEFAULT_QUOTE_BACKGROUND,
    DEFAULT_TEXT_COLOR,
    HEADING_SCALES,
    SCRIPT_SCALE,
    SUBSCRIPT_BASELINE_SHIFT,
    SUPERSCRIPT_BASELINE_SHIFT,
)

FontWeight = Literal["normal", "bold"]
FontStyle = Literal["normal", "italic"]
TextDecoration = Literal["none", "underline", "line-through"]


@dataclass(frozen=True)
class TextStyle:
    """Visual style of a run of text.

    Every field is optional; ``None`` means "inherit". Use :meth:`merge` to
    layer a more specific style over an inherited one.

    Parameters
    ----------
    font_family : str or None
        Font family name
    font_size : float or None
        Font size in logical pixels
    font_weight : {"normal", "bold"} or None
        Font weight
    font_style : {"normal", "italic"} or None
        Font slant
    color : str or None
        Foreground color as ``#rrggbb``
    background_color : str or None
        Background color as ``#rrggbb``
    decoration : {"none", "underline", "line-through"} or None
        Text decoration
    baseline_shift : float or None
        Vertical shift relative to the font size (negative lowers the text)

    """

    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[FontWeight] = None
    font_style: Optional[FontStyle] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    decoration: Optional[TextDecoration] = None
    baseline_shift: Optional[float] = None

    def merge(self, other: Optional[TextStyle]) -> TextStyle:
        """Return this style overridden by the non-None fields of ``other``.

        Examples
        --------
        >>> TextStyle(font_size=14.0, color="#000000").merge(TextStyle(color="#ff0000")).color
        '#ff0000'

        """
        if other is None:
            return self
        overrides = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **overrides) if overrides else self


@dataclass(frozen=True)
class BlockStyle:
    """Decoration of a block-level element.

    Parameters
    ----------
    padding : float
        Inner padding in logical pixels
    margin_bottom : float
        Space after the block
    background_color : str or None
        Fill color
    border_color : str or None
        Border color (left border for block quotes, full border for tables)
    border_width : float
        Border width; 0 disables the border

    """

    padding: float = 0.0
    margin_bottom: float = DEFAULT_BLOCK_SPACING
    background_color: Optional[str] = None
    border_color: Optional[str] = None
    border_width: float = 0.0


@dataclass(frozen=True)
class Theme:
    """Minimal theme from which a default style sheet is derived.

    Parameters
    ----------
    font_family : str or None
        Body font family
    font_size : float
        Body font size
    text_color : str
        Body text color
    link_color : str
        Link text color
    code_font_family : str
        Font family for code spans and blocks
    code_background : str
        Background for code spans and blocks
    quote_background : str
        Background for block quotes
    divider_color : str
        Color of horizontal rules and table borders

    """

    font_family: Optional[str] = None
    font_size: float = DEFAULT_FONT_SIZE
    text_color: str = DEFAULT_TEXT_COLOR
    link_color: str = DEFAULT_LINK_COLOR
    code_font_family: str = DEFAULT_CODE_FONT
    code_background: str = DEFAULT_CODE_BACKGROUND
    quote_background: str = DEFAULT_QUOTE_BACKGROUND
    divider_color: str = DEFAULT_DIVIDER_COLOR

    def __post_init__(self) -> None:
        """Validate the body font size."""
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")


@dataclass(frozen=True)
class StyleSheet:
    """Mapping from element tags to visual styles.

    Parameters
    ----------
    text_styles : mapping of str to TextStyle
        Text style per tag. ``p`` is the base style of the document.
    block_styles : mapping of str to BlockStyle
        Block decoration per tag (``blockquote``, ``pre``, ``table``, ``hr``...)
    list_indent : float
        Horizontal indent per list nesting level

    Examples
    --------
    >>> sheet = StyleSheet.from_theme(Theme(font_size=16.0))
    >>> sheet.style_for("h1").font_weight
    'bold'
    >>> sheet.style_for("unknown") is None
    True

    """

    text_styles: Mapping[str, TextStyle] = field(default_factory=dict)
    block_styles: Mapping[str, BlockStyle] = field(default_factory=dict)
    list_indent: float = DEFAULT_LIST_INDENT

    def __post_init__(self) -> None:
        """Freeze copies of the mappings so later changes to the caller's dicts are not seen."""
        object.__setattr__(self, "text_styles", MappingProxyType(dict(self.text_styles)))
        object.__setattr__(self, "block_styles", MappingProxyType(dict(self.block_styles)))
        if self.list_indent < 0:
            raise ValueError(f"list_indent must not be negative, got {self.list_indent}")

    def __hash__(self) -> int:
        return hash(
            (
                tuple(sorted(self.text_styles.items())),
                tuple(sorted(self.block_styles.items())),
                self.list_indent,
            )
        )

    def style_for(self, tag: str) -> Optional[TextStyle]:
        """Return the text style registered for ``tag``, or None."""
        return self.text_styles.get(tag)

    def block_style_for(self, tag: str) -> Optional[BlockStyle]:
        """Return the block decoration registered for ``tag``, or None."""
        return self.block_styles.get(tag)

    @property
    def base(self) -> TextStyle:
        """The document's base text style (the ``p`` style)."""
        return self.text_styles.get("p") or TextStyle()

    @property
    def code(self) -> TextStyle:
        """Style applied to code spans and unhighlighted code blocks."""
        return self.base.merge(self.text_styles.get("code"))

    def copy_with(self, **changes: Any) -> StyleSheet:
        """Return a copy with fields replaced.

        ``text_styles`` and ``block_styles`` passed here are merged into the
        existing mappings rather than replacing them.
        """
        if "text_styles" in changes:
            changes["text_styles"] = {**self.text_styles, **changes["text_styles"]}
        if "block_styles" in changes:
            changes["block_styles"] = {**self.block_styles, **changes["block_styles"]}
        return replace(self, **changes)

    @classmethod
    def from_theme(cls, theme: Optional[Theme] = None) -> StyleSheet:
        """Derive the default style sheet from a theme.

        Parameters
        ----------
        theme : Theme or None
            Theme to derive from; the default theme when None

        Returns
        -------
        StyleSheet
            Style sheet covering every tag the parser produces

        """
        theme = theme or Theme()
        size = theme.font_size
        base = TextStyle(
            font_family=theme.font_family,
            font_size=size,
            font_weight="normal",
            font_style="normal",
            color=theme.text_color,
            decoration="none",
            baseline_shift=0.0,
        )

        text_styles: dict[str, TextStyle] = {
            "p": base,
            "em": TextStyle(font_style="italic"),
            "strong": TextStyle(font_weight="bold"),
            "del": TextStyle(decoration="line-through"),
            "a": TextStyle(color=theme.link_color, decoration="underline"),
            "code": TextStyle(
                font_family=theme.code_font_family,
                font_size=size * 0.85,
                background_color=theme.code_background,
            ),
            "sub": TextStyle(font_size=size * SCRIPT_SCALE, baseline_shift=SUBSCRIPT_BASELINE_SHIFT),
            "sup": TextStyle(font_size=size * SCRIPT_SCALE, baseline_shift=SUPERSCRIPT_BASELINE_SHIFT),
            "blockquote": TextStyle(),
            "th": TextStyle(font_weight="bold"),
            "td": TextStyle(),
            "li": TextStyle(),
        }
        for tag, scale in HEADING_SCALES.items():
            text_styles[tag] = TextStyle(font_size=size * scale, font_weight="bold")

        block_styles = {
            "blockquote": BlockStyle(padding=8.0, background_color=theme.quote_background),
            "pre": BlockStyle(padding=8.0, background_color=theme.code_background),
            "table": BlockStyle(border_color=theme.divider_color, border_width=1.0),
            "hr": BlockStyle(border_color=theme.divider_color, border_width=1.0),
        }
        return cls(text_styles=text_styles, block_styles=block_styles)
