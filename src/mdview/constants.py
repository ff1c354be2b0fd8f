#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/constants.py
"""Constants and default values shared across mdview modules."""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Extension syntax markers
# =============================================================================

SUBSCRIPT_TAG = "sub"
SUPERSCRIPT_TAG = "sup"

DEFAULT_EXTENSION_SET_NAME = "none"
SCRIPTS_EXTENSION_SET_NAME = "scripts"

# =============================================================================
# Element tags produced by the Markdown parser
# =============================================================================

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

BLOCK_TAGS = frozenset(
    {
        "p",
        *HEADING_TAGS,
        "pre",
        "blockquote",
        "ul",
        "ol",
        "li",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "hr",
    }
)

LIST_TAGS = frozenset({"ul", "ol"})

# =============================================================================
# Image sources
# =============================================================================

ImageKind = Literal["data", "file", "http", "resource"]

IMAGE_KIND_DATA: ImageKind = "data"
IMAGE_KIND_FILE: ImageKind = "file"
IMAGE_KIND_HTTP: ImageKind = "http"
IMAGE_KIND_RESOURCE: ImageKind = "resource"

REMOTE_IMAGE_SCHEMES = frozenset({"http", "https"})
RESOURCE_IMAGE_SCHEME = "resource"
DATA_IMAGE_SCHEME = "data"
FILE_IMAGE_SCHEME = "file"

# Separator between an image path and its "WIDTHxHEIGHT" size hint
IMAGE_SIZE_SEPARATOR = "#"

DEFAULT_IMAGE_PLACEHOLDER_TEXT = "Loading image"
DEFAULT_IMAGE_ERROR_TEXT = "Error loading image"

# =============================================================================
# Rendering defaults
# =============================================================================

DEFAULT_BULLET = "•"
DEFAULT_ORDERED_SUFFIX = "."
DEFAULT_SOFT_BREAK = " "
DEFAULT_LIST_INDENT = 24.0
DEFAULT_BLOCK_SPACING = 8.0
DEFAULT_LISTVIEW_PADDING = 16.0

DEFAULT_FONT_SIZE = 14.0
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_LINK_COLOR = "#1565c0"
DEFAULT_CODE_FONT = "monospace"
DEFAULT_CODE_BACKGROUND = "#eeeeee"
DEFAULT_QUOTE_BACKGROUND = "#bbdefb"
DEFAULT_DIVIDER_COLOR = "#9e9e9e"
DEFAULT_PYGMENTS_STYLE = "default"

# Font size scale of each heading relative to the body font size
HEADING_SCALES = {
    "h1": 1.7,
    "h2": 1.5,
    "h3": 1.3,
    "h4": 1.15,
    "h5": 1.0,
    "h6": 0.9,
}

# Relative size and baseline shift of subscript and superscript text
SCRIPT_SCALE = 0.7
SUBSCRIPT_BASELINE_SHIFT = -0.25
SUPERSCRIPT_BASELINE_SHIFT = 0.4

# =============================================================================
# Optional dependencies
# =============================================================================

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_HIGHLIGHT = [("pygments", "pygments", ">=2.10")]
