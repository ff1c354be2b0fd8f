"""Test utilities for the mdview test suite.

Helpers for flattening render trees and small fixtures such as a minimal
PNG image.
"""

import base64
import shutil
import tempfile
from pathlib import Path

from mdview.render.nodes import RenderedNode, RichText, TextSpan

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_BYTES = base64.b64decode(MINIMAL_PNG_B64)
MINIMAL_PNG_DATA_URI = f"data:image/png;base64,{MINIMAL_PNG_B64}"


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp(prefix="mdview_test_"))


def cleanup_test_dir(path: Path) -> None:
    """Remove a temporary test directory."""
    shutil.rmtree(path, ignore_errors=True)


def iter_tree(nodes: list[RenderedNode]):
    """Iterate over every rendered node in pre-order."""
    for node in nodes:
        yield node
        yield from iter_tree(list(node.iter_children()))


def find_nodes(nodes: list[RenderedNode], node_type: type) -> list:
    """Return all rendered nodes of ``node_type`` in document order."""
    return [node for node in iter_tree(nodes) if isinstance(node, node_type)]


def text_spans(block: RichText) -> list[TextSpan]:
    """Return the spans of a rich text block that carry text."""
    return [span for span in block.span.iter_spans() if span.text]


def plain_texts(nodes: list[RenderedNode]) -> list[str]:
    """Return the plain text of every rich text block in document order."""
    return [block.to_plain_text() for block in find_nodes(nodes, RichText)]
