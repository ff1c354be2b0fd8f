#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/cli.py
"""Command-line interface printing the render tree of a Markdown file.

Examples
--------
Dump a file::

    $ mdview README.md

Enable subscript/superscript spans and resolve images against a directory::

    $ mdview notes.md --extensions scripts --image-dir ./assets

Read from stdin with highlighted code blocks::

    $ cat notes.md | mdview - --highlight

"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from mdview.api import render_to_text
from mdview.constants import DEFAULT_EXTENSION_SET_NAME, DEPS_HIGHLIGHT
from mdview.exceptions import MdViewError
from mdview.extensions.registry import list_extension_sets
from mdview.logging_utils import configure_logging
from mdview.render.highlight import PygmentsHighlighter
from mdview.utils.decorators import check_dependencies

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    from mdview import __version__

    parser = argparse.ArgumentParser(
        prog="mdview",
        description="Parse a Markdown document and print its render tree.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Markdown file to render, or '-' to read from stdin")
    parser.add_argument(
        "--extensions",
        default=DEFAULT_EXTENSION_SET_NAME,
        choices=list_extension_sets(),
        help="Named extension set enabling extra syntax (default: %(default)s)",
    )
    parser.add_argument("--image-dir", type=Path, help="Base directory for relative image paths")
    parser.add_argument("--highlight", action="store_true", help="Highlight code blocks (requires pygments)")
    parser.add_argument("--no-styles", action="store_true", help="Omit span styles from the output")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def main(args: Optional[list[str]] = None) -> int:
    """Run the command line interface.

    Returns
    -------
    int
        Process exit code; argument errors exit with status 2 from argparse

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    try:
        if parsed_args.highlight:
            check_dependencies("highlight", DEPS_HIGHLIGHT)
        if parsed_args.input == "-":
            source = sys.stdin.read()
        else:
            source = Path(parsed_args.input)

        output = render_to_text(
            source,
            extension_set=parsed_args.extensions,
            image_directory=parsed_args.image_dir,
            syntax_highlighter=PygmentsHighlighter() if parsed_args.highlight else None,
            show_styles=not parsed_args.no_styles,
        )
    except MdViewError as e:
        logger.debug("Rendering failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if output:
        print(output)
    return EXIT_SUCCESS
