#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/parsers/base.py
"""Parser interface shared by Markdown front ends.

A parser turns source text into the ``Text``/``Element`` tree consumed by
the render tree builder. Sources may be given as the text itself, as bytes,
as a path or as an open stream.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from mdview.ast import Node
from mdview.exceptions import FileAccessError, InvalidOptionsError, ValidationError
from mdview.exceptions import FileNotFoundError as SourceNotFoundError
from mdview.options.base import BaseParserOptions
from mdview.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Turns a Markdown source into root nodes."""

    #: Options class accepted by the parser, checked on construction
    options_class: type[BaseParserOptions] = BaseParserOptions

    def __init__(self, options: BaseParserOptions | None = None):
        if options is not None and not isinstance(options, self.options_class):
            raise InvalidOptionsError(type(self).__name__, self.options_class, type(options))
        self.options = options if options is not None else self.options_class()

    @abstractmethod
    def parse(self, input_data: ParserInput) -> list[Node]:
        """Return the root nodes of ``input_data`` in document order."""

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Read ``input_data`` into a string.

        A ``str`` is always the Markdown text itself; pass a ``Path`` to read
        a file.

        Raises
        ------
        ValidationError
            If ``input_data`` is None or of an unsupported type
        FileNotFoundError
            If a ``Path`` does not exist
        FileAccessError
            If a ``Path`` cannot be read

        """
        if input_data is None:
            raise ValidationError("Markdown input must not be None", parameter_name="input_data")
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        if isinstance(input_data, Path):
            logger.debug("Reading Markdown from %s", input_data)
            try:
                data = input_data.read_bytes()
            except FileNotFoundError as e:
                raise SourceNotFoundError(str(input_data), original_error=e) from e
            except OSError as e:
                raise FileAccessError(str(input_data), original_error=e) from e
            return read_text_with_encoding_detection(data)
        if hasattr(input_data, "read"):
            return normalize_stream_to_text(input_data)
        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=type(input_data),
        )
