#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/utils/encoding.py
"""Decoding of Markdown sources supplied as bytes.

Order of attempts: a byte order mark, then UTF-8, then the chardet guess
when it is confident enough, then latin-1 (which always succeeds).
"""

from __future__ import annotations

import codecs
import logging
from typing import IO, Optional

import chardet

logger = logging.getLogger(__name__)

DETECTION_SAMPLE_SIZE = 8192
DETECTION_CONFIDENCE = 0.7

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def detect_encoding(data: bytes, confidence_threshold: float = DETECTION_CONFIDENCE) -> Optional[str]:
    """Return chardet's guess for ``data``, or None when it is unsure.

    Only the first :data:`DETECTION_SAMPLE_SIZE` bytes are examined.
    """
    result = chardet.detect(data[:DETECTION_SAMPLE_SIZE])
    encoding = result.get("encoding") if result else None
    confidence = (result.get("confidence") if result else None) or 0.0
    if not encoding or confidence < confidence_threshold:
        logger.debug("No confident encoding guess (%s, %.2f)", encoding, confidence)
        return None
    return encoding


def read_text_with_encoding_detection(data: bytes) -> str:
    """Decode Markdown bytes to text.

    Examples
    --------
    >>> read_text_with_encoding_detection("# Café".encode("utf-8"))
    '# Café'

    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data.decode(encoding)

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    guess = detect_encoding(data)
    if guess:
        try:
            return data.decode(guess)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug("Guessed encoding %s failed: %s", guess, e)

    logger.warning("Could not determine the encoding of the Markdown source, decoding as latin-1")
    return data.decode("latin-1")


def normalize_stream_to_text(stream: IO) -> str:
    """Read a text or binary stream to the end and return its text."""
    content = stream.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    return content
