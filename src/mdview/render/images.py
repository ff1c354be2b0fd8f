#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/images.py
"""Image source classification and image loading.

An image ``src`` attribute is classified into one of four resource kinds:

- ``data``: inline ``data:`` URI
- ``file``: local path, relative paths resolved against an image directory
- ``http``: remote ``http``/``https`` URL
- ``resource``: logical resource identifier (``resource:`` scheme), also
  the fallback for anything that cannot be classified

An optional ``#WIDTHxHEIGHT`` suffix gives size hints, e.g.
``logo.png#120x40``. Classification never raises; malformed sources fall
back to the ``resource`` kind.

Loading is delegated to an :class:`ImageLoader`. The builder hands it an
:class:`~mdview.render.nodes.ImageView` showing a placeholder; the loader
resolves the view later with ``complete()`` or ``fail()``.

"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol
from urllib.parse import SplitResult, unquote, unquote_to_bytes, urlsplit

from mdview.constants import (
    DATA_IMAGE_SCHEME,
    FILE_IMAGE_SCHEME,
    IMAGE_KIND_DATA,
    IMAGE_KIND_FILE,
    IMAGE_KIND_HTTP,
    IMAGE_KIND_RESOURCE,
    IMAGE_SIZE_SEPARATOR,
    REMOTE_IMAGE_SCHEMES,
    RESOURCE_IMAGE_SCHEME,
    ImageKind,
)

if TYPE_CHECKING:
    from mdview.render.nodes import ImageView

logger = logging.getLogger(__name__)

_SIZE_HINT_RE = re.compile(r"^(?P<width>\d+(?:\.\d+)?)x(?P<height>\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class ImageSource:
    """A classified image source.

    Parameters
    ----------
    kind : {"data", "file", "http", "resource"}
        Resource kind
    path : str
        Kind-specific path: the file path (joined with the image directory),
        the URL, the resource name, or ``""`` for data URIs
    uri : SplitResult
        Parsed URI of the source without the size hint
    width : float or None
        Width hint from a ``#WxH`` suffix
    height : float or None
        Height hint from a ``#WxH`` suffix

    """

    kind: ImageKind
    path: str
    uri: SplitResult
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def url(self) -> str:
        """The source URL without the size hint."""
        return self.uri.geturl()


def _opaque_uri(src: str) -> SplitResult:
    return SplitResult(scheme="", netloc="", path=src, query="", fragment="")


def _fallback(src: str, reason: str) -> ImageSource:
    logger.debug("Treating image source %r as a resource identifier: %s", src, reason)
    return ImageSource(kind=IMAGE_KIND_RESOURCE, path=src, uri=_opaque_uri(src))


def parse_size_hint(hint: str) -> tuple[Optional[float], Optional[float]]:
    """Parse a ``WIDTHxHEIGHT`` size hint.

    Examples
    --------
    >>> parse_size_hint("120x40")
    (120.0, 40.0)
    >>> parse_size_hint("large")
    (None, None)

    """
    match = _SIZE_HINT_RE.match(hint.strip())
    if not match:
        return None, None
    return float(match.group("width")), float(match.group("height"))


def parse_image_source(src: str, image_directory: Optional[Path] = None) -> ImageSource:
    """Classify an image ``src`` attribute.

    Parameters
    ----------
    src : str
        Raw ``src`` attribute of an ``img`` element
    image_directory : Path or None
        Base directory prefixed to relative local paths

    Returns
    -------
    ImageSource
        Classified source; ``resource`` kind for anything malformed

    Examples
    --------
    >>> parse_image_source("https://example.com/a.png#64x32").kind
    'http'
    >>> parse_image_source("not-a-valid-uri###").kind
    'resource'

    """
    parts = src.split(IMAGE_SIZE_SEPARATOR)
    if len(parts) > 2:
        return _fallback(src, "more than one size separator")

    location = parts[0].strip()
    width, height = parse_size_hint(parts[1]) if len(parts) == 2 else (None, None)
    if not location:
        return _fallback(src, "empty location")

    try:
        uri = urlsplit(location)
    except ValueError as e:
        return _fallback(src, str(e))

    scheme = uri.scheme.lower()
    if scheme in REMOTE_IMAGE_SCHEMES:
        if not uri.netloc:
            return _fallback(src, "remote URL without host")
        return ImageSource(IMAGE_KIND_HTTP, location, uri, width, height)
    if scheme == DATA_IMAGE_SCHEME:
        return ImageSource(IMAGE_KIND_DATA, "", uri, width, height)
    if scheme == RESOURCE_IMAGE_SCHEME:
        name = (uri.netloc + uri.path).lstrip("/")
        if not name:
            return _fallback(src, "empty resource name")
        return ImageSource(IMAGE_KIND_RESOURCE, name, uri, width, height)
    # A single letter scheme is a Windows drive letter
    if scheme in ("", FILE_IMAGE_SCHEME) or len(scheme) == 1:
        file_path = location if len(scheme) == 1 else unquote(uri.path)
        if not file_path:
            return _fallback(src, "empty file path")
        path = Path(file_path)
        if image_directory is not None and not path.is_absolute() and len(scheme) != 1:
            path = Path(image_directory) / path
        return ImageSource(IMAGE_KIND_FILE, str(path), uri, width, height)
    return _fallback(src, f"unsupported scheme {scheme!r}")


def decode_data_uri(uri: str) -> bytes:
    """Decode the payload of a ``data:`` URI.

    Parameters
    ----------
    uri : str
        Data URI, base64 or percent-encoded

    Returns
    -------
    bytes
        Decoded payload

    Raises
    ------
    ValueError
        If the URI is not a data URI or its base64 payload is invalid

    """
    if not uri.startswith(f"{DATA_IMAGE_SCHEME}:"):
        raise ValueError("Not a data URI")
    comma_idx = uri.find(",", 5)
    if comma_idx == -1:
        raise ValueError("Data URI has no payload separator")

    params = [param.strip() for param in uri[5:comma_idx].split(";")]
    payload = uri[comma_idx + 1 :]
    if "base64" in params:
        try:
            return base64.b64decode(unquote(payload), validate=True)
        except (ValueError, binascii.Error) as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
    return unquote_to_bytes(payload)


class ImageLoader(Protocol):
    """Collaborator that resolves image views.

    ``load`` is called once per image during a build pass with a pending view
    showing its placeholder. It may resolve the view synchronously or keep it
    and call ``complete()``/``fail()`` later. Exceptions raised by ``load``
    are turned into ``fail()`` by the builder.
    """

    def load(self, view: ImageView) -> None:
        """Start loading the image of ``view``."""
        ...


class DefaultImageLoader:
    """Image loader resolving inline data and local files synchronously.

    Remote URLs and resource identifiers are left pending with their
    placeholder; applications plug in a loader that knows how to fetch them.
    """

    def load(self, view: ImageView) -> None:
        source = view.source
        if source.kind == IMAGE_KIND_DATA:
            try:
                view.complete(decode_data_uri(source.url))
            except ValueError as e:
                view.fail(e)
        elif source.kind == IMAGE_KIND_FILE:
            try:
                view.complete(Path(source.path).read_bytes())
            except OSError as e:
                view.fail(e)
        else:
            logger.debug("Leaving %s image %r pending", source.kind, source.path)
