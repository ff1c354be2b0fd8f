#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for image source classification and the default image loader."""

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st
from utils import MINIMAL_PNG_BYTES, MINIMAL_PNG_DATA_URI

from mdview.render.images import DefaultImageLoader, decode_data_uri, parse_image_source, parse_size_hint
from mdview.render.nodes import ImageView


@pytest.mark.unit
class TestParseImageSource:
    """Tests for classifying image ``src`` attributes."""

    def test_https_url(self):
        source = parse_image_source("https://example.com/a.png")
        assert source.kind == "http"
        assert source.path == "https://example.com/a.png"
        assert source.uri.netloc == "example.com"

    def test_http_url_with_size_hint(self):
        source = parse_image_source("http://example.com/a.png#64x32")
        assert source.kind == "http"
        assert (source.width, source.height) == (64.0, 32.0)
        assert source.url == "http://example.com/a.png"

    def test_data_uri(self):
        source = parse_image_source(MINIMAL_PNG_DATA_URI)
        assert source.kind == "data"
        assert source.path == ""

    def test_resource(self):
        source = parse_image_source("resource:icons/logo.png")
        assert source.kind == "resource"
        assert source.path == "icons/logo.png"

    def test_relative_file_joined_with_directory(self):
        source = parse_image_source("images/a.png", Path("/docs"))
        assert source.kind == "file"
        assert Path(source.path) == Path("/docs/images/a.png")

    def test_relative_file_without_directory(self):
        source = parse_image_source("a.png")
        assert source.kind == "file"
        assert source.path == "a.png"

    def test_absolute_file_ignores_directory(self):
        source = parse_image_source("/abs/a.png", Path("/docs"))
        assert Path(source.path) == Path("/abs/a.png")

    def test_file_scheme(self):
        source = parse_image_source("file:///tmp/my%20image.png")
        assert source.kind == "file"
        assert source.path == str(Path("/tmp/my image.png"))

    def test_windows_drive_letter(self):
        source = parse_image_source("C:/images/a.png", Path("/docs"))
        assert source.kind == "file"
        assert source.path == str(Path("C:/images/a.png"))

    def test_malformed_source_falls_back_to_resource(self):
        source = parse_image_source("not-a-valid-uri###")
        assert source.kind == "resource"
        assert source.path == "not-a-valid-uri###"
        assert source.width is None

    def test_unknown_scheme_falls_back(self):
        assert parse_image_source("ftp://example.com/a.png").kind == "resource"

    def test_empty_source_falls_back(self):
        assert parse_image_source("").kind == "resource"

    def test_remote_url_without_host_falls_back(self):
        assert parse_image_source("http:///a.png").kind == "resource"

    def test_invalid_size_hint_ignored(self):
        source = parse_image_source("a.png#large")
        assert source.kind == "file"
        assert source.width is None and source.height is None

    @pytest.mark.fuzzing
    @given(st.text(max_size=80))
    def test_never_raises(self, src):
        """Any string classifies into one of the four kinds."""
        assert parse_image_source(src).kind in {"data", "file", "http", "resource"}


@pytest.mark.unit
class TestSizeHints:
    """Tests for ``WIDTHxHEIGHT`` hints."""

    def test_decimal_values(self):
        assert parse_size_hint("10.5x20") == (10.5, 20.0)

    def test_missing_height(self):
        assert parse_size_hint("10x") == (None, None)


@pytest.mark.unit
class TestDecodeDataUri:
    """Tests for data URI payload decoding."""

    def test_base64_payload(self):
        assert decode_data_uri(MINIMAL_PNG_DATA_URI) == MINIMAL_PNG_BYTES

    def test_percent_encoded_payload(self):
        assert decode_data_uri("data:text/plain,hello%20world") == b"hello world"

    def test_invalid_base64(self):
        with pytest.raises(ValueError):
            decode_data_uri("data:image/png;base64,@@@")

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            decode_data_uri("data:image/png;base64")

    def test_not_a_data_uri(self):
        with pytest.raises(ValueError):
            decode_data_uri("https://example.com")


@pytest.mark.unit
class TestDefaultImageLoader:
    """Tests for synchronous loading of inline and local images."""

    def _view(self, src, image_directory=None):
        return ImageView(source=parse_image_source(src, image_directory), error_builder=lambda error: None)

    def test_data_image_loaded(self):
        view = self._view(MINIMAL_PNG_DATA_URI)
        DefaultImageLoader().load(view)
        assert view.status == "loaded"
        assert view.data == MINIMAL_PNG_BYTES

    def test_file_image_loaded(self, temp_dir):
        (temp_dir / "a.png").write_bytes(MINIMAL_PNG_BYTES)
        view = self._view("a.png", temp_dir)
        DefaultImageLoader().load(view)
        assert view.status == "loaded"
        assert view.data == MINIMAL_PNG_BYTES

    def test_missing_file_fails(self, temp_dir):
        view = self._view("missing.png", temp_dir)
        DefaultImageLoader().load(view)
        assert view.status == "failed"
        assert isinstance(view.error, OSError)

    def test_invalid_data_fails(self):
        view = self._view("data:image/png;base64,@@@")
        DefaultImageLoader().load(view)
        assert view.status == "failed"

    def test_remote_image_stays_pending(self):
        view = self._view("https://example.com/a.png")
        DefaultImageLoader().load(view)
        assert view.status == "pending"
