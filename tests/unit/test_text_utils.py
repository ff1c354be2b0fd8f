#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for text, encoding and dependency helpers."""

import io

import pytest

from mdview.exceptions import DependencyError
from mdview.utils.decorators import check_dependencies, requires_dependencies
from mdview.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection
from mdview.utils.packages import check_version_requirement
from mdview.utils.text import normalize_newlines, split_lines


@pytest.mark.unit
class TestNewlines:
    """Tests for newline normalization."""

    def test_crlf_split(self):
        assert split_lines("a\r\nb") == ["a", "b"]

    def test_lone_cr(self):
        assert normalize_newlines("a\rb") == "a\nb"

    def test_mixed_endings(self):
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_trailing_newline(self):
        assert split_lines("a\n") == ["a"]

    def test_empty(self):
        assert split_lines("") == []

    def test_blank_lines_kept(self):
        assert split_lines("a\r\n\r\nb") == ["a", "", "b"]


@pytest.mark.unit
class TestEncoding:
    """Tests for decoding bytes and streams."""

    def test_ascii(self):
        assert read_text_with_encoding_detection(b"# Title") == "# Title"

    def test_text_stream(self):
        assert normalize_stream_to_text(io.StringIO("abc")) == "abc"

    def test_binary_stream(self):
        assert normalize_stream_to_text(io.BytesIO(b"abc")) == "abc"

    def test_utf8_bom_stripped(self):
        assert read_text_with_encoding_detection(b"\xef\xbb\xbf# Title") == "# Title"

    def test_utf16_bom(self):
        assert read_text_with_encoding_detection("# Ümlaut".encode("utf-16")) == "# Ümlaut"

    def test_invalid_utf8_never_raises(self):
        text = read_text_with_encoding_detection(b"caf\xe9 au lait")
        assert text.startswith("caf")
        assert text.endswith(" au lait")


@pytest.mark.unit
class TestRequiresDependencies:
    """Tests for the optional dependency decorator."""

    def test_missing_package(self):
        @requires_dependencies("imaginary", [("no-such-package", "no_such_package_mdview", ">=1.0")])
        def run():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            run()
        assert exc_info.value.missing_packages == [("no-such-package", ">=1.0")]
        assert 'pip install "no-such-package>=1.0"' in exc_info.value.install_command

    def test_available_package(self):
        @requires_dependencies("markdown", [("mistune", "mistune", ">=3.0.0")])
        def run():
            return "ran"

        assert run() == "ran"

    def test_version_mismatch(self):
        @requires_dependencies("markdown", [("mistune", "mistune", ">=999.0")])
        def run():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            run()
        assert exc_info.value.version_mismatches[0][:2] == ("mistune", ">=999.0")

    def test_check_version_requirement(self):
        ok, installed = check_version_requirement("mistune", ">=3.0.0")
        assert ok
        assert installed is not None

    def test_check_dependencies_reports_every_problem(self):
        with pytest.raises(DependencyError) as exc_info:
            check_dependencies(
                "imaginary",
                [("no-such-package", "no_such_package_mdview", ""), ("mistune", "mistune", ">=999.0")],
            )
        error = exc_info.value
        assert error.missing_packages == [("no-such-package", "")]
        assert [name for name, _, _ in error.version_mismatches] == ["mistune"]
        assert isinstance(error.__cause__, ImportError)
