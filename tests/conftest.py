"""Pytest configuration and shared fixtures for the mdview test suite."""

import logging
import os
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings
from utils import cleanup_test_dir, create_test_temp_dir

from mdview.extensions import build_extension_set
from mdview.logging_utils import PACKAGE_LOGGER_NAME
from mdview.options import MarkdownParserOptions
from mdview.style import StyleSheet

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests using hypothesis")


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Drop handlers the CLI installs on the package logger."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def style_sheet() -> StyleSheet:
    """Default style sheet derived from the default theme."""
    return StyleSheet.from_theme()


@pytest.fixture
def scripts_options() -> MarkdownParserOptions:
    """Parser options with subscript and superscript spans enabled."""
    return MarkdownParserOptions(extension_set=build_extension_set())


@pytest.fixture
def sample_markdown() -> str:
    """A document touching every block type."""
    return """# Water

H<sub>2</sub>O is *wet*, E = mc<sup>2</sup>.

- one
- [two](https://example.com/two)
  - nested

1. first
2. second

> quoted **text**

```python
print("hi")
```

| Name | Value |
|:-----|------:|
| a    | 1     |

---

![logo](https://example.com/logo.png#64x32)
"""
