#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/exceptions.py
"""Exceptions raised by mdview.

Recoverable content problems (a malformed image source, an unknown tag, a
failed image load) never raise; they degrade and are logged. The classes
below cover precondition violations, grammar failures and misuse of
released resources.

Exception Hierarchy
-------------------
- MdViewError

  - ValidationError (absent input, unknown extension set, bad option)
    - InvalidOptionsError (options object of the wrong class)

  - FileError (a source path could not be read)
    - FileNotFoundError (the path does not exist)
    - FileAccessError (a directory, or no permission)

  - ParsingError (the grammar could not tokenize the source)

  - RenderingError (a render tree could not be built)
    - RecognizerDisposedError (a released link recognizer was used)

  - WidgetDisposedError (a disposed view was used)

  - DependencyError (optional package missing or too old)

"""

from __future__ import annotations

from typing import Any


class MdViewError(Exception):
    """Root of all mdview errors.

    Parameters
    ----------
    message : str
        Human-readable description
    original_error : Exception, optional
        Underlying exception, kept for callers that want to inspect it

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MdViewError):
    """A caller-supplied value is absent or unacceptable.

    Parameters
    ----------
    message : str
        Description of the problem
    parameter_name : str, optional
        Name of the offending argument or option
    parameter_value : any, optional
        The rejected value

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """A parser received an options object of another parser's class."""

    def __init__(self, parser_name: str, expected_type: type, received_type: type):
        super().__init__(
            f"{parser_name} needs {expected_type.__name__}, got {received_type.__name__}",
            parameter_name="options",
            parameter_value=received_type,
        )
        self.parser_name = parser_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(MdViewError):
    """A Markdown source file could not be read.

    Parameters
    ----------
    message : str
        Description of the problem
    file_path : str, optional
        Path of the file
    original_error : Exception, optional
        The ``OSError`` raised while reading

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """The Markdown source path does not exist."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        super().__init__(message or f"File not found: {file_path}", file_path=file_path, original_error=original_error)


class FileAccessError(FileError):
    """The Markdown source path exists but cannot be read (a directory, no permission)."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        super().__init__(
            message or f"Cannot access file: {file_path}", file_path=file_path, original_error=original_error
        )


class ParsingError(MdViewError):
    """The Markdown grammar failed on the source.

    Parameters
    ----------
    message : str
        Description of the failure
    stage : str, optional
        Pipeline stage that failed, ``"tokenize"`` or ``"convert"``

    """

    def __init__(self, message: str, stage: str | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.stage = stage


class RenderingError(MdViewError):
    """A render tree could not be built or one of its parts was misused.

    ``tag`` names the element being built when the failure happened, if known.
    """

    def __init__(self, message: str, tag: str | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.tag = tag


class RecognizerDisposedError(RenderingError):
    """A link recognizer was tapped, released or created after its release.

    Parameters
    ----------
    href : str
        Link target of the recognizer
    action : str
        The rejected action: ``"tap"``, ``"dispose"`` or ``"create"``

    """

    def __init__(self, href: str, action: str):
        super().__init__(f"Cannot {action} link recognizer for {href!r} after it was released", tag="a")
        self.href = href
        self.action = action


class WidgetDisposedError(MdViewError):
    """A Markdown view was used after ``dispose()``."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation} a disposed Markdown view")
        self.operation = operation


class DependencyError(MdViewError):
    """An optional package needed by a feature is missing or too old.

    Parameters
    ----------
    component : str
        Feature needing the packages, e.g. ``"highlight"``
    missing_packages : list of (name, version_spec)
        Packages that failed to import
    version_mismatches : list of (name, required, installed), optional
        Installed packages that do not satisfy their specifier
    original_import_error : ImportError, optional
        First import failure

    Attributes
    ----------
    install_command : str
        ``pip install`` line fixing every problem

    """

    def __init__(
        self,
        component: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        original_import_error: ImportError | None = None,
    ):
        version_mismatches = version_mismatches or []
        requirements = [f"{name}{spec}" for name, spec in missing_packages]
        requirements += [f"{name}{required}" for name, required, _ in version_mismatches]
        install_command = "pip install " + " ".join(f'"{req}"' for req in requirements)

        lines = [f"{component!r} needs packages that are not available."]
        if missing_packages:
            lines.append("Missing: " + ", ".join(f"{name}{spec}" for name, spec in missing_packages))
        lines.extend(
            f"{name}{required} required, {installed} installed" for name, required, installed in version_mismatches
        )
        lines.append(f"Install with: {install_command}")

        super().__init__("\n".join(lines), original_error=original_import_error)
        self.component = component
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
