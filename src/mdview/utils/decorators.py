#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/utils/decorators.py
"""Optional dependency guards and DEBUG timing.

Components backed by a third-party package (the mistune grammar, pygments
highlighting) declare their requirements as ``(install_name, import_name,
version_spec)`` tuples and guard their entry point with
:func:`requires_dependencies`. A missing or outdated package surfaces as a
:class:`~mdview.exceptions.DependencyError` carrying a ``pip install`` hint
instead of a bare ``ImportError``.

"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Iterable, Tuple

from mdview.exceptions import DependencyError
from mdview.utils.packages import check_version_requirement

logger = logging.getLogger(__name__)

PackageRequirement = Tuple[str, str, str]


def check_dependencies(component: str, packages: Iterable[PackageRequirement]) -> None:
    """Verify that every package in ``packages`` imports and meets its version.

    Parameters
    ----------
    component : str
        Name of the feature needing the packages, shown in the error
    packages : iterable of (install_name, import_name, version_spec)
        Requirements; an empty ``version_spec`` accepts any version

    Raises
    ------
    DependencyError
        Listing every missing package and every version mismatch

    """
    missing: list[tuple[str, str]] = []
    mismatched: list[tuple[str, str, str]] = []
    first_error: ImportError | None = None

    for install_name, import_name, version_spec in packages:
        try:
            # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
            importlib.import_module(import_name)
        except ImportError as e:
            missing.append((install_name, version_spec))
            first_error = first_error or e
            continue
        if version_spec:
            ok, installed = check_version_requirement(install_name, version_spec)
            if not ok:
                mismatched.append((install_name, version_spec, installed or "unknown"))

    if missing or mismatched:
        raise DependencyError(
            component=component,
            missing_packages=missing,
            version_mismatches=mismatched,
            original_import_error=first_error,
        ) from first_error


def requires_dependencies(component: str, packages: list[PackageRequirement]) -> Callable:
    """Guard a function or method with :func:`check_dependencies`.

    Examples
    --------
        >>> @requires_dependencies("highlight", [("pygments", "pygments", ">=2.10")])
        ... def format(self, source):
        ...     from pygments.lexers import guess_lexer
        ...     return guess_lexer(source)

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            check_dependencies(component, packages)
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(timer_logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the enclosed block took, at DEBUG level only.

    Nothing is measured unless ``timer_logger`` has DEBUG enabled.
    """
    if not timer_logger.isEnabledFor(logging.DEBUG):
        yield
        return
    start = time.perf_counter()
    yield
    timer_logger.debug("%s completed in %.1f ms", operation, (time.perf_counter() - start) * 1000)
