#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/utils/packages.py
"""Installed distribution lookups used by the dependency guards."""

from __future__ import annotations

from importlib import metadata
from typing import Optional, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version


def get_package_version(package_name: str) -> Optional[str]:
    """Return the installed version of distribution ``package_name``, or None."""
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Check an installed distribution against a version specifier.

    Parameters
    ----------
    package_name : str
        Distribution (pip) name
    version_spec : str
        Specifier such as ``">=3.0.0"``; an unparsable specifier accepts any
        installed version

    Returns
    -------
    tuple of (bool, str or None)
        Whether the requirement holds, and the installed version

    Examples
    --------
        >>> check_version_requirement("no-such-distribution", ">=1.0")
        (False, None)

    """
    installed = get_package_version(package_name)
    if installed is None:
        return False, None
    try:
        spec = SpecifierSet(version_spec)
    except InvalidSpecifier:
        return True, installed
    try:
        # Pre-releases of a dependency count as satisfying the requirement
        return spec.contains(Version(installed), prereleases=True), installed
    except InvalidVersion:
        return True, installed
