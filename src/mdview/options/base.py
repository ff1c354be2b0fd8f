"""Frozen option dataclass foundations.

Every options class in mdview is a frozen dataclass deriving from
:class:`CloneFrozenMixin`. Instances are never mutated; callers derive
modified copies with :meth:`CloneFrozenMixin.create_updated`. Field
``metadata["help"]`` strings describe each option and are listed by
:meth:`CloneFrozenMixin.describe_options`.
"""

from __future__ import annotations

import sys
from dataclasses import MISSING, dataclass, fields, replace
from typing import Any

from mdview.exceptions import ValidationError

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin deriving modified copies of frozen option dataclasses."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance; ``__post_init__`` validation runs again

        Raises
        ------
        ValidationError
            If a keyword does not name a field of this options class

        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ValidationError(
                f"{type(self).__name__} has no option(s) {', '.join(unknown)}. Available: {', '.join(sorted(known))}",
                parameter_name=unknown[0],
                parameter_value=kwargs[unknown[0]],
            )
        return replace(self, **kwargs)

    @classmethod
    def describe_options(cls) -> dict[str, str]:
        """Map each option name to its help text and default.

        Examples
        --------
            >>> from mdview.options import RenderOptions
            >>> RenderOptions.describe_options()["bullet"]
            'Bullet marker for unordered list items (default: •)'

        """
        described = {}
        for f in fields(cls):
            help_text = f.metadata.get("help", "")
            if f.default is not MISSING:
                help_text = f"{help_text} (default: {f.default})"
            described[f.name] = help_text
        return described


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options; subclasses add grammar switches."""

    def __post_init__(self) -> None:
        pass
