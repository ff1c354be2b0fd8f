#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdview/render/recognizers.py
"""Tap recognizers binding link spans to callbacks.

A :class:`TapGestureRecognizer` is created for every link element during a
build pass. Recognizers are owned by a :class:`RecognizerPool`; the view that
owns the pool releases every recognizer before a new build pass replaces the
rendered tree, and again on teardown.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from mdview.exceptions import RecognizerDisposedError

logger = logging.getLogger(__name__)

TapLinkCallback = Callable[[str], None]


@dataclass(eq=False)
class TapGestureRecognizer:
    """A disposable handle dispatching taps on a link to a callback.

    Parameters
    ----------
    href : str
        Raw link target passed to the callback
    on_tap : callable or None
        Called with ``href`` on every tap; None makes taps no-ops

    Notes
    -----
    Two recognizers compare equal when they target the same ``href``, so
    render trees built from the same source compare equal even though each
    build creates fresh recognizers. The hash follows ``href`` as well; pools
    track recognizers by identity, so equal recognizers are still released
    separately.

    """

    href: str
    on_tap: Optional[TapLinkCallback] = None
    disposed: bool = field(default=False, init=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TapGestureRecognizer):
            return NotImplemented
        return self.href == other.href

    def __hash__(self) -> int:
        return hash(self.href)

    def tap(self) -> None:
        """Invoke the tap callback with the raw href.

        Raises
        ------
        RecognizerDisposedError
            If the recognizer has been released

        """
        if self.disposed:
            raise RecognizerDisposedError(self.href, "tap")
        if self.on_tap is not None:
            self.on_tap(self.href)

    def dispose(self) -> None:
        """Release the recognizer.

        Raises
        ------
        RecognizerDisposedError
            If the recognizer has already been released

        """
        if self.disposed:
            raise RecognizerDisposedError(self.href, "dispose")
        self.disposed = True
        self.on_tap = None


class RecognizerPool:
    """Owns the recognizers created during one build pass.

    Examples
    --------
        >>> pool = RecognizerPool(on_tap=print)
        >>> recognizer = pool.create("https://example.com")
        >>> len(pool)
        1
        >>> pool.dispose_all()
        >>> recognizer.disposed
        True

    """

    def __init__(self, on_tap: Optional[TapLinkCallback] = None) -> None:
        self.on_tap = on_tap
        self._recognizers: list[TapGestureRecognizer] = []
        self._closed = False

    def __len__(self) -> int:
        return len(self._recognizers)

    def __iter__(self) -> Iterator[TapGestureRecognizer]:
        return iter(self._recognizers)

    @property
    def closed(self) -> bool:
        """Whether the pool has been released."""
        return self._closed

    def create(self, href: str) -> TapGestureRecognizer:
        """Create and track a fresh recognizer for ``href``."""
        if self._closed:
            raise RecognizerDisposedError(href, "create")
        recognizer = TapGestureRecognizer(href=href, on_tap=self.on_tap)
        self._recognizers.append(recognizer)
        return recognizer

    def dispose_all(self) -> None:
        """Release every tracked recognizer exactly once and close the pool."""
        if self._closed:
            return
        logger.debug("Disposing %d link recognizers", len(self._recognizers))
        for recognizer in self._recognizers:
            recognizer.dispose()
        self._recognizers.clear()
        self._closed = True
