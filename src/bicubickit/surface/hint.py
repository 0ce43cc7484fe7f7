"""Caller-owned cache of the most recently used patch.

A :class:`PatchHint` remembers the patch resolved by the previous
evaluation together with its coefficients, plus the last query point and
every result already computed for it. Passing the same hint to consecutive
evaluations lets spatially coherent access skip the patch search and the
coefficient assembly.

A hint is plain mutable state and is not thread-safe: each thread (or each
independent access context) must own its own hint.
"""

from __future__ import annotations

import weakref
from typing import Any

from bicubickit.surface.patch import Patch

__all__ = ["PatchHint"]


class PatchHint:
    """Cache token holding the last resolved patch and point results.

    States:
        * empty: no patch is held (``is_empty()`` is ``True``).
        * patched: ``patch`` is set.
        * exact point: additionally ``point`` is set and ``results`` maps
          derivative component tuples (``()`` for the value) to results
          already computed at that point.

    Example:
        >>> import numpy as np
        >>> from bicubickit import BicubicSurface, PatchHint
        >>> x = y = np.arange(4.0)
        >>> surface = BicubicSurface(x, y, np.outer(x, y))
        >>> hint = PatchHint()
        >>> round(surface.value((1.5, 2.5), hint), 12)
        3.75
        >>> hint.is_empty()
        False
    """

    __slots__ = ("patch", "point", "results", "_owner")

    def __init__(self) -> None:
        """Creates an empty hint."""
        self.patch: Patch | None = None
        self.point: tuple[float, float] | None = None
        self.results: dict[tuple[int, ...], float] = {}
        self._owner: weakref.ref | None = None

    def __repr__(self) -> str:
        if self.patch is None:
            return "PatchHint(empty)"
        return f"PatchHint(patch=({self.patch.i}, {self.patch.j}), point={self.point})"

    def is_empty(self) -> bool:
        """Returns ``True`` if the hint holds no patch information."""
        return self.patch is None

    def clear(self) -> None:
        """Erases all stored information; afterwards ``is_empty()`` is ``True``."""
        self.patch = None
        self.point = None
        self.results = {}
        self._owner = None

    def copy(self) -> PatchHint:
        """Returns an independent hint with the same contents."""
        other = PatchHint()
        other.patch = self.patch
        other.point = self.point
        other.results = dict(self.results)
        other._owner = self._owner
        return other

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> PatchHint:
        return self.copy()

    def belongs_to(self, owner: Any) -> bool:
        """Returns ``True`` if the hint was last filled by ``owner``."""
        return self._owner is not None and self._owner() is owner

    def bind(self, owner: Any) -> None:
        """Resets the hint and marks it as belonging to ``owner``."""
        self.clear()
        self._owner = weakref.ref(owner)

    def store_patch(self, patch: Patch) -> None:
        """Holds ``patch`` and forgets any memoized point results."""
        self.patch = patch
        self.point = None
        self.results = {}

    def store_result(
        self,
        point: tuple[float, float],
        components: tuple[int, ...],
        result: float,
    ) -> None:
        """Memoizes ``result`` for ``components`` at ``point``."""
        if self.point != point:
            self.point = point
            self.results = {}
        self.results[components] = result

    def lookup(self, point: tuple[float, float], components: tuple[int, ...]) -> float | None:
        """Returns the memoized result for ``(point, components)`` or ``None``."""
        if self.point is None or self.point != point:
            return None
        return self.results.get(components)
