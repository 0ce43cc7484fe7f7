"""Surface engine: patch lookup, evaluation and access statistics.

The engine owns one immutable :class:`~bicubickit.surface.grid_data.GridData`
and answers value and derivative queries. Each query goes through the
following tiers, using the caller's :class:`~bicubickit.surface.hint.PatchHint`:

1. same point: the hint already holds the requested result for this exact
   point, which is returned unchanged;
2. same patch: the point lies in the patch held by the hint (bounds
   inclusive, so a point on a shared edge stays on the held patch);
3. nearby patch: the point lies in one of the (up to eight) patches
   adjacent to the held patch;
4. search: both axes locate their interval independently (binary search
   for explicit axes, arithmetic for regular ones).

Tiers 3 and 4 fetch the patch coefficients from a bounded, surface-wide
LRU cache and store the patch in the hint.

The engine itself is safe to share between threads. Hints are not, and the
statistics counters are updated without locking, so their totals are only
approximate under concurrent use.
"""

from __future__ import annotations

from functools import partial

from bicubickit.config import DEFAULT_CONFIG, SurfaceConfig
from bicubickit.errors import InvalidArgumentError, SurfaceDomainError
from bicubickit.logger import bicubickit_logger
from bicubickit.surface.grid_data import GridData
from bicubickit.surface.hint import PatchHint
from bicubickit.surface.patch import Patch, patch_coefficients
from bicubickit.surface.statistics import AccessStatistics
from bicubickit.utils.caching import wrap_patch_cache
from bicubickit.utils.types import Components, Point
from bicubickit.utils.validate import (
    validate_derivative_components,
    validate_point,
)

__all__ = ["SurfaceEngine"]

# Probe order for tier 3: the held interval first, then its neighbours.
_NEIGHBOUR_OFFSETS = (0, -1, 1)


class SurfaceEngine:
    """Evaluates a bicubic surface defined by a :class:`GridData`.

    Attributes:
        grid: The immutable sample grid.
        config: The configuration in effect.
        statistics: Shared access counters.
    """

    def __init__(self, grid: GridData, config: SurfaceConfig | None = None) -> None:
        """Initializes the engine.

        Args:
            grid: Sample grid with value and derivative fields.
            config: Optional configuration; defaults to :data:`DEFAULT_CONFIG`.
        """
        self.grid = grid
        self.config = config if config is not None else DEFAULT_CONFIG
        self.statistics = AccessStatistics()
        self._coefficients = wrap_patch_cache(
            partial(_assemble_coefficients, grid),
            maxsize=self.config.patch_cache_size,
        )

    def __repr__(self) -> str:
        nx, ny = self.grid.shape
        return f"SurfaceEngine(shape=({nx}, {ny}), bounds={self.grid.bounds})"

    def patch(self, i: int, j: int) -> Patch:
        """Returns the assembled patch ``(i, j)``."""
        grid = self.grid
        return Patch(
            i,
            j,
            grid.x_axis[i],
            grid.y_axis[j],
            grid.x_axis.width(i),
            grid.y_axis.width(j),
            self._coefficients(i, j),
        )

    def cache_info(self):
        """Returns the ``lru_cache`` statistics of the patch coefficient cache."""
        return self._coefficients.cache_info()

    def is_defined(self, point: Point) -> bool:
        """Returns ``True`` if ``point`` lies inside the sampled rectangle.

        Never raises: NaN coordinates and points that are not two real
        numbers are simply not defined.
        """
        try:
            x, y = validate_point(point)
        except InvalidArgumentError:
            return False
        return self.grid.contains(x, y)

    def locate(self, x: float, y: float) -> tuple[int, int]:
        """Finds the patch containing ``(x, y)`` without using any hint.

        Raises:
            SurfaceDomainError: If the point lies outside the grid.
        """
        return self.grid.x_axis.locate(x), self.grid.y_axis.locate(y)

    def _in_patch(self, patch: Patch, x: float, y: float) -> bool:
        return (
            self.grid.x_axis.interval_contains(patch.i, x)
            and self.grid.y_axis.interval_contains(patch.j, y)
        )

    def _find_nearby(self, patch: Patch, x: float, y: float) -> tuple[int, int] | None:
        i = _probe(self.grid.x_axis, patch.i, x)
        if i is None:
            return None
        j = _probe(self.grid.y_axis, patch.j, y)
        if j is None:
            return None
        return i, j

    def evaluate(
        self,
        point: Point,
        components: Components = (),
        hint: PatchHint | None = None,
    ) -> float:
        """Evaluates the surface or one of its partial derivatives.

        Args:
            point: ``(x, y)`` query point.
            components: Derivative selectors, ``0`` for x and ``1`` for y;
                empty for the value itself.
            hint: Caller-owned hint; a temporary one is used when omitted.

        Returns:
            The interpolated value or partial derivative.

        Raises:
            InvalidArgumentError: If ``point`` or ``components`` are malformed.
            SurfaceDomainError: If ``point`` lies outside the grid.
        """
        x, y = validate_point(point)
        comps = validate_derivative_components(components)
        if not self.grid.contains(x, y):
            (xl, xu), (yl, yu) = self.grid.bounds
            raise SurfaceDomainError(
                f"point ({x}, {y}) is outside the surface domain "
                f"[{xl}, {xu}] x [{yl}, {yu}]."
            )

        if hint is None:
            hint = PatchHint()
        if not hint.belongs_to(self):
            hint.bind(self)

        stats = self.statistics
        stats.accesses += 1

        key = tuple(sorted(comps))
        xy = (x, y)
        memo = hint.lookup(xy, key)
        if memo is not None:
            stats.same_point += 1
            return memo

        patch = hint.patch
        if patch is not None and self._in_patch(patch, x, y):
            stats.same_patch += 1
        else:
            found = None
            if patch is not None and self.config.nearby_search:
                found = self._find_nearby(patch, x, y)
            if found is not None:
                stats.nearby_patch += 1
                i, j = found
            else:
                i, j = self.locate(x, y)
            patch = self.patch(i, j)
            hint.store_patch(patch)

        result = patch.evaluate(x, y, comps)
        hint.store_result(xy, key, result)
        return result

    def value(self, point: Point, hint: PatchHint | None = None) -> float:
        """Evaluates the surface at ``point``."""
        return self.evaluate(point, (), hint)

    def derivative(
        self,
        components: Components,
        point: Point,
        hint: PatchHint | None = None,
    ) -> float:
        """Evaluates the partial derivative selected by ``components`` at ``point``."""
        return self.evaluate(point, components, hint)

    def reset_statistics(self) -> None:
        """Sets all access counters to zero."""
        self.statistics.reset()
        bicubickit_logger.debug("Access statistics reset for %r.", self)


def _assemble_coefficients(grid: GridData, i: int, j: int):
    # Bound to the grid, not the engine, so the cache holds no engine reference.
    hx = grid.x_axis.width(i)
    hy = grid.y_axis.width(j)
    return patch_coefficients(grid.corner_data(i, j), hx, hy)


def _probe(axis, held: int, value: float) -> int | None:
    """Returns the held interval or a neighbour of it containing ``value``."""
    for offset in _NEIGHBOUR_OFFSETS:
        k = held + offset
        if axis.interval_contains(k, value):
            return k
    return None
