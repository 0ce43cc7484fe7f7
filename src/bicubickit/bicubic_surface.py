"""Provides the BicubicSurface API.

A :class:`BicubicSurface` is a lightweight handle to a shared, immutable
surface engine that smoothly interpolates samples ``f[i, j] = F(x[i], y[j])``
of a two-argument function over a rectangular grid. The interpolant is a
bicubic polynomial on each grid cell, continuous through second derivatives.

Handles are cheap: copying one (``copy.copy(surface)`` or
:meth:`BicubicSurface.copy`) makes another reference to the same engine and
bumps a shared, lock-protected reference count. The engine is released when
the last handle referencing it is cleared or garbage collected.

Examples:
    Irregular axes:

        >>> import numpy as np
        >>> from bicubickit import BicubicSurface, PatchHint
        >>> x = np.array([0.0, 1.0, 2.5, 3.0, 4.0])
        >>> y = np.array([0.0, 0.5, 1.0, 2.0])
        >>> f = np.add.outer(x**2, y)
        >>> surface = BicubicSurface(x, y, f)
        >>> hint = PatchHint()
        >>> value = surface.value((1.2, 0.7), hint)
        >>> slope = surface.derivative([0], (1.2, 0.7), hint)

    Regular grid given by origin and spacing:

        >>> f = np.outer(np.arange(4.0), np.arange(5.0))
        >>> surface = BicubicSurface.regular((0.0, 0.0), (1.0, 1.0), f)
        >>> round(surface.derivative([0, 1], (1.5, 2.5)), 12)
        1.0

Notes:
    - Evaluating outside ``[x_min, x_max] x [y_min, y_max]`` raises
      :class:`~bicubickit.errors.SurfaceDomainError`; use :meth:`is_defined`
      to check first.
    - Hints are not thread-safe. Give each thread its own
      :class:`~bicubickit.surface.hint.PatchHint`, or its own
      :class:`~bicubickit.bicubic_function.BicubicFunction`.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from numpy.typing import ArrayLike

from bicubickit.axis import ExplicitAxis, RegularAxis, as_axis
from bicubickit.config import SurfaceConfig
from bicubickit.errors import EmptySurfaceError, SurfaceConstructionError
from bicubickit.logger import bicubickit_logger
from bicubickit.surface.engine import SurfaceEngine
from bicubickit.surface.grid_data import GridData
from bicubickit.surface.hint import PatchHint
from bicubickit.surface.statistics import format_access_statistics
from bicubickit.utils.thread_safety import SharedCounter
from bicubickit.utils.types import Components, Point
from bicubickit.utils.validate import validate_sample_matrix

__all__ = ["BicubicSurface"]


class _SharedSurface:
    """Engine plus the number of handles referencing it."""

    __slots__ = ("engine", "refcount")

    def __init__(self, engine: SurfaceEngine) -> None:
        self.engine: SurfaceEngine | None = engine
        self.refcount = SharedCounter(1)


def _regular_axes(
    origin: Sequence[float],
    spacing: Sequence[float],
    f: ArrayLike,
) -> tuple[RegularAxis, RegularAxis]:
    """Builds the two regular axes implied by ``origin``, ``spacing`` and ``f``'s shape."""
    if len(origin) != 2 or len(spacing) != 2:
        raise SurfaceConstructionError("origin and spacing must each have 2 entries.")
    nx, ny = validate_sample_matrix(f, name="f").shape
    return (
        RegularAxis(origin[0], spacing[0], nx, name="x"),
        RegularAxis(origin[1], spacing[1], ny, name="y"),
    )


class BicubicSurface:
    """Reference-counted handle to a shared bicubic surface."""

    def __init__(
        self,
        x: ExplicitAxis | RegularAxis | ArrayLike | None = None,
        y: ExplicitAxis | RegularAxis | ArrayLike | None = None,
        f: ArrayLike | None = None,
        smoothness: float = 0.0,
        *,
        config: SurfaceConfig | None = None,
    ) -> None:
        """Creates a surface from samples, or an empty handle.

        Args:
            x: Sample locations along x (at least 4, strictly increasing), or
                an axis object.
            y: Sample locations along y (at least 4, strictly increasing), or
                an axis object.
            f: Samples of shape ``(len(x), len(y))`` with ``f[i, j] = F(x[i], y[j])``.
            smoothness: Value in ``[0, 1)``. Zero makes the surface pass
                through every sample; larger values give a smoother surface
                that only approaches them.
            config: Optional :class:`~bicubickit.config.SurfaceConfig`.

        Calling with no arguments creates an empty handle that references
        no surface and rejects evaluation.

        Raises:
            SurfaceConstructionError: If the inputs are invalid.
        """
        self._shared: _SharedSurface | None = None
        if x is None and y is None and f is None:
            return
        if x is None or y is None or f is None:
            raise SurfaceConstructionError("x, y and f must all be given.")

        x_axis = as_axis(x, name="x")
        y_axis = as_axis(y, name="y")
        grid = GridData.from_samples(x_axis, y_axis, f, smoothness, config=config)
        self._shared = _SharedSurface(SurfaceEngine(grid, config))

    @classmethod
    def regular(
        cls,
        origin: Sequence[float],
        spacing: Sequence[float],
        f: ArrayLike,
        smoothness: float = 0.0,
        *,
        config: SurfaceConfig | None = None,
    ) -> BicubicSurface:
        """Creates a surface over a regularly spaced grid.

        Args:
            origin: ``(x0, y0)``, the location of sample ``f[0, 0]``.
            spacing: ``(dx, dy)``, both positive. Sample ``f[i, j]`` sits at
                ``(x0 + i * dx, y0 + j * dy)``.
            f: Samples, at least 4x4.
            smoothness: Value in ``[0, 1)``.
            config: Optional configuration.
        """
        x_axis, y_axis = _regular_axes(origin, spacing, f)
        return cls(x_axis, y_axis, f, smoothness, config=config)

    @classmethod
    def from_grid(cls, grid: GridData, *, config: SurfaceConfig | None = None) -> BicubicSurface:
        """Creates a surface over an already built :class:`GridData`."""
        handle = cls()
        handle._shared = _SharedSurface(SurfaceEngine(grid, config))
        return handle

    @classmethod
    def from_derivatives(
        cls,
        x: ExplicitAxis | RegularAxis | ArrayLike,
        y: ExplicitAxis | RegularAxis | ArrayLike,
        f: ArrayLike,
        fx: ArrayLike,
        fy: ArrayLike,
        fxy: ArrayLike,
        *,
        config: SurfaceConfig | None = None,
    ) -> BicubicSurface:
        """Creates a surface from values and known partial derivatives.

        No splines are fitted; ``fx``, ``fy`` and ``fxy`` must have the
        same shape as ``f``.
        """
        grid = GridData(as_axis(x, name="x"), as_axis(y, name="y"), f, fx, fy, fxy)
        return cls.from_grid(grid, config=config)

    @classmethod
    def regular_from_derivatives(
        cls,
        origin: Sequence[float],
        spacing: Sequence[float],
        f: ArrayLike,
        fx: ArrayLike,
        fy: ArrayLike,
        fxy: ArrayLike,
        *,
        config: SurfaceConfig | None = None,
    ) -> BicubicSurface:
        """Same as :meth:`from_derivatives`, on a regularly spaced grid."""
        x_axis, y_axis = _regular_axes(origin, spacing, f)
        return cls.from_derivatives(x_axis, y_axis, f, fx, fy, fxy, config=config)

    # -- bookkeeping --------------------------------------------------------

    def is_empty(self) -> bool:
        """Returns ``True`` if this handle references no surface."""
        return self._shared is None

    def clear(self) -> None:
        """Detaches this handle; the surface is released with its last handle."""
        shared = self._shared
        if shared is None:
            return
        self._shared = None
        if shared.refcount.decrement() == 0:
            engine = shared.engine
            shared.engine = None
            bicubickit_logger.debug("Released %r; no handles remain.", engine)

    def __del__(self) -> None:
        self.clear()

    def copy(self) -> BicubicSurface:
        """Returns a new handle referencing the same surface."""
        other = type(self)()
        if self._shared is not None:
            self._shared.refcount.increment()
            other._shared = self._shared
        return other

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> BicubicSurface:
        # The surface is immutable, so a deep copy may share it as well.
        return self.copy()

    def assign(self, source: BicubicSurface) -> BicubicSurface:
        """Makes this handle reference the same surface as ``source``.

        The previously referenced surface is released if this was its last
        handle. Returns ``self``.
        """
        if source._shared is self._shared:
            return self
        if source._shared is not None:
            source._shared.refcount.increment()
        new = source._shared
        self.clear()
        self._shared = new
        return self

    @property
    def reference_count(self) -> int:
        """Number of handles sharing this surface; ``0`` for an empty handle."""
        return 0 if self._shared is None else self._shared.refcount.value

    def is_same_surface(self, other: BicubicSurface) -> bool:
        """Returns ``True`` if both handles reference the same non-empty surface."""
        return self._shared is not None and self._shared is other._shared

    @property
    def engine(self) -> SurfaceEngine:
        """The shared engine.

        Raises:
            EmptySurfaceError: If the handle is empty.
        """
        if self._shared is None or self._shared.engine is None:
            raise EmptySurfaceError("the surface handle is empty.")
        return self._shared.engine

    def __repr__(self) -> str:
        if self._shared is None:
            return "BicubicSurface(empty)"
        nx, ny = self.engine.grid.shape
        return f"BicubicSurface(shape=({nx}, {ny}), refs={self.reference_count})"

    # -- grid access --------------------------------------------------------

    @property
    def grid(self) -> GridData:
        """The immutable sample grid."""
        return self.engine.grid

    @property
    def x_axis(self) -> ExplicitAxis | RegularAxis:
        """The x axis."""
        return self.engine.grid.x_axis

    @property
    def y_axis(self) -> ExplicitAxis | RegularAxis:
        """The y axis."""
        return self.engine.grid.y_axis

    @property
    def bounds(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """``((x_min, x_max), (y_min, y_max))``."""
        return self.engine.grid.bounds

    # -- evaluation ---------------------------------------------------------

    def value(self, point: Point, hint: PatchHint | None = None) -> float:
        """Calculates the value of the surface at ``point``.

        Args:
            point: ``(X, Y)`` at which ``F(X, Y)`` is evaluated.
            hint: Hint from earlier calls, updated in place. Without a hint
                every call searches for its patch.

        Returns:
            The interpolated value.

        Raises:
            SurfaceDomainError: If ``point`` lies outside the grid.
            EmptySurfaceError: If the handle is empty.
        """
        return self.engine.value(point, hint)

    def derivative(
        self,
        components: Components,
        point: Point,
        hint: PatchHint | None = None,
    ) -> float:
        """Calculates a partial derivative of the surface at ``point``.

        Args:
            components: Axes to differentiate along, ``0`` for x and ``1``
                for y. For example ``[0]`` is ``dF/dX``, ``[0, 0, 0]`` is the
                third x derivative and ``[0, 1]`` is ``d2F/dXdY``. Four or
                more differentiations along one axis give exactly zero.
            point: ``(X, Y)`` at which to evaluate.
            hint: Hint from earlier calls, updated in place.

        Returns:
            The interpolated partial derivative.

        Raises:
            InvalidArgumentError: If a component is not 0 or 1.
            SurfaceDomainError: If ``point`` lies outside the grid.
            EmptySurfaceError: If the handle is empty.
        """
        return self.engine.derivative(components, point, hint)

    def is_defined(self, point: Point) -> bool:
        """Returns ``True`` if ``point`` lies within the sampled rectangle.

        Never raises; an empty handle or a malformed point gives ``False``.
        """
        if self._shared is None or self._shared.engine is None:
            return False
        return self._shared.engine.is_defined(point)

    # -- statistics ---------------------------------------------------------

    @property
    def num_accesses(self) -> int:
        """Total number of evaluations through any handle or hint."""
        return self.engine.statistics.accesses

    @property
    def num_accesses_same_point(self) -> int:
        """Evaluations answered directly from a hint's memoized point."""
        return self.engine.statistics.same_point

    @property
    def num_accesses_same_patch(self) -> int:
        """Evaluations on the patch already held in the hint."""
        return self.engine.statistics.same_patch

    @property
    def num_accesses_nearby_patch(self) -> int:
        """Evaluations resolved on a patch adjacent to the hint's."""
        return self.engine.statistics.nearby_patch

    def reset_statistics(self) -> None:
        """Resets all access counters to zero."""
        self.engine.reset_statistics()

    def statistics_summary(self) -> Dict[str, int]:
        """Returns the access counters as a dictionary."""
        return self.engine.statistics.as_dict()

    def format_statistics(self) -> str:
        """Returns a printable report of the access counters."""
        nx, ny = self.engine.grid.shape
        return format_access_statistics(
            self.engine.statistics, meta={"grid": f"{nx}x{ny}"}
        )
