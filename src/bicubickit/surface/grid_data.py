"""Sample grids and derivative synthesis for bicubic surfaces.

A :class:`GridData` holds the two axes, the value matrix ``f`` and the three
partial-derivative matrices ``fx``, ``fy`` and ``fxy`` needed by bicubic
patches. All four matrices share the shape ``(len(x_axis), len(y_axis))``
and are read-only once the grid is built.

When only values are known, :meth:`GridData.from_samples` synthesizes the
derivatives by fitting natural cubic (smoothing) splines along the grid
lines and differentiating them:

* ``fx``: one spline per column ``j`` through ``(x_i, f[i, j])``.
* ``fy``: one spline per row ``i`` through ``(y_j, f[i, j])``.
* ``fxy``: the x-direction procedure applied to the ``fy`` field, column by
  column (y first, then x).

For a nonzero smoothness the value field itself is replaced by the smoothed
samples: the column fits are evaluated at the knots and the result is
smoothed again along rows. ``fx`` and ``fy`` get the same treatment in the
other direction. The surface then no longer passes through the raw samples,
which remain available as :attr:`GridData.samples`.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from bicubickit.axis import ExplicitAxis, RegularAxis
from bicubickit.config import DEFAULT_CONFIG, SurfaceConfig
from bicubickit.logger import bicubickit_logger
from bicubickit.spline.smoothing_spline import fit_smoothing_spline
from bicubickit.utils.types import Array
from bicubickit.utils.validate import validate_sample_matrix, validate_smoothness

__all__ = ["GridData", "fit_along_axis", "synthesize_partials"]

Axis = ExplicitAxis | RegularAxis


def fit_along_axis(
    coordinates: Array,
    matrix: Array,
    axis: int,
    smoothness: float,
    *,
    scale: str = "relative",
) -> tuple[Array, Array]:
    """Fits one spline per grid line and samples it at the knots.

    Args:
        coordinates: Knot coordinates along ``axis``.
        matrix: 2D field; its extent along ``axis`` equals ``len(coordinates)``.
        axis: ``0`` fits each column (x direction), ``1`` fits each row
            (y direction).
        smoothness: Smoothness in ``[0, 1)`` passed to the fitter.
        scale: Smoothing scale, see :func:`~bicubickit.spline.smoothing_spline.smoothing_penalty`.

    Returns:
        ``(values, first_derivatives)``, both shaped like ``matrix``.
    """
    lines = np.moveaxis(np.asarray(matrix, dtype=float), axis, 0)
    values = np.empty_like(lines)
    derivs = np.empty_like(lines)
    for k in range(lines.shape[1]):
        spline = fit_smoothing_spline(coordinates, lines[:, k], smoothness, scale=scale)
        values[:, k] = spline.values
        derivs[:, k] = spline.derivative(coordinates, order=1)
    return np.moveaxis(values, 0, axis), np.moveaxis(derivs, 0, axis)


def synthesize_partials(
    x: Array,
    y: Array,
    f: Array,
    smoothness: float = 0.0,
    *,
    scale: str = "relative",
) -> tuple[Array, Array, Array, Array]:
    """Computes the value field and ``fx``, ``fy``, ``fxy`` from samples.

    Args:
        x: x-axis coordinates, length ``nx``.
        y: y-axis coordinates, length ``ny``.
        f: Samples of shape ``(nx, ny)``.
        smoothness: Smoothness in ``[0, 1)``.
        scale: Smoothing scale forwarded to the spline fitter.

    Returns:
        ``(values, fx, fy, fxy)``. ``values`` is ``f`` itself when
        ``smoothness == 0`` and the doubly smoothed samples otherwise.

    For ``smoothness > 0`` the column fits of ``fx`` are smoothed along the
    rows and the row fits of ``fy`` along the columns. All four fields then
    belong to the tensor-product natural spline through ``values``, which
    keeps the surface C2 across patch edges.
    """
    smoothed_x, fx = fit_along_axis(x, f, 0, smoothness, scale=scale)
    _, fy = fit_along_axis(y, f, 1, smoothness, scale=scale)
    _, fxy = fit_along_axis(x, fy, 0, smoothness, scale=scale)

    if smoothness == 0.0:
        return np.array(f, dtype=float), fx, fy, fxy
    values, _ = fit_along_axis(y, smoothed_x, 1, smoothness, scale=scale)
    fx, _ = fit_along_axis(y, fx, 1, smoothness, scale=scale)
    fy, _ = fit_along_axis(x, fy, 0, smoothness, scale=scale)
    return values, fx, fy, fxy


def _read_only(arr: Array) -> Array:
    out = np.array(arr, dtype=float)
    out.setflags(write=False)
    return out


class GridData:
    """Immutable sample grid with value and partial-derivative matrices.

    Attributes:
        x_axis: Axis of length ``nx``.
        y_axis: Axis of length ``ny``.
        f: Value field used by the patches, shape ``(nx, ny)``.
        fx: Partial derivative with respect to x.
        fy: Partial derivative with respect to y.
        fxy: Mixed partial derivative.
        samples: The samples the grid was built from (equal to ``f`` unless
            the grid was smoothed).
        smoothness: Smoothness used for synthesis, ``None`` if the
            derivatives were supplied directly.
    """

    __slots__ = (
        "x_axis",
        "y_axis",
        "f",
        "fx",
        "fy",
        "fxy",
        "samples",
        "smoothness",
        "_frozen",
    )

    def __init__(
        self,
        x_axis: Axis,
        y_axis: Axis,
        f: ArrayLike,
        fx: ArrayLike,
        fy: ArrayLike,
        fxy: ArrayLike,
        *,
        samples: ArrayLike | None = None,
        smoothness: float | None = None,
    ) -> None:
        """Builds a grid from values and explicit derivative matrices.

        Raises:
            SurfaceConstructionError: If any matrix does not have shape
                ``(len(x_axis), len(y_axis))`` or contains non-finite values.
        """
        shape = (len(x_axis), len(y_axis))
        self.x_axis = x_axis
        self.y_axis = y_axis
        self.f = validate_sample_matrix(f, shape, name="f")
        self.fx = validate_sample_matrix(fx, shape, name="fx")
        self.fy = validate_sample_matrix(fy, shape, name="fy")
        self.fxy = validate_sample_matrix(fxy, shape, name="fxy")
        self.samples = (
            self.f if samples is None else validate_sample_matrix(samples, shape)
        )
        self.smoothness = smoothness
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError("GridData is immutable.")
        object.__setattr__(self, name, value)

    @classmethod
    def from_samples(
        cls,
        x_axis: Axis,
        y_axis: Axis,
        f: ArrayLike,
        smoothness: float = 0.0,
        *,
        config: SurfaceConfig | None = None,
    ) -> GridData:
        """Builds a grid from samples, synthesizing the derivative fields.

        Args:
            x_axis: Axis of length ``nx``.
            y_axis: Axis of length ``ny``.
            f: Samples of shape ``(nx, ny)``; ``f[i, j] = F(x[i], y[j])``.
            smoothness: Value in ``[0, 1)``; zero makes the surface pass
                through every sample.
            config: Optional configuration (only ``smoothing_scale`` is used).

        Returns:
            The constructed :class:`GridData`.

        Raises:
            SurfaceConstructionError: If the samples or smoothness are invalid.
        """
        cfg = config if config is not None else DEFAULT_CONFIG
        shape = (len(x_axis), len(y_axis))
        samples = validate_sample_matrix(f, shape, name="f")
        s = validate_smoothness(smoothness)

        if s > 0.0:
            bicubickit_logger.warning(
                "Smoothness %g > 0: the surface will not pass exactly through "
                "the samples.",
                s,
            )
        values, fx, fy, fxy = synthesize_partials(
            x_axis.coordinates,
            y_axis.coordinates,
            samples,
            s,
            scale=cfg.smoothing_scale,
        )
        bicubickit_logger.info(
            "Synthesized derivative fields for a %dx%d grid (smoothness=%g).",
            shape[0],
            shape[1],
            s,
        )
        return cls(
            x_axis,
            y_axis,
            _read_only(values),
            _read_only(fx),
            _read_only(fy),
            _read_only(fxy),
            samples=samples,
            smoothness=s,
        )

    @property
    def shape(self) -> tuple[int, int]:
        """Grid shape ``(nx, ny)``."""
        return self.f.shape

    @property
    def bounds(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """``((x_min, x_max), (y_min, y_max))`` of the sampled rectangle."""
        return (
            (self.x_axis.lower, self.x_axis.upper),
            (self.y_axis.lower, self.y_axis.upper),
        )

    def contains(self, x: float, y: float) -> bool:
        """Returns ``True`` if ``(x, y)`` lies inside the sampled rectangle."""
        return self.x_axis.contains(x) and self.y_axis.contains(y)

    def corner_data(self, i: int, j: int) -> Array:
        """Returns the ``(2, 2, 4)`` array of ``(f, fx, fy, fxy)`` at patch corners.

        Entry ``[a, b]`` belongs to the knot ``(i + a, j + b)``.
        """
        sl = (slice(i, i + 2), slice(j, j + 2))
        return np.stack([self.f[sl], self.fx[sl], self.fy[sl], self.fxy[sl]], axis=-1)
