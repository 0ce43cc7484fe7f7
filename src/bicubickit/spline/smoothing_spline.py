"""One-dimensional natural cubic smoothing splines.

The fitter minimizes

.. math::

    \\sum_i (y_i - g(x_i))^2 + \\lambda \\int g''(x)^2 \\, dx

over all twice-differentiable ``g``. The minimizer is a natural cubic spline
with knots at the data abscissae (Reinsch, 1967). Its knot values are
obtained by solving a small banded system; the spline itself is then the
natural interpolating spline through those values, built with
:class:`scipy.interpolate.CubicSpline`.

With ``smoothness == 0`` the penalty vanishes and the fit is the exact
natural interpolating spline through the data.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import CubicSpline
from scipy.linalg import solveh_banded

from bicubickit.errors import SurfaceConstructionError
from bicubickit.utils.validate import (
    validate_axis_coordinates,
    validate_smoothness,
)

__all__ = [
    "SmoothingSpline",
    "fit_smoothing_spline",
    "smoothing_penalty",
    "reinsch_fitted_values",
]


class SmoothingSpline:
    """Fitted natural cubic spline.

    Attributes:
        knots: Knot abscissae, strictly increasing.
        values: Spline values at the knots. Equal to the input data for a
            zero-smoothness fit.
        smoothness: Smoothness the spline was fitted with.
    """

    def __init__(
        self,
        knots: NDArray[np.floating],
        values: NDArray[np.floating],
        smoothness: float,
    ) -> None:
        self.knots = knots
        self.values = values
        self.smoothness = smoothness
        self._spline = CubicSpline(knots, values, bc_type="natural", extrapolate=False)

    def evaluate(self, x: ArrayLike) -> NDArray[np.floating] | float:
        """Evaluates the spline at ``x`` (within the knot range)."""
        return self.derivative(x, order=0)

    def derivative(self, x: ArrayLike, order: int = 1) -> NDArray[np.floating] | float:
        """Evaluates the ``order``-th derivative of the spline at ``x``.

        Args:
            x: Scalar or array of abscissae inside ``[knots[0], knots[-1]]``.
            order: Non-negative derivative order. Orders above 3 are zero.

        Returns:
            A float for scalar ``x``, otherwise an array shaped like ``x``.

        Raises:
            ValueError: If ``order`` is negative or ``x`` is outside the
                knot range.
        """
        if order < 0:
            raise ValueError("order must be non-negative.")
        x_arr = np.asarray(x, dtype=float)
        if np.any(x_arr < self.knots[0]) or np.any(x_arr > self.knots[-1]):
            raise ValueError("spline evaluated outside its knot range.")
        if order > 3:
            out = np.zeros_like(x_arr)
        else:
            out = self._spline(x_arr, nu=order)
        return float(out) if out.ndim == 0 else out

    __call__ = evaluate


def smoothing_penalty(
    knots: NDArray[np.floating],
    smoothness: float,
    *,
    scale: str = "relative",
) -> float:
    """Maps a smoothness in ``[0, 1)`` to the curvature penalty weight.

    ``lam = s / (1 - s)`` grows without bound as ``s -> 1``. With
    ``scale="relative"`` it is multiplied by the cube of the mean knot
    spacing, which makes the result invariant under rescaling the abscissae.
    """
    if smoothness == 0.0:
        return 0.0
    lam = smoothness / (1.0 - smoothness)
    if scale == "relative":
        h_mean = float(np.mean(np.diff(knots)))
        lam *= h_mean**3
    elif scale != "absolute":
        raise ValueError(f"unknown smoothing scale {scale!r}.")
    return lam


def reinsch_fitted_values(
    x: NDArray[np.floating],
    y: NDArray[np.floating],
    lam: float,
) -> NDArray[np.floating]:
    """Returns the knot values of the natural cubic smoothing spline.

    Solves ``(R + lam * Q^T Q) gamma = Q^T y`` and returns
    ``g = y - lam * Q gamma``, where ``Q`` is the ``n x (n-2)`` second
    difference matrix and ``R`` the ``(n-2) x (n-2)`` tridiagonal Gram
    matrix of the spline basis (Green & Silverman, 1994, sec. 2.3).

    Args:
        x: Strictly increasing abscissae, ``n >= 3``.
        y: Ordinates, same length as ``x``.
        lam: Non-negative penalty weight.

    Returns:
        Fitted knot values of length ``n``.
    """
    if lam == 0.0:
        return np.array(y, dtype=float)

    h = np.diff(x)
    n = x.size
    m = n - 2

    # Q has three non-zero diagonals; column k couples rows k, k+1, k+2.
    q0 = 1.0 / h[:-1]
    q2 = 1.0 / h[1:]
    q1 = -q0 - q2

    qty = q0 * y[:-2] + q1 * y[1:-1] + q2 * y[2:]

    # Upper banded storage of the symmetric pentadiagonal R + lam * Q^T Q.
    ab = np.zeros((3, m), dtype=float)
    ab[2, :] = (h[:-1] + h[1:]) / 3.0 + lam * (q0**2 + q1**2 + q2**2)
    ab[1, 1:] = h[1:-1] / 6.0 + lam * (q1[:-1] * q0[1:] + q2[:-1] * q1[1:])
    ab[0, 2:] = lam * (q2[:-2] * q0[2:])

    gamma = solveh_banded(ab, qty)

    q_gamma = np.zeros(n, dtype=float)
    q_gamma[:-2] += q0 * gamma
    q_gamma[1:-1] += q1 * gamma
    q_gamma[2:] += q2 * gamma
    return y - lam * q_gamma


def fit_smoothing_spline(
    knots: ArrayLike,
    values: ArrayLike,
    smoothness: float = 0.0,
    *,
    scale: str = "relative",
) -> SmoothingSpline:
    """Fits a natural cubic (smoothing) spline through ``(knots, values)``.

    Args:
        knots: Strictly increasing abscissae, at least four.
        values: Ordinates, same length as ``knots``.
        smoothness: Value in ``[0, 1)``. Zero interpolates exactly; larger
            values trade fidelity for a smaller integrated curvature.
        scale: ``"relative"`` or ``"absolute"``, see :func:`smoothing_penalty`.

    Returns:
        The fitted :class:`SmoothingSpline`.

    Raises:
        SurfaceConstructionError: If the inputs are malformed.

    Example:
        >>> import numpy as np
        >>> from bicubickit.spline import fit_smoothing_spline
        >>> x = np.array([0.0, 1.0, 2.0, 3.0])
        >>> spline = fit_smoothing_spline(x, x**2)
        >>> float(spline.evaluate(2.0))
        4.0
    """
    x = validate_axis_coordinates(knots, name="knots")
    y = np.asarray(values, dtype=float)
    if y.shape != x.shape:
        raise SurfaceConstructionError(
            f"values must have shape {x.shape} to match knots; got {y.shape}."
        )
    if not np.all(np.isfinite(y)):
        raise SurfaceConstructionError("values contain non-finite entries.")
    s = validate_smoothness(smoothness)

    lam = smoothing_penalty(x, s, scale=scale)
    fitted = reinsch_fitted_values(x, y, lam)
    return SmoothingSpline(x, fitted, s)
