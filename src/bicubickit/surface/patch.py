"""Bicubic patch coefficients and polynomial evaluation.

A patch is the grid cell ``[x_i, x_{i+1}] x [y_j, y_{j+1}]``. On it the
surface is the polynomial

.. math::

    p(u, v) = \\sum_{p=0}^{3} \\sum_{q=0}^{3} c_{pq} u^p v^q,

with normalized coordinates ``u = (X - x_i) / hx`` and
``v = (Y - y_j) / hy``. The 16 coefficients follow from the values and
derivatives at the four corners through the fixed matrix
``BASIS = kron(HERMITE, HERMITE)`` (see
https://en.wikipedia.org/wiki/Bicubic_interpolation).
"""

from __future__ import annotations

import numpy as np

from bicubickit.utils.types import Array, Components

__all__ = [
    "HERMITE",
    "BASIS",
    "Patch",
    "corner_matrix",
    "patch_coefficients",
    "evaluate_polynomial",
]

# fmt: off
# Maps (p(0), p(1), p'(0), p'(1)) of a cubic on [0, 1] to its power-basis
# coefficients (a0, a1, a2, a3).
HERMITE = np.array([
    [ 1.0,  0.0,  0.0,  0.0],
    [ 0.0,  0.0,  1.0,  0.0],
    [-3.0,  3.0, -2.0, -1.0],
    [ 2.0, -2.0,  1.0,  1.0],
])
# fmt: on

# Row-major vec(HERMITE @ F @ HERMITE.T) == BASIS @ vec(F).
BASIS = np.kron(HERMITE, HERMITE)
BASIS.setflags(write=False)

# FALLING[k, p] = p! / (p - k)!, the factor picked up by u**p after k
# differentiations (zero once k > p).
FALLING = np.array(
    [[float(np.prod(np.arange(p - k + 1, p + 1))) if k <= p else 0.0
      for p in range(4)]
     for k in range(4)]
)


def corner_matrix(
    corners: Array,
    hx: float,
    hy: float,
) -> Array:
    """Arranges corner data into the 4x4 matrix ``F`` of the bicubic basis.

    Args:
        corners: Array of shape ``(2, 2, 4)`` holding ``(f, fx, fy, fxy)`` at
            the knots ``(i + a, j + b)`` in entry ``[a, b]``.
        hx: Patch width.
        hy: Patch height.

    Returns:
        ``F = [[f, fv], [fu, fuv]]`` in 2x2 blocks, where derivatives are
        rescaled to the unit square (``fu = hx * fx`` and so on).
    """
    f = corners[..., 0]
    fu = corners[..., 1] * hx
    fv = corners[..., 2] * hy
    fuv = corners[..., 3] * (hx * hy)
    return np.block([[f, fv], [fu, fuv]])


def patch_coefficients(
    corners: Array,
    hx: float,
    hy: float,
) -> Array:
    """Computes the 4x4 coefficient array ``c[p, q]`` of a patch.

    Args:
        corners: ``(2, 2, 4)`` corner data, see :func:`corner_matrix`.
        hx: Patch width.
        hy: Patch height.

    Returns:
        Coefficients with ``c[p, q]`` multiplying ``u**p * v**q``.
    """
    mat = corner_matrix(corners, hx, hy)
    return (BASIS @ mat.reshape(16)).reshape(4, 4)


def evaluate_polynomial(
    coeffs: Array,
    u: float,
    v: float,
    order_x: int = 0,
    order_y: int = 0,
    hx: float = 1.0,
    hy: float = 1.0,
) -> float:
    """Evaluates a (differentiated) bicubic polynomial.

    Args:
        coeffs: ``(4, 4)`` coefficient array.
        u: Normalized x coordinate.
        v: Normalized y coordinate.
        order_x: Number of differentiations with respect to x.
        order_y: Number of differentiations with respect to y.
        hx: Patch width; each x differentiation scales by ``1 / hx``.
        hy: Patch height; each y differentiation scales by ``1 / hy``.

    Returns:
        The requested derivative at ``(u, v)``; exactly ``0.0`` when either
        order exceeds three.
    """
    if order_x > 3 or order_y > 3:
        return 0.0
    pu = FALLING[order_x] * _shifted_powers(u, order_x)
    pv = FALLING[order_y] * _shifted_powers(v, order_y)
    value = float(pu @ coeffs @ pv)
    if order_x:
        value /= hx**order_x
    if order_y:
        value /= hy**order_y
    return value


def _shifted_powers(t: float, k: int) -> Array:
    """Returns ``[t**(p-k)]`` for ``p = 0..3``, with zeros where ``p < k``."""
    out = np.zeros(4)
    for p in range(k, 4):
        out[p] = t ** (p - k)
    return out


class Patch:
    """An assembled patch: its indices, bounds and coefficients.

    Attributes:
        i: Index of the patch along x.
        j: Index of the patch along y.
        x0: Lower x bound.
        y0: Lower y bound.
        hx: Patch width.
        hy: Patch height.
        coeffs: Read-only ``(4, 4)`` coefficient array.
    """

    __slots__ = ("i", "j", "x0", "y0", "hx", "hy", "coeffs")

    def __init__(self, i, j, x0, y0, hx, hy, coeffs):
        self.i = i
        self.j = j
        self.x0 = x0
        self.y0 = y0
        self.hx = hx
        self.hy = hy
        self.coeffs = coeffs

    def __repr__(self) -> str:
        return (
            f"Patch(i={self.i}, j={self.j}, "
            f"x=[{self.x0}, {self.x0 + self.hx}], y=[{self.y0}, {self.y0 + self.hy}])"
        )

    def evaluate(self, x: float, y: float, components: Components = ()) -> float:
        """Evaluates the patch polynomial or one of its partial derivatives.

        Args:
            x: Query x coordinate.
            y: Query y coordinate.
            components: Validated derivative selectors (``0`` for x, ``1`` for y).

        Returns:
            The value or requested partial derivative at ``(x, y)``.
        """
        order_y = sum(components)
        order_x = len(components) - order_y
        u = (x - self.x0) / self.hx
        v = (y - self.y0) / self.hy
        return evaluate_polynomial(self.coeffs, u, v, order_x, order_y, self.hx, self.hy)
