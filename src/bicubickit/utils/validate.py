"""Validation utilities for BicubicKit."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from bicubickit.errors import InvalidArgumentError, SurfaceConstructionError

__all__ = [
    "MIN_AXIS_LENGTH",
    "validate_axis_coordinates",
    "validate_regular_axis",
    "validate_sample_matrix",
    "validate_smoothness",
    "validate_point",
    "validate_derivative_components",
]

MIN_AXIS_LENGTH = 4


def validate_axis_coordinates(
    coordinates: ArrayLike,
    *,
    name: str = "axis",
) -> NDArray[np.floating]:
    """Validates and converts explicit axis coordinates into a NumPy array.

    Requirements:
      - ``coordinates`` is 1D with at least ``MIN_AXIS_LENGTH`` entries.
      - All entries are finite.
      - Entries are strictly increasing (this also rules out duplicates).

    Args:
        coordinates: 1D array-like of sample locations.
        name: Axis name used in error messages.

    Returns:
        A read-only float array holding the coordinates.

    Raises:
        SurfaceConstructionError: If the coordinates do not meet the
            required conditions.
    """
    try:
        arr = np.array(coordinates, dtype=float)
    except (TypeError, ValueError) as e:
        raise SurfaceConstructionError(
            f"{name} coordinates must be convertible to floats."
        ) from e

    if arr.ndim != 1:
        raise SurfaceConstructionError(f"{name} must be 1D; got ndim={arr.ndim}.")
    if arr.size < MIN_AXIS_LENGTH:
        raise SurfaceConstructionError(
            f"{name} must have at least {MIN_AXIS_LENGTH} entries; got {arr.size}."
        )
    if not np.all(np.isfinite(arr)):
        raise SurfaceConstructionError(f"{name} contains non-finite values.")
    steps = np.diff(arr)
    if np.any(steps == 0):
        raise SurfaceConstructionError(f"{name} contains duplicate coordinates.")
    if np.any(steps < 0):
        raise SurfaceConstructionError(f"{name} must be strictly increasing.")

    arr.setflags(write=False)
    return arr


def validate_regular_axis(
    origin: Any,
    spacing: Any,
    size: int,
    *,
    name: str = "axis",
) -> tuple[float, float, int]:
    """Validates the parameters of a regularly spaced axis.

    Args:
        origin: Coordinate of the first sample.
        spacing: Distance between consecutive samples; must be positive.
        size: Number of samples along the axis.
        name: Axis name used in error messages.

    Returns:
        The tuple ``(origin, spacing, size)`` converted to ``(float, float, int)``.

    Raises:
        SurfaceConstructionError: If ``spacing`` is not positive, any value is
            not finite, or ``size`` is smaller than ``MIN_AXIS_LENGTH``.
    """
    try:
        origin_f = float(origin)
        spacing_f = float(spacing)
    except (TypeError, ValueError) as e:
        raise SurfaceConstructionError(
            f"{name} origin and spacing must be real numbers."
        ) from e

    if not np.isfinite(origin_f) or not np.isfinite(spacing_f):
        raise SurfaceConstructionError(f"{name} origin and spacing must be finite.")
    if spacing_f <= 0.0:
        raise SurfaceConstructionError(
            f"{name} spacing must be positive; got {spacing_f}."
        )
    if int(size) < MIN_AXIS_LENGTH:
        raise SurfaceConstructionError(
            f"{name} must have at least {MIN_AXIS_LENGTH} entries; got {size}."
        )
    return origin_f, spacing_f, int(size)


def validate_sample_matrix(
    matrix: ArrayLike,
    shape: tuple[int, int] | None = None,
    *,
    name: str = "f",
) -> NDArray[np.floating]:
    """Validates a sample matrix and returns a read-only float copy.

    Args:
        matrix: 2D array-like of samples.
        shape: Required shape ``(nx, ny)``; ``None`` skips the shape check.
        name: Matrix name used in error messages.

    Returns:
        A read-only float array with the matrix contents.

    Raises:
        SurfaceConstructionError: If the matrix is not 2D, has the wrong shape,
            or contains non-finite values.
    """
    try:
        arr = np.array(matrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise SurfaceConstructionError(
            f"{name} must be a 2D array of real numbers."
        ) from e

    if arr.ndim != 2:
        raise SurfaceConstructionError(f"{name} must be 2D; got ndim={arr.ndim}.")
    if shape is not None and arr.shape != tuple(shape):
        raise SurfaceConstructionError(
            f"{name} must have shape {tuple(shape)} to match the axes; got {arr.shape}."
        )
    if not np.all(np.isfinite(arr)):
        raise SurfaceConstructionError(f"{name} contains non-finite values.")

    arr.setflags(write=False)
    return arr


def validate_smoothness(smoothness: Any) -> float:
    """Validates the smoothness parameter, which must lie in ``[0, 1)``.

    Raises:
        SurfaceConstructionError: If ``smoothness`` is not a number in ``[0, 1)``.
    """
    try:
        s = float(smoothness)
    except (TypeError, ValueError) as e:
        raise SurfaceConstructionError("smoothness must be a real number.") from e
    if not (0.0 <= s < 1.0):
        raise SurfaceConstructionError(
            f"smoothness must lie in [0, 1); got {smoothness}."
        )
    return s


def validate_point(point: Any) -> tuple[float, float]:
    """Converts a query point to an ``(x, y)`` pair of floats.

    Raises:
        InvalidArgumentError: If ``point`` does not hold exactly two real numbers.
    """
    try:
        arr = np.asarray(point, dtype=float).reshape(-1)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError("point must hold two real numbers.") from e
    if arr.size != 2:
        raise InvalidArgumentError(
            f"point must have exactly 2 elements but had {arr.size}."
        )
    return float(arr[0]), float(arr[1])


def validate_derivative_components(components: Any) -> tuple[int, ...]:
    """Validates a list of derivative axis selectors.

    Each selector must be ``0`` (differentiate with respect to x) or ``1``
    (with respect to y). The empty list requests the value itself.

    Returns:
        The selectors as a tuple of ints.

    Raises:
        InvalidArgumentError: If ``components`` is not a sequence or any
            selector is not 0 or 1.
    """
    try:
        selectors = list(components)
    except TypeError as e:
        raise InvalidArgumentError(
            f"derivative components must be a sequence of 0 and 1; got {components!r}."
        ) from e
    out = []
    for c in selectors:
        if isinstance(c, (bool, np.bool_)) or c not in (0, 1):
            raise InvalidArgumentError(
                f"derivative components must be 0 (x) or 1 (y); got {c!r}."
            )
        out.append(int(c))
    return tuple(out)
