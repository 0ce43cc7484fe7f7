"""Sample axes for bicubic surfaces.

An axis is a strictly increasing sequence of at least four coordinates.
Two variants are provided:

* :class:`ExplicitAxis` stores arbitrary coordinates and locates intervals
  by binary search.
* :class:`RegularAxis` is described by an origin and a positive spacing and
  locates intervals arithmetically.

Both expose the same small interface used by the surface engine:
``len(axis)``, ``axis[i]``, :meth:`~ExplicitAxis.locate`,
:meth:`~ExplicitAxis.contains`, :meth:`~ExplicitAxis.width` and
:attr:`~ExplicitAxis.coordinates`.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from bicubickit.errors import SurfaceDomainError
from bicubickit.utils.validate import (
    validate_axis_coordinates,
    validate_regular_axis,
)

__all__ = ["ExplicitAxis", "RegularAxis", "as_axis"]


class ExplicitAxis:
    """Axis with arbitrarily spaced sample coordinates.

    Example:
        >>> from bicubickit.axis import ExplicitAxis
        >>> axis = ExplicitAxis([0.0, 0.5, 2.0, 3.0])
        >>> axis.locate(1.0)
        1
        >>> axis.locate(3.0)  # the maximum belongs to the last interval
        2
    """

    is_regular = False

    def __init__(self, coordinates: ArrayLike, *, name: str = "axis") -> None:
        """Initializes the axis.

        Args:
            coordinates: Strictly increasing coordinates, at least four.
            name: Axis name used in error messages.

        Raises:
            SurfaceConstructionError: If the coordinates are invalid.
        """
        self.name = name
        self._coords = validate_axis_coordinates(coordinates, name=name)
        self.lower = float(self._coords[0])
        self.upper = float(self._coords[-1])

    @property
    def coordinates(self) -> NDArray[np.floating]:
        """Read-only array of sample coordinates."""
        return self._coords

    def __len__(self) -> int:
        return int(self._coords.size)

    def __getitem__(self, i: int) -> float:
        return float(self._coords[i])

    def __repr__(self) -> str:
        return f"ExplicitAxis(n={len(self)}, lower={self.lower}, upper={self.upper})"

    def contains(self, value: float) -> bool:
        """Returns ``True`` if ``lower <= value <= upper``; NaN is never contained."""
        return self.lower <= value <= self.upper

    def width(self, i: int) -> float:
        """Returns the width of interval ``i``."""
        return float(self._coords[i + 1] - self._coords[i])

    def interval_contains(self, i: int, value: float) -> bool:
        """Returns ``True`` if interval ``i`` (bounds inclusive) holds ``value``."""
        return 0 <= i < len(self) - 1 and self[i] <= value <= self[i + 1]

    def locate(self, value: float) -> int:
        """Finds the interval containing ``value``.

        Returns the largest ``i`` with ``coordinates[i] <= value``, except that
        the axis maximum maps to the last interval ``len(axis) - 2``.

        Raises:
            SurfaceDomainError: If ``value`` lies outside ``[lower, upper]``.
        """
        if not self.contains(value):
            raise SurfaceDomainError(
                f"{self.name} value {value} is outside [{self.lower}, {self.upper}]."
            )
        i = int(np.searchsorted(self._coords, value, side="right")) - 1
        return min(i, len(self) - 2)


class RegularAxis:
    """Axis with samples at ``origin + i * spacing`` for ``i < size``.

    Example:
        >>> from bicubickit.axis import RegularAxis
        >>> axis = RegularAxis(origin=1.0, spacing=0.5, size=5)
        >>> axis.upper
        3.0
        >>> axis.locate(2.2)
        2
    """

    is_regular = True

    def __init__(
        self,
        origin: float,
        spacing: float,
        size: int,
        *,
        name: str = "axis",
    ) -> None:
        """Initializes the axis.

        Args:
            origin: Coordinate of the first sample.
            spacing: Positive distance between consecutive samples.
            size: Number of samples, at least four.
            name: Axis name used in error messages.

        Raises:
            SurfaceConstructionError: If the parameters are invalid.
        """
        self.name = name
        self.origin, self.spacing, self.size = validate_regular_axis(
            origin, spacing, size, name=name
        )
        self.lower = self.origin
        self.upper = self[self.size - 1]
        coords = self.origin + self.spacing * np.arange(self.size, dtype=float)
        coords.setflags(write=False)
        self._coords = coords

    @property
    def coordinates(self) -> NDArray[np.floating]:
        """Read-only array of sample coordinates."""
        return self._coords

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, i: int) -> float:
        if i < 0:
            i += self.size
        if not 0 <= i < self.size:
            raise IndexError(f"axis index {i} out of range.")
        return self.origin + i * self.spacing

    def __repr__(self) -> str:
        return (
            f"RegularAxis(origin={self.origin}, spacing={self.spacing}, "
            f"size={self.size})"
        )

    def contains(self, value: float) -> bool:
        """Returns ``True`` if ``lower <= value <= upper``; NaN is never contained."""
        return self.lower <= value <= self.upper

    def width(self, i: int) -> float:
        """Returns the width of interval ``i``."""
        return self[i + 1] - self[i]

    def interval_contains(self, i: int, value: float) -> bool:
        """Returns ``True`` if interval ``i`` (bounds inclusive) holds ``value``."""
        return 0 <= i < self.size - 1 and self[i] <= value <= self[i + 1]

    def locate(self, value: float) -> int:
        """Finds the interval containing ``value`` in constant time.

        Raises:
            SurfaceDomainError: If ``value`` lies outside ``[lower, upper]``.
        """
        if not self.contains(value):
            raise SurfaceDomainError(
                f"{self.name} value {value} is outside [{self.lower}, {self.upper}]."
            )
        i = math.floor((value - self.origin) / self.spacing)
        i = min(max(i, 0), self.size - 2)
        # Rounding in the division can land one interval off.
        if value < self[i]:
            i -= 1
        elif value >= self[i + 1] and i < self.size - 2:
            i += 1
        return i


def as_axis(axis: ExplicitAxis | RegularAxis | ArrayLike, *, name: str = "axis"):
    """Returns ``axis`` unchanged if it already is an axis, else an :class:`ExplicitAxis`."""
    if isinstance(axis, (ExplicitAxis, RegularAxis)):
        return axis
    return ExplicitAxis(axis, name=name)
