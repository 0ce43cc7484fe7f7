"""Two-argument function objects backed by a shared bicubic surface.

:class:`BicubicFunction` adapts a :class:`~bicubickit.bicubic_surface.BicubicSurface`
to the generic :class:`TwoArgumentFunction` interface used by integrators
and other numerical consumers. Each function object owns exactly one private
:class:`~bicubickit.surface.hint.PatchHint`, so the localized access pattern
of each consumer is cached independently while the surface data is shared.

Thread safety:
    A :class:`BicubicFunction` is *not* thread-safe, but the surface it wraps
    is. Create one function object per thread.

Example:
    >>> import numpy as np
    >>> from bicubickit import BicubicFunction, BicubicSurface
    >>> x = y = np.arange(4.0)
    >>> func = BicubicFunction(BicubicSurface(x, y, np.outer(x, y)))
    >>> func.argument_size()
    2
    >>> round(func.derivative([0], [1.25, 2.0]), 12)
    2.0
"""

from __future__ import annotations

import sys
from typing import Protocol

from bicubickit.bicubic_surface import BicubicSurface
from bicubickit.errors import InvalidArgumentError
from bicubickit.surface.hint import PatchHint
from bicubickit.utils.types import Components, Point

__all__ = ["TwoArgumentFunction", "BicubicFunction"]


class TwoArgumentFunction(Protocol):
    """Protocol for scalar functions of two arguments with derivatives.

    It serves only as a structural type check and carries no runtime
    behavior.
    """

    def argument_size(self) -> int:
        """Number of arguments; always 2."""
        ...

    def max_derivative_order(self) -> int:
        """Highest derivative order that may be requested."""
        ...

    def value(self, args: Point) -> float:
        """Evaluates the function at ``args``."""
        ...

    def derivative(self, components: Components, args: Point) -> float:
        """Evaluates the partial derivative selected by ``components``."""
        ...


def _as_pair(args: Point, caller: str) -> tuple[float, float]:
    if len(args) != 2:
        raise InvalidArgumentError(
            f"{caller}: the argument XY must have exactly 2 elements but had {len(args)}."
        )
    return float(args[0]), float(args[1])


class BicubicFunction:
    """Two-argument function evaluating a shared :class:`BicubicSurface`."""

    def __init__(self, surface: BicubicSurface) -> None:
        """Creates a function referencing ``surface``, which is shared, not copied."""
        self._surface = surface.copy()
        self._hint = PatchHint()

    @property
    def surface(self) -> BicubicSurface:
        """The surface handle used by this function."""
        return self._surface

    @property
    def hint(self) -> PatchHint:
        """The private hint of this function."""
        return self._hint

    def argument_size(self) -> int:
        """Returns 2 (X and Y)."""
        return 2

    def max_derivative_order(self) -> int:
        """Returns ``sys.maxsize``: any order may be requested.

        The surface is continuous up to the second derivative, discontinuous
        in the third across patch edges, and four or more differentiations
        along one axis are zero.
        """
        return sys.maxsize

    def value(self, args: Point) -> float:
        """Calculates the value of the function at ``args = (X, Y)``."""
        xy = _as_pair(args, "BicubicFunction.value()")
        return self._surface.value(xy, self._hint)

    def derivative(self, components: Components, args: Point) -> float:
        """Calculates a partial derivative at ``args = (X, Y)``.

        Args:
            components: Axes to differentiate along, each ``0`` (x) or
                ``1`` (y).
            args: The two input arguments.
        """
        xy = _as_pair(args, "BicubicFunction.derivative()")
        return self._surface.derivative(components, xy, self._hint)

    __call__ = value
