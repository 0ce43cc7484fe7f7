"""Exceptions raised by BicubicKit.

All errors derive from :class:`ValueError` as well as :class:`BicubicError`,
so callers may catch either the package-specific class or the plain
``ValueError`` they would expect from NumPy-style validation.
"""

from __future__ import annotations

__all__ = [
    "BicubicError",
    "SurfaceConstructionError",
    "SurfaceDomainError",
    "InvalidArgumentError",
    "EmptySurfaceError",
]


class BicubicError(Exception):
    """Base class for all BicubicKit errors."""


class SurfaceConstructionError(BicubicError, ValueError):
    """Raised when axes, sample matrices, smoothness or config are invalid."""


class SurfaceDomainError(BicubicError, ValueError):
    """Raised when a query point lies outside the sampled rectangle."""


class InvalidArgumentError(BicubicError, ValueError):
    """Raised for malformed evaluation arguments."""


class EmptySurfaceError(InvalidArgumentError):
    """Raised when evaluating through a handle that references no surface."""
