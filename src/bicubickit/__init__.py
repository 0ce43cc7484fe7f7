"""Provides all bicubickit classes."""

from importlib.metadata import PackageNotFoundError, version

from bicubickit.axis import ExplicitAxis, RegularAxis
from bicubickit.bicubic_function import BicubicFunction, TwoArgumentFunction
from bicubickit.bicubic_surface import BicubicSurface
from bicubickit.config import SurfaceConfig
from bicubickit.errors import (
    BicubicError,
    EmptySurfaceError,
    InvalidArgumentError,
    SurfaceConstructionError,
    SurfaceDomainError,
)
from bicubickit.spline import SmoothingSpline, fit_smoothing_spline
from bicubickit.surface import GridData, PatchHint

try:
    __version__ = version("bicubickit")
except PackageNotFoundError:
    pass

BicubicSurface.__module__ = "bicubickit.bicubic_surface"

__all__ = [
    "BicubicError",
    "BicubicFunction",
    "BicubicSurface",
    "EmptySurfaceError",
    "ExplicitAxis",
    "GridData",
    "InvalidArgumentError",
    "PatchHint",
    "RegularAxis",
    "SmoothingSpline",
    "SurfaceConfig",
    "SurfaceConstructionError",
    "SurfaceDomainError",
    "TwoArgumentFunction",
    "fit_smoothing_spline",
]
