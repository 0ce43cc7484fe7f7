"""Smoothing-spline fitting used to synthesize surface derivatives."""

from .smoothing_spline import SmoothingSpline, fit_smoothing_spline

__all__ = ["SmoothingSpline", "fit_smoothing_spline"]
