"""Utility functions for BicubicKit package."""

from .validate import (
    validate_derivative_components,
    validate_point,
    validate_smoothness,
)

__all__ = [
    "validate_derivative_components",
    "validate_point",
    "validate_smoothness",
]
