"""Tests for bicubickit.utils.validate."""

import numpy as np
import pytest

from bicubickit.errors import InvalidArgumentError, SurfaceConstructionError
from bicubickit.utils.validate import (
    validate_derivative_components,
    validate_point,
    validate_sample_matrix,
    validate_smoothness,
)


@pytest.mark.parametrize("s", [0.0, 0.5, 0.999])
def test_validate_smoothness_accepts_unit_interval(s):
    """Tests that values in [0, 1) are accepted."""
    assert validate_smoothness(s) == s


@pytest.mark.parametrize("s", [-0.1, 1.0, 1.5, np.nan, "smooth"])
def test_validate_smoothness_rejects_out_of_range(s):
    """Tests that values outside [0, 1) are rejected."""
    with pytest.raises(SurfaceConstructionError):
        validate_smoothness(s)


def test_validate_sample_matrix_checks_shape():
    """Tests that a matrix with the wrong shape is rejected."""
    with pytest.raises(SurfaceConstructionError, match="shape"):
        validate_sample_matrix(np.zeros((4, 5)), (5, 4))


def test_validate_sample_matrix_rejects_non_2d_and_nan():
    """Tests that 1D and non-finite inputs are rejected."""
    with pytest.raises(SurfaceConstructionError, match="2D"):
        validate_sample_matrix(np.zeros(4))
    bad = np.zeros((4, 4))
    bad[1, 2] = np.inf
    with pytest.raises(SurfaceConstructionError, match="non-finite"):
        validate_sample_matrix(bad)


def test_validate_sample_matrix_returns_read_only_copy():
    """Tests that the validated matrix is a read-only copy."""
    src = np.ones((4, 4))
    out = validate_sample_matrix(src)
    src[0, 0] = 5.0

    assert out[0, 0] == 1.0
    with pytest.raises(ValueError):
        out[0, 0] = 2.0


def test_validate_point_accepts_pairs():
    """Tests that sequences and arrays of length two are accepted."""
    assert validate_point((1, 2)) == (1.0, 2.0)
    assert validate_point(np.array([0.5, -0.5])) == (0.5, -0.5)


@pytest.mark.parametrize("point", [(1.0,), (1.0, 2.0, 3.0), ("a", "b")])
def test_validate_point_rejects_other_lengths(point):
    """Tests that points without exactly two numbers are rejected."""
    with pytest.raises(InvalidArgumentError):
        validate_point(point)


def test_validate_derivative_components_accepts_zero_and_one():
    """Tests that selectors 0 and 1 pass through as ints."""
    assert validate_derivative_components([]) == ()
    assert validate_derivative_components([0, 1, 1]) == (0, 1, 1)
    assert validate_derivative_components(np.array([1, 0])) == (1, 0)


@pytest.mark.parametrize("components", [[2], [0, -1], [True], ["x"], 0, None])
def test_validate_derivative_components_rejects_other_selectors(components):
    """Tests that selectors other than 0 and 1 are rejected."""
    with pytest.raises(InvalidArgumentError):
        validate_derivative_components(components)
