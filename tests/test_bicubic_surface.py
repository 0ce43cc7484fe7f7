"""Tests for the BicubicSurface handle: construction, evaluation and sharing."""

import copy
import gc
import weakref

import numpy as np
import pytest
from numpy.testing import assert_allclose

from bicubickit import (
    BicubicSurface,
    EmptySurfaceError,
    InvalidArgumentError,
    PatchHint,
    RegularAxis,
    SurfaceConfig,
    SurfaceConstructionError,
    SurfaceDomainError,
)


def _poly(x, y):
    """Returns F = x**3 y**2 + 2 x y**3 - x**2 and its partials on a grid."""
    xx, yy = np.meshgrid(x, y, indexing="ij")
    f = xx**3 * yy**2 + 2 * xx * yy**3 - xx**2
    fx = 3 * xx**2 * yy**2 + 2 * yy**3 - 2 * xx
    fy = 2 * xx**3 * yy + 6 * xx * yy**2
    fxy = 6 * xx**2 * yy + 6 * yy**2
    return f, fx, fy, fxy


def test_bilinear_samples_are_reproduced(product_surface):
    """Tests the x * y grid: knots, first and mixed derivatives, domain."""
    hint = PatchHint()
    for i in range(4):
        for j in range(4):
            assert product_surface.value((i, j), hint) == pytest.approx(i * j, abs=1e-12)

    for x, y in [(0.5, 0.5), (1.2, 2.7), (2.9, 0.1), (1.0, 1.5)]:
        assert product_surface.derivative([0], (x, y), hint) == pytest.approx(y, abs=1e-12)
        assert product_surface.derivative([1], (x, y), hint) == pytest.approx(x, abs=1e-12)
        assert product_surface.derivative([0, 1], (x, y), hint) == pytest.approx(1.0, abs=1e-12)
        assert product_surface.derivative([0, 0], (x, y), hint) == pytest.approx(0.0, abs=1e-12)

    with pytest.raises(SurfaceDomainError):
        product_surface.value((-0.1, 1.0), hint)
    assert not product_surface.is_defined((-0.1, 1.0))
    assert product_surface.is_defined((3.0, 0.0))


def test_domain_error_is_a_value_error(product_surface):
    """Tests that domain errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        product_surface.derivative([1], (1.0, 3.5))


def test_known_derivatives_reproduce_bicubic_polynomial():
    """Tests that exact derivative input reproduces a bicubic polynomial everywhere."""
    x = np.array([-1.0, 0.0, 0.5, 2.0, 3.0])
    y = np.array([0.0, 0.7, 1.0, 2.5])
    surface = BicubicSurface.from_derivatives(x, y, *_poly(x, y))
    hint = PatchHint()

    rng = np.random.default_rng(12)
    for px, py in zip(rng.uniform(-1.0, 3.0, 25), rng.uniform(0.0, 2.5, 25)):
        f, fx, fy, fxy = (float(a[0, 0]) for a in _poly(np.array([px]), np.array([py])))
        pt = (px, py)
        assert surface.value(pt, hint) == pytest.approx(f, rel=1e-10, abs=1e-10)
        assert surface.derivative([0], pt, hint) == pytest.approx(fx, rel=1e-10, abs=1e-10)
        assert surface.derivative([1], pt, hint) == pytest.approx(fy, rel=1e-10, abs=1e-10)
        assert surface.derivative([1, 0], pt, hint) == pytest.approx(fxy, rel=1e-10, abs=1e-10)
        assert surface.derivative([0, 0, 0], pt, hint) == pytest.approx(6 * py**2, abs=1e-7)
        assert surface.derivative([0, 0, 0, 1], pt, hint) == pytest.approx(12 * py, abs=1e-7)
        assert surface.derivative([0, 0, 0, 1, 1], pt, hint) == pytest.approx(12.0, abs=1e-7)
        assert surface.derivative([1, 1, 1], pt, hint) == pytest.approx(12 * px, abs=1e-7)
        assert surface.derivative([0, 0, 0, 0], pt, hint) == 0.0
        assert surface.derivative([1, 1, 1, 1], pt, hint) == 0.0

    assert surface.grid.smoothness is None


def test_regular_constructor():
    """Tests origin/spacing construction on a non-square grid."""
    f = np.outer(np.arange(4.0), np.arange(5.0))
    surface = BicubicSurface.regular((0.0, 0.0), (1.0, 1.0), f)

    assert surface.x_axis.is_regular
    assert surface.y_axis.is_regular
    assert surface.bounds == ((0.0, 3.0), (0.0, 4.0))
    assert surface.derivative([0, 1], (1.5, 2.5)) == pytest.approx(1.0, abs=1e-12)
    assert surface.value((3.0, 4.0)) == pytest.approx(12.0, abs=1e-12)


def test_regular_from_derivatives_matches_explicit_axes():
    """Tests that regular and explicit axes give the same surface."""
    origin, spacing = (-1.0, 0.5), (0.5, 0.25)
    rx = RegularAxis(origin[0], spacing[0], 6)
    ry = RegularAxis(origin[1], spacing[1], 7)
    parts = _poly(rx.coordinates, ry.coordinates)

    regular = BicubicSurface.regular_from_derivatives(origin, spacing, *parts)
    explicit = BicubicSurface.from_derivatives(rx.coordinates, ry.coordinates, *parts)

    for pt in [(-1.0, 0.5), (0.1, 1.3), (1.5, 2.0), (0.0, 1.0)]:
        assert regular.value(pt) == pytest.approx(explicit.value(pt), rel=1e-12, abs=1e-12)


@pytest.mark.parametrize("origin, spacing", [((0.0,), (1.0, 1.0)), ((0.0, 0.0), (1.0, -1.0))])
def test_regular_constructor_rejects_bad_geometry(origin, spacing):
    """Tests that malformed origin or spacing is rejected."""
    with pytest.raises(SurfaceConstructionError):
        BicubicSurface.regular(origin, spacing, np.zeros((4, 4)))


@pytest.mark.parametrize(
    "x, y, f",
    [
        (np.arange(3.0), np.arange(4.0), np.zeros((3, 4))),
        (np.arange(4.0), np.arange(4.0), np.zeros((4, 5))),
        (np.array([0.0, 1.0, 1.0, 2.0]), np.arange(4.0), np.zeros((4, 4))),
        (np.arange(4.0), None, np.zeros((4, 4))),
    ],
)
def test_invalid_construction_raises(x, y, f):
    """Tests that bad axes, shapes or missing arguments fail construction."""
    with pytest.raises(SurfaceConstructionError):
        BicubicSurface(x, y, f)


def test_smoothing_surface_approaches_samples():
    """Tests that s > 0 builds a surface near, but not through, noisy samples."""
    x = np.linspace(0.0, 1.0, 10)
    y = np.linspace(0.0, 1.0, 9)
    rng = np.random.default_rng(21)
    clean = np.add.outer(x, 2 * y)
    noisy = clean + 0.01 * rng.standard_normal(clean.shape)

    surface = BicubicSurface(x, y, noisy, smoothness=0.3)
    knots = np.array([[surface.value((a, b)) for b in y] for a in x])

    assert not np.allclose(knots, noisy, atol=1e-12)
    assert_allclose(knots, clean, atol=0.05)
    assert_allclose(surface.grid.samples, noisy)


def test_empty_handle_rejects_use():
    """Tests that a default-constructed handle is empty and refuses evaluation."""
    surface = BicubicSurface()

    assert surface.is_empty()
    assert surface.reference_count == 0
    assert repr(surface) == "BicubicSurface(empty)"
    with pytest.raises(EmptySurfaceError):
        surface.value((0.0, 0.0))
    with pytest.raises(InvalidArgumentError):
        surface.num_accesses
    surface.clear()
    assert surface.is_empty()


def test_copies_share_one_engine(product_surface):
    """Tests that copies are shallow and the reference count tracks them."""
    other = product_surface.copy()
    third = copy.copy(product_surface)
    fourth = copy.deepcopy(product_surface)

    assert product_surface.reference_count == 4
    assert other.is_same_surface(product_surface)
    assert fourth.engine is product_surface.engine

    del third
    assert product_surface.reference_count == 3
    other.clear()
    fourth.clear()
    assert other.is_empty()
    assert product_surface.reference_count == 1
    assert not other.is_same_surface(product_surface)


def test_statistics_are_shared_between_handles(product_surface):
    """Tests that every handle reports the same counters."""
    other = product_surface.copy()
    other.value((1.0, 1.0))
    product_surface.value((2.0, 2.0))

    assert other.num_accesses == 2
    assert product_surface.num_accesses == 2


def test_assign_rebinds_handles():
    """Tests that assign moves a handle between surfaces and releases the old one."""
    x = y = np.arange(4.0)
    a = BicubicSurface(x, y, np.outer(x, y))
    b = BicubicSurface(x, y, np.add.outer(x, y))
    handle = BicubicSurface()

    assert handle.assign(a) is handle
    assert a.reference_count == 2
    handle.assign(handle)
    assert a.reference_count == 2

    handle.assign(b)
    assert a.reference_count == 1
    assert b.reference_count == 2
    assert handle.value((1.0, 2.0)) == pytest.approx(3.0, abs=1e-12)

    handle.assign(BicubicSurface())
    assert handle.is_empty()
    assert b.reference_count == 1


def test_engine_is_released_with_last_handle():
    """Tests that the shared engine is dropped once no handle references it."""
    x = y = np.arange(4.0)
    surface = BicubicSurface(x, y, np.outer(x, y))
    other = surface.copy()
    ref = weakref.ref(surface.engine)

    surface.clear()
    gc.collect()
    assert ref() is not None
    assert other.value((1.0, 1.0)) == pytest.approx(1.0, abs=1e-12)

    del other
    gc.collect()
    assert ref() is None


def test_engine_is_freed_without_garbage_collection():
    """Tests that clearing the last handle frees the engine immediately."""
    x = y = np.arange(4.0)
    surface = BicubicSurface(x, y, np.outer(x, y))
    surface.value((1.5, 1.5))
    ref = weakref.ref(surface.engine)

    gc.disable()
    try:
        surface.clear()
        assert ref() is None
    finally:
        gc.enable()


def test_is_defined_never_raises(product_surface):
    """Tests that malformed points and empty handles are reported as undefined."""
    assert not product_surface.is_defined((1.0, 1.0, 1.0))
    assert not product_surface.is_defined("xy")
    assert not BicubicSurface().is_defined((1.0, 1.0))


def test_bare_integer_components_are_rejected(product_surface):
    """Tests that a selector passed without a list is an invalid argument."""
    with pytest.raises(InvalidArgumentError):
        product_surface.derivative(0, (1.0, 1.0))


def test_grid_accessors(wavy_surface):
    """Tests that grid, axes and bounds describe the sampled rectangle."""
    assert wavy_surface.grid.shape == (7, 6)
    assert len(wavy_surface.x_axis) == 7
    assert wavy_surface.y_axis[2] == 1.1
    assert wavy_surface.bounds == ((0.0, 3.0), (0.0, 3.0))
    assert "shape=(7, 6)" in repr(wavy_surface)


def test_config_is_passed_to_engine():
    """Tests that the handle forwards its configuration."""
    x = y = np.arange(5.0)
    cfg = SurfaceConfig(patch_cache_size=4, nearby_search=False)
    surface = BicubicSurface(x, y, np.zeros((5, 5)), config=cfg)

    assert surface.engine.config is cfg
    assert surface.engine.cache_info().maxsize == 4
