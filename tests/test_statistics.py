"""Tests for surface access statistics and their formatting."""

import logging

from bicubickit import PatchHint
from bicubickit.surface.statistics import AccessStatistics, format_access_statistics


def test_counters_start_at_zero():
    """Tests that a new counter set is all zeros."""
    stats = AccessStatistics()
    assert stats.as_dict() == {
        "accesses": 0,
        "same_point": 0,
        "same_patch": 0,
        "nearby_patch": 0,
        "searched": 0,
    }


def test_surface_accessors_and_reset(product_surface, caplog):
    """Tests the handle's counter accessors and reset_statistics."""
    hint = PatchHint()
    product_surface.value((0.5, 0.5), hint)
    product_surface.value((0.5, 0.5), hint)
    product_surface.value((0.6, 0.5), hint)
    product_surface.value((1.5, 0.5), hint)

    assert product_surface.num_accesses == 4
    assert product_surface.num_accesses_same_point == 1
    assert product_surface.num_accesses_same_patch == 1
    assert product_surface.num_accesses_nearby_patch == 1
    assert product_surface.statistics_summary()["searched"] == 1

    with caplog.at_level(logging.DEBUG, logger="bicubickit"):
        product_surface.reset_statistics()
    assert "Access statistics reset" in caplog.text
    assert product_surface.num_accesses == 0
    assert product_surface.statistics_summary()["searched"] == 0


def test_statistics_do_not_affect_results(product_surface):
    """Tests that resetting counters mid-walk leaves results unchanged."""
    hint = PatchHint()
    before = product_surface.derivative([0], (2.2, 1.7), hint)
    product_surface.reset_statistics()
    after = product_surface.derivative([0], (2.2, 1.7), hint)

    assert before == after
    assert product_surface.num_accesses_same_point == 1


def test_format_access_statistics_layout():
    """Tests the header, metadata block and percentage lines."""
    stats = AccessStatistics()
    stats.accesses = 8
    stats.same_point = 2
    stats.same_patch = 4
    stats.nearby_patch = 1

    text = format_access_statistics(stats, meta={"grid": "4x4"})
    lines = text.splitlines()

    assert lines[0] == "=== Surface Access Statistics ==="
    assert "  grid: 4x4" in lines
    assert "accesses     : 8" in lines
    assert "same_point   : 2 (25.0%)" in lines
    assert "same_patch   : 4 (50.0%)" in lines
    assert "nearby_patch : 1 (12.5%)" in lines
    assert "searched     : 1 (12.5%)" in lines


def test_format_handles_empty_and_invalid_input():
    """Tests zero totals and non-dictionary input."""
    text = format_access_statistics(AccessStatistics(), decimals=2)
    assert "same_point   : 0 (0.00%)" in text
    assert format_access_statistics(None) == "‹statistics unavailable›"


def test_surface_format_statistics_includes_grid(wavy_surface):
    """Tests the handle's printable report."""
    wavy_surface.value((1.0, 1.0))
    text = wavy_surface.format_statistics()
    assert "grid: 7x6" in text
    assert "accesses     : 1" in text
