import itertools
import logging
import math

import pytest

from mandelbmp import Region, default_region, resolve_region

WIDTH, HEIGHT = 400, 200
FULL = (-2.0, 1.0, -0.75, 0.75)

DERIVABLE = {
    (True, True, True, True),
    (True, True, True, False),
    (True, True, False, True),
    (True, False, True, True),
    (False, True, True, True),
}


def _masked(mask):
    return [value if keep else None for value, keep in zip(FULL, mask)]


def test_default_region():
    region = default_region(WIDTH, HEIGHT)
    assert region == Region(x_min=-2.4, x_max=1.4, y_min=pytest.approx(-0.95), y_max=pytest.approx(0.95))
    assert region.y_min == -region.y_max


def test_all_four_used_as_given(caplog):
    with caplog.at_level(logging.WARNING):
        region = resolve_region(-2.0, 1.0, -1.0, 1.0, WIDTH, HEIGHT)
    # no aspect correction even though the rectangle is not 2:1
    assert region == Region(-2.0, 1.0, -1.0, 1.0)
    assert not caplog.records


def test_missing_upper_bound_is_derived():
    region = resolve_region(-2.0, 1.0, -0.5, None, WIDTH, HEIGHT)
    assert region.y_min == -0.5
    assert region.y_max == pytest.approx(-0.5 + 3.0 * HEIGHT / WIDTH)


def test_missing_lower_bound_is_derived():
    region = resolve_region(-2.0, 1.0, None, 0.4, WIDTH, HEIGHT)
    assert region.y_max == 0.4
    assert region.y_min == pytest.approx(0.4 - 1.5)


def test_missing_right_bound_is_derived():
    region = resolve_region(-1.0, None, -0.5, 0.5, WIDTH, HEIGHT)
    assert region.x_min == -1.0
    assert region.x_max == pytest.approx(-1.0 + 1.0 * WIDTH / HEIGHT)


def test_missing_left_bound_is_derived():
    region = resolve_region(None, 0.5, -0.5, 0.5, WIDTH, HEIGHT)
    assert region.x_max == 0.5
    assert region.x_min == pytest.approx(0.5 - 2.0)


@pytest.mark.parametrize("mask", sorted(DERIVABLE))
def test_derivable_combinations_keep_aspect(mask):
    region = resolve_region(*_masked(mask), WIDTH, HEIGHT)
    assert region == Region(*(pytest.approx(v) for v in FULL))
    assert region.y_width / region.x_width == pytest.approx(HEIGHT / WIDTH)


@pytest.mark.parametrize(
    "mask",
    [mask for mask in itertools.product([True, False], repeat=4) if mask not in DERIVABLE],
)
def test_ambiguous_combinations_fall_back(mask, caplog):
    with caplog.at_level(logging.WARNING, logger="mandelbmp.region"):
        region = resolve_region(*_masked(mask), WIDTH, HEIGHT)
    assert region == default_region(WIDTH, HEIGHT)
    assert any("default region" in record.getMessage() for record in caplog.records)


def test_inverted_bounds_fall_back(caplog):
    with caplog.at_level(logging.WARNING, logger="mandelbmp.region"):
        region = resolve_region(1.0, -2.0, -1.0, 1.0, WIDTH, HEIGHT)
    assert region == default_region(WIDTH, HEIGHT)
    assert caplog.records


def test_derived_empty_axis_falls_back():
    # a zero x-span derives a zero y-span
    region = resolve_region(0.5, 0.5, 0.0, None, WIDTH, HEIGHT)
    assert region == default_region(WIDTH, HEIGHT)


def test_non_finite_bound_falls_back():
    region = resolve_region(-2.0, math.inf, -1.0, 1.0, WIDTH, HEIGHT)
    assert region == default_region(WIDTH, HEIGHT)


def test_region_is_immutable():
    region = default_region(WIDTH, HEIGHT)
    with pytest.raises(AttributeError):
        region.x_min = 0.0


def test_overflowing_span_falls_back(caplog):
    # every bound is finite but x_max - x_min overflows to inf
    with caplog.at_level(logging.WARNING, logger="mandelbmp.region"):
        region = resolve_region(-1e308, 1e308, -1.0, 1.0, 8, 4)
    assert region == default_region(8, 4)
    assert caplog.records


def test_overflowing_derived_span_falls_back():
    region = resolve_region(-1e308, 1e308, 0.0, None, 8, 4)
    assert region == default_region(8, 4)
