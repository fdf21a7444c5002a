import numpy as np

from mandelbmp import gradient, gradient_grid


def test_corners():
    # a span of 255 pixels makes every ramp divisor exactly 2
    width, height = 256, 256
    assert gradient(0, 0, width, height) == (0, 255, 127)
    assert gradient(width - 1, height - 1, width, height) == (255, 0, 127)
    assert gradient(width - 1, 0, width, height) == (127, 127, 255)
    assert gradient(0, height - 1, width, height) == (127, 127, 0)


def test_channels_are_eight_bit():
    for x, y in [(0, 0), (3, 7), (99, 49), (50, 25)]:
        assert all(0 <= c <= 255 for c in gradient(x, y, 100, 50))


def test_single_pixel_axis_has_zero_ramp():
    assert gradient(0, 0, 1, 1) == (0, 0, 0)
    assert gradient(4, 0, 5, 1) == (127, 0, 127)


def test_grid_matches_scalar():
    width, height = 37, 19
    rows = np.arange(height)
    cols = np.arange(width)
    r, g, b = gradient_grid(rows, cols, width, height)
    assert r.shape == (height, width)
    assert r.dtype == np.uint8
    for y in range(height):
        for x in range(width):
            assert (r[y, x], g[y, x], b[y, x]) == gradient(x, y, width, height)


def test_grid_over_row_band():
    width, height = 16, 40
    r, g, b = gradient_grid(np.arange(10, 14), np.arange(width), width, height)
    assert r.shape == (4, width)
    assert (r[0, 5], g[0, 5], b[0, 5]) == gradient(5, 10, width, height)
