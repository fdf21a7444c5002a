"""Positional background gradient."""

from __future__ import annotations

import numpy as np

RAMP_PEAK = 127.5


def _ramp_divisor(size: int) -> float:
    # a single pixel along an axis gets a constant zero ramp
    return max(size - 1, 1) / RAMP_PEAK


def gradient(x: int, y: int, width: int, height: int) -> tuple[int, int, int]:
    """Return the background ``(r, g, b)`` for pixel ``(x, y)``.

    Each channel sums two linear ramps and wraps to 8 bits.
    """

    sx = _ramp_divisor(width)
    sy = _ramp_divisor(height)
    rising_x = x / sx
    falling_x = (width - x - 1) / sx
    rising_y = y / sy
    falling_y = (height - y - 1) / sy
    r = int(rising_x + rising_y) % 256
    g = int(falling_x + falling_y) % 256
    b = int(rising_x + falling_y) % 256
    return r, g, b


def gradient_grid(rows: np.ndarray, cols: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorized :func:`gradient` over a grid of row and column indices.

    ``rows`` and ``cols`` are 1-D index arrays; the result channels have shape
    ``(len(rows), len(cols))``.
    """

    sx = _ramp_divisor(width)
    sy = _ramp_divisor(height)
    cols = np.asarray(cols, dtype=np.float64)[np.newaxis, :]
    rows = np.asarray(rows, dtype=np.float64)[:, np.newaxis]
    rising_x = cols / sx
    falling_x = (width - cols - 1) / sx
    rising_y = rows / sy
    falling_y = (height - rows - 1) / sy

    def wrap(channel: np.ndarray) -> np.ndarray:
        return (np.trunc(channel).astype(np.int64) % 256).astype(np.uint8)

    return wrap(rising_x + rising_y), wrap(falling_x + falling_y), wrap(rising_x + falling_y)
