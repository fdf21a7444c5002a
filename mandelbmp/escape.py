"""Escape-time evaluation of the Mandelbrot recurrence."""

from __future__ import annotations

import numpy as np

MAX_ITERATIONS = 80
HORIZON = 4.0


def escape_count(cx: float, cy: float, max_iterations: int = MAX_ITERATIONS) -> int:
    """Return the number of iterations completed before ``cx + cy*i`` diverges.

    The first iterate is ``c`` itself. A point whose squared modulus never
    exceeds ``HORIZON`` within ``max_iterations`` steps returns
    ``max_iterations``.
    """

    real = cx
    imaginary = cy
    for i in range(max_iterations):
        real2 = real * real
        imaginary2 = imaginary * imaginary
        if real2 + imaginary2 > HORIZON:
            return i
        imaginary = real * imaginary * 2 + cy
        real = real2 - imaginary2 + cx
    return max_iterations


def escape_counts(cx: np.ndarray, cy: np.ndarray, max_iterations: int = MAX_ITERATIONS) -> np.ndarray:
    """Element-wise :func:`escape_count` over broadcastable coordinate arrays."""

    cx, cy = np.broadcast_arrays(np.asarray(cx, dtype=np.float64), np.asarray(cy, dtype=np.float64))
    real = cx.copy()
    imaginary = cy.copy()
    counts = np.full(cx.shape, max_iterations, dtype=np.int32)
    active = np.ones(cx.shape, dtype=bool)

    # escaped points keep iterating towards inf/nan but are never counted again
    with np.errstate(over="ignore", invalid="ignore"):
        for i in range(max_iterations):
            real2 = real * real
            imaginary2 = imaginary * imaginary
            escaped = active & (real2 + imaginary2 > HORIZON)
            counts[escaped] = i
            active &= ~escaped
            if not active.any():
                break
            imaginary = real * imaginary * 2 + cy
            real = real2 - imaginary2 + cx

    return counts
