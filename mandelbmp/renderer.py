"""Rendering primitives for Mandelbrot bitmaps."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

import numpy as np

from .bitmap import row_padding, row_stride
from .escape import MAX_ITERATIONS, escape_counts
from .gradient import gradient_grid
from .region import Region

logger = logging.getLogger(__name__)

MAX_DIMENSION = 20000
DEFAULT_THRESHOLD = 4
FACTOR_OFFSET = 5


def default_worker_count() -> int:
    """CPUs this process may run on, at least 1."""

    if hasattr(os, "sched_getaffinity"):
        return max(len(os.sched_getaffinity(0)), 1)
    return max(os.cpu_count() or 1, 1)


class RenderError(RuntimeError):
    """Raised when a worker fails; the render has no partial result."""


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    max_iterations: int = MAX_ITERATIONS
    threshold: int = DEFAULT_THRESHOLD
    workers: int = field(default_factory=default_worker_count)

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not 0 < value < MAX_DIMENSION:
                raise ValueError(f"{name} must be in (0, {MAX_DIMENSION}), got {value}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")

    @property
    def row_padding(self) -> int:
        return row_padding(self.width)

    @property
    def row_stride(self) -> int:
        return row_stride(self.width)


@dataclass(frozen=True)
class SamplingMetadata:
    """Metadata describing the sampling grid for a rendered image."""

    x_min: float
    y_min: float
    x_step: float
    y_step: float
    width: int
    height: int


@dataclass(frozen=True)
class WorkAssignment:
    """Contiguous band of rows rendered by one worker."""

    start_row: int
    row_count: int

    @property
    def stop_row(self) -> int:
        return self.start_row + self.row_count


@dataclass(frozen=True)
class RenderResult:
    """Container for a completed pixel buffer."""

    pixels: np.ndarray
    assignments: tuple[WorkAssignment, ...]
    metadata: SamplingMetadata


def partition_rows(height: int, workers: int) -> tuple[WorkAssignment, ...]:
    """Split ``[0, height)`` into contiguous bands, one per worker.

    ``workers`` is clamped to ``[1, height]``. Every band but the last holds
    ``height // workers`` rows; the last absorbs the remainder.
    """

    if height < 1:
        raise ValueError(f"height must be positive, got {height}")
    workers = max(1, min(workers, height))
    rows_per_worker = height // workers

    assignments = []
    start_row = 0
    for i in range(workers):
        row_count = rows_per_worker
        if i + 1 == workers:
            row_count = height - rows_per_worker * (workers - 1)
        assignments.append(WorkAssignment(start_row=start_row, row_count=row_count))
        start_row += row_count
    return tuple(assignments)


def _compute_metadata(params: RenderParameters, region: Region) -> SamplingMetadata:
    return SamplingMetadata(
        x_min=region.x_min,
        y_min=region.y_min,
        x_step=region.x_width / params.width,
        y_step=region.y_width / params.height,
        width=params.width,
        height=params.height,
    )


def pixel_to_complex(metadata: SamplingMetadata, row: int, col: int) -> tuple[float, float]:
    x = metadata.x_min + col * metadata.x_step
    y = metadata.y_min + row * metadata.y_step
    return x, y


def _brightness(counts: np.ndarray, max_iterations: int) -> np.ndarray:
    factor = (max_iterations - (counts.astype(np.float32) - FACTOR_OFFSET)) / np.float32(max_iterations)
    return np.clip(factor, 0.0, 1.0).astype(np.float32)


def composite_grid(
    counts: np.ndarray,
    rgb: tuple[np.ndarray, np.ndarray, np.ndarray],
    max_iterations: int = MAX_ITERATIONS,
    threshold: int = DEFAULT_THRESHOLD,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Darken the gradient where the escape count exceeds ``threshold``.

    The brightness factor is clamped to ``[0, 1]``.
    """

    inside = counts > threshold
    factor = _brightness(counts, max_iterations)
    channels = []
    for channel in rgb:
        scaled = np.trunc(factor * channel.astype(np.float32)).astype(np.uint8)
        channels.append(np.where(inside, scaled, channel).astype(np.uint8))
    return channels[0], channels[1], channels[2]


def composite(
    count: int,
    rgb: tuple[int, int, int],
    max_iterations: int = MAX_ITERATIONS,
    threshold: int = DEFAULT_THRESHOLD,
) -> tuple[int, int, int]:
    """Scalar form of :func:`composite_grid` for a single pixel."""

    counts = np.array([count], dtype=np.int32)
    channels = tuple(np.array([value], dtype=np.uint8) for value in rgb)
    r, g, b = composite_grid(counts, channels, max_iterations, threshold)
    return int(r[0]), int(g[0]), int(b[0])


def render_band(
    band: np.ndarray,
    assignment: WorkAssignment,
    params: RenderParameters,
    metadata: SamplingMetadata,
) -> None:
    """Fill ``band``, the buffer rows owned by ``assignment``, with BGR pixels."""

    rows = np.arange(assignment.start_row, assignment.stop_row)
    cols = np.arange(params.width)
    xs = metadata.x_min + cols * metadata.x_step
    ys = metadata.y_min + rows * metadata.y_step
    X, Y = np.meshgrid(xs, ys)

    counts = escape_counts(X, Y, params.max_iterations)
    rgb = gradient_grid(rows, cols, params.width, params.height)
    r, g, b = composite_grid(counts, rgb, params.max_iterations, params.threshold)

    # padding bytes after width*3 are left untouched
    band[:, : params.width * 3] = np.stack((b, g, r), axis=-1).reshape(assignment.row_count, params.width * 3)


def render_image(params: RenderParameters, region: Region) -> RenderResult:
    """Render ``region`` into a padded BGR buffer laid out in file row order.

    Each worker writes only its own row view of the shared buffer. The buffer
    is returned once every worker has finished.
    """

    metadata = _compute_metadata(params, region)
    pixels = np.zeros((params.height, params.row_stride), dtype=np.uint8)
    assignments = partition_rows(params.height, params.workers)
    logger.info(
        "Rendering %dx%d over x=[%g, %g] y=[%g, %g] with %d workers",
        params.width, params.height,
        region.x_min, region.x_max, region.y_min, region.y_max,
        len(assignments),
    )

    futures = {}
    with ThreadPoolExecutor(max_workers=len(assignments)) as executor:
        for assignment in assignments:
            try:
                future = executor.submit(
                    render_band,
                    pixels[assignment.start_row:assignment.stop_row],
                    assignment,
                    params,
                    metadata,
                )
            except RuntimeError as exc:
                # bands already submitted are still joined when the executor exits
                raise RenderError(
                    f"could not start worker for rows {assignment.start_row}..{assignment.stop_row - 1}: {exc}"
                ) from exc
            futures[future] = assignment
        wait(futures, return_when=ALL_COMPLETED)

    for future, assignment in futures.items():
        exc = future.exception()
        if exc is not None:
            raise RenderError(
                f"worker for rows {assignment.start_row}..{assignment.stop_row - 1} failed: {exc}"
            ) from exc

    return RenderResult(pixels=pixels, assignments=assignments, metadata=metadata)
