"""Public API for Mandelbrot bitmap rendering."""

from .bitmap import (
    BitmapFormatError,
    BitmapHeader,
    build_header,
    encode_bitmap,
    pack_header,
    parse_header,
    row_padding,
    write_bitmap,
)
from .escape import MAX_ITERATIONS, escape_count, escape_counts
from .gradient import gradient, gradient_grid
from .region import Region, default_region, resolve_region
from .renderer import (
    MAX_DIMENSION,
    RenderError,
    RenderParameters,
    RenderResult,
    SamplingMetadata,
    WorkAssignment,
    composite,
    composite_grid,
    default_worker_count,
    partition_rows,
    pixel_to_complex,
    render_band,
    render_image,
)

__all__ = [
    "BitmapFormatError",
    "BitmapHeader",
    "MAX_DIMENSION",
    "MAX_ITERATIONS",
    "Region",
    "RenderError",
    "RenderParameters",
    "RenderResult",
    "SamplingMetadata",
    "WorkAssignment",
    "build_header",
    "composite",
    "composite_grid",
    "default_region",
    "default_worker_count",
    "encode_bitmap",
    "escape_count",
    "escape_counts",
    "gradient",
    "gradient_grid",
    "pack_header",
    "parse_header",
    "partition_rows",
    "pixel_to_complex",
    "render_band",
    "render_image",
    "resolve_region",
    "row_padding",
    "write_bitmap",
]
