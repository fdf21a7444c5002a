"""Resolution of the rendered region of the complex plane."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_X_MIN = -2.4
DEFAULT_X_MAX = 1.4


@dataclass(frozen=True)
class Region:
    """Rectangle of the complex plane mapped onto the pixel grid."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def x_width(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_width(self) -> float:
        return self.y_max - self.y_min

    def is_valid(self) -> bool:
        bounds = (self.x_min, self.x_max, self.y_min, self.y_max)
        # spans can overflow to inf even when every bound is finite
        spans = (self.x_width, self.y_width)
        return (
            all(math.isfinite(v) for v in bounds + spans)
            and self.x_max > self.x_min
            and self.y_max > self.y_min
        )


def default_region(width: int, height: int) -> Region:
    """Default view: fixed horizontal bounds, vertical span from the aspect ratio."""

    y_width = (DEFAULT_X_MAX - DEFAULT_X_MIN) * height / width
    return Region(
        x_min=DEFAULT_X_MIN,
        x_max=DEFAULT_X_MAX,
        y_min=-y_width / 2.0,
        y_max=y_width / 2.0,
    )


def resolve_region(
    x_min: Optional[float],
    x_max: Optional[float],
    y_min: Optional[float],
    y_max: Optional[float],
    width: int,
    height: int,
) -> Region:
    """Complete a partially specified region.

    With both bounds of one axis and a single bound of the other, the missing
    bound is derived from the complete axis scaled by the image aspect ratio,
    anchored at the bound that was given. Four bounds are used as given.
    Anything else falls back to :func:`default_region` with a warning.
    """

    if x_min is not None and x_max is not None:
        y_width = (x_max - x_min) * height / width
        if y_min is not None and y_max is None:
            y_max = y_min + y_width
        elif y_max is not None and y_min is None:
            y_min = y_max - y_width
    elif y_min is not None and y_max is not None:
        x_width = (y_max - y_min) * width / height
        if x_min is not None and x_max is None:
            x_max = x_min + x_width
        elif x_max is not None and x_min is None:
            x_min = x_max - x_width

    bounds = (x_min, x_max, y_min, y_max)
    if any(v is None for v in bounds):
        specified = sum(v is not None for v in bounds)
        logger.warning(
            "Region is ambiguous with %d of 4 bounds specified, using the default region.",
            specified,
        )
        return default_region(width, height)

    region = Region(x_min=float(x_min), x_max=float(x_max), y_min=float(y_min), y_max=float(y_max))
    if not region.is_valid():
        logger.warning(
            "Region x=[%g, %g] y=[%g, %g] is empty or not finite, using the default region.",
            region.x_min, region.x_max, region.y_min, region.y_max,
        )
        return default_region(width, height)
    return region
