"""Adaptive sampling of explicit curves ``y = f(x)`` into polyline segments."""

from __future__ import annotations

import logging
import math
from typing import Callable, List, NamedTuple, Optional, Tuple

from graphtotex import config
from graphtotex.viewport import Viewport

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    x: float
    y: float


Segment = List[Point]
CurveFunction = Callable[[float], Optional[float]]


def clamp_samples(samples: float, lo: int, hi: int) -> int:
    """Round a sample-density hint half up and clamp it to ``[lo, hi]``."""

    return max(lo, min(hi, int(math.floor(samples + 0.5))))


def clamp_domain_to_viewport(x_min: float, x_max: float,
                             viewport: Viewport) -> Optional[Tuple[float, float]]:
    """Intersect ``[x_min, x_max]`` with the viewport's x range.

    Returns ``None`` when the intersection is empty.
    """

    lo = max(x_min, viewport.x_min)
    hi = min(x_max, viewport.x_max)
    if hi <= lo:
        return None
    return lo, hi


def sample_expression(evaluator: CurveFunction, x_min: float, x_max: float,
                      samples: float, viewport: Viewport,
                      max_abs_y: float = config.CURVE_MAX_ABS_Y) -> List[Segment]:
    """Sample ``evaluator`` on a uniform grid and split it into drawable runs.

    ``samples + 1`` points (samples clamped to ``[32, 5000]``) are taken
    from ``x_min`` to ``x_max`` inclusive.  A run ends at an undefined
    value (``None``, non-finite or beyond ``max_abs_y``) and at a jump
    larger than ``8`` viewport heights, which is how poles such as
    ``1/(x-1)`` are kept from being bridged by a vertical line.  Runs
    shorter than two points are dropped.
    """

    count = clamp_samples(samples, config.MIN_CURVE_SAMPLES, config.MAX_CURVE_SAMPLES)
    y_span = max(config.MIN_Y_SPAN, viewport.y_max - viewport.y_min)
    jump_threshold = y_span * config.JUMP_FACTOR

    segments: List[Segment] = []
    current: Segment = []
    prev_y: Optional[float] = None

    for i in range(count + 1):
        x = x_min + (i / count) * (x_max - x_min)
        y = evaluator(x)

        if y is None or not math.isfinite(y) or abs(y) > max_abs_y:
            if len(current) > 1:
                segments.append(current)
            current = []
            prev_y = None
            continue

        if prev_y is not None and abs(y - prev_y) > jump_threshold:
            if len(current) > 1:
                segments.append(current)
            current = []

        current.append(Point(x, y))
        prev_y = y

    if len(current) > 1:
        segments.append(current)

    logger.debug("sampled %d points into %d segment(s)", count + 1, len(segments))
    return segments


__all__ = [
    "Point",
    "Segment",
    "clamp_samples",
    "clamp_domain_to_viewport",
    "sample_expression",
]
