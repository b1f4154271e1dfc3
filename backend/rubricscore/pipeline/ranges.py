"""Bounding and rescaling of score ranges.

The model's self-reported range is not trusted as-is: it may exceed the
criterion ceiling, be inverted, or be implausibly wide. Criterion ranges are
kept inside ``[0, floor(max_score)]`` and at most a quarter of the scale wide
(minimum width 2). The overall range is scaled to 0..100 and capped at 25
points. Over-wide ranges are recentered on their midpoint rather than
truncated.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from rubricscore.errors import EvaluationFailed

CRITERION_WIDTH_FRACTION = 0.25
CRITERION_MIN_WIDTH = 2
REPORT_SCALE = 100
REPORT_MAX_WIDTH = 25
REPORT_HALF_WIDTH = 12


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def criterion_width_limit(max_score: float) -> int:
    return max(CRITERION_MIN_WIDTH, round(max_score * CRITERION_WIDTH_FRACTION))


def clamp_criterion_range(low: float, high: float, max_score: float) -> tuple[int, int]:
    """Clamp a raw criterion range to ``[0, floor(max_score)]`` and the width limit."""

    max_allowed = max(0, math.floor(max_score))
    low = max(0, round(low))
    high = max(0, min(max_allowed, round(high)))
    if low > high:
        low = high

    width_limit = criterion_width_limit(max_score)
    if high - low > width_limit:
        center = round((low + high) / 2)
        low = max(0, center - round(width_limit / 2))
        high = max(0, min(max_allowed, low + width_limit))
        if low > high:
            low = high
    return low, high


def compute_overall_range(ranges: Iterable[tuple[int, int]], max_scores: Sequence[float]) -> tuple[int, int]:
    """Sum clamped criterion ranges and scale them to a 0..100 report band."""

    raw_low = 0
    raw_high = 0
    for low, high in ranges:
        raw_low += low
        raw_high += high

    total = sum(max_scores)
    if not math.isfinite(total) or total <= 0:
        raise EvaluationFailed(f"Rubric total {total!r} cannot be scored")

    scaled_low = _clamp(round(raw_low / total * REPORT_SCALE), 0, REPORT_SCALE)
    scaled_high = _clamp(round(raw_high / total * REPORT_SCALE), 0, REPORT_SCALE)
    if scaled_low > scaled_high:
        scaled_low, scaled_high = scaled_high, scaled_low

    if scaled_high - scaled_low > REPORT_MAX_WIDTH:
        center = round((scaled_low + scaled_high) / 2)
        scaled_low = max(0, center - REPORT_HALF_WIDTH)
        scaled_high = min(REPORT_SCALE, scaled_low + REPORT_MAX_WIDTH)
        if scaled_low > scaled_high:
            scaled_low = scaled_high
    return scaled_low, scaled_high
