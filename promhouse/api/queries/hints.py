"""
Sampling hint resolution.

When plotting graphs, Prometheus or Grafana may ask for fewer than all
datapoints by hinting with a step and a range. Honouring the hint means
bucketing timestamps so the store groups rows per interval.
"""

from typing import Optional

from ...models import ReadHints
from .constants import MIN_STEP_HINT_MS, TIME_COLUMN


def resolve_interval(hints: Optional[ReadHints], ignore_hints: bool = False) -> Optional[int]:
    """
    Bucket width in whole seconds, or None to keep raw timestamps.

    Args:
        hints: Read hints of the query, if any
        ignore_hints: Adapter-wide switch disabling bucketing

    Returns:
        Interval in seconds (at least 1), or None
    """
    if hints is None or ignore_hints or hints.step_ms <= MIN_STEP_HINT_MS:
        return None

    interval = hints.step_ms
    if 0 < hints.range_ms < hints.step_ms:
        interval = hints.range_ms

    # The hints seem optimistic, return more datapoints than asked for
    interval //= 2

    # DateTime column works in seconds
    interval //= 1000

    return max(interval, 1)


def time_expression(hints: Optional[ReadHints], ignore_hints: bool = False) -> str:
    """SQL expression used as the grouping timestamp."""
    interval = resolve_interval(hints, ignore_hints)
    if interval is None:
        return TIME_COLUMN
    return f"toStartOfInterval({TIME_COLUMN}, INTERVAL {interval} second)"
