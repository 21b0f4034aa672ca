"""Small numeric helpers shared by the pipeline."""

import math
from collections.abc import Iterable

Point = tuple[float, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Python's round() uses banker's rounding; font metrics are rounded the
    way typographic tools do it, so 2.5 -> 3 and -2.5 -> -2.

    Args:
        value: Value to round

    Returns:
        Rounded integer
    """
    return math.floor(value + 0.5)


def reflect_point(point: Point, center: Point) -> Point:
    """Reflect a point through a center point.

    Args:
        point: Point to reflect
        center: Center of reflection

    Returns:
        Reflected point
    """
    return (2 * center[0] - point[0], 2 * center[1] - point[1])


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean, or None for an empty iterable."""
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)
