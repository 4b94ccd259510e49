# Mathematical utilities
# FORBIDDEN: torch, logging, any I/O

from typing import NamedTuple, Optional

from .types import Point


class Intersection(NamedTuple):
    """Crossing point of two segments.

    ``offset`` is the fraction along the first segment (0 at its start).
    """
    x: float
    y: float
    offset: float


def lerp(a, b, t):
    """Linear blend ``a * (1 - t) + b * t``.

    Works element-wise on arrays and tensors. ``t = 0`` returns ``a`` and
    ``t = 1`` returns ``b`` exactly.

    Args:
        a: Start value
        b: End value
        t: Blend amount

    Returns:
        Blended value
    """
    return a * (1 - t) + b * t


def sign(value: float) -> int:
    """Return 1 for positive, -1 for negative and 0 for zero."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def get_intersection(a: Point, b: Point, c: Point, d: Point) -> Optional[Intersection]:
    """Intersect segment AB with segment CD.

    Parallel or degenerate segments (zero denominator) never intersect.

    Args:
        a, b: Endpoints of the first segment
        c, d: Endpoints of the second segment

    Returns:
        Intersection with offset along AB, or None
    """
    den = (b.x - a.x) * (d.y - c.y) - (b.y - a.y) * (d.x - c.x)
    if den == 0:
        return None

    t = ((a.y - c.y) * (d.x - c.x) - (a.x - c.x) * (d.y - c.y)) / den
    u = ((a.y - c.y) * (b.x - a.x) - (a.x - c.x) * (b.y - a.y)) / den

    if 0 <= t <= 1 and 0 <= u <= 1:
        return Intersection(
            x=lerp(a.x, b.x, t),
            y=lerp(a.y, b.y, t),
            offset=t,
        )
    return None
