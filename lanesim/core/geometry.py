# Collision geometry
# FORBIDDEN: torch, logging, any I/O

from typing import Iterator, Sequence, Tuple

import numpy as np

from .math_utils import get_intersection
from .types import Point, Polygon, Pose


def build_polygon(pose: Pose, width: float, height: float) -> Polygon:
    """Build the oriented quad covering a vehicle.

    Corners sit at half the bounding-box diagonal from the pose, at
    angles heading -/+ alpha (front) and pi + heading -/+ alpha (back).
    The returned order is the boundary traversal order.

    Args:
        pose: Vehicle centre and heading
        width: Vehicle width
        height: Vehicle length along the heading axis

    Returns:
        Four corner points
    """
    radius = float(np.hypot(width, height)) / 2
    alpha = float(np.arctan2(width, height))

    angles = (
        pose.heading - alpha,
        pose.heading + alpha,
        np.pi + pose.heading - alpha,
        np.pi + pose.heading + alpha,
    )
    return tuple(
        Point(
            x=pose.x - float(np.sin(theta)) * radius,
            y=pose.y - float(np.cos(theta)) * radius,
        )
        for theta in angles
    )


def _edges(points: Sequence[Point]) -> Iterator[Tuple[Point, Point]]:
    # A two-point sequence is a plain segment, not a closed shape
    if len(points) == 2:
        yield points[0], points[1]
        return
    for i in range(len(points)):
        yield points[i], points[(i + 1) % len(points)]


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """True if segment p1-p2 crosses segment p3-p4."""
    return get_intersection(p1, p2, p3, p4) is not None


def polys_intersect(poly_a: Sequence[Point], poly_b: Sequence[Point]) -> bool:
    """True iff any edge of ``poly_a`` crosses any edge of ``poly_b``.

    Containment without edge contact is not reported.
    """
    for a1, a2 in _edges(poly_a):
        for b1, b2 in _edges(poly_b):
            if segments_intersect(a1, a2, b1, b2):
                return True
    return False


def assess_damage(
    polygon: Sequence[Point],
    border_segments: Sequence[Sequence[Point]],
    traffic_polygons: Sequence[Sequence[Point]],
) -> bool:
    """Check a vehicle polygon against road borders, then traffic.

    Args:
        polygon: Own vehicle polygon
        border_segments: Road border segments
        traffic_polygons: Polygons of other vehicles

    Returns:
        True on the first contact found
    """
    for border in border_segments:
        if polys_intersect(polygon, border):
            return True
    for other in traffic_polygons:
        if polys_intersect(polygon, other):
            return True
    return False
