# Ray-casting distance sensor
# FORBIDDEN: torch, models.*, training.*

from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..core.math_utils import get_intersection, lerp
from ..core.types import Point, Pose


class SensorReading(NamedTuple):
    """Closest hit along a ray. ``offset`` is 0 at the origin, 1 at full range."""
    x: float
    y: float
    offset: float


class RaySensor:
    """Fan of rays cast from the vehicle centre.

    Rays are spread symmetrically around the heading, leftmost first.
    """

    def __init__(
        self,
        ray_count: int = 5,
        ray_length: float = 150.0,
        ray_spread: float = np.pi / 2,
    ):
        if ray_count <= 0:
            raise ValueError(f"ray_count must be positive, got {ray_count}")
        if ray_length <= 0:
            raise ValueError(f"ray_length must be positive, got {ray_length}")

        self.ray_count = int(ray_count)
        self.ray_length = float(ray_length)
        self.ray_spread = float(ray_spread)

        self.rays: List[Tuple[Point, Point]] = []
        self.readings: List[Optional[SensorReading]] = [None] * self.ray_count

    def ray_angles(self, heading: float) -> List[float]:
        angles = []
        for i in range(self.ray_count):
            t = 0.5 if self.ray_count == 1 else i / (self.ray_count - 1)
            angles.append(lerp(self.ray_spread / 2, -self.ray_spread / 2, t) + heading)
        return angles

    def cast_rays(self, pose: Pose) -> List[Tuple[Point, Point]]:
        start = Point(pose.x, pose.y)
        self.rays = [
            (
                start,
                Point(
                    x=pose.x - float(np.sin(angle)) * self.ray_length,
                    y=pose.y - float(np.cos(angle)) * self.ray_length,
                ),
            )
            for angle in self.ray_angles(pose.heading)
        ]
        return self.rays

    def update(
        self,
        pose: Pose,
        border_segments: Sequence[Sequence[Point]],
        traffic_polygons: Sequence[Sequence[Point]],
    ) -> List[Optional[SensorReading]]:
        """Recast every ray and store the nearest hit per ray.

        Args:
            pose: Vehicle pose
            border_segments: Road border segments
            traffic_polygons: Polygons of other vehicles

        Returns:
            One reading (or None) per ray
        """
        self.cast_rays(pose)
        self.readings = [
            self._get_reading(ray, border_segments, traffic_polygons)
            for ray in self.rays
        ]
        return self.readings

    @staticmethod
    def _get_reading(
        ray: Tuple[Point, Point],
        border_segments: Sequence[Sequence[Point]],
        traffic_polygons: Sequence[Sequence[Point]],
    ) -> Optional[SensorReading]:
        touches = []

        for border in border_segments:
            hit = get_intersection(ray[0], ray[1], border[0], border[1])
            if hit is not None:
                touches.append(hit)

        for poly in traffic_polygons:
            for j in range(len(poly)):
                hit = get_intersection(ray[0], ray[1], poly[j], poly[(j + 1) % len(poly)])
                if hit is not None:
                    touches.append(hit)

        if not touches:
            return None

        nearest = min(touches, key=lambda touch: touch.offset)
        return SensorReading(x=nearest.x, y=nearest.y, offset=nearest.offset)
