# Straight multi-lane road

from typing import List, Tuple

from ..core.types import Point

# Stands in for an endless road in both directions
ROAD_EXTENT = 1_000_000.0


class Road:
    """Vertical road centred on ``x``, split into equal lanes."""

    def __init__(self, x: float, width: float, lane_count: int = 3):
        if width <= 0:
            raise ValueError(f"Road width must be positive, got {width}")
        if lane_count <= 0:
            raise ValueError(f"lane_count must be positive, got {lane_count}")

        self.x = float(x)
        self.width = float(width)
        self.lane_count = int(lane_count)

        self.left = self.x - self.width / 2
        self.right = self.x + self.width / 2
        self.top = -ROAD_EXTENT
        self.bottom = ROAD_EXTENT

        top_left = Point(self.left, self.top)
        top_right = Point(self.right, self.top)
        bottom_left = Point(self.left, self.bottom)
        bottom_right = Point(self.right, self.bottom)

        self.borders: List[Tuple[Point, Point]] = [
            (top_left, bottom_left),
            (top_right, bottom_right),
        ]

    @property
    def lane_width(self) -> float:
        return self.width / self.lane_count

    def lane_center(self, lane_index: int) -> float:
        """X coordinate of a lane centre; out-of-range indices clamp to the edge lanes."""
        index = max(0, min(int(lane_index), self.lane_count - 1))
        return self.left + self.lane_width / 2 + index * self.lane_width

    @classmethod
    def from_config(cls, config: dict) -> "Road":
        road_config = config.get("road", {})
        return cls(
            x=road_config.get("x", 100.0),
            width=road_config.get("width", 180.0),
            lane_count=road_config.get("lane_count", 3),
        )
