# Tests for the ray sensor and input mapping

import numpy as np
import pytest

from lanesim.core.types import Point, Pose
from lanesim.telemetry.normalization import readings_to_inputs
from lanesim.telemetry.sensor import RaySensor, SensorReading


def horizontal_wall(y: float):
    return (Point(-1000.0, y), Point(1000.0, y))


class TestRaySensor:

    def test_ray_angles_spread(self):
        """Rays fan from +spread/2 (left) to -spread/2 (right)."""
        sensor = RaySensor(ray_count=5, ray_spread=np.pi / 2)
        angles = sensor.ray_angles(0.0)

        expected = [np.pi / 4, np.pi / 8, 0.0, -np.pi / 8, -np.pi / 4]
        assert angles == pytest.approx(expected)

    def test_ray_angles_follow_heading(self):
        sensor = RaySensor(ray_count=3, ray_spread=1.0)
        assert sensor.ray_angles(0.5) == pytest.approx([1.0, 0.5, 0.0])

    def test_single_ray_points_ahead(self):
        sensor = RaySensor(ray_count=1)
        assert sensor.ray_angles(0.2) == pytest.approx([0.2])

    def test_ray_endpoints(self):
        sensor = RaySensor(ray_count=1, ray_length=100.0)
        rays = sensor.cast_rays(Pose(10.0, 20.0, 0.0))

        start, end = rays[0]
        assert start == Point(10.0, 20.0)
        assert end.x == pytest.approx(10.0)
        assert end.y == pytest.approx(-80.0)

    def test_nothing_in_range(self):
        sensor = RaySensor(ray_count=5)
        readings = sensor.update(Pose(0.0, 0.0), [horizontal_wall(-500.0)], [])
        assert readings == [None] * 5

    def test_wall_ahead_offset(self):
        sensor = RaySensor(ray_count=5, ray_length=150.0)
        readings = sensor.update(Pose(0.0, 0.0), [horizontal_wall(-75.0)], [])

        middle = readings[2]
        assert middle is not None
        assert middle.offset == pytest.approx(0.5)
        assert middle.y == pytest.approx(-75.0)

        # Angled rays hit the same wall further along their length
        assert readings[0].offset > middle.offset
        assert readings[0].offset == pytest.approx(readings[4].offset)

    def test_nearest_hit_wins(self):
        sensor = RaySensor(ray_count=1, ray_length=150.0)
        readings = sensor.update(
            Pose(0.0, 0.0),
            [horizontal_wall(-90.0), horizontal_wall(-30.0)],
            [],
        )
        assert readings[0].offset == pytest.approx(0.2)

    def test_traffic_polygon_detected(self, make_square):
        sensor = RaySensor(ray_count=1, ray_length=100.0)
        box = make_square(-5.0, -45.0, side=10.0)  # spans y -45..-35

        readings = sensor.update(Pose(0.0, 0.0), [], [box])
        assert readings[0].offset == pytest.approx(0.35)

    @pytest.mark.parametrize("kwargs", [{"ray_count": 0}, {"ray_length": 0.0}])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            RaySensor(**kwargs)


class TestReadingsToInputs:

    def test_closer_is_stronger(self):
        readings = [None, SensorReading(0.0, 0.0, 0.25), SensorReading(0.0, 0.0, 1.0)]
        inputs = readings_to_inputs(readings)

        assert inputs.dtype == np.float64
        assert inputs.tolist() == pytest.approx([0.0, 0.75, 0.0])

    def test_touching_obstacle_is_one(self):
        assert readings_to_inputs([SensorReading(0.0, 0.0, 0.0)]).tolist() == [1.0]

    def test_offset_out_of_range(self):
        with pytest.raises(ValueError):
            readings_to_inputs([SensorReading(0.0, 0.0, 1.5)])
