# Pytest configuration and fixtures

import pytest
import numpy as np
import torch
from pathlib import Path
import tempfile
import yaml

from lanesim.core.types import Point, Pose, VehicleParams, VehicleState
from lanesim.env.road import Road


@pytest.fixture
def seed():
    """Fixed seed for reproducibility."""
    return 42


@pytest.fixture
def generator(seed):
    """Seeded random source for networks and mutation."""
    return torch.Generator().manual_seed(seed)


@pytest.fixture
def params():
    """Default vehicle dynamics (acceleration 0.2, friction 0.05)."""
    return VehicleParams()


@pytest.fixture
def state():
    """Stationary vehicle at the origin pointing up."""
    return VehicleState(pose=Pose(x=0.0, y=0.0, heading=0.0))


@pytest.fixture
def road():
    return Road(x=100.0, width=180.0, lane_count=3)


def square(x: float, y: float, side: float = 1.0):
    """Axis-aligned square with its lower-left corner at (x, y)."""
    return (
        Point(x, y),
        Point(x + side, y),
        Point(x + side, y + side),
        Point(x, y + side),
    )


@pytest.fixture
def make_square():
    return square


@pytest.fixture
def config():
    """Small, fast training configuration."""
    return {
        "experiment": {
            "name": "test",
            "seed": 42,
        },
        "road": {
            "x": 100.0,
            "width": 180.0,
            "lane_count": 3,
        },
        "vehicle": {
            "width": 30.0,
            "height": 50.0,
            "acceleration": 0.2,
            "max_speed": 3.0,
            "friction": 0.05,
        },
        "traffic": {
            "max_speed": 2.0,
            "spawns": [
                {"lane": 1, "y": -100.0},
                {"lane": 0, "y": -300.0},
                {"lane": 2, "y": -300.0},
            ],
        },
        "sensor": {
            "ray_count": 5,
            "ray_length": 150.0,
            "ray_spread": float(np.pi / 2),
        },
        "network": {
            "hidden_layers": [6],
        },
        "training": {
            "generations": 2,
            "population_size": 8,
            "mutation_amount": 0.1,
            "max_frames": 60,
        },
        "checkpoint": {
            "keep_last": 2,
        },
        "logging": {
            "level": "WARNING",
        },
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(config, temp_dir):
    """Create temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path
