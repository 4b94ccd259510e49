# Scenario construction from configuration

from dataclasses import replace
from typing import Any, Dict, List

from ..core.types import ControlType, VehicleParams
from .road import Road
from .vehicle import Vehicle, make_vehicle

DEFAULT_TRAFFIC = [
    {"lane": 1, "y": -100.0},
    {"lane": 0, "y": -300.0},
    {"lane": 2, "y": -300.0},
]


def vehicle_params_from_config(config: Dict[str, Any]) -> VehicleParams:
    """Vehicle dynamics from the ``vehicle`` section; missing keys keep defaults."""
    vehicle_config = config.get("vehicle", {})
    fields = {
        key: float(vehicle_config[key])
        for key in ("width", "height", "acceleration", "max_speed", "friction", "steer_rate")
        if key in vehicle_config
    }
    return VehicleParams(**fields)


def make_traffic(config: Dict[str, Any], road: Road) -> List[Vehicle]:
    """Scripted DUMMY vehicles placed in lanes by the ``traffic`` section.

    Traffic shares the vehicle geometry but uses its own top speed.
    """
    traffic_config = config.get("traffic", {})
    params = vehicle_params_from_config(config)
    params = replace(params, max_speed=float(traffic_config.get("max_speed", 2.0)))

    spawns = traffic_config.get("spawns", DEFAULT_TRAFFIC)
    return [
        make_vehicle(
            road.lane_center(spawn.get("lane", 1)),
            float(spawn.get("y", 0.0)),
            control_type=ControlType.DUMMY,
            params=params,
        )
        for spawn in spawns
    ]
