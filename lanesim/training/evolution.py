# Evolution operators: spawn, score, select
# Mutation is the only adaptation mechanism

from typing import List, Optional, Sequence

import torch

from ..core.types import ControlType, VehicleParams
from ..env.road import Road
from ..env.vehicle import Vehicle, make_vehicle
from ..models.network import NeuralNetwork

START_LANE = 1
START_Y = 100.0


def spawn_population(
    size: int,
    road: Road,
    generator: torch.Generator,
    parent: Optional[NeuralNetwork] = None,
    amount: float = 0.1,
    params: Optional[VehicleParams] = None,
    sensor_config: Optional[dict] = None,
    hidden_layers: Sequence[int] = (6,),
) -> List[Vehicle]:
    """Create AI vehicles for the next generation.

    Without a parent every vehicle gets a fresh random brain. With a
    parent, vehicle 0 keeps an exact copy (elitism) and every other
    vehicle gets a copy mutated by ``amount``.

    Args:
        size: Population size
        road: Road the population starts on
        generator: Random source for brains and mutation
        parent: Best network of the previous generation
        amount: Mutation amount in [0, 1]
        params: Vehicle dynamics
        sensor_config: RaySensor keyword arguments
        hidden_layers: Hidden layer widths for fresh brains

    Returns:
        List of AI vehicles
    """
    if size <= 0:
        raise ValueError(f"Population size must be positive, got {size}")

    x = road.lane_center(START_LANE)
    population = []
    for i in range(size):
        brain = None
        if parent is not None:
            brain = parent.clone()
            if i > 0:
                brain.mutate(amount, generator=generator)

        population.append(make_vehicle(
            x,
            START_Y,
            control_type=ControlType.AI,
            params=params,
            sensor_config=sensor_config,
            hidden_layers=hidden_layers,
            generator=generator,
            brain=brain,
        ))
    return population


def fitness(vehicle: Vehicle, start_y: float = START_Y) -> float:
    """Distance travelled up the road (negative y is forward)."""
    return start_y - vehicle.pose.y


def select_best(vehicles: Sequence[Vehicle], start_y: float = START_Y) -> Vehicle:
    """Vehicle that got furthest; ties go to the earliest one."""
    if not vehicles:
        raise ValueError("Cannot select from an empty population")
    return max(vehicles, key=lambda v: fitness(v, start_y))
