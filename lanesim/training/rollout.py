# Generation rollout
# Runs one population against traffic until the frame limit or total wreck

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..env.road import Road
from ..env.vehicle import Vehicle
from .evolution import START_Y, fitness


@dataclass
class GenerationResult:
    """Outcome of one simulated generation."""
    fitnesses: np.ndarray   # (population,)
    damaged: np.ndarray     # (population,) bool
    frames: int
    best_index: int

    @property
    def best_fitness(self) -> float:
        return float(self.fitnesses[self.best_index])


def step_frame(
    population: Sequence[Vehicle],
    traffic: Sequence[Vehicle],
    road: Road,
) -> None:
    """Advance every vehicle by one frame.

    Traffic moves first and only sees the road borders, so the
    population's damage checks read this frame's traffic polygons.
    """
    for car in traffic:
        car.update(road.borders, [])
    for car in population:
        car.update(road.borders, traffic)


def simulate_generation(
    population: Sequence[Vehicle],
    traffic: Sequence[Vehicle],
    road: Road,
    max_frames: int,
    start_y: float = START_Y,
) -> GenerationResult:
    """Run frames until ``max_frames`` or until every vehicle is damaged.

    Args:
        population: AI vehicles being evaluated
        traffic: Scripted obstacles
        road: Road geometry
        max_frames: Frame limit
        start_y: Starting y used for fitness

    Returns:
        Per-vehicle fitness and damage
    """
    frames = 0
    for _ in range(max_frames):
        step_frame(population, traffic, road)
        frames += 1
        if all(car.damaged for car in population):
            break

    scores: List[float] = [fitness(car, start_y) for car in population]
    fitnesses = np.asarray(scores, dtype=np.float64)
    return GenerationResult(
        fitnesses=fitnesses,
        damaged=np.asarray([car.damaged for car in population], dtype=bool),
        frames=frames,
        best_index=int(np.argmax(fitnesses)) if len(scores) else 0,
    )
