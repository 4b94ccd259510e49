# Metrics computation

import numpy as np
from typing import Dict, List, Sequence


def compute_generation_metrics(
    fitnesses: Sequence[float],
    damaged: Sequence[bool],
    frames: int,
) -> Dict[str, float]:
    """Compute summary metrics for one generation.

    Args:
        fitnesses: Distance travelled per vehicle
        damaged: Damaged flag per vehicle
        frames: Frames simulated

    Returns:
        Dict of computed metrics
    """
    metrics = {"frames": float(frames)}

    if len(fitnesses):
        metrics["best_fitness"] = float(np.max(fitnesses))
        metrics["mean_fitness"] = float(np.mean(fitnesses))
        metrics["std_fitness"] = float(np.std(fitnesses))
        metrics["min_fitness"] = float(np.min(fitnesses))

    if len(damaged):
        metrics["damaged_fraction"] = float(np.mean(np.asarray(damaged, dtype=np.float64)))

    return metrics


def check_population_health(
    metrics: Dict[str, float],
    best_history: Sequence[float] = (),
    stagnation_window: int = 5,
) -> List[str]:
    """Check for signs of a stuck or collapsing population.

    Args:
        metrics: Current generation metrics
        best_history: Best fitness of previous generations, oldest first
        stagnation_window: Generations without improvement before warning

    Returns:
        List of warnings (empty if healthy)
    """
    warnings = []

    damaged_fraction = metrics.get("damaged_fraction", 0.0)
    if damaged_fraction >= 1.0:
        warnings.append("ALL DAMAGED: every vehicle crashed before the frame limit")

    best = metrics.get("best_fitness", 0.0)
    if best <= 0.0:
        warnings.append(f"NO PROGRESS: best fitness {best:.2f}")

    std = metrics.get("std_fitness")
    if std is not None and std == 0.0 and metrics.get("frames", 0.0) > 0:
        warnings.append("NO DIVERSITY: all vehicles scored the same fitness")

    recent = list(best_history)[-stagnation_window:]
    if len(recent) == stagnation_window and best <= max(recent):
        warnings.append(f"STAGNATION: no improvement over {stagnation_window} generations")

    return warnings
