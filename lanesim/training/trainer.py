# Main trainer class

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import torch

from ..analysis.checkpointing import CheckpointManager, load_network
from ..analysis.logger import MetricsLogger
from ..analysis.metrics import check_population_health, compute_generation_metrics
from ..env.road import Road
from ..env.scenario import make_traffic, vehicle_params_from_config
from ..env.vehicle import default_layer_sizes
from ..models.network import NeuralNetwork
from .evolution import spawn_population
from .rollout import GenerationResult, simulate_generation


logger = logging.getLogger(__name__)


class EvolutionTrainer:
    """Generational training loop.

    Each generation clones the best network so far, mutates the
    copies, races them against scripted traffic and keeps the winner.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        checkpoint_dir: Optional[Path] = None,
        metrics_logger: Optional[MetricsLogger] = None,
    ):
        """Initialize trainer.

        Args:
            config: Configuration dictionary
            checkpoint_dir: Where to write checkpoints (none written if None)
            metrics_logger: Optional per-generation metrics sink
        """
        self.config = config

        seed = config.get("experiment", {}).get("seed", 42)
        self.generator = torch.Generator().manual_seed(seed)

        self.road = Road.from_config(config)
        self.params = vehicle_params_from_config(config)
        self.sensor_config = dict(config.get("sensor", {}))
        self.hidden_layers = list(config.get("network", {}).get("hidden_layers", [6]))

        training_config = config.get("training", {})
        self.population_size = training_config.get("population_size", 100)
        self.mutation_amount = training_config.get("mutation_amount", 0.1)
        self.max_frames = training_config.get("max_frames", 2000)

        self.checkpoints = None
        if checkpoint_dir is not None:
            keep_last = config.get("checkpoint", {}).get("keep_last", 5)
            self.checkpoints = CheckpointManager(checkpoint_dir, keep_last=keep_last)
        self.metrics_logger = metrics_logger

        self.generation = 0
        self.best_brain: Optional[NeuralNetwork] = None
        self.best_fitness = float("-inf")
        self.best_history: List[float] = []

        ray_count = self.sensor_config.get("ray_count", 5)
        logger.info(f"Network topology: {default_layer_sizes(ray_count, self.hidden_layers)}")
        logger.info(f"Population: {self.population_size}, mutation amount: {self.mutation_amount}")

    def load_brain(self, path: Path) -> None:
        """Resume from a saved network."""
        self.best_brain = load_network(path)
        logger.info(f"Resumed from {path} with topology {self.best_brain.layer_sizes}")

    def run_generation(self) -> GenerationResult:
        """Spawn, simulate and select one generation."""
        population = spawn_population(
            size=self.population_size,
            road=self.road,
            generator=self.generator,
            parent=self.best_brain,
            amount=self.mutation_amount,
            params=self.params,
            sensor_config=self.sensor_config,
            hidden_layers=self.hidden_layers,
        )
        traffic = make_traffic(self.config, self.road)

        result = simulate_generation(population, traffic, self.road, self.max_frames)

        winner = population[result.best_index]
        # The elite keeps the lineage even when every mutant does worse
        if self.best_brain is None or result.best_fitness >= self.best_fitness:
            self.best_brain = winner.brain.clone()
            self.best_fitness = result.best_fitness

        return result

    def train(self, generations: Optional[int] = None) -> Dict[str, float]:
        """Run training loop.

        Args:
            generations: Generations to run (overrides config)

        Returns:
            Metrics of the last generation
        """
        if generations is None:
            generations = self.config.get("training", {}).get("generations", 20)

        logger.info(f"Starting evolution for {generations} generations")
        start_time = time.time()
        metrics: Dict[str, float] = {}

        for _ in range(generations):
            result = self.run_generation()

            metrics = compute_generation_metrics(result.fitnesses, result.damaged, result.frames)
            metrics["overall_best_fitness"] = self.best_fitness

            for warning in check_population_health(metrics, self.best_history):
                logger.warning(f"Generation {self.generation}: {warning}")
            self.best_history.append(metrics["best_fitness"])

            logger.info(
                f"Generation {self.generation}: best={metrics['best_fitness']:.1f} "
                f"mean={metrics['mean_fitness']:.1f} "
                f"damaged={metrics['damaged_fraction']:.0%} frames={result.frames}"
            )

            if self.metrics_logger is not None:
                self.metrics_logger.log(self.generation, metrics)

            if self.checkpoints is not None:
                self.checkpoints.save(
                    network=self.best_brain,
                    generation=self.generation,
                    fitness=self.best_fitness,
                    config=self.config,
                )

            self.generation += 1

        elapsed = time.time() - start_time
        logger.info(f"Evolution finished in {elapsed:.1f}s, best fitness {self.best_fitness:.1f}")
        return metrics
