# Checkpoint save/load utilities

import torch
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.network import NeuralNetwork

logger = logging.getLogger(__name__)


def save_checkpoint(
    path: Path,
    network: NeuralNetwork,
    generation: int,
    fitness: Optional[float] = None,
    config: Optional[Dict[str, Any]] = None,
) -> None:
    """Save a network with its topology.

    Args:
        path: Checkpoint file path
        network: Network to persist
        generation: Generation the network comes from
        fitness: Optional fitness reached by the network
        config: Optional training configuration
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    checkpoint = {
        "generation": generation,
        "layer_sizes": network.layer_sizes,
        "state_dict": network.state_dict(),
    }
    if fitness is not None:
        checkpoint["fitness"] = float(fitness)
    if config is not None:
        checkpoint["config"] = config

    # Write to a temporary file first, then rename (atomic)
    temp_path = path.with_suffix(".tmp")
    torch.save(checkpoint, temp_path)
    temp_path.replace(path)

    logger.info(f"Saved checkpoint to {path} at generation {generation}")


def load_checkpoint(path: Path) -> Dict[str, Any]:
    """Load a checkpoint dict.

    Args:
        path: Checkpoint file path

    Returns:
        Checkpoint dict
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Checkpoint not found: {path}")

    checkpoint = torch.load(path, map_location="cpu", weights_only=True)

    logger.info(f"Loaded checkpoint from {path} at generation {checkpoint.get('generation', 'unknown')}")

    return checkpoint


def load_network(path: Path) -> NeuralNetwork:
    """Load a checkpoint and rebuild its network."""
    checkpoint = load_checkpoint(path)
    return NeuralNetwork.from_state(checkpoint["layer_sizes"], checkpoint["state_dict"])


def _get_generation(p: Path) -> int:
    try:
        return int(p.stem.split("_")[1])
    except (IndexError, ValueError):
        return 0


def get_latest_checkpoint(checkpoint_dir: Path) -> Optional[Path]:
    """Find the highest-generation checkpoint in a directory."""
    checkpoint_dir = Path(checkpoint_dir)

    if not checkpoint_dir.exists():
        return None

    checkpoints = sorted(checkpoint_dir.glob("gen_*.pt"), key=_get_generation, reverse=True)
    return checkpoints[0] if checkpoints else None


def cleanup_old_checkpoints(checkpoint_dir: Path, keep_last: int = 5) -> None:
    """Remove old generation checkpoints, keeping only recent ones."""
    checkpoint_dir = Path(checkpoint_dir)

    if not checkpoint_dir.exists():
        return

    checkpoints = sorted(checkpoint_dir.glob("gen_*.pt"), key=_get_generation, reverse=True)

    for ckpt in checkpoints[keep_last:]:
        ckpt.unlink()
        logger.debug(f"Deleted old checkpoint: {ckpt}")


class CheckpointManager:
    """Keep the last few generation checkpoints plus the best network so far."""

    def __init__(
        self,
        checkpoint_dir: Path,
        keep_last: int = 5,
        save_best: bool = True,
    ):
        self.checkpoint_dir = Path(checkpoint_dir)
        self.checkpoint_dir.mkdir(parents=True, exist_ok=True)
        self.keep_last = keep_last
        self.save_best = save_best
        self.best_fitness = float("-inf")

    @property
    def best_path(self) -> Path:
        return self.checkpoint_dir / "best.pt"

    def save(
        self,
        network: NeuralNetwork,
        generation: int,
        fitness: float,
        config: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Save a generation checkpoint and update best.pt if improved.

        Args:
            network: Best network of the generation
            generation: Generation index
            fitness: Its fitness
            config: Optional configuration

        Returns:
            True if a new best checkpoint was written
        """
        save_checkpoint(
            path=self.checkpoint_dir / f"gen_{generation}.pt",
            network=network,
            generation=generation,
            fitness=fitness,
            config=config,
        )

        improved = False
        if self.save_best and fitness > self.best_fitness:
            self.best_fitness = fitness
            save_checkpoint(
                path=self.best_path,
                network=network,
                generation=generation,
                fitness=fitness,
                config=config,
            )
            logger.info(f"New best network at generation {generation} with fitness {fitness:.2f}")
            improved = True

        cleanup_old_checkpoints(self.checkpoint_dir, self.keep_last)
        return improved

    def load_latest(self) -> Optional[Dict[str, Any]]:
        latest = get_latest_checkpoint(self.checkpoint_dir)
        if latest is None:
            return None
        return load_checkpoint(latest)

    def load_best(self) -> Optional[Dict[str, Any]]:
        if not self.best_path.exists():
            return None
        return load_checkpoint(self.best_path)
