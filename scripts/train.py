#!/usr/bin/env python3
"""Evolve lane-driving networks.

Usage:
    python scripts/train.py --config configs/base.yaml
    python scripts/train.py --generations 50 --override training.population_size=200
    python scripts/train.py --resume experiments/.../checkpoints/best.pt
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import torch
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from lanesim.analysis.logger import LOGGER_NAME, ExperimentLogger
from lanesim.training.trainer import EvolutionTrainer


def set_global_seed(seed: int) -> int:
    """Pin the global random sources.

    Brains and mutation draw from the trainer's own generator; this
    covers any library code that reaches for global state instead.

    Args:
        seed: Random seed

    Returns:
        The seed used
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    return seed


def load_config(config_path: Path) -> Dict[str, Any]:
    with open(config_path) as f:
        return yaml.safe_load(f)


def _parse_value(raw: str) -> Any:
    # YAML scalars give int/float/bool inference, anything else stays a string
    value = yaml.safe_load(raw)
    return raw if isinstance(value, (dict, list)) else value


def apply_overrides(config: Dict[str, Any], overrides: List[str]) -> Dict[str, Any]:
    """Set dotted keys from ``section.key=value`` strings.

    Missing sections are created along the way.

    Args:
        config: Configuration to modify in place
        overrides: Override strings

    Returns:
        The same configuration
    """
    for override in overrides:
        path, sep, raw = override.partition("=")
        if not sep:
            raise ValueError(f"Override must look like section.key=value, got {override!r}")

        *sections, leaf = path.split(".")
        target = config
        for section in sections:
            target = target.setdefault(section, {})
        target[leaf] = _parse_value(raw)

    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evolve lane-driving networks")
    parser.add_argument("--config", type=Path, default=Path("configs/base.yaml"),
                        help="YAML configuration file")
    parser.add_argument("--generations", type=int, default=None,
                        help="Generations to run (overrides training.generations)")
    parser.add_argument("--override", action="append", default=[], metavar="KEY=VALUE",
                        help="Dotted config override, repeatable")
    parser.add_argument("--resume", type=Path, default=None,
                        help="Checkpoint whose network seeds the first generation")
    parser.add_argument("--experiment-name", default=None,
                        help="Name used for the experiment directory")
    return parser


def main():
    args = build_parser().parse_args()

    config = apply_overrides(load_config(args.config), args.override)
    if args.generations:
        config.setdefault("training", {})["generations"] = args.generations
    if args.experiment_name:
        config.setdefault("experiment", {})["name"] = args.experiment_name

    experiment = config.get("experiment", {})
    seed = set_global_seed(experiment.get("seed", 42))
    name = experiment.get("name", "lane_evolution")

    exp_logger = ExperimentLogger(name, level=config.get("logging", {}).get("level", "INFO"))
    exp_logger.save_config(config)

    logger = logging.getLogger(LOGGER_NAME)
    logger.info(f"Experiment {name} in {exp_logger.experiment_dir} (seed {seed})")

    trainer = EvolutionTrainer(
        config,
        checkpoint_dir=exp_logger.checkpoints_dir,
        metrics_logger=exp_logger.metrics,
    )
    if args.resume:
        trainer.load_brain(args.resume)

    try:
        final_metrics = trainer.train()
        logger.info(f"Last generation: {final_metrics}")
    except KeyboardInterrupt:
        logger.warning(f"Interrupted after {trainer.generation} generations")
    finally:
        exp_logger.metrics.save_summary()

    logger.info(f"Best network: {trainer.checkpoints.best_path}")


if __name__ == "__main__":
    main()
