#!/usr/bin/env python3
"""Check training configs for missing sections and out-of-range values.

Usage:
    python scripts/validate_config.py configs/base.yaml [more.yaml ...]
"""

import argparse
import sys
from pathlib import Path

import yaml


def _positive(errors: list, section: dict, name: str, key: str) -> None:
    value = section.get(key)
    if value is None:
        return
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        errors.append(f"{name}.{key} must be positive, got {value}")


def validate_config(config: dict) -> list:
    """Collect every problem in a config instead of stopping at the first.

    Args:
        config: Parsed YAML configuration

    Returns:
        Human-readable error messages, empty when the config is usable
    """
    errors = []

    required_sections = ["experiment", "road", "vehicle", "sensor", "network", "training"]
    for section in required_sections:
        if section not in config:
            errors.append(f"Missing required section: {section}")

    if "experiment" in config:
        if "seed" not in config["experiment"]:
            errors.append("experiment.seed is required")

    if "road" in config:
        _positive(errors, config["road"], "road", "width")
        _positive(errors, config["road"], "road", "lane_count")

    if "vehicle" in config:
        for key in ("width", "height", "acceleration", "max_speed", "friction"):
            _positive(errors, config["vehicle"], "vehicle", key)

    if "traffic" in config:
        _positive(errors, config["traffic"], "traffic", "max_speed")
        for i, spawn in enumerate(config["traffic"].get("spawns", [])):
            if "y" not in spawn:
                errors.append(f"traffic.spawns[{i}] needs a y coordinate")

    if "sensor" in config:
        _positive(errors, config["sensor"], "sensor", "ray_count")
        _positive(errors, config["sensor"], "sensor", "ray_length")

    if "network" in config:
        hidden = config["network"].get("hidden_layers", [])
        if not isinstance(hidden, list) or any(
            not isinstance(h, int) or isinstance(h, bool) or h <= 0 for h in hidden
        ):
            errors.append(f"network.hidden_layers must be a list of positive integers, got {hidden}")

    if "training" in config:
        _positive(errors, config["training"], "training", "generations")
        _positive(errors, config["training"], "training", "population_size")
        _positive(errors, config["training"], "training", "max_frames")

        amount = config["training"].get("mutation_amount", 0.1)
        if not isinstance(amount, (int, float)) or not 0.0 <= amount <= 1.0:
            errors.append(f"training.mutation_amount must be in [0, 1], got {amount}")

    return errors


def main() -> int:
    parser = argparse.ArgumentParser(description="Check lanesim YAML configs before training")
    parser.add_argument("configs", nargs="+", type=Path, help="Config files to check")
    args = parser.parse_args()

    failed = 0
    for path in args.configs:
        if not path.is_file():
            print(f"{path}: file not found")
            failed += 1
            continue

        with open(path) as f:
            errors = validate_config(yaml.safe_load(f) or {})

        if errors:
            failed += 1
            print(f"{path}: {len(errors)} problem(s)")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"{path}: ok")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
