#!/usr/bin/env python3
"""Observe a single vehicle driving through traffic, without evolving anything.

Replays a saved network (or a fresh random one) and records per-frame
telemetry. Useful for seeing what a trained brain actually does.

Usage:
    # Random brain (baseline behavior)
    python scripts/observe.py --config configs/base.yaml

    # With a trained network
    python scripts/observe.py --checkpoint experiments/.../checkpoints/best.pt

    # Save telemetry to file
    python scripts/observe.py --checkpoint best.pt --output telemetry.csv
"""

import argparse
import csv
import sys
from pathlib import Path

import numpy as np
import torch
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from lanesim.analysis.checkpointing import load_network
from lanesim.core.types import ControlType
from lanesim.env import Road, make_traffic, make_vehicle, vehicle_params_from_config
from lanesim.training.evolution import START_Y, fitness
from lanesim.training.rollout import step_frame


def load_config(config_path: Path) -> dict:
    with open(config_path) as f:
        return yaml.safe_load(f)


def run_episode(vehicle, traffic, road, max_frames: int, verbose: bool = False) -> list:
    """Drive until damaged or out of frames.

    Returns:
        One telemetry row per frame
    """
    rows = []
    for frame in range(max_frames):
        step_frame([vehicle], traffic, road)
        controls = vehicle.controls
        rows.append({
            "frame": frame,
            "x": vehicle.pose.x,
            "y": vehicle.pose.y,
            "heading": vehicle.pose.heading,
            "speed": vehicle.speed,
            "forward": int(controls.forward),
            "left": int(controls.left),
            "right": int(controls.right),
            "reverse": int(controls.reverse),
            "damaged": int(vehicle.damaged),
        })

        if verbose and frame % 200 == 0:
            print(f"  Frame {frame:4d}: speed={vehicle.speed:.2f}, "
                  f"x={vehicle.pose.x:.1f}, distance={fitness(vehicle, START_Y):.1f}")

        if vehicle.damaged:
            break
    return rows


def main():
    parser = argparse.ArgumentParser(description="Observe a vehicle's behavior")
    parser.add_argument("--config", type=Path, default=Path("configs/base.yaml"))
    parser.add_argument("--checkpoint", type=Path, default=None, help="Network checkpoint (random if not provided)")
    parser.add_argument("--frames", type=int, default=None, help="Frame limit (defaults to training.max_frames)")
    parser.add_argument("--output", type=Path, default=None, help="Save telemetry to CSV")
    parser.add_argument("--verbose", action="store_true", help="Print periodic status")
    parser.add_argument("--seed", type=int, default=42)

    args = parser.parse_args()

    config = load_config(args.config)
    generator = torch.Generator().manual_seed(args.seed)

    road = Road.from_config(config)
    traffic = make_traffic(config, road)

    brain = None
    if args.checkpoint is not None:
        print(f"Loading network from {args.checkpoint}")
        brain = load_network(args.checkpoint)
    else:
        print("No checkpoint provided - using random network")

    vehicle = make_vehicle(
        road.lane_center(1),
        START_Y,
        control_type=ControlType.AI,
        params=vehicle_params_from_config(config),
        sensor_config=config.get("sensor", {}),
        hidden_layers=config.get("network", {}).get("hidden_layers", [6]),
        generator=generator,
        brain=brain,
    )

    max_frames = args.frames or config.get("training", {}).get("max_frames", 2000)
    rows = run_episode(vehicle, traffic, road, max_frames, verbose=args.verbose)

    speeds = np.array([r["speed"] for r in rows])
    print("\n" + "=" * 40)
    print("EPISODE SUMMARY")
    print("=" * 40)
    print(f"Frames:   {len(rows)}")
    print(f"Distance: {fitness(vehicle, START_Y):.1f}")
    print(f"Speed:    mean={speeds.mean():.2f}, max={speeds.max():.2f}")
    print(f"Damaged:  {vehicle.damaged}")

    if args.output:
        with open(args.output, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)
        print(f"Telemetry saved to {args.output}")


if __name__ == "__main__":
    main()
