# Vehicle kinematics
# FORBIDDEN: torch, logging, any I/O
# Longitudinal speed plus heading only; no lateral dynamics

import numpy as np

from .math_utils import sign
from .types import ControlSignal, VehicleParams, VehicleState


def apply_throttle(speed: float, controls: ControlSignal, params: VehicleParams) -> float:
    """Accelerate, clamp to the asymmetric speed range, then apply friction.

    Args:
        speed: Current speed (negative when reversing)
        controls: Driving commands
        params: Vehicle dynamics

    Returns:
        New speed
    """
    if controls.forward:
        speed += params.acceleration
    if controls.reverse:
        speed -= params.acceleration

    # Reverse is capped at half the forward limit
    speed = min(speed, params.max_speed)
    speed = max(speed, -params.max_reverse_speed)

    if speed > 0:
        speed -= params.friction
    if speed < 0:
        speed += params.friction
    if abs(speed) < params.friction:
        speed = 0.0

    return speed


def apply_steering(heading: float, speed: float, controls: ControlSignal, params: VehicleParams) -> float:
    """Turn only while moving; steering is mirrored in reverse."""
    if speed == 0:
        return heading

    flip = sign(speed)
    if controls.left:
        heading += params.steer_rate * flip
    if controls.right:
        heading -= params.steer_rate * flip
    return heading


def integrate(state: VehicleState, controls: ControlSignal, params: VehicleParams) -> None:
    """Advance speed, heading and position by one frame in place.

    A damaged state is frozen and left untouched.

    Args:
        state: Vehicle state to mutate
        controls: Driving commands for this frame
        params: Vehicle dynamics
    """
    if state.damaged:
        return

    state.speed = apply_throttle(state.speed, controls, params)

    pose = state.pose
    pose.heading = apply_steering(pose.heading, state.speed, controls, params)
    pose.x -= float(np.sin(pose.heading)) * state.speed
    pose.y -= float(np.cos(pose.heading)) * state.speed
