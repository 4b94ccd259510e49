# Core type definitions
# FORBIDDEN: torch, logging, any I/O

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Sequence, Tuple

from .errors import ShapeMismatch


class Point(NamedTuple):
    x: float
    y: float


Segment = Tuple[Point, Point]
Polygon = Tuple[Point, ...]


class ControlType(Enum):
    """Who drives the vehicle."""
    AI = "AI"        # network outputs are applied
    KEYS = "KEYS"    # manual; network still runs but is ignored
    DUMMY = "DUMMY"  # scripted traffic, always forward, no sensor


@dataclass
class Pose:
    """Vehicle position and heading.

    Heading 0 points up the screen (negative y); increasing heading
    turns the vehicle to the left on a y-down screen.
    """
    x: float
    y: float
    heading: float = 0.0


@dataclass
class VehicleState:
    """Mutable per-frame state. ``damaged`` never goes back to False."""
    pose: Pose
    speed: float = 0.0
    damaged: bool = False


@dataclass(frozen=True)
class VehicleParams:
    """Immutable vehicle geometry and longitudinal dynamics."""
    width: float = 30.0
    height: float = 50.0
    acceleration: float = 0.2
    max_speed: float = 3.0
    friction: float = 0.05
    steer_rate: float = 0.03

    @property
    def max_reverse_speed(self) -> float:
        return self.max_speed / 2


_KEY_BINDINGS = {
    "ArrowUp": "forward",
    "ArrowDown": "reverse",
    "ArrowLeft": "left",
    "ArrowRight": "right",
}


@dataclass
class ControlSignal:
    """Four binary driving commands consumed by the kinematics."""
    forward: bool = False
    left: bool = False
    right: bool = False
    reverse: bool = False

    @classmethod
    def for_control_type(cls, control_type: ControlType) -> "ControlSignal":
        """Initial controls: scripted traffic always drives forward."""
        return cls(forward=control_type is ControlType.DUMMY)

    @classmethod
    def from_outputs(cls, outputs: Sequence[float]) -> "ControlSignal":
        """Map network outputs (forward, left, right, reverse) to controls.

        Args:
            outputs: At least four 0/1 values

        Returns:
            New control signal
        """
        values = [float(v) for v in outputs]
        if len(values) < 4:
            raise ShapeMismatch(f"Expected at least 4 outputs, got {len(values)}")
        return cls(
            forward=values[0] > 0,
            left=values[1] > 0,
            right=values[2] > 0,
            reverse=values[3] > 0,
        )

    def set_key(self, key: str, pressed: bool) -> None:
        """Apply an arrow-key press/release from an input-polling loop."""
        attr = _KEY_BINDINGS.get(key)
        if attr is not None:
            setattr(self, attr, pressed)

    def as_tuple(self) -> Tuple[bool, bool, bool, bool]:
        return (self.forward, self.left, self.right, self.reverse)
