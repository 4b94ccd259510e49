# Core module - Pure functions, no side effects
# FORBIDDEN: torch, logging, pathlib, any I/O

from .types import Point, Pose, VehicleState, VehicleParams, ControlSignal, ControlType
from .errors import SimulationError, InvalidTopology, ShapeMismatch
from .math_utils import lerp, get_intersection
from .geometry import build_polygon, polys_intersect, assess_damage
from .kinematics import integrate
