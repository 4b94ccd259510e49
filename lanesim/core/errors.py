# Error taxonomy
# FORBIDDEN: torch, logging, any I/O


class SimulationError(Exception):
    """Base class for precondition violations raised by the simulation core."""


class InvalidTopology(SimulationError, ValueError):
    """Network layer-size list is malformed."""


class ShapeMismatch(SimulationError, ValueError):
    """Input length disagrees with the width a network layer expects."""
