# Sensor readings -> network inputs
# FORBIDDEN: torch, models.*, training.*

from typing import Optional, Sequence

import numpy as np

from .sensor import SensorReading


def readings_to_inputs(readings: Sequence[Optional[SensorReading]]) -> np.ndarray:
    """Convert ray readings to network activations.

    Closer obstacles give higher inputs: ``1 - offset`` for a hit and
    0 when the ray sees nothing.

    Args:
        readings: One optional reading per ray

    Returns:
        Input array, shape (len(readings),)
    """
    inputs = np.zeros(len(readings), dtype=np.float64)
    for i, reading in enumerate(readings):
        if reading is None:
            continue
        if not 0.0 <= reading.offset <= 1.0:
            raise ValueError(f"Sensor offset must be in [0, 1], got {reading.offset}")
        inputs[i] = 1.0 - reading.offset
    return inputs
