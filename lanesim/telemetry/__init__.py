# Telemetry module - Sensor readings and network inputs
# FORBIDDEN: torch, models.*, training.*

from .sensor import RaySensor, SensorReading
from .normalization import readings_to_inputs
