# Env module - Road, vehicles and the per-frame simulation step
# May import from core, models and telemetry

from .road import Road
from .vehicle import Vehicle, make_vehicle, default_layer_sizes
from .scenario import make_traffic, vehicle_params_from_config
