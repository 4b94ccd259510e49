# Vehicle entity and per-frame simulation step

from typing import List, Optional, Sequence

import torch

from ..core.geometry import assess_damage, build_polygon
from ..core.kinematics import integrate
from ..core.types import (
    ControlSignal,
    ControlType,
    Point,
    Polygon,
    Pose,
    VehicleParams,
    VehicleState,
)
from ..models.network import NeuralNetwork
from ..telemetry.normalization import readings_to_inputs
from ..telemetry.sensor import RaySensor

# forward, left, right, reverse
CONTROL_OUTPUTS = 4


class Vehicle:
    """A car on the road.

    Sensor and brain are optional fields rather than subclasses:
    DUMMY traffic has neither, KEYS vehicles run the brain but ignore it,
    AI vehicles apply the brain's outputs to their controls.
    """

    def __init__(
        self,
        x: float,
        y: float,
        params: Optional[VehicleParams] = None,
        control_type: ControlType = ControlType.DUMMY,
        sensor: Optional[RaySensor] = None,
        brain: Optional[NeuralNetwork] = None,
    ):
        self.params = params if params is not None else VehicleParams()
        self.state = VehicleState(pose=Pose(x=float(x), y=float(y)))
        self.control_type = control_type
        self.controls = ControlSignal.for_control_type(control_type)
        self.sensor = sensor
        self.brain = brain
        self.polygon: Polygon = self._create_polygon()

    @property
    def use_brain(self) -> bool:
        return self.control_type is ControlType.AI and self.brain is not None

    @property
    def pose(self) -> Pose:
        return self.state.pose

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def damaged(self) -> bool:
        return self.state.damaged

    def _create_polygon(self) -> Polygon:
        return build_polygon(self.state.pose, self.params.width, self.params.height)

    def update(
        self,
        road_borders: Sequence[Sequence[Point]],
        traffic: Sequence["Vehicle"],
    ) -> Optional[List[int]]:
        """Advance one frame.

        Moves, rebuilds the polygon and checks for damage unless already
        damaged, then senses and (for AI vehicles) lets the brain set the
        controls used on the next frame.

        Args:
            road_borders: Road border segments
            traffic: Other vehicles whose polygons are obstacles

        Returns:
            Brain outputs for this frame, or None without sensor/brain
        """
        traffic_polygons = [other.polygon for other in traffic]

        if not self.state.damaged:
            integrate(self.state, self.controls, self.params)
            self.polygon = self._create_polygon()
            self.state.damaged = assess_damage(self.polygon, road_borders, traffic_polygons)

        if self.sensor is None:
            return None

        readings = self.sensor.update(self.state.pose, road_borders, traffic_polygons)
        if self.brain is None:
            return None

        outputs = self.brain.feed_forward(readings_to_inputs(readings))
        if self.use_brain:
            self.controls = ControlSignal.from_outputs(outputs)
        return outputs


def default_layer_sizes(ray_count: int, hidden_layers: Sequence[int] = (6,)) -> List[int]:
    return [ray_count, *hidden_layers, CONTROL_OUTPUTS]


def make_vehicle(
    x: float,
    y: float,
    control_type: ControlType = ControlType.AI,
    params: Optional[VehicleParams] = None,
    sensor_config: Optional[dict] = None,
    hidden_layers: Sequence[int] = (6,),
    generator: Optional[torch.Generator] = None,
    brain: Optional[NeuralNetwork] = None,
) -> Vehicle:
    """Build a vehicle in one of the three configurations.

    Non-DUMMY vehicles get a ray sensor and a brain sized
    ``[ray_count, *hidden_layers, 4]``; pass ``brain`` to reuse one.

    Args:
        x, y: Starting position
        control_type: AI, KEYS or DUMMY
        params: Vehicle dynamics
        sensor_config: RaySensor keyword arguments
        hidden_layers: Hidden layer widths for a fresh brain
        generator: Random source for a fresh brain
        brain: Existing network to install

    Returns:
        New vehicle
    """
    if control_type is ControlType.DUMMY:
        return Vehicle(x, y, params=params, control_type=control_type)

    sensor = RaySensor(**(sensor_config or {}))
    if brain is None:
        brain = NeuralNetwork(
            default_layer_sizes(sensor.ray_count, hidden_layers),
            generator=generator,
        )
    return Vehicle(
        x,
        y,
        params=params,
        control_type=control_type,
        sensor=sensor,
        brain=brain,
    )
