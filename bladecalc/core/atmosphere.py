# bladecalc/core/atmosphere.py
import math
from typing import Iterable, List, Tuple

from bladecalc.config import (
    GAS_CONSTANT,
    GRAVITY,
    HEAT_CAPACITY_RATIO,
    ISOTHERMAL_GRADIENT_TOLERANCE,
    MAX_MODEL_ALTITUDE,
    REFERENCE_VISCOSITY,
    SUTHERLAND_CONSTANT,
)
from bladecalc.core.models import AtmosphericConditions, AtmosphericLayer


class StandardAtmosphere:
    """
    International Standard Atmosphere, 0 to 86 km.
    Seven layers with a constant lapse rate each: isothermal layers decay
    exponentially, the others follow the polytropic (power law) relation.
    """

    LAYERS: Tuple[AtmosphericLayer, ...] = (
        AtmosphericLayer(0.0, 288.15, -0.0065, 101325.0),     # Troposphere
        AtmosphericLayer(11000.0, 216.65, 0.0, 22632.0),      # Tropopause
        AtmosphericLayer(20000.0, 216.65, 0.001, 5474.9),     # Lower stratosphere
        AtmosphericLayer(32000.0, 228.65, 0.0028, 868.02),    # Upper stratosphere
        AtmosphericLayer(47000.0, 270.65, 0.0, 110.91),       # Stratopause
        AtmosphericLayer(51000.0, 270.65, -0.0028, 66.94),    # Lower mesosphere
        AtmosphericLayer(71000.0, 214.65, -0.002, 3.96),      # Upper mesosphere
    )

    @classmethod
    def layer_index(cls, altitude: float) -> int:
        for i in range(len(cls.LAYERS) - 1, -1, -1):
            if altitude >= cls.LAYERS[i].base_altitude:
                return i
        return 0

    def calculate_conditions(self, altitude: float) -> AtmosphericConditions:
        # Out-of-model altitudes are clamped, never rejected
        h = min(max(0.0, altitude), MAX_MODEL_ALTITUDE)

        layer = self.LAYERS[self.layer_index(h)]
        dh = h - layer.base_altitude

        temperature = layer.base_temperature + layer.temperature_gradient * dh

        if abs(layer.temperature_gradient) < ISOTHERMAL_GRADIENT_TOLERANCE:
            pressure = layer.base_pressure * math.exp(
                -GRAVITY * dh / (GAS_CONSTANT * layer.base_temperature)
            )
        else:
            exponent = -GRAVITY / (layer.temperature_gradient * GAS_CONSTANT)
            pressure = layer.base_pressure * (temperature / layer.base_temperature) ** exponent

        density = pressure / (GAS_CONSTANT * temperature)
        speed_of_sound = math.sqrt(HEAT_CAPACITY_RATIO * GAS_CONSTANT * temperature)

        # Sutherland's law
        dynamic_viscosity = REFERENCE_VISCOSITY * temperature ** 1.5 / (temperature + SUTHERLAND_CONSTANT)
        kinematic_viscosity = dynamic_viscosity / density

        return AtmosphericConditions(
            temperature=temperature,
            pressure=pressure,
            density=density,
            speed_of_sound=speed_of_sound,
            kinematic_viscosity=kinematic_viscosity,
        )

    def atmospheric_table(self, altitudes: Iterable[float]) -> List[Tuple[float, float, float, float]]:
        """Returns (altitude, temperature, pressure, density) rows for plotting or reports."""
        table = []
        for altitude in altitudes:
            conditions = self.calculate_conditions(altitude)
            table.append((altitude, conditions.temperature, conditions.pressure, conditions.density))
        return table
