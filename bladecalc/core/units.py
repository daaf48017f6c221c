# bladecalc/core/units.py
import math


class UnitManager:
    """Converts between display units and the solver's SI base units.

    Base length: m
    Base angle: rad
    Base angular speed: rad/s
    """

    # Factors to convert FROM unit X TO the solver base unit
    CONVERTERS = {
        'length_to_m': {
            'm': 1.0, 'cm': 0.01, 'mm': 0.001, 'in': 0.0254, 'ft': 0.3048
        },
        'angle_to_rad': {
            'rad': 1.0, 'deg': math.pi / 180.0
        },
        'angular_speed_to_rad_s': {
            'rad/s': 1.0, 'rpm': 2.0 * math.pi / 60.0, 'rps': 2.0 * math.pi
        },
        'speed_to_m_s': {
            'm/s': 1.0, 'km/h': 1.0 / 3.6, 'kts': 0.514444, 'mph': 0.44704
        }
    }

    @staticmethod
    def convert(value: float, from_unit: str, category: str, reverse: bool = False) -> float:
        """
        category: 'length_to_m', 'angle_to_rad', etc.
        reverse: If True, converts FROM the base unit TO the display unit.
        """
        factor = UnitManager.CONVERTERS[category].get(from_unit, 1.0)
        if reverse:
            return value / factor
        return value * factor

    @staticmethod
    def rpm_to_omega(rpm: float) -> float:
        return rpm * 2.0 * math.pi / 60.0
