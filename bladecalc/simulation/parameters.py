# bladecalc/simulation/parameters.py
from dataclasses import asdict, dataclass
from typing import Tuple

from bladecalc.config import (
    DEFAULT_PARAMETERS,
    DEFAULT_ROOT_CHORD,
    DEFAULT_ROOT_TWIST,
    DEFAULT_TIP_CHORD,
    DEFAULT_TIP_TWIST,
    DEFAULT_TWIST_EXPONENT,
    DRONE_PRESETS,
)
from bladecalc.core.airfoil import NACA_4412
from bladecalc.core.distributions import LinearDistribution, PowerLawDistribution
from bladecalc.core.models import AirfoilData, BEMTResult, BladeGeometry, DroneSpecs
from bladecalc.core.solvers.bemt import BEMTEngine
from bladecalc.exceptions import BladeCalcKeyError, BladeCalcValueError
from bladecalc.log import log


@dataclass
class CalculationParameters:
    drone_mass: float = DEFAULT_PARAMETERS["drone_mass"]                  # kg
    max_speed: float = DEFAULT_PARAMETERS["max_speed"]                    # m/s
    number_of_blades: int = DEFAULT_PARAMETERS["number_of_blades"]
    number_of_motors: int = DEFAULT_PARAMETERS["number_of_motors"]
    operating_altitude: float = DEFAULT_PARAMETERS["operating_altitude"]  # m
    blade_radius: float = DEFAULT_PARAMETERS["blade_radius"]              # m
    root_cutout: float = DEFAULT_PARAMETERS["root_cutout"]                # m
    target_rpm: float = DEFAULT_PARAMETERS["target_rpm"]

    @classmethod
    def from_preset(cls, name: str) -> "CalculationParameters":
        if name not in DRONE_PRESETS:
            raise BladeCalcKeyError(
                f"Unknown drone preset '{name}'. Available: {', '.join(sorted(DRONE_PRESETS))}"
            )
        return cls(**DRONE_PRESETS[name])

    def to_dict(self) -> dict:
        return asdict(self)


def validate_parameters(params: CalculationParameters) -> Tuple[bool, str]:
    """Checks every input against its physical range. Returns (is_valid, message)."""
    if not 0 < params.drone_mass <= 50:
        return False, "Drone mass must be between 0 and 50 kg."
    if not 0 <= params.max_speed <= 200:
        return False, "Maximum speed must be between 0 and 200 m/s."
    if not 1 <= params.number_of_blades <= 8:
        return False, "Number of blades must be between 1 and 8."
    if not 1 <= params.number_of_motors <= 12:
        return False, "Number of motors must be between 1 and 12."
    if not 0 <= params.operating_altitude <= 10000:
        return False, "Operating altitude must be between 0 and 10000 m."
    if not 0 <= params.root_cutout <= 0.2:
        return False, "Root cutout must be between 0 and 0.2 m."
    if not params.root_cutout < params.blade_radius <= 1.0:
        return False, "Blade radius must be larger than the root cutout and at most 1 m."
    if not 0 < params.target_rpm <= 50000:
        return False, "Target RPM must be between 0 and 50000."
    return True, "Parameters are valid."


def ensure_valid(params: CalculationParameters) -> None:
    is_valid, message = validate_parameters(params)
    if not is_valid:
        raise BladeCalcValueError(message)


def build_drone_specs(params: CalculationParameters) -> DroneSpecs:
    return DroneSpecs(
        mass=params.drone_mass,
        max_speed=params.max_speed,
        number_of_blades=params.number_of_blades,
        number_of_motors=params.number_of_motors,
        operating_altitude=params.operating_altitude,
    )


def build_blade_geometry(params: CalculationParameters,
                         root_chord: float = DEFAULT_ROOT_CHORD,
                         tip_chord: float = DEFAULT_TIP_CHORD,
                         root_twist: float = DEFAULT_ROOT_TWIST,
                         tip_twist: float = DEFAULT_TIP_TWIST,
                         twist_exponent: float = DEFAULT_TWIST_EXPONENT) -> BladeGeometry:
    # Linear taper, twist washed out faster toward the tip
    return BladeGeometry(
        radius=params.blade_radius,
        root_cutout=params.root_cutout,
        chord_distribution=LinearDistribution(root_chord, tip_chord),
        twist_distribution=PowerLawDistribution(root_twist, tip_twist, twist_exponent),
    )


def calculate_design(params: CalculationParameters, airfoil: AirfoilData = NACA_4412,
                     flight_speed: float = 0.0, engine: BEMTEngine = None) -> BEMTResult:
    ensure_valid(params)
    engine = engine if engine is not None else BEMTEngine()

    log.info("Calculating %d-blade rotor, R=%.3f m at %.0f rpm", params.number_of_blades,
             params.blade_radius, params.target_rpm)
    return engine.calculate_propeller(
        build_drone_specs(params),
        build_blade_geometry(params),
        airfoil,
        params.target_rpm,
        flight_speed=flight_speed,
        include_element_data=True,
    )


def calculation_summary(result: BEMTResult) -> str:
    info = result.convergence_info
    status = "converged" if info.converged else "not converged"
    lines = [
        "Calculation results:",
        f"  Thrust:      {result.thrust:.2f} N",
        f"  Power:       {result.power:.1f} W",
        f"  Torque:      {result.torque:.4f} N·m",
        f"  Efficiency:  {result.efficiency * 100:.1f} %",
        f"  Convergence: {status} (max residual {info.max_residual:.2e})",
        f"  Iterations:  {info.iterations}",
    ]
    return "\n".join(lines)
