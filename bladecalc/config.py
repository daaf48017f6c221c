# bladecalc/config.py
from dataclasses import dataclass

CURRENT_VERSION = "1.2.0"

# Physical constants (ISA, dry air)
GAS_CONSTANT = 287.05          # J/(kg·K)
GRAVITY = 9.80665              # m/s²
HEAT_CAPACITY_RATIO = 1.4
SUTHERLAND_CONSTANT = 110.4    # K
REFERENCE_VISCOSITY = 1.458e-6  # kg/(m·s·K^0.5)
MAX_MODEL_ALTITUDE = 86000.0   # m
ISOTHERMAL_GRADIENT_TOLERANCE = 1e-10

# Airfoil table
NO_DATA_COEFFICIENTS = (0.0, 0.02, 0.0)  # cl, cd, cm when alpha is outside a polar
COMPRESSIBILITY_MACH_THRESHOLD = 0.3
MAX_CORRECTED_MACH = 0.95

# BEMT solver
EPSILON = 1e-8
MAX_ITERATIONS = 50
NUMBER_OF_ELEMENTS = 30
ALPHA_LIMIT = 0.35             # rad, main iteration
FALLBACK_ALPHA_LIMIT = 0.3     # rad, uninduced estimate
FALLBACK_RESIDUAL = 0.01
DIVERGENCE_ITERATIONS = 10
DIVERGENCE_RESIDUAL = 1.0
MIN_SIN_INFLOW = 1e-6
MIN_TIP_LOSS = 1e-6


@dataclass(frozen=True)
class SolverSettings:
    """Numerical settings shared by the element solver and the engine."""
    epsilon: float = EPSILON
    max_iterations: int = MAX_ITERATIONS
    number_of_elements: int = NUMBER_OF_ELEMENTS
    alpha_limit: float = ALPHA_LIMIT
    fallback_alpha_limit: float = FALLBACK_ALPHA_LIMIT
    divergence_iterations: int = DIVERGENCE_ITERATIONS
    divergence_residual: float = DIVERGENCE_RESIDUAL
    startup_iterations: int = 3
    base_relaxation: float = 0.3
    min_relaxation: float = 0.1
    max_relaxation: float = 0.8


DEFAULT_SOLVER_SETTINGS = SolverSettings()

# Design warnings
TIP_MACH_WARNING = 0.7
EFFICIENCY_WARNING = 0.85
POWER_WARNING = 10000.0        # W

# Default chord / twist distribution of the design tool
DEFAULT_ROOT_CHORD = 0.025     # m
DEFAULT_TIP_CHORD = 0.010      # m
DEFAULT_ROOT_TWIST = 0.35      # rad (~20°)
DEFAULT_TIP_TWIST = 0.12       # rad (~7°)
DEFAULT_TWIST_EXPONENT = 1.5

DEFAULT_PARAMETERS = {
    "drone_mass": 1.5,
    "max_speed": 25.0,
    "number_of_blades": 2,
    "number_of_motors": 4,
    "operating_altitude": 100.0,
    "blade_radius": 0.127,
    "root_cutout": 0.015,
    "target_rpm": 6500.0,
}

# Drone presets (Global)
DRONE_PRESETS = {
    "racing_quadcopter": {
        "drone_mass": 1.2, "max_speed": 35.0, "number_of_blades": 2, "number_of_motors": 4,
        "operating_altitude": 100.0, "blade_radius": 0.127, "root_cutout": 0.015, "target_rpm": 8000.0,
    },
    "cinematic_hexacopter": {
        "drone_mass": 3.5, "max_speed": 20.0, "number_of_blades": 3, "number_of_motors": 6,
        "operating_altitude": 200.0, "blade_radius": 0.152, "root_cutout": 0.020, "target_rpm": 5000.0,
    },
    "heavy_lift_octocopter": {
        "drone_mass": 8.0, "max_speed": 15.0, "number_of_blades": 3, "number_of_motors": 8,
        "operating_altitude": 50.0, "blade_radius": 0.178, "root_cutout": 0.025, "target_rpm": 3500.0,
    },
    "micro_drone": {
        "drone_mass": 0.3, "max_speed": 15.0, "number_of_blades": 2, "number_of_motors": 4,
        "operating_altitude": 50.0, "blade_radius": 0.076, "root_cutout": 0.010, "target_rpm": 12000.0,
    },
}
