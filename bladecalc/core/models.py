# bladecalc/core/models.py
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Tuple

from bladecalc.core.distributions import Distribution
from bladecalc.exceptions import BladeCalcValueError

GEOMETRY_SAMPLE_POINTS = (0.0, 0.25, 0.5, 0.75, 1.0)
GEOMETRY_TOLERANCE = 1e-10


@dataclass(frozen=True)
class AtmosphericLayer:
    base_altitude: float         # m
    base_temperature: float      # K
    temperature_gradient: float  # K/m
    base_pressure: float         # Pa


class AtmosphericConditions(NamedTuple):
    temperature: float           # K
    pressure: float              # Pa
    density: float               # kg/m³
    speed_of_sound: float        # m/s
    kinematic_viscosity: float   # m²/s


@dataclass(frozen=True)
class AirfoilData:
    """Tabulated polar: one alpha/cl/cd/cm row per Reynolds number (alpha in rad)."""
    reynolds_numbers: Tuple[float, ...]
    alpha: Tuple[Tuple[float, ...], ...]
    cl: Tuple[Tuple[float, ...], ...]
    cd: Tuple[Tuple[float, ...], ...]
    cm: Tuple[Tuple[float, ...], ...]
    name: str = "custom"

    def __post_init__(self):
        object.__setattr__(self, "reynolds_numbers", tuple(float(r) for r in self.reynolds_numbers))
        for attr in ("alpha", "cl", "cd", "cm"):
            rows = tuple(tuple(float(v) for v in row) for row in getattr(self, attr))
            object.__setattr__(self, attr, rows)

        n_re = len(self.reynolds_numbers)
        if n_re == 0:
            raise BladeCalcValueError("Airfoil table needs at least one Reynolds number.")
        if any(b <= a for a, b in zip(self.reynolds_numbers, self.reynolds_numbers[1:])):
            raise BladeCalcValueError("Reynolds numbers must be unique and ascending.")
        if not len(self.alpha) == len(self.cl) == len(self.cd) == len(self.cm) == n_re:
            raise BladeCalcValueError("Each Reynolds number needs exactly one alpha/cl/cd/cm row.")

        for i, alphas in enumerate(self.alpha):
            if len(alphas) < 2:
                raise BladeCalcValueError(f"Reynolds row {i} needs at least two angles of attack.")
            if not len(alphas) == len(self.cl[i]) == len(self.cd[i]) == len(self.cm[i]):
                raise BladeCalcValueError(f"Reynolds row {i} has coefficient rows of unequal length.")
            if any(b <= a for a, b in zip(alphas, alphas[1:])):
                raise BladeCalcValueError(f"Reynolds row {i} angles of attack must be ascending.")


@dataclass(frozen=True, eq=False)
class BladeGeometry:
    """Blade planform. Distributions take the normalized radial position (0 root, 1 tip)."""
    radius: float                     # m
    root_cutout: float                # m
    chord_distribution: Distribution  # -> chord, m
    twist_distribution: Distribution  # -> twist, rad

    def __post_init__(self):
        if self.radius <= 0:
            raise BladeCalcValueError("Blade radius must be greater than zero.")
        if not 0 <= self.root_cutout < self.radius:
            raise BladeCalcValueError("Root cutout must be non-negative and smaller than the blade radius.")

    def get_chord(self, radial_position: float) -> float:
        return self.chord_distribution(radial_position)

    def get_twist(self, radial_position: float) -> float:
        return self.twist_distribution(radial_position)

    def __eq__(self, other):
        # Distributions are opaque callables, so compare sampled values instead of identity
        if not isinstance(other, BladeGeometry):
            return NotImplemented
        if abs(self.radius - other.radius) > GEOMETRY_TOLERANCE:
            return False
        if abs(self.root_cutout - other.root_cutout) > GEOMETRY_TOLERANCE:
            return False
        for point in GEOMETRY_SAMPLE_POINTS:
            if abs(self.get_chord(point) - other.get_chord(point)) > GEOMETRY_TOLERANCE:
                return False
            if abs(self.get_twist(point) - other.get_twist(point)) > GEOMETRY_TOLERANCE:
                return False
        return True

    __hash__ = None


@dataclass(frozen=True)
class DroneSpecs:
    mass: float                # kg
    max_speed: float           # m/s
    number_of_blades: int
    number_of_motors: int
    operating_altitude: float  # m

    def __post_init__(self):
        if self.number_of_blades < 1:
            raise BladeCalcValueError("At least one blade is required.")
        if self.number_of_motors < 1:
            raise BladeCalcValueError("At least one motor is required.")


@dataclass(frozen=True)
class BladeElementData:
    radius: float    # m
    thrust: float    # N
    torque: float    # N·m
    alpha: float     # rad
    cl: float
    cd: float
    reynolds: float
    mach: float
    iterations: int


@dataclass(frozen=True)
class ConvergenceInfo:
    iterations: int                          # mean across elements
    max_residual: float
    converged: bool
    residual_history: Tuple[float, ...]      # mid-span element
    element_wise_iterations: Tuple[int, ...]


@dataclass(frozen=True)
class BEMTResult:
    thrust: float      # N, all motors
    torque: float      # N·m, all motors
    power: float       # W
    efficiency: float  # figure of merit in hover, propulsive efficiency otherwise
    convergence_info: ConvergenceInfo
    element_data: Optional[Tuple[BladeElementData, ...]] = None


@dataclass(frozen=True)
class RadialDistributionSummary:
    total_thrust: float = 0.0
    total_torque: float = 0.0
    max_angle_of_attack: float = 0.0
    min_angle_of_attack: float = 0.0
    average_angle_of_attack: float = 0.0
    max_lift_to_drag: float = 0.0
    average_lift_to_drag: float = 0.0


@dataclass
class DesignAssessment:
    tip_mach: float
    thrust_to_weight: float
    warnings: list = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return len(self.warnings) == 0
