# bladecalc/core/solvers/blade_element.py
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from bladecalc.config import (
    DEFAULT_SOLVER_SETTINGS,
    FALLBACK_RESIDUAL,
    MIN_SIN_INFLOW,
    MIN_TIP_LOSS,
    SolverSettings,
)
from bladecalc.core.airfoil import AirfoilTable
from bladecalc.core.models import AtmosphericConditions, BladeGeometry
from bladecalc.log import log

FAST_IMPROVEMENT = 0.3
SLOW_IMPROVEMENT = 0.05
FAST_GAIN = 1.5
SLOW_GAIN = 0.7


class SolverPhase(Enum):
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    DIVERGED = "diverged"
    FALLBACK_COMPUTED = "fallback_computed"


TERMINAL_PHASES = (SolverPhase.CONVERGED, SolverPhase.EXHAUSTED, SolverPhase.FALLBACK_COMPUTED)


@dataclass(frozen=True)
class BladeStation:
    radius: float  # m, element midpoint
    width: float   # m, dr


@dataclass(frozen=True)
class ForceEvaluation:
    thrust: float
    torque: float
    inflow_angle: float
    alpha: float
    cl: float
    cd: float
    reynolds: float
    mach: float


@dataclass(frozen=True)
class MomentumEvaluation:
    tip_loss_factor: float
    thrust: float
    torque: float


@dataclass(frozen=True)
class IterationState:
    station: BladeStation
    phase: SolverPhase
    axial_induced: float
    tangential_induced: float
    iterations: int = 0
    residual: float = math.inf
    residual_history: Tuple[float, ...] = ()
    forces: Optional[ForceEvaluation] = None


@dataclass(frozen=True)
class ElementSolveResult:
    thrust: float
    torque: float
    residual: float
    iterations: int
    residual_history: Tuple[float, ...]
    alpha: float
    cl: float
    cd: float
    reynolds: float
    mach: float
    phase: SolverPhase


def tip_loss_factor(r: float, tip_radius: float, number_of_blades: int, inflow_angle: float) -> float:
    """Prandtl tip loss F = (2/pi) acos(exp(-f)), f = B (R - r) / (2 r sin(phi))."""
    sin_phi = max(abs(math.sin(inflow_angle)), MIN_SIN_INFLOW)
    f = number_of_blades * (tip_radius - r) / (2.0 * r * sin_phi)
    factor = (2.0 / math.pi) * math.acos(math.exp(-max(f, 0.0)))
    return max(factor, MIN_TIP_LOSS)


def solve_axial_induced(thrust: float, flight_speed: float, r: float, dr: float,
                        density: float, tip_loss: float) -> float:
    """Inverts T = 4 pi rho r dr (V + a) a F for a."""
    if thrust <= 0:
        return 0.0
    term = thrust / (4.0 * math.pi * density * r * dr * tip_loss)
    if flight_speed == 0:
        return math.sqrt(term)
    return (-flight_speed + math.sqrt(flight_speed * flight_speed + 4.0 * term)) / 2.0


def solve_tangential_induced(torque: float, omega: float, r: float, dr: float,
                             density: float, tip_loss: float) -> float:
    """Inverts Q = 4 pi rho r^3 dr omega a' F for a'."""
    if torque <= 0:
        return 0.0
    return torque / (4.0 * math.pi * density * r ** 3 * dr * omega * tip_loss)


def adaptive_relaxation(iteration: int, residual: float, residual_history: Sequence[float],
                        settings: SolverSettings = DEFAULT_SOLVER_SETTINGS) -> float:
    # Conservative start
    if iteration < settings.startup_iterations:
        return settings.min_relaxation

    # Trend over the last three residuals (the history already holds the current one)
    if len(residual_history) >= 3 and residual_history[-3] > 0:
        improvement = (residual_history[-3] - residual) / residual_history[-3]
        if improvement > FAST_IMPROVEMENT:
            return min(settings.max_relaxation, settings.base_relaxation * FAST_GAIN)
        if improvement < SLOW_IMPROVEMENT:
            return max(settings.min_relaxation, settings.base_relaxation * SLOW_GAIN)

    if residual > settings.divergence_residual:
        return settings.min_relaxation

    return settings.base_relaxation


class BladeElementSolver:
    """
    Solves one radial station: iterates the induced velocities (a, a') until the
    blade-element forces and the momentum-theory forces agree.

    The iteration is a state machine. `step` is a pure transition
    ITERATING -> ITERATING | CONVERGED | EXHAUSTED | DIVERGED and
    DIVERGED -> FALLBACK_COMPUTED; `solve` just runs it to a terminal phase.
    """

    def __init__(self, blade: BladeGeometry, airfoil: AirfoilTable, omega: float,
                 flight_speed: float, number_of_blades: int, atmosphere: AtmosphericConditions,
                 settings: SolverSettings = DEFAULT_SOLVER_SETTINGS):
        self.blade = blade
        self.airfoil = airfoil
        self.omega = omega
        self.flight_speed = flight_speed
        self.number_of_blades = number_of_blades
        self.atmosphere = atmosphere
        self.settings = settings

    def _local_geometry(self, r: float) -> Tuple[float, float]:
        x = r / self.blade.radius
        return self.blade.get_chord(x), self.blade.get_twist(x)

    def initial_guess(self, station: BladeStation) -> Tuple[float, float]:
        r = station.radius
        big_r = self.blade.radius
        chord, twist = self._local_geometry(r)

        tip_speed = self.omega * big_r
        local_speed = self.omega * r

        if self.flight_speed == 0:
            # Hover: vortex-theory based estimate scaled by local blade speed
            solidity = self.number_of_blades * chord / (2.0 * math.pi * r)
            axial = local_speed * 0.15 * (r / big_r) * (1.0 + 0.1 * solidity)
            twist_effect = max(0.1, 1.0 - abs(twist - 0.2) / 0.5)
            tangential = axial * 0.4 * solidity * twist_effect * (r / big_r)
            return axial, tangential

        # Forward flight: advance-ratio based estimate
        advance_ratio = self.flight_speed / tip_speed
        radial_position = r / big_r
        speed_ratio = local_speed / tip_speed
        axial = (self.flight_speed * (0.08 + 0.04 * advance_ratio) * (1.0 - radial_position)
                 + local_speed * 0.02 * speed_ratio)
        tangential = (self.flight_speed * (0.015 + 0.008 * advance_ratio) * radial_position
                      + local_speed * 0.01 * (1.0 - speed_ratio))
        return axial, tangential

    def _element_forces(self, station: BladeStation, ut: float, up: float,
                        alpha_limit: float, compressible: bool) -> ForceEvaluation:
        r, dr = station.radius, station.width
        chord, twist = self._local_geometry(r)

        inflow_angle = math.atan2(up, ut)
        alpha = max(-alpha_limit, min(alpha_limit, twist - inflow_angle))

        w = math.sqrt(ut * ut + up * up)
        reynolds = w * chord / self.atmosphere.kinematic_viscosity
        mach = w / self.atmosphere.speed_of_sound

        cl, cd, _ = self.airfoil.get_coefficients(alpha, reynolds)
        if compressible:
            cl, cd = self.airfoil.apply_compressibility_correction(cl, cd, mach)

        q = 0.5 * self.atmosphere.density * w * w
        lift = q * chord * dr * cl
        drag = q * chord * dr * cd

        cos_phi = math.cos(inflow_angle)
        sin_phi = math.sin(inflow_angle)
        thrust = self.number_of_blades * (lift * cos_phi - drag * sin_phi)
        torque = self.number_of_blades * r * (lift * sin_phi + drag * cos_phi)

        return ForceEvaluation(thrust, torque, inflow_angle, alpha, cl, cd, reynolds, mach)

    def evaluate_forces(self, station: BladeStation, axial: float, tangential: float) -> ForceEvaluation:
        ut = self.omega * station.radius - tangential
        up = self.flight_speed + axial
        return self._element_forces(station, ut, up, self.settings.alpha_limit, compressible=True)

    def evaluate_fallback(self, station: BladeStation) -> ForceEvaluation:
        """Single pass on the uninduced flow, no compressibility correction."""
        ut = self.omega * station.radius
        up = self.flight_speed
        return self._element_forces(station, ut, up, self.settings.fallback_alpha_limit, compressible=False)

    def evaluate_momentum(self, station: BladeStation, axial: float, tangential: float,
                          inflow_angle: float) -> MomentumEvaluation:
        r, dr = station.radius, station.width
        rho = self.atmosphere.density
        f = tip_loss_factor(r, self.blade.radius, self.number_of_blades, inflow_angle)
        thrust = 4.0 * math.pi * rho * r * dr * (self.flight_speed + axial) * axial * f
        torque = 4.0 * math.pi * rho * r ** 3 * dr * self.omega * tangential * f
        return MomentumEvaluation(f, thrust, torque)

    def start(self, station: BladeStation) -> IterationState:
        axial, tangential = self.initial_guess(station)
        return IterationState(station, SolverPhase.ITERATING, axial, tangential)

    def step(self, state: IterationState) -> IterationState:
        if state.phase is SolverPhase.DIVERGED:
            log.debug("Element r=%.4f m diverged (residual %.3e), using uninduced estimate",
                      state.station.radius, state.residual)
            return replace(
                state,
                phase=SolverPhase.FALLBACK_COMPUTED,
                iterations=1,
                residual=FALLBACK_RESIDUAL,
                residual_history=(FALLBACK_RESIDUAL,),
                forces=self.evaluate_fallback(state.station),
            )
        if state.phase is not SolverPhase.ITERATING:
            return state

        settings = self.settings
        station = state.station
        r, dr = station.radius, station.width
        axial, tangential = state.axial_induced, state.tangential_induced
        iterations = state.iterations + 1

        # 1. Both models at the current induced velocities
        forces = self.evaluate_forces(station, axial, tangential)
        momentum = self.evaluate_momentum(station, axial, tangential, forces.inflow_angle)

        residual = max(abs(forces.thrust - momentum.thrust), abs(forces.torque - momentum.torque))
        history = state.residual_history + (residual,)

        # 2. Momentum theory inverted with the blade-element forces as target
        new_axial = solve_axial_induced(forces.thrust, self.flight_speed, r, dr,
                                        self.atmosphere.density, momentum.tip_loss_factor)
        new_tangential = solve_tangential_induced(forces.torque, self.omega, r, dr,
                                                  self.atmosphere.density, momentum.tip_loss_factor)

        # 3. Relaxed update
        relaxation = adaptive_relaxation(iterations, residual, history, settings)
        axial += relaxation * (new_axial - axial)
        tangential += relaxation * (new_tangential - tangential)

        if not math.isfinite(residual) or (
            iterations > settings.divergence_iterations and residual > settings.divergence_residual
        ):
            phase = SolverPhase.DIVERGED
        elif residual <= settings.epsilon:
            phase = SolverPhase.CONVERGED
        elif iterations >= settings.max_iterations:
            phase = SolverPhase.EXHAUSTED
        else:
            phase = SolverPhase.ITERATING

        return IterationState(station, phase, axial, tangential, iterations, residual, history, forces)

    def solve(self, r: float, dr: float) -> ElementSolveResult:
        state = self.start(BladeStation(r, dr))
        while state.phase not in TERMINAL_PHASES:
            state = self.step(state)

        forces = state.forces
        return ElementSolveResult(
            thrust=forces.thrust,
            torque=forces.torque,
            residual=state.residual,
            iterations=state.iterations,
            residual_history=state.residual_history,
            alpha=forces.alpha,
            cl=forces.cl,
            cd=forces.cd,
            reynolds=forces.reynolds,
            mach=forces.mach,
            phase=state.phase,
        )
