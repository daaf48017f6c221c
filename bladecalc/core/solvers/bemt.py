# bladecalc/core/solvers/bemt.py
import math
from typing import Optional, Union

from bladecalc.config import DEFAULT_SOLVER_SETTINGS, SolverSettings
from bladecalc.core.airfoil import AirfoilTable
from bladecalc.core.atmosphere import StandardAtmosphere
from bladecalc.core.models import (
    AirfoilData,
    BEMTResult,
    BladeElementData,
    BladeGeometry,
    ConvergenceInfo,
    DroneSpecs,
)
from bladecalc.core.solvers.blade_element import BladeElementSolver
from bladecalc.core.units import UnitManager
from bladecalc.log import log


def propeller_efficiency(thrust: float, power: float, flight_speed: float,
                         density: float, disk_area: float) -> float:
    """Figure of merit in hover, propulsive efficiency T*V/P in forward flight."""
    if power <= 0:
        return 0.0
    if flight_speed == 0:
        if thrust <= 0:
            return 0.0
        ideal_induced = math.sqrt(thrust / (2.0 * density * disk_area))
        return thrust * ideal_induced / power
    return thrust * flight_speed / power


class BEMTEngine:
    """
    Blade Element Momentum Theory over the whole rotor.
    Splits the blade into equal strips, solves each one independently and
    integrates the forces, then scales them by the number of motors.
    """

    def __init__(self, settings: SolverSettings = DEFAULT_SOLVER_SETTINGS,
                 atmosphere: Optional[StandardAtmosphere] = None):
        self.settings = settings
        self.atmosphere = atmosphere if atmosphere is not None else StandardAtmosphere()

    def calculate_propeller(self, drone: DroneSpecs, blade: BladeGeometry,
                            airfoil: Union[AirfoilData, AirfoilTable], rpm: float,
                            flight_speed: float = 0.0, include_element_data: bool = False) -> BEMTResult:

        # 1. Operating point
        conditions = self.atmosphere.calculate_conditions(drone.operating_altitude)
        omega = UnitManager.rpm_to_omega(rpm)
        table = airfoil if isinstance(airfoil, AirfoilTable) else AirfoilTable(airfoil)

        solver = BladeElementSolver(
            blade, table, omega, flight_speed, drone.number_of_blades, conditions, self.settings
        )

        # 2. Radial integration over equal strips, evaluated at midpoints
        n = self.settings.number_of_elements
        dr = (blade.radius - blade.root_cutout) / n
        tracked_element = n // 2

        thrust = 0.0
        torque = 0.0
        max_residual = 0.0
        total_iterations = 0
        element_iterations = []
        residual_history = ()
        elements = []

        for i in range(n):
            r = blade.root_cutout + (i + 0.5) * dr
            element = solver.solve(r, dr)

            thrust += element.thrust
            torque += element.torque
            max_residual = max(max_residual, element.residual)
            total_iterations += element.iterations
            element_iterations.append(element.iterations)

            if i == tracked_element:
                residual_history = element.residual_history

            if include_element_data:
                elements.append(BladeElementData(
                    radius=r,
                    thrust=element.thrust,
                    torque=element.torque,
                    alpha=element.alpha,
                    cl=element.cl,
                    cd=element.cd,
                    reynolds=element.reynolds,
                    mach=element.mach,
                    iterations=element.iterations,
                ))

        # 3. Whole vehicle
        thrust *= drone.number_of_motors
        torque *= drone.number_of_motors
        power = torque * omega

        # Total disk area of all rotors, so the figure of merit is the per-rotor value
        disk_area = drone.number_of_motors * math.pi * blade.radius ** 2
        efficiency = propeller_efficiency(thrust, power, flight_speed, conditions.density, disk_area)

        convergence_info = ConvergenceInfo(
            iterations=total_iterations // n,
            max_residual=max_residual,
            converged=max_residual < self.settings.epsilon,
            residual_history=residual_history,
            element_wise_iterations=tuple(element_iterations),
        )

        log.debug(
            "BEMT %.0f rpm, V=%.2f m/s: T=%.3f N, Q=%.4f N·m, P=%.2f W, eta=%.3f, mean iterations %d",
            rpm, flight_speed, thrust, torque, power, efficiency, convergence_info.iterations,
        )
        if not convergence_info.converged:
            log.warning("BEMT solve at %.0f rpm did not converge (max residual %.3e)", rpm, max_residual)

        return BEMTResult(
            thrust=thrust,
            torque=torque,
            power=power,
            efficiency=efficiency,
            convergence_info=convergence_info,
            element_data=tuple(elements) if include_element_data else None,
        )
