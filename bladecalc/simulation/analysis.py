# bladecalc/simulation/analysis.py
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from bladecalc.config import EFFICIENCY_WARNING, GRAVITY, POWER_WARNING, TIP_MACH_WARNING
from bladecalc.core.distributions import ScaledDistribution
from bladecalc.core.models import (
    AirfoilData,
    AtmosphericConditions,
    BEMTResult,
    BladeElementData,
    BladeGeometry,
    ConvergenceInfo,
    DesignAssessment,
    DroneSpecs,
    RadialDistributionSummary,
)
from bladecalc.core.solvers.bemt import BEMTEngine
from bladecalc.core.units import UnitManager
from bladecalc.exceptions import BladeCalcKeyError
from bladecalc.log import log

SENSITIVITY_PARAMETERS = ("rpm", "pitch", "chord", "blades", "altitude")

SensitivityResults = Dict[str, List[Tuple[float, BEMTResult]]]


def summarize_elements(elements: Sequence[BladeElementData]) -> RadialDistributionSummary:
    if len(elements) == 0:
        return RadialDistributionSummary()

    alphas = np.array([e.alpha for e in elements])
    # The no-data polar keeps cd at 0.02, so cd is never zero here
    lift_to_drag = np.array([e.cl / e.cd for e in elements])

    return RadialDistributionSummary(
        total_thrust=float(sum(e.thrust for e in elements)),
        total_torque=float(sum(e.torque for e in elements)),
        max_angle_of_attack=float(alphas.max()),
        min_angle_of_attack=float(alphas.min()),
        average_angle_of_attack=float(alphas.mean()),
        max_lift_to_drag=float(max(lift_to_drag.max(), 0.0)),
        average_lift_to_drag=float(lift_to_drag.mean()),
    )


def radial_distribution_analysis(drone: DroneSpecs, blade: BladeGeometry, airfoil: AirfoilData,
                                 rpm: float, flight_speed: float = 0.0,
                                 engine: BEMTEngine = None
                                 ) -> Tuple[Tuple[BladeElementData, ...], RadialDistributionSummary]:
    """Per-element data of a single rotor plus its summary (element sums are not scaled by motors)."""
    engine = engine if engine is not None else BEMTEngine()
    result = engine.calculate_propeller(drone, blade, airfoil, rpm, flight_speed, include_element_data=True)
    elements = result.element_data or ()
    return elements, summarize_elements(elements)


def _vary(drone: DroneSpecs, blade: BladeGeometry, base_rpm: float,
          parameter: str, value: float) -> Tuple[DroneSpecs, BladeGeometry, float]:
    if parameter == "rpm":
        return drone, blade, value
    if parameter == "pitch":
        return drone, replace(blade, twist_distribution=ScaledDistribution(blade.twist_distribution, value)), base_rpm
    if parameter == "chord":
        return drone, replace(blade, chord_distribution=ScaledDistribution(blade.chord_distribution, value)), base_rpm
    if parameter == "blades":
        return replace(drone, number_of_blades=int(value)), blade, base_rpm
    # altitude
    return replace(drone, operating_altitude=value), blade, base_rpm


def sensitivity_analysis(drone: DroneSpecs, blade: BladeGeometry, airfoil: AirfoilData,
                         base_rpm: float, variations: Dict[str, Sequence[float]],
                         flight_speed: float = 0.0, engine: BEMTEngine = None) -> SensitivityResults:
    """
    Re-runs the rotor with one parameter changed at a time.

    variations maps a parameter name to the values to try:
      rpm      - absolute rotational speed
      pitch    - factor applied to the twist distribution
      chord    - factor applied to the chord distribution
      blades   - number of blades
      altitude - operating altitude in m
    """
    unknown = [name for name in variations if name not in SENSITIVITY_PARAMETERS]
    if unknown:
        raise BladeCalcKeyError(
            f"Unsupported sensitivity parameter(s): {', '.join(unknown)}. "
            f"Supported: {', '.join(SENSITIVITY_PARAMETERS)}"
        )

    engine = engine if engine is not None else BEMTEngine()
    results = {}
    for parameter, values in variations.items():
        parameter_results = []
        for value in values:
            varied_drone, varied_blade, rpm = _vary(drone, blade, base_rpm, parameter, value)
            result = engine.calculate_propeller(varied_drone, varied_blade, airfoil, rpm, flight_speed)
            parameter_results.append((value, result))
        results[parameter] = parameter_results
        log.debug("Sensitivity sweep over %s: %d points", parameter, len(parameter_results))
    return results


def assess_design(result: BEMTResult, drone: DroneSpecs, blade: BladeGeometry, rpm: float,
                  atmosphere: AtmosphericConditions) -> DesignAssessment:
    tip_speed = UnitManager.rpm_to_omega(rpm) * blade.radius
    tip_mach = tip_speed / atmosphere.speed_of_sound
    weight = drone.mass * GRAVITY
    thrust_to_weight = result.thrust / weight if weight > 0 else 0.0

    warnings = []
    if tip_mach > TIP_MACH_WARNING:
        warnings.append(f"High tip Mach number ({tip_mach:.2f}): compressibility and noise losses.")
    if result.efficiency > EFFICIENCY_WARNING:
        warnings.append(f"Efficiency of {result.efficiency * 100:.1f} percent is unrealistically high, check the inputs.")
    if result.power > POWER_WARNING:
        warnings.append(f"Very high power demand ({result.power / 1000:.1f} kW).")
    if result.thrust < weight:
        warnings.append(f"Thrust {result.thrust:.1f} N is below the hover weight of {weight:.1f} N.")
    if not result.convergence_info.converged:
        warnings.append(
            f"Solution did not converge (max residual {result.convergence_info.max_residual:.2e})."
        )

    for message in warnings:
        log.warning("%s", message)

    return DesignAssessment(tip_mach=tip_mach, thrust_to_weight=thrust_to_weight, warnings=warnings)


def _style_axes(ax, title: str, xlabel: str, ylabel: str):
    ax.grid(True, linestyle='--', alpha=0.3)
    ax.set_title(title, fontsize=11, weight='bold')
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)


def plot_radial_distribution(elements: Sequence[BladeElementData], length_unit: str = "mm"):
    radii = [UnitManager.convert(e.radius, length_unit, 'length_to_m', reverse=True) for e in elements]
    alphas = [UnitManager.convert(e.alpha, 'deg', 'angle_to_rad', reverse=True) for e in elements]

    fig, (ax_load, ax_aero) = plt.subplots(2, 1, figsize=(7, 7), dpi=100, sharex=True)

    ax_load.plot(radii, [e.thrust for e in elements], color='#00BCD4', linewidth=2.0, label="Thrust (N)")
    ax_load.plot(radii, [e.torque for e in elements], color='#FF5252', linewidth=1.5, label="Torque (N·m)")
    _style_axes(ax_load, "Radial Load Distribution (per rotor)", "", "Element load")
    ax_load.legend(loc='upper left')

    ax_aero.plot(radii, alphas, color='#2ECC71', linewidth=2.0, label="Angle of attack (deg)")
    ax_aero.plot(radii, [e.cl for e in elements], color='#F1C40F', linewidth=1.5, label="Cl")
    _style_axes(ax_aero, "Aerodynamic State", f"Radius ({length_unit})", "")
    ax_aero.legend(loc='upper right')

    fig.tight_layout()
    return fig


def plot_residual_history(info: ConvergenceInfo):
    fig, ax = plt.subplots(figsize=(6, 4), dpi=100)

    iterations = np.arange(1, len(info.residual_history) + 1)
    # Exact zeros cannot go on a log axis
    residuals = np.maximum(np.array(info.residual_history, dtype=float), np.finfo(float).tiny)
    ax.semilogy(iterations, residuals, color='#00BCD4', linewidth=2.0, marker='o', markersize=3)
    _style_axes(ax, "Mid-span Element Convergence", "Iteration", "Residual")

    fig.tight_layout()
    return fig
