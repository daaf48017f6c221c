# main.py
import sys
import os

# Adds the project root to the path so 'bladecalc' imports work without installing
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from bladecalc.core.atmosphere import StandardAtmosphere
from bladecalc.simulation.analysis import assess_design, plot_radial_distribution
from bladecalc.simulation.parameters import (
    CalculationParameters,
    build_blade_geometry,
    build_drone_specs,
    calculate_design,
    calculation_summary,
)
from bladecalc.log import log

PLOT_FILE = "radial_distribution.png"


def run(argv):
    make_plot = "--plot" in argv
    names = [arg for arg in argv if not arg.startswith("--")]

    if names:
        log.info("Using preset %s", names[0])
        params = CalculationParameters.from_preset(names[0])
    else:
        params = CalculationParameters()

    result = calculate_design(params)
    log.info("%s", calculation_summary(result))

    conditions = StandardAtmosphere().calculate_conditions(params.operating_altitude)
    assessment = assess_design(
        result, build_drone_specs(params), build_blade_geometry(params), params.target_rpm, conditions
    )
    log.info("Tip Mach %.3f, thrust/weight %.2f", assessment.tip_mach, assessment.thrust_to_weight)

    if make_plot:
        fig = plot_radial_distribution(result.element_data)
        fig.savefig(PLOT_FILE)
        log.info("Radial distribution written to %s", PLOT_FILE)

    return result


if __name__ == "__main__":
    run(sys.argv[1:])
