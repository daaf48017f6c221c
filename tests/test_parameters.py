from dataclasses import replace

import pytest

from bladecalc.config import DRONE_PRESETS
from bladecalc.exceptions import BladeCalcKeyError, BladeCalcValueError
from bladecalc.simulation.parameters import (
    CalculationParameters,
    build_blade_geometry,
    build_drone_specs,
    calculate_design,
    calculation_summary,
    ensure_valid,
    validate_parameters,
)


def test_defaults_are_valid():
    params = CalculationParameters()
    assert params.target_rpm == 6500
    assert validate_parameters(params) == (True, "Parameters are valid.")


@pytest.mark.parametrize("name", sorted(DRONE_PRESETS))
def test_presets_are_valid(name):
    params = CalculationParameters.from_preset(name)
    assert params.to_dict() == DRONE_PRESETS[name]
    assert validate_parameters(params)[0]


def test_unknown_preset():
    with pytest.raises(BladeCalcKeyError):
        CalculationParameters.from_preset("flying_brick")


@pytest.mark.parametrize(
    "changes",
    [
        {"drone_mass": 0.0},
        {"drone_mass": 51.0},
        {"max_speed": -1.0},
        {"number_of_blades": 0},
        {"number_of_blades": 9},
        {"number_of_motors": 13},
        {"operating_altitude": 10001.0},
        {"blade_radius": 0.01},
        {"blade_radius": 1.5},
        {"root_cutout": 0.25},
        {"target_rpm": 0.0},
        {"target_rpm": 60000.0},
    ],
)
def test_out_of_range_parameters(changes):
    params = replace(CalculationParameters(), **changes)
    is_valid, message = validate_parameters(params)
    assert not is_valid
    assert message
    with pytest.raises(BladeCalcValueError, match=message):
        ensure_valid(params)


def test_builders():
    params = CalculationParameters()
    drone = build_drone_specs(params)
    assert drone.mass == params.drone_mass
    assert drone.number_of_motors == params.number_of_motors

    blade = build_blade_geometry(params)
    assert blade.radius == params.blade_radius
    assert blade.get_chord(0.0) == pytest.approx(0.025)
    assert blade.get_chord(1.0) == pytest.approx(0.010)
    assert blade.get_twist(0.0) == pytest.approx(0.35)
    assert blade.get_twist(1.0) == pytest.approx(0.12)


def test_calculate_design():
    result = calculate_design(CalculationParameters())
    assert result.thrust > 0
    assert len(result.element_data) == 30
    assert result.convergence_info.converged


def test_calculate_design_rejects_invalid_input():
    with pytest.raises(BladeCalcValueError):
        calculate_design(CalculationParameters(number_of_blades=0))


def test_calculation_summary():
    result = calculate_design(CalculationParameters())
    summary = calculation_summary(result)
    assert "Thrust:" in summary
    assert f"{result.thrust:.2f} N" in summary
    assert "converged" in summary
