import math
from dataclasses import replace

import pytest

from bladecalc.config import SolverSettings
from bladecalc.core.airfoil import AirfoilTable
from bladecalc.core.atmosphere import StandardAtmosphere
from bladecalc.core.solvers.bemt import BEMTEngine, propeller_efficiency


@pytest.fixture
def engine():
    return BEMTEngine()


def test_reference_hover(engine, reference_drone, reference_blade, airfoil):
    result = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)

    assert result.thrust > 0
    assert result.torque > 0
    assert result.power == pytest.approx(result.torque * 6500 * 2 * math.pi / 60)
    assert 0 < result.efficiency <= 1
    assert result.convergence_info.converged
    assert result.convergence_info.max_residual < 1e-8
    assert len(result.convergence_info.element_wise_iterations) == 30
    assert result.convergence_info.residual_history[-1] <= 1e-8
    assert result.element_data is None


def test_motor_count_scales_linearly(engine, reference_drone, reference_blade, airfoil):
    single = engine.calculate_propeller(replace(reference_drone, number_of_motors=1), reference_blade, airfoil, 6500)
    quad = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
    octo = engine.calculate_propeller(replace(reference_drone, number_of_motors=8), reference_blade, airfoil, 6500)

    assert quad.thrust == pytest.approx(4 * single.thrust, rel=1e-12)
    assert octo.thrust == pytest.approx(2 * quad.thrust, rel=1e-12)
    assert octo.torque == pytest.approx(2 * quad.torque, rel=1e-12)


def test_hover_figure_of_merit_is_per_rotor(engine, reference_drone, reference_blade, airfoil):
    single = engine.calculate_propeller(replace(reference_drone, number_of_motors=1), reference_blade, airfoil, 6500)
    quad = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
    octo = engine.calculate_propeller(replace(reference_drone, number_of_motors=8), reference_blade, airfoil, 6500)

    assert 0 < single.efficiency <= 1
    assert quad.efficiency == pytest.approx(single.efficiency, rel=1e-12)
    assert octo.efficiency == pytest.approx(single.efficiency, rel=1e-12)


def test_repeated_calls_are_identical(engine, reference_drone, reference_blade, airfoil):
    first = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500, include_element_data=True)
    second = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500, include_element_data=True)
    assert first == second


def test_accepts_prepared_airfoil_table(engine, reference_drone, reference_blade, airfoil):
    from_data = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
    from_table = engine.calculate_propeller(reference_drone, reference_blade, AirfoilTable(airfoil), 6500)
    assert from_data == from_table


def test_element_data(engine, reference_drone, reference_blade, airfoil):
    result = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500, include_element_data=True)
    elements = result.element_data

    assert len(elements) == 30
    dr = (0.127 - 0.015) / 30
    assert elements[0].radius == pytest.approx(0.015 + dr / 2)
    assert elements[-1].radius == pytest.approx(0.127 - dr / 2)
    assert all(a.radius < b.radius for a, b in zip(elements, elements[1:]))

    per_rotor = sum(e.thrust for e in elements)
    assert result.thrust == pytest.approx(per_rotor * reference_drone.number_of_motors)
    assert [e.iterations for e in elements] == list(result.convergence_info.element_wise_iterations)


def test_forward_flight(engine, reference_drone, reference_blade, airfoil):
    hover = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
    cruise = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500, flight_speed=10.0)

    assert math.isfinite(cruise.thrust)
    assert cruise.thrust < hover.thrust
    if cruise.power > 0:
        assert cruise.efficiency == pytest.approx(cruise.thrust * 10.0 / cruise.power)


def test_fallback_keeps_result_finite(reference_drone, reference_blade, airfoil):
    engine = BEMTEngine(SolverSettings(divergence_iterations=0, divergence_residual=-1.0))
    result = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
    info = result.convergence_info

    assert math.isfinite(result.thrust)
    assert math.isfinite(result.power)
    assert info.element_wise_iterations == (1,) * 30
    assert info.iterations == 1
    assert info.max_residual == 0.01
    assert info.residual_history == (0.01,)
    assert not info.converged


def test_non_convergence_is_reported_not_raised(reference_drone, reference_blade, airfoil, log_file):
    engine = BEMTEngine(SolverSettings(epsilon=0.0, max_iterations=3))
    result = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)

    assert not result.convergence_info.converged
    assert result.convergence_info.iterations == 3
    with open(log_file, encoding="utf-8") as fh:
        assert "converge" in fh.read()


def test_number_of_elements_setting(reference_drone, reference_blade, airfoil):
    engine = BEMTEngine(SolverSettings(number_of_elements=10))
    result = engine.calculate_propeller(reference_drone, reference_blade, airfoil, 6500, include_element_data=True)
    assert len(result.element_data) == 10
    assert len(result.convergence_info.element_wise_iterations) == 10


def test_efficiency_helper():
    assert propeller_efficiency(10.0, 0.0, 0.0, 1.2, 0.05) == 0.0
    assert propeller_efficiency(10.0, -5.0, 5.0, 1.2, 0.05) == 0.0
    assert propeller_efficiency(10.0, 100.0, 5.0, 1.2, 0.05) == pytest.approx(0.5)
    expected = 10.0 * math.sqrt(10.0 / (2 * 1.2 * 0.05)) / 100.0
    assert propeller_efficiency(10.0, 100.0, 0.0, 1.2, 0.05) == pytest.approx(expected)


def test_atmosphere_defaults_to_standard(reference_drone, reference_blade, airfoil):
    default = BEMTEngine(atmosphere=None)
    explicit = BEMTEngine(atmosphere=StandardAtmosphere())
    assert isinstance(default.atmosphere, StandardAtmosphere)
    assert default.calculate_propeller(reference_drone, reference_blade, airfoil, 6500) == \
        explicit.calculate_propeller(reference_drone, reference_blade, airfoil, 6500)
