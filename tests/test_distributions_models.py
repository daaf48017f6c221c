import math

import pytest

from bladecalc.core.distributions import (
    ConstantDistribution,
    LinearDistribution,
    PowerLawDistribution,
    ScaledDistribution,
    TabulatedDistribution,
)
from bladecalc.core.models import BladeGeometry, DroneSpecs, RadialDistributionSummary
from bladecalc.core.units import UnitManager
from bladecalc.exceptions import BladeCalcError, BladeCalcValueError


def test_shapes():
    assert ConstantDistribution(0.02)(0.7) == 0.02
    linear = LinearDistribution(0.025, 0.010)
    assert linear(0.0) == pytest.approx(0.025)
    assert linear(1.0) == pytest.approx(0.010)
    assert linear(0.5) == pytest.approx(0.0175)

    power = PowerLawDistribution(0.35, 0.12, 1.5)
    assert power(0.0) == pytest.approx(0.35)
    assert power(1.0) == pytest.approx(0.12)
    assert power(0.25) == pytest.approx(0.35 - 0.23 * 0.125)


def test_tabulated_distribution():
    dist = TabulatedDistribution((0.0, 0.5, 1.0), (0.03, 0.02, 0.01))
    assert dist(0.25) == pytest.approx(0.025)
    assert dist(1.5) == pytest.approx(0.01)
    with pytest.raises(BladeCalcValueError):
        TabulatedDistribution((0.0,), (0.03,))
    with pytest.raises(BladeCalcValueError):
        TabulatedDistribution((0.0, 0.0), (0.03, 0.02))


def test_scaled_distribution_accepts_plain_callables():
    scaled = ScaledDistribution(lambda x: 1.0 + x, 2.0)
    assert scaled(0.5) == pytest.approx(3.0)


def test_blade_geometry_equality_by_sampling():
    a = BladeGeometry(0.127, 0.015, LinearDistribution(0.025, 0.010), PowerLawDistribution(0.35, 0.12))
    b = BladeGeometry(
        0.127, 0.015, lambda x: 0.025 - 0.015 * x, lambda x: 0.35 - 0.23 * x ** 1.5
    )
    c = BladeGeometry(0.127, 0.015, ConstantDistribution(0.02), PowerLawDistribution(0.35, 0.12))
    assert a == b
    assert a != c
    assert a != BladeGeometry(0.15, 0.015, a.chord_distribution, a.twist_distribution)


def test_blade_geometry_validation():
    with pytest.raises(BladeCalcValueError):
        BladeGeometry(0.0, 0.0, ConstantDistribution(0.02), ConstantDistribution(0.1))
    with pytest.raises(BladeCalcValueError):
        BladeGeometry(0.1, 0.1, ConstantDistribution(0.02), ConstantDistribution(0.1))
    with pytest.raises(BladeCalcValueError):
        BladeGeometry(0.1, -0.01, ConstantDistribution(0.02), ConstantDistribution(0.1))


def test_drone_specs_validation():
    with pytest.raises(BladeCalcError):
        DroneSpecs(mass=1.0, max_speed=10.0, number_of_blades=0, number_of_motors=4, operating_altitude=0.0)
    with pytest.raises(ValueError):
        DroneSpecs(mass=1.0, max_speed=10.0, number_of_blades=2, number_of_motors=0, operating_altitude=0.0)


def test_radial_summary_defaults():
    summary = RadialDistributionSummary()
    assert summary.total_thrust == 0.0
    assert summary.max_lift_to_drag == 0.0


def test_unit_conversion():
    assert UnitManager.rpm_to_omega(60.0) == pytest.approx(2.0 * math.pi)
    assert UnitManager.convert(6500.0, 'rpm', 'angular_speed_to_rad_s') == pytest.approx(UnitManager.rpm_to_omega(6500.0))
    assert UnitManager.convert(0.127, 'mm', 'length_to_m', reverse=True) == pytest.approx(127.0)
    assert UnitManager.convert(math.pi, 'deg', 'angle_to_rad', reverse=True) == pytest.approx(180.0)
    assert UnitManager.convert(36.0, 'km/h', 'speed_to_m_s') == pytest.approx(10.0)
