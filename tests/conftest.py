import os

os.environ["MPLBACKEND"] = "Agg"

import matplotlib

matplotlib.use("Agg", force=True)

import tempfile

import matplotlib.pyplot as plt
import pytest

from bladecalc.core.airfoil import NACA_4412
from bladecalc.core.distributions import LinearDistribution, PowerLawDistribution
from bladecalc.core.models import BladeGeometry, DroneSpecs
from bladecalc.log import set_logging_file

"""
Before running all tests redirect all test logging to a temporary log file
"""


def pytest_configure():
    fo = tempfile.NamedTemporaryFile()
    fo.close()  # Windows workaround for shared files
    pytest.tmp_log_file = fo.name
    set_logging_file(fo.name, level="DEBUG")


@pytest.fixture
def log_file(tmp_path):
    fname = str(tmp_path / "bladecalc_test.log")
    set_logging_file(fname, filemode="w", level="DEBUG")
    yield fname
    set_logging_file(pytest.tmp_log_file, level="DEBUG")


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def reference_drone():
    return DroneSpecs(
        mass=1.5, max_speed=25.0, number_of_blades=2, number_of_motors=4, operating_altitude=100.0
    )


@pytest.fixture
def reference_blade():
    return BladeGeometry(
        radius=0.127,
        root_cutout=0.015,
        chord_distribution=LinearDistribution(0.025, 0.010),
        twist_distribution=PowerLawDistribution(0.35, 0.12, 1.5),
    )


@pytest.fixture
def airfoil():
    return NACA_4412
