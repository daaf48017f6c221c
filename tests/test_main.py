import os

import pytest

from bladecalc.exceptions import BladeCalcKeyError
from main import PLOT_FILE, run


def test_run_default_parameters(log_file):
    result = run([])
    assert result.thrust > 0
    with open(log_file, encoding="utf-8") as fh:
        assert "Thrust" in fh.read()


def test_run_preset_with_plot(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = run(["micro_drone", "--plot"])
    assert result.thrust > 0
    assert os.path.exists(tmp_path / PLOT_FILE)


def test_run_unknown_preset():
    with pytest.raises(BladeCalcKeyError):
        run(["paper_plane"])
