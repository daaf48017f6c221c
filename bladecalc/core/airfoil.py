# bladecalc/core/airfoil.py
import math
from typing import Optional, Tuple

import numpy as np

from bladecalc.config import (
    COMPRESSIBILITY_MACH_THRESHOLD,
    MAX_CORRECTED_MACH,
    NO_DATA_COEFFICIENTS,
)
from bladecalc.core.models import AirfoilData

Coefficients = Tuple[float, float, float]


class AirfoilTable:
    """
    Bilinear lookup in a tabulated polar (Reynolds number x angle of attack).
    Reynolds numbers outside the table use the nearest row; angles of attack
    outside a row return the no-data coefficients instead of extrapolating.
    """

    def __init__(self, data: AirfoilData):
        self.data = data
        self._reynolds = np.array(data.reynolds_numbers)
        self._rows = [
            (np.array(data.alpha[i]), np.array(data.cl[i]), np.array(data.cd[i]), np.array(data.cm[i]))
            for i in range(len(data.reynolds_numbers))
        ]

    def _find_reynolds_index(self, reynolds: float) -> Optional[int]:
        for i in range(len(self._reynolds) - 1):
            if self._reynolds[i] <= reynolds <= self._reynolds[i + 1]:
                return i
        return None

    def _closest_reynolds_index(self, reynolds: float) -> int:
        return int(np.argmin(np.abs(self._reynolds - reynolds)))

    def _interpolate_row(self, index: int, alpha: float) -> Coefficients:
        alphas, cls, cds, cms = self._rows[index]
        if not alphas[0] <= alpha <= alphas[-1]:
            return NO_DATA_COEFFICIENTS
        return (
            float(np.interp(alpha, alphas, cls)),
            float(np.interp(alpha, alphas, cds)),
            float(np.interp(alpha, alphas, cms)),
        )

    def get_coefficients(self, alpha: float, reynolds: float) -> Coefficients:
        lower = self._find_reynolds_index(reynolds)
        if lower is None:
            return self._interpolate_row(self._closest_reynolds_index(reynolds), alpha)

        lower_re = self._reynolds[lower]
        upper_re = self._reynolds[lower + 1]
        t = float((reynolds - lower_re) / (upper_re - lower_re))

        c1 = self._interpolate_row(lower, alpha)
        c2 = self._interpolate_row(lower + 1, alpha)
        # (1 - t) * a + t * b reproduces either row exactly at t = 0 or t = 1
        return tuple((1.0 - t) * a + t * b for a, b in zip(c1, c2))

    @staticmethod
    def apply_compressibility_correction(cl: float, cd: float, mach: float) -> Tuple[float, float]:
        """Prandtl-Glauert. Mach is capped below 1 so beta stays real."""
        if mach <= COMPRESSIBILITY_MACH_THRESHOLD:
            return cl, cd
        mach = min(mach, MAX_CORRECTED_MACH)
        beta = math.sqrt(1.0 - mach * mach)
        return cl / beta, cd / beta


# NACA 4412 polar, alpha in radians (-10° to 30/35°)
NACA_4412 = AirfoilData(
    name="NACA 4412",
    reynolds_numbers=(100000, 200000, 500000, 1000000, 2000000),
    alpha=(
        (-0.1745, -0.0873, 0.0, 0.0873, 0.1745, 0.2618, 0.3491, 0.4363, 0.5236),
        (-0.1745, -0.0873, 0.0, 0.0873, 0.1745, 0.2618, 0.3491, 0.4363, 0.5236),
        (-0.1745, -0.0873, 0.0, 0.0873, 0.1745, 0.2618, 0.3491, 0.4363, 0.5236, 0.6109),
        (-0.1745, -0.0873, 0.0, 0.0873, 0.1745, 0.2618, 0.3491, 0.4363, 0.5236, 0.6109),
        (-0.1745, -0.0873, 0.0, 0.0873, 0.1745, 0.2618, 0.3491, 0.4363, 0.5236, 0.6109),
    ),
    cl=(
        (-0.3, -0.15, 0.1, 0.35, 0.6, 0.8, 0.95, 1.05, 1.1),
        (-0.3, -0.15, 0.15, 0.45, 0.75, 0.95, 1.1, 1.2, 1.25),
        (-0.3, -0.15, 0.2, 0.55, 0.85, 1.05, 1.2, 1.3, 1.35, 1.3),
        (-0.3, -0.15, 0.25, 0.6, 0.9, 1.1, 1.25, 1.35, 1.4, 1.35),
        (-0.3, -0.15, 0.3, 0.65, 0.95, 1.15, 1.3, 1.4, 1.45, 1.4),
    ),
    cd=(
        (0.03, 0.02, 0.018, 0.02, 0.025, 0.035, 0.05, 0.07, 0.095),
        (0.025, 0.017, 0.015, 0.016, 0.02, 0.028, 0.04, 0.058, 0.08),
        (0.02, 0.014, 0.012, 0.013, 0.016, 0.022, 0.032, 0.047, 0.067, 0.095),
        (0.018, 0.012, 0.011, 0.012, 0.015, 0.02, 0.028, 0.041, 0.06, 0.085),
        (0.016, 0.011, 0.01, 0.011, 0.014, 0.018, 0.025, 0.037, 0.055, 0.078),
    ),
    cm=(
        (-0.05, -0.04, -0.03, -0.02, -0.01, 0.0, 0.01, 0.02, 0.03),
        (-0.05, -0.04, -0.03, -0.02, -0.01, 0.0, 0.01, 0.02, 0.03),
        (-0.05, -0.04, -0.03, -0.02, -0.01, 0.0, 0.01, 0.02, 0.03, 0.04),
        (-0.05, -0.04, -0.03, -0.02, -0.01, 0.0, 0.01, 0.02, 0.03, 0.04),
        (-0.05, -0.04, -0.03, -0.02, -0.01, 0.0, 0.01, 0.02, 0.03, 0.04),
    ),
)
