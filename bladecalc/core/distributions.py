# bladecalc/core/distributions.py
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from bladecalc.exceptions import BladeCalcValueError

# Anything mapping a normalized radial position (0 = root, 1 = tip) to a value
Distribution = Callable[[float], float]


class _Shape:
    def evaluate(self, normalized_radius: float) -> float:
        raise NotImplementedError

    def __call__(self, normalized_radius: float) -> float:
        return self.evaluate(normalized_radius)


@dataclass(frozen=True)
class ConstantDistribution(_Shape):
    value: float

    def evaluate(self, normalized_radius: float) -> float:
        return self.value


@dataclass(frozen=True)
class LinearDistribution(_Shape):
    root: float
    tip: float

    def evaluate(self, normalized_radius: float) -> float:
        return self.root + (self.tip - self.root) * normalized_radius


@dataclass(frozen=True)
class PowerLawDistribution(_Shape):
    """root + (tip - root) * x**exponent, biased toward the root for exponent > 1."""
    root: float
    tip: float
    exponent: float = 1.5

    def evaluate(self, normalized_radius: float) -> float:
        return self.root + (self.tip - self.root) * normalized_radius ** self.exponent


@dataclass(frozen=True)
class TabulatedDistribution(_Shape):
    """Piecewise-linear through (position, value) stations, held flat beyond the ends."""
    positions: Sequence[float]
    values: Sequence[float]

    def __post_init__(self):
        if len(self.positions) != len(self.values) or len(self.positions) < 2:
            raise BladeCalcValueError("Tabulated distribution needs at least two matching stations.")
        if np.any(np.diff(self.positions) <= 0):
            raise BladeCalcValueError("Tabulated stations must be strictly ascending.")

    def evaluate(self, normalized_radius: float) -> float:
        return float(np.interp(normalized_radius, self.positions, self.values))


@dataclass(frozen=True)
class ScaledDistribution(_Shape):
    """Wraps another distribution and multiplies it by a constant factor."""
    base: Distribution
    factor: float

    def evaluate(self, normalized_radius: float) -> float:
        return self.base(normalized_radius) * self.factor
