"""Seedable random draws used by the path generator.

Normal variates come from a single-shot Box-Muller transform: every call
consumes a fresh pair of uniforms and the paired second variate is dropped.
"""

from __future__ import annotations

import math
import numbers

import numpy as np
from numpy.random import PCG64, Generator

from asset_price_sim.exceptions import ConfigValidationError

TWO_PI = 2.0 * math.pi


def _validate_seed(seed: object) -> int | None:
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise ConfigValidationError(f"seed must be an integer, got {type(seed).__name__}")
    if seed < 0:
        raise ConfigValidationError("seed must be >= 0")
    return int(seed)


class Sampler:
    """Uniform, Gaussian and log-normal draws from a PCG64 stream."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = _validate_seed(seed)
        self._rng = Generator(PCG64(self.seed)) if self.seed is not None else np.random.default_rng()

    def uniform(self) -> float:
        """Return a draw from [0, 1)."""
        return float(self._rng.random())

    def _open_uniform(self) -> float:
        # (0, 1]; keeps log(u) finite
        return 1.0 - float(self._rng.random())

    def standard_normal(self) -> float:
        u1 = self._open_uniform()
        u2 = self.uniform()
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(TWO_PI * u2)

    def normal(self, mean: float, stddev: float) -> float:
        return mean + stddev * self.standard_normal()

    def log_normal(self, mean_of_log: float, stddev_of_log: float) -> float:
        """Strictly positive, right-skewed draw (used for traded volume)."""
        return math.exp(self.normal(mean_of_log, stddev_of_log))


__all__ = ["Sampler"]
