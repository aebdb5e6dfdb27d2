import math

import numpy as np
import pytest
from scipy import stats

from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.sampling.sampler import Sampler


class _FixedSource:
    def __init__(self, values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def test_same_seed_gives_identical_draw_sequence():
    a, b = Sampler(seed=7), Sampler(seed=7)
    draws_a = [a.uniform(), a.standard_normal(), a.normal(1.0, 2.0), a.log_normal(0.0, 0.5)]
    draws_b = [b.uniform(), b.standard_normal(), b.normal(1.0, 2.0), b.log_normal(0.0, 0.5)]
    assert draws_a == draws_b


def test_different_seeds_diverge():
    assert Sampler(seed=1).standard_normal() != Sampler(seed=2).standard_normal()


def test_uniform_in_half_open_unit_interval():
    sampler = Sampler(seed=3)
    values = [sampler.uniform() for _ in range(5000)]
    assert min(values) >= 0.0
    assert max(values) < 1.0


def test_box_muller_uses_one_fresh_pair_per_call():
    sampler = Sampler(seed=0)
    # u1 = 1 - r1 = exp(-0.5) so sqrt(-2 ln u1) == 1; u2 = 0 so cos == 1
    sampler._rng = _FixedSource([1.0 - math.exp(-0.5), 0.0, 1.0 - math.exp(-0.5), 0.5])
    assert sampler.standard_normal() == pytest.approx(1.0)
    assert sampler.standard_normal() == pytest.approx(-1.0)


def test_zero_from_source_never_reaches_log():
    sampler = Sampler(seed=0)
    sampler._rng = _FixedSource([0.0, 0.25])
    value = sampler.standard_normal()
    assert math.isfinite(value)
    assert value == pytest.approx(0.0)


def test_standard_normal_matches_gaussian_distribution():
    sampler = Sampler(seed=2024)
    draws = np.array([sampler.standard_normal() for _ in range(5000)])
    assert abs(draws.mean()) < 0.06
    assert draws.std() == pytest.approx(1.0, abs=0.05)
    assert stats.kstest(draws, "norm").pvalue > 1e-4


def test_normal_scales_and_shifts():
    sampler = Sampler(seed=11)
    draws = np.array([sampler.normal(5.0, 0.5) for _ in range(4000)])
    assert draws.mean() == pytest.approx(5.0, abs=0.05)
    assert draws.std() == pytest.approx(0.5, abs=0.03)


def test_log_normal_is_positive_and_right_skewed():
    sampler = Sampler(seed=5)
    draws = np.array([sampler.log_normal(math.log(1_000_000), 0.4) for _ in range(4000)])
    assert (draws > 0).all()
    assert np.mean(draws) > np.median(draws)
    assert np.median(draws) == pytest.approx(1_000_000, rel=0.05)


@pytest.mark.parametrize("seed", [1.5, True, -1, "42"])
def test_rejects_seeds_that_cannot_be_reproduced(seed):
    with pytest.raises(ConfigValidationError):
        Sampler(seed=seed)


def test_numpy_integer_seed_accepted():
    assert Sampler(seed=np.int64(9)).seed == 9


def test_unseeded_sampler_still_draws():
    assert 0.0 <= Sampler().uniform() < 1.0
