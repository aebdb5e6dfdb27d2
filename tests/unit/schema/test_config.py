from datetime import datetime, timedelta, timezone

import pytest

from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.schema.config import PriceRange, SimulationConfig

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _config(**overrides) -> SimulationConfig:
    params = dict(
        initial_price=100.0,
        drift=0.0,
        volatility=0.01,
        data_points=10,
        step_interval=timedelta(hours=1),
    )
    params.update(overrides)
    return SimulationConfig(**params)


def test_defaults():
    cfg = _config()
    assert cfg.output_mode == "simple"
    assert cfg.intra_step_ticks == 10
    assert cfg.capture_intra_step_path is False
    assert cfg.volume_volatility == pytest.approx(0.4)
    assert cfg.price_range is None and cfg.seed is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"initial_price": 0.0},
        {"initial_price": -5.0},
        {"volatility": -0.01},
        {"data_points": 0},
        {"data_points": 2.5},
        {"intra_step_ticks": 0},
        {"volume_volatility": -0.1},
        {"include_volume": True},
        {"include_volume": True, "base_volume": 0.0},
        {"output_mode": "ohlc"},
        {"step_interval": timedelta(0)},
        {"seed": 1.5},
        {"seed": -1},
        {"initial_price": float("nan")},
        {"initial_price": float("inf")},
        {"drift": float("nan")},
        {"volatility": float("nan")},
        {"volatility": float("inf")},
        {"volume_volatility": float("nan")},
        {"include_volume": True, "base_volume": float("nan")},
        {"circulating_supply": float("nan")},
        {"supply_growth_rate": float("inf")},
        {"price_range": PriceRange(min=110.0, max=120.0)},
    ],
)
def test_rejects_contract_violations(overrides):
    with pytest.raises(ConfigValidationError):
        _config(**overrides)


def test_price_range_requires_min_below_max():
    with pytest.raises(ConfigValidationError):
        PriceRange(min=10.0, max=10.0)


def test_price_range_clamp():
    rng = PriceRange(min=90.0, max=110.0)
    assert rng.clamp(80.0) == 90.0
    assert rng.clamp(120.0) == 110.0
    assert rng.clamp(100.5) == 100.5


def test_replace_revalidates():
    cfg = _config()
    assert cfg.replace(data_points=3).data_points == 3
    with pytest.raises(ConfigValidationError):
        cfg.replace(volatility=-1.0)


def test_to_dict_omits_absent_optionals():
    payload = _config().to_dict()
    assert payload["stepIntervalMicros"] == 3_600_000_000
    for key in ("priceRange", "baseVolume", "circulatingSupply", "supplyGrowthRate", "seed", "initialTimestamp"):
        assert key not in payload


def test_interchange_round_trip():
    cfg = _config(
        price_range=PriceRange(min=50.0, max=150.0),
        output_mode="candlestick",
        include_volume=True,
        base_volume=1_000_000.0,
        circulating_supply=21_000_000.0,
        supply_growth_rate=0.0001,
        seed=42,
        initial_timestamp=T0,
        intra_step_ticks=20,
        capture_intra_step_path=True,
    )
    restored = SimulationConfig.from_json(cfg.to_json())
    assert restored == cfg
    assert cfg.to_dict()["initialTimestamp"] == "2024-01-01T09:00:00+00:00"


def test_from_dict_reports_missing_fields():
    with pytest.raises(ConfigValidationError, match="initialPrice"):
        SimulationConfig.from_dict({"volatility": 0.1, "dataPoints": 5, "stepIntervalMicros": 1})


def test_from_dict_rejects_bad_numbers():
    with pytest.raises(ConfigValidationError):
        SimulationConfig.from_dict(
            {"initialPrice": "abc", "volatility": 0.1, "dataPoints": 5, "stepIntervalMicros": 1}
        )


def test_from_json_rejects_invalid_json():
    with pytest.raises(ConfigValidationError):
        SimulationConfig.from_json("{not json")


@pytest.mark.parametrize(
    "overrides",
    [
        {"dataPoints": 2.7},
        {"dataPoints": True},
        {"stepIntervalMicros": 1.5},
        {"intraStepTicks": "10"},
        {"seed": 4.2},
        {"includeVolume": "false", "baseVolume": 100.0},
        {"captureIntraStepPath": 1},
    ],
)
def test_from_dict_refuses_lossy_coercion(overrides):
    payload = {"initialPrice": 100.0, "volatility": 0.1, "dataPoints": 5, "stepIntervalMicros": 1_000_000}
    payload.update(overrides)
    with pytest.raises(ConfigValidationError):
        SimulationConfig.from_dict(payload)


def test_from_dict_accepts_integral_floats():
    cfg = SimulationConfig.from_dict(
        {"initialPrice": 100.0, "volatility": 0.1, "dataPoints": 5.0, "stepIntervalMicros": 1_000_000, "seed": 3.0}
    )
    assert cfg.data_points == 5 and isinstance(cfg.data_points, int)
    assert cfg.seed == 3
