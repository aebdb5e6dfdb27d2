from datetime import datetime, timedelta, timezone

import pytest

from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.mc.generator import PathGenerator
from asset_price_sim.schema.asset import Asset
from asset_price_sim.schema.config import SimulationConfig

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _config(**overrides) -> SimulationConfig:
    params = dict(
        initial_price=50.0,
        drift=0.0001,
        volatility=0.02,
        data_points=10,
        step_interval=timedelta(minutes=15),
        circulating_supply=1_000_000.0,
        supply_growth_rate=0.001,
        seed=9,
        initial_timestamp=T0,
    )
    params.update(overrides)
    return SimulationConfig(**params)


def test_create_starts_from_config():
    asset = Asset.create("BTC", "Bitcoin", _config())
    assert asset.current_price == 50.0
    assert asset.current_supply == 1_000_000.0
    assert asset.price_history == ()


def test_add_points_tracks_latest_state():
    cfg = _config()
    points = PathGenerator(cfg).generate_simple()
    asset = Asset.create("BTC", "Bitcoin", cfg).add_points(points)
    assert len(asset.price_history) == 10
    assert asset.current_price == points[-1].price
    assert asset.current_supply == points[-1].supply
    assert asset.last_updated == points[-1].timestamp


def test_add_no_points_is_identity():
    asset = Asset.create("X", "X", _config())
    assert asset.add_points([]) is asset


def test_resume_config_continues_path():
    cfg = _config()
    points = PathGenerator(cfg).generate_simple()
    asset = Asset.create("BTC", "Bitcoin", cfg).add_points(points)

    resume = asset.resume_config(additional_points=5)
    assert resume.initial_price == pytest.approx(points[-1].price)
    assert resume.circulating_supply == pytest.approx(points[-1].supply)
    assert resume.data_points == 5
    assert resume.initial_timestamp == points[-1].timestamp + cfg.step_interval

    more = PathGenerator(resume).generate_simple()
    assert more[0].timestamp == points[-1].timestamp + cfg.step_interval


def test_asset_json_round_trip():
    cfg = _config()
    asset = Asset.create("ETH", "Ether", cfg).add_points(PathGenerator(cfg).generate_simple())
    assert Asset.from_json(asset.to_json()) == asset


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
def test_asset_from_json_rejects_malformed_input(raw):
    with pytest.raises(ConfigValidationError):
        Asset.from_json(raw)
