"""Shared option handling for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from asset_price_sim.config.loader import load_config_with_precedence
from asset_price_sim.schema.config import SimulationConfig

DEFAULTS: Dict[str, Any] = {
    "initialPrice": 100.0,
    "drift": 0.0,
    "volatility": 0.02,
    "dataPoints": 50,
    "stepIntervalMicros": 3_600_000_000,
    "outputMode": "simple",
    "includeVolume": False,
    "intraStepTicks": 10,
    "captureIntraStepPath": False,
}


def build_config(
    config: Optional[Path],
    *,
    initial_price: Optional[float] = None,
    drift: Optional[float] = None,
    volatility: Optional[float] = None,
    points: Optional[int] = None,
    step_seconds: Optional[float] = None,
    mode: Optional[str] = None,
    seed: Optional[int] = None,
    base_volume: Optional[float] = None,
    ticks: Optional[int] = None,
    capture_intra: Optional[bool] = None,
) -> SimulationConfig:
    """Resolve defaults, the config file and CLI flags into a SimulationConfig."""
    cli_values = {
        "initialPrice": initial_price,
        "drift": drift,
        "volatility": volatility,
        "dataPoints": points,
        "stepIntervalMicros": None if step_seconds is None else round(step_seconds * 1_000_000),
        "outputMode": mode,
        "seed": seed,
        "baseVolume": base_volume,
        "includeVolume": True if base_volume is not None else None,
        "intraStepTicks": ticks,
        "captureIntraStepPath": capture_intra,
    }
    # integer fields are checked by SimulationConfig.from_dict, which refuses to truncate
    casters = {
        "initialPrice": float,
        "drift": float,
        "volatility": float,
    }
    merged = load_config_with_precedence(config, DEFAULTS, cli_values, casters)
    return SimulationConfig.from_dict(merged)


__all__ = ["DEFAULTS", "build_config"]
