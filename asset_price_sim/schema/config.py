"""Simulation configuration schema and validation."""

from __future__ import annotations

import dataclasses
import json
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Literal, Mapping, Optional

from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.schema.records import as_bool, as_int, iso, opt_float, parse_time, require

OutputMode = Literal["simple", "candlestick"]
OUTPUT_MODES = ("simple", "candlestick")

DEFAULT_VOLUME_VOLATILITY = 0.4
DEFAULT_INTRA_STEP_TICKS = 10


@dataclass(frozen=True, slots=True)
class PriceRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if not self.min < self.max:
            raise ConfigValidationError(f"price_range.min ({self.min}) must be < price_range.max ({self.max})")

    def clamp(self, price: float) -> float:
        if price < self.min:
            return self.min
        if price > self.max:
            return self.max
        return price

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PriceRange":
        return cls(min=float(require(data, "min")), max=float(require(data, "max")))


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Read-only parameters for one generation call.

    Validation runs in ``__post_init__`` so an invalid configuration can never
    reach the generator.
    """

    initial_price: float
    drift: float
    volatility: float
    data_points: int
    step_interval: timedelta
    price_range: Optional[PriceRange] = None
    output_mode: OutputMode = "simple"
    include_volume: bool = False
    base_volume: Optional[float] = None
    volume_volatility: float = DEFAULT_VOLUME_VOLATILITY
    circulating_supply: Optional[float] = None
    supply_growth_rate: Optional[float] = None
    seed: Optional[int] = None
    initial_timestamp: Optional[datetime] = None
    intra_step_ticks: int = DEFAULT_INTRA_STEP_TICKS
    capture_intra_step_path: bool = False

    def __post_init__(self) -> None:
        # comparisons are written positively so NaN fails them
        if not (math.isfinite(self.initial_price) and self.initial_price > 0):
            raise ConfigValidationError("initial_price must be a finite number > 0")
        if not math.isfinite(self.drift):
            raise ConfigValidationError("drift must be finite")
        if not (math.isfinite(self.volatility) and self.volatility >= 0):
            raise ConfigValidationError("volatility must be a finite number >= 0")
        if isinstance(self.data_points, bool) or not isinstance(self.data_points, int) or self.data_points <= 0:
            raise ConfigValidationError("data_points must be a positive integer")
        if not isinstance(self.step_interval, timedelta) or self.step_interval <= timedelta(0):
            raise ConfigValidationError("step_interval must be a positive timedelta")
        if self.output_mode not in OUTPUT_MODES:
            raise ConfigValidationError(f"output_mode must be one of {list(OUTPUT_MODES)}")
        if self.include_volume:
            if self.base_volume is None:
                raise ConfigValidationError("base_volume is required when include_volume is true")
            if not (math.isfinite(self.base_volume) and self.base_volume > 0):
                raise ConfigValidationError("base_volume must be a finite number > 0")
        if not (math.isfinite(self.volume_volatility) and self.volume_volatility >= 0):
            raise ConfigValidationError("volume_volatility must be a finite number >= 0")
        if self.circulating_supply is not None and not (
            math.isfinite(self.circulating_supply) and self.circulating_supply >= 0
        ):
            raise ConfigValidationError("circulating_supply must be a finite number >= 0")
        if self.supply_growth_rate is not None and not math.isfinite(self.supply_growth_rate):
            raise ConfigValidationError("supply_growth_rate must be finite")
        if isinstance(self.intra_step_ticks, bool) or not isinstance(self.intra_step_ticks, int) or self.intra_step_ticks <= 0:
            raise ConfigValidationError("intra_step_ticks must be a positive integer")
        if self.price_range is not None and not self.price_range.contains(self.initial_price):
            raise ConfigValidationError("initial_price must lie within price_range")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0):
            raise ConfigValidationError("seed must be a non-negative integer when set")

    @property
    def is_candlestick(self) -> bool:
        return self.output_mode == "candlestick"

    def replace(self, **changes: Any) -> "SimulationConfig":
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "initialPrice": self.initial_price,
            "drift": self.drift,
            "volatility": self.volatility,
            "dataPoints": self.data_points,
            "stepIntervalMicros": self.step_interval // timedelta(microseconds=1),
            "outputMode": self.output_mode,
            "includeVolume": self.include_volume,
            "volumeVolatility": self.volume_volatility,
            "intraStepTicks": self.intra_step_ticks,
            "captureIntraStepPath": self.capture_intra_step_path,
        }
        if self.price_range is not None:
            payload["priceRange"] = self.price_range.to_dict()
        if self.base_volume is not None:
            payload["baseVolume"] = self.base_volume
        if self.circulating_supply is not None:
            payload["circulatingSupply"] = self.circulating_supply
        if self.supply_growth_rate is not None:
            payload["supplyGrowthRate"] = self.supply_growth_rate
        if self.seed is not None:
            payload["seed"] = self.seed
        if self.initial_timestamp is not None:
            payload["initialTimestamp"] = iso(self.initial_timestamp)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        if not isinstance(data, Mapping):
            raise ConfigValidationError("configuration must be a JSON object")
        price_range = data.get("priceRange")
        seed = data.get("seed")
        initial_timestamp = data.get("initialTimestamp")
        try:
            return cls(
                initial_price=float(require(data, "initialPrice")),
                drift=float(data.get("drift", 0.0)),
                volatility=float(require(data, "volatility")),
                data_points=as_int(require(data, "dataPoints"), "dataPoints"),
                step_interval=timedelta(microseconds=as_int(require(data, "stepIntervalMicros"), "stepIntervalMicros")),
                price_range=None if price_range is None else PriceRange.from_dict(price_range),
                output_mode=data.get("outputMode", "simple"),
                include_volume=as_bool(data.get("includeVolume", False), "includeVolume"),
                base_volume=opt_float(data, "baseVolume"),
                volume_volatility=float(data.get("volumeVolatility", DEFAULT_VOLUME_VOLATILITY)),
                circulating_supply=opt_float(data, "circulatingSupply"),
                supply_growth_rate=opt_float(data, "supplyGrowthRate"),
                seed=None if seed is None else as_int(seed, "seed"),
                initial_timestamp=(
                    None if initial_timestamp is None else parse_time(initial_timestamp, "initialTimestamp")
                ),
                intra_step_ticks=as_int(data.get("intraStepTicks", DEFAULT_INTRA_STEP_TICKS), "intraStepTicks"),
                capture_intra_step_path=as_bool(data.get("captureIntraStepPath", False), "captureIntraStepPath"),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigValidationError(f"invalid configuration value: {exc}") from exc

    @classmethod
    def from_json(cls, raw: str) -> "SimulationConfig":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"invalid configuration JSON: {exc}") from exc
        return cls.from_dict(data)


__all__ = [
    "DEFAULT_INTRA_STEP_TICKS",
    "DEFAULT_VOLUME_VOLATILITY",
    "OUTPUT_MODES",
    "OutputMode",
    "PriceRange",
    "SimulationConfig",
]
