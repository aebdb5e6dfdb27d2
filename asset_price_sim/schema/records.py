"""Immutable output records: simple price points and OHLC candles.

Both record types carry a class-level ``kind`` tag so that a materialized
sequence can be treated as a tagged variant (``PricePoint``) and matched on
without ``isinstance`` chains at every call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Literal, Mapping, Optional, Tuple, Union

from asset_price_sim.exceptions import ConfigValidationError

PointKind = Literal["simple", "candlestick"]


def iso(value: datetime) -> str:
    return value.isoformat()


def parse_time(raw: Any, field: str) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str):
        raise ConfigValidationError(f"{field} must be an ISO-8601 string")
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ConfigValidationError(f"{field} is not a valid ISO-8601 timestamp: {raw!r}") from exc


def opt_float(data: Mapping[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    return None if value is None else float(value)


def as_int(value: Any, field: str) -> int:
    """Integral value; fractional numbers and bools are rejected, not truncated."""
    if isinstance(value, bool):
        raise ConfigValidationError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ConfigValidationError(f"{field} must be an integer, got {value!r}")


def as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigValidationError(f"{field} must be true or false, got {value!r}")
    return value


def require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise ConfigValidationError(f"missing required field '{key}'") from exc


@dataclass(frozen=True, slots=True)
class SimplePoint:
    timestamp: datetime
    price: float
    volume: Optional[float] = None
    supply: Optional[float] = None

    kind: ClassVar[PointKind] = "simple"

    @property
    def market_cap(self) -> Optional[float]:
        if self.supply is None:
            return None
        return self.price * self.supply

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"timestamp": iso(self.timestamp), "price": self.price}
        if self.volume is not None:
            payload["volume"] = self.volume
        if self.supply is not None:
            payload["circulatingSupply"] = self.supply
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimplePoint":
        return cls(
            timestamp=parse_time(require(data, "timestamp"), "timestamp"),
            price=float(require(data, "price")),
            volume=opt_float(data, "volume"),
            supply=opt_float(data, "circulatingSupply"),
        )


@dataclass(frozen=True, slots=True)
class Candle:
    open_time: datetime
    close_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    supply: Optional[float] = None
    intra_step_prices: Optional[Tuple[float, ...]] = None
    intra_step_timestamps: Optional[Tuple[datetime, ...]] = None

    kind: ClassVar[PointKind] = "candlestick"

    def __post_init__(self) -> None:
        prices, stamps = self.intra_step_prices, self.intra_step_timestamps
        if (prices is None) != (stamps is None):
            raise ConfigValidationError("intra-step prices and timestamps must be supplied together")
        if prices is not None and len(prices) != len(stamps):  # type: ignore[arg-type]
            raise ConfigValidationError("intra-step prices and timestamps must have the same length")

    @property
    def market_cap(self) -> Optional[float]:
        if self.supply is None:
            return None
        return self.close * self.supply

    @property
    def has_intra_step_path(self) -> bool:
        return bool(self.intra_step_prices)

    @property
    def intra_step_count(self) -> int:
        return len(self.intra_step_prices) if self.intra_step_prices else 0

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "openTime": iso(self.open_time),
            "closeTime": iso(self.close_time),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
        if self.supply is not None:
            payload["circulatingSupply"] = self.supply
        if self.intra_step_prices is not None and self.intra_step_timestamps is not None:
            payload["intraStepPrices"] = list(self.intra_step_prices)
            payload["intraStepTimestamps"] = [iso(ts) for ts in self.intra_step_timestamps]
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Candle":
        prices = data.get("intraStepPrices")
        stamps = data.get("intraStepTimestamps")
        return cls(
            open_time=parse_time(require(data, "openTime"), "openTime"),
            close_time=parse_time(require(data, "closeTime"), "closeTime"),
            open=float(require(data, "open")),
            high=float(require(data, "high")),
            low=float(require(data, "low")),
            close=float(require(data, "close")),
            volume=float(data.get("volume", 0.0)),
            supply=opt_float(data, "circulatingSupply"),
            intra_step_prices=None if prices is None else tuple(float(p) for p in prices),
            intra_step_timestamps=(
                None if stamps is None else tuple(parse_time(ts, "intraStepTimestamps") for ts in stamps)
            ),
        )


PricePoint = Union[SimplePoint, Candle]


def point_from_dict(data: Mapping[str, Any]) -> PricePoint:
    """Decode either record kind from its interchange form."""
    if "openTime" in data:
        return Candle.from_dict(data)
    return SimplePoint.from_dict(data)


@dataclass(frozen=True, slots=True)
class SimulationState:
    """Snapshot of where a generation call left off."""

    current_price: float
    current_time: datetime
    points_generated: int
    current_supply: Optional[float] = None
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "currentPrice": self.current_price,
            "currentTime": iso(self.current_time),
            "pointsGenerated": self.points_generated,
        }
        if self.current_supply is not None:
            payload["currentSupply"] = self.current_supply
        if self.seed is not None:
            payload["seed"] = self.seed
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationState":
        seed = data.get("seed")
        return cls(
            current_price=float(require(data, "currentPrice")),
            current_time=parse_time(require(data, "currentTime"), "currentTime"),
            points_generated=int(require(data, "pointsGenerated")),
            current_supply=opt_float(data, "currentSupply"),
            seed=None if seed is None else int(seed),
        )


__all__ = [
    "Candle",
    "PointKind",
    "PricePoint",
    "SimplePoint",
    "SimulationState",
    "point_from_dict",
]
