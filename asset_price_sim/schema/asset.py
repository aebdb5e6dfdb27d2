"""Asset bundle: configuration plus accumulated history for save/resume."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.schema.config import SimulationConfig
from asset_price_sim.schema.records import SimplePoint, iso, opt_float, parse_time, require


@dataclass(frozen=True, slots=True)
class Asset:
    id: str
    name: str
    config: SimulationConfig
    price_history: Tuple[SimplePoint, ...] = ()
    current_price: Optional[float] = None
    current_supply: Optional[float] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def create(cls, id: str, name: str, config: SimulationConfig) -> "Asset":
        return cls(
            id=id,
            name=name,
            config=config,
            current_price=config.initial_price,
            current_supply=config.circulating_supply,
            last_updated=datetime.now(timezone.utc),
        )

    def add_points(self, points: Iterable[SimplePoint]) -> "Asset":
        """Append points and move current price/supply/time to the latest one."""
        new_points = tuple(points)
        if not new_points:
            return self
        latest = new_points[-1]
        return replace(
            self,
            price_history=self.price_history + new_points,
            current_price=latest.price,
            current_supply=latest.supply if latest.supply is not None else self.current_supply,
            last_updated=latest.timestamp,
        )

    def resume_config(self, additional_points: int | None = None) -> SimulationConfig:
        """Configuration that continues the path from the current state.

        The next point starts one step after ``last_updated`` when history
        exists.
        """
        initial_timestamp = self.config.initial_timestamp
        if self.price_history and self.last_updated is not None:
            initial_timestamp = self.last_updated + self.config.step_interval
        return self.config.replace(
            initial_price=self.current_price if self.current_price is not None else self.config.initial_price,
            circulating_supply=(
                self.current_supply if self.current_supply is not None else self.config.circulating_supply
            ),
            data_points=additional_points if additional_points is not None else self.config.data_points,
            initial_timestamp=initial_timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "config": self.config.to_dict(),
            "priceHistory": [p.to_dict() for p in self.price_history],
        }
        if self.current_price is not None:
            payload["currentPrice"] = self.current_price
        if self.current_supply is not None:
            payload["currentSupply"] = self.current_supply
        if self.last_updated is not None:
            payload["lastUpdated"] = iso(self.last_updated)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Asset":
        if not isinstance(data, Mapping):
            raise ConfigValidationError("asset must be a JSON object")
        last_updated = data.get("lastUpdated")
        return cls(
            id=str(require(data, "id")),
            name=str(require(data, "name")),
            config=SimulationConfig.from_dict(require(data, "config")),
            price_history=tuple(SimplePoint.from_dict(p) for p in data.get("priceHistory", [])),
            current_price=opt_float(data, "currentPrice"),
            current_supply=opt_float(data, "currentSupply"),
            last_updated=None if last_updated is None else parse_time(last_updated, "lastUpdated"),
        )

    @classmethod
    def from_json(cls, raw: str) -> "Asset":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"invalid asset JSON: {exc}") from exc
        return cls.from_dict(data)


__all__ = ["Asset"]
