"""GBM price path generator (simple points and OHLC candles)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from asset_price_sim.exceptions import InvalidStateError
from asset_price_sim.sampling.sampler import Sampler
from asset_price_sim.schema.config import SimulationConfig
from asset_price_sim.schema.records import Candle, PricePoint, SimplePoint, SimulationState
from asset_price_sim.utils.logging import get_logger
from asset_price_sim.utils.profiling import track_time

log = get_logger(__name__, component="generator")


@dataclass
class PathState:
    """Mutable price/supply/time carried from one step to the next.

    Owned by a single generation call and discarded when it returns.
    """

    price: float
    supply: Optional[float]
    timestamp: datetime
    steps: int = 0

    @classmethod
    def initial(cls, config: SimulationConfig) -> "PathState":
        return cls(
            price=config.initial_price,
            supply=config.circulating_supply,
            timestamp=config.initial_timestamp or datetime.now(timezone.utc),
        )

    def snapshot(self, seed: Optional[int]) -> SimulationState:
        return SimulationState(
            current_price=self.price,
            current_time=self.timestamp,
            points_generated=self.steps,
            current_supply=self.supply,
            seed=seed,
        )


class PathGenerator:
    """Materializes ``config.data_points`` points of a GBM path.

    Every call builds a fresh :class:`Sampler` from ``config.seed`` so repeated
    calls with a fixed seed return identical sequences.
    """

    def __init__(
        self,
        config: SimulationConfig,
        *,
        sampler_factory: Callable[[Optional[int]], Sampler] = Sampler,
    ) -> None:
        self.config = config
        self.sampler_factory = sampler_factory
        self.last_state: SimulationState | None = None

    def generate(self) -> Tuple[PricePoint, ...]:
        """Generate in the configured output mode."""
        if self.config.is_candlestick:
            return self.generate_candles()
        return self.generate_simple()

    def generate_simple(self) -> Tuple[SimplePoint, ...]:
        self._require_mode("simple")
        cfg = self.config
        sampler = self.sampler_factory(cfg.seed)
        state = PathState.initial(cfg)
        points: List[SimplePoint] = []

        with track_time("generate_simple") as timing:
            for _ in range(cfg.data_points):
                shock = cfg.volatility * state.price * sampler.standard_normal()
                state.price += cfg.drift * state.price + shock
                if cfg.price_range is not None:
                    state.price = cfg.price_range.clamp(state.price)

                volume = self._draw_volume(sampler)
                self._grow_supply(state)

                points.append(
                    SimplePoint(timestamp=state.timestamp, price=state.price, volume=volume, supply=state.supply)
                )
                state.timestamp = state.timestamp + cfg.step_interval
                state.steps += 1

        self._finish(state, timing.elapsed_ms)
        return tuple(points)

    def generate_candles(self) -> Tuple[Candle, ...]:
        self._require_mode("candlestick")
        cfg = self.config
        sampler = self.sampler_factory(cfg.seed)
        state = PathState.initial(cfg)
        candles: List[Candle] = []

        with track_time("generate_candles") as timing:
            for _ in range(cfg.data_points):
                candles.append(self._build_candle(state, sampler))
                state.steps += 1

        self._finish(state, timing.elapsed_ms)
        return tuple(candles)

    def _build_candle(self, state: PathState, sampler: Sampler) -> Candle:
        cfg = self.config
        ticks = cfg.intra_step_ticks
        dt = 1.0 / ticks
        sqrt_dt = math.sqrt(dt)

        open_price = state.price
        open_time = state.timestamp
        close_time = open_time + cfg.step_interval
        high = low = open_price
        prices: List[float] = []
        stamps: List[datetime] = []

        for j in range(ticks):
            # sqrt(dt) keeps the summed micro-shock variance equal to one full step
            shock = cfg.volatility * state.price * sampler.standard_normal() * sqrt_dt
            state.price += cfg.drift * state.price * dt + shock
            if cfg.price_range is not None:
                state.price = cfg.price_range.clamp(state.price)
            high = max(high, state.price)
            low = min(low, state.price)
            if cfg.capture_intra_step_path:
                prices.append(state.price)
                stamps.append(close_time if j == ticks - 1 else open_time + cfg.step_interval * (j + 1) / ticks)

        volume = self._draw_volume(sampler)
        self._grow_supply(state)
        state.timestamp = close_time

        return Candle(
            open_time=open_time,
            close_time=close_time,
            open=open_price,
            high=high,
            low=low,
            close=state.price,
            volume=0.0 if volume is None else volume,
            supply=state.supply,
            intra_step_prices=tuple(prices) if cfg.capture_intra_step_path else None,
            intra_step_timestamps=tuple(stamps) if cfg.capture_intra_step_path else None,
        )

    def _draw_volume(self, sampler: Sampler) -> Optional[float]:
        cfg = self.config
        if not cfg.include_volume or cfg.base_volume is None:
            return None
        return sampler.log_normal(math.log(cfg.base_volume), cfg.volume_volatility)

    def _grow_supply(self, state: PathState) -> None:
        growth = self.config.supply_growth_rate
        if state.supply is not None and growth is not None:
            state.supply *= 1.0 + growth

    def _require_mode(self, mode: str) -> None:
        if self.config.output_mode != mode:
            raise InvalidStateError(
                f"{mode} generation requested but output_mode is '{self.config.output_mode}'"
            )

    def _finish(self, state: PathState, elapsed_ms: float) -> None:
        self.last_state = state.snapshot(self.config.seed)
        log.info(
            "Path generated",
            extra={
                "output_mode": self.config.output_mode,
                "data_points": state.steps,
                "seed": self.config.seed,
                "duration_ms": elapsed_ms,
            },
        )


def generate_price_series(config: SimulationConfig) -> Tuple[PricePoint, ...]:
    """Generate one series in the configured output mode."""
    return PathGenerator(config).generate()


__all__ = ["PathGenerator", "PathState", "generate_price_series"]
