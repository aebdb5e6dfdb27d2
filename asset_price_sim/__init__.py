"""Synthetic asset price series from Geometric Brownian Motion.

Architecture:
- sampling: seedable uniform / Box-Muller normal / log-normal draws
- mc.generator: PathGenerator producing simple points or OHLC candles
- simulation.cursor: PlaybackCursor for tick/peek/seek and paced async playback
- schema: configuration, output records, Asset bundle and resume state
- mc.storage: JSON persistence and pandas export
"""

from asset_price_sim.exceptions import (
    AssetPriceSimError,
    ConfigValidationError,
    InvalidStateError,
    OutOfRangeError,
    StorageError,
)
from asset_price_sim.mc.generator import PathGenerator, generate_price_series
from asset_price_sim.sampling.sampler import Sampler
from asset_price_sim.schema import (
    Asset,
    Candle,
    PricePoint,
    PriceRange,
    SimplePoint,
    SimulationConfig,
    SimulationState,
)
from asset_price_sim.simulation.cursor import PlaybackCursor

__version__ = "0.1.0"

__all__ = [
    # Errors
    "AssetPriceSimError",
    "ConfigValidationError",
    "InvalidStateError",
    "OutOfRangeError",
    "StorageError",
    # Core
    "Sampler",
    "PathGenerator",
    "generate_price_series",
    "PlaybackCursor",
    # Records
    "Asset",
    "Candle",
    "PricePoint",
    "PriceRange",
    "SimplePoint",
    "SimulationConfig",
    "SimulationState",
]
