"""Configuration and output record schemas."""

from asset_price_sim.schema.asset import Asset
from asset_price_sim.schema.config import OUTPUT_MODES, OutputMode, PriceRange, SimulationConfig
from asset_price_sim.schema.records import (
    Candle,
    PointKind,
    PricePoint,
    SimplePoint,
    SimulationState,
    point_from_dict,
)

__all__ = [
    "Asset",
    "Candle",
    "OUTPUT_MODES",
    "OutputMode",
    "PointKind",
    "PriceRange",
    "PricePoint",
    "SimplePoint",
    "SimulationConfig",
    "SimulationState",
    "point_from_dict",
]
