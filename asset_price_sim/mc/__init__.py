"""Path generation and series storage."""

from asset_price_sim.mc.generator import PathGenerator, PathState, generate_price_series

__all__ = ["PathGenerator", "PathState", "generate_price_series"]
