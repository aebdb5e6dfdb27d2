"""Random sampling primitives."""

from asset_price_sim.sampling.sampler import Sampler

__all__ = ["Sampler"]
