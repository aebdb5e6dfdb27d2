"""Real-time playback over generated series."""

from asset_price_sim.simulation.cursor import Consumer, PlaybackCursor

__all__ = ["Consumer", "PlaybackCursor"]
