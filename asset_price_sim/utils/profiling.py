"""Timing helpers for generation and playback segments."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from asset_price_sim.utils.logging import get_logger

log = get_logger(__name__, component="profiling")


@dataclass
class Timing:
    wall: float
    cpu: float
    elapsed_ms: float = 0.0
    cpu_ms: float = 0.0


def _now() -> Timing:
    return Timing(wall=time.perf_counter(), cpu=time.process_time())


@contextmanager
def track_time(name: str, *, warn_budget: float | None = None) -> Iterator[Timing]:
    """Measure a segment and log it; ``elapsed_ms`` and ``cpu_ms`` are filled in on exit."""
    start = _now()
    try:
        yield start
    finally:
        end = _now()
        wall_elapsed = end.wall - start.wall
        start.elapsed_ms = round(wall_elapsed * 1000.0, 3)
        start.cpu_ms = round((end.cpu - start.cpu) * 1000.0, 3)
        extra = {"segment": name, "duration_ms": start.elapsed_ms, "cpu_ms": start.cpu_ms}
        if warn_budget is not None and wall_elapsed >= warn_budget:
            log.warning("Performance budget exceeded", extra=extra)
        else:
            log.debug("Segment timing", extra=extra)
