"""Playback cursor over a materialized price series.

The cursor never regenerates data: it owns an index into an immutable tuple
produced by one :class:`PathGenerator` call. Index mutation is not safe for
concurrent callers; serialize ``tick``/``skip``/``seek_to`` on one instance
and hand independent consumers their own :meth:`PlaybackCursor.view`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import suppress
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence, Tuple, Union

from asset_price_sim.exceptions import InvalidStateError, OutOfRangeError
from asset_price_sim.mc.generator import PathGenerator
from asset_price_sim.schema.config import SimulationConfig
from asset_price_sim.schema.records import Candle, PointKind, PricePoint, SimplePoint
from asset_price_sim.utils.logging import get_logger

Consumer = Callable[[PricePoint], Union[None, Awaitable[None]]]

log = get_logger(__name__, component="cursor")


async def _pause(interval: float, stop_event: asyncio.Event | None) -> None:
    """Sleep ``interval`` seconds, returning early once ``stop_event`` is set."""
    if stop_event is None:
        await asyncio.sleep(interval)
        return
    with suppress(asyncio.TimeoutError):
        await asyncio.wait_for(stop_event.wait(), interval)


class PlaybackCursor:
    """Tick/peek/seek access plus paced async playback."""

    def __init__(
        self,
        points: Sequence[PricePoint],
        *,
        kind: PointKind | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._points: Tuple[PricePoint, ...] = tuple(points)
        kinds = {p.kind for p in self._points}
        if len(kinds) > 1:
            raise InvalidStateError("a cursor cannot hold both simple points and candles")
        if kinds and kind is not None and kind not in kinds:
            raise InvalidStateError(f"sequence holds {kinds.pop()} points, not {kind}")
        self.kind: PointKind | None = kinds.pop() if kinds else kind
        self._index = 0
        self.log = logger or log

    @classmethod
    def from_config(cls, config: SimulationConfig, **kwargs: Any) -> "PlaybackCursor":
        """Run one generation call up front and wrap its output."""
        points = PathGenerator(config).generate()
        return cls(points, kind=config.output_mode, **kwargs)

    # -- position ---------------------------------------------------------

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    @property
    def has_more(self) -> bool:
        return self._index < len(self._points)

    def is_exhausted(self) -> bool:
        return self._index >= len(self._points)

    def remaining_count(self) -> int:
        return len(self._points) - self._index

    def progress_fraction(self) -> float:
        if not self._points:
            return 1.0
        return self._index / len(self._points)

    # -- consumption ------------------------------------------------------

    def tick(self) -> Optional[PricePoint]:
        """Return the current element and advance, or None once exhausted."""
        if self._index >= len(self._points):
            return None
        point = self._points[self._index]
        self._index += 1
        return point

    def peek(self, offset: int = 0) -> Optional[PricePoint]:
        index = self._index + offset
        if index < 0 or index >= len(self._points):
            return None
        return self._points[index]

    def skip(self, count: int) -> int:
        """Advance by up to ``count`` elements; returns how many were skipped."""
        if count < 0:
            raise ValueError("count must be >= 0")
        advanced = min(count, len(self._points) - self._index)
        self._index += advanced
        return advanced

    def seek_to(self, index: int) -> None:
        if index < 0 or index >= len(self._points):
            raise OutOfRangeError(f"index {index} outside [0, {len(self._points) - 1}]")
        self._index = index

    def reset(self) -> None:
        self._index = 0

    def peek_remaining(self) -> Tuple[PricePoint, ...]:
        return self._points[self._index :]

    def consume_remaining(self) -> Tuple[PricePoint, ...]:
        remaining = self._points[self._index :]
        self._index = len(self._points)
        return remaining

    def view(self) -> "PlaybackCursor":
        """Independent cursor over the same series, at the same position."""
        other = PlaybackCursor(self._points, kind=self.kind, logger=self.log)
        other._index = self._index
        return other

    # -- typed access -----------------------------------------------------

    def _require_kind(self, kind: PointKind, accessor: str) -> None:
        if self.kind is not None and self.kind != kind:
            raise InvalidStateError(f"{accessor}() requires {kind} output, cursor holds {self.kind}")

    def next_candle(self) -> Optional[Candle]:
        self._require_kind("candlestick", "next_candle")
        return self.tick()  # type: ignore[return-value]

    def next_simple_point(self) -> Optional[SimplePoint]:
        self._require_kind("simple", "next_simple_point")
        return self.tick()  # type: ignore[return-value]

    def peek_candle(self, offset: int = 0) -> Optional[Candle]:
        self._require_kind("candlestick", "peek_candle")
        return self.peek(offset)  # type: ignore[return-value]

    def peek_simple_point(self, offset: int = 0) -> Optional[SimplePoint]:
        self._require_kind("simple", "peek_simple_point")
        return self.peek(offset)  # type: ignore[return-value]

    # -- timed playback ---------------------------------------------------

    async def stream(
        self,
        interval: float = 0.0,
        *,
        resume: bool = True,
        kind: PointKind | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> AsyncIterator[PricePoint]:
        """Yield remaining elements, sleeping ``interval`` seconds between them.

        ``resume=False`` rewinds to the first element before playback. The
        stop event is checked before every emission and cuts a pending pause
        short; cancelling the consuming task interrupts the pause and nothing
        further is delivered.
        """
        if interval < 0:
            raise ValueError("interval must be >= 0")
        if kind is not None:
            self._require_kind(kind, "stream")
        if not resume:
            self.reset()

        delivered = 0
        self.log.debug("Playback started", extra={"interval_seconds": interval, "delivered": 0})
        try:
            while stop_event is None or not stop_event.is_set():
                point = self.tick()
                if point is None:
                    break
                yield point
                delivered += 1
                if self.is_exhausted():
                    break
                await _pause(interval, stop_event)
        finally:
            self.log.debug("Playback stopped", extra={"interval_seconds": interval, "delivered": delivered})

    def play(
        self,
        consumer: Consumer,
        interval: float = 0.0,
        *,
        resume: bool = True,
        kind: PointKind | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> "asyncio.Task[int]":
        """Schedule playback into ``consumer`` on the running loop.

        The returned task resolves to the number of delivered elements and may
        be cancelled at any time.
        """
        return self.broadcast([consumer], interval, resume=resume, kind=kind, stop_event=stop_event)

    def broadcast(
        self,
        observers: Sequence[Consumer],
        interval: float = 0.0,
        *,
        resume: bool = True,
        kind: PointKind | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> "asyncio.Task[int]":
        """Deliver each element to every observer, in order, before pacing."""
        loop = asyncio.get_running_loop()
        return loop.create_task(
            self._drive(tuple(observers), interval, resume=resume, kind=kind, stop_event=stop_event)
        )

    async def _drive(
        self,
        observers: Tuple[Consumer, ...],
        interval: float,
        *,
        resume: bool,
        kind: PointKind | None,
        stop_event: asyncio.Event | None,
    ) -> int:
        playback = self.stream(interval, resume=resume, kind=kind, stop_event=stop_event)
        delivered = 0
        try:
            async for point in playback:
                for observer in observers:
                    result = observer(point)
                    if inspect.isawaitable(result):
                        await result
                delivered += 1
        finally:
            await playback.aclose()
        return delivered


__all__ = ["Consumer", "PlaybackCursor"]
