import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from asset_price_sim.exceptions import InvalidStateError
from asset_price_sim.schema.config import SimulationConfig
from asset_price_sim.simulation.cursor import PlaybackCursor

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _cursor(points: int = 5, **overrides) -> PlaybackCursor:
    params = dict(
        initial_price=100.0,
        drift=0.0,
        volatility=0.01,
        data_points=points,
        step_interval=timedelta(hours=1),
        seed=42,
        initial_timestamp=T0,
    )
    params.update(overrides)
    return PlaybackCursor.from_config(SimulationConfig(**params))


async def _collect(stream):
    return [point async for point in stream]


def test_stream_emits_all_points_in_order():
    cursor = _cursor()
    expected = cursor.peek_remaining()
    received = asyncio.run(_collect(cursor.stream(0.0)))
    assert tuple(received) == expected
    assert cursor.is_exhausted()


def test_stream_resumes_from_current_position():
    cursor = _cursor()
    cursor.skip(2)
    assert len(asyncio.run(_collect(cursor.stream(0.0, resume=True)))) == 3


def test_stream_restarts_when_not_resuming():
    cursor = _cursor()
    cursor.skip(2)
    assert len(asyncio.run(_collect(cursor.stream(0.0, resume=False)))) == 5


def test_stream_on_exhausted_cursor_is_empty():
    cursor = _cursor()
    cursor.skip(5)
    assert asyncio.run(_collect(cursor.stream(0.0))) == []


def test_stream_kind_mismatch():
    cursor = _cursor()
    with pytest.raises(InvalidStateError):
        asyncio.run(_collect(cursor.stream(0.0, kind="candlestick")))
    assert cursor.current_index == 0


def test_typed_candle_stream():
    cursor = _cursor(output_mode="candlestick")
    received = asyncio.run(_collect(cursor.stream(0.0, kind="candlestick")))
    assert [c.kind for c in received] == ["candlestick"] * 5


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        asyncio.run(_collect(_cursor().stream(-1.0)))


def test_stream_paces_between_elements():
    cursor = _cursor(points=4)
    start = time.monotonic()
    asyncio.run(_collect(cursor.stream(0.02)))
    elapsed = time.monotonic() - start
    # three pauses: none after the final element
    assert elapsed >= 0.05
    assert elapsed < 1.0


def test_stop_event_halts_delivery():
    cursor = _cursor(points=10)

    async def run():
        stop = asyncio.Event()
        received = []
        async for point in cursor.stream(0.0, stop_event=stop):
            received.append(point)
            if len(received) == 3:
                stop.set()
        return received

    assert len(asyncio.run(run())) == 3
    assert cursor.current_index == 3


def test_stop_event_cuts_pending_pause_short():
    cursor = _cursor(points=5)
    received = []

    async def run():
        stop = asyncio.Event()

        def consumer(point):
            received.append(point)
            stop.set()

        return await cursor.play(consumer, 5.0, stop_event=stop)

    start = time.monotonic()
    delivered = asyncio.run(run())
    elapsed = time.monotonic() - start
    assert delivered == 1
    assert len(received) == 1
    assert elapsed < 1.0


def test_play_returns_delivered_count():
    cursor = _cursor()
    received = []

    async def run():
        return await cursor.play(received.append, 0.0)

    assert asyncio.run(run()) == 5
    assert len(received) == 5


def test_play_accepts_async_consumer():
    cursor = _cursor()
    received = []

    async def consumer(point):
        await asyncio.sleep(0)
        received.append(point)

    async def run():
        return await cursor.play(consumer, 0.0, resume=False)

    assert asyncio.run(run()) == 5
    assert received[0].timestamp == T0


def test_cancellation_stops_further_delivery():
    cursor = _cursor(points=10)
    received = []

    async def run():
        task = cursor.play(received.append, 10.0)
        while not received:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)

    asyncio.run(run())
    assert len(received) == 1
    assert cursor.current_index == 1


def test_broadcast_fans_out_in_order():
    cursor = _cursor(points=6)
    expected = cursor.peek_remaining()
    a, b, order = [], [], []

    def tracker(point):
        a.append(point)
        order.append("a")

    async def recorder(point):
        b.append(point)
        order.append("b")

    async def run():
        return await cursor.broadcast([tracker, recorder], 0.0)

    assert asyncio.run(run()) == 6
    assert tuple(a) == expected
    assert tuple(b) == expected
    assert order == ["a", "b"] * 6


def test_play_requires_running_loop():
    with pytest.raises(RuntimeError):
        _cursor().play(lambda p: None)


def test_views_stream_independently():
    cursor = _cursor()
    view = cursor.view()

    async def run():
        first = await _collect(view.stream(0.0))
        return first

    assert len(asyncio.run(run())) == 5
    assert cursor.current_index == 0
