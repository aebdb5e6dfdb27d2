"""CLI command that replays a generated series at a fixed pace."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from asset_price_sim.cli.commands.common import build_config
from asset_price_sim.schema.records import Candle, PricePoint
from asset_price_sim.simulation.cursor import PlaybackCursor
from asset_price_sim.utils.logging import get_logger

console = Console()
log = get_logger(__name__, component="cli.play")


def _render(point: PricePoint) -> str:
    if isinstance(point, Candle):
        return (
            f"{point.open_time.isoformat()}  O {point.open:.4f}  H {point.high:.4f}  "
            f"L {point.low:.4f}  C {point.close:.4f}  V {point.volume:,.0f}"
        )
    volume = "" if point.volume is None else f"  V {point.volume:,.0f}"
    return f"{point.timestamp.isoformat()}  {point.price:.4f}{volume}"


async def _run(cursor: PlaybackCursor, interval: float, limit: Optional[int]) -> int:
    stop = asyncio.Event()
    seen = 0

    def show(point: PricePoint) -> None:
        nonlocal seen
        console.print(_render(point))
        seen += 1
        if limit is not None and seen >= limit:
            stop.set()

    return await cursor.play(show, interval, stop_event=stop)


def play(
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON simulation config"),
    interval: float = typer.Option(0.5, "--interval", help="Seconds between emitted elements"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Stop after this many elements"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Output mode: simple | candlestick"),
    points: Optional[int] = typer.Option(None, "--points", help="Number of steps to generate"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
) -> None:
    """Stream a synthetic series to the console in real time."""

    sim_config = build_config(config, mode=mode, points=points, seed=seed)
    cursor = PlaybackCursor.from_config(sim_config, logger=log)
    console.print(f"[bold cyan]Playing {cursor.total} {sim_config.output_mode} points[/bold cyan] (interval={interval}s)")
    try:
        delivered = asyncio.run(_run(cursor, interval, limit))
    except KeyboardInterrupt:
        # click turns a bare KeyboardInterrupt into "Aborted!" with exit code 1
        log.info("Shutdown requested. Stopping playback...")
        raise typer.Exit(code=130)
    log.info("Playback completed", extra={"delivered": delivered, "interval_seconds": interval})


__all__ = ["play"]
