"""CLI command that generates a series and writes it to disk."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from asset_price_sim.cli.commands.common import build_config
from asset_price_sim.exceptions import ConfigValidationError
from asset_price_sim.mc.generator import PathGenerator
from asset_price_sim.mc.storage import save_series, series_to_frame, write_atomic
from asset_price_sim.utils.logging import get_logger

console = Console()
log = get_logger(__name__, component="cli.generate")


def generate(
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON simulation config"),
    initial_price: Optional[float] = typer.Option(None, "--initial-price", help="Starting price"),
    drift: Optional[float] = typer.Option(None, help="Drift per step"),
    volatility: Optional[float] = typer.Option(None, help="Volatility per step"),
    points: Optional[int] = typer.Option(None, "--points", help="Number of steps to generate"),
    step_seconds: Optional[float] = typer.Option(None, "--step-seconds", help="Duration of one step in seconds"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Output mode: simple | candlestick"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
    base_volume: Optional[float] = typer.Option(None, "--base-volume", help="Enable volume with this mean level"),
    ticks: Optional[int] = typer.Option(None, "--ticks", help="Intra-step ticks per candle"),
    capture_intra: Optional[bool] = typer.Option(
        None, "--capture-intra/--no-capture-intra", help="Store intra-step paths on candles"
    ),
    output: Optional[Path] = typer.Option(None, "--output", help="Write series to .json or .csv"),
) -> None:
    """Generate a synthetic GBM price series."""

    sim_config = build_config(
        config,
        initial_price=initial_price,
        drift=drift,
        volatility=volatility,
        points=points,
        step_seconds=step_seconds,
        mode=mode,
        seed=seed,
        base_volume=base_volume,
        ticks=ticks,
        capture_intra=capture_intra,
    )
    series = PathGenerator(sim_config).generate()
    frame = series_to_frame(series)

    if output is not None:
        suffix = output.suffix.lower()
        if suffix == ".json":
            save_series(series, output)
        elif suffix == ".csv":
            write_atomic(output, frame.to_csv())
        else:
            raise ConfigValidationError("--output must end in .json or .csv")
        log.info("Series written", extra={"output_mode": sim_config.output_mode, "data_points": len(series)})

    price_col = "close" if sim_config.is_candlestick else "price"
    table = Table(title=f"{sim_config.output_mode} series ({len(series)} points, seed={sim_config.seed})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("First", f"{frame[price_col].iloc[0]:.4f}")
    table.add_row("Last", f"{frame[price_col].iloc[-1]:.4f}")
    table.add_row("Min", f"{frame[price_col].min():.4f}")
    table.add_row("Max", f"{frame[price_col].max():.4f}")
    if output is not None:
        table.add_row("Output", str(output))
    console.print(table)


__all__ = ["generate"]
