"""Persistence and tabular export for generated series."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence, Tuple

import pandas as pd

from asset_price_sim.exceptions import AssetPriceSimError, StorageError
from asset_price_sim.schema.asset import Asset
from asset_price_sim.schema.records import Candle, PricePoint, SimplePoint, point_from_dict


def write_atomic(path: Path, text: str) -> None:
    """Write to a temporary sibling then move into place."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(text)
    tmp_path.replace(path)


def _read_json(path: Path) -> Any:
    path = Path(path)
    if not path.exists():
        raise StorageError(f"File not found: {path}")
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise StorageError(f"Invalid JSON in {path}: {exc}") from exc


def save_series(points: Sequence[PricePoint], path: Path) -> Path:
    write_atomic(Path(path), json.dumps([p.to_dict() for p in points], indent=2))
    return Path(path)


def load_series(path: Path) -> Tuple[PricePoint, ...]:
    data = _read_json(path)
    if not isinstance(data, list):
        raise StorageError(f"Expected a JSON array of points in {path}")
    try:
        points = tuple(point_from_dict(item) for item in data)
    except AssetPriceSimError as exc:
        raise StorageError(f"Malformed point in {path}: {exc}") from exc
    if len({p.kind for p in points}) > 1:
        raise StorageError(f"Mixed point kinds in {path}")
    return points


def save_asset(asset: Asset, path: Path) -> Path:
    write_atomic(Path(path), asset.to_json())
    return Path(path)


def load_asset(path: Path) -> Asset:
    data = _read_json(path)
    try:
        return Asset.from_dict(data)
    except AssetPriceSimError as exc:
        raise StorageError(f"Malformed asset in {path}: {exc}") from exc


def series_to_frame(points: Sequence[PricePoint]) -> pd.DataFrame:
    """Tabulate a series indexed by timestamp (candles by open time).

    Intra-step arrays are not tabulated; optional columns are NaN when absent.
    """
    if not points:
        return pd.DataFrame()
    first = points[0]
    if isinstance(first, Candle):
        rows = [
            {
                "open_time": c.open_time,
                "close_time": c.close_time,
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume,
                "supply": c.supply,
                "market_cap": c.market_cap,
            }
            for c in points  # type: ignore[union-attr]
        ]
        return pd.DataFrame(rows).set_index("open_time")
    rows = [
        {
            "timestamp": p.timestamp,
            "price": p.price,
            "volume": p.volume,
            "supply": p.supply,
            "market_cap": p.market_cap,
        }
        for p in points
        if isinstance(p, SimplePoint)
    ]
    return pd.DataFrame(rows).set_index("timestamp")


__all__ = ["load_asset", "load_series", "save_asset", "save_series", "series_to_frame", "write_atomic"]
