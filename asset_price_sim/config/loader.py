"""Config file loading with precedence: defaults < file < CLI values."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from asset_price_sim.exceptions import ConfigValidationError


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load a JSON or YAML mapping from disk."""
    path = Path(path)
    if not path.exists():
        raise ConfigValidationError(f"Config file not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            content = json.loads(path.read_text())
        elif suffix in {".yml", ".yaml"}:
            content = yaml.safe_load(path.read_text())
        else:
            raise ConfigValidationError("Config file must be JSON or YAML")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Could not parse {path}: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping")
    return content


def load_config_with_precedence(
    config_path: Optional[Path],
    defaults: Mapping[str, Any],
    cli_values: Mapping[str, Any],
    casters: Optional[Mapping[str, Callable[[Any], Any]]] = None,
) -> Dict[str, Any]:
    """Merge defaults, file values and non-None CLI values, in that order."""
    merged: Dict[str, Any] = dict(defaults)
    if config_path is not None:
        merged.update(load_config_file(config_path))
    merged.update({k: v for k, v in cli_values.items() if v is not None})

    for key, cast in (casters or {}).items():
        if merged.get(key) is None:
            continue
        try:
            merged[key] = cast(merged[key])
        except (TypeError, ValueError) as exc:
            raise ConfigValidationError(f"Invalid value for {key}: {merged[key]!r}") from exc
    return merged


__all__ = ["load_config_file", "load_config_with_precedence"]
