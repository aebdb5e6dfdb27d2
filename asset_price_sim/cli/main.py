"""Typer CLI entrypoint with structured error handling."""

from __future__ import annotations

import sys

import typer

from asset_price_sim.cli.commands.generate import generate
from asset_price_sim.cli.commands.play import play
from asset_price_sim.exceptions import ConfigValidationError, InvalidStateError, OutOfRangeError, StorageError
from asset_price_sim.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Synthetic GBM asset price simulator")


app.command()(generate)
app.command()(play)


log = get_logger(__name__, component="cli")


def main() -> None:
    configure_logging(component="cli")
    try:
        app()
    except ConfigValidationError as exc:
        log.error(str(exc))
        raise SystemExit(1)
    except (InvalidStateError, OutOfRangeError) as exc:
        log.error(f"Invalid playback state: {exc}")
        raise SystemExit(2)
    except StorageError as exc:
        log.error(f"Storage failed: {exc}")
        raise SystemExit(3)
    except KeyboardInterrupt:
        log.info("Shutdown requested. Stopping playback...")
        raise SystemExit(130)
    except Exception:
        log.exception("Unhandled exception")
        raise SystemExit(255)


if __name__ == "__main__":
    sys.exit(main())
