"""Command-line entry point for the market analysis engine.

Reads a market snapshot JSON file, runs one analysis and writes the result
as JSON to stdout. Logs go to stderr.

Snapshot layout::

    {
      "candles": [[open_time, open, high, low, close, volume, ...], ...]
                 or [{"timestamp": ..., "open": ..., ..., "volume": ...}, ...],
      "aux": {"current_price": ..., "funding_rate": ..., ...}
    }

Kline rows are coerced leniently (bad numbers become 0). Candle objects are
taken as given, so a missing or non-finite close or volume fails the run
with exit code 2.
"""

import argparse
import json
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any

from btc_signals.analysis.engine import AnalysisEngine
from btc_signals.config import AppSettings
from btc_signals.exceptions import InvalidInputError
from btc_signals.logging import get_logger, setup_logging
from btc_signals.models import AuxiliaryMetrics, Candle, to_num

_CANDLE_FIELDS = ("timestamp", "open", "high", "low", "close", "volume")


def _as_float(value: Any) -> Any:
    """Convert numbers and numeric strings to float; leave anything else for validation."""
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _candle_from_dict(raw: dict[str, Any]) -> Candle:
    return Candle(
        timestamp=int(to_num(raw.get("timestamp"))),
        open=_as_float(raw.get("open", 0.0)),
        high=_as_float(raw.get("high", 0.0)),
        low=_as_float(raw.get("low", 0.0)),
        close=_as_float(raw.get("close")),
        volume=_as_float(raw.get("volume")),
    )


def load_snapshot(path: Path) -> tuple[list[Candle], AuxiliaryMetrics]:
    """Load candles and auxiliary metrics from a snapshot JSON file.

    Args:
        path: Snapshot file path.

    Returns:
        ``(candles, aux)`` ready for AnalysisEngine.analyze.

    Raises:
        InvalidInputError: If the file is not a JSON object of the expected shape.
    """
    try:
        snapshot = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(snapshot, dict):
        raise InvalidInputError(f"{path}: snapshot must be a JSON object")

    candles: list[Candle] = []
    for index, raw in enumerate(snapshot.get("candles") or []):
        if isinstance(raw, dict):
            candles.append(_candle_from_dict(raw))
        elif isinstance(raw, (list, tuple)) and len(raw) >= len(_CANDLE_FIELDS):
            candles.append(Candle.from_kline(raw))
        else:
            raise InvalidInputError(f"candles[{index}]: unrecognised candle {raw!r}")

    raw_aux = snapshot.get("aux") or {}
    if not isinstance(raw_aux, dict):
        raise InvalidInputError(f"{path}: aux must be a JSON object")
    known = {f.name for f in fields(AuxiliaryMetrics)}
    aux = AuxiliaryMetrics(
        **{k: _as_float(v) for k, v in raw_aux.items() if k in known}
    )
    return candles, aux


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="btc-signals",
        description="Run indicator, momentum and pattern analysis on a market snapshot.",
    )
    parser.add_argument("snapshot", type=Path, help="Path to snapshot JSON file")
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indent for the output (default 2)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = _build_parser().parse_args(argv)

    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("btc_signals.main")

    try:
        candles, aux = load_snapshot(args.snapshot)
        analysis = AnalysisEngine(settings).analyze(candles, aux)
    except InvalidInputError as e:
        logger.error("invalid_snapshot", path=str(args.snapshot), error=str(e))
        return 2
    except OSError as e:
        logger.error("snapshot_unreadable", path=str(args.snapshot), error=str(e))
        return 1

    json.dump(analysis.to_dict(), sys.stdout, indent=args.indent)
    sys.stdout.write("\n")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
