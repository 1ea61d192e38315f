"""CLI entry point: analyse one symbol from saved exchange payloads.

Usage:
    python -m signal_engine --klines btc_4h.json --ticker btc_ticker.json
    python -m signal_engine --klines k.json --ticker t.json --signals s.json --symbol BTCUSDT
    python -m signal_engine --klines k.json --ticker t.json --config engine.yaml --json
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

import orjson

from signal_engine.config import get_settings, load_engine_config
from signal_engine.engine import SignalEngine
from signal_engine.models.converters import (
    parse_external_signals,
    parse_klines,
    parse_ticker,
    to_decimal,
)
from signal_engine.report import ReportFormatter
from signal_engine.simulation import simulate_position

logger = logging.getLogger("signal_engine")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="signal_engine",
        description="Score one symbol's latest candle window",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m signal_engine --klines btc_4h.json --ticker btc_ticker.json
  python -m signal_engine --klines k.json --ticker t.json --signals s.json --json
  python -m signal_engine --klines k.json --ticker t.json --price 65000.5
        """,
    )
    parser.add_argument(
        "--klines",
        type=Path,
        required=True,
        help="JSON file with a list of kline rows",
    )
    parser.add_argument(
        "--ticker",
        type=Path,
        required=True,
        help="JSON file with a 24h ticker object",
    )
    parser.add_argument(
        "--signals",
        type=Path,
        default=None,
        help="JSON file with fundingRate/openInterestDelta/whale flags",
    )
    parser.add_argument(
        "--symbol",
        type=str,
        default="",
        help="Symbol label for the report (e.g. BTCUSDT)",
    )
    parser.add_argument(
        "--interval",
        type=str,
        default="",
        help="Candle interval label (e.g. 4h)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Engine YAML config (default: $SIGNAL_ENGINE_CONFIG_PATH)",
    )
    parser.add_argument(
        "--price",
        type=str,
        default=None,
        help="Live price to mark the recommended position against",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a report",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


def _read_json(path: Path):
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON: {e}") from e


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    level = logging.DEBUG if args.verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_engine_config(args.config)
        series = parse_klines(_read_json(args.klines), args.symbol, args.interval)
        ticker = parse_ticker(_read_json(args.ticker))
        external = parse_external_signals(
            _read_json(args.signals) if args.signals else None
        )
        live_price: Decimal | None = (
            to_decimal(args.price, "price") if args.price is not None else None
        )
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    engine = SignalEngine(config)
    result = engine.analyze(series, ticker, external)

    if args.json:
        sys.stdout.write(ReportFormatter.to_json(result).decode("utf-8") + "\n")
        return 0

    simulation = simulate_position(
        result.recommendation,
        live_price if live_price is not None else result.current_price,
        config,
    )
    ReportFormatter.print_console(result, simulation)
    return 0


if __name__ == "__main__":
    sys.exit(main())
