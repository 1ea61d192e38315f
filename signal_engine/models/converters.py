"""Decoders from exchange-shaped payloads to the engine's input models.

Kline rows follow the standard exchange tuple layout:
index 0 = open time (ms epoch), 1 = open, 2 = high, 3 = low, 4 = close,
5 = volume, 7 = quote volume. Numeric fields arrive as strings and are
parsed into Decimal without a float round-trip.

These are the only functions in the package that raise on bad input.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

from signal_engine.models.candle import (
    Candle,
    CandleSeries,
    ExternalSignals,
    TickerSnapshot,
)

_KLINE_MIN_FIELDS = 8


# =============================================================================
# Scalar helpers
# =============================================================================

def timestamp_ms_to_datetime(ts: int | float | str) -> datetime:
    """Convert a millisecond Unix timestamp to UTC datetime."""
    return datetime.fromtimestamp(int(ts) / 1000, tz=timezone.utc)


def datetime_to_timestamp_ms(dt: datetime) -> int:
    """Convert datetime to millisecond Unix timestamp."""
    return int(dt.timestamp() * 1000)


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """Parse a string or number into a finite Decimal."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field}: expected a decimal, got {value!r}")
    try:
        result = Decimal(value) if isinstance(value, (str, int)) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"{field}: cannot parse {value!r} as decimal")
    if not result.is_finite():
        raise ValueError(f"{field}: non-finite value {value!r}")
    return result


# =============================================================================
# Kline / ticker / signal decoding
# =============================================================================

def parse_kline(row: Sequence[Any]) -> Candle:
    """Decode one kline row into a Candle.

    Args:
        row: Exchange kline tuple (at least 8 fields)

    Returns:
        Candle model

    Raises:
        ValueError: If the row is too short or a field does not parse
    """
    if isinstance(row, (str, bytes)) or len(row) < _KLINE_MIN_FIELDS:
        raise ValueError(
            f"kline row must have at least {_KLINE_MIN_FIELDS} fields, got {row!r}"
        )
    try:
        time = timestamp_ms_to_datetime(row[0])
    except (TypeError, ValueError, OverflowError, OSError):
        raise ValueError(f"open time: cannot parse {row[0]!r} as ms timestamp")
    return Candle(
        time=time,
        open=to_decimal(row[1], "open"),
        high=to_decimal(row[2], "high"),
        low=to_decimal(row[3], "low"),
        close=to_decimal(row[4], "close"),
        volume=to_decimal(row[5], "volume"),
        quote_volume=to_decimal(row[7], "quote volume"),
    )


def parse_klines(
    rows: Sequence[Sequence[Any]],
    symbol: str = "",
    interval: str = "",
) -> CandleSeries:
    """Decode a list of kline rows into a validated CandleSeries.

    Raises:
        ValueError: On an empty list, a malformed row (message carries
            the row index) or out-of-order candle times
    """
    candles = []
    for i, row in enumerate(rows):
        try:
            candles.append(parse_kline(row))
        except ValueError as e:
            raise ValueError(f"kline[{i}]: {e}") from e
    return CandleSeries(symbol=symbol, interval=interval, candles=tuple(candles))


def parse_ticker(payload: Mapping[str, Any]) -> TickerSnapshot:
    """Decode a 24h ticker payload (``lastPrice``, ``volume``, ``quoteVolume``)."""
    missing = [k for k in ("lastPrice", "volume", "quoteVolume") if k not in payload]
    if missing:
        raise ValueError(f"ticker payload missing fields: {', '.join(missing)}")
    return TickerSnapshot(
        last_price=to_decimal(payload["lastPrice"], "lastPrice"),
        volume_24h=to_decimal(payload["volume"], "volume"),
        quote_volume_24h=to_decimal(payload["quoteVolume"], "quoteVolume"),
    )


def parse_external_signals(payload: Mapping[str, Any] | None) -> ExternalSignals:
    """Decode optional external signals; absent fields stay neutral."""
    if not payload:
        return ExternalSignals()

    funding = payload.get("fundingRate")
    oi_delta = payload.get("openInterestDelta")
    return ExternalSignals(
        funding_rate=Decimal("0") if funding is None else to_decimal(funding, "fundingRate"),
        open_interest_delta=(
            Decimal("0") if oi_delta is None else to_decimal(oi_delta, "openInterestDelta")
        ),
        whale_buy_detected=_flag(payload, "whaleBuyDetected"),
        whale_sell_detected=_flag(payload, "whaleSellDetected"),
    )


def _flag(payload: Mapping[str, Any], key: str) -> Any:
    """Raw flag value for pydantic to coerce; absent or null means False."""
    value = payload.get(key)
    return False if value is None else value
