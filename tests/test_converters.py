"""Tests for payload decoders."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from signal_engine.models.converters import (
    datetime_to_timestamp_ms,
    parse_external_signals,
    parse_kline,
    parse_klines,
    parse_ticker,
    timestamp_ms_to_datetime,
    to_decimal,
)

KLINE_ROW = [
    1704067200000,
    "42283.58000000",
    "42554.57000000",
    "42261.02000000",
    "42475.23000000",
    "1271.68108000",
    1704081599999,
    "53957248.97378970",
    47134,
    "682.57581000",
    "28957416.81963710",
    "0",
]


def _row(open_time: int, close: str = "100") -> list:
    return [open_time, close, close, close, close, "1", open_time + 1, "100", 1, "0", "0", "0"]


class TestTimestamps:
    def test_ms_round_trip(self):
        dt = timestamp_ms_to_datetime(1704067200000)

        assert dt == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert datetime_to_timestamp_ms(dt) == 1704067200000


class TestToDecimal:
    def test_string_is_exact(self):
        assert to_decimal("0.10000000") == Decimal("0.1")
        assert str(to_decimal("0.10000000")) == "0.10000000"

    def test_numbers(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(0.25) == Decimal("0.25")

    @pytest.mark.parametrize("value", ["abc", None, True, "NaN", "Infinity", [1]])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            to_decimal(value, "price")


class TestParseKline:
    def test_standard_row(self):
        candle = parse_kline(KLINE_ROW)

        assert candle.time == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert candle.open == Decimal("42283.58")
        assert candle.high == Decimal("42554.57")
        assert candle.low == Decimal("42261.02")
        assert candle.close == Decimal("42475.23")
        assert candle.volume == Decimal("1271.68108")
        assert candle.quote_volume == Decimal("53957248.9737897")

    def test_short_row_rejected(self):
        with pytest.raises(ValueError, match="at least 8 fields"):
            parse_kline(KLINE_ROW[:6])

    def test_bad_field_rejected(self):
        row = list(KLINE_ROW)
        row[4] = "not-a-number"
        with pytest.raises(ValueError, match="close"):
            parse_kline(row)

    def test_bad_open_time_rejected(self):
        row = list(KLINE_ROW)
        row[0] = "yesterday"
        with pytest.raises(ValueError, match="open time"):
            parse_kline(row)


class TestParseKlines:
    def test_series(self):
        rows = [_row(1704067200000 + i * 14_400_000, str(100 + i)) for i in range(5)]

        series = parse_klines(rows, symbol="BTCUSDT", interval="4h")

        assert series.symbol == "BTCUSDT"
        assert series.interval == "4h"
        assert len(series) == 5
        assert series.last.close == Decimal("104")

    def test_error_carries_index(self):
        rows = [_row(1704067200000), ["bad"]]
        with pytest.raises(ValueError, match=r"kline\[1\]"):
            parse_klines(rows)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            parse_klines([])

    def test_out_of_order_rejected(self):
        rows = [_row(1704081600000), _row(1704067200000)]
        with pytest.raises(ValueError, match="strictly increasing"):
            parse_klines(rows)


class TestParseTicker:
    def test_ticker(self):
        ticker = parse_ticker(
            {
                "symbol": "BTCUSDT",
                "lastPrice": "42475.23",
                "volume": "30512.1",
                "quoteVolume": "1290000000.5",
            }
        )

        assert ticker.last_price == Decimal("42475.23")
        assert ticker.volume_24h == Decimal("30512.1")
        assert ticker.quote_volume_24h == Decimal("1290000000.5")

    def test_missing_fields(self):
        with pytest.raises(ValueError, match="volume, quoteVolume"):
            parse_ticker({"lastPrice": "1"})

    @pytest.mark.parametrize("price", ["0", "-1.5"])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(ValueError, match="last_price"):
            parse_ticker({"lastPrice": price, "volume": "20", "quoteVolume": "2000000"})


class TestParseExternalSignals:
    def test_none_is_neutral(self):
        signals = parse_external_signals(None)

        assert signals.funding_rate == 0
        assert signals.whale_buy_detected is False

    def test_partial_payload(self):
        signals = parse_external_signals({"fundingRate": "0.0007", "whaleSellDetected": True})

        assert signals.funding_rate == Decimal("0.0007")
        assert signals.open_interest_delta == 0
        assert signals.whale_sell_detected is True
        assert signals.whale_buy_detected is False

    def test_bad_funding_rejected(self):
        with pytest.raises(ValueError, match="fundingRate"):
            parse_external_signals({"fundingRate": "high"})

    @pytest.mark.parametrize(
        "raw,expected",
        [("false", False), ("true", True), (0, False), (1, True), (None, False)],
    )
    def test_flags_are_coerced(self, raw, expected):
        signals = parse_external_signals({"whaleBuyDetected": raw, "whaleSellDetected": raw})

        assert signals.whale_buy_detected is expected
        assert signals.whale_sell_detected is expected

    def test_bad_flag_rejected(self):
        with pytest.raises(ValueError, match="whale_buy_detected"):
            parse_external_signals({"whaleBuyDetected": "maybe"})
