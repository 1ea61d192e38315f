"""Tests for report formatting."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import orjson

from signal_engine import SignalEngine
from signal_engine.models import Candle, CandleSeries, TickerSnapshot
from signal_engine.report import ReportFormatter, format_decimal
from signal_engine.simulation import simulate_position


def _result(rising: bool):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    candles = []
    for i in range(60):
        close = Decimal(100 + i) if rising else Decimal("100")
        candles.append(
            Candle(
                time=start + timedelta(hours=i),
                open=close - Decimal("0.5") if rising else close,
                high=close + Decimal("0.2") if rising else close,
                low=close - Decimal("1") if rising else close,
                close=close,
                volume=Decimal("100"),
            )
        )
    series = CandleSeries(symbol="BTCUSDT", interval="1h", candles=tuple(candles))
    ticker = TickerSnapshot(
        last_price=candles[-1].close,
        volume_24h=Decimal("250") if rising else Decimal("100"),
        quote_volume_24h=Decimal("2000000"),
    )
    return SignalEngine().analyze(series, ticker)


class TestFormatDecimal:
    def test_places(self):
        assert format_decimal(Decimal("1.234567")) == "1.2346"
        assert format_decimal(Decimal("2"), 2) == "2.00"

    def test_none(self):
        assert format_decimal(None) == "N/A"


class TestToJson:
    def test_decimals_kept_exact(self):
        data = orjson.loads(ReportFormatter.to_json(_result(rising=True)))

        assert data["symbol"] == "BTCUSDT"
        assert data["recommendation"]["confidence"] == "0.55"
        assert data["recommendation"]["position_type"] == "BUY"
        assert data["indicators"]["trend"] == "Strong Uptrend"
        assert data["final_signal"] == {
            "signal": "BUY",
            "confidence": 1,
            "override_reason": None,
        }
        assert data["patterns"] == ["Three White Soldiers"]

    def test_hold_levels_are_null(self):
        data = orjson.loads(ReportFormatter.to_json(_result(rising=False)))

        assert data["recommendation"]["position_type"] == "HOLD"
        assert data["recommendation"]["stop_loss"] is None


class TestPrintConsole:
    def test_buy_with_simulation(self, capsys):
        result = _result(rising=True)
        simulation = simulate_position(result.recommendation, Decimal("169"))

        ReportFormatter.print_console(result, simulation)
        out = capsys.readouterr().out

        assert "BTCUSDT @ 159.0000" in out
        assert "Strong Uptrend" in out
        assert "Position:       BUY" in out
        assert "Signal:         BUY (+1)" in out
        assert "Three White Soldiers" in out
        assert "SIMULATION" in out

    def test_hold_shows_not_available(self, capsys):
        ReportFormatter.print_console(_result(rising=False))
        out = capsys.readouterr().out

        assert "Position:       HOLD" in out
        assert "Stop loss:      N/A" in out
        assert "Risk/reward:    N/A" in out
        assert "SIMULATION" not in out
