"""Report formatting for analysis results.

Outputs results to console (formatted block) and JSON.
"""

from __future__ import annotations

from decimal import Decimal

import orjson

from signal_engine.models import AnalysisResult
from signal_engine.simulation import PositionSimulation

NOT_AVAILABLE = "N/A"


def format_decimal(value: Decimal | None, places: int = 4) -> str:
    """Format a decimal to fixed places; None renders as N/A."""
    if value is None:
        return NOT_AVAILABLE
    return f"{float(value):.{places}f}"


def _default(obj):
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError


class ReportFormatter:
    """Format analysis results for display and export."""

    @staticmethod
    def to_json(result: AnalysisResult) -> bytes:
        """Serialise a result; Decimals are kept exact as strings."""
        return orjson.dumps(
            result.model_dump(mode="python"),
            default=_default,
            option=orjson.OPT_INDENT_2,
        )

    @staticmethod
    def print_console(
        result: AnalysisResult,
        simulation: PositionSimulation | None = None,
    ) -> None:
        """Print formatted report to console."""
        ind = result.indicators
        rec = result.recommendation
        final = result.final_signal

        print("\n" + "=" * 60)
        print(f"  {result.symbol or 'ANALYSIS'} @ {format_decimal(result.current_price)}")
        print("=" * 60)

        print("\n" + "-" * 60)
        print("  INDICATORS")
        print("-" * 60)
        print(f"  Trend:          {ind.trend.value}")
        print(f"  MFI:            {format_decimal(ind.mfi, 2)}")
        print(f"  CMF:            {format_decimal(ind.cmf, 3)}")
        print(f"  Volume ratio:   {format_decimal(ind.volume_ratio, 2)}")
        print(f"  VWMA20:         {format_decimal(ind.vwma20)}")
        print(f"  VWMA50:         {format_decimal(ind.vwma50)}")
        print(f"  ATR:            {format_decimal(ind.atr)}")
        print(f"  Support:        {format_decimal(ind.support)}")
        print(f"  Resistance:     {format_decimal(ind.resistance)}")
        conviction = "yes" if ind.is_high_conviction else "no"
        print(f"  High conviction: {conviction}")

        print("\n" + "-" * 60)
        print("  SIGNALS")
        print("-" * 60)
        for signal in result.signals:
            print(f"  - {signal}")

        print("\n" + "-" * 60)
        print("  RECOMMENDATION")
        print("-" * 60)
        print(f"  Position:       {rec.position_type.value}")
        print(f"  Confidence:     {format_decimal(rec.confidence, 2)}")
        print(f"  Entry:          {format_decimal(rec.entry_price)}")
        print(f"  Stop loss:      {format_decimal(rec.stop_loss)}")
        print(f"  Take profit:    {format_decimal(rec.take_profit)}")
        print(f"  Risk/reward:    {format_decimal(rec.risk_reward_ratio, 2)}")

        print("\n" + "-" * 60)
        print("  FINAL SIGNAL")
        print("-" * 60)
        print(f"  Signal:         {final.signal.value} ({final.confidence:+d})")
        if final.override_reason:
            print(f"  Override:       {final.override_reason}")

        if result.patterns:
            print("\n" + "-" * 60)
            print("  PATTERNS")
            print("-" * 60)
            print("  " + ", ".join(p.value for p in result.patterns))

        if simulation is not None:
            print("\n" + "-" * 60)
            print("  SIMULATION")
            print("-" * 60)
            print(
                f"  PnL:            ${format_decimal(simulation.pnl, 2)} "
                f"({format_decimal(simulation.pnl_percent, 2)}%)"
            )
            print(f"  To target:      {format_decimal(simulation.distance_to_tp, 2)}%")
            print(f"  To stop:        {format_decimal(simulation.distance_to_sl, 2)}%")

        print()
