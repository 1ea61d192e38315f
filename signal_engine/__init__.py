"""Deterministic market-signal engine.

This package contains pure business logic with no I/O dependencies
(no network, database, or cache access). Callers hand in already-parsed
candles, a ticker snapshot and optional external signals; the engine
returns indicators, a scored recommendation, the override-resolved
final signal and any candlestick patterns on the trailing candles.
"""

from signal_engine.engine import SignalEngine
from signal_engine.models import (
    AnalysisResult,
    Candle,
    CandleSeries,
    EngineConfig,
    ExternalSignals,
    TickerSnapshot,
)

__all__ = [
    "SignalEngine",
    "AnalysisResult",
    "Candle",
    "CandleSeries",
    "EngineConfig",
    "ExternalSignals",
    "TickerSnapshot",
]
