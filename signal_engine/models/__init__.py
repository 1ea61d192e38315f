"""Data models for the signal engine."""

from signal_engine.models.analysis import (
    AnalysisResult,
    FinalSignal,
    Indicators,
    PatternTag,
    PositionType,
    Recommendation,
    Trend,
)
from signal_engine.models.candle import (
    Candle,
    CandleSeries,
    ExternalSignals,
    TickerSnapshot,
)
from signal_engine.models.config import EngineConfig

__all__ = [
    "AnalysisResult",
    "Candle",
    "CandleSeries",
    "EngineConfig",
    "ExternalSignals",
    "FinalSignal",
    "Indicators",
    "PatternTag",
    "PositionType",
    "Recommendation",
    "TickerSnapshot",
    "Trend",
]
