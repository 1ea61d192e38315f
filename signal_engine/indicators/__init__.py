"""Technical indicators (pure math, no I/O)."""

from signal_engine.indicators.indicators import (
    average,
    vwma,
    atr,
    mfi,
    cmf,
    true_range,
    volume_weighted_levels,
    classify_trend,
    volume_ratio,
    IndicatorCalculator,
)

__all__ = [
    "average",
    "vwma",
    "atr",
    "mfi",
    "cmf",
    "true_range",
    "volume_weighted_levels",
    "classify_trend",
    "volume_ratio",
    "IndicatorCalculator",
]
