"""Candlestick pattern predicates and the detector that runs them.

Every predicate is an independent boolean test over the trailing
candles, so several tags can fire on the same window. Predicates receive
their window oldest first: ``(last,)``, ``(prev, last)`` or
``(prev2, prev, last)``.
"""

from decimal import Decimal
from typing import Sequence

from signal_engine.models.analysis import PatternTag
from signal_engine.models.candle import Candle, CandleSeries
from signal_engine.patterns.registry import list_patterns, register_pattern

# Candles the detector needs before it reports anything
MIN_CANDLES = 3

DOJI_BODY_RATIO = Decimal("0.1")
SMALL_BODY_RATIO = Decimal("0.3")
WICK_BODY_MULTIPLE = 2


# =============================================================================
# Single-candle patterns
# =============================================================================

@register_pattern(PatternTag.HAMMER, window=1)
def hammer(candles: Sequence[Candle]) -> bool:
    (last,) = candles
    return last.lower_wick > WICK_BODY_MULTIPLE * last.body_size and last.is_bullish


@register_pattern(PatternTag.INVERTED_HAMMER, window=1)
def inverted_hammer(candles: Sequence[Candle]) -> bool:
    (last,) = candles
    return last.upper_wick > WICK_BODY_MULTIPLE * last.body_size and last.is_bullish


@register_pattern(PatternTag.SHOOTING_STAR, window=1)
def shooting_star(candles: Sequence[Candle]) -> bool:
    (last,) = candles
    return last.upper_wick > WICK_BODY_MULTIPLE * last.body_size and last.is_bearish


@register_pattern(PatternTag.DOJI, window=1)
def doji(candles: Sequence[Candle]) -> bool:
    (last,) = candles
    return last.body_size <= DOJI_BODY_RATIO * last.range_size


@register_pattern(PatternTag.SPINNING_TOP, window=1)
def spinning_top(candles: Sequence[Candle]) -> bool:
    (last,) = candles
    body = last.body_size
    return (
        body <= SMALL_BODY_RATIO * last.range_size
        and last.upper_wick > body
        and last.lower_wick > body
    )


# =============================================================================
# Two-candle patterns
# =============================================================================

@register_pattern(PatternTag.BULLISH_ENGULFING, window=2)
def bullish_engulfing(candles: Sequence[Candle]) -> bool:
    prev, last = candles
    return (
        last.is_bullish
        and prev.is_bearish
        and last.open <= prev.close
        and last.close >= prev.open
    )


@register_pattern(PatternTag.BEARISH_ENGULFING, window=2)
def bearish_engulfing(candles: Sequence[Candle]) -> bool:
    prev, last = candles
    return (
        last.is_bearish
        and prev.is_bullish
        and last.open >= prev.close
        and last.close <= prev.open
    )


@register_pattern(PatternTag.PIERCING_LINE, window=2)
def piercing_line(candles: Sequence[Candle]) -> bool:
    prev, last = candles
    return prev.is_bearish and last.open < prev.low and last.close > prev.body_midpoint


@register_pattern(PatternTag.DARK_CLOUD_COVER, window=2)
def dark_cloud_cover(candles: Sequence[Candle]) -> bool:
    prev, last = candles
    return prev.is_bullish and last.open > prev.high and last.close < prev.body_midpoint


# =============================================================================
# Three-candle patterns
# =============================================================================

@register_pattern(PatternTag.MORNING_STAR, window=3)
def morning_star(candles: Sequence[Candle]) -> bool:
    prev2, prev, last = candles
    return (
        prev2.is_bearish
        and prev.body_size <= SMALL_BODY_RATIO * prev.range_size
        and last.close > prev2.body_midpoint
    )


@register_pattern(PatternTag.EVENING_STAR, window=3)
def evening_star(candles: Sequence[Candle]) -> bool:
    prev2, prev, last = candles
    return (
        prev2.is_bullish
        and prev.body_size <= SMALL_BODY_RATIO * prev.range_size
        and last.close < prev2.body_midpoint
    )


@register_pattern(PatternTag.THREE_WHITE_SOLDIERS, window=3)
def three_white_soldiers(candles: Sequence[Candle]) -> bool:
    prev2, prev, last = candles
    return (
        all(c.is_bullish for c in candles)
        and prev2.close < prev.close < last.close
    )


@register_pattern(PatternTag.THREE_BLACK_CROWS, window=3)
def three_black_crows(candles: Sequence[Candle]) -> bool:
    prev2, prev, last = candles
    return (
        all(c.is_bearish for c in candles)
        and prev2.close > prev.close > last.close
    )


# =============================================================================
# Detector
# =============================================================================

def detect_patterns(series: CandleSeries | Sequence[Candle]) -> list[PatternTag]:
    """
    Run every registered predicate against the trailing candles.

    Args:
        series: CandleSeries or a chronological sequence of candles

    Returns:
        Matching tags in registration order (no duplicates); empty when
        fewer than three candles are available
    """
    candles = series.candles if isinstance(series, CandleSeries) else tuple(series)
    if len(candles) < MIN_CANDLES:
        return []

    window = candles[-MIN_CANDLES:]
    return [rule.tag for rule in list_patterns() if rule.matches(window)]
