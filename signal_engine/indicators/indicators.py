"""Technical indicators for signal scoring.

Kernels take sequences of Decimal (as produced by ``CandleSeries.get_*``)
and run the arithmetic on NumPy float64 arrays, converting results back
to Decimal. Every indicator degrades to a documented default on short
history and floors degenerate denominators instead of producing NaN or
infinity.
"""

from decimal import Decimal
from typing import Sequence

import numpy as np

from signal_engine.models.analysis import Indicators, Trend
from signal_engine.models.candle import CandleSeries, TickerSnapshot
from signal_engine.models.config import EngineConfig

# Floor for negative money flow in MFI
MFI_NEGATIVE_FLOW_FLOOR = 0.0001


def _to_array(values: Sequence[Decimal]) -> np.ndarray:
    return np.array([float(v) for v in values], dtype=np.float64)


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(float(value)))


def _or_floor(value, floor):
    """Replace a zero denominator with ``floor``."""
    return value if value else floor


def average(values: Sequence[Decimal]) -> Decimal:
    """Arithmetic mean; 0 for an empty sequence."""
    return sum(values, Decimal("0")) / _or_floor(len(values), 1)


# =============================================================================
# Moving averages / volatility
# =============================================================================

def vwma(
    closes: Sequence[Decimal],
    volumes: Sequence[Decimal],
    period: int,
) -> list[Decimal]:
    """
    Calculate Volume Weighted Moving Average.

    VWMA = sum(close * volume) / sum(volume) over each window of
    ``period`` candles; the volume sum is floored to 1.

    Args:
        closes: Sequence of close prices
        volumes: Sequence of volumes
        period: Window length

    Returns:
        One value per complete window (``len - period + 1`` values), or a
        zero-filled list of the input length when there is not enough data
    """
    n = len(closes)
    if n < period:
        return [Decimal("0")] * n

    c = _to_array(closes)
    v = _to_array(volumes)
    pv = c * v

    result = []
    for i in range(period - 1, n):
        window = slice(i - period + 1, i + 1)
        result.append(_to_decimal(pv[window].sum() / _or_floor(v[window].sum(), 1.0)))
    return result


def true_range(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
) -> list[Decimal]:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    The first candle has no previous close and uses high - low.
    """
    n = len(highs)
    if n == 0:
        return []

    result = [highs[0] - lows[0]]

    for i in range(1, n):
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - closes[i - 1])
        lc = abs(lows[i] - closes[i - 1])
        result.append(max(hl, hc, lc))

    return result


def atr(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    period: int = 14,
) -> Decimal:
    """
    Calculate Average True Range for the latest candle.

    Simple mean of the most recent ``period`` true ranges (no Wilder
    smoothing). Each of them needs a previous close, so fewer than
    ``period + 1`` candles yields 0.
    """
    if len(closes) < period + 1:
        return Decimal("0")

    tr = true_range(highs, lows, closes)
    return sum(tr[-period:], Decimal("0")) / period


# =============================================================================
# Money flow oscillators
# =============================================================================

def mfi(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    volumes: Sequence[Decimal],
    period: int = 14,
) -> Decimal:
    """
    Calculate Money Flow Index for the latest candle.

    Raw money flow (typical price * volume) counts as positive when the
    close rose versus the previous candle and negative when it fell.
    Flows are summed over the trailing ``period`` candles (all available
    flows on shorter history), negative flow is floored to 0.0001 and
    the result is clamped to [0, 100].
    """
    h = _to_array(highs)
    l = _to_array(lows)
    c = _to_array(closes)
    v = _to_array(volumes)

    money_flow = (h + l + c) / 3.0 * v
    change = np.diff(c)
    positive = np.where(change > 0, money_flow[1:], 0.0)[-period:]
    negative = np.where(change < 0, money_flow[1:], 0.0)[-period:]

    pos_flow = float(positive.sum())
    neg_flow = _or_floor(float(negative.sum()), MFI_NEGATIVE_FLOW_FLOOR)

    value = 100.0 - 100.0 / (1.0 + pos_flow / neg_flow)
    return _to_decimal(min(max(value, 0.0), 100.0))


def cmf(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    volumes: Sequence[Decimal],
    period: int = 20,
) -> Decimal:
    """
    Calculate Chaikin Money Flow for the latest candle.

    multiplier = ((close - low) - (high - close)) / (high - low)
    CMF = sum(multiplier * volume) / sum(volume) over the trailing period.
    Both the candle range and the volume sum are floored to 1.
    """
    h = _to_array(highs)
    l = _to_array(lows)
    c = _to_array(closes)
    v = _to_array(volumes)

    spread = h - l
    multiplier = ((c - l) - (h - c)) / np.where(spread != 0, spread, 1.0)
    flow_volume = multiplier * v

    period_volume = _or_floor(float(v[-period:].sum()), 1.0)
    return _to_decimal(flow_volume[-period:].sum() / period_volume)


# =============================================================================
# Levels / trend
# =============================================================================

def volume_weighted_levels(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    volumes: Sequence[Decimal],
    neighbor_radius: int = 5,
    fallback_window: int = 20,
) -> tuple[Decimal, Decimal]:
    """
    Find volume-weighted support and resistance.

    Interior candles (excluding the first and last two) whose close is a
    strict local maximum or minimum versus both neighbours are pivots.
    Pivot strength = volume / mean volume of [i - r, i + r) * (high - low).
    Pivots stronger than the mean pivot strength are significant.

    Returns:
        Tuple of (support, resistance). Support is the lowest close among
        significant low pivots, resistance the highest close among
        significant high pivots; without one, the lowest low / highest
        high of the last ``fallback_window`` candles is used instead.
    """
    n = len(closes)
    h = _to_array(highs)
    l = _to_array(lows)
    c = _to_array(closes)
    v = _to_array(volumes)

    pivots: list[tuple[int, bool, float]] = []  # (index, is_high, strength)
    for i in range(2, n - 2):
        is_high = c[i] > c[i - 1] and c[i] > c[i + 1]
        is_low = c[i] < c[i - 1] and c[i] < c[i + 1]
        if not (is_high or is_low):
            continue
        window = v[max(i - neighbor_radius, 0) : i + neighbor_radius]
        avg_volume = _or_floor(float(window.mean()) if window.size else 0.0, 1.0)
        strength = v[i] / avg_volume * (h[i] - l[i])
        pivots.append((i, is_high, float(strength)))

    avg_strength = _or_floor(
        float(np.mean([p[2] for p in pivots])) if pivots else 0.0, 1.0
    )
    significant = [p for p in pivots if p[2] > avg_strength]
    low_closes = [closes[i] for i, is_high, _ in significant if not is_high]
    high_closes = [closes[i] for i, is_high, _ in significant if is_high]

    support = min(low_closes) if low_closes else min(lows[-fallback_window:])
    resistance = max(high_closes) if high_closes else max(highs[-fallback_window:])
    return support, resistance


def classify_trend(
    vwma_fast: Sequence[Decimal],
    vwma_slow: Sequence[Decimal],
    price: Decimal,
) -> Trend:
    """
    Classify trend from the two VWMA series and the current price.

    Rules, first match wins:
    - above both, both slopes up    -> Strong Uptrend
    - above fast, fast slope up     -> Weak Uptrend
    - below both, both slopes down  -> Strong Downtrend
    - below fast, fast slope down   -> Weak Downtrend
    - otherwise                     -> Neutral
    """
    if len(vwma_fast) < 2 or len(vwma_slow) < 2:
        return Trend.NEUTRAL

    fast_slope = vwma_fast[-1] - vwma_fast[-2]
    slow_slope = vwma_slow[-1] - vwma_slow[-2]
    above_fast = price > vwma_fast[-1]
    above_slow = price > vwma_slow[-1]

    if above_fast and above_slow and fast_slope > 0 and slow_slope > 0:
        return Trend.STRONG_UP
    if above_fast and fast_slope > 0:
        return Trend.WEAK_UP
    if not above_fast and not above_slow and fast_slope < 0 and slow_slope < 0:
        return Trend.STRONG_DOWN
    if not above_fast and fast_slope < 0:
        return Trend.WEAK_DOWN
    return Trend.NEUTRAL


def volume_ratio(
    current_volume: Decimal,
    volumes: Sequence[Decimal],
    window: int = 30,
) -> Decimal:
    """Ratio of the 24h volume to the mean candle volume of the last ``window`` candles."""
    return current_volume / _or_floor(average(volumes[-window:]), Decimal("1"))


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for all indicators the scoring stage consumes."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def calculate(self, series: CandleSeries, ticker: TickerSnapshot) -> Indicators:
        """
        Calculate the indicator snapshot for the latest candle.

        Args:
            series: Chronological candles (101+ for full fidelity)
            ticker: Current 24h ticker

        Returns:
            Indicators for the current price
        """
        cfg = self.config
        highs = series.get_highs()
        lows = series.get_lows()
        closes = series.get_closes()
        volumes = series.get_volumes()
        price = ticker.last_price

        vwma_fast = vwma(closes, volumes, cfg.vwma_fast_period)
        vwma_slow = vwma(closes, volumes, cfg.vwma_slow_period)
        support, resistance = volume_weighted_levels(
            highs,
            lows,
            closes,
            volumes,
            neighbor_radius=cfg.level_neighbor_radius,
            fallback_window=cfg.level_fallback_window,
        )
        ratio = volume_ratio(ticker.volume_24h, volumes, cfg.volume_avg_window)

        return Indicators(
            trend=classify_trend(vwma_fast, vwma_slow, price),
            mfi=mfi(highs, lows, closes, volumes, cfg.mfi_period),
            cmf=cmf(highs, lows, closes, volumes, cfg.cmf_period),
            vwma20=vwma_fast[-1],
            vwma50=vwma_slow[-1],
            atr=atr(highs, lows, closes, cfg.atr_period),
            support=support,
            resistance=resistance,
            volume_ratio=ratio,
            is_high_conviction=(
                ratio > cfg.high_conviction_volume_ratio
                and ticker.quote_volume_24h > cfg.high_conviction_quote_volume
            ),
        )
