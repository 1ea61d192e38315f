"""Derived analysis models: indicators, recommendation and final signal."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    """VWMA trend classification."""

    STRONG_UP = "Strong Uptrend"
    WEAK_UP = "Weak Uptrend"
    NEUTRAL = "Neutral"
    WEAK_DOWN = "Weak Downtrend"
    STRONG_DOWN = "Strong Downtrend"

    @property
    def is_up(self) -> bool:
        return self in (Trend.STRONG_UP, Trend.WEAK_UP)

    @property
    def is_down(self) -> bool:
        return self in (Trend.STRONG_DOWN, Trend.WEAK_DOWN)


class PositionType(str, Enum):
    """Recommended position."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class PatternTag(str, Enum):
    """Candlestick patterns recognised on the trailing candles."""

    HAMMER = "Hammer"
    INVERTED_HAMMER = "Inverted Hammer"
    SHOOTING_STAR = "Shooting Star"
    DOJI = "Doji"
    SPINNING_TOP = "Spinning Top"
    BULLISH_ENGULFING = "Bullish Engulfing"
    BEARISH_ENGULFING = "Bearish Engulfing"
    PIERCING_LINE = "Piercing Line"
    DARK_CLOUD_COVER = "Dark Cloud Cover"
    MORNING_STAR = "Morning Star"
    EVENING_STAR = "Evening Star"
    THREE_WHITE_SOLDIERS = "Three White Soldiers"
    THREE_BLACK_CROWS = "Three Black Crows"


class Indicators(BaseModel):
    """Indicator snapshot for the latest candle."""

    model_config = ConfigDict(frozen=True)

    trend: Trend
    mfi: Decimal
    cmf: Decimal
    vwma20: Decimal
    vwma50: Decimal
    atr: Decimal
    support: Decimal
    resistance: Decimal
    volume_ratio: Decimal
    is_high_conviction: bool


class Recommendation(BaseModel):
    """Risk-managed trade recommendation.

    For HOLD the price levels and risk/reward are ``None`` (shown as
    "N/A"), never zero.
    """

    model_config = ConfigDict(frozen=True)

    position_type: PositionType
    entry_price: Decimal | None = None
    stop_loss: Decimal | None = None
    take_profit: Decimal | None = None
    risk_reward_ratio: Decimal | None = None
    confidence: Decimal
    is_high_conviction: bool = False

    @property
    def risk_amount(self) -> Decimal | None:
        """Get the risk amount (distance to stop loss)."""
        if self.entry_price is None or self.stop_loss is None:
            return None
        return abs(self.entry_price - self.stop_loss)

    @property
    def reward_amount(self) -> Decimal | None:
        """Get the reward amount (distance to take profit)."""
        if self.entry_price is None or self.take_profit is None:
            return None
        return abs(self.take_profit - self.entry_price)


class FinalSignal(BaseModel):
    """Signal after the override pipeline."""

    model_config = ConfigDict(frozen=True)

    signal: PositionType
    confidence: int = Field(ge=-2, le=2)
    override_reason: str | None = None


class AnalysisResult(BaseModel):
    """Everything one analysis call produces for the presentation layer."""

    model_config = ConfigDict(frozen=True)

    symbol: str = ""
    current_price: Decimal
    indicators: Indicators
    signals: list[str]
    recommendation: Recommendation
    final_signal: FinalSignal
    patterns: list[PatternTag] = Field(default_factory=list)
