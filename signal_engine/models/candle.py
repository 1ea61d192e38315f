"""Candle (OHLCV) and market snapshot input models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Candle(BaseModel):
    """Candle (kline) data model."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    quote_volume: Decimal = Decimal("0")

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> Decimal:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> Decimal:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low

    @property
    def upper_wick(self) -> Decimal:
        return self.high - max(self.close, self.open)

    @property
    def lower_wick(self) -> Decimal:
        return min(self.close, self.open) - self.low

    @property
    def body_midpoint(self) -> Decimal:
        return (self.open + self.close) / 2


class CandleSeries(BaseModel):
    """Chronological candles for one symbol/interval.

    The series is immutable and must be non-empty with strictly
    increasing candle times.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = ""
    interval: str = ""
    candles: tuple[Candle, ...]

    @model_validator(mode="after")
    def _validate(self):
        if not self.candles:
            raise ValueError("candle series must contain at least one candle")
        for prev, cur in zip(self.candles, self.candles[1:]):
            if cur.time <= prev.time:
                raise ValueError(
                    f"candle times must be strictly increasing: {cur.time} after {prev.time}"
                )
        return self

    @property
    def last(self) -> Candle:
        return self.candles[-1]

    def get_opens(self) -> list[Decimal]:
        """Get list of open prices."""
        return [c.open for c in self.candles]

    def get_closes(self) -> list[Decimal]:
        """Get list of close prices."""
        return [c.close for c in self.candles]

    def get_highs(self) -> list[Decimal]:
        """Get list of high prices."""
        return [c.high for c in self.candles]

    def get_lows(self) -> list[Decimal]:
        """Get list of low prices."""
        return [c.low for c in self.candles]

    def get_volumes(self) -> list[Decimal]:
        """Get list of volumes."""
        return [c.volume for c in self.candles]

    def tail(self, n: int) -> tuple[Candle, ...]:
        """Get the last ``n`` candles (fewer if the series is shorter)."""
        return self.candles[-n:]

    def __len__(self) -> int:
        return len(self.candles)


class TickerSnapshot(BaseModel):
    """Point-in-time 24h ticker read."""

    model_config = ConfigDict(frozen=True)

    last_price: Decimal = Field(gt=0)
    volume_24h: Decimal
    quote_volume_24h: Decimal


class ExternalSignals(BaseModel):
    """Derivatives and large-trade evidence; neutral when unavailable."""

    model_config = ConfigDict(frozen=True)

    funding_rate: Decimal = Decimal("0")
    open_interest_delta: Decimal = Decimal("0")
    whale_buy_detected: bool = False
    whale_sell_detected: bool = False
