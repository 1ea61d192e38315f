"""Map a confidence score and price levels onto a trade recommendation."""

from decimal import Decimal

from signal_engine.models.analysis import Indicators, PositionType, Recommendation
from signal_engine.models.config import EngineConfig


class RecommendationBuilder:
    """Build BUY/SELL/HOLD recommendations with ATR-aware stops.

    Stops are the most conservative of the level, a fixed percentage and
    a multiple of ATR, so a BUY always has stop < entry < target and a
    SELL always has target < entry < stop.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def position_type(self, confidence: Decimal, is_high_conviction: bool) -> PositionType:
        """Thresholds relax from 0.7 to 0.5 under high conviction."""
        cfg = self.config
        threshold = (
            cfg.entry_threshold_high_conviction if is_high_conviction else cfg.entry_threshold
        )
        if confidence >= threshold:
            return PositionType.BUY
        if confidence <= -threshold:
            return PositionType.SELL
        return PositionType.HOLD

    def build(
        self,
        confidence: Decimal,
        price: Decimal,
        indicators: Indicators,
    ) -> Recommendation:
        """
        Build the recommendation for the current price.

        Args:
            confidence: Score from SignalScorer
            price: Current price (entry)
            indicators: Supplies support, resistance, ATR and conviction

        Returns:
            Recommendation; HOLD leaves every price level as None, and a
            position with no positive risk distance is downgraded to HOLD
        """
        cfg = self.config
        high_conviction = indicators.is_high_conviction
        position = self.position_type(confidence, high_conviction)
        multiplier = cfg.reward_multiplier if high_conviction else cfg.base_risk_reward
        atr_offset = cfg.stop_atr_mult * indicators.atr

        entry = price
        if position == PositionType.BUY:
            stop = min(indicators.support, price * (1 - cfg.stop_pct), price - atr_offset)
            risk = entry - stop
            target = entry + risk * multiplier
        elif position == PositionType.SELL:
            stop = max(indicators.resistance, price * (1 + cfg.stop_pct), price + atr_offset)
            risk = stop - entry
            target = entry - risk * multiplier
        else:
            risk = Decimal("0")

        # HOLD, or a non-positive price with no room between entry and stop
        if risk <= 0:
            return Recommendation(
                position_type=PositionType.HOLD,
                confidence=confidence,
                is_high_conviction=high_conviction,
            )

        return Recommendation(
            position_type=position,
            entry_price=entry,
            stop_loss=stop,
            take_profit=target,
            risk_reward_ratio=abs(target - entry) / risk,
            confidence=confidence,
            is_high_conviction=high_conviction,
        )
