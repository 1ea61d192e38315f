"""Signal scoring: fuse indicators and external signals into one confidence.

Each contribution that fires adds a signed weight and appends a reason
string. The reason order is the display order; the numeric result does
not depend on it.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from signal_engine.models.analysis import Indicators
from signal_engine.models.candle import ExternalSignals
from signal_engine.models.config import EngineConfig


@dataclass
class ScoreResult:
    """Confidence score and the reasons that produced it."""

    confidence: Decimal = Decimal("0")
    signals: list[str] = field(default_factory=list)

    def add(self, delta: Decimal, reason: str) -> None:
        self.confidence += delta
        self.signals.append(reason)


class SignalScorer:
    """Score the latest candle from its indicator snapshot."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def score(
        self,
        indicators: Indicators,
        price: Decimal,
        external: ExternalSignals | None = None,
    ) -> ScoreResult:
        """
        Accumulate the confidence score.

        Args:
            indicators: Indicator snapshot for the latest candle
            price: Current price
            external: Funding/open-interest evidence (neutral if None)

        Returns:
            ScoreResult with the summed confidence and ordered reasons
        """
        external = external or ExternalSignals()
        result = ScoreResult()

        self._score_trend(result, indicators, price)
        self._score_money_flow(result, indicators)
        self._score_volume(result, indicators)
        self._score_levels(result, indicators, price)
        self._score_derivatives(result, indicators, external)

        return result

    def _score_trend(self, result: ScoreResult, ind: Indicators, price: Decimal) -> None:
        cfg = self.config
        weight = cfg.trend_weight_high_conviction if ind.is_high_conviction else cfg.trend_weight

        if ind.trend.is_up:
            result.add(weight, ind.trend.value)
            if price > ind.vwma20:
                result.add(cfg.vwma_confirm_weight, "Price > VWMA20")
        elif ind.trend.is_down:
            result.add(-weight, ind.trend.value)
            if price < ind.vwma20:
                result.add(-cfg.vwma_confirm_weight, "Price < VWMA20")

    def _score_money_flow(self, result: ScoreResult, ind: Indicators) -> None:
        cfg = self.config

        if ind.mfi > cfg.mfi_overbought:
            result.add(-cfg.overbought_weight, "Overbought")
        elif ind.mfi < cfg.mfi_oversold:
            weight = (
                cfg.oversold_weight_high_conviction
                if ind.is_high_conviction
                else cfg.oversold_weight
            )
            result.add(weight, "Oversold")

        if ind.cmf > cfg.cmf_threshold:
            result.add(cfg.money_flow_weight, "Strong Money Inflow")
        elif ind.cmf < -cfg.cmf_threshold:
            result.add(-cfg.money_flow_weight, "Strong Money Outflow")

    def _score_volume(self, result: ScoreResult, ind: Indicators) -> None:
        cfg = self.config
        if ind.volume_ratio > cfg.volume_spike_ratio:
            weight = cfg.volume_spike_weight if ind.trend.is_up else -cfg.volume_spike_weight
            result.add(weight, f"Volume Spike ({float(ind.volume_ratio):.1f}x)")

    def _score_levels(self, result: ScoreResult, ind: Indicators, price: Decimal) -> None:
        cfg = self.config
        if _is_near(price, ind.support, cfg.level_proximity):
            result.add(cfg.level_weight, "Near Support")
        elif _is_near(price, ind.resistance, cfg.level_proximity):
            result.add(-cfg.level_weight, "Near Resistance")

    def _score_derivatives(
        self,
        result: ScoreResult,
        ind: Indicators,
        external: ExternalSignals,
    ) -> None:
        cfg = self.config

        if external.funding_rate > cfg.funding_threshold:
            result.add(cfg.funding_weight, "Short Squeeze Risk")
        elif external.funding_rate < -cfg.funding_threshold:
            result.add(-cfg.funding_weight, "Long Squeeze Risk")
        else:
            result.add(Decimal("0"), "Funding Balanced")

        if external.open_interest_delta > 0 and ind.trend.is_up:
            result.add(cfg.open_interest_weight, "OI Rising w/ Uptrend")
        elif external.open_interest_delta > 0 and ind.trend.is_down:
            result.add(-cfg.open_interest_weight, "OI Rising w/ Downtrend")
        else:
            result.add(Decimal("0"), "OI Stable/Decreasing")


def _is_near(price: Decimal, level: Decimal, proximity: Decimal) -> bool:
    """Check if price lies within +/- proximity (ratio) of level."""
    return level * (1 - proximity) <= price <= level * (1 + proximity)
