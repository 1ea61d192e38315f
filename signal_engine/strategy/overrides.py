"""Override pipeline: re-resolve a base recommendation on conflicting evidence.

Rules run in a fixed order against the running state. A rule whose
predicate holds overwrites signal, confidence and reason outright, so a
later rule can undo an earlier one and the last rule to fire owns the
override reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Sequence

from signal_engine.models.analysis import FinalSignal, Indicators, PositionType
from signal_engine.models.candle import CandleSeries, ExternalSignals
from signal_engine.models.config import EngineConfig

logger = logging.getLogger(__name__)

CONFIDENCE_MIN = -2
CONFIDENCE_MAX = 2

_BASELINE_CONFIDENCE = {
    PositionType.BUY: 1,
    PositionType.SELL: -1,
    PositionType.HOLD: 0,
}


@dataclass(frozen=True)
class OverrideInputs:
    """Evidence the pipeline weighs against the base recommendation.

    ``sell_volume_spike`` and the whale flags have no computed source in
    the engine; callers with order-flow data plug them in.
    """

    price_change_pct: Decimal = Decimal("0")
    volume_spike: bool = False
    sell_volume_spike: bool = False
    whale_buy_detected: bool = False
    whale_sell_detected: bool = False

    @classmethod
    def from_market(
        cls,
        series: CandleSeries,
        indicators: Indicators,
        external: ExternalSignals | None = None,
        config: EngineConfig | None = None,
        sell_volume_spike: bool = False,
    ) -> OverrideInputs:
        """Derive momentum and volume evidence from the candles."""
        cfg = config or EngineConfig()
        external = external or ExternalSignals()
        return cls(
            price_change_pct=price_change_pct(series.get_closes(), cfg.momentum_lookback),
            volume_spike=indicators.volume_ratio > cfg.override_volume_spike_ratio,
            sell_volume_spike=sell_volume_spike,
            whale_buy_detected=external.whale_buy_detected,
            whale_sell_detected=external.whale_sell_detected,
        )


@dataclass(frozen=True)
class OverrideState:
    """Running state threaded through the rules."""

    signal: PositionType
    confidence: int
    reason: str | None = None


# A rule returns the new state when its predicate holds, otherwise None.
OverrideRule = Callable[[OverrideState, OverrideInputs, EngineConfig], "OverrideState | None"]


def price_change_pct(closes: Sequence[Decimal], lookback: int = 4) -> Decimal:
    """Percent change of the last close versus the close ``lookback`` candles back.

    Returns 0 when there is not enough history or the base close is zero.
    """
    if len(closes) < lookback + 1:
        return Decimal("0")
    base = closes[-1 - lookback]
    if not base:
        return Decimal("0")
    return (closes[-1] - base) / base * 100


# =============================================================================
# Rules
# =============================================================================

def pump_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if state.signal == PositionType.SELL and inputs.price_change_pct > config.momentum_threshold_pct:
        return OverrideState(PositionType.HOLD, max(state.confidence, 0), "Pump detected")
    return None


def dump_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if state.signal == PositionType.BUY and inputs.price_change_pct < -config.momentum_threshold_pct:
        return OverrideState(PositionType.HOLD, min(state.confidence, 0), "Dump detected")
    return None


def sell_volume_conflict_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if state.signal == PositionType.SELL and inputs.volume_spike:
        return OverrideState(
            PositionType.HOLD, max(state.confidence, 0), "Conflict: High Volume vs SELL"
        )
    return None


def buy_volume_conflict_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if state.signal == PositionType.BUY and inputs.sell_volume_spike:
        return OverrideState(
            PositionType.HOLD,
            min(state.confidence, 0),
            "Conflict: Heavy Sell-Side Volume vs BUY",
        )
    return None


def whale_buy_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if not inputs.whale_buy_detected:
        return None
    signal = {
        PositionType.SELL: PositionType.HOLD,
        PositionType.HOLD: PositionType.BUY,
    }.get(state.signal, state.signal)
    return OverrideState(signal, state.confidence + 1, "Whale Buy Detected")


def whale_sell_rule(state: OverrideState, inputs: OverrideInputs, config: EngineConfig):
    if not inputs.whale_sell_detected:
        return None
    signal = {
        PositionType.BUY: PositionType.HOLD,
        PositionType.HOLD: PositionType.SELL,
    }.get(state.signal, state.signal)
    return OverrideState(signal, state.confidence - 1, "Whale Sell Detected")


# Momentum, then volume conflict, then whale evidence.
DEFAULT_RULES: tuple[OverrideRule, ...] = (
    pump_rule,
    dump_rule,
    sell_volume_conflict_rule,
    buy_volume_conflict_rule,
    whale_buy_rule,
    whale_sell_rule,
)


class OverridePipeline:
    """Apply override rules in sequence and clamp the final confidence."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        rules: Sequence[OverrideRule] = DEFAULT_RULES,
    ):
        self.config = config or EngineConfig()
        self.rules = tuple(rules)

    def resolve(self, position: PositionType, inputs: OverrideInputs) -> FinalSignal:
        """
        Resolve the base position into a FinalSignal.

        Args:
            position: Position type of the base recommendation
            inputs: Momentum, volume and whale evidence

        Returns:
            FinalSignal with confidence clamped to [-2, 2]
        """
        state = OverrideState(position, _BASELINE_CONFIDENCE[position])

        for rule in self.rules:
            updated = rule(state, inputs, self.config)
            if updated is not None:
                logger.debug(
                    "Override %s: %s -> %s (%s)",
                    rule.__name__,
                    state.signal.value,
                    updated.signal.value,
                    updated.reason,
                )
                state = updated

        state = replace(
            state,
            confidence=min(max(state.confidence, CONFIDENCE_MIN), CONFIDENCE_MAX),
        )
        return FinalSignal(
            signal=state.signal,
            confidence=state.confidence,
            override_reason=state.reason,
        )
