"""Engine configuration model."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class EngineConfig(BaseModel):
    """Every period, threshold, weight and multiplier the engine uses.

    Injected at construction and frozen; the engine never mutates it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Indicator periods
    vwma_fast_period: int = 20
    vwma_slow_period: int = 50
    atr_period: int = 14
    mfi_period: int = 14
    cmf_period: int = 20
    volume_avg_window: int = 30  # candles averaged for volume_ratio
    level_fallback_window: int = 20  # candles scanned when no pivot qualifies
    level_neighbor_radius: int = 5  # pivot strength averages volume over [i-r, i+r)

    # High conviction: volume_ratio > ratio AND quote_volume_24h > quote volume
    high_conviction_volume_ratio: Decimal = Decimal("1.5")
    high_conviction_quote_volume: Decimal = Decimal("1000000")

    # Scoring weights
    trend_weight: Decimal = Decimal("0.2")
    trend_weight_high_conviction: Decimal = Decimal("0.4")
    vwma_confirm_weight: Decimal = Decimal("0.1")
    overbought_weight: Decimal = Decimal("0.3")
    oversold_weight: Decimal = Decimal("0.2")
    oversold_weight_high_conviction: Decimal = Decimal("0.4")
    money_flow_weight: Decimal = Decimal("0.25")
    volume_spike_weight: Decimal = Decimal("0.3")
    level_weight: Decimal = Decimal("0.2")
    funding_weight: Decimal = Decimal("0.1")
    open_interest_weight: Decimal = Decimal("0.1")

    # Scoring thresholds
    mfi_overbought: Decimal = Decimal("80")
    mfi_oversold: Decimal = Decimal("20")
    cmf_threshold: Decimal = Decimal("0.2")
    volume_spike_ratio: Decimal = Decimal("2")
    level_proximity: Decimal = Decimal("0.02")  # +/- 2% of support/resistance
    funding_threshold: Decimal = Decimal("0.0005")

    # Position thresholds on confidence
    entry_threshold: Decimal = Decimal("0.7")
    entry_threshold_high_conviction: Decimal = Decimal("0.5")

    # Risk management
    base_risk_reward: Decimal = Decimal("2")
    high_conviction_multiplier: Decimal = Decimal("1.5")
    stop_pct: Decimal = Decimal("0.03")
    stop_atr_mult: Decimal = Decimal("2")

    # Override pipeline
    momentum_lookback: int = 4
    momentum_threshold_pct: Decimal = Decimal("3")
    override_volume_spike_ratio: Decimal = Decimal("5")

    # Position simulation
    position_size: Decimal = Decimal("10")  # quote currency per simulated trade
    leverage: Decimal = Decimal("20")

    # Top-coin board
    min_confidence: Decimal = Decimal("0.7")
    max_top_coins: int = 6

    @property
    def reward_multiplier(self) -> Decimal:
        """Risk/reward multiplier applied to high-conviction setups."""
        return self.base_risk_reward * self.high_conviction_multiplier

    @property
    def min_candles(self) -> int:
        """Series length needed for full-fidelity indicators."""
        return max(self.vwma_slow_period, self.atr_period + 1, 100) + 1
