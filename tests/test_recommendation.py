"""Tests for recommendation building."""

from decimal import Decimal

import pytest

from signal_engine.models import EngineConfig, Indicators, PositionType, Trend
from signal_engine.strategy import RecommendationBuilder


def _indicators(
    support="95",
    resistance="105",
    atr="1",
    high_conviction=False,
) -> Indicators:
    return Indicators(
        trend=Trend.NEUTRAL,
        mfi=Decimal("50"),
        cmf=Decimal("0"),
        vwma20=Decimal("100"),
        vwma50=Decimal("100"),
        atr=Decimal(atr),
        support=Decimal(support),
        resistance=Decimal(resistance),
        volume_ratio=Decimal("1"),
        is_high_conviction=high_conviction,
    )


class TestPositionType:
    @pytest.mark.parametrize(
        "confidence,high_conviction,expected",
        [
            ("0.7", False, PositionType.BUY),
            ("0.69", False, PositionType.HOLD),
            ("-0.7", False, PositionType.SELL),
            ("-0.69", False, PositionType.HOLD),
            ("0.5", True, PositionType.BUY),
            ("0.49", True, PositionType.HOLD),
            ("-0.5", True, PositionType.SELL),
            ("0", True, PositionType.HOLD),
        ],
    )
    def test_thresholds(self, confidence, high_conviction, expected):
        builder = RecommendationBuilder()
        assert builder.position_type(Decimal(confidence), high_conviction) == expected


class TestBuild:
    def test_buy_uses_support_stop(self):
        rec = RecommendationBuilder().build(Decimal("0.8"), Decimal("100"), _indicators())

        assert rec.position_type == PositionType.BUY
        assert rec.entry_price == Decimal("100")
        assert rec.stop_loss == Decimal("95")
        assert rec.take_profit == Decimal("110")
        assert rec.risk_reward_ratio == Decimal("2")

    def test_buy_high_conviction_widens_target(self):
        rec = RecommendationBuilder().build(
            Decimal("0.6"), Decimal("100"), _indicators(high_conviction=True)
        )

        assert rec.position_type == PositionType.BUY
        assert rec.take_profit == Decimal("115")
        assert rec.risk_reward_ratio == Decimal("3")
        assert rec.is_high_conviction is True

    def test_buy_uses_atr_stop_when_wider(self):
        rec = RecommendationBuilder().build(
            Decimal("0.8"), Decimal("100"), _indicators(support="99", atr="5")
        )

        assert rec.stop_loss == Decimal("90")
        assert rec.take_profit == Decimal("120")

    def test_buy_uses_percent_stop_when_support_above_price(self):
        rec = RecommendationBuilder().build(
            Decimal("0.8"), Decimal("100"), _indicators(support="120", atr="0")
        )

        assert rec.stop_loss == Decimal("97")

    def test_sell_uses_resistance_stop(self):
        rec = RecommendationBuilder().build(Decimal("-0.8"), Decimal("100"), _indicators())

        assert rec.position_type == PositionType.SELL
        assert rec.stop_loss == Decimal("105")
        assert rec.take_profit == Decimal("90")
        assert rec.risk_reward_ratio == Decimal("2")

    def test_hold_has_no_levels(self):
        rec = RecommendationBuilder().build(Decimal("0.1"), Decimal("100"), _indicators())

        assert rec.position_type == PositionType.HOLD
        assert rec.entry_price is None
        assert rec.stop_loss is None
        assert rec.take_profit is None
        assert rec.risk_reward_ratio is None
        assert rec.confidence == Decimal("0.1")

    @pytest.mark.parametrize("confidence", ["0.9", "-0.9"])
    def test_zero_price_downgrades_to_hold(self, confidence):
        rec = RecommendationBuilder().build(
            Decimal(confidence),
            Decimal("0"),
            _indicators(support="100", resistance="0", atr="0", high_conviction=True),
        )

        assert rec.position_type == PositionType.HOLD
        assert rec.stop_loss is None
        assert rec.risk_reward_ratio is None
        assert rec.confidence == Decimal(confidence)

    def test_custom_risk_reward(self):
        config = EngineConfig(base_risk_reward=Decimal("3"))
        rec = RecommendationBuilder(config).build(
            Decimal("0.8"), Decimal("100"), _indicators()
        )

        assert rec.take_profit == Decimal("115")


class TestLevelOrdering:
    @pytest.mark.parametrize("price", ["0.5", "100", "43000"])
    @pytest.mark.parametrize("support,resistance", [("0", "0"), ("0.4", "200"), ("500", "1")])
    @pytest.mark.parametrize("atr", ["0", "0.01", "50"])
    @pytest.mark.parametrize("high_conviction", [False, True])
    def test_stop_entry_target_ordering(self, price, support, resistance, atr, high_conviction):
        builder = RecommendationBuilder()
        indicators = _indicators(support, resistance, atr, high_conviction)
        price = Decimal(price)

        buy = builder.build(Decimal("1"), price, indicators)
        assert buy.stop_loss < buy.entry_price < buy.take_profit
        assert buy.risk_reward_ratio >= Decimal("2")

        sell = builder.build(Decimal("-1"), price, indicators)
        assert sell.take_profit < sell.entry_price < sell.stop_loss
        assert sell.risk_reward_ratio >= Decimal("2")
