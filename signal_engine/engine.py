"""Signal engine: one stateless analysis of one symbol's latest window.

This module is pure business logic with no I/O dependencies. It wires
the indicator, scoring, recommendation and override stages together and
runs pattern detection alongside them. The only field an engine holds is
its frozen configuration, so one instance can serve concurrent callers.
"""

import logging

from signal_engine.indicators import IndicatorCalculator
from signal_engine.models import (
    AnalysisResult,
    CandleSeries,
    EngineConfig,
    ExternalSignals,
    TickerSnapshot,
)
from signal_engine.patterns import detect_patterns
from signal_engine.strategy import (
    OverrideInputs,
    OverridePipeline,
    RecommendationBuilder,
    SignalScorer,
)

logger = logging.getLogger(__name__)


class SignalEngine:
    """Compute indicators, recommendation, final signal and patterns.

    Pipeline:
        candles + ticker -> indicators -> confidence + reasons
        -> base recommendation -> override pipeline -> final signal
    Patterns are detected from the candles directly.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._indicators = IndicatorCalculator(self.config)
        self._scorer = SignalScorer(self.config)
        self._builder = RecommendationBuilder(self.config)
        self._overrides = OverridePipeline(self.config)

    def analyze(
        self,
        series: CandleSeries,
        ticker: TickerSnapshot,
        external: ExternalSignals | None = None,
        sell_volume_spike: bool = False,
    ) -> AnalysisResult:
        """
        Analyse the latest window of one symbol.

        Short series are accepted and produce degraded indicator values
        rather than errors.

        Args:
            series: Chronological candles (101+ for full fidelity)
            ticker: Current 24h ticker; its last price is the entry price
            external: Funding/open-interest/whale evidence (neutral if None)
            sell_volume_spike: Sell-side volume evidence for the override
                pipeline, supplied by callers with order-flow data

        Returns:
            AnalysisResult with a fresh copy of every derived structure
        """
        external = external or ExternalSignals()
        price = ticker.last_price

        if len(series) < self.config.min_candles:
            logger.debug(
                "%s: %d candles (< %d), indicators degraded",
                series.symbol or "?",
                len(series),
                self.config.min_candles,
            )

        indicators = self._indicators.calculate(series, ticker)
        score = self._scorer.score(indicators, price, external)
        recommendation = self._builder.build(score.confidence, price, indicators)
        final_signal = self._overrides.resolve(
            recommendation.position_type,
            OverrideInputs.from_market(
                series,
                indicators,
                external,
                self.config,
                sell_volume_spike=sell_volume_spike,
            ),
        )
        patterns = detect_patterns(series)

        logger.debug(
            "%s: trend=%s confidence=%s base=%s final=%s(%+d) patterns=%s",
            series.symbol or "?",
            indicators.trend.value,
            score.confidence,
            recommendation.position_type.value,
            final_signal.signal.value,
            final_signal.confidence,
            [p.value for p in patterns],
        )

        return AnalysisResult(
            symbol=series.symbol,
            current_price=price,
            indicators=indicators,
            signals=list(score.signals),
            recommendation=recommendation,
            final_signal=final_signal,
            patterns=patterns,
        )
