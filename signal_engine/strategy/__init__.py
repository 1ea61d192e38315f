"""Scoring, recommendation and override stages.

Public API:
- SignalScorer: fuse indicators and external signals into a confidence score
- RecommendationBuilder: confidence + levels -> BUY/SELL/HOLD with stops/targets
- OverridePipeline: resolve a recommendation against conflicting evidence
"""

from signal_engine.strategy.scoring import ScoreResult, SignalScorer
from signal_engine.strategy.recommendation import RecommendationBuilder
from signal_engine.strategy.overrides import (
    DEFAULT_RULES,
    OverrideInputs,
    OverridePipeline,
    OverrideRule,
    OverrideState,
    price_change_pct,
)

__all__ = [
    "ScoreResult",
    "SignalScorer",
    "RecommendationBuilder",
    "DEFAULT_RULES",
    "OverrideInputs",
    "OverridePipeline",
    "OverrideRule",
    "OverrideState",
    "price_change_pct",
]
