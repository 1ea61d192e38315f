"""Candlestick pattern detection.

Importing this package registers the built-in predicates.
"""

from signal_engine.patterns.registry import (
    PatternRule,
    register_pattern,
    get_pattern,
    list_patterns,
)
from signal_engine.patterns.candlestick import MIN_CANDLES, detect_patterns

__all__ = [
    "PatternRule",
    "register_pattern",
    "get_pattern",
    "list_patterns",
    "MIN_CANDLES",
    "detect_patterns",
]
