"""Pattern registry for candlestick predicates.

Usage:
    @register_pattern(PatternTag.DOJI, window=1)
    def doji(candles):
        ...

    rules = list_patterns()
    rule = get_pattern(PatternTag.DOJI)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from signal_engine.models.analysis import PatternTag
from signal_engine.models.candle import Candle

logger = logging.getLogger(__name__)

PatternPredicate = Callable[[Sequence[Candle]], bool]


@dataclass(frozen=True)
class PatternRule:
    """A named predicate over the trailing ``window`` candles (oldest first)."""

    tag: PatternTag
    window: int
    predicate: PatternPredicate

    def matches(self, candles: Sequence[Candle]) -> bool:
        if len(candles) < self.window:
            return False
        return bool(self.predicate(candles[-self.window :]))


# Global registry in registration order: tag -> rule
_REGISTRY: dict[PatternTag, PatternRule] = {}


def register_pattern(tag: PatternTag, window: int = 1):
    """Decorator to register a predicate under a pattern tag.

    Args:
        tag: Pattern the predicate recognises.
        window: Number of trailing candles the predicate receives.

    Returns:
        Decorator that registers the function and returns it unchanged.

    Raises:
        ValueError: If the tag is already registered or window < 1.
    """
    if window < 1:
        raise ValueError(f"Pattern window must be >= 1, got {window}")

    def decorator(func: PatternPredicate) -> PatternPredicate:
        if tag in _REGISTRY:
            raise ValueError(
                f"Pattern '{tag.value}' is already registered by "
                f"{_REGISTRY[tag].predicate.__name__}"
            )
        _REGISTRY[tag] = PatternRule(tag=tag, window=window, predicate=func)
        logger.debug("Registered pattern: %s -> %s", tag.value, func.__name__)
        return func

    return decorator


def get_pattern(tag: PatternTag) -> PatternRule:
    """Get the registered rule for a tag.

    Raises:
        KeyError: If no predicate is registered for the tag.
    """
    rule = _REGISTRY.get(tag)
    if rule is None:
        available = ", ".join(t.value for t in _REGISTRY) or "(none)"
        raise KeyError(f"Unknown pattern '{tag}'. Available: {available}")
    return rule


def list_patterns() -> list[PatternRule]:
    """Return registered rules in registration order."""
    return list(_REGISTRY.values())
