"""Batch scanning of many symbols and the top-opportunity board.

The engine is synchronous and stateless, so scanning is just running
independent analyses concurrently. Inputs are already fetched; fetching,
rate limiting and retries stay with the caller. The board is state the
caller owns and passes around explicitly.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from signal_engine.config import get_settings
from signal_engine.engine import SignalEngine
from signal_engine.models import (
    AnalysisResult,
    CandleSeries,
    EngineConfig,
    ExternalSignals,
    PositionType,
    TickerSnapshot,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = EngineConfig()


class MarketSnapshot(BaseModel):
    """Already-fetched inputs for one symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    candles: CandleSeries
    ticker: TickerSnapshot
    external: ExternalSignals = Field(default_factory=ExternalSignals)
    sell_volume_spike: bool = False


@dataclass
class ScanReport:
    """Outcome of a scan: successful analyses and per-symbol failures."""

    results: dict[str, AnalysisResult] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.results) + len(self.failed)


async def scan_symbols(
    engine: SignalEngine,
    snapshots: Sequence[MarketSnapshot],
    concurrency: int | None = None,
) -> ScanReport:
    """
    Analyse many symbols concurrently.

    Analyses run in worker threads, at most ``concurrency`` at a time.
    A failure for one symbol is logged and recorded without aborting the
    rest of the scan.

    Args:
        engine: Engine shared by every analysis
        snapshots: Per-symbol inputs
        concurrency: Maximum analyses in flight (default:
            Settings.scan_concurrency)

    Returns:
        ScanReport keyed by symbol

    Raises:
        ValueError: If concurrency < 1 or a symbol appears more than once
    """
    if concurrency is None:
        concurrency = get_settings().scan_concurrency
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    counts = Counter(snapshot.symbol for snapshot in snapshots)
    duplicates = sorted(symbol for symbol, n in counts.items() if n > 1)
    if duplicates:
        raise ValueError(f"duplicate symbols in scan: {', '.join(duplicates)}")

    semaphore = asyncio.Semaphore(concurrency)

    async def _analyze(snapshot: MarketSnapshot) -> AnalysisResult:
        async with semaphore:
            return await asyncio.to_thread(
                engine.analyze,
                snapshot.candles,
                snapshot.ticker,
                snapshot.external,
                snapshot.sell_volume_spike,
            )

    outcomes = await asyncio.gather(
        *(_analyze(s) for s in snapshots), return_exceptions=True
    )

    report = ScanReport()
    for snapshot, outcome in zip(snapshots, outcomes):
        if isinstance(outcome, AnalysisResult):
            report.results[snapshot.symbol] = outcome
        elif isinstance(outcome, Exception):
            logger.warning("Scan: %s failed: %s", snapshot.symbol, outcome)
            report.failed[snapshot.symbol] = str(outcome)
        else:
            raise outcome

    logger.info(
        "Scan complete: %d analysed, %d failed",
        len(report.results),
        len(report.failed),
    )
    return report


class Opportunity(BaseModel):
    """One entry on the top-coin board."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    confidence: Decimal
    recommendation: PositionType

    @classmethod
    def from_result(cls, result: AnalysisResult, symbol: str | None = None) -> Opportunity:
        return cls(
            symbol=symbol or result.symbol,
            confidence=result.recommendation.confidence,
            recommendation=result.recommendation.position_type,
        )


class TopCoinBoard(BaseModel):
    """Highest-|confidence| opportunities seen so far, owned by the caller."""

    min_confidence: Decimal = _DEFAULT_CONFIG.min_confidence
    max_size: int = _DEFAULT_CONFIG.max_top_coins
    entries: list[Opportunity] = Field(default_factory=list)

    @classmethod
    def from_config(cls, config: EngineConfig) -> TopCoinBoard:
        """Empty board using the config's threshold and size."""
        return cls(min_confidence=config.min_confidence, max_size=config.max_top_coins)

    def add(self, opportunity: Opportunity) -> bool:
        """Add or replace an opportunity, maintaining order and max size.

        Returns True if the opportunity made it onto the board.
        """
        if abs(opportunity.confidence) < self.min_confidence:
            return False

        self.entries = [e for e in self.entries if e.symbol != opportunity.symbol]
        self.entries.append(opportunity)
        self.entries.sort(key=lambda e: abs(e.confidence), reverse=True)
        if len(self.entries) > self.max_size:
            self.entries = self.entries[: self.max_size]
        return opportunity in self.entries

    def update(self, report: ScanReport) -> int:
        """Add every successful result of a scan; returns how many were kept."""
        return sum(
            self.add(Opportunity.from_result(result, symbol))
            for symbol, result in report.results.items()
        )

    def symbols(self) -> list[str]:
        return [e.symbol for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)
