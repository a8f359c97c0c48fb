"""Scheduling strategies for liquidation attempts within one score pass."""
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..config import ExecutionConfig
from ..interfaces.execution import AttemptFn, ExecutionStrategy
from ..models import LiquidationOutcome, ScoredPosition

logger = logging.getLogger(__name__)


class SequentialExecution:
    """At most one liquidation in flight; candidates run in the given order."""

    async def run(
        self, candidates: Sequence[ScoredPosition], attempt: AttemptFn
    ) -> list[LiquidationOutcome]:
        outcomes: list[LiquidationOutcome] = []
        for candidate in candidates:
            outcome = await attempt(candidate)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes


class BoundedParallelExecution:
    """Up to ``max_in_flight`` concurrent attempts, started in priority order."""

    def __init__(self, max_in_flight: int) -> None:
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be >= 1")
        self.max_in_flight = max_in_flight

    async def run(
        self, candidates: Sequence[ScoredPosition], attempt: AttemptFn
    ) -> list[LiquidationOutcome]:
        semaphore = asyncio.Semaphore(self.max_in_flight)

        async def _bounded(candidate: ScoredPosition) -> LiquidationOutcome | None:
            async with semaphore:
                return await attempt(candidate)

        results = await asyncio.gather(*(_bounded(c) for c in candidates))
        return [r for r in results if r is not None]


def build_execution_strategy(config: ExecutionConfig) -> ExecutionStrategy:
    if config.strategy == "bounded_parallel":
        logger.info(
            "Using bounded-parallel liquidation (max %d in flight)",
            config.max_in_flight,
        )
        return BoundedParallelExecution(config.max_in_flight)
    return SequentialExecution()
