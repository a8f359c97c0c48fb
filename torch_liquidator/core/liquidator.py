"""Liquidation gate and execution."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..interfaces.venue import LendingVenue
from ..models import Health, LiquidationOutcome, ScoredPosition
from ..utils import short_address, sol

logger = logging.getLogger(__name__)


class Liquidator:
    """Executes liquidations that are past threshold and worth the fees."""

    def __init__(
        self,
        venue: LendingVenue,
        min_profit_lamports: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._venue = venue
        self.min_profit_lamports = min_profit_lamports
        self._clock = clock

    def is_eligible(self, scored: ScoredPosition) -> bool:
        if scored.position.health is not Health.LIQUIDATABLE:
            logger.debug(
                "Skipping %s: not liquidatable yet (%s)",
                short_address(scored.borrower),
                scored.position.health.value,
            )
            return False

        if scored.estimated_profit_lamports < self.min_profit_lamports:
            logger.debug(
                "Skipping %s: profit too low (expected %s SOL, minimum %s SOL)",
                short_address(scored.borrower),
                sol(scored.estimated_profit_lamports),
                sol(self.min_profit_lamports),
            )
            return False

        return True

    async def attempt(self, scored: ScoredPosition) -> LiquidationOutcome | None:
        """Liquidate ``scored`` if eligible; ``None`` when skipped or failed."""
        if not self.is_eligible(scored):
            return None

        logger.info(
            "Liquidating %s on %s (profit %s SOL, risk %d)",
            short_address(scored.borrower),
            scored.token_name,
            sol(scored.estimated_profit_lamports),
            scored.risk_score,
        )

        try:
            signature = await self._venue.execute_liquidation(
                scored.mint, scored.borrower
            )
        except Exception as e:
            logger.error(
                "Liquidation failed for %s: %s", short_address(scored.borrower), e
            )
            return None

        logger.info("Liquidation landed: %s", signature)

        confirmed = False
        try:
            report = await self._venue.report_settlement(signature)
            confirmed = report.confirmed
            logger.debug("SAID confirmation event: %s", report.event_type)
        except Exception as e:
            logger.warning("SAID confirmation failed (tx still went through): %s", e)

        return LiquidationOutcome(
            mint=scored.mint,
            borrower=scored.borrower,
            signature=signature,
            profit_lamports=scored.estimated_profit_lamports,
            timestamp=self._clock(),
            confirmed=confirmed,
        )
