"""Watches the operator's own loan and optionally repays before liquidation."""
from __future__ import annotations

import asyncio
import logging

from ..config import WatchConfig
from ..interfaces.venue import LendingVenue
from ..models import Health, LoanPosition
from ..utils import bps_to_percent, sol

logger = logging.getLogger(__name__)

HEALTH_LABELS = {
    Health.HEALTHY: "OK",
    Health.AT_RISK: "WARNING",
    Health.LIQUIDATABLE: "DANGER",
}


class PositionWatcher:
    """Polls one wallet's loan on one token."""

    def __init__(self, venue: LendingVenue, mint: str, config: WatchConfig) -> None:
        if not config.wallet_address:
            raise ValueError("watch.wallet_address is required for watch mode")
        self._venue = venue
        self._mint = mint
        self._wallet = config.wallet_address
        self._interval = config.poll_interval_seconds
        self.auto_repay = config.auto_repay
        self._stop_event = asyncio.Event()

    async def check_once(self) -> LoanPosition:
        pos = await self._venue.get_position(self._mint, self._wallet)

        if pos.health is Health.NONE:
            logger.info("No active loan")
            return pos

        logger.info("Health: %s (%s)", HEALTH_LABELS[pos.health], pos.health.value)
        logger.info("  collateral:    %d tokens", pos.collateral_amount)
        logger.info("  collat value:  %s SOL", sol(pos.collateral_value_lamports))
        logger.info("  borrowed:      %s SOL", sol(pos.borrowed_amount))
        logger.info("  interest:      %s SOL", sol(pos.accrued_interest))
        logger.info("  total owed:    %s SOL", sol(pos.total_owed))
        logger.info("  current LTV:   %s", bps_to_percent(pos.current_ltv_bps))

        if pos.health is Health.AT_RISK:
            logger.warning("Consider adding collateral or repaying to avoid liquidation")
        elif pos.health is Health.LIQUIDATABLE:
            logger.error("Your position can be liquidated! Repay immediately")
            if self.auto_repay:
                await self._repay(pos)

        return pos

    async def _repay(self, pos: LoanPosition) -> None:
        logger.info("Auto-repaying %s SOL...", sol(pos.total_owed))
        signature = await self._venue.repay(self._mint, pos.total_owed)
        logger.info("Repay confirmed: %s", signature)

        try:
            report = await self._venue.report_settlement(signature)
            logger.info("SAID event: %s", report.event_type)
        except Exception as e:
            logger.warning("SAID confirmation failed (tx still went through): %s", e)

    async def run(self) -> None:
        logger.info("Watching loan of %s on %s", self._wallet, self._mint)
        while not self._stop_event.is_set():
            try:
                await self.check_once()
            except Exception as e:
                logger.error("Position check failed: %s", e)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stop_event.set()
