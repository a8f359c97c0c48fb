"""Main orchestration: discovery loop plus score-and-liquidate loop.

Two loops run on independent intervals:

1. scan loop: rediscover tokens with active lending and extend price history
2. score loop: profile borrowers, score loans, attempt liquidations

The token snapshot is only ever replaced as a whole dict, and only by the
scan pass, so a score pass that suspends mid-iteration keeps reading the
snapshot it started with. Borrowers found by the score pass go into a
separate map that the next scan merges into the snapshot it publishes.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from enum import Enum
from typing import Callable, Mapping

from ..config import AppConfig
from ..core.execution import build_execution_strategy
from ..core.liquidator import Liquidator
from ..core.profiler import WalletProfiler
from ..core.scanner import scan_lending_markets
from ..core.scorer import score_position
from ..interfaces.execution import ExecutionStrategy
from ..interfaces.notifier import Notifier
from ..interfaces.venue import LendingVenue
from ..models import Health, LiquidationOutcome, MonitoredToken, ScoredPosition
from ..notifications import build_notifiers
from ..protocols.torch import build_venue
from ..utils import bps_to_percent, short_address, sol

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class Monitor:
    """Owns the token snapshot and sequences discovery, scoring and liquidation."""

    def __init__(
        self,
        config: AppConfig,
        venue: LendingVenue | None = None,
        notifiers: list[Notifier] | None = None,
        execution: ExecutionStrategy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._monitor_cfg = config.monitor
        self._clock = clock

        self._venue: LendingVenue = venue if venue is not None else build_venue(config)
        self._notifiers: list[Notifier] = (
            notifiers if notifiers is not None else build_notifiers(config.notifications)
        )
        self._execution: ExecutionStrategy = (
            execution if execution is not None else build_execution_strategy(config.execution)
        )
        self._profiler = WalletProfiler(self._venue, config.cache, clock=clock)
        self._liquidator = Liquidator(
            self._venue, config.monitor.min_profit_lamports, clock=clock
        )

        self._tokens: dict[str, MonitoredToken] = {}
        self._borrowers: dict[str, tuple[str, ...]] = {}
        self._state = MonitorState.IDLE
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def tokens(self) -> Mapping[str, MonitoredToken]:
        """The most recently published token snapshot."""
        return self._tokens

    @property
    def borrowers(self) -> Mapping[str, tuple[str, ...]]:
        """Borrowers per mint found by the most recent score pass."""
        return self._borrowers

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Run until stop(); returns once both loops have exited."""
        if self._state not in (MonitorState.IDLE, MonitorState.STOPPED):
            raise RuntimeError(f"Monitor cannot start from state {self._state.value}")

        if self._state is MonitorState.STOPPED:
            self._stop_event.clear()
        elif self._stop_event.is_set():
            logger.info("Stop requested before start, not starting")
            self._state = MonitorState.STOPPED
            return

        self._state = MonitorState.RUNNING

        cfg = self._monitor_cfg
        logger.info(
            "Starting liquidation bot (scan every %ss, score every %ss, "
            "min profit %s SOL, risk threshold %d)",
            cfg.scan_interval_seconds,
            cfg.score_interval_seconds,
            sol(cfg.min_profit_lamports),
            cfg.risk_threshold,
        )

        try:
            await self.scan()
            await asyncio.gather(self._scan_loop(), self._score_loop())
        finally:
            self._state = MonitorState.STOPPED
            logger.info("Liquidation bot stopped")

    def stop(self) -> None:
        """Ask both loops to exit at their next iteration boundary."""
        if self._state is MonitorState.RUNNING:
            self._state = MonitorState.STOPPING
            logger.info("Stopping bot...")
        self._stop_event.set()

    @property
    def _running(self) -> bool:
        return self._state is MonitorState.RUNNING

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    async def _scan_loop(self) -> None:
        while self._running:
            await self._sleep(self._monitor_cfg.scan_interval_seconds)
            if not self._running:
                break
            await self.scan()

    async def _score_loop(self) -> None:
        while self._running:
            try:
                await self.score_all_positions()
            except Exception as e:
                logger.error("Score pass failed: %s", e)
            await self._sleep(self._monitor_cfg.score_interval_seconds)

    # ------------------------------------------------------------------
    # Discovery pass
    # ------------------------------------------------------------------

    async def scan(self) -> None:
        """Refresh the token snapshot; keep the previous one on failure."""
        try:
            snapshot = await scan_lending_markets(
                self._venue,
                self._tokens,
                self._monitor_cfg.price_history_depth,
                limit=self._monitor_cfg.token_scan_limit,
                clock=self._clock,
            )
        except Exception as e:
            logger.error(
                "Scan failed, keeping %d previously tracked tokens: %s",
                len(self._tokens),
                e,
            )
            return

        # read after the await so borrowers found meanwhile are not lost
        borrowers = self._borrowers
        self._tokens = {
            mint: replace(token, active_borrowers=borrowers[mint])
            if mint in borrowers
            else token
            for mint, token in snapshot.items()
        }

    # ------------------------------------------------------------------
    # Score pass
    # ------------------------------------------------------------------

    async def score_all_positions(self) -> list[ScoredPosition]:
        """Score every borrower of every tracked token, then liquidate.

        Returns all scored positions, highest risk first.
        """
        tokens = self._tokens
        if not tokens:
            return []

        all_scored: list[ScoredPosition] = []
        discovered: dict[str, tuple[str, ...]] = {}
        for token in tokens.values():
            try:
                scored, borrowers = await self._score_token(token)
            except Exception as e:
                logger.error("Failed scoring %s: %s", token.symbol, e)
                continue
            all_scored.extend(scored)
            discovered[token.mint] = borrowers

        self._publish_borrowers(tokens, discovered)

        all_scored.sort(key=lambda s: s.risk_score, reverse=True)
        await self._report_high_risk(all_scored)

        liquidatable = sorted(
            (s for s in all_scored if s.position.health is Health.LIQUIDATABLE),
            key=lambda s: s.estimated_profit_lamports,
            reverse=True,
        )
        if liquidatable:
            await self._execution.run(liquidatable, self._attempt)

        return all_scored

    async def _score_token(
        self, token: MonitoredToken
    ) -> tuple[list[ScoredPosition], tuple[str, ...]]:
        holders = await self._venue.list_borrowers(
            token.mint, self._monitor_cfg.borrower_scan_limit
        )

        scored: list[ScoredPosition] = []
        borrowers: list[str] = []

        for holder in holders:
            try:
                position = await self._venue.get_position(token.mint, holder)
                if position.health is Health.NONE:
                    continue

                borrowers.append(holder)
                profile = await self._profiler.profile(holder, token.mint)
                scored.append(
                    score_position(token, holder, position, profile, now=self._clock())
                )
            except Exception as e:
                logger.debug(
                    "Skipping holder %s of %s: %s", short_address(holder), token.symbol, e
                )

        return scored, tuple(borrowers)

    def _publish_borrowers(
        self,
        tokens: Mapping[str, MonitoredToken],
        discovered: dict[str, tuple[str, ...]],
    ) -> None:
        """Swap in this pass's borrower map; failed tokens keep their last list."""
        previous = self._borrowers
        self._borrowers = {
            mint: discovered.get(mint, previous.get(mint, token.active_borrowers))
            for mint, token in tokens.items()
        }

    async def _attempt(self, scored: ScoredPosition) -> LiquidationOutcome | None:
        outcome = await self._liquidator.attempt(scored)
        if outcome is not None:
            await self._record_outcome(scored, outcome)
        return outcome

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def _report_high_risk(self, scored: list[ScoredPosition]) -> None:
        threshold = self._monitor_cfg.risk_threshold
        high_risk = [s for s in scored if s.risk_score >= threshold]
        if not high_risk:
            return

        logger.info("%d high-risk positions detected", len(high_risk))
        lines = []
        for s in high_risk:
            line = (
                f"{s.token_name} | {short_address(s.borrower)} "
                f"risk={s.risk_score} health={s.position.health.value} "
                f"ltv={bps_to_percent(s.position.current_ltv_bps)} "
                f"profit={sol(s.estimated_profit_lamports)} SOL"
            )
            logger.info("  %s", line)
            lines.append(line)

        await self._send_log(
            f"{len(high_risk)} high-risk positions\n\n" + "\n".join(lines)
        )

    async def _record_outcome(
        self, scored: ScoredPosition, outcome: LiquidationOutcome
    ) -> None:
        logger.info(
            "Liquidation successful! token=%s borrower=%s profit=%s SOL sig=%s confirmed=%s",
            scored.token_name,
            short_address(outcome.borrower),
            sol(outcome.profit_lamports),
            outcome.signature,
            outcome.confirmed,
        )
        await self._send_alert(
            f"Token: {scored.token_name}\n"
            f"Borrower: {outcome.borrower}\n"
            f"Profit: {sol(outcome.profit_lamports)} SOL\n"
            f"Signature: {outcome.signature}\n"
            f"SAID confirmed: {'yes' if outcome.confirmed else 'no'}",
            subject="Liquidation executed",
        )

    async def _send_log(self, message: str, silent: bool = True) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)
