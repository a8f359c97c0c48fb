"""Wallet risk profiling from SAID reputation and trade history.

Profiles are cached per borrower and only recomputed once the cooldown has
elapsed, so a busy score loop does not hammer the venue.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from ..cache import TTLCache
from ..config import CacheConfig
from ..interfaces.venue import LendingVenue
from ..models import Reputation, TradeStats, TrustTier, WalletProfile
from ..utils import clamp, round_half_up, short_address

logger = logging.getLogger(__name__)

TRADE_MESSAGE_LIMIT = 50

TIER_BASE_RISK: dict[TrustTier, float] = {
    TrustTier.HIGH: 10,
    TrustTier.MEDIUM: 40,
    TrustTier.LOW: 70,
}
UNVERIFIED_BASE_RISK = 50

NEUTRAL_STATS = TradeStats()


def compute_wallet_risk(tier: TrustTier | None, stats: TradeStats) -> int:
    """Combine trust tier and trade record into a 0-100 risk number."""
    risk = float(TIER_BASE_RISK.get(tier, UNVERIFIED_BASE_RISK))

    if stats.total_trades > 0:
        # -20 .. +20
        risk += (0.5 - stats.win_rate) * 40
        if stats.net_pnl_sol < 0:
            risk += min(abs(stats.net_pnl_sol) * 5, 20)

    return int(clamp(round_half_up(risk), 0, 100))


def trade_stats_for(messages: list[dict[str, Any]], address: str) -> TradeStats:
    """Win/loss record of ``address`` from token chat messages carrying P&L."""
    wins = losses = 0
    net_pnl = 0.0

    for msg in messages:
        if msg.get("sender") != address:
            continue
        pnl = msg.get("pnl_sol")
        if pnl is None:
            continue
        pnl = float(pnl)
        if pnl > 0:
            wins += 1
        else:
            losses += 1
        net_pnl += pnl

    total = wins + losses
    return TradeStats(
        total_trades=total,
        wins=wins,
        losses=losses,
        win_rate=wins / total if total > 0 else 0.5,
        net_pnl_sol=net_pnl,
    )


class WalletProfiler:
    """Assess borrower risk, caching profiles per address."""

    def __init__(
        self,
        venue: LendingVenue,
        config: CacheConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._venue = venue
        self._cooldown = config.profile_cooldown_seconds
        self._clock = clock
        self._cache: TTLCache[str, WalletProfile] = TTLCache(
            max_age=config.max_age_seconds, max_size=config.max_size, clock=clock
        )

    @property
    def cache(self) -> TTLCache[str, WalletProfile]:
        return self._cache

    async def profile(self, address: str, mint: str) -> WalletProfile:
        self._cache.evict()

        cached = self._cache.get(address)
        if cached is not None and self._clock() - cached.last_updated < self._cooldown:
            return cached

        logger.debug("Profiling wallet %s", short_address(address))

        reputation = await self._reputation(address)
        stats = await self._trade_history(mint, address)

        profile = WalletProfile(
            address=address,
            verified=reputation.verified,
            tier=reputation.tier,
            trade_stats=stats,
            risk_score=compute_wallet_risk(reputation.tier, stats),
            last_updated=self._clock(),
        )
        self._cache.put(address, profile)
        return profile

    async def _reputation(self, address: str) -> Reputation:
        try:
            return await self._venue.get_reputation(address)
        except Exception as e:
            logger.warning(
                "Reputation lookup failed for %s, treating as unverified: %s",
                short_address(address),
                e,
            )
            return Reputation()

    async def _trade_history(self, mint: str, address: str) -> TradeStats:
        try:
            messages = await self._venue.get_trade_messages(mint, TRADE_MESSAGE_LIMIT)
            return trade_stats_for(messages, address)
        except Exception as e:
            logger.debug("Trade history unavailable for %s: %s", mint, e)
            return NEUTRAL_STATS
