"""Discovers tokens with active lending markets and tracks their prices."""
from __future__ import annotations

import logging
import time
from typing import Callable, Mapping

from ..interfaces.venue import LendingVenue
from ..models import LoanActivity, MonitoredToken
from ..utils import LAMPORTS_PER_SOL

logger = logging.getLogger(__name__)


def append_price(
    history: tuple[float, ...], price: float, depth: int
) -> tuple[float, ...]:
    """Append a sample and drop the oldest ones beyond ``depth``."""
    return (*history, price)[-depth:]


async def scan_lending_markets(
    venue: LendingVenue,
    existing: Mapping[str, MonitoredToken],
    price_history_depth: int,
    *,
    limit: int = 50,
    clock: Callable[[], float] = time.time,
) -> dict[str, MonitoredToken]:
    """Build a fresh token snapshot from the venue's migrated tokens.

    Tokens missing from the listing, or whose market reports zero active
    loans, are left out. A token whose lending lookup fails is skipped for
    this pass only. Errors from the listing call itself propagate.
    """
    logger.info("Scanning for tokens with active lending...")

    tokens = await venue.list_tokens("migrated", "volume", limit)
    logger.debug("Found %d migrated tokens", len(tokens))

    monitored: dict[str, MonitoredToken] = {}

    for token in tokens:
        try:
            lending = await venue.get_lending_params(token.mint)
        except Exception as e:
            logger.debug("No lending info for %s: %s", token.symbol or token.mint, e)
            continue

        activity = lending.loan_activity
        if activity is LoanActivity.NONE:
            continue
        # UNKNOWN (loan enumeration failed) stays monitored

        price_sol = token.price_lamports / LAMPORTS_PER_SOL
        prev = existing.get(token.mint)
        history = append_price(
            prev.price_history if prev else (), price_sol, price_history_depth
        )

        monitored[token.mint] = MonitoredToken(
            mint=token.mint,
            name=token.name,
            symbol=token.symbol,
            lending=lending,
            price_sol=price_sol,
            price_history=history,
            active_borrowers=prev.active_borrowers if prev else (),
            last_scanned=clock(),
        )

        logger.info(
            "Tracking: %s  loans=%s  price=%.6f",
            token.symbol,
            lending.active_loans if activity is LoanActivity.ACTIVE else "unknown",
            price_sol,
        )

    logger.info("Monitoring %d tokens with active lending", len(monitored))
    return monitored
