"""Read-only lending market summaries for operators."""
from __future__ import annotations

import logging

from ..interfaces.venue import LendingVenue
from ..utils import bps_to_percent, sol

logger = logging.getLogger(__name__)


async def show_lending_info(venue: LendingVenue, mint: str) -> str:
    """Render the lending parameters of one token."""
    token = await venue.get_token(mint)
    lending = await venue.get_lending_params(mint)

    total_lent = (
        f"{sol(lending.total_lent_lamports)} SOL"
        if lending.total_lent_lamports is not None
        else "unknown"
    )
    active_loans = lending.active_loans if lending.active_loans is not None else "unknown"

    return "\n".join(
        [
            f"=== lending info: {token.name} ({token.symbol}) ===",
            f"status:                {token.status}",
            f"token price:           {sol(token.price_lamports)} SOL",
            f"interest rate:         {bps_to_percent(lending.interest_rate_bps)}",
            f"max LTV:               {bps_to_percent(lending.max_ltv_bps)}",
            f"liquidation threshold: {bps_to_percent(lending.liquidation_threshold_bps)}",
            f"liquidation bonus:     {bps_to_percent(lending.liquidation_bonus_bps)}",
            f"treasury SOL avail:    {sol(lending.treasury_available_lamports)} SOL",
            f"total SOL lent:        {total_lent}",
            f"active loans:          {active_loans}",
        ]
    )


async def show_all_lending(venue: LendingVenue, limit: int = 10) -> str:
    """One line per migrated token; tokens without lending are left out."""
    tokens = await venue.list_tokens("migrated", "volume", limit)

    lines = ["=== torch lending markets ==="]
    for token in tokens:
        try:
            lending = await venue.get_lending_params(token.mint)
        except Exception as e:
            logger.debug("No lending info for %s: %s", token.symbol, e)
            continue
        loans = lending.active_loans if lending.active_loans is not None else "?"
        lines.append(
            f"{token.symbol:<10} | "
            f"rate: {bps_to_percent(lending.interest_rate_bps):<7} | "
            f"loans: {str(loans):<4} | "
            f"avail: {sol(lending.treasury_available_lamports)} SOL"
        )
    return "\n".join(lines)
