"""Pure parsing functions for Torch Market gateway payloads: no I/O."""
from __future__ import annotations

from typing import Any

from ...models import (
    Health,
    LendingParams,
    LoanPosition,
    Reputation,
    SettlementReport,
    TokenListing,
    TrustTier,
)


def _int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    return int(value)


def _optional_int(value: Any) -> int | None:
    """Keep ``None`` distinct from zero for counters the venue may omit."""
    if value is None:
        return None
    return int(value)


def parse_token(raw: dict[str, Any]) -> TokenListing:
    return TokenListing(
        mint=raw["mint"],
        name=raw.get("name", ""),
        symbol=raw.get("symbol", ""),
        price_lamports=float(raw.get("price_sol") or 0),
        status=raw.get("status", ""),
    )


def parse_lending_params(raw: dict[str, Any]) -> LendingParams:
    """Parse lending info.

    ``active_loans`` is ``None`` when the venue could not enumerate loans
    (e.g. on a fork); it must not be coerced to zero.
    """
    return LendingParams(
        interest_rate_bps=_int(raw.get("interest_rate_bps")),
        max_ltv_bps=_int(raw.get("max_ltv_bps")),
        liquidation_threshold_bps=_int(raw.get("liquidation_threshold_bps")),
        liquidation_bonus_bps=_int(raw.get("liquidation_bonus_bps")),
        treasury_available_lamports=_int(raw.get("treasury_sol_available")),
        active_loans=_optional_int(raw.get("active_loans")),
        total_lent_lamports=_optional_int(raw.get("total_sol_lent")),
    )


def parse_health(value: Any) -> Health:
    try:
        return Health(str(value).lower())
    except ValueError:
        return Health.NONE


def parse_position(raw: dict[str, Any]) -> LoanPosition:
    return LoanPosition(
        health=parse_health(raw.get("health", "none")),
        current_ltv_bps=_int(raw.get("current_ltv_bps")),
        collateral_amount=_int(raw.get("collateral_amount")),
        collateral_value_lamports=_int(raw.get("collateral_value_sol")),
        borrowed_amount=_int(raw.get("borrowed_amount")),
        accrued_interest=_int(raw.get("accrued_interest")),
        total_owed=_int(raw.get("total_owed")),
    )


def parse_trust_tier(value: Any) -> TrustTier | None:
    if value is None:
        return None
    try:
        return TrustTier(str(value).lower())
    except ValueError:
        return None


def parse_reputation(raw: dict[str, Any] | None) -> Reputation:
    if not raw:
        return Reputation()
    return Reputation(
        verified=bool(raw.get("verified", False)),
        tier=parse_trust_tier(raw.get("trustTier", raw.get("trust_tier"))),
    )


def parse_signature(result: Any) -> str:
    """Transaction signature from a write call; ``"unknown"`` if absent."""
    if isinstance(result, str) and result:
        return result
    if isinstance(result, dict) and isinstance(result.get("signature"), str):
        return result["signature"]
    return "unknown"


def parse_settlement(raw: dict[str, Any] | None) -> SettlementReport:
    raw = raw or {}
    return SettlementReport(
        confirmed=bool(raw.get("confirmed", False)),
        event_type=str(raw.get("event_type", "")),
    )
