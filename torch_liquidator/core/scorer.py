"""Scores loan positions by likelihood of liquidation.

Four weighted factors, each normalised to 0-100:

* LTV proximity (40%): current LTV relative to the liquidation threshold
* price momentum (30%): falling collateral price raises the score
* wallet risk (20%): borrower reputation and trade record
* interest burden (10%): accrued interest relative to collateral value

Everything here is pure; callers pass in the clock reading.
"""
from __future__ import annotations

import math
from typing import Sequence

from ..models import (
    LendingParams,
    LoanPosition,
    MonitoredToken,
    RiskFactors,
    ScoredPosition,
    WalletProfile,
)
from ..utils import clamp, round_half_up

WEIGHTS = {
    "ltv_proximity": 0.4,
    "price_momentum": 0.3,
    "wallet_risk": 0.2,
    "interest_burden": 0.1,
}

# ~0.000005 SOL per transaction
SETTLEMENT_FEE_LAMPORTS = 5000
# Token-2022 transfer fee on seized collateral
TRANSFER_FEE_RATE = 0.01

NEUTRAL_MOMENTUM = 50


def _bounded(value: float) -> int:
    return int(clamp(round_half_up(value), 0, 100))


def ltv_proximity(position: LoanPosition, lending: LendingParams) -> int:
    """100 at the liquidation threshold, 0 at zero LTV."""
    if lending.liquidation_threshold_bps == 0:
        return 0
    ratio = position.current_ltv_bps / lending.liquidation_threshold_bps
    return _bounded(ratio * 100)


def price_momentum(price_history: Sequence[float]) -> int:
    """Least-squares slope of the price history, scaled by mean price.

    A -5% per tick trend maps to 100, +5% per tick to 0.
    """
    n = len(price_history)
    if n < 2:
        return NEUTRAL_MOMENTUM

    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, price in enumerate(price_history):
        sum_x += i
        sum_y += price
        sum_xy += i * price
        sum_x2 += i * i

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)

    avg_price = sum_y / n
    if avg_price == 0:
        return NEUTRAL_MOMENTUM

    return _bounded(50 - (slope / avg_price) * 1000)


def interest_burden(position: LoanPosition) -> int:
    """10% interest-to-collateral maps to 100."""
    if position.collateral_value_lamports == 0:
        return 100
    ratio = position.accrued_interest / position.collateral_value_lamports
    return _bounded(ratio * 1000)


def composite_score(factors: RiskFactors) -> int:
    return _bounded(
        factors.ltv_proximity * WEIGHTS["ltv_proximity"]
        + factors.price_momentum * WEIGHTS["price_momentum"]
        + factors.wallet_risk * WEIGHTS["wallet_risk"]
        + factors.interest_burden * WEIGHTS["interest_burden"]
    )


def estimate_profit(collateral_value_lamports: int, liquidation_bonus_bps: int) -> int:
    """Liquidation bonus net of settlement and transfer fees, never negative."""
    gross = math.floor(collateral_value_lamports * liquidation_bonus_bps / 10_000)
    transfer_fee = math.floor(collateral_value_lamports * TRANSFER_FEE_RATE)
    return max(0, gross - SETTLEMENT_FEE_LAMPORTS - transfer_fee)


def compute_factors(
    position: LoanPosition,
    lending: LendingParams,
    price_history: Sequence[float],
    profile: WalletProfile,
) -> RiskFactors:
    return RiskFactors(
        ltv_proximity=ltv_proximity(position, lending),
        price_momentum=price_momentum(price_history),
        wallet_risk=profile.risk_score,
        interest_burden=interest_burden(position),
    )


def score_position(
    token: MonitoredToken,
    borrower: str,
    position: LoanPosition,
    profile: WalletProfile,
    *,
    now: float,
) -> ScoredPosition:
    factors = compute_factors(position, token.lending, token.price_history, profile)
    return ScoredPosition(
        mint=token.mint,
        token_name=token.name,
        borrower=borrower,
        position=position,
        wallet_profile=profile,
        factors=factors,
        risk_score=composite_score(factors),
        estimated_profit_lamports=estimate_profit(
            position.collateral_value_lamports, token.lending.liquidation_bonus_bps
        ),
        last_scored=now,
    )
