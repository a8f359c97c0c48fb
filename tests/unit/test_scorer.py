"""Unit tests for the pure risk scoring functions."""
from __future__ import annotations

from dataclasses import replace

import pytest

from torch_liquidator.core.scorer import (
    SETTLEMENT_FEE_LAMPORTS,
    composite_score,
    estimate_profit,
    interest_burden,
    ltv_proximity,
    price_momentum,
    score_position,
)
from torch_liquidator.models import Health, LoanPosition, RiskFactors

SOL = 1_000_000_000


class TestLtvProximity:
    def test_ratio_to_threshold(self, sample_lending) -> None:
        pos = LoanPosition(health=Health.HEALTHY, current_ltv_bps=3380)
        # 3380 / 6500 = 0.52
        assert ltv_proximity(pos, sample_lending) == 52

    def test_zero_threshold_is_no_proximity(self, sample_lending) -> None:
        lending = replace(sample_lending, liquidation_threshold_bps=0)
        pos = LoanPosition(health=Health.AT_RISK, current_ltv_bps=9000)
        assert ltv_proximity(pos, lending) == 0

    def test_clamped_above_threshold(self, sample_lending) -> None:
        pos = LoanPosition(health=Health.LIQUIDATABLE, current_ltv_bps=9000)
        assert ltv_proximity(pos, sample_lending) == 100


class TestPriceMomentum:
    @pytest.mark.parametrize("history", [(), (1.0,)])
    def test_neutral_with_too_few_samples(self, history) -> None:
        assert price_momentum(history) == 50

    def test_flat_price_is_neutral(self) -> None:
        assert price_momentum([2.0, 2.0, 2.0, 2.0]) == 50

    def test_falling_price_raises_score(self) -> None:
        assert price_momentum([1.0, 0.99, 0.98, 0.97]) > 50

    def test_rising_price_lowers_score(self) -> None:
        assert price_momentum([1.0, 1.01, 1.02, 1.03]) < 50

    def test_steep_fall_saturates(self) -> None:
        assert price_momentum([1.0, 0.5, 0.25]) == 100

    def test_zero_mean_price_is_neutral(self) -> None:
        assert price_momentum([0.0, 0.0, 0.0]) == 50

    def test_two_samples(self) -> None:
        # slope -0.02, mean 0.99 -> 50 + 20.2 = 70.2
        assert price_momentum([1.0, 0.98]) == 70


class TestInterestBurden:
    def test_zero_collateral_is_maximal(self) -> None:
        pos = LoanPosition(health=Health.AT_RISK, accrued_interest=1)
        assert interest_burden(pos) == 100

    def test_ratio(self) -> None:
        pos = LoanPosition(
            health=Health.HEALTHY,
            collateral_value_lamports=10 * SOL,
            accrued_interest=SOL // 20,
        )
        # 0.5% of collateral -> 5
        assert interest_burden(pos) == 5

    def test_clamped(self) -> None:
        pos = LoanPosition(
            health=Health.HEALTHY,
            collateral_value_lamports=SOL,
            accrued_interest=SOL,
        )
        assert interest_burden(pos) == 100


class TestCompositeScore:
    def test_weighted_example(self) -> None:
        factors = RiskFactors(
            ltv_proximity=52, price_momentum=50, wallet_risk=50, interest_burden=0
        )
        # round(20.8 + 15 + 10 + 0)
        assert composite_score(factors) == 46

    @pytest.mark.parametrize(
        "values",
        [(0, 0, 0, 0), (100, 100, 100, 100), (100, 0, 100, 0), (0, 100, 0, 100)],
    )
    def test_bounds(self, values) -> None:
        score = composite_score(RiskFactors(*values))
        assert 0 <= score <= 100

    def test_all_max_is_100(self) -> None:
        assert composite_score(RiskFactors(100, 100, 100, 100)) == 100


class TestEstimateProfit:
    def test_bonus_minus_fees(self) -> None:
        profit = estimate_profit(10 * SOL, 1000)
        assert profit == SOL - SETTLEMENT_FEE_LAMPORTS - SOL // 10
        assert profit == 899_995_000

    def test_never_negative(self) -> None:
        assert estimate_profit(1000, 100) == 0

    def test_zero_collateral(self) -> None:
        assert estimate_profit(0, 1000) == 0


class TestScorePosition:
    def test_builds_scored_position(
        self, sample_token, liquidatable_position, sample_profile
    ) -> None:
        scored = score_position(
            sample_token,
            "BorrowerA11111",
            liquidatable_position,
            sample_profile,
            now=123.0,
        )
        assert scored.mint == sample_token.mint
        assert scored.token_name == "Alpha"
        assert scored.borrower == "BorrowerA11111"
        assert scored.factors.ltv_proximity == 100
        assert scored.factors.price_momentum == 50
        assert scored.factors.wallet_risk == 50
        assert scored.factors.interest_burden == 0
        # 40 + 15 + 10 + 0
        assert scored.risk_score == 65
        assert scored.estimated_profit_lamports == 899_995_000
        assert scored.last_scored == 123.0
        assert scored.wallet_profile is sample_profile
