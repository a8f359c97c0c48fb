"""Unit tests for data models."""
from __future__ import annotations

from dataclasses import replace

import pytest

from torch_liquidator.models import (
    Health,
    LendingParams,
    LoanActivity,
    MonitoredToken,
    WalletProfile,
)


class TestLendingParams:
    @pytest.mark.parametrize(
        ("active_loans", "expected"),
        [(None, LoanActivity.UNKNOWN), (0, LoanActivity.NONE), (4, LoanActivity.ACTIVE)],
    )
    def test_loan_activity_tri_state(
        self, sample_lending: LendingParams, active_loans, expected
    ) -> None:
        lending = replace(sample_lending, active_loans=active_loans)
        assert lending.loan_activity is expected

    def test_frozen(self, sample_lending: LendingParams) -> None:
        with pytest.raises(AttributeError):
            sample_lending.active_loans = 0  # type: ignore[misc]


class TestMonitoredToken:
    def test_defaults(self, sample_lending: LendingParams) -> None:
        t = MonitoredToken(
            mint="m", name="n", symbol="s", lending=sample_lending, price_sol=1.0
        )
        assert t.price_history == ()
        assert t.active_borrowers == ()
        assert t.last_scanned == 0.0

    def test_frozen(self, sample_token: MonitoredToken) -> None:
        with pytest.raises(AttributeError):
            sample_token.price_history = ()  # type: ignore[misc]


class TestWalletProfile:
    def test_frozen(self, sample_profile: WalletProfile) -> None:
        with pytest.raises(AttributeError):
            sample_profile.risk_score = 0  # type: ignore[misc]


class TestHealth:
    def test_values(self) -> None:
        assert Health("liquidatable") is Health.LIQUIDATABLE
        assert Health.AT_RISK.value == "at_risk"
