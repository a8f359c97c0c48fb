"""Unit tests for Torch Market gateway payload parsing."""
from __future__ import annotations

from torch_liquidator.models import Health, LoanActivity, TrustTier
from torch_liquidator.protocols.torch import parser

SOL = 1_000_000_000


class TestParseToken:
    def test_fields(self) -> None:
        token = parser.parse_token(
            {
                "mint": "MintAAAA1111",
                "name": "Alpha",
                "symbol": "ALPHA",
                "price_sol": 2_500_000,
                "status": "migrated",
            }
        )
        assert token.mint == "MintAAAA1111"
        assert token.symbol == "ALPHA"
        assert token.price_lamports == 2_500_000
        assert token.status == "migrated"

    def test_missing_price_is_zero(self) -> None:
        assert parser.parse_token({"mint": "m"}).price_lamports == 0


class TestParseLendingParams:
    def test_unknown_counters_stay_none(self, raw_lending_info: dict) -> None:
        lending = parser.parse_lending_params(raw_lending_info)
        assert lending.active_loans is None
        assert lending.total_lent_lamports is None
        assert lending.loan_activity is LoanActivity.UNKNOWN
        assert lending.liquidation_threshold_bps == 6500
        assert lending.treasury_available_lamports == 50 * SOL

    def test_zero_active_loans(self, raw_lending_info: dict) -> None:
        lending = parser.parse_lending_params({**raw_lending_info, "active_loans": 0})
        assert lending.loan_activity is LoanActivity.NONE

    def test_string_numbers(self, raw_lending_info: dict) -> None:
        lending = parser.parse_lending_params(
            {**raw_lending_info, "active_loans": "7", "liquidation_bonus_bps": "1000"}
        )
        assert lending.active_loans == 7
        assert lending.liquidation_bonus_bps == 1000


class TestParsePosition:
    def test_fields(self, raw_position: dict) -> None:
        pos = parser.parse_position(raw_position)
        assert pos.health is Health.AT_RISK
        assert pos.collateral_value_lamports == 10 * SOL
        assert pos.current_ltv_bps == 6010
        assert pos.accrued_interest == 10_000_000

    def test_missing_optional_values_default_to_zero(self) -> None:
        pos = parser.parse_position(
            {"health": "healthy", "collateral_value_sol": None, "current_ltv_bps": None}
        )
        assert pos.collateral_value_lamports == 0
        assert pos.current_ltv_bps == 0

    def test_unknown_health_is_none(self) -> None:
        assert parser.parse_health("exploded") is Health.NONE


class TestParseReputation:
    def test_verified_tier(self) -> None:
        rep = parser.parse_reputation({"verified": True, "trustTier": "medium"})
        assert rep.verified is True
        assert rep.tier is TrustTier.MEDIUM

    def test_null_tier(self) -> None:
        rep = parser.parse_reputation({"verified": False, "trustTier": None})
        assert rep.tier is None

    def test_empty_payload(self) -> None:
        rep = parser.parse_reputation(None)
        assert rep.verified is False
        assert rep.tier is None


class TestParseSignature:
    def test_string(self) -> None:
        assert parser.parse_signature("5xSig") == "5xSig"

    def test_dict(self) -> None:
        assert parser.parse_signature({"signature": "5xSig"}) == "5xSig"

    def test_unknown(self) -> None:
        assert parser.parse_signature({"ok": True}) == "unknown"
        assert parser.parse_signature(None) == "unknown"


class TestParseSettlement:
    def test_confirmed(self) -> None:
        report = parser.parse_settlement({"confirmed": True, "event_type": "liquidation"})
        assert report.confirmed is True
        assert report.event_type == "liquidation"

    def test_empty(self) -> None:
        assert parser.parse_settlement(None).confirmed is False
