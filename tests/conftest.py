"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from torch_liquidator.config import (
    AppConfig,
    CacheConfig,
    ChainConfig,
    ExecutionConfig,
    MonitorConfig,
    NotificationsConfig,
    TelegramConfig,
    VenueConfig,
    WatchConfig,
)
from torch_liquidator.models import (
    Health,
    LendingParams,
    LoanPosition,
    MonitoredToken,
    Reputation,
    SettlementReport,
    TokenListing,
    TradeStats,
    WalletProfile,
)

SOL = 1_000_000_000


class FakeClock:
    """Manually advanced clock, callable like ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_cache_config() -> CacheConfig:
    return CacheConfig(profile_cooldown_seconds=300, max_age_seconds=1800, max_size=1000)


@pytest.fixture()
def sample_app_config(sample_cache_config: CacheConfig) -> AppConfig:
    return AppConfig(
        monitor=MonitorConfig(
            scan_interval_seconds=60,
            score_interval_seconds=15,
            min_profit_sol=0.01,
            risk_threshold=60,
            price_history_depth=5,
        ),
        cache=sample_cache_config,
        execution=ExecutionConfig(strategy="sequential"),
        chain=ChainConfig(rpc_endpoints=("https://rpc1.example.com",), rpc_timeout=10),
        venue=VenueConfig(gateway_endpoints=("https://gateway.example.com",)),
        watch=WatchConfig(wallet_address="MyWa11et1111111111111111111111111111111111"),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_lending() -> LendingParams:
    return LendingParams(
        interest_rate_bps=200,
        max_ltv_bps=5000,
        liquidation_threshold_bps=6500,
        liquidation_bonus_bps=1000,
        treasury_available_lamports=50 * SOL,
        active_loans=3,
        total_lent_lamports=12 * SOL,
    )


@pytest.fixture()
def sample_token(sample_lending: LendingParams) -> MonitoredToken:
    return MonitoredToken(
        mint="MintAAAA1111",
        name="Alpha",
        symbol="ALPHA",
        lending=sample_lending,
        price_sol=0.002,
        price_history=(0.002, 0.002, 0.002),
    )


@pytest.fixture()
def sample_listing() -> TokenListing:
    return TokenListing(
        mint="MintAAAA1111",
        name="Alpha",
        symbol="ALPHA",
        price_lamports=2_000_000,
        status="migrated",
    )


@pytest.fixture()
def liquidatable_position() -> LoanPosition:
    return LoanPosition(
        health=Health.LIQUIDATABLE,
        current_ltv_bps=7000,
        collateral_amount=5_000_000,
        collateral_value_lamports=10 * SOL,
        borrowed_amount=7 * SOL,
        accrued_interest=0,
        total_owed=7 * SOL,
    )


@pytest.fixture()
def sample_profile(clock: FakeClock) -> WalletProfile:
    return WalletProfile(
        address="BorrowerA11111",
        verified=False,
        tier=None,
        trade_stats=TradeStats(),
        risk_score=50,
        last_updated=clock(),
    )


@pytest.fixture()
def mock_venue() -> AsyncMock:
    """Venue whose calls succeed with neutral data unless a test overrides them."""
    venue = AsyncMock()
    venue.list_tokens.return_value = []
    venue.list_borrowers.return_value = []
    venue.get_trade_messages.return_value = []
    venue.get_reputation.return_value = Reputation()
    venue.execute_liquidation.return_value = "SiGnAtUrE"
    venue.report_settlement.return_value = SettlementReport(
        confirmed=True, event_type="liquidation"
    )
    return venue


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    monitor:
      scan_interval_seconds: 30
      score_interval_seconds: 10
      min_profit_sol: 0.05
      risk_threshold: 70
      price_history_depth: 12
    cache:
      profile_cooldown_seconds: 120
      max_age_seconds: 600
      max_size: 50
    execution:
      strategy: bounded_parallel
      max_in_flight: 2
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    venue:
      gateway_endpoints: ["https://gateway.example.com"]
    watch:
      wallet_address: "0xWATCH"
      auto_repay: "true"
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: 999
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample gateway payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def raw_lending_info() -> dict:
    return {
        "interest_rate_bps": 200,
        "max_ltv_bps": 5000,
        "liquidation_threshold_bps": 6500,
        "liquidation_bonus_bps": 1000,
        "treasury_sol_available": 50 * SOL,
        "total_sol_lent": None,
        "active_loans": None,
    }


@pytest.fixture()
def raw_position() -> dict:
    return {
        "health": "at_risk",
        "collateral_amount": 5_000_000,
        "collateral_value_sol": 10 * SOL,
        "borrowed_amount": 6 * SOL,
        "accrued_interest": 10_000_000,
        "total_owed": 6 * SOL + 10_000_000,
        "current_ltv_bps": 6010,
    }
