"""Data models: all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Health(str, Enum):
    """Loan health as reported by the lending venue."""

    NONE = "none"
    HEALTHY = "healthy"
    AT_RISK = "at_risk"
    LIQUIDATABLE = "liquidatable"


class LoanActivity(str, Enum):
    """Tri-state view of a market's active-loan counter."""

    UNKNOWN = "unknown"
    NONE = "none"
    ACTIVE = "active"


class TrustTier(str, Enum):
    """Reputation tier from the wallet identity service."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class TokenListing:
    """One entry of the venue's token listing."""

    mint: str
    name: str
    symbol: str
    price_lamports: float
    status: str = ""


@dataclass(frozen=True)
class LendingParams:
    """Lending market parameters for a single token."""

    interest_rate_bps: int
    max_ltv_bps: int
    liquidation_threshold_bps: int
    liquidation_bonus_bps: int
    treasury_available_lamports: int
    active_loans: int | None = None
    total_lent_lamports: int | None = None

    @property
    def loan_activity(self) -> LoanActivity:
        if self.active_loans is None:
            return LoanActivity.UNKNOWN
        if self.active_loans == 0:
            return LoanActivity.NONE
        return LoanActivity.ACTIVE


@dataclass(frozen=True)
class LoanPosition:
    """A borrower's loan in one lending market. Amounts are lamports."""

    health: Health
    current_ltv_bps: int = 0
    collateral_amount: int = 0
    collateral_value_lamports: int = 0
    borrowed_amount: int = 0
    accrued_interest: int = 0
    total_owed: int = 0


@dataclass(frozen=True)
class MonitoredToken:
    """A token with an active lending market, as seen by the last scan."""

    mint: str
    name: str
    symbol: str
    lending: LendingParams
    price_sol: float
    price_history: tuple[float, ...] = ()
    active_borrowers: tuple[str, ...] = ()
    last_scanned: float = 0.0


@dataclass(frozen=True)
class Reputation:
    verified: bool = False
    tier: TrustTier | None = None


@dataclass(frozen=True)
class TradeStats:
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.5
    net_pnl_sol: float = 0.0


@dataclass(frozen=True)
class WalletProfile:
    """Borrower risk profile. Replaced wholesale on refresh."""

    address: str
    verified: bool
    tier: TrustTier | None
    trade_stats: TradeStats
    risk_score: int
    last_updated: float


@dataclass(frozen=True)
class RiskFactors:
    """Raw factor values, each in [0, 100]."""

    ltv_proximity: int
    price_momentum: int
    wallet_risk: int
    interest_burden: int


@dataclass(frozen=True)
class ScoredPosition:
    mint: str
    token_name: str
    borrower: str
    position: LoanPosition
    wallet_profile: WalletProfile
    factors: RiskFactors
    risk_score: int
    estimated_profit_lamports: int
    last_scored: float


@dataclass(frozen=True)
class SettlementReport:
    confirmed: bool
    event_type: str = ""


@dataclass(frozen=True)
class LiquidationOutcome:
    mint: str
    borrower: str
    signature: str
    profit_lamports: int
    timestamp: float
    confirmed: bool
