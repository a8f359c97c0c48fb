"""Lending venue protocol: reads and writes against the lending market."""
from typing import Any, Protocol

from ..models import (
    LendingParams,
    LoanPosition,
    Reputation,
    SettlementReport,
    TokenListing,
)


class LendingVenue(Protocol):
    """Abstract interface for the lending venue and its reputation service."""

    async def list_tokens(
        self, status: str, sort: str, limit: int
    ) -> list[TokenListing]: ...

    async def get_token(self, mint: str) -> TokenListing: ...

    async def get_lending_params(self, mint: str) -> LendingParams: ...

    async def get_position(self, mint: str, borrower: str) -> LoanPosition: ...

    async def list_borrowers(self, mint: str, limit: int) -> list[str]: ...

    async def get_trade_messages(
        self, mint: str, limit: int
    ) -> list[dict[str, Any]]: ...

    async def get_reputation(self, address: str) -> Reputation: ...

    async def execute_liquidation(self, mint: str, borrower: str) -> str: ...

    async def repay(self, mint: str, amount: int) -> str: ...

    async def report_settlement(self, signature: str) -> SettlementReport: ...
