"""Torch Market adapter: lending reads and writes through the agent gateway.

Transaction building and signing live in the gateway process; this adapter
only speaks JSON-RPC to it and parses the replies.
"""
from __future__ import annotations

import logging
from typing import Any

from ...chains.rpc import JsonRpcClient
from ...chains.solana import SolanaClient
from ...config import AppConfig
from ...interfaces.chain import ChainClient
from ...models import (
    LendingParams,
    LoanPosition,
    Reputation,
    SettlementReport,
    TokenListing,
)
from ...utils import short_address
from . import parser

logger = logging.getLogger(__name__)


class TorchMarketAdapter:
    """Implements the lending venue interface for Torch Market."""

    def __init__(self, chain_client: ChainClient, gateway: JsonRpcClient) -> None:
        self._chain = chain_client
        self._gateway = gateway

    @property
    def protocol_name(self) -> str:
        return "torch"

    async def list_tokens(
        self, status: str = "migrated", sort: str = "volume", limit: int = 50
    ) -> list[TokenListing]:
        result = await self._gateway.rpc_call("torch_listTokens", [status, sort, limit])

        tokens: list[TokenListing] = []
        for raw in result or []:
            try:
                tokens.append(parser.parse_token(raw))
            except Exception as e:
                logger.debug("Skipping malformed token listing %r: %s", raw, e)
        return tokens

    async def get_token(self, mint: str) -> TokenListing:
        result = await self._gateway.rpc_call("torch_getToken", [mint])
        return parser.parse_token(result or {"mint": mint})

    async def get_lending_params(self, mint: str) -> LendingParams:
        result = await self._gateway.rpc_call("torch_getLendingInfo", [mint])
        return parser.parse_lending_params(result or {})

    async def get_position(self, mint: str, borrower: str) -> LoanPosition:
        result = await self._gateway.rpc_call("torch_getLoanPosition", [mint, borrower])
        return parser.parse_position(result or {})

    async def list_borrowers(self, mint: str, limit: int = 100) -> list[str]:
        return await self._chain.get_token_holders(mint, limit)

    async def get_trade_messages(self, mint: str, limit: int = 50) -> list[dict[str, Any]]:
        result = await self._gateway.rpc_call("torch_getMessages", [mint, limit])
        return list(result or [])

    async def get_reputation(self, address: str) -> Reputation:
        """SAID reputation lookup; degrades to unverified instead of raising."""
        try:
            result = await self._gateway.rpc_call("torch_verifySaid", [address])
        except Exception as e:
            logger.warning(
                "Reputation lookup failed for %s: %s", short_address(address), e
            )
            return Reputation()
        return parser.parse_reputation(result)

    async def execute_liquidation(self, mint: str, borrower: str) -> str:
        result = await self._gateway.rpc_call("torch_liquidateLoan", [mint, borrower])
        return parser.parse_signature(result)

    async def repay(self, mint: str, amount: int) -> str:
        result = await self._gateway.rpc_call("torch_repayLoan", [mint, amount])
        return parser.parse_signature(result)

    async def report_settlement(self, signature: str) -> SettlementReport:
        result = await self._gateway.rpc_call("torch_confirm", [signature])
        return parser.parse_settlement(result)


def build_venue(config: AppConfig) -> TorchMarketAdapter:
    """Wire the Solana client and the gateway client into an adapter."""
    chain_client = SolanaClient(config.chain)
    gateway = JsonRpcClient(config.venue.gateway_endpoints, config.venue.gateway_timeout)
    return TorchMarketAdapter(chain_client, gateway)
