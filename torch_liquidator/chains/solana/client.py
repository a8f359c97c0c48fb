"""Solana RPC reads used to discover token holders."""
from __future__ import annotations

import logging
from typing import Any

from ...config import ChainConfig
from ..rpc import JsonRpcClient

logger = logging.getLogger(__name__)


class SolanaClient(JsonRpcClient):
    """Solana JSON-RPC client with automatic endpoint fallback."""

    def __init__(self, config: ChainConfig) -> None:
        super().__init__(config.rpc_endpoints, config.rpc_timeout)

    async def get_token_largest_accounts(self, mint: str) -> list[dict[str, Any]]:
        """Largest token accounts for a mint (the RPC caps this at 20)."""
        result = await self.rpc_call(
            "getTokenLargestAccounts", [mint, {"commitment": "confirmed"}]
        )
        return (result or {}).get("value", [])

    async def get_parsed_account_info(self, address: str) -> dict[str, Any]:
        result = await self.rpc_call(
            "getAccountInfo",
            [address, {"encoding": "jsonParsed", "commitment": "confirmed"}],
        )
        return (result or {}).get("value") or {}

    async def get_token_holders(self, mint: str, limit: int) -> list[str]:
        """Resolve owners of the largest non-empty token accounts of a mint."""
        accounts = await self.get_token_largest_accounts(mint)

        holders: list[str] = []
        for account in accounts[:limit]:
            if int(account.get("amount", 0) or 0) == 0:
                continue
            try:
                info = await self.get_parsed_account_info(account["address"])
                data = info.get("data", {})
                if isinstance(data, dict) and "parsed" in data:
                    holders.append(data["parsed"]["info"]["owner"])
            except Exception as e:
                logger.debug(
                    "Skipping token account %s: %s", account.get("address"), e
                )
        return holders
