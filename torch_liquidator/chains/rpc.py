"""JSON-RPC client with endpoint fallback support."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

logger = logging.getLogger(__name__)


class RpcError(RuntimeError):
    """Raised when an RPC call fails on every configured endpoint."""


class JsonRpcClient:
    """JSON-RPC 2.0 client with automatic endpoint fallback."""

    def __init__(self, endpoints: tuple[str, ...] | list[str], timeout: int = 30) -> None:
        if not endpoints:
            raise ValueError("JsonRpcClient needs at least one endpoint")
        self.endpoints = list(endpoints)
        self.timeout = timeout
        self.current_rpc_index = 0

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json(content_type=None)
                        if "error" in result:
                            raise RpcError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed on %s: %s", rpc_url, method, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RpcError(f"All RPC endpoints failed. Last error: {last_error}")
