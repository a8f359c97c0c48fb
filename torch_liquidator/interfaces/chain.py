"""Chain client protocol: blockchain RPC abstraction."""
from typing import Protocol


class ChainClient(Protocol):
    """Abstract interface for the chain reads the agent needs."""

    async def get_token_holders(self, mint: str, limit: int) -> list[str]: ...
