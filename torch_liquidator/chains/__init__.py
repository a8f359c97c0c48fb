"""Chain transport clients."""
from .rpc import JsonRpcClient, RpcError
from .solana import SolanaClient

__all__ = ["JsonRpcClient", "RpcError", "SolanaClient"]
