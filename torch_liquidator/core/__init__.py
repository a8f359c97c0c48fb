"""Liquidation decision pipeline: discovery, profiling, scoring, execution."""
from .execution import (
    BoundedParallelExecution,
    SequentialExecution,
    build_execution_strategy,
)
from .liquidator import Liquidator
from .profiler import WalletProfiler, compute_wallet_risk
from .scanner import scan_lending_markets
from .scorer import score_position

__all__ = [
    "BoundedParallelExecution",
    "Liquidator",
    "SequentialExecution",
    "WalletProfiler",
    "build_execution_strategy",
    "compute_wallet_risk",
    "scan_lending_markets",
    "score_position",
]
