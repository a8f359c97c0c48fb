"""Small formatting and math helpers shared across modules."""
from __future__ import annotations

import math

LAMPORTS_PER_SOL = 1_000_000_000


def sol(lamports: float) -> str:
    """Format a lamport amount as SOL with four decimals."""
    return f"{lamports / LAMPORTS_PER_SOL:.4f}"


def bps_to_percent(bps: float) -> str:
    return f"{bps / 100:.2f}%"


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf (not banker's)."""
    return math.floor(value + 0.5)


def short_address(address: str) -> str:
    if len(address) > 8:
        return f"{address[:8]}..."
    return address
