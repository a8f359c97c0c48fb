"""Risk-scored liquidation agent for Torch Market lending on Solana."""

__version__ = "0.1.0"
