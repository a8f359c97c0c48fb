from .adapter import TorchMarketAdapter, build_venue

__all__ = ["TorchMarketAdapter", "build_venue"]
