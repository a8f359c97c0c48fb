"""Protocol interfaces for the liquidation agent."""
from .chain import ChainClient
from .execution import AttemptFn, ExecutionStrategy
from .notifier import Notifier
from .venue import LendingVenue

__all__ = ["AttemptFn", "ChainClient", "ExecutionStrategy", "LendingVenue", "Notifier"]
