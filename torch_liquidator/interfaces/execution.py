"""Execution strategy protocol: how liquidation attempts are scheduled."""
from typing import Awaitable, Callable, Protocol, Sequence

from ..models import LiquidationOutcome, ScoredPosition

AttemptFn = Callable[[ScoredPosition], Awaitable[LiquidationOutcome | None]]


class ExecutionStrategy(Protocol):
    """Runs liquidation attempts over candidates already in priority order."""

    async def run(
        self, candidates: Sequence[ScoredPosition], attempt: AttemptFn
    ) -> list[LiquidationOutcome]: ...
