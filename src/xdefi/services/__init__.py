"""Stateful services: live quote orchestration and swap preparation."""

from xdefi.services.quote_orchestrator import (
    QuoteError,
    QuoteMeta,
    QuoteOrchestrator,
    QuoteState,
    QuoteStatus,
    TaggedResult,
)
from xdefi.services.swap_service import PreparedSwap, SwapService, SwapUnavailableError

__all__ = [
    "QuoteError",
    "QuoteMeta",
    "QuoteOrchestrator",
    "QuoteState",
    "QuoteStatus",
    "TaggedResult",
    "PreparedSwap",
    "SwapService",
    "SwapUnavailableError",
]
