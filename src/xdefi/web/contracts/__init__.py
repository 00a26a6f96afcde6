"""Request and response contracts for the web layer.

These Pydantic models define the API interface for web clients.
"""

from xdefi.web.contracts.quotes import (
    QuoteRequestBody,
    QuoteResponse,
    RouteInfo,
    TokenInfo,
    TokenListResponse,
)
from xdefi.web.contracts.swaps import (
    EncodedSwapConfigResponse,
    PreparedSwapResponse,
    PrepareSwapRequest,
    SwapConfigRequest,
)

__all__ = [
    # Quote contracts
    "QuoteRequestBody",
    "QuoteResponse",
    "RouteInfo",
    "TokenInfo",
    "TokenListResponse",
    # Swap contracts
    "EncodedSwapConfigResponse",
    "PreparedSwapResponse",
    "PrepareSwapRequest",
    "SwapConfigRequest",
]
