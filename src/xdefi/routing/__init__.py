"""Routing module: quote types, payload normalization and the OKX client."""

from xdefi.routing.base import Quote, QuoteFetcher, QuoteRequest, Route, TokenRef
from xdefi.routing.normalizer import (
    display_amount_out,
    normalize_quote,
    normalize_quote_response,
    select_best_candidate,
)
from xdefi.routing.okx import ApproveTx, OkxClient, OkxToken, SwapTx

__all__ = [
    # Types
    "Quote",
    "QuoteFetcher",
    "QuoteRequest",
    "Route",
    "TokenRef",
    # Normalization
    "display_amount_out",
    "normalize_quote",
    "normalize_quote_response",
    "select_best_candidate",
    # Client
    "ApproveTx",
    "OkxClient",
    "OkxToken",
    "SwapTx",
]
