"""Quote API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from xdefi.web.contracts.quotes import QuoteRequestBody, QuoteResponse, TokenListResponse
from xdefi.web.services.quote_service import QuoteService

router = APIRouter(prefix="/quotes", tags=["quotes"])


def get_quote_service() -> QuoteService:
    """Dependency returning the quote service."""
    return QuoteService()


@router.post("/", response_model=QuoteResponse)
async def get_quote(
    request: QuoteRequestBody,
    service: QuoteService = Depends(get_quote_service),
) -> QuoteResponse:
    """Get an exact-input swap quote.

    Failures are reported in the body (``success=false`` plus an error kind)
    rather than as HTTP errors, so clients can tell "no route" apart from
    "request failed".
    """
    return await service.get_quote(request)


@router.get("/tokens/{chain_id}", response_model=TokenListResponse)
async def get_tokens(
    chain_id: int,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    service: QuoteService = Depends(get_quote_service),
) -> TokenListResponse:
    """Get the aggregator's token list for a chain."""
    return await service.get_tokens(chain_id, limit=limit)
