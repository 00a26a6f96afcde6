"""Quote service for one-shot quote lookups over HTTP.

Unlike the QuoteOrchestrator there is no debouncing or request sequencing
here: every call is an independent lookup.
"""

import logging
from typing import Optional

import httpx

from xdefi.config import get_settings
from xdefi.routing.base import QuoteRequest
from xdefi.routing.normalizer import display_amount_out
from xdefi.routing.okx import OkxClient
from xdefi.services.quote_orchestrator import QuoteError
from xdefi.utils.units import is_positive_amount, parse_units
from xdefi.web.contracts.quotes import (
    QuoteRequestBody,
    QuoteResponse,
    RouteInfo,
    TokenInfo,
    TokenListResponse,
)

logger = logging.getLogger(__name__)

INVALID_INPUT = "invalid_input"


class QuoteService:
    """Service for fetching quotes and token lists from the aggregator."""

    def __init__(self, client: Optional[OkxClient] = None):
        self._client = client or OkxClient()

    async def get_quote(self, request: QuoteRequestBody) -> QuoteResponse:
        """Get an exact-input quote.

        Args:
            request: Quote request parameters

        Returns:
            QuoteResponse with quote details, or the error kind on failure
        """
        settings = get_settings()
        from_decimals = (
            request.from_decimals
            if request.from_decimals is not None
            else settings.default_token_decimals
        )
        to_decimals = (
            request.to_decimals if request.to_decimals is not None else settings.default_token_decimals
        )
        if not is_positive_amount(request.amount):
            return QuoteResponse(success=False, error=INVALID_INPUT)
        try:
            raw_in = parse_units(request.amount, from_decimals)
        except ValueError:
            return QuoteResponse(success=False, error=INVALID_INPUT)
        if raw_in == 0:
            return QuoteResponse(success=False, error=INVALID_INPUT)
        amount_raw = str(raw_in)

        quote_request = QuoteRequest(
            chain_id=request.chain_id,
            token_in=request.from_token,
            token_out=request.to_token,
            amount_raw_in=amount_raw,
        )

        try:
            quote = await self._client.get_quote(quote_request)
        except httpx.HTTPError as e:
            logger.error(f"Failed to get quote: {e}")
            return QuoteResponse(
                success=False, amount_raw_in=amount_raw, error=QuoteError.FAILED.value
            )

        if quote is None:
            return QuoteResponse(
                success=False, amount_raw_in=amount_raw, error=QuoteError.UNAVAILABLE.value
            )

        return QuoteResponse(
            success=True,
            amount_raw_in=amount_raw,
            to_amount=display_amount_out(quote, to_decimals, settings.display_fraction_digits),
            raw_amount_out=quote.raw_amount_out,
            trade_fee_usd=quote.trade_fee_usd,
            estimate_gas_fee=quote.estimate_gas_fee,
            price_impact_percent=quote.price_impact_percent,
            price=quote.price,
            routes=[
                RouteInfo(dex_name=r.dex_name, percent=r.percent, router=r.router)
                for r in quote.routes
            ],
        )

    async def get_tokens(self, chain_id: int, limit: Optional[int] = None) -> TokenListResponse:
        """Get the aggregator token list for a chain."""
        tokens = await self._client.get_tokens(chain_id, limit=limit)
        return TokenListResponse(
            success=bool(tokens),
            chain_id=chain_id,
            tokens=[
                TokenInfo(
                    address=t.address,
                    symbol=t.symbol,
                    name=t.name,
                    decimals=t.decimals,
                    logo_uri=t.logo_uri,
                )
                for t in tokens
            ],
            total=len(tokens),
        )
