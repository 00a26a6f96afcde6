"""Quote request and response contracts."""

from typing import Optional

from pydantic import BaseModel, Field


class QuoteRequestBody(BaseModel):
    """Request for a one-shot exact-input quote."""

    chain_id: int = Field(..., gt=0, description="EVM chain id (sent as chainIndex)")
    from_token: str = Field(..., min_length=1, description="Address of the token paid")
    to_token: str = Field(..., min_length=1, description="Address of the token received")
    amount: str = Field(..., description="Human-readable input amount, e.g. '1.5'")
    from_decimals: Optional[int] = Field(None, ge=0, description="Input token decimals")
    to_decimals: Optional[int] = Field(None, ge=0, description="Output token decimals")


class RouteInfo(BaseModel):
    """One venue share of the quoted swap."""

    dex_name: Optional[str] = None
    percent: Optional[str] = None
    router: Optional[str] = None


class QuoteResponse(BaseModel):
    """Response containing quote details."""

    success: bool = Field(..., description="Whether a quote was obtained")
    amount_raw_in: Optional[str] = Field(None, description="Input in atomic units")
    to_amount: str = Field(default="", description="Display output amount (truncated)")
    raw_amount_out: Optional[str] = Field(None, description="Output in atomic units")
    trade_fee_usd: Optional[str] = Field(None, description="Trade fee in USD")
    estimate_gas_fee: Optional[str] = Field(None, description="Gas estimate in wei")
    price_impact_percent: Optional[str] = Field(None, description="Price impact in percent")
    price: Optional[float] = Field(None, description="Implied price if reported")
    routes: list[RouteInfo] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="quote_unavailable, quote_failed or invalid_input")


class TokenInfo(BaseModel):
    """Token descriptor from the aggregator token list."""

    address: str
    symbol: str
    name: str
    decimals: Optional[int] = None
    logo_uri: Optional[str] = None


class TokenListResponse(BaseModel):
    """Response containing the aggregator's token list for a chain."""

    success: bool = True
    chain_id: int
    tokens: list[TokenInfo] = Field(default_factory=list)
    total: int = Field(default=0, description="Number of tokens returned")
