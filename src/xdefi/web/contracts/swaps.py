"""Swap config contracts for the settlement DEX hook."""

from typing import Optional, Union

from pydantic import BaseModel, Field


class SwapConfigRequest(BaseModel):
    """A SwapConfig to validate and encode."""

    dex_aggregator: str = Field(..., description="Whitelisted aggregator contract")
    approve_address: str = Field(..., description="Spender approved before the aggregator call")
    swap_calldata: str = Field(..., description="Aggregator calldata (hex, selector included)")
    to_token: str = Field(..., description="Output token, zero address for native")
    min_amount_out: Union[int, str] = Field(..., description="Slippage floor in atomic units")
    is_native_token: bool = Field(default=False, description="Whether the output is native")


class EncodedSwapConfigResponse(BaseModel):
    """ABI-encoded SwapConfig."""

    success: bool = True
    data: str = Field(..., description="0x-prefixed encoded tuple for the hook's data argument")


class PrepareSwapRequest(BaseModel):
    """Request to fetch, validate and encode a hook swap."""

    chain_id: int = Field(..., gt=0, description="EVM chain id")
    from_token: str = Field(..., description="Token paid")
    to_token: str = Field(..., description="Token received")
    amount_raw: str = Field(..., pattern=r"^\d+$", description="Input amount in atomic units")
    user_address: str = Field(..., description="Wallet the swap is quoted for")
    slippage_percent: Optional[float] = Field(
        None, ge=0, lt=100, description="Slippage tolerance in percent"
    )


class PreparedSwapResponse(BaseModel):
    """Encoded swap ready for the DEX hook."""

    success: bool = True
    chain_id: int
    hook_address: Optional[str] = None
    dex_aggregator: str
    approve_address: str
    to_token: str
    min_amount_out: str
    is_native_token: bool
    expected_amount_out: Optional[str] = None
    data: str
