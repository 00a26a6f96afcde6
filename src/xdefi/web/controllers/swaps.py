"""Swap config API endpoints.

These endpoints only prepare the hook payload; signing and broadcasting
stay with the client's wallet.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from xdefi.services.swap_service import SwapService, SwapUnavailableError
from xdefi.swap.encoder import SwapConfigValidationError, SwapExecutionConfig, encode_swap_config
from xdefi.web.contracts.swaps import (
    EncodedSwapConfigResponse,
    PreparedSwapResponse,
    PrepareSwapRequest,
    SwapConfigRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/swaps", tags=["swaps"])


def get_swap_service() -> SwapService:
    """Dependency returning the swap service."""
    return SwapService()


def _validation_error(e: SwapConfigValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"violation": e.violation.value, "message": str(e)},
    )


@router.post("/encode-config", response_model=EncodedSwapConfigResponse)
async def encode_config(request: SwapConfigRequest) -> EncodedSwapConfigResponse:
    """Validate and ABI-encode a SwapConfig for the DEX hook."""
    config = SwapExecutionConfig(
        dex_aggregator=request.dex_aggregator,
        approve_address=request.approve_address,
        swap_calldata=request.swap_calldata,
        to_token=request.to_token,
        min_amount_out=request.min_amount_out,
        is_native_token=request.is_native_token,
    )
    try:
        data = encode_swap_config(config)
    except SwapConfigValidationError as e:
        logger.info(f"Rejected swap config: {e}")
        raise _validation_error(e)

    return EncodedSwapConfigResponse(data=data)


@router.post("/prepare", response_model=PreparedSwapResponse)
async def prepare_swap(
    request: PrepareSwapRequest,
    service: SwapService = Depends(get_swap_service),
) -> PreparedSwapResponse:
    """Fetch aggregator calldata and encode the hook payload for a swap."""
    try:
        prepared = await service.prepare_swap(
            chain_id=request.chain_id,
            from_token=request.from_token,
            to_token=request.to_token,
            amount_raw=request.amount_raw,
            user_address=request.user_address,
            slippage_percent=request.slippage_percent,
        )
    except SwapUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except SwapConfigValidationError as e:
        logger.warning(f"Aggregator data failed swap config validation: {e}")
        raise _validation_error(e)

    return PreparedSwapResponse(**prepared.to_dict())
