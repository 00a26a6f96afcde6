"""Swap execution payloads for the settlement DEX hook."""

from xdefi.swap.encoder import (
    SwapConfigValidationError,
    SwapConfigViolation,
    SwapExecutionConfig,
    compute_min_amount_out,
    decode_swap_config,
    encode_swap_config,
    validate_swap_config,
)

__all__ = [
    "SwapConfigValidationError",
    "SwapConfigViolation",
    "SwapExecutionConfig",
    "compute_min_amount_out",
    "decode_swap_config",
    "encode_swap_config",
    "validate_swap_config",
]
