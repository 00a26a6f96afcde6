"""SwapConfig encoding for the settlement DEX hook.

The hook's ``execute()`` takes an opaque ``bytes data`` argument that it
decodes as::

    struct SwapConfig {
        address dexAggregator;   // whitelisted OKX aggregator
        address approveAddress;  // spender the hook approves before the call
        bytes swapCalldata;      // aggregator calldata, selector included
        address toToken;         // address(0) for the native token
        uint256 minAmountOut;    // slippage floor
        bool isNativeToken;
    }

Validation runs completely before any encoding; the hook call is irreversible
once signed, so a bad config must never produce bytes.
"""

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Union

from eth_abi import decode, encode
from web3 import Web3

from xdefi.chains import is_zero_address

logger = logging.getLogger(__name__)

SWAP_CONFIG_TYPE = "(address,address,bytes,address,uint256,bool)"

MAX_UINT256 = 2**256 - 1
SELECTOR_SIZE = 4

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


class SwapConfigViolation(str, Enum):
    """Which precondition a swap config failed."""

    ZERO_DEX_AGGREGATOR = "zero_dex_aggregator"
    ZERO_APPROVE_ADDRESS = "zero_approve_address"
    INVALID_SWAP_CALLDATA = "invalid_swap_calldata"
    NATIVE_TOKEN_MISMATCH = "native_token_mismatch"
    INVALID_MIN_AMOUNT_OUT = "invalid_min_amount_out"
    INVALID_ADDRESS = "invalid_address"


class SwapConfigValidationError(ValueError):
    """Raised when a swap config fails validation. Nothing has been encoded."""

    def __init__(self, violation: SwapConfigViolation, message: str):
        self.violation = violation
        super().__init__(message)


@dataclass(frozen=True)
class SwapExecutionConfig:
    """Parameters of one hook-executed swap. Build, encode once, discard."""

    dex_aggregator: str
    approve_address: str
    swap_calldata: Union[bytes, str]  # raw bytes or hex, "0x" optional
    to_token: str
    min_amount_out: Union[int, str]
    is_native_token: bool


def _checksum(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        raise SwapConfigValidationError(
            SwapConfigViolation.INVALID_ADDRESS,
            f"{field_name} is not a valid address: {value!r}",
        )
    return Web3.to_checksum_address(value)


def _calldata_bytes(value: Union[bytes, str, None]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    elif isinstance(value, str):
        text = value.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        if len(text) % 2 or not _HEX_RE.match(text):
            raise SwapConfigValidationError(
                SwapConfigViolation.INVALID_SWAP_CALLDATA,
                "swapCalldata is not valid hex",
            )
        data = bytes.fromhex(text)
    else:
        data = b""

    if len(data) < SELECTOR_SIZE:
        raise SwapConfigValidationError(
            SwapConfigViolation.INVALID_SWAP_CALLDATA,
            "swapCalldata must be at least 4 bytes (function selector)",
        )
    return data


def _uint256(value: Union[int, str]) -> int:
    amount = None
    if isinstance(value, int) and not isinstance(value, bool):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == "0x":
                amount = int(text[2:], 16)
            elif text.isdigit():
                amount = int(text, 10)
        except ValueError:
            amount = None

    if amount is None:
        raise SwapConfigValidationError(
            SwapConfigViolation.INVALID_MIN_AMOUNT_OUT,
            f"minAmountOut is not an unsigned integer: {value!r}",
        )
    if not 0 <= amount <= MAX_UINT256:
        raise SwapConfigValidationError(
            SwapConfigViolation.INVALID_MIN_AMOUNT_OUT,
            f"minAmountOut out of uint256 range: {amount}",
        )
    return amount


def validate_swap_config(config: SwapExecutionConfig) -> tuple:
    """Validate a swap config and return its ABI-ready field tuple.

    Checks run in a fixed order and the first failure is raised.

    Raises:
        SwapConfigValidationError: On the first violated precondition
    """
    if is_zero_address(config.dex_aggregator):
        raise SwapConfigValidationError(
            SwapConfigViolation.ZERO_DEX_AGGREGATOR,
            "dexAggregator address cannot be zero",
        )
    dex_aggregator = _checksum(config.dex_aggregator, "dexAggregator")

    if is_zero_address(config.approve_address):
        raise SwapConfigValidationError(
            SwapConfigViolation.ZERO_APPROVE_ADDRESS,
            "approveAddress cannot be zero",
        )
    approve_address = _checksum(config.approve_address, "approveAddress")

    swap_calldata = _calldata_bytes(config.swap_calldata)

    # Empty toToken is not address(0)
    is_native = bool(config.is_native_token)
    if is_native and not (config.to_token and is_zero_address(config.to_token)):
        raise SwapConfigValidationError(
            SwapConfigViolation.NATIVE_TOKEN_MISMATCH,
            "If isNativeToken is true, toToken must be address(0)",
        )
    to_token = _checksum(config.to_token, "toToken")
    if not is_native and is_zero_address(to_token):
        raise SwapConfigValidationError(
            SwapConfigViolation.NATIVE_TOKEN_MISMATCH,
            "If isNativeToken is false, toToken must not be address(0)",
        )

    min_amount_out = _uint256(config.min_amount_out)

    return (dex_aggregator, approve_address, swap_calldata, to_token, min_amount_out, is_native)


def encode_swap_config(config: SwapExecutionConfig) -> str:
    """Validate and ABI-encode a swap config as a single tuple.

    Returns:
        0x-prefixed hex of the encoded tuple, passed verbatim as the hook's
        ``data`` argument

    Raises:
        SwapConfigValidationError: If the config is invalid
    """
    fields = validate_swap_config(config)
    encoded = encode([SWAP_CONFIG_TYPE], [fields])
    logger.debug(
        f"Encoded swap config: aggregator={fields[0]} toToken={fields[3]} "
        f"minAmountOut={fields[4]} native={fields[5]} ({len(encoded)} bytes)"
    )
    return "0x" + encoded.hex()


def decode_swap_config(data: Union[bytes, str]) -> SwapExecutionConfig:
    """Decode hook ``data`` back into a SwapExecutionConfig.

    Calldata comes back as 0x-prefixed hex and addresses checksummed.
    """
    if isinstance(data, str):
        text = data[2:] if data[:2].lower() == "0x" else data
        data = bytes.fromhex(text)

    (fields,) = decode([SWAP_CONFIG_TYPE], data)
    dex_aggregator, approve_address, swap_calldata, to_token, min_amount_out, is_native = fields
    return SwapExecutionConfig(
        dex_aggregator=Web3.to_checksum_address(dex_aggregator),
        approve_address=Web3.to_checksum_address(approve_address),
        swap_calldata="0x" + swap_calldata.hex(),
        to_token=Web3.to_checksum_address(to_token),
        min_amount_out=min_amount_out,
        is_native_token=is_native,
    )


def compute_min_amount_out(
    expected_amount_out: Union[int, str],
    slippage_percent: Union[float, str, Decimal],
) -> int:
    """Apply a slippage tolerance to an expected output amount.

    Args:
        expected_amount_out: Expected output in atomic units
        slippage_percent: Tolerance in percent (0.5 = 0.5%)

    Returns:
        Minimum acceptable output in atomic units, rounded down
    """
    expected = int(expected_amount_out)
    if expected < 0:
        raise ValueError(f"Expected amount must be non-negative: {expected}")

    try:
        slippage = Decimal(str(slippage_percent))
    except InvalidOperation as e:
        raise ValueError(f"Invalid slippage: {slippage_percent!r}") from e
    if not slippage.is_finite() or not 0 <= slippage < 100:
        raise ValueError(f"Slippage must be in [0, 100): {slippage_percent}")

    with localcontext() as ctx:
        ctx.prec = 100
        minimum = Decimal(expected) * (Decimal(100) - slippage) / Decimal(100)
        return int(minimum.to_integral_value(rounding=ROUND_FLOOR))
