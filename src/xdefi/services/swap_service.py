"""Preparation of hook-executed swaps.

Fetches the aggregator's swap calldata and approval spender, derives the
slippage floor and encodes the SwapConfig the DEX hook executes during
settlement. Nothing is signed or broadcast here; the caller hands the
encoded payload to the wallet.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from xdefi.chains import ZERO_ADDRESS, get_network_by_chain_id, is_native_token
from xdefi.config import get_settings
from xdefi.routing.normalizer import parse_uint
from xdefi.routing.okx import OkxClient
from xdefi.swap.encoder import SwapExecutionConfig, compute_min_amount_out, encode_swap_config

logger = logging.getLogger(__name__)


class SwapUnavailableError(Exception):
    """Raised when the aggregator cannot provide what a swap needs."""

    pass


@dataclass
class PreparedSwap:
    """An encoded swap ready to be passed to the DEX hook."""

    chain_id: int
    config: SwapExecutionConfig
    data: str  # ABI-encoded SwapConfig
    hook_address: Optional[str] = None
    expected_amount_out: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "chain_id": self.chain_id,
            "hook_address": self.hook_address,
            "dex_aggregator": self.config.dex_aggregator,
            "approve_address": self.config.approve_address,
            "to_token": self.config.to_token,
            "min_amount_out": str(self.config.min_amount_out),
            "is_native_token": self.config.is_native_token,
            "expected_amount_out": self.expected_amount_out,
            "data": self.data,
        }


class SwapService:
    """Builds SwapExecutionConfig payloads from aggregator data."""

    def __init__(self, client: Optional[OkxClient] = None):
        self._client = client or OkxClient()

    async def prepare_swap(
        self,
        chain_id: int,
        from_token: str,
        to_token: str,
        amount_raw: str,
        user_address: str,
        slippage_percent: Optional[float] = None,
    ) -> PreparedSwap:
        """Prepare an encoded exact-input swap for the DEX hook.

        Args:
            chain_id: EVM chain id
            from_token: Token paid (aggregator address convention)
            to_token: Token received; the native placeholder marks native output
            amount_raw: Input amount in atomic units
            user_address: Address the aggregator quotes the swap for
            slippage_percent: Tolerance in percent (defaults to settings)

        Returns:
            PreparedSwap with the encoded hook payload

        Raises:
            SwapUnavailableError: If swap or approval data is missing
            SwapConfigValidationError: If the assembled config is invalid
        """
        if slippage_percent is None:
            slippage_percent = get_settings().default_slippage_percent

        swap_tx = await self._client.build_swap_tx(
            chain_id=chain_id,
            from_token=from_token,
            to_token=to_token,
            amount_raw=amount_raw,
            user_address=user_address,
            slippage_percent=slippage_percent,
        )
        if swap_tx is None:
            raise SwapUnavailableError(f"No swap route for {from_token} -> {to_token}")

        # Native input carries no allowance; the aggregator stands in as spender
        if is_native_token(from_token):
            approve_address = swap_tx.aggregator_address
        else:
            approve_tx = await self._client.get_approve_tx(chain_id, from_token, amount_raw)
            if approve_tx is None:
                raise SwapUnavailableError(f"No approval spender for {from_token}")
            approve_address = approve_tx.approve_address

        if swap_tx.min_receive_amount and parse_uint(swap_tx.min_receive_amount) is not None:
            min_amount_out = int(swap_tx.min_receive_amount)
        elif swap_tx.to_token_amount and parse_uint(swap_tx.to_token_amount) is not None:
            min_amount_out = compute_min_amount_out(swap_tx.to_token_amount, slippage_percent)
        else:
            raise SwapUnavailableError("Swap response carries no output amount")

        network = get_network_by_chain_id(chain_id)
        if (
            network
            and network.dex_aggregator
            and network.dex_aggregator.lower() != swap_tx.aggregator_address.lower()
        ):
            logger.warning(
                f"Aggregator {swap_tx.aggregator_address} differs from the one "
                f"whitelisted for {network.name} ({network.dex_aggregator})"
            )

        native_out = is_native_token(to_token)
        config = SwapExecutionConfig(
            dex_aggregator=swap_tx.aggregator_address,
            approve_address=approve_address,
            swap_calldata=swap_tx.data,
            to_token=ZERO_ADDRESS if native_out else to_token,
            min_amount_out=min_amount_out,
            is_native_token=native_out,
        )
        data = encode_swap_config(config)

        logger.info(
            f"Prepared swap on chain {chain_id}: {amount_raw} {from_token} -> {to_token} "
            f"(min out {min_amount_out})"
        )
        return PreparedSwap(
            chain_id=chain_id,
            config=config,
            data=data,
            hook_address=network.dex_hook if network else None,
            expected_amount_out=swap_tx.to_token_amount,
        )
