"""Per-network settlement configuration.

Each supported network has an OKX aggregator/router contract that the DEX hook
is allowed to call, and the DEX hook itself, which executes the aggregator
call during settlement.
"""

from dataclasses import dataclass
from typing import Optional

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Placeholder the aggregator uses for the chain's native asset
NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"


@dataclass(frozen=True)
class NetworkConfig:
    """Settlement contracts deployed on a network."""

    name: str
    chain_id: int
    native_symbol: str
    dex_aggregator: Optional[str] = None
    dex_hook: Optional[str] = None


NETWORKS: dict[str, NetworkConfig] = {
    "base": NetworkConfig(
        name="base",
        chain_id=8453,
        native_symbol="ETH",
        dex_aggregator="0x2bD541Ab3b704F7d4c9DFf79EfaDeaa85EC034f1",
        dex_hook="0x7A9d1F41DFE2F83b718577C899E441112516f1F2",
    ),
    "x-layer": NetworkConfig(
        name="x-layer",
        chain_id=196,
        native_symbol="OKB",
        dex_aggregator="0xC259de94F6bedDec5Ed1C024b0283082ffa50cca",
        dex_hook="0x3A278270787c18Cd3595D6eD90567d7D709c2cEf",
    ),
}


def get_network(name: str) -> Optional[NetworkConfig]:
    """Get network config by name (case-insensitive)."""
    return NETWORKS.get(name.lower())


def get_network_by_chain_id(chain_id: int) -> Optional[NetworkConfig]:
    """Get network config by EVM chain id."""
    for network in NETWORKS.values():
        if network.chain_id == chain_id:
            return network
    return None


def is_zero_address(address: Optional[str]) -> bool:
    return not address or address.lower() == ZERO_ADDRESS


def is_native_token(address: Optional[str]) -> bool:
    """Check if an address denotes the native asset (placeholder or zero address)."""
    if not address:
        return False
    return address.lower() in (NATIVE_TOKEN_ADDRESS.lower(), ZERO_ADDRESS)
