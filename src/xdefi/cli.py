"""Encode a DEX hook SwapConfig from the command line.

Usage:
    xdefi-encode-swap-config \\
        --dex-aggregator 0xC259de94F6bedDec5Ed1C024b0283082ffa50cca \\
        --approve-address 0x... \\
        --swap-calldata 0x... \\
        --to-token 0x0000000000000000000000000000000000000000 \\
        --min-amount-out 100000000000000 \\
        --is-native-token true

The encoded payload is printed to stdout; pass it as the hook's ``data``.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from xdefi.chains import get_network
from xdefi.swap.encoder import SwapConfigValidationError, SwapExecutionConfig, encode_swap_config

logger = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    raise argparse.ArgumentTypeError(f"Expected true/false, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xdefi-encode-swap-config",
        description="Encode a SwapConfig struct for the DEX hook execute() call",
    )
    parser.add_argument("--network", type=str, help="Network whose aggregator to use (base, x-layer)")
    parser.add_argument("--dex-aggregator", type=str, help="Aggregator contract (overrides --network)")
    parser.add_argument("--approve-address", type=str, help="Spender to approve; defaults to the aggregator")
    parser.add_argument("--swap-calldata", type=str, required=True, help="Aggregator calldata (hex)")
    parser.add_argument("--to-token", type=str, required=True, help="Output token address")
    parser.add_argument("--min-amount-out", type=str, required=True, help="Minimum output (atomic units)")
    parser.add_argument("--is-native-token", type=_parse_bool, default=False, help="true if output is native")
    parser.add_argument("--json", action="store_true", help="Print a JSON object instead of bare hex")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the encoder CLI.

    Returns:
        Process exit code (0 on success, 1 on invalid config, 2 on bad usage)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    dex_aggregator = args.dex_aggregator
    if not dex_aggregator and args.network:
        network = get_network(args.network)
        if network is None:
            print(f"Error: unknown network {args.network!r}", file=sys.stderr)
            return 2
        dex_aggregator = network.dex_aggregator
    if not dex_aggregator:
        print("Error: --dex-aggregator or --network is required", file=sys.stderr)
        return 2

    config = SwapExecutionConfig(
        dex_aggregator=dex_aggregator,
        approve_address=args.approve_address or dex_aggregator,
        swap_calldata=args.swap_calldata,
        to_token=args.to_token,
        min_amount_out=args.min_amount_out,
        is_native_token=args.is_native_token,
    )

    try:
        data = encode_swap_config(config)
    except SwapConfigValidationError as e:
        print(f"Error ({e.violation.value}): {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps({"data": data, "dexAggregator": dex_aggregator}))
    else:
        print(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
