"""xdefi: live DEX aggregator quotes and settlement-hook swap payloads."""

__version__ = "0.1.0"
