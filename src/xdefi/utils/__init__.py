"""Utility modules for xdefi."""

from xdefi.utils.debounce import Debouncer
from xdefi.utils.units import format_units, is_positive_amount, parse_units, truncate_fraction

__all__ = [
    "Debouncer",
    "format_units",
    "is_positive_amount",
    "parse_units",
    "truncate_fraction",
]
