"""Normalization of OKX aggregator quote payloads.

The quote endpoint is loosely typed: depending on deployment it returns a
single quote object or an array of candidate quotes, amounts may live at the
top level or inside ``quoteCompareList``, and numeric fields arrive as either
numbers or strings. Everything here degrades field by field; a malformed
sub-field leaves that field unset instead of failing the whole quote.
"""

import logging
import math
import re
from typing import Any, Optional

from xdefi.routing.base import DEFAULT_DECIMALS, Quote, Route
from xdefi.utils.units import format_units, truncate_fraction

logger = logging.getLogger(__name__)

SUCCESS_CODE = "0"

# Upper bound on token decimals (digits in a uint256)
MAX_DECIMALS = 77

_UINT_RE = re.compile(r"^\d+$")


def parse_uint(value: Any) -> Optional[int]:
    """Parse a non-negative integer from an int or a base-10 digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        if _UINT_RE.match(text):
            return int(text)
    return None


def _uint_str(value: Any) -> Optional[str]:
    parsed = parse_uint(value)
    return str(parsed) if parsed is not None else None


def _text(value: Any) -> Optional[str]:
    """Return a string field, accepting plain numbers as their decimal text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return str(value)
    return None


def _parse_price(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return price if math.isfinite(price) else None


def is_error_payload(payload: Any) -> bool:
    """Check the response envelope for a non-success code."""
    if not isinstance(payload, dict):
        return False
    code = payload.get("code")
    if code is None:
        code = payload.get("error_code")
    return code is not None and str(code) != SUCCESS_CODE


def select_best_candidate(candidates: list) -> Any:
    """Pick the candidate quote with the largest ``toTokenAmount``.

    Amounts compare as integers. Ties keep the earliest candidate, and a
    candidate whose amount cannot be parsed ranks as zero but stays eligible.

    Returns:
        The chosen candidate, or None for an empty list
    """
    best = None
    best_amount = -1
    for candidate in candidates:
        amount = None
        if isinstance(candidate, dict):
            amount = parse_uint(candidate.get("toTokenAmount"))
        if amount is None:
            amount = 0
        if amount > best_amount:
            best, best_amount = candidate, amount
    return best


def _extract_routes(data: dict) -> list[Route]:
    router_list = data.get("dexRouterList")
    if not isinstance(router_list, list):
        return []

    routes = []
    for entry in router_list:
        if not isinstance(entry, dict):
            continue
        protocol = entry.get("dexProtocol")
        if not isinstance(protocol, dict):
            protocol = {}

        dex_name = protocol.get("dexName")
        if dex_name is None:
            dex_name = entry.get("dexName")
        percent = protocol.get("percent")
        if percent is None:
            percent = entry.get("percent")

        routes.append(
            Route(
                dex_name=_text(dex_name),
                percent=_text(percent),
                router=_text(entry.get("router")),
            )
        )
    return routes


def normalize_quote(raw: Any) -> Optional[Quote]:
    """Map a quote object (or array of candidates) onto a canonical Quote.

    Returns:
        Quote, or None when there is nothing to read a quote from
    """
    data = select_best_candidate(raw) if isinstance(raw, list) else raw
    if not isinstance(data, dict):
        if data is not None:
            logger.warning(f"Unexpected quote payload type: {type(data).__name__}")
        return None

    compare_list = data.get("quoteCompareList")
    first_compare = {}
    if isinstance(compare_list, list) and compare_list and isinstance(compare_list[0], dict):
        first_compare = compare_list[0]

    def pick(key: str, compare_key: Optional[str] = None, parse=_text) -> Optional[str]:
        value = parse(data.get(key))
        if value is None:
            value = parse(first_compare.get(compare_key or key))
        return value

    return Quote(
        raw_amount_in=pick("fromTokenAmount", "amountIn", parse=_uint_str),
        raw_amount_out=pick("toTokenAmount", "amountOut", parse=_uint_str),
        trade_fee_usd=pick("tradeFee"),
        estimate_gas_fee=pick("estimateGasFee"),
        price_impact_percent=pick("priceImpactPercent"),
        routes=_extract_routes(data),
        price=_parse_price(data.get("price")),
        raw=data,
    )


def normalize_quote_response(payload: Any) -> Optional[Quote]:
    """Normalize a full quote endpoint response, envelope included.

    A non-success ``code``/``error_code`` means no quote is available. The
    quote body is ``payload["data"]`` when present, else the payload itself.
    """
    if is_error_payload(payload):
        logger.info(
            f"Quote unavailable: code={payload.get('code', payload.get('error_code'))} "
            f"msg={payload.get('msg') or payload.get('error_message') or ''}"
        )
        return None

    raw = payload
    if isinstance(payload, dict) and payload.get("data") is not None:
        raw = payload["data"]

    if isinstance(raw, list) and not raw:
        logger.info("Quote unavailable: empty candidate list")
        return None

    return normalize_quote(raw)


def output_decimals(quote: Quote, fallback: Optional[int] = None) -> int:
    """Decimals of the output token, preferring what the upstream reported."""
    reported = None
    if isinstance(quote.raw, dict):
        to_token = quote.raw.get("toToken")
        if isinstance(to_token, dict):
            reported = to_token.get("decimal")
            if reported is None:
                reported = to_token.get("decimals")

    if isinstance(reported, str):
        reported = parse_uint(reported)
    if isinstance(reported, int) and not isinstance(reported, bool):
        if 0 <= reported <= MAX_DECIMALS:
            return reported
        logger.warning(f"Ignoring implausible output decimals: {reported}")
    return fallback if fallback is not None else DEFAULT_DECIMALS


def display_amount_out(
    quote: Quote,
    fallback_decimals: Optional[int] = None,
    max_digits: int = 6,
) -> str:
    """Human-readable output amount for display.

    The truncation is cosmetic; execution paths must use ``raw_amount_out``.
    """
    decimals = output_decimals(quote, fallback_decimals)
    raw_out = parse_uint(quote.raw_amount_out or quote.amount_out or "0")
    if raw_out is None:
        return "0"
    return truncate_fraction(format_units(raw_out, decimals), max_digits)
