"""Core quote types shared by the aggregator client and the orchestrator."""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

DEFAULT_DECIMALS = 18


@dataclass(frozen=True)
class TokenRef:
    """Addressing and precision snapshot of a token."""

    address: str
    decimals: Optional[int] = None

    @property
    def resolved_decimals(self) -> int:
        """Token decimals, falling back to 18 when unknown."""
        return self.decimals if self.decimals is not None else DEFAULT_DECIMALS


@dataclass(frozen=True)
class QuoteRequest:
    """An exact-input quote lookup. Equal requests are the same lookup."""

    chain_id: int
    token_in: str
    token_out: str
    amount_raw_in: str  # atomic units, base-10

    def to_params(self) -> dict[str, str]:
        """Query parameters understood by the aggregator quote endpoint."""
        return {
            "chainIndex": str(self.chain_id),
            "fromTokenAddress": self.token_in,
            "toTokenAddress": self.token_out,
            "amount": self.amount_raw_in,
            "swapMode": "exactIn",
        }


@dataclass
class Route:
    """One venue share of a quoted swap."""

    dex_name: Optional[str] = None
    percent: Optional[str] = None
    router: Optional[str] = None


@dataclass
class Quote:
    """Canonical quote extracted from an aggregator response.

    Amounts are atomic-unit strings exactly as the upstream reported them.
    """

    raw_amount_in: Optional[str] = None
    raw_amount_out: Optional[str] = None
    trade_fee_usd: Optional[str] = None
    estimate_gas_fee: Optional[str] = None  # smallest native unit (wei)
    price_impact_percent: Optional[str] = None
    routes: list[Route] = field(default_factory=list)
    price: Optional[float] = None
    raw: Any = None  # upstream object the quote was read from

    @property
    def amount_out(self) -> Optional[str]:
        """Soft alias kept for callers that use the upstream naming."""
        return self.raw_amount_out

    @property
    def dex_names(self) -> list[str]:
        return [r.dex_name for r in self.routes if r.dex_name]

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict (without the raw payload)."""
        return {
            "raw_amount_in": self.raw_amount_in,
            "raw_amount_out": self.raw_amount_out,
            "trade_fee_usd": self.trade_fee_usd,
            "estimate_gas_fee": self.estimate_gas_fee,
            "price_impact_percent": self.price_impact_percent,
            "routes": [
                {"dex_name": r.dex_name, "percent": r.percent, "router": r.router}
                for r in self.routes
            ],
            "price": self.price,
        }


class QuoteFetcher(Protocol):
    """Anything that can turn a QuoteRequest into a Quote.

    Returns None when the upstream reports that no quote is available and
    raises when the request itself fails.
    """

    async def get_quote(self, request: QuoteRequest) -> Optional[Quote]:
        ...
