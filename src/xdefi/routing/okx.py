"""OKX DEX aggregator client.

All calls go through the signing proxy configured as ``okx_proxy_url``. The
proxy takes the upstream API path in a ``path`` query parameter and forwards
the remaining parameters unchanged.
API docs: https://web3.okx.com/build/dev-docs/wallet-api/dex-get-quote
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from xdefi.config import get_settings
from xdefi.routing.base import Quote, QuoteRequest
from xdefi.routing.normalizer import is_error_payload, normalize_quote_response

logger = logging.getLogger(__name__)

# Aggregator API paths (v6)
QUOTE_PATH = "/api/v6/dex/aggregator/quote"
ALL_TOKENS_PATH = "/api/v6/dex/aggregator/all-tokens"
SWAP_PATH = "/api/v6/dex/aggregator/swap"
APPROVE_PATH = "/api/v6/dex/aggregator/approve-transaction"


@dataclass
class OkxToken:
    """Token descriptor from the all-tokens endpoint."""

    address: str
    symbol: str
    name: str
    decimals: Optional[int] = None
    logo_uri: Optional[str] = None
    chain_id: Optional[str] = None


@dataclass
class SwapTx:
    """Executable aggregator call returned by the swap endpoint."""

    aggregator_address: str
    data: str  # calldata including the 4-byte selector
    min_receive_amount: Optional[str] = None
    to_token_amount: Optional[str] = None


@dataclass
class ApproveTx:
    """Token approval data returned by the approve-transaction endpoint."""

    approve_address: str
    data: str
    gas_limit: Optional[str] = None
    gas_price: Optional[str] = None


def _first(payload_data: Any) -> Any:
    if isinstance(payload_data, list):
        return payload_data[0] if payload_data else None
    return payload_data


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_decimals(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return None
    return None


def _normalize_token(entry: dict) -> OkxToken:
    symbol = entry.get("symbol") or entry.get("tokenSymbol") or ""
    return OkxToken(
        address=entry.get("address") or entry.get("tokenContractAddress") or "",
        symbol=symbol,
        name=entry.get("name") or entry.get("tokenName") or symbol,
        decimals=_parse_decimals(entry.get("decimals")),
        logo_uri=entry.get("logoURI") or entry.get("tokenLogoUrl"),
        chain_id=str(entry["chainId"]) if entry.get("chainId") is not None else None,
    )


class OkxClient:
    """Client for the OKX DEX aggregator behind the signing proxy."""

    name = "okx"

    def __init__(
        self,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            proxy_url: Proxy endpoint (defaults to settings.okx_proxy_url)
            timeout: Request timeout in seconds (defaults to settings.http_timeout)
            transport: Optional httpx transport, used by tests
        """
        settings = get_settings()
        self.proxy_url = proxy_url or settings.okx_proxy_url
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    async def _get(self, path: str, params: dict[str, str]) -> Optional[Any]:
        """GET an aggregator path through the proxy.

        Returns:
            Decoded JSON payload, or None for non-success HTTP status or
            an unreadable body

        Raises:
            httpx.HTTPError: On transport failure
        """
        query = {"path": path, **params}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.proxy_url, headers=self._get_headers(), params=query)

        if not response.is_success:
            logger.warning(f"OKX API error on {path}: {response.status_code} - {response.text[:200]}")
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning(f"OKX API returned invalid JSON on {path}")
            return None

    async def get_quote(self, request: QuoteRequest) -> Optional[Quote]:
        """Get an exact-input quote.

        Returns:
            Normalized Quote, or None when no quote is available

        Raises:
            httpx.HTTPError: When the request itself fails
        """
        logger.debug(
            f"Requesting quote: chain={request.chain_id} {request.token_in} -> "
            f"{request.token_out} amount={request.amount_raw_in}"
        )
        payload = await self._get(QUOTE_PATH, request.to_params())
        if payload is None:
            return None
        return normalize_quote_response(payload)

    async def get_tokens(self, chain_id: int, limit: Optional[int] = None) -> list[OkxToken]:
        """Get the aggregator's token list for a chain.

        Failures of any kind yield an empty list so callers can fall back to
        a local token list.
        """
        try:
            payload = await self._get(ALL_TOKENS_PATH, {"chainIndex": str(chain_id)})
        except httpx.HTTPError as e:
            logger.warning(f"OKX token list request failed: {e}")
            return []

        if not isinstance(payload, dict) or is_error_payload(payload):
            return []

        entries = payload.get("data")
        if not isinstance(entries, list):
            return []

        tokens = [_normalize_token(e) for e in entries if isinstance(e, dict)]
        tokens = [t for t in tokens if t.address and t.symbol]
        if limit is not None:
            tokens = tokens[:limit]

        logger.debug(f"Loaded {len(tokens)} tokens for chain {chain_id}")
        return tokens

    async def get_approve_tx(
        self,
        chain_id: int,
        token_address: str,
        approve_amount: str,
    ) -> Optional[ApproveTx]:
        """Get approval calldata for letting the aggregator spend a token.

        Args:
            chain_id: EVM chain id
            token_address: Token to approve
            approve_amount: Amount in atomic units

        Returns:
            ApproveTx, or None if the upstream has no usable approval data
        """
        payload = await self._get(
            APPROVE_PATH,
            {
                "chainIndex": str(chain_id),
                "tokenContractAddress": token_address,
                "approveAmount": approve_amount,
            },
        )
        if not isinstance(payload, dict) or is_error_payload(payload):
            return None

        entry = _first(payload.get("data"))
        if not isinstance(entry, dict):
            return None

        approve_address = entry.get("dexContractAddress")
        calldata = entry.get("data")
        if not approve_address or not isinstance(calldata, str):
            logger.info(f"No approval data for {token_address} on chain {chain_id}")
            return None

        return ApproveTx(
            approve_address=approve_address,
            data=calldata,
            gas_limit=_optional_str(entry.get("gasLimit")),
            gas_price=_optional_str(entry.get("gasPrice")),
        )

    async def build_swap_tx(
        self,
        chain_id: int,
        from_token: str,
        to_token: str,
        amount_raw: str,
        user_address: str,
        slippage_percent: Optional[float] = None,
    ) -> Optional[SwapTx]:
        """Build executable swap calldata for an exact-input swap.

        Returns:
            SwapTx, or None if the upstream returned no transaction
        """
        params = {
            "chainIndex": str(chain_id),
            "fromTokenAddress": from_token,
            "toTokenAddress": to_token,
            "amount": amount_raw,
            "userWalletAddress": user_address,
            "swapMode": "exactIn",
        }
        if slippage_percent is not None:
            params["slippagePercent"] = str(slippage_percent)

        payload = await self._get(SWAP_PATH, params)
        if payload is None or is_error_payload(payload):
            return None

        body = payload.get("data", payload) if isinstance(payload, dict) else payload
        entry = _first(body)
        if not isinstance(entry, dict):
            return None

        tx = entry.get("tx")
        if not isinstance(tx, dict):
            return None

        to = tx.get("to")
        calldata = tx.get("data")
        if not to or not isinstance(calldata, str):
            logger.info(f"Swap endpoint returned no transaction for chain {chain_id}")
            return None

        router_result = entry.get("routerResult")
        to_token_amount = None
        if isinstance(router_result, dict):
            to_token_amount = _optional_str(router_result.get("toTokenAmount"))

        return SwapTx(
            aggregator_address=to,
            data=calldata,
            min_receive_amount=_optional_str(tx.get("minReceiveAmount")),
            to_token_amount=to_token_amount,
        )
