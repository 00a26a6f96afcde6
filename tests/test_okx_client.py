"""Tests for the OKX aggregator client."""

import httpx
import pytest

from helpers import AGGREGATOR, APPROVE_SPENDER, USDC, USER, WETH, json_response
from xdefi.routing.base import QuoteRequest
from xdefi.routing.okx import ALL_TOKENS_PATH, APPROVE_PATH, QUOTE_PATH, SWAP_PATH, OkxClient


def quote_request(amount: str = "1000000") -> QuoteRequest:
    return QuoteRequest(chain_id=8453, token_in=USDC, token_out=WETH, amount_raw_in=amount)


class TestGetQuote:
    """Tests for the quote endpoint."""

    @pytest.mark.asyncio
    async def test_sends_exact_in_parameters(self, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json={"code": "0", "data": [{"toTokenAmount": "5"}]})

        client = make_client({QUOTE_PATH: handler})
        quote = await client.get_quote(quote_request("250"))

        assert quote.raw_amount_out == "5"
        assert seen["chainIndex"] == "8453"
        assert seen["fromTokenAddress"] == USDC
        assert seen["toTokenAddress"] == WETH
        assert seen["amount"] == "250"
        assert seen["swapMode"] == "exactIn"

    @pytest.mark.asyncio
    async def test_picks_best_of_multiple_candidates(self, make_client):
        payload = {
            "code": "0",
            "data": [
                {"toTokenAmount": "100", "tradeFee": "0.1"},
                {"toTokenAmount": "200", "tradeFee": "0.2"},
            ],
        }
        client = make_client({QUOTE_PATH: json_response(payload)})

        quote = await client.get_quote(quote_request())

        assert quote.raw_amount_out == "200"
        assert quote.trade_fee_usd == "0.2"

    @pytest.mark.asyncio
    async def test_http_error_status_is_unavailable(self, make_client):
        client = make_client({QUOTE_PATH: json_response({"msg": "boom"}, status_code=500)})
        assert await client.get_quote(quote_request()) is None

    @pytest.mark.asyncio
    async def test_error_code_is_unavailable(self, make_client):
        client = make_client({QUOTE_PATH: json_response({"code": "82000", "data": []})})
        assert await client.get_quote(quote_request()) is None

    @pytest.mark.asyncio
    async def test_invalid_json_is_unavailable(self, make_client):
        client = make_client({QUOTE_PATH: lambda request: httpx.Response(200, content=b"<html>")})
        assert await client.get_quote(quote_request()) is None

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = OkxClient(transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.HTTPError):
            await client.get_quote(quote_request())


class TestGetTokens:
    """Tests for the token list endpoint."""

    @pytest.mark.asyncio
    async def test_normalizes_both_naming_conventions(self, make_client):
        payload = {
            "code": "0",
            "data": [
                {
                    "tokenContractAddress": USDC,
                    "tokenSymbol": "USDC",
                    "tokenName": "USD Coin",
                    "tokenLogoUrl": "https://logo/usdc.png",
                    "decimals": "6",
                },
                {"address": WETH, "symbol": "WETH", "decimals": 18, "logoURI": "https://logo/weth.png"},
                {"tokenSymbol": "NOADDR"},
                {"tokenContractAddress": "0xabc"},
            ],
        }
        client = make_client({ALL_TOKENS_PATH: json_response(payload)})

        tokens = await client.get_tokens(8453)

        assert [t.symbol for t in tokens] == ["USDC", "WETH"]
        assert tokens[0].address == USDC
        assert tokens[0].name == "USD Coin"
        assert tokens[0].decimals == 6
        assert tokens[0].logo_uri == "https://logo/usdc.png"
        # Name falls back to the symbol
        assert tokens[1].name == "WETH"
        assert tokens[1].decimals == 18

    @pytest.mark.asyncio
    async def test_limit(self, make_client):
        payload = {"code": "0", "data": [{"address": f"0x{i:040x}", "symbol": f"T{i}"} for i in range(5)]}
        client = make_client({ALL_TOKENS_PATH: json_response(payload)})

        assert len(await client.get_tokens(1, limit=2)) == 2

    @pytest.mark.asyncio
    async def test_failures_yield_empty_list(self, make_client):
        assert await make_client({ALL_TOKENS_PATH: json_response({"code": "1"})}).get_tokens(1) == []
        assert await make_client({ALL_TOKENS_PATH: json_response({}, 502)}).get_tokens(1) == []

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timeout", request=request)

        assert await OkxClient(transport=httpx.MockTransport(handler)).get_tokens(1) == []


class TestApproveTx:
    """Tests for the approve-transaction endpoint."""

    @pytest.mark.asyncio
    async def test_parses_approval(self, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "code": "0",
                    "data": [
                        {
                            "data": "0x095ea7b3" + "00" * 64,
                            "dexContractAddress": APPROVE_SPENDER,
                            "gasLimit": "50000",
                            "gasPrice": "110000",
                        }
                    ],
                },
            )

        client = make_client({APPROVE_PATH: handler})
        approve = await client.get_approve_tx(8453, USDC, "1000000")

        assert approve.approve_address == APPROVE_SPENDER
        assert approve.data.startswith("0x095ea7b3")
        assert approve.gas_limit == "50000"
        assert approve.gas_price == "110000"
        assert seen["tokenContractAddress"] == USDC
        assert seen["approveAmount"] == "1000000"

    @pytest.mark.asyncio
    async def test_missing_fields_are_unavailable(self, make_client):
        payload = {"code": "0", "data": [{"data": "0x095ea7b3"}]}
        client = make_client({APPROVE_PATH: json_response(payload)})
        assert await client.get_approve_tx(8453, USDC, "1") is None

        client = make_client({APPROVE_PATH: json_response({"code": "0", "data": []})})
        assert await client.get_approve_tx(8453, USDC, "1") is None


class TestBuildSwapTx:
    """Tests for the swap endpoint."""

    @pytest.mark.asyncio
    async def test_parses_swap_transaction(self, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "code": "0",
                    "data": [
                        {
                            "routerResult": {"toTokenAmount": "500000000000000"},
                            "tx": {
                                "to": AGGREGATOR,
                                "data": "0xf2c42696" + "00" * 32,
                                "minReceiveAmount": "497500000000000",
                            },
                        }
                    ],
                },
            )

        client = make_client({SWAP_PATH: handler})
        swap_tx = await client.build_swap_tx(8453, USDC, WETH, "1000000", USER, slippage_percent=0.5)

        assert swap_tx.aggregator_address == AGGREGATOR
        assert swap_tx.data.startswith("0xf2c42696")
        assert swap_tx.min_receive_amount == "497500000000000"
        assert swap_tx.to_token_amount == "500000000000000"
        assert seen["userWalletAddress"] == USER
        assert seen["slippagePercent"] == "0.5"
        assert seen["swapMode"] == "exactIn"

    @pytest.mark.asyncio
    async def test_missing_tx_is_unavailable(self, make_client):
        client = make_client({SWAP_PATH: json_response({"code": "0", "data": [{"routerResult": {}}]})})
        assert await client.build_swap_tx(8453, USDC, WETH, "1", USER) is None
