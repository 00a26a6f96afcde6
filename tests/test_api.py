"""Tests for the FastAPI endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from helpers import AGGREGATOR, APPROVE_SPENDER, USDC, USER, WETH, ZERO, json_response
from xdefi.api.app import create_app
from xdefi.routing.okx import ALL_TOKENS_PATH, APPROVE_PATH, QUOTE_PATH, SWAP_PATH
from xdefi.services.swap_service import SwapService
from xdefi.web.controllers.quotes import get_quote_service
from xdefi.web.controllers.swaps import get_swap_service
from xdefi.web.services.quote_service import QuoteService

CALLDATA = "0xb80c2f09" + "00" * 32

QUOTE_PAYLOAD = {
    "code": "0",
    "data": [
        {
            "fromTokenAmount": "1000000",
            "toTokenAmount": "412345678901234567",
            "tradeFee": "0.12",
            "estimateGasFee": "135000",
            "priceImpactPercent": "-0.05",
            "toToken": {"decimal": "18"},
            "dexRouterList": [{"dexProtocol": {"dexName": "Uniswap V3", "percent": "100"}}],
        }
    ],
}

TOKENS_PAYLOAD = {
    "code": "0",
    "data": [
        {"tokenContractAddress": USDC, "tokenSymbol": "USDC", "tokenName": "USD Coin", "decimals": "6"},
        {"tokenContractAddress": WETH, "tokenSymbol": "WETH", "tokenName": "Wrapped Ether", "decimals": "18"},
    ],
}

SWAP_PAYLOAD = {
    "code": "0",
    "data": [
        {
            "tx": {"to": AGGREGATOR, "data": CALLDATA, "minReceiveAmount": "990"},
            "routerResult": {"toTokenAmount": "1000"},
        }
    ],
}

APPROVE_PAYLOAD = {"code": "0", "data": [{"dexContractAddress": APPROVE_SPENDER, "data": "0x095ea7b3"}]}


@pytest.fixture
def routes():
    """Upstream routes served by the mock proxy; tests may replace entries."""
    return {
        QUOTE_PATH: json_response(QUOTE_PAYLOAD),
        ALL_TOKENS_PATH: json_response(TOKENS_PAYLOAD),
        SWAP_PATH: json_response(SWAP_PAYLOAD),
        APPROVE_PATH: json_response(APPROVE_PAYLOAD),
    }


@pytest.fixture
def test_app(make_client, routes):
    """Create test application backed by the mock proxy."""
    app = create_app()
    app.dependency_overrides[get_quote_service] = lambda: QuoteService(client=make_client(routes))
    app.dependency_overrides[get_swap_service] = lambda: SwapService(client=make_client(routes))
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test basic health check."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "xdefi"

    @pytest.mark.asyncio
    async def test_detailed_health(self, client):
        """Test detailed health check."""
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["config"]["environment"] == "test"
        assert data["config"]["okx_proxy_url"] == "http://proxy.test/api/okx"


class TestQuoteEndpoints:
    """Tests for quote endpoints."""

    @pytest.mark.asyncio
    async def test_get_quote(self, client):
        """Test a successful quote."""
        response = await client.post(
            "/api/v1/quotes/",
            json={"chain_id": 8453, "from_token": USDC, "to_token": WETH, "amount": "1", "from_decimals": 6},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["amount_raw_in"] == "1000000"
        assert data["to_amount"] == "0.412345"
        assert data["raw_amount_out"] == "412345678901234567"
        assert data["trade_fee_usd"] == "0.12"
        assert data["price_impact_percent"] == "-0.05"
        assert data["routes"][0]["dex_name"] == "Uniswap V3"

    @pytest.mark.asyncio
    async def test_quote_unavailable(self, client, routes):
        """Test an empty candidate list is reported as unavailable."""
        routes[QUOTE_PATH] = json_response({"code": "0", "data": []})

        response = await client.post(
            "/api/v1/quotes/",
            json={"chain_id": 8453, "from_token": USDC, "to_token": WETH, "amount": "1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "quote_unavailable"
        assert data["to_amount"] == ""

    @pytest.mark.asyncio
    async def test_quote_invalid_amount(self, client):
        """Test a malformed amount never reaches the upstream."""
        response = await client.post(
            "/api/v1/quotes/",
            json={"chain_id": 8453, "from_token": USDC, "to_token": WETH, "amount": "1e5"},
        )

        assert response.status_code == 200
        assert response.json()["error"] == "invalid_input"

    @pytest.mark.asyncio
    async def test_quote_amount_below_one_unit(self, client):
        """Test an amount that converts to zero units is rejected."""
        response = await client.post(
            "/api/v1/quotes/",
            json={
                "chain_id": 8453,
                "from_token": USDC,
                "to_token": WETH,
                "amount": "0.0000001",
                "from_decimals": 6,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "invalid_input"
        assert data["amount_raw_in"] is None

    @pytest.mark.asyncio
    async def test_get_tokens(self, client):
        """Test the token list."""
        response = await client.get("/api/v1/quotes/tokens/8453", params={"limit": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["chain_id"] == 8453
        assert data["total"] == 1
        assert data["tokens"][0]["symbol"] == "USDC"
        assert data["tokens"][0]["decimals"] == 6


class TestSwapEndpoints:
    """Tests for swap config endpoints."""

    @pytest.mark.asyncio
    async def test_encode_config(self, client):
        """Test encoding a valid config."""
        response = await client.post(
            "/api/v1/swaps/encode-config",
            json={
                "dex_aggregator": AGGREGATOR,
                "approve_address": APPROVE_SPENDER,
                "swap_calldata": CALLDATA,
                "to_token": ZERO,
                "min_amount_out": "100000000000000",
                "is_native_token": True,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"].startswith("0x")

    @pytest.mark.asyncio
    async def test_encode_config_rejects_invalid(self, client):
        """Test a failed precondition returns 422 with the violation."""
        response = await client.post(
            "/api/v1/swaps/encode-config",
            json={
                "dex_aggregator": AGGREGATOR,
                "approve_address": APPROVE_SPENDER,
                "swap_calldata": CALLDATA,
                "to_token": USDC,
                "min_amount_out": 1,
                "is_native_token": True,
            },
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["violation"] == "native_token_mismatch"

    @pytest.mark.asyncio
    async def test_prepare_swap(self, client):
        """Test preparing a hook swap."""
        response = await client.post(
            "/api/v1/swaps/prepare",
            json={
                "chain_id": 8453,
                "from_token": WETH,
                "to_token": USDC,
                "amount_raw": "1000000000000000",
                "user_address": USER,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["min_amount_out"] == "990"
        assert data["expected_amount_out"] == "1000"
        assert data["is_native_token"] is False
        assert data["data"].startswith("0x")

    @pytest.mark.asyncio
    async def test_prepare_swap_unavailable(self, client, routes):
        """Test a missing route returns 503."""
        routes[SWAP_PATH] = json_response({"code": "82000", "msg": "no route", "data": []})

        response = await client.post(
            "/api/v1/swaps/prepare",
            json={
                "chain_id": 8453,
                "from_token": WETH,
                "to_token": USDC,
                "amount_raw": "1000",
                "user_address": USER,
            },
        )

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_prepare_swap_rejects_bad_amount(self, client):
        """Test request validation."""
        response = await client.post(
            "/api/v1/swaps/prepare",
            json={
                "chain_id": 8453,
                "from_token": WETH,
                "to_token": USDC,
                "amount_raw": "1.5",
                "user_address": USER,
            },
        )

        assert response.status_code == 422
