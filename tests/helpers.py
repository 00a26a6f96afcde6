"""Shared test doubles and constants."""

import asyncio
import json
from typing import Callable, Optional

import httpx

from xdefi.routing.base import Quote, QuoteRequest

USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
WETH = "0x4200000000000000000000000000000000000006"
NATIVE = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
AGGREGATOR = "0x2bD541Ab3b704F7d4c9DFf79EfaDeaa85EC034f1"
APPROVE_SPENDER = "0x57df6092665eb6058DE53939612413ff4B09114E"
USER = "0x1111111111111111111111111111111111111111"
ZERO = "0x0000000000000000000000000000000000000000"


class ControlledFetcher:
    """Quote fetcher whose responses are released by the test.

    Each get_quote call parks on a future; tests resolve the futures in
    whatever order the scenario needs.
    """

    def __init__(self):
        self.calls: list[tuple[QuoteRequest, asyncio.Future]] = []

    @property
    def requests(self) -> list[QuoteRequest]:
        return [request for request, _ in self.calls]

    async def get_quote(self, request: QuoteRequest) -> Optional[Quote]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((request, future))
        return await future

    def resolve(self, index: int, quote: Optional[Quote]) -> None:
        self.calls[index][1].set_result(quote)

    def fail(self, index: int, error: Exception) -> None:
        self.calls[index][1].set_exception(error)


def okx_transport(routes: dict[str, Callable[[httpx.Request], httpx.Response]]) -> httpx.MockTransport:
    """Mock proxy transport dispatching on the forwarded ``path`` parameter."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.params.get("path")
        if path not in routes:
            return httpx.Response(404, json={"code": "404", "msg": "not found"})
        return routes[path](request)

    return httpx.MockTransport(handler)


def json_response(payload, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Route handler returning a fixed JSON payload."""
    return lambda request: httpx.Response(status_code, content=json.dumps(payload).encode())
