import contextlib
from typing import Any, AsyncIterator

from aiohttp import web
from aiohttp.test_utils import TestServer

from nethermind.govaudit.exceptions import SignatureLookupError
from nethermind.govaudit.tokens import ERC20Token
from nethermind.govaudit.types import DecodedFunction


class FakeExplorer:
    """Stands in for EtherscanClient, serving ABIs from a dictionary"""

    def __init__(self, abis: dict[str, list[dict[str, Any]]] | None = None):
        self.abis = {address.lower(): abi for address, abi in (abis or {}).items()}
        self.requests: list[str] = []

    async def fetch_abi(self, address: str) -> list[dict[str, Any]] | None:
        self.requests.append(address.lower())
        return self.abis.get(address.lower())


class FakeSignatureClient:
    """Stands in for SignatureLookupClient, serving text signatures from a dictionary"""

    def __init__(self, signatures: dict[str, list[str]] | None = None, fail: bool = False):
        self.signatures = signatures or {}
        self.fail = fail
        self.requests: list[str] = []

    async def lookup(self, selector: str) -> list[str]:
        self.requests.append(selector)
        if self.fail:
            raise SignatureLookupError("Signature database unavailable")
        return self.signatures.get(selector, [])


class FakeTokenProvider:
    """Stands in for TokenMetadataProvider, serving tokens from a dictionary"""

    def __init__(self, tokens: list[ERC20Token] | None = None):
        self.tokens = {token.address.lower(): token for token in tokens or []}

    async def get_token(self, token_address: str) -> ERC20Token | None:
        return self.tokens.get(token_address.lower())


class StaticStrategy:
    """Decode strategy returning a fixed result"""

    def __init__(self, name: str, result: DecodedFunction | None = None, error: Exception | None = None):
        self.name = name
        self.result = result
        self.error = error
        self.calls = 0

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


class ScriptedHandler:
    """aiohttp request handler replaying a fixed list of responses, and recording each query string"""

    def __init__(self, responses: list[web.StreamResponse]):
        self.responses = list(responses)
        self.queries: list[dict[str, str]] = []

    async def __call__(self, request: web.Request) -> web.StreamResponse:
        self.queries.append(dict(request.query))
        return self.responses.pop(0)


@contextlib.asynccontextmanager
async def local_server(handler) -> AsyncIterator[str]:
    """Serves ``handler`` at ``/api`` on a local port, and yields the URL"""
    app = web.Application()
    app.router.add_get("/api", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("/api"))
    finally:
        await server.close()
