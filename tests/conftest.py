import os

# settings are read when main is imported
os.environ.setdefault("SECRET", "test-nonce-secret")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("WHITELIST_ADDRESS", "0x5FbDB2315678afecb367f032d93F642f64180aa3")

from typing import Callable, Dict, Generator, List, Optional

import httpx
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.core.dependencies import get_indexer_client, get_storage_gateway, get_whitelist_oracle
from app.core.errors import ApiError, ErrorKind
from app.core.jwt_utils import create_access_token
from app.services.indexer import IndexerClient
from app.services.storage_gateway import StorageGateway
from main import app


class FakeWhitelistOracle:
    """Stands in for the Whitelist contract; counts every lookup."""

    def __init__(self, granted=(), admins=(), unavailable: bool = False):
        self.granted = set(granted)
        self.admins = set(admins)
        self.unavailable = unavailable
        self.calls: List[tuple] = []

    async def is_granted(self, address: str) -> bool:
        self.calls.append(("isGranted", address))
        if self.unavailable:
            raise ApiError(ErrorKind.ORACLE_UNAVAILABLE)
        return address.lower() in {a.lower() for a in self.granted}

    async def is_admin(self, address: str) -> bool:
        self.calls.append(("isAdmin", address))
        if self.unavailable:
            raise ApiError(ErrorKind.ORACLE_UNAVAILABLE)
        return address.lower() in {a.lower() for a in self.admins}


class ChunkedBody(httpx.AsyncByteStream):
    """Response body that is only produced when iterated, like a socket."""

    def __init__(self, content: bytes, chunk_size: int = 4):
        self.content = content
        self.chunk_size = chunk_size

    async def __aiter__(self):
        for start in range(0, len(self.content), self.chunk_size):
            yield self.content[start:start + self.chunk_size]


class RecordingHandler:
    """
    httpx.MockTransport handler that records requests and replies with a canned response.

    The canned body is re-served as an unread stream so streaming consumers can iterate it.
    """

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        canned = self.responder(request)
        return httpx.Response(
            canned.status_code,
            headers=canned.headers,
            stream=ChunkedBody(canned.content),
        )


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def oracle() -> FakeWhitelistOracle:
    return FakeWhitelistOracle()


@pytest.fixture
def ipfs_handler() -> RecordingHandler:
    return RecordingHandler(lambda request: httpx.Response(200, json={"Hash": "QmTest", "Size": "3"}))


@pytest.fixture
def graph_handler() -> RecordingHandler:
    return RecordingHandler(
        lambda request: httpx.Response(200, json={"data": {"wallets": [{"id": "0xabc"}]}})
    )


@pytest.fixture
def client(
    oracle: FakeWhitelistOracle,
    ipfs_handler: RecordingHandler,
    graph_handler: RecordingHandler,
) -> Generator[TestClient, None, None]:
    """Create a test client with every external system replaced"""
    gateway = StorageGateway("http://ipfs.test:5001", transport=httpx.MockTransport(ipfs_handler))
    indexer = IndexerClient("https://graph.test/query", transport=httpx.MockTransport(graph_handler))

    app.dependency_overrides[get_whitelist_oracle] = lambda: oracle
    app.dependency_overrides[get_storage_gateway] = lambda: gateway
    app.dependency_overrides[get_indexer_client] = lambda: indexer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def wallet():
    """A fresh private key."""
    return Account.create()


@pytest.fixture
def other_wallet():
    return Account.create()


@pytest.fixture
def sign() -> Callable:
    """Sign a text message the way a wallet does for personal_sign."""

    def _sign(account, message: str) -> str:
        signed = account.sign_message(encode_defunct(text=message))
        return "0x" + signed.signature.hex().removeprefix("0x")

    return _sign


@pytest.fixture
def auth_header() -> Callable[[str], Dict[str, str]]:
    return lambda token: {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token_for(settings: Settings) -> Callable[[str], str]:
    def _token_for(address: str, overrides: Optional[dict] = None) -> str:
        s = settings.model_copy(update=overrides) if overrides else settings
        return create_access_token(address.lower(), s)

    return _token_for
