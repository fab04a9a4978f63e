"""
Request forwarding to the IPFS HTTP API.

The incoming request (method, query string, body, end-to-end headers) is
replayed against ``<IPFS_URL><api_path>`` and the upstream response is streamed
back unchanged. The caller's Authorization header stays on this side.
"""

import logging
from typing import Optional

import httpx
from fastapi import Request
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from app.core.config import Settings
from app.core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)
# not forwarded upstream
REQUEST_ONLY_HEADERS = frozenset({"host", "authorization", "cookie"})


def _request_headers(request: Request) -> list:
    skip = HOP_BY_HOP_HEADERS | REQUEST_ONLY_HEADERS
    return [(k, v) for k, v in request.headers.items() if k.lower() not in skip]


def _response_headers(response: httpx.Response) -> dict:
    return {k: v for k, v in response.headers.items() if k.lower() not in HOP_BY_HOP_HEADERS}


def _has_body(request: Request) -> bool:
    return "content-length" in request.headers or "transfer-encoding" in request.headers


class StorageGateway:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageGateway":
        return cls(settings.IPFS_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)

    async def forward(self, request: Request, api_path: str) -> StreamingResponse:
        target = api_path
        if request.url.query:
            target = f"{api_path}?{request.url.query}"

        upstream_request = self._client.build_request(
            request.method,
            target,
            headers=_request_headers(request),
            content=request.stream() if _has_body(request) else None,
        )
        try:
            upstream = await self._client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            logger.error("forwarding %s %s to %s failed: %r", request.method, api_path, self.base_url, e)
            raise ApiError(ErrorKind.STORAGE_GATEWAY_UNAVAILABLE) from e

        logger.debug("%s %s -> %s", request.method, target, upstream.status_code)
        return StreamingResponse(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            headers=_response_headers(upstream),
            background=BackgroundTask(upstream.aclose),
        )

    async def close(self) -> None:
        await self._client.aclose()
