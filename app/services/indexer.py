"""
Client for the TheGraph Studio query endpoint.

One POST per query, body ``{"query": ...}``, whole response read before it is
parsed. No retries; a timeout bounds every call.
"""

import json
import logging
from typing import Any, Optional

import httpx

from app.core.config import Settings
from app.core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)


class IndexerClient:
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "IndexerClient":
        return cls(settings.GRAPH_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)

    async def query(self, query: str) -> Any:
        """
        Run a GraphQL query and return the decoded JSON document verbatim.

        Raises:
            ApiError ORACLE_QUERY_FAILED: transport error, timeout, non-2xx
                status or a body that is not JSON
        """
        body = json.dumps({"query": query}).encode()
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }
        try:
            response = await self._client.post(self.url, content=body, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning("indexing query to %s failed: %r", self.url, e)
            raise ApiError(ErrorKind.ORACLE_QUERY_FAILED) from e
        except ValueError as e:
            logger.warning("indexing API returned a non-JSON body: %s", e)
            raise ApiError(ErrorKind.ORACLE_QUERY_FAILED) from e

    async def close(self) -> None:
        await self._client.aclose()
