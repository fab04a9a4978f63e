"""
FastAPI Authentication Dependencies

This module provides the dependency functions that gate protected routes and
hand the external adapters to route handlers.

Usage in endpoints:
    @router.get("/protected")
    async def protected_route(wallet_address: str = Depends(require_granted)):
        ...

Flow:
1. Client sends request with Authorization: Bearer <token> header
2. get_token_claims() extracts and validates the JWT (jwt_utils.verify_token)
3. require_granted() / require_admin() ask the Whitelist contract about the
   wallet in the token, on every request
4. The lowercase wallet address is passed to the route handler
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from app.core.config import Settings, get_settings
from app.core.errors import ApiError, ErrorKind
from app.core.jwt_utils import WALLET_CLAIM, verify_token
from app.services.indexer import IndexerClient
from app.services.storage_gateway import StorageGateway
from app.services.whitelist_oracle import WhitelistOracle


def _extract_token(authorization: Optional[str]) -> str:
    """
    Extract the bearer token from the Authorization header.

    Raises:
        ApiError UNAUTHORIZED: header missing, not a Bearer header, or no token
    """
    if not authorization:
        raise ApiError(ErrorKind.UNAUTHORIZED)

    parts = authorization.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ApiError(ErrorKind.UNAUTHORIZED)
    return parts[1]


def get_token_claims(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    return verify_token(_extract_token(authorization), settings)


def get_current_wallet(claims: Dict[str, Any] = Depends(get_token_claims)) -> str:
    """
    returning wallet address.
    """
    return claims[WALLET_CLAIM]


async def get_whitelist_oracle(request: Request, settings: Settings = Depends(get_settings)) -> WhitelistOracle:
    # built on first use so a bad contract config fails the request, not startup;
    # no await between the check and the set, so one instance per app
    oracle = getattr(request.app.state, "whitelist_oracle", None)
    if oracle is None:
        oracle = WhitelistOracle.from_settings(settings)
        request.app.state.whitelist_oracle = oracle
    return oracle


def get_indexer_client(request: Request) -> IndexerClient:
    return request.app.state.indexer_client


def get_storage_gateway(request: Request) -> StorageGateway:
    return request.app.state.storage_gateway


async def require_granted(
    wallet_address: str = Depends(get_current_wallet),
    oracle: WhitelistOracle = Depends(get_whitelist_oracle),
) -> str:
    if not await oracle.is_granted(wallet_address):
        raise ApiError(ErrorKind.UNAUTHORIZED)
    return wallet_address


async def require_admin(
    wallet_address: str = Depends(get_current_wallet),
    oracle: WhitelistOracle = Depends(get_whitelist_oracle),
) -> str:
    if not await oracle.is_admin(wallet_address):
        raise ApiError(ErrorKind.UNAUTHORIZED)
    return wallet_address
