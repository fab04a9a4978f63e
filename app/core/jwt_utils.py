"""
JWT Token Utilities

This module handles JSON Web Token (JWT) creation and verification for wallet authentication.
After a user proves control of a wallet on /verify, this module creates a JWT token
that is presented on every subsequent protected request.

Flow:
1. User verifies wallet signature -> create_access_token() generates JWT
2. User makes API request with JWT in Authorization header -> verify_token() validates it
3. Protected endpoints use the gate dependencies from dependencies.py

The JWT contains:
- walletAddress: The authenticated wallet address (lowercase)
- iat: Issued at timestamp
- exp: Expiration timestamp (ACCESS_TOKEN_EXPIRE_SECONDS, one day by default)

Tokens are stateless: there is no revocation list, they expire by time only.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from app.core.config import Settings
from app.core.errors import ApiError, ErrorKind

WALLET_CLAIM = "walletAddress"


def create_access_token(wallet_address: str, settings: Settings) -> str:
    """
    Create a JWT access token for an authenticated wallet address.

    Args:
        wallet_address: The wallet address recovered from the signed nonce
        settings: Application settings holding the signing key and lifetime

    Returns:
        A JWT token string that can be used in Authorization: Bearer <token> header

    Raises:
        ValueError: If wallet_address is empty
    """
    if not wallet_address:
        raise ValueError("wallet_address is required")

    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        WALLET_CLAIM: wallet_address,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.ENCODE_ALGORITHM)


def verify_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token string from Authorization header
        settings: Application settings holding the signing key

    Returns:
        Decoded JWT payload dictionary containing walletAddress and other claims

    Raises:
        ApiError UNAUTHORIZED: If token is missing
        ApiError FORBIDDEN: If token is expired, invalid, or missing walletAddress
    """
    if not token:
        raise ApiError(ErrorKind.UNAUTHORIZED)

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.ENCODE_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is an InvalidTokenError as well
        raise ApiError(ErrorKind.FORBIDDEN)

    if not payload.get(WALLET_CLAIM):
        raise ApiError(ErrorKind.FORBIDDEN)

    return payload
