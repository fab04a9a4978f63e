import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

import app.schemas.auth as schemas
from app.core.config import Settings, get_settings
from app.core.errors import ApiError, ErrorKind
from app.core.jwt_utils import create_access_token
from app.core.wallet_auth import (
    generate_nonce,
    is_valid_address,
    nonce_matches,
    normalize_address,
    recover_address,
)

logger = logging.getLogger(__name__)

router = APIRouter()
group_tags = ["Auth"]


@router.post(
    "/signup",
    tags=group_tags,
    response_model=schemas.NonceResponse,
    status_code=status.HTTP_200_OK,
)
def signup(
    body: Optional[schemas.SignupRequest] = None,
    settings: Settings = Depends(get_settings),
) -> schemas.NonceResponse:
    """Return the login challenge for a wallet address. Same address, same nonce."""
    if body is None or not body.walletAddress:
        raise ApiError(ErrorKind.INVALID_INPUT, "Missing wallet address")
    if not is_valid_address(body.walletAddress):
        raise ApiError(ErrorKind.INVALID_INPUT, "Invalid wallet address")

    address = normalize_address(body.walletAddress)
    logger.debug("issuing nonce for %s", address)
    return schemas.NonceResponse(nonce=generate_nonce(address, settings.SECRET))


@router.post(
    "/verify",
    tags=group_tags,
    response_model=schemas.TokenResponse,
    status_code=status.HTTP_200_OK,
)
def verify(
    body: Optional[schemas.VerifyRequest] = None,
    settings: Settings = Depends(get_settings),
) -> schemas.TokenResponse:
    """
    Exchange a signed nonce for a session token.

    The signer is recovered from the signature, its nonce is recomputed and
    must equal the one supplied. Only then is a token issued for that signer.
    """
    if body is None or not body.nonce:
        raise ApiError(ErrorKind.INVALID_INPUT, "Nonce not provided")
    if not body.signedMessage:
        raise ApiError(ErrorKind.INVALID_INPUT, "Signed message not provided")

    try:
        address = recover_address(body.nonce, body.signedMessage)
    except ValueError as e:
        logger.info("signature recovery failed: %s", e)
        raise ApiError(ErrorKind.VERIFICATION_FAILED) from e

    if not nonce_matches(generate_nonce(address, settings.SECRET), body.nonce):
        logger.info("nonce mismatch for %s", address)
        raise ApiError(ErrorKind.NONCE_MISMATCH)

    logger.debug("issuing token for %s", address)
    return schemas.TokenResponse(token=create_access_token(address, settings))
