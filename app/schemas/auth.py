from typing import Optional

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Request model for nonce generation - input validation"""

    walletAddress: Optional[str] = Field(None, description="Wallet address (0x-prefixed hex)")


class NonceResponse(BaseModel):
    """Response model for nonce generation - output"""

    nonce: str


class VerifyRequest(BaseModel):
    """Request model for wallet verification - input validation"""

    nonce: Optional[str] = Field(None, description="Nonce returned by /signup")
    signedMessage: Optional[str] = Field(None, description="personal_sign signature of the nonce")


class TokenResponse(BaseModel):
    """Response model for authentication - output"""

    token: str
