"""
Error kinds shared by every route.

Each kind carries the HTTP status and the default message sent back to the
client. Handlers raise ``ApiError(kind)`` (optionally with a more specific
message) and the exception handlers registered in ``main.py`` turn it into a
plain-text response.
"""

from enum import Enum
from typing import Optional

from fastapi import status


class ErrorKind(Enum):
    INVALID_INPUT = (status.HTTP_400_BAD_REQUEST, "Invalid input")
    VERIFICATION_FAILED = (status.HTTP_400_BAD_REQUEST, "Failed to verify message")
    NONCE_MISMATCH = (status.HTTP_400_BAD_REQUEST, "Nonce mismatch")
    UNAUTHORIZED = (status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    FORBIDDEN = (status.HTTP_403_FORBIDDEN, "Forbidden")
    ORACLE_UNAVAILABLE = (status.HTTP_503_SERVICE_UNAVAILABLE, "Membership oracle unavailable")
    ORACLE_QUERY_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Indexing API query failed")
    CONTRACT_INIT_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get Ethereum contract")
    STORAGE_GATEWAY_UNAVAILABLE = (status.HTTP_502_BAD_GATEWAY, "Storage gateway unavailable")

    def __init__(self, status_code: int, default_message: str):
        self.status_code = status_code
        self.default_message = default_message


class ApiError(Exception):
    """An error with a declared kind, rendered as ``<status> <message>``."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"ApiError({self.kind.name}, {self.message!r})"
