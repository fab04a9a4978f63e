"""
Ethereum Wallet Authentication Utilities

This module handles the cryptographic side of the challenge/response login.

Authentication Flow:
1. Client sends its wallet address -> generate_nonce() derives the challenge
2. Client signs the nonce with its wallet (EIP-191 personal_sign)
3. Client sends: nonce, signedMessage
4. Backend recovers the signer -> recover_address()
   and recomputes the nonce for the recovered address. The nonce is salted with
   a server secret, so only the owner of the key can produce a matching pair.

Nothing is stored: the nonce for an address is the same until SECRET rotates.
"""

import hashlib
import hmac

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3


def normalize_address(address: str) -> str:
    """Canonical form used at every boundary: lowercase hex."""
    return address.lower()


def is_valid_address(address: str) -> bool:
    """
    Check that the value is a 20-byte hex address.

    Mixed-case input must carry a valid EIP-55 checksum, all-lowercase or
    all-uppercase input is accepted as is.
    """
    if not isinstance(address, str) or address != address.strip():
        return False
    if not Web3.is_address(address):
        return False
    hex_part = address[2:]
    if hex_part == hex_part.lower() or hex_part == hex_part.upper():
        return True
    return Web3.is_checksum_address(address)


def generate_nonce(address: str, secret: str) -> str:
    """
    Derive the login challenge for a wallet address.

    sha1 over "<lowercase address>:<secret>", hex encoded. Deterministic, so the
    verifier recomputes it instead of looking it up.
    """
    digest = hashlib.sha1()
    digest.update(f"{normalize_address(address)}:{secret}".encode())
    return digest.hexdigest()


def nonce_matches(expected: str, supplied: str) -> bool:
    return hmac.compare_digest(expected.encode(), supplied.encode())


def recover_address(message: str, signature: str) -> str:
    """
    Recover the address that produced an EIP-191 signature over ``message``.

    Returns the lowercase address. Raises ValueError if the signature is
    malformed or cannot be recovered.
    """
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as e:
        raise ValueError(f"Could not recover signer: {e}") from e
    return normalize_address(recovered)
