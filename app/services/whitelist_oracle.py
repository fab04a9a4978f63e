"""
Membership oracle backed by the Whitelist contract.

Every check is a live eth_call against the RPC endpoint; results are never
cached. A failed call surfaces as ORACLE_UNAVAILABLE so that an unreachable
chain is never confused with an explicit "not granted".
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from app.core.config import Settings
from app.core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)

CONTRACTS_ROOT = Path(__file__).resolve().parents[1] / "contracts"
WHITELIST_ABI_FILE = "whitelist_abi.json"


def load_contract_abi(file_name: str = WHITELIST_ABI_FILE) -> List[dict]:
    """Load a contract ABI shipped in app/contracts."""
    path = CONTRACTS_ROOT / file_name
    if not path.exists():
        raise FileNotFoundError(f"Contract ABI not found: {path}")
    with open(path, "r") as f:
        return json.load(f)


class WhitelistOracle:
    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        abi: Optional[List[dict]] = None,
        timeout: float = 10.0,
    ):
        self.timeout = timeout
        try:
            self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
            self._contract = self._w3.eth.contract(
                address=Web3.to_checksum_address(contract_address),
                abi=abi if abi is not None else load_contract_abi(),
            )
        except Exception as e:
            logger.error("could not build Whitelist contract client at %s: %s", contract_address, e)
            raise ApiError(ErrorKind.CONTRACT_INIT_FAILED) from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhitelistOracle":
        return cls(
            settings.RPC_URL,
            settings.WHITELIST_ADDRESS,
            timeout=settings.RPC_TIMEOUT_SECONDS,
        )

    async def is_granted(self, address: str) -> bool:
        return await self._read("isGranted", address)

    async def is_admin(self, address: str) -> bool:
        return await self._read("isAdmin", address)

    async def _read(self, method: str, address: str) -> bool:
        contract_fn = getattr(self._contract.functions, method)
        try:
            result: Any = await asyncio.wait_for(
                contract_fn(Web3.to_checksum_address(address)).call(),
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning("Whitelist.%s(%s) failed: %r", method, address, e)
            raise ApiError(ErrorKind.ORACLE_UNAVAILABLE) from e
        return bool(result)

    async def close(self) -> None:
        await self._w3.provider.disconnect()
