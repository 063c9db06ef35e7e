"""Jito block engine relay.

Used when the custodial service signs without broadcasting (manual push):
the caller pays a tip to a block engine tip account and submits the signed
transaction itself.
"""

import itertools
import logging
import random
from typing import Any, Optional

import httpx
from solders.pubkey import Pubkey

from solcustody.errors import RelayError, UpstreamFetchFailure

logger = logging.getLogger(__name__)

JITO_BLOCK_ENGINE = "https://mainnet.block-engine.jito.wtf"
BUNDLES_PATH = "/api/v1/bundles"
TRANSACTIONS_PATH = "/api/v1/transactions"


class JitoRelay:
    """JSON-RPC client for the Jito block engine."""

    _ids = itertools.count(1)

    def __init__(
        self,
        block_engine_url: str = JITO_BLOCK_ENGINE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.block_engine_url = block_engine_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _call(self, path: str, method: str, params: list) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.block_engine_url}{path}", json=payload)
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Jito {method} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code != 200 or data.get("error"):
            error = data.get("error") or response.text
            logger.error(f"Jito {method} rejected: {response.status_code} - {error}")
            raise RelayError(f"Jito {method} rejected: {error}")
        return data.get("result")

    async def get_tip_accounts(self) -> list[str]:
        """List the block engine's tip accounts."""
        accounts = await self._call(BUNDLES_PATH, "getTipAccounts", [])
        if not accounts:
            raise UpstreamFetchFailure("Jito returned no tip accounts")
        return list(accounts)

    async def get_tip_account(self) -> Pubkey:
        """Pick one tip account at random to spread contention."""
        account = random.choice(await self.get_tip_accounts())
        logger.debug(f"Using Jito tip account {account}")
        return Pubkey.from_string(account)

    async def send_transaction(self, raw_transaction: str) -> str:
        """Submit a signed base64 wire transaction.

        Returns:
            Transaction signature reported by the block engine
        """
        signature = await self._call(
            TRANSACTIONS_PATH, "sendTransaction", [raw_transaction, {"encoding": "base64"}]
        )
        logger.info(f"Transaction sent via Jito: {signature}")
        return signature
