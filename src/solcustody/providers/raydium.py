"""Raydium Trade API integration.

Swaps are not built from SDK instructions: the Trade API computes a route
and returns ready-made transactions for the vault, which are then reused
verbatim. API docs: https://docs.raydium.io/raydium/traders/trade-api
"""

import logging
from typing import Optional

import httpx
from solders.pubkey import Pubkey

from solcustody.errors import UpstreamFetchFailure

logger = logging.getLogger(__name__)

RAYDIUM_SWAP_HOST = "https://transaction-v1.raydium.io"
SOL_MINT = "So11111111111111111111111111111111111111112"
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the associated token account of an owner for a mint."""
    address, _bump = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


class RaydiumTradeApi:
    """Client for the swap-base-in endpoints of the Raydium Trade API."""

    def __init__(
        self,
        swap_host: str = RAYDIUM_SWAP_HOST,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.swap_host = swap_host.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _parse(response: httpx.Response, action: str) -> dict:
        if response.status_code != 200:
            logger.warning(f"Raydium {action} error: {response.status_code} - {response.text}")
            raise UpstreamFetchFailure(f"Raydium {action} returned HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchFailure(f"Raydium {action} returned invalid JSON: {e}") from e
        if data.get("success") is False:
            raise UpstreamFetchFailure(f"Raydium {action} error: {data.get('msg') or data.get('message')}")
        return data

    async def compute_swap_base_in(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
        tx_version: str,
    ) -> dict:
        """Compute an exact-in swap route.

        Args:
            input_mint: Mint of the token sold
            output_mint: Mint of the token bought
            amount: Input amount in base units
            slippage_bps: Slippage tolerance in basis points
            tx_version: "V0" or "LEGACY"

        Returns:
            The full compute response, passed back when fetching transactions
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(slippage_bps),
            "txVersion": tx_version,
        }
        try:
            async with self._client() as client:
                response = await client.get(f"{self.swap_host}/compute/swap-base-in", params=params)
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Raydium compute request failed: {e}") from e

        data = self._parse(response, "compute")
        logger.debug(f"Swap route {input_mint} -> {output_mint}: {data.get('data')}")
        return data

    async def fetch_swap_transactions(
        self,
        swap_response: dict,
        wallet: str,
        tx_version: str,
        compute_unit_price: int,
        wrap_sol: bool = False,
        unwrap_sol: bool = False,
        input_account: Optional[str] = None,
    ) -> list[str]:
        """Fetch the serialized swap transactions for a computed route.

        Returns:
            Base64 wire transactions, in execution order

        Raises:
            UpstreamFetchFailure: If the API fails or returns no transaction
        """
        body = {
            "computeUnitPriceMicroLamports": str(compute_unit_price),
            "swapResponse": swap_response,
            "txVersion": tx_version,
            "wallet": wallet,
            "wrapSol": wrap_sol,
            # True: output is received as native SOL, False: as wSOL
            "unwrapSol": unwrap_sol,
        }
        if input_account:
            body["inputAccount"] = input_account

        try:
            async with self._client() as client:
                response = await client.post(f"{self.swap_host}/transaction/swap-base-in", json=body)
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Raydium transaction request failed: {e}") from e

        data = self._parse(response, "transaction")
        transactions = [
            item["transaction"]
            for item in data.get("data") or []
            if isinstance(item, dict) and item.get("transaction")
        ]
        if not transactions:
            raise UpstreamFetchFailure("Raydium returned no swap transaction")

        logger.info(f"Raydium returned {len(transactions)} swap transaction(s)")
        return transactions
