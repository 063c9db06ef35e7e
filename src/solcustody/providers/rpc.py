"""Solana RPC access."""

import logging

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.hash import Hash

from solcustody.errors import UpstreamFetchFailure

logger = logging.getLogger(__name__)


class BlockhashProvider:
    """Fetches the latest blockhash.

    Callers fetch it after the instructions are built and right before the
    message is compiled: a stale blockhash gets the transaction rejected.
    """

    def __init__(self, rpc_url: str, commitment: str = "finalized"):
        self.rpc_url = rpc_url
        self.commitment = Commitment(commitment)

    async def get_latest_blockhash(self) -> Hash:
        """Get the latest blockhash.

        Raises:
            UpstreamFetchFailure: If the RPC call fails
        """
        try:
            async with AsyncClient(self.rpc_url) as client:
                response = await client.get_latest_blockhash(commitment=self.commitment)
        except Exception as e:
            logger.error(f"getLatestBlockhash failed on {self.rpc_url}: {e}")
            raise UpstreamFetchFailure(f"Could not fetch latest blockhash: {e}") from e

        value = getattr(response, "value", None)
        if value is None:
            raise UpstreamFetchFailure(f"Empty getLatestBlockhash response from {self.rpc_url}")

        logger.debug(
            f"Latest blockhash {value.blockhash} (valid until height {value.last_valid_block_height})"
        )
        return value.blockhash
