"""Priority fee resolution.

Uses the Raydium auto-fee endpoint, which publishes compute-unit prices
(micro-lamports) for three tiers: vh (very high), h (high), m (medium).
"""

import logging
from typing import Optional

import httpx

from solcustody.errors import UpstreamFetchFailure

logger = logging.getLogger(__name__)

AUTO_FEE_PATH = "/main/auto-fee"
FEE_TIERS = ("vh", "h", "m")


class PriorityFeeResolver:
    """Resolves the compute-unit price for a configured tier."""

    def __init__(
        self,
        api_host: str = "https://api-v3.raydium.io",
        tier: str = "h",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        tier = tier.lower()
        if tier not in FEE_TIERS:
            raise ValueError(f"Priority fee tier must be one of {FEE_TIERS}, got {tier!r}")
        self.api_host = api_host.rstrip("/")
        self.tier = tier
        self.timeout = timeout
        self._transport = transport

    async def get_priority_fee(self) -> int:
        """Get the compute-unit price in micro-lamports.

        Raises:
            UpstreamFetchFailure: If the endpoint fails or lacks the tier
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.api_host}{AUTO_FEE_PATH}")
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Priority fee request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Priority fee API error: {response.status_code} - {response.text}")
            raise UpstreamFetchFailure(f"Priority fee API returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamFetchFailure(f"Priority fee API returned invalid JSON: {e}") from e

        tiers = ((body.get("data") or {}).get("default") or {})
        value = tiers.get(self.tier)
        if value is None:
            raise UpstreamFetchFailure(f"Priority fee tier {self.tier!r} missing from response")

        fee = int(value)
        logger.info(f"Priority fee ({self.tier}): {fee} micro-lamports per CU")
        return fee
