"""Process-wide handle on the liquidity SDK.

Loading the SDK is expensive (it fetches token lists and program state), so
it happens at most once per context. The first caller loads it; concurrent
first callers wait on the same lock and reuse the result. There is no
teardown.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from solders.pubkey import Pubkey

from solcustody.sdk import LiquiditySdk

logger = logging.getLogger(__name__)

SdkLoader = Callable[[Pubkey], Awaitable[LiquiditySdk]]


class SdkContext:
    """Lazily created, shared liquidity SDK handle.

    Example:
        context = SdkContext(owner=vault_pubkey, loader=load_raydium)
        sdk = await context.get_sdk()
    """

    def __init__(self, owner: Pubkey, loader: SdkLoader):
        """Initialize the context.

        Args:
            owner: Vault address the SDK acts for
            loader: Coroutine function creating the SDK for an owner
        """
        self.owner = owner
        self._loader = loader
        self._sdk: Optional[LiquiditySdk] = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._sdk is not None

    async def get_sdk(self) -> LiquiditySdk:
        """Return the SDK, loading it on first use."""
        if self._sdk is not None:
            return self._sdk

        async with self._lock:
            if self._sdk is None:
                logger.info(f"Loading liquidity SDK for owner {self.owner}")
                self._sdk = await self._loader(self.owner)
        return self._sdk
