"""Open a Raydium CLMM position."""

import logging

from solcustody.context import SdkContext
from solcustody.contracts import OpenPositionConfig
from solcustody.operations.base import (
    OperationDeps,
    finalize_request,
    resolve_compute_budget,
    resolve_tip,
)
from solcustody.sdk import is_valid_clmm
from solcustody.signing.payload import SigningRequestPayload

logger = logging.getLogger(__name__)


async def open_position(
    context: SdkContext,
    config: OpenPositionConfig,
    deps: OperationDeps,
) -> SigningRequestPayload:
    """Build the signing request opening a position funded from token A.

    The SDK mints a new position NFT and signs the transaction with the mint
    keypair, so the request carries that co-signature in slot 1.

    Raises:
        ValueError: If the pool is not a CLMM pool
    """
    sdk = await context.get_sdk()

    pool = await sdk.fetch_pool_info(config.raydium_pool)
    if not is_valid_clmm(pool.program_id):
        raise ValueError(f"Target pool {pool.id} is not a CLMM pool")

    compute_budget = await resolve_compute_budget(config, deps)
    tip = await resolve_tip(config, deps)

    logger.info(
        f"Opening position in {pool.id}: {config.input_amount} base "
        f"in [{config.start_price}, {config.end_price}]"
    )
    result = await sdk.open_position_from_base(
        pool,
        start_price=min(config.start_price, config.end_price),
        end_price=max(config.start_price, config.end_price),
        base_amount=config.input_amount,
        tx_format=config.tx_format,
        compute_budget=compute_budget,
        tip=tip,
    )
    return await finalize_request(result.to_source(), config, deps)
