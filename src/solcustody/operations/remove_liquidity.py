"""Remove liquidity from (and optionally close) a Raydium CLMM position."""

import logging

from solcustody.context import SdkContext
from solcustody.contracts import RemoveLiquidityConfig
from solcustody.errors import NoActivePosition
from solcustody.operations.base import (
    OperationDeps,
    finalize_request,
    resolve_compute_budget,
    resolve_tip,
)
from solcustody.sdk import is_valid_clmm
from solcustody.signing.payload import SigningRequestPayload

logger = logging.getLogger(__name__)


async def remove_liquidity(
    context: SdkContext,
    config: RemoveLiquidityConfig,
    deps: OperationDeps,
) -> SigningRequestPayload:
    """Build the signing request withdrawing the vault's position liquidity.

    Raises:
        ValueError: If the pool is not a CLMM pool
        NoActivePosition: If the vault has no position in the pool
    """
    sdk = await context.get_sdk()

    pool = await sdk.fetch_pool_info(config.raydium_pool)
    if not is_valid_clmm(pool.program_id):
        raise ValueError(f"Target pool {pool.id} is not a CLMM pool")

    positions = await sdk.get_owner_positions(pool.program_id)
    if not positions:
        raise NoActivePosition(f"No positions detected for vault {context.owner}")

    position = next((p for p in positions if p.pool_id == pool.id), None)
    if position is None:
        raise NoActivePosition(
            f"No positions detected for vault {context.owner} in Raydium pool {pool.id}"
        )

    compute_budget = await resolve_compute_budget(config, deps)
    tip = await resolve_tip(config, deps)

    logger.info(
        f"Removing liquidity {position.liquidity} from {pool.id} "
        f"(close_position={config.close_position})"
    )
    result = await sdk.decrease_liquidity(
        pool,
        position,
        close_position=config.close_position,
        amount_min_a=config.amount_min_a,
        amount_min_b=config.amount_min_b,
        tx_format=config.tx_format,
        compute_budget=compute_budget,
        tip=tip,
    )
    return await finalize_request(result.to_source(), config, deps)
