"""Harvest rewards from every non-empty Raydium CLMM position."""

import logging
from collections import defaultdict

from solcustody.context import SdkContext
from solcustody.contracts import HarvestConfig
from solcustody.errors import NoActivePosition
from solcustody.operations.base import (
    OperationDeps,
    finalize_request,
    resolve_compute_budget,
    resolve_tip,
)
from solcustody.sdk import CLMM_PROGRAM_ID, Position
from solcustody.signing.payload import SigningRequestPayload
from solcustody.transaction.source import RawInstructions
from solcustody.transaction.tips import with_tip

logger = logging.getLogger(__name__)


async def harvest_rewards(
    context: SdkContext,
    config: HarvestConfig,
    deps: OperationDeps,
) -> SigningRequestPayload:
    """Build the signing request harvesting all rewards.

    The SDK may spread the harvest over several transactions; all of its
    instructions are compiled into a single message here, with a blockhash
    fetched after building.

    Raises:
        NoActivePosition: If no position holds liquidity
    """
    sdk = await context.get_sdk()

    all_positions = await sdk.get_owner_positions(CLMM_PROGRAM_ID)
    active = [p for p in all_positions if not p.is_empty]
    if not active:
        raise NoActivePosition(
            f"Non-zero positions NOT detected for vault {context.owner} -> {len(all_positions)}"
        )

    by_pool: dict[str, list[Position]] = defaultdict(list)
    for position in active:
        by_pool[position.pool_id].append(position)

    pools = await sdk.fetch_pools_by_ids(list(by_pool))
    pool_map = {pool.id: pool for pool in pools}

    compute_budget = await resolve_compute_budget(config, deps)
    logger.info(f"Harvesting rewards of {len(active)} position(s) in {len(by_pool)} pool(s)")
    result = await sdk.harvest_all_rewards(
        pool_map,
        dict(by_pool),
        tx_format=config.tx_format,
        compute_budget=compute_budget,
    )

    source = RawInstructions(result.instructions)
    tip = await resolve_tip(config, deps)
    if tip is not None:
        source = with_tip(source, deps.vault, tip, deps.settings.tip_placement)

    return await finalize_request(source, config, deps)
