"""Exact-in token swap through the Raydium Trade API."""

import logging

from solders.pubkey import Pubkey

from solcustody.contracts import SwapConfig
from solcustody.errors import InvalidInstructionSet
from solcustody.operations.base import OperationDeps, finalize_request, resolve_compute_budget
from solcustody.providers.raydium import RaydiumTradeApi, associated_token_address
from solcustody.signing.payload import SigningRequestPayload
from solcustody.transaction.serializer import deserialize_transaction
from solcustody.transaction.source import PrebuiltTransaction

logger = logging.getLogger(__name__)


async def swap(config: SwapConfig, deps: OperationDeps) -> SigningRequestPayload:
    """Build the signing request for a swap.

    The Trade API returns transactions already compiled with its own
    blockhash; the first one is reused as is. A Jito tip cannot be added
    to it without recompiling, so none is paid.
    """
    raydium = deps.raydium or RaydiumTradeApi(
        deps.settings.raydium_swap_host, timeout=deps.settings.request_timeout
    )
    vault = deps.vault
    tx_format = config.tx_format

    if config.wants_tip:
        logger.warning("Swap transactions are pre-built: the Jito tip is skipped")

    compute_budget = await resolve_compute_budget(config, deps)

    route = await raydium.compute_swap_base_in(
        config.input_mint,
        config.output_mint,
        config.swap_amount,
        config.slippage_bps,
        config.tx_version,
    )

    input_account = None
    if not config.is_input_sol:
        try:
            input_account = str(associated_token_address(vault, Pubkey.from_string(config.input_mint)))
        except ValueError as e:
            raise InvalidInstructionSet(f"Invalid input mint {config.input_mint}: {e}") from e

    transactions = await raydium.fetch_swap_transactions(
        route,
        wallet=str(vault),
        tx_version=config.tx_version,
        compute_unit_price=compute_budget.micro_lamports,
        wrap_sol=config.is_input_sol,
        unwrap_sol=config.is_output_sol,
        input_account=input_account,
    )
    if len(transactions) > 1:
        logger.warning(f"Raydium returned {len(transactions)} transactions, only the first is signed")

    transaction = deserialize_transaction(transactions[0], tx_format)
    logger.info(f"Swapping {config.swap_amount} {config.input_mint} -> {config.output_mint}")
    return await finalize_request(PrebuiltTransaction(transaction), config, deps)
