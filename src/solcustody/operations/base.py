"""Shared pipeline of every operation.

Once an operation has its instructions (or a pre-built transaction):
1. Fetch the latest blockhash (raw instructions only, as late as possible)
2. Assemble the unsigned message with the vault as fee payer
3. Serialize the message
4. Resolve signature slots
5. Build the signing request
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey

from solcustody.config import Settings
from solcustody.contracts import OperationConfig
from solcustody.errors import InvalidInstructionSet
from solcustody.providers.fees import PriorityFeeResolver
from solcustody.providers.jito import JitoRelay
from solcustody.providers.raydium import RaydiumTradeApi
from solcustody.providers.rpc import BlockhashProvider
from solcustody.sdk import ComputeBudget
from solcustody.signing.payload import SigningRequestPayload, build_signing_request
from solcustody.transaction.assembler import assemble
from solcustody.transaction.serializer import decode_instructions, serialize_message
from solcustody.transaction.signatures import resolve_signature_slots
from solcustody.transaction.source import InstructionSource, RawInstructions
from solcustody.transaction.tips import TipConfig

logger = logging.getLogger(__name__)


@dataclass
class OperationDeps:
    """Upstream services used by the operations."""

    settings: Settings
    blockhash: BlockhashProvider
    fees: PriorityFeeResolver
    jito: Optional[JitoRelay] = None
    raydium: Optional[RaydiumTradeApi] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OperationDeps":
        """Create the default providers for the configured endpoints."""
        return cls(
            settings=settings,
            blockhash=BlockhashProvider(settings.solana_rpc_url, settings.blockhash_commitment),
            fees=PriorityFeeResolver(settings.raydium_api_host, settings.priority_fee_tier),
            jito=JitoRelay(settings.jito_block_engine_url, timeout=settings.request_timeout),
            raydium=RaydiumTradeApi(settings.raydium_swap_host, timeout=settings.request_timeout),
        )

    @property
    def vault(self) -> Pubkey:
        """Vault address, used as fee payer and SDK owner."""
        if not self.settings.vault_address:
            raise InvalidInstructionSet("Vault address (fee payer) is not configured")
        try:
            return Pubkey.from_string(self.settings.vault_address)
        except ValueError as e:
            raise InvalidInstructionSet(
                f"Invalid vault address {self.settings.vault_address!r}: {e}"
            ) from e


async def resolve_compute_budget(config: OperationConfig, deps: OperationDeps) -> ComputeBudget:
    """Compute unit limit from the config, price from the fee resolver."""
    return ComputeBudget(units=config.cu_limit, micro_lamports=await deps.fees.get_priority_fee())


async def resolve_tip(config: OperationConfig, deps: OperationDeps) -> Optional[TipConfig]:
    """Tip to pay when relaying through Jito, or None."""
    if not config.wants_tip:
        return None

    if deps.settings.jito_tip_account:
        account = Pubkey.from_string(deps.settings.jito_tip_account)
    elif deps.jito is not None:
        account = await deps.jito.get_tip_account()
    else:
        raise InvalidInstructionSet("Jito relay requested but no tip account is available")
    return TipConfig(account=account, lamports=config.jito_tip)


async def finalize_request(
    source: InstructionSource,
    config: OperationConfig,
    deps: OperationDeps,
) -> SigningRequestPayload:
    """Turn an instruction source into a signing request."""
    tx_format = config.tx_format

    recent_blockhash = None
    if isinstance(source, RawInstructions):
        recent_blockhash = await deps.blockhash.get_latest_blockhash()

    assembled = assemble(source, deps.vault, recent_blockhash, tx_format)
    if logger.isEnabledFor(logging.DEBUG) and not assembled.prebuilt:
        logger.debug(f"Built instructions: {decode_instructions(assembled.message)}")

    data = serialize_message(assembled.message, tx_format)
    signatures = resolve_signature_slots(assembled.transaction, tx_format)

    payload = build_signing_request(
        data,
        vault_id=deps.settings.vault_id,
        use_alternate_relay=config.use_jito,
        chain=deps.settings.chain,
        signatures=signatures,
    )
    logger.info(
        f"Signing request ready: {assembled.instruction_count} instruction(s), "
        f"{tx_format.value}, push_mode={payload.push_mode.value}"
    )
    return payload
