"""Relay tip instructions.

When a signed transaction is relayed through the Jito block engine instead
of being broadcast by the custodial service, it must pay a tip: a plain
system transfer from the vault to one of the block engine's tip accounts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer

from solcustody.errors import InvalidInstructionSet
from solcustody.transaction.source import InstructionSource, PrebuiltTransaction, RawInstructions

logger = logging.getLogger(__name__)


class TipPlacement(str, Enum):
    """Where the tip goes relative to the operation's instructions."""
    PREPEND = "prepend"
    APPEND = "append"


@dataclass(frozen=True)
class TipConfig:
    """Tip destination and amount, in lamports."""

    account: Pubkey
    lamports: int


def build_tip_instruction(payer: Pubkey, tip_account: Pubkey, lamports: int) -> Instruction:
    """Build the transfer paying the relay tip.

    Raises:
        InvalidInstructionSet: If lamports is not positive
    """
    if lamports <= 0:
        raise InvalidInstructionSet(f"Tip must be a positive amount of lamports, got {lamports}")
    return transfer(TransferParams(from_pubkey=payer, to_pubkey=tip_account, lamports=lamports))


def merge_tip(
    instructions: Sequence[Instruction],
    tip: Instruction,
    placement: Union[TipPlacement, str] = TipPlacement.PREPEND,
) -> tuple[Instruction, ...]:
    """Return a new instruction tuple with the tip inserted.

    The relative order of the operation's own instructions never changes.
    """
    placement = TipPlacement(placement)
    if placement is TipPlacement.PREPEND:
        return (tip, *instructions)
    return (*instructions, tip)


def with_tip(
    source: InstructionSource,
    payer: Pubkey,
    tip: TipConfig,
    placement: Union[TipPlacement, str] = TipPlacement.PREPEND,
) -> RawInstructions:
    """Add a tip instruction to an instruction source.

    Pre-built transactions are rejected: inserting an instruction would
    invalidate any co-signature they already carry, and this layer does
    not re-sign.

    Raises:
        InvalidInstructionSet: For pre-built transactions or a bad tip amount
    """
    if isinstance(source, PrebuiltTransaction):
        raise InvalidInstructionSet("Cannot add a tip instruction to a pre-built transaction")

    instruction = build_tip_instruction(payer, tip.account, tip.lamports)
    merged = merge_tip(source.instructions, instruction, placement)
    logger.info(f"Added {tip.lamports} lamport tip to {tip.account} ({TipPlacement(placement).value})")
    return RawInstructions(merged)
