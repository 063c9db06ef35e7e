"""Message assembly for unsigned Solana transactions.

Builds the canonical message that the custodial vault will sign:
1. Raw instructions are compiled with the vault as fee payer and a recent
   blockhash, in the legacy or v0 encoding requested by the caller
2. A transaction already built by the liquidity SDK is reused verbatim;
   only its message is extracted, so no instruction is dropped or reordered
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from solders.hash import Hash
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction, VersionedTransaction

from solcustody.errors import FormatMismatch, InvalidInstructionSet
from solcustody.transaction.formats import TransactionFormat, format_of
from solcustody.transaction.source import InstructionSource, PrebuiltTransaction, RawInstructions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledTransaction:
    """An unsigned message together with the transaction that carries it.

    Attributes:
        tx_format: Encoding of the message
        message: Legacy Message or MessageV0
        transaction: Transaction whose signature list feeds the slot resolver
        prebuilt: True when the transaction came from upstream untouched
    """
    tx_format: TransactionFormat
    message: Union[Message, MessageV0]
    transaction: Union[Transaction, VersionedTransaction]
    prebuilt: bool = False

    @property
    def fee_payer(self) -> Pubkey:
        return self.message.account_keys[0]

    @property
    def instruction_count(self) -> int:
        return len(self.message.instructions)


def _to_hash(recent_blockhash: Union[Hash, str, None]) -> Hash:
    if recent_blockhash is None:
        raise InvalidInstructionSet("A recent blockhash is required to compile instructions")
    if isinstance(recent_blockhash, Hash):
        return recent_blockhash
    try:
        return Hash.from_string(recent_blockhash)
    except Exception as e:
        raise InvalidInstructionSet(f"Invalid recent blockhash {recent_blockhash!r}: {e}") from e


def _compile(
    instructions: RawInstructions,
    fee_payer: Optional[Pubkey],
    recent_blockhash: Union[Hash, str, None],
    tx_format: TransactionFormat,
) -> AssembledTransaction:
    if not instructions.instructions:
        raise InvalidInstructionSet("Instruction list is empty")
    if fee_payer is None:
        raise InvalidInstructionSet("Fee payer is required")

    blockhash = _to_hash(recent_blockhash)
    ixs = list(instructions.instructions)

    try:
        if tx_format is TransactionFormat.VERSIONED:
            message = MessageV0.try_compile(fee_payer, ixs, [], blockhash)
            placeholders = [Signature.default()] * message.header.num_required_signatures
            transaction = VersionedTransaction.populate(message, placeholders)
        else:
            message = Message.new_with_blockhash(ixs, fee_payer, blockhash)
            transaction = Transaction.new_unsigned(message)
    except Exception as e:
        raise InvalidInstructionSet(f"Could not compile instructions: {e}") from e

    logger.debug(
        f"Compiled {len(ixs)} instruction(s) into {tx_format.value} message "
        f"(payer={fee_payer}, blockhash={blockhash})"
    )
    return AssembledTransaction(tx_format=tx_format, message=message, transaction=transaction)


def _reuse(prebuilt: PrebuiltTransaction, tx_format: TransactionFormat) -> AssembledTransaction:
    transaction = prebuilt.transaction
    message = transaction.message
    actual = format_of(message)
    if actual is not tx_format:
        raise FormatMismatch(
            f"Pre-built transaction is {actual.value} but {tx_format.value} was requested"
        )
    if not message.instructions:
        raise InvalidInstructionSet("Pre-built transaction carries no instructions")

    logger.debug(
        f"Reusing pre-built {tx_format.value} transaction with "
        f"{len(message.instructions)} instruction(s) and {len(transaction.signatures)} signature slot(s)"
    )
    return AssembledTransaction(
        tx_format=tx_format, message=message, transaction=transaction, prebuilt=True
    )


def assemble(
    source: InstructionSource,
    fee_payer: Optional[Pubkey],
    recent_blockhash: Union[Hash, str, None],
    tx_format: Union[TransactionFormat, str, int],
) -> AssembledTransaction:
    """Produce the unsigned message for an instruction source.

    Args:
        source: Raw instructions or a pre-built transaction
        fee_payer: Vault address paying the fees (ignored for pre-built)
        recent_blockhash: Blockhash for raw instructions (ignored for pre-built)
        tx_format: Requested encoding

    Returns:
        AssembledTransaction

    Raises:
        InvalidInstructionSet: Empty instructions, missing fee payer or blockhash
        FormatMismatch: Pre-built transaction encoded differently than requested
    """
    tx_format = TransactionFormat.parse(tx_format)

    if isinstance(source, PrebuiltTransaction):
        return _reuse(source, tx_format)
    if isinstance(source, RawInstructions):
        return _compile(source, fee_payer, recent_blockhash, tx_format)
    raise InvalidInstructionSet(f"Unknown instruction source: {type(source).__name__}")
