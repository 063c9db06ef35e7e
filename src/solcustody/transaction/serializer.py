"""Message serialization for the custodial signer.

Only the message is ever serialized, never a full transaction: the signer
expects bare message bytes, without signature placeholders. Each format has
exactly one canonical encoding and the two are never cross-applied.
"""

import base64
import binascii
import logging
from typing import Union

from solders.instruction import AccountMeta, Instruction
from solders.message import Message, MessageV0, from_bytes_versioned, to_bytes_versioned
from solders.transaction import Transaction, VersionedTransaction

from solcustody.errors import FormatMismatch, InvalidInstructionSet
from solcustody.transaction.formats import TransactionFormat

logger = logging.getLogger(__name__)

# High bit of the first message byte marks a versioned message
VERSION_PREFIX_MASK = 0x80


def message_bytes(message: Union[Message, MessageV0], tx_format: Union[TransactionFormat, str, int]) -> bytes:
    """Return the canonical message bytes for the requested format.

    Raises:
        FormatMismatch: If the message is not encoded in the requested format
    """
    tx_format = TransactionFormat.parse(tx_format)

    if tx_format is TransactionFormat.VERSIONED:
        if not isinstance(message, MessageV0):
            raise FormatMismatch(
                f"Versioned serialization requested for {type(message).__name__}"
            )
        return bytes(to_bytes_versioned(message))

    if not isinstance(message, Message):
        raise FormatMismatch(f"Legacy serialization requested for {type(message).__name__}")
    return bytes(message)


def serialize_message(message: Union[Message, MessageV0], tx_format: Union[TransactionFormat, str, int]) -> str:
    """Serialize a message to base64 for the signing request."""
    raw = message_bytes(message, tx_format)
    logger.debug(f"Serialized {TransactionFormat.parse(tx_format).value} message ({len(raw)} bytes)")
    return base64.b64encode(raw).decode()


def _b64decode(data: Union[str, bytes]) -> bytes:
    if isinstance(data, bytes):
        return data
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInstructionSet(f"Invalid base64 payload: {e}") from e


def deserialize_message(data: Union[str, bytes], tx_format: Union[TransactionFormat, str, int]) -> Union[Message, MessageV0]:
    """Decode a serialized message, checking it has the expected format."""
    tx_format = TransactionFormat.parse(tx_format)
    raw = _b64decode(data)
    if not raw:
        raise InvalidInstructionSet("Serialized message is empty")

    is_versioned = bool(raw[0] & VERSION_PREFIX_MASK)
    if tx_format is TransactionFormat.VERSIONED:
        if not is_versioned:
            raise FormatMismatch("Expected a versioned message, got legacy bytes")
        try:
            message = from_bytes_versioned(raw)
        except ValueError as e:
            raise InvalidInstructionSet(f"Malformed versioned message: {e}") from e
        if not isinstance(message, MessageV0):
            raise FormatMismatch(f"Unsupported message version in {type(message).__name__}")
        return message

    if is_versioned:
        raise FormatMismatch("Expected a legacy message, got versioned bytes")
    try:
        return Message.from_bytes(raw)
    except ValueError as e:
        raise InvalidInstructionSet(f"Malformed legacy message: {e}") from e


def deserialize_transaction(
    data: Union[str, bytes], tx_format: Union[TransactionFormat, str, int]
) -> Union[Transaction, VersionedTransaction]:
    """Decode a full wire transaction (e.g. from the Raydium Trade API)."""
    tx_format = TransactionFormat.parse(tx_format)
    raw = _b64decode(data)
    try:
        if tx_format is TransactionFormat.VERSIONED:
            transaction = VersionedTransaction.from_bytes(raw)
        else:
            transaction = Transaction.from_bytes(raw)
    except Exception as e:
        raise FormatMismatch(f"Could not decode {tx_format.value} transaction: {e}") from e

    if tx_format is TransactionFormat.VERSIONED and not isinstance(transaction.message, MessageV0):
        raise FormatMismatch("Expected a v0 transaction, got a legacy message")
    return transaction


def decode_instructions(message: Union[Message, MessageV0]) -> list[Instruction]:
    """Rebuild the instruction list of a compiled message, in order.

    Signer and writable flags are derived from the message header, so an
    account referenced by several instructions carries its merged privileges.

    Raises:
        InvalidInstructionSet: If the message uses address lookup tables
    """
    if isinstance(message, MessageV0) and message.address_table_lookups:
        raise InvalidInstructionSet("Cannot decode instructions that use address lookup tables")

    keys = list(message.account_keys)
    header = message.header
    num_keys = len(keys)
    num_signers = header.num_required_signatures
    writable_signers = num_signers - header.num_readonly_signed_accounts
    writable_end = num_keys - header.num_readonly_unsigned_accounts

    def meta(index: int) -> AccountMeta:
        is_signer = index < num_signers
        if is_signer:
            is_writable = index < writable_signers
        else:
            is_writable = index < writable_end
        return AccountMeta(keys[index], is_signer, is_writable)

    instructions = []
    for compiled in message.instructions:
        accounts = [meta(i) for i in bytes(compiled.accounts)]
        instructions.append(
            Instruction(keys[compiled.program_id_index], bytes(compiled.data), accounts)
        )
    return instructions
