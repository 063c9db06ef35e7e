"""Unsigned transaction assembly.

Provides:
- assemble: compile instructions or reuse a pre-built transaction
- serialize_message: canonical base64 message for the signer
- resolve_signature_slots: placeholder and co-signer slots
- with_tip: relay tip injection
"""

from solcustody.transaction.assembler import AssembledTransaction, assemble
from solcustody.transaction.formats import TransactionFormat, format_of
from solcustody.transaction.serializer import (
    decode_instructions,
    deserialize_message,
    deserialize_transaction,
    serialize_message,
)
from solcustody.transaction.signatures import SignatureSlot, resolve_signature_slots
from solcustody.transaction.source import InstructionSource, PrebuiltTransaction, RawInstructions
from solcustody.transaction.tips import (
    TipConfig,
    TipPlacement,
    build_tip_instruction,
    merge_tip,
    with_tip,
)

__all__ = [
    "AssembledTransaction",
    "assemble",
    "TransactionFormat",
    "format_of",
    "decode_instructions",
    "deserialize_message",
    "deserialize_transaction",
    "serialize_message",
    "SignatureSlot",
    "resolve_signature_slots",
    "InstructionSource",
    "PrebuiltTransaction",
    "RawInstructions",
    "TipConfig",
    "TipPlacement",
    "build_tip_instruction",
    "merge_tip",
    "with_tip",
]
