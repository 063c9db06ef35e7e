"""Signature slots for the outgoing signing request.

Slot 0 always belongs to the custodial vault and is sent as a null
placeholder: the signer fills it, never this layer. Any other slot is only
populated when the transaction already carries a co-signature, e.g. the new
position NFT mint that the liquidity SDK signs when opening a position.
"""

import base64
import logging
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel
from solders.transaction import Transaction, VersionedTransaction

from solcustody.errors import FormatMismatch
from solcustody.transaction.formats import TransactionFormat, format_of

logger = logging.getLogger(__name__)

VAULT_SLOT = 0


class SignatureSlot(BaseModel):
    """One entry of the request's signature list."""

    data: Optional[str] = None


def _raw_signature(entry: Any) -> Optional[bytes]:
    """Raw bytes of a signature entry, or None when the slot is unsigned."""
    if entry is None:
        return None
    raw = bytes(entry)
    # Unsigned slots hold an empty or all-zero placeholder
    if not raw or not any(raw):
        return None
    return raw


def encode_signature(entry: Any) -> Optional[str]:
    """Base64 of a signature entry, or None when absent."""
    raw = _raw_signature(entry)
    if raw is None:
        return None
    return base64.b64encode(raw).decode()


def resolve_signature_slots(
    transaction: Any,
    tx_format: Union[TransactionFormat, str, int],
) -> Optional[list[SignatureSlot]]:
    """Resolve the signature list to send with the request.

    Args:
        transaction: Assembled transaction exposing a `signatures` sequence
        tx_format: Encoding of the transaction

    Returns:
        None when the transaction has at most one signature slot, otherwise
        one SignatureSlot per slot with slot 0 set to null

    Raises:
        FormatMismatch: If a solders transaction does not match tx_format
    """
    tx_format = TransactionFormat.parse(tx_format)

    if isinstance(transaction, (Transaction, VersionedTransaction)):
        actual = format_of(transaction.message)
        if actual is not tx_format:
            raise FormatMismatch(
                f"Transaction is {actual.value} but {tx_format.value} slots were requested"
            )

    signatures: Sequence[Any] = list(getattr(transaction, "signatures", None) or [])
    if len(signatures) <= 1:
        return None

    slots = [SignatureSlot(data=None)]
    for index, entry in enumerate(signatures):
        if index == VAULT_SLOT:
            if _raw_signature(entry) is not None:
                logger.warning("Ignoring a value found in the vault signature slot")
            continue
        slots.append(SignatureSlot(data=encode_signature(entry)))

    logger.debug(
        f"Resolved {len(slots)} signature slot(s), "
        f"{sum(1 for s in slots if s.data is not None)} pre-signed"
    )
    return slots
