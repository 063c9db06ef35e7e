"""Transaction wire formats."""

from enum import Enum
from typing import Any, Union

from solders.message import Message, MessageV0
from solders.transaction import Transaction, VersionedTransaction

from solcustody.errors import FormatMismatch


class TransactionFormat(str, Enum):
    """On-chain transaction encoding.

    Selected by caller intent, never detected from the instructions. The
    custodial signer must receive the encoding it expects.
    """
    LEGACY = "legacy"
    VERSIONED = "v0"

    @classmethod
    def parse(cls, value: Union["TransactionFormat", str, int]) -> "TransactionFormat":
        """Parse a configured tx version ("V0", "LEGACY", 0, "legacy")."""
        if isinstance(value, TransactionFormat):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if value == 0:
                return cls.VERSIONED
            raise ValueError(f"Unsupported transaction version: {value}")
        normalized = str(value).strip().lower()
        if normalized in ("v0", "0", "versioned"):
            return cls.VERSIONED
        if normalized == "legacy":
            return cls.LEGACY
        raise ValueError(f"Unsupported transaction version: {value!r}")

    @property
    def api_name(self) -> str:
        """Name used by the Raydium APIs (txVersion)."""
        return "V0" if self is TransactionFormat.VERSIONED else "LEGACY"


def format_of(obj: Any) -> TransactionFormat:
    """Return the format of a solders message or transaction.

    Raises:
        FormatMismatch: If the object is neither legacy nor versioned
    """
    if isinstance(obj, (MessageV0, VersionedTransaction)):
        return TransactionFormat.VERSIONED
    if isinstance(obj, (Message, Transaction)):
        return TransactionFormat.LEGACY
    raise FormatMismatch(f"Not a Solana message or transaction: {type(obj).__name__}")
