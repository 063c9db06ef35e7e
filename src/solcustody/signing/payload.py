"""Signing request payload for the custodial MPC signer.

The payload is built once per operation, serialized to JSON and handed to
the signing API client. It is never persisted or mutated afterwards.
"""

import json
import logging
from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from solcustody.transaction.signatures import SignatureSlot

logger = logging.getLogger(__name__)

SIGNER_TYPE = "api_signer"
SIGN_MODE = "auto"
TRANSACTION_TYPE = "solana_transaction"
DETAILS_TYPE = "solana_serialized_transaction_message"
DEFAULT_CHAIN = "solana_mainnet"
# Only meaningful for the create-and-wait endpoint
WAIT_FOR_STATE = "signed"


class PushMode(str, Enum):
    """Who broadcasts the signed transaction."""
    AUTO = "auto"        # signing service broadcasts
    MANUAL = "manual"    # caller relays it (Jito)


def push_mode_for(use_alternate_relay: bool) -> PushMode:
    """Manual push if and only if the caller relays the transaction itself."""
    return PushMode.MANUAL if use_alternate_relay else PushMode.AUTO


class TransactionDetails(BaseModel):
    """The `details` object of a Solana signing request."""

    type: str = Field(default=DETAILS_TYPE)
    push_mode: PushMode
    data: str = Field(..., description="Base64 serialized message")
    chain: str = Field(default=DEFAULT_CHAIN)
    signatures: Optional[list[SignatureSlot]] = None


class SigningRequestPayload(BaseModel):
    """Request body for the signing API."""

    vault_id: str
    signer_type: str = Field(default=SIGNER_TYPE)
    sign_mode: str = Field(default=SIGN_MODE)
    type: str = Field(default=TRANSACTION_TYPE)
    details: TransactionDetails
    wait_for_state: str = Field(default=WAIT_FOR_STATE)

    @property
    def push_mode(self) -> PushMode:
        return self.details.push_mode

    def to_dict(self) -> dict:
        """Convert to the wire shape; `signatures` is omitted when unset."""
        data = self.model_dump(mode="json")
        if data["details"].get("signatures") is None:
            data["details"].pop("signatures", None)
        return data

    def to_json(self) -> str:
        """Serialize exactly as it will be signed and sent."""
        return json.dumps(self.to_dict())


def build_signing_request(
    serialized_message: str,
    vault_id: str,
    use_alternate_relay: bool = False,
    chain: str = DEFAULT_CHAIN,
    signatures: Optional[Sequence[SignatureSlot]] = None,
) -> SigningRequestPayload:
    """Compose the signing request for a serialized message.

    Args:
        serialized_message: Base64 message from the serializer
        vault_id: Custodial vault identifier
        use_alternate_relay: True when the caller relays the signed transaction
        chain: Chain identifier understood by the signer
        signatures: Resolved signature slots; omitted when None or a single slot

    Returns:
        SigningRequestPayload
    """
    if signatures is not None and len(signatures) > 1:
        slots = list(signatures)
        # The vault slot is always a placeholder for the custodial signer
        slots[0] = SignatureSlot(data=None)
    else:
        slots = None

    payload = SigningRequestPayload(
        vault_id=vault_id,
        details=TransactionDetails(
            push_mode=push_mode_for(use_alternate_relay),
            data=serialized_message,
            chain=chain,
            signatures=slots,
        ),
    )
    logger.debug(
        f"Built signing request for vault {vault_id} "
        f"(push_mode={payload.push_mode.value}, signatures={len(slots) if slots else 0})"
    )
    return payload
