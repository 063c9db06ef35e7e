"""Custodial signing requests.

Provides:
- build_signing_request: payload for the MPC signer
- RequestSigner: request authentication with the API signer key
- SigningApiClient: HTTP client for the signing API
"""

from solcustody.signing.auth import RequestSigner, build_auth_payload, current_timestamp_ms
from solcustody.signing.client import SigningApiClient
from solcustody.signing.payload import (
    PushMode,
    SigningRequestPayload,
    TransactionDetails,
    build_signing_request,
    push_mode_for,
)

__all__ = [
    "RequestSigner",
    "build_auth_payload",
    "current_timestamp_ms",
    "SigningApiClient",
    "PushMode",
    "SigningRequestPayload",
    "TransactionDetails",
    "build_signing_request",
    "push_mode_for",
]
