"""Submission of signing requests.

Authenticates the JSON body with the API signer key, posts it to the signing
service and, for manual-push requests, relays the signed transaction through
the Jito block engine.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solcustody.config import Settings, get_settings
from solcustody.errors import MissingCredentials
from solcustody.providers.jito import JitoRelay
from solcustody.signing.auth import RequestSigner, current_timestamp_ms
from solcustody.signing.client import SigningApiClient
from solcustody.signing.payload import PushMode, SigningRequestPayload

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a submitted signing request."""

    transaction_id: Optional[str]
    push_mode: PushMode
    state: Optional[str] = None
    relay_signature: Optional[str] = None


class RequestExecutor:
    """Sends signing requests to the custodial signing API."""

    def __init__(
        self,
        settings: Settings,
        signer: RequestSigner,
        client: SigningApiClient,
        relay: Optional[JitoRelay] = None,
    ):
        self.settings = settings
        self.signer = signer
        self.client = client
        self.relay = relay

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestExecutor":
        """Build an executor from configuration (reads the signer key)."""
        return cls(
            settings=settings,
            signer=RequestSigner.from_pem(settings.read_private_key()),
            client=SigningApiClient(
                settings.fordefi_api_base,
                settings.fordefi_api_token,
                timeout=settings.request_timeout,
            ),
            relay=JitoRelay(settings.jito_block_engine_url, timeout=settings.request_timeout),
        )

    async def submit(self, payload: SigningRequestPayload) -> SubmissionResult:
        """Submit a signing request and wait for the signature.

        Args:
            payload: Signing request built by an operation

        Returns:
            SubmissionResult with the signing service transaction id and,
            for manual push, the relay signature

        Raises:
            SigningApiError: If the signing service rejects the request
            RelayError: If the block engine rejects the signed transaction
            MissingCredentials: If the API token or vault is not configured
            UpstreamFetchFailure: On transport errors
        """
        if not self.settings.has_credentials:
            raise MissingCredentials(
                "FORDEFI_API_TOKEN, VAULT_ID and VAULT_ADDRESS must be set before submitting"
            )

        path = self.settings.api_path_endpoint
        body = payload.to_json()
        timestamp = current_timestamp_ms()
        signature = self.signer.sign_request(path, timestamp, body)

        logger.info(f"Submitting signing request for vault {payload.vault_id}")
        response = await self.client.create_and_wait(path, body, timestamp, signature)

        result = SubmissionResult(
            transaction_id=response.get("id"),
            push_mode=payload.push_mode,
            state=response.get("state"),
        )
        logger.info(f"Transaction submitted to signing service: {result.transaction_id}")

        if payload.push_mode == PushMode.MANUAL:
            if self.relay is None:
                self.relay = JitoRelay(
                    self.settings.jito_block_engine_url, timeout=self.settings.request_timeout
                )
            raw = response.get("raw_transaction")
            if not raw:
                raw = await self.client.get_raw_transaction(result.transaction_id)
            result.relay_signature = await self.relay.send_transaction(raw)

        return result


async def execute(
    payload: SigningRequestPayload,
    settings: Optional[Settings] = None,
) -> SubmissionResult:
    """Submit a signing request with the configured credentials."""
    settings = settings or get_settings()
    executor = RequestExecutor.from_settings(settings)
    return await executor.submit(payload)
