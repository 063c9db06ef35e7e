"""HTTP client for the custodial signing API."""

import logging
from typing import Optional

import httpx

from solcustody.errors import SigningApiError, UpstreamFetchFailure

logger = logging.getLogger(__name__)

TRANSACTIONS_PATH = "/api/v1/transactions"


class SigningApiClient:
    """Submits authenticated signing requests and reads transactions back.

    The client never signs anything itself: callers pass the body exactly as
    it was authenticated together with its timestamp and signature.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Signing API base URL
            access_token: Bearer token of the API user
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        )

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    @staticmethod
    def _check(response: httpx.Response, action: str) -> dict:
        if response.status_code >= 400:
            logger.error(f"Signing API {action} failed: {response.status_code} - {response.text}")
            raise SigningApiError(
                f"Signing API {action} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.json()

    async def create_and_wait(self, path: str, body: str, timestamp: int, signature: str) -> dict:
        """Create a transaction and wait until it reaches the requested state.

        Args:
            path: API path that was included in the signed payload
            body: JSON body, byte-identical to the signed one
            timestamp: Timestamp (ms) included in the signed payload
            signature: Base64 request signature

        Returns:
            Transaction object returned by the API

        Raises:
            SigningApiError: On a non-2xx response
            UpstreamFetchFailure: On transport errors
        """
        headers = self._headers()
        headers.update({
            "Content-Type": "application/json",
            "X-Timestamp": str(timestamp),
            "X-Signature": signature,
        })

        try:
            async with self._client() as client:
                response = await client.post(path, headers=headers, content=body.encode())
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Signing API unreachable: {e}") from e

        data = self._check(response, "create")
        logger.info(f"Signing API accepted transaction {data.get('id')} (state={data.get('state')})")
        return data

    async def get_transaction(self, transaction_id: str) -> dict:
        """Fetch a transaction by id."""
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{TRANSACTIONS_PATH}/{transaction_id}", headers=self._headers()
                )
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Signing API unreachable: {e}") from e

        return self._check(response, "get")

    async def get_raw_transaction(self, transaction_id: str) -> str:
        """Fetch the signed wire transaction (base64) of a manual-push request.

        Raises:
            SigningApiError: If the transaction has no raw transaction yet
        """
        data = await self.get_transaction(transaction_id)
        raw = data.get("raw_transaction")
        if not raw:
            raise SigningApiError(
                f"Transaction {transaction_id} has no signed raw transaction "
                f"(state={data.get('state')})"
            )
        return raw
