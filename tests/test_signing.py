"""Tests for request authentication, the signing API client and the executor."""

import base64
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from solcustody.config import Settings
from solcustody.errors import MissingCredentials, RequestSigningError, SigningApiError
from solcustody.executor import RequestExecutor, execute
from solcustody.signing import (
    PushMode,
    RequestSigner,
    SigningApiClient,
    build_auth_payload,
    build_signing_request,
)


@pytest.fixture
def private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def signer(private_key):
    return RequestSigner(private_key)


def _verify(public_key, signature: str, payload: str) -> None:
    public_key.verify(base64.b64decode(signature), payload.encode(), ec.ECDSA(hashes.SHA256()))


class TestRequestSigner:
    """Tests for request authentication."""

    def test_auth_payload_format(self):
        assert build_auth_payload("/api/v1/x", 1700000000000, '{"a": 1}') == '/api/v1/x|1700000000000|{"a": 1}'

    def test_signature_verifies(self, signer, private_key):
        signature = signer.sign_request("/api/v1/x", 123, "{}")

        _verify(private_key.public_key(), signature, "/api/v1/x|123|{}")

    def test_signature_bound_to_body(self, signer, private_key):
        signature = signer.sign_request("/api/v1/x", 123, "{}")

        with pytest.raises(InvalidSignature):
            _verify(private_key.public_key(), signature, '/api/v1/x|123|{"a": 1}')

    def test_from_pem(self, private_key):
        pem = private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

        signer = RequestSigner.from_pem(pem.decode())

        assert signer.public_key().public_numbers() == private_key.public_key().public_numbers()

    def test_from_file(self, private_key, tmp_path):
        path = tmp_path / "private.pem"
        path.write_bytes(
            private_key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )

        signer = RequestSigner.from_file(path)

        _verify(private_key.public_key(), signer.sign("payload"), "payload")

    def test_invalid_pem(self):
        with pytest.raises(RequestSigningError):
            RequestSigner.from_pem(b"not a key")

    def test_non_ec_key(self):
        pem = ed25519.Ed25519PrivateKey.generate().private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

        with pytest.raises(RequestSigningError):
            RequestSigner.from_pem(pem)


class TestSigningApiClient:
    """Tests for SigningApiClient."""

    @pytest.mark.asyncio
    async def test_create_and_wait_sends_signed_body(self):
        captured = {}

        def handler(request):
            captured["path"] = request.url.path
            captured["headers"] = request.headers
            captured["body"] = request.content.decode()
            return httpx.Response(201, json={"id": "tx-1", "state": "signed"})

        client = SigningApiClient(
            "https://api.fordefi.com/", "token-1", transport=httpx.MockTransport(handler)
        )

        body = '{"vault_id": "v"}'
        result = await client.create_and_wait(
            "/api/v1/transactions/create-and-wait", body, 123, "c2ln"
        )

        assert result["id"] == "tx-1"
        assert captured["path"] == "/api/v1/transactions/create-and-wait"
        assert captured["body"] == body
        assert captured["headers"]["authorization"] == "Bearer token-1"
        assert captured["headers"]["x-timestamp"] == "123"
        assert captured["headers"]["x-signature"] == "c2ln"
        assert captured["headers"]["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = SigningApiClient(
            "https://api.fordefi.com",
            "token-1",
            transport=httpx.MockTransport(lambda request: httpx.Response(401, text="unauthorized")),
        )

        with pytest.raises(SigningApiError) as exc_info:
            await client.create_and_wait("/api/v1/x", "{}", 1, "sig")

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "unauthorized"

    @pytest.mark.asyncio
    async def test_get_raw_transaction(self):
        def handler(request):
            assert request.url.path == "/api/v1/transactions/tx-1"
            return httpx.Response(200, json={"id": "tx-1", "raw_transaction": "AQID"})

        client = SigningApiClient("https://api.fordefi.com", "t", transport=httpx.MockTransport(handler))

        assert await client.get_raw_transaction("tx-1") == "AQID"

    @pytest.mark.asyncio
    async def test_raw_transaction_missing(self):
        client = SigningApiClient(
            "https://api.fordefi.com",
            "t",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"id": "tx-1", "state": "pending"})
            ),
        )

        with pytest.raises(SigningApiError):
            await client.get_raw_transaction("tx-1")


class TestRequestExecutor:
    """Tests for RequestExecutor."""

    def _executor(self, settings, signer, response):
        client = MagicMock()
        client.create_and_wait = AsyncMock(return_value=response)
        client.get_raw_transaction = AsyncMock(return_value="c2lnbmVk")
        relay = MagicMock()
        relay.send_transaction = AsyncMock(return_value="5relay")
        return RequestExecutor(settings, signer, client, relay)

    @pytest.mark.asyncio
    async def test_auto_push(self, settings, signer, private_key):
        executor = self._executor(settings, signer, {"id": "tx-1", "state": "signed"})
        payload = build_signing_request("AQID", vault_id="vault-test")

        result = await executor.submit(payload)

        assert result.transaction_id == "tx-1"
        assert result.push_mode is PushMode.AUTO
        assert result.relay_signature is None
        executor.relay.send_transaction.assert_not_awaited()

        path, body, timestamp, signature = executor.client.create_and_wait.await_args.args
        assert path == settings.api_path_endpoint
        assert json.loads(body) == payload.to_dict()
        _verify(private_key.public_key(), signature, f"{path}|{timestamp}|{body}")

    @pytest.mark.asyncio
    async def test_manual_push_relays_signed_transaction(self, settings, signer):
        executor = self._executor(settings, signer, {"id": "tx-2", "state": "signed"})
        payload = build_signing_request("AQID", vault_id="vault-test", use_alternate_relay=True)

        result = await executor.submit(payload)

        executor.client.get_raw_transaction.assert_awaited_once_with("tx-2")
        executor.relay.send_transaction.assert_awaited_once_with("c2lnbmVk")
        assert result.relay_signature == "5relay"

    @pytest.mark.asyncio
    async def test_manual_push_uses_raw_transaction_from_response(self, settings, signer):
        executor = self._executor(
            settings, signer, {"id": "tx-3", "state": "signed", "raw_transaction": "cmF3"}
        )
        payload = build_signing_request("AQID", vault_id="vault-test", use_alternate_relay=True)

        await executor.submit(payload)

        executor.client.get_raw_transaction.assert_not_awaited()
        executor.relay.send_transaction.assert_awaited_once_with("cmF3")

    @pytest.mark.asyncio
    async def test_refuses_without_api_token(self, signer):
        """Nothing is signed or sent when the API token is missing."""
        settings = Settings(_env_file=None, fordefi_api_token="", vault_id="", vault_address="")
        executor = self._executor(settings, signer, {"id": "tx-1"})

        with pytest.raises(MissingCredentials):
            await executor.submit(build_signing_request("AQID", vault_id="vault-test"))

        executor.client.create_and_wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signing_api_error_propagates(self, settings, signer):
        executor = self._executor(settings, signer, {})
        executor.client.create_and_wait.side_effect = SigningApiError("rejected", status_code=400)

        with pytest.raises(SigningApiError):
            await executor.submit(build_signing_request("AQID", vault_id="vault-test"))

    @pytest.mark.asyncio
    async def test_execute_builds_executor_from_settings(self, settings, private_key, tmp_path):
        key_path = tmp_path / "private.pem"
        key_path.write_bytes(
            private_key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        settings.private_key_path = str(key_path)

        with patch.object(
            SigningApiClient, "create_and_wait", AsyncMock(return_value={"id": "tx-4"})
        ):
            result = await execute(build_signing_request("AQID", vault_id="vault-test"), settings)

        assert result.transaction_id == "tx-4"
