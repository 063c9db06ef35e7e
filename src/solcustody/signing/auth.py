"""Request authentication for the signing API.

Every request body is signed by the API signer key before submission:
    payload   = "{path}|{timestamp}|{body}"
    signature = base64(DER(ECDSA-P256(SHA-256(payload))))

The signing service verifies it against the registered public key, so the
body sent over the wire must be byte-identical to the one that was signed.
"""

import base64
import logging
import time
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from solcustody.errors import RequestSigningError

logger = logging.getLogger(__name__)


def build_auth_payload(path: str, timestamp: int, body: str) -> str:
    """Build the string that is signed for a request."""
    return f"{path}|{timestamp}|{body}"


def current_timestamp_ms() -> int:
    """Milliseconds since the epoch, as the signing API expects."""
    return int(time.time() * 1000)


class RequestSigner:
    """Signs API request payloads with an EC private key."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        self._private_key = private_key

    @classmethod
    def from_pem(cls, pem: Union[str, bytes], password: Optional[bytes] = None) -> "RequestSigner":
        """Load the signer from PEM text.

        Raises:
            RequestSigningError: If the key is unreadable or not an EC key
        """
        if isinstance(pem, str):
            pem = pem.encode()
        try:
            key = serialization.load_pem_private_key(pem, password=password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise RequestSigningError(f"Could not load API signer key: {e}") from e
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise RequestSigningError(f"API signer key must be an EC key, got {type(key).__name__}")
        return cls(key)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RequestSigner":
        """Load the signer from a PEM file."""
        logger.debug(f"Loading API signer key from {path}")
        return cls.from_pem(Path(path).read_bytes())

    def sign(self, payload: str) -> str:
        """Sign a payload and return the base64 DER signature."""
        signature = self._private_key.sign(payload.encode(), ec.ECDSA(hashes.SHA256()))
        return base64.b64encode(signature).decode()

    def sign_request(self, path: str, timestamp: int, body: str) -> str:
        """Sign the `path|timestamp|body` payload of a request."""
        return self.sign(build_auth_payload(path, timestamp, body))

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._private_key.public_key()
