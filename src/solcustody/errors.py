"""Exceptions raised while building and submitting custodial signing requests.

Nothing in this package retries or recovers locally: every error aborts the
current operation and reaches the caller unchanged.
"""

from typing import Optional


class SolcustodyError(Exception):
    """Base exception for the package."""
    pass


class TransactionAssemblyError(SolcustodyError):
    """Exception raised when a transaction message cannot be assembled."""
    pass


class InvalidInstructionSet(TransactionAssemblyError):
    """Exception raised when the instruction list is empty or malformed,
    or when the fee payer is missing."""
    pass


class FormatMismatch(TransactionAssemblyError):
    """Exception raised when a legacy path is applied to a versioned
    message or vice versa."""
    pass


class NoActivePosition(SolcustodyError):
    """Exception raised when the vault holds no position to operate on."""
    pass


class UpstreamFetchFailure(SolcustodyError):
    """Exception raised when a blockhash, fee, pool or quote fetch fails."""
    pass


class SigningApiError(UpstreamFetchFailure):
    """Exception raised when the custodial signing API rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RelayError(UpstreamFetchFailure):
    """Exception raised when the relay refuses a signed transaction."""
    pass


class RequestSigningError(SolcustodyError):
    """Exception raised when the API signer key cannot be used."""
    pass


class MissingCredentials(SolcustodyError):
    """Exception raised when the signing API token or vault is not configured."""
    pass
