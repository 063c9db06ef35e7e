"""Application configuration using pydantic-settings.

Holds the custodial vault credentials, the Solana/Raydium endpoints and the
relay settings shared by every operation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Custodial signing API
    # ======================
    fordefi_api_token: str = Field(default="", description="Bearer token for the signing API")
    fordefi_api_base: str = Field(
        default="https://api.fordefi.com", description="Signing API base URL"
    )
    api_path_endpoint: str = Field(
        default="/api/v1/transactions/create-and-wait",
        description="Path used to create a transaction and wait for its signature",
    )
    private_key_path: str = Field(
        default="./secret/private.pem",
        description="PEM private key used to authenticate API requests",
    )
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # ======================
    # Vault
    # ======================
    vault_id: str = Field(default="", description="Custodial vault identifier")
    vault_address: str = Field(default="", description="Vault Solana address (fee payer)")
    chain: str = Field(default="solana_mainnet", description="Chain identifier sent to the signer")

    # ======================
    # Solana / Raydium
    # ======================
    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com", description="Solana RPC URL"
    )
    blockhash_commitment: str = Field(default="finalized", description="Blockhash commitment")
    raydium_swap_host: str = Field(
        default="https://transaction-v1.raydium.io", description="Raydium Trade API host"
    )
    raydium_api_host: str = Field(
        default="https://api-v3.raydium.io", description="Raydium API v3 host"
    )
    priority_fee_tier: str = Field(default="h", description="Priority fee tier: vh, h or m")

    # ======================
    # Jito relay
    # ======================
    jito_block_engine_url: str = Field(
        default="https://mainnet.block-engine.jito.wtf", description="Jito block engine URL"
    )
    jito_tip_account: Optional[str] = Field(
        default=None, description="Fixed tip account (fetched from the block engine if unset)"
    )
    tip_placement: str = Field(default="prepend", description="Tip position: prepend or append")

    @field_validator("priority_fee_tier")
    @classmethod
    def _check_fee_tier(cls, value: str) -> str:
        value = value.lower()
        if value not in ("vh", "h", "m"):
            raise ValueError("priority_fee_tier must be one of: vh, h, m")
        return value

    @field_validator("tip_placement")
    @classmethod
    def _check_tip_placement(cls, value: str) -> str:
        value = value.lower()
        if value not in ("prepend", "append"):
            raise ValueError("tip_placement must be prepend or append")
        return value

    @property
    def has_credentials(self) -> bool:
        """Check if the signing API can be called."""
        return bool(self.fordefi_api_token and self.vault_id and self.vault_address)

    def read_private_key(self) -> bytes:
        """Read the PEM private key used for request authentication."""
        return Path(self.private_key_path).read_bytes()

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "fordefi_api_base": self.fordefi_api_base,
            "api_path_endpoint": self.api_path_endpoint,
            "fordefi_api_token": "***" if self.fordefi_api_token else "(not set)",
            "private_key_path": self.private_key_path,
            "vault_id": self.vault_id or "(not set)",
            "vault_address": self.vault_address or "(not set)",
            "chain": self.chain,
            "solana": {
                "rpc": self.solana_rpc_url,
                "commitment": self.blockhash_commitment,
            },
            "raydium": {
                "swap_host": self.raydium_swap_host,
                "api_host": self.raydium_api_host,
                "priority_fee_tier": self.priority_fee_tier,
            },
            "jito": {
                "block_engine": self.jito_block_engine_url,
                "tip_account": self.jito_tip_account or "(dynamic)",
                "tip_placement": self.tip_placement,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
