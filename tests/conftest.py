"""Pytest configuration and fixtures."""

import os

import pytest
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message, MessageV0, to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountParams, TransferParams, create_account, transfer
from solders.transaction import Transaction, VersionedTransaction

# Set test environment
os.environ["FORDEFI_API_TOKEN"] = "test-token"
os.environ["VAULT_ID"] = "vault-test"

from solcustody.config import Settings

ZERO_BLOCKHASH = "11111111111111111111111111111111"


@pytest.fixture
def vault() -> Pubkey:
    """Vault address acting as fee payer."""
    return Keypair().pubkey()


@pytest.fixture
def recipient() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def blockhash() -> Hash:
    return Hash.from_string(ZERO_BLOCKHASH)


@pytest.fixture
def transfer_ix(vault: Pubkey, recipient: Pubkey) -> Instruction:
    """Transfer of 1000 lamports from the vault."""
    return transfer(TransferParams(from_pubkey=vault, to_pubkey=recipient, lamports=1000))


@pytest.fixture
def mint_keypair() -> Keypair:
    """Co-signer standing in for a freshly created position NFT mint."""
    return Keypair()


@pytest.fixture
def create_mint_ix(vault: Pubkey, mint_keypair: Keypair) -> Instruction:
    """Instruction requiring both the vault and the mint to sign."""
    return create_account(
        CreateAccountParams(
            from_pubkey=vault,
            to_pubkey=mint_keypair.pubkey(),
            lamports=1_461_600,
            space=82,
            owner=Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"),
        )
    )


@pytest.fixture
def cosigned_legacy_tx(vault, blockhash, create_mint_ix, mint_keypair) -> Transaction:
    """Legacy transaction already signed by the mint, vault slot empty."""
    message = Message.new_with_blockhash([create_mint_ix], vault, blockhash)
    mint_signature = mint_keypair.sign_message(bytes(message))
    return Transaction.populate(message, [Signature.default(), mint_signature])


@pytest.fixture
def cosigned_v0_tx(vault, blockhash, create_mint_ix, mint_keypair) -> VersionedTransaction:
    """Versioned transaction already signed by the mint, vault slot empty."""
    message = MessageV0.try_compile(vault, [create_mint_ix], [], blockhash)
    mint_signature = mint_keypair.sign_message(to_bytes_versioned(message))
    return VersionedTransaction.populate(message, [Signature.default(), mint_signature])


@pytest.fixture
def settings(vault: Pubkey) -> Settings:
    """Settings for a configured vault, independent of the environment."""
    return Settings(
        _env_file=None,
        fordefi_api_token="test-token",
        vault_id="vault-test",
        vault_address=str(vault),
        jito_tip_account=None,
    )
