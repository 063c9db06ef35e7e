"""Tests for relay tip instructions."""

import pytest
from solders.keypair import Keypair
from solders.system_program import decode_transfer

from solcustody.errors import InvalidInstructionSet
from solcustody.transaction import (
    PrebuiltTransaction,
    RawInstructions,
    TipConfig,
    TipPlacement,
    build_tip_instruction,
    merge_tip,
    with_tip,
)


@pytest.fixture
def tip_account():
    return Keypair().pubkey()


class TestTipInstruction:
    """Tests for build_tip_instruction."""

    def test_transfer_to_tip_account(self, vault, tip_account):
        instruction = build_tip_instruction(vault, tip_account, 1000)

        params = decode_transfer(instruction)
        assert params["from_pubkey"] == vault
        assert params["to_pubkey"] == tip_account
        assert params["lamports"] == 1000

    @pytest.mark.parametrize("lamports", [0, -5])
    def test_non_positive_tip_rejected(self, vault, tip_account, lamports):
        with pytest.raises(InvalidInstructionSet):
            build_tip_instruction(vault, tip_account, lamports)


class TestMergeTip:
    """Tests for tip placement."""

    def test_prepend_by_default(self, vault, tip_account, transfer_ix, create_mint_ix):
        tip = build_tip_instruction(vault, tip_account, 1000)
        instructions = [transfer_ix, create_mint_ix]

        merged = merge_tip(instructions, tip)

        assert merged == (tip, transfer_ix, create_mint_ix)
        assert instructions == [transfer_ix, create_mint_ix]

    def test_append(self, vault, tip_account, transfer_ix, create_mint_ix):
        tip = build_tip_instruction(vault, tip_account, 1000)

        merged = merge_tip([transfer_ix, create_mint_ix], tip, "append")

        assert merged == (transfer_ix, create_mint_ix, tip)

    def test_unknown_placement(self, vault, tip_account, transfer_ix):
        tip = build_tip_instruction(vault, tip_account, 1000)

        with pytest.raises(ValueError):
            merge_tip([transfer_ix], tip, "middle")


class TestWithTip:
    """Tests for adding tips to instruction sources."""

    def test_raw_instructions(self, vault, tip_account, transfer_ix):
        source = RawInstructions([transfer_ix])

        tipped = with_tip(source, vault, TipConfig(tip_account, 5000), TipPlacement.APPEND)

        assert len(tipped) == 2
        assert tipped.instructions[0] == transfer_ix
        assert decode_transfer(tipped.instructions[1])["lamports"] == 5000
        assert len(source) == 1

    def test_prebuilt_transaction_rejected(self, vault, tip_account, cosigned_legacy_tx):
        with pytest.raises(InvalidInstructionSet):
            with_tip(PrebuiltTransaction(cosigned_legacy_tx), vault, TipConfig(tip_account, 1000))
