"""
Unit tests for escrow address derivation.

Tests record and vault derivation, seed encoding and bump proofs.

Usage:
    pytest sequestre/tests/unit/domain/test_program_address.py
"""

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from sequestre.domain.exceptions import ValidationError
from sequestre.domain.value_objects.program_address import (
    STATE_SEED,
    U64_MAX,
    ProgramAddress,
    derive_escrow_address,
    derive_holding_address,
    derive_vault_address,
    seed_to_bytes,
)
from shared.tests import LaborantTest

PROGRAM_ID = Pubkey.from_string("Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS")


class TestProgramAddress(LaborantTest):
    """Unit tests for program-derived escrow addresses."""

    component_name = "sequestre"
    test_category = "unit"

    # ================================================================
    # Seed encoding
    # ================================================================

    def test_seed_is_little_endian_u64(self):
        """Test seed encodes as 8 little-endian bytes."""
        self.reporter.info("Testing seed encoding", context="Test")

        assert seed_to_bytes(0) == bytes(8)
        assert seed_to_bytes(1) == b"\x01" + bytes(7)
        assert seed_to_bytes(U64_MAX) == b"\xff" * 8

    def test_seed_out_of_range_rejected(self):
        """Test negative and oversized seeds raise ValidationError."""
        self.reporter.info("Testing seed range", context="Test")

        for bad in (-1, U64_MAX + 1):
            try:
                seed_to_bytes(bad)
                assert False, f"Should reject seed {bad}"
            except ValidationError as e:
                assert e.code == "VALIDATION_ERROR"
                assert e.field == "seed"

    def test_seed_must_be_integer(self):
        """Test non-integer seeds are rejected."""
        self.reporter.info("Testing seed type", context="Test")

        for bad in ("42", 4.2, True):
            try:
                seed_to_bytes(bad)
                assert False, f"Should reject seed {bad!r}"
            except ValidationError:
                pass

    # ================================================================
    # Record address
    # ================================================================

    def test_record_address_matches_find_program_address(self):
        """Test record address is find_program_address([b"state", seed])."""
        self.reporter.info("Testing record derivation", context="Test")

        pda = derive_escrow_address(42, PROGRAM_ID)
        expected, bump = Pubkey.find_program_address(
            [b"state", (42).to_bytes(8, "little")], PROGRAM_ID
        )

        assert pda.address == expected
        assert pda.bump == bump
        assert pda.seeds == (STATE_SEED, seed_to_bytes(42))

    def test_record_address_is_deterministic(self):
        """Test derivation is a pure function of seed and program id."""
        self.reporter.info("Testing determinism", context="Test")

        assert derive_escrow_address(7, PROGRAM_ID) == derive_escrow_address(
            7, PROGRAM_ID
        )
        assert (
            derive_escrow_address(7, PROGRAM_ID).address
            != derive_escrow_address(8, PROGRAM_ID).address
        )

        other_program = Pubkey.new_unique()
        assert (
            derive_escrow_address(7, PROGRAM_ID).address
            != derive_escrow_address(7, other_program).address
        )

    def test_record_address_is_off_curve(self):
        """Test no private key can exist for a record address."""
        self.reporter.info("Testing off-curve address", context="Test")

        pda = derive_escrow_address(U64_MAX, PROGRAM_ID)
        assert not pda.address.is_on_curve()

    def test_bump_proof_verifies(self):
        """Test signer seeds re-derive the address under the same program."""
        self.reporter.info("Testing bump proof", context="Test")

        pda = derive_escrow_address(1234, PROGRAM_ID)

        assert pda.signer_seeds()[-1] == bytes([pda.bump])
        assert pda.verify(PROGRAM_ID)
        assert str(pda) == str(pda.address)

    def test_find_accepts_arbitrary_seeds(self):
        """Test ProgramAddress.find with custom seeds."""
        self.reporter.info("Testing custom seeds", context="Test")

        pda = ProgramAddress.find([b"custom", b"\x01"], PROGRAM_ID)
        assert pda.verify(PROGRAM_ID)
        assert len(pda.signer_seeds()) == 3

    # ================================================================
    # Vault and holding addresses
    # ================================================================

    def test_vault_is_associated_account_of_record(self):
        """Test vault = ATA(owner=record, mint=asset_offered)."""
        self.reporter.info("Testing vault derivation", context="Test")

        mint = Pubkey.new_unique()
        record = derive_escrow_address(42, PROGRAM_ID).address

        assert derive_vault_address(record, mint) == get_associated_token_address(
            record, mint
        )

    def test_holding_address_depends_on_owner_and_mint(self):
        """Test holding accounts differ per owner and per mint."""
        self.reporter.info("Testing holding derivation", context="Test")

        owner_a, owner_b = Pubkey.new_unique(), Pubkey.new_unique()
        mint_a, mint_b = Pubkey.new_unique(), Pubkey.new_unique()

        addresses = {
            derive_holding_address(owner_a, mint_a),
            derive_holding_address(owner_a, mint_b),
            derive_holding_address(owner_b, mint_a),
            derive_holding_address(owner_b, mint_b),
        }
        assert len(addresses) == 4


if __name__ == "__main__":
    TestProgramAddress.run_as_main()
