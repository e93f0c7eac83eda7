"""
Unit tests for token state entities and TokenAmount.

Usage:
    pytest sequestre/tests/unit/domain/test_token_state.py
"""

from solders.pubkey import Pubkey

from sequestre.domain.entities.token_account import (
    MINT_SIZE,
    TOKEN_ACCOUNT_SIZE,
    Mint,
    TokenAccount,
)
from sequestre.domain.value_objects.token_amount import TokenAmount
from shared.tests import LaborantTest


class TestTokenState(LaborantTest):
    """Unit tests for packed holding accounts, mints and balances."""

    component_name = "sequestre"
    test_category = "unit"

    # ================================================================
    # TokenAccount
    # ================================================================

    def test_token_account_layout(self):
        """Test holding account packs mint, owner and amount first."""
        self.reporter.info("Testing holding account layout", context="Test")

        mint, owner = Pubkey.new_unique(), Pubkey.new_unique()
        data = TokenAccount(mint=mint, owner=owner, amount=1_000_000).to_bytes()

        assert TOKEN_ACCOUNT_SIZE == 165
        assert len(data) == 165
        assert data[0:32] == bytes(mint)
        assert data[32:64] == bytes(owner)
        assert int.from_bytes(data[64:72], "little") == 1_000_000
        # state byte after the delegate option
        assert data[108] == 1

    def test_token_account_decode(self):
        """Test holding account decodes with its close authority."""
        self.reporter.info("Testing holding account decode", context="Test")

        account = TokenAccount(
            mint=Pubkey.new_unique(),
            owner=Pubkey.new_unique(),
            amount=5,
            close_authority=Pubkey.new_unique(),
        )
        assert TokenAccount.from_bytes(account.to_bytes()) == account
        assert account.with_amount(9).amount == 9
        assert account.with_amount(9).close_authority == account.close_authority

    def test_token_account_rejects_negative_amount(self):
        """Test negative balances cannot exist."""
        self.reporter.info("Testing negative balance", context="Test")

        try:
            TokenAccount(mint=Pubkey.new_unique(), owner=Pubkey.new_unique(), amount=-1)
            assert False, "Should reject negative amount"
        except ValueError:
            pass

    def test_token_account_rejects_wrong_size(self):
        """Test decode of a mint-sized buffer fails."""
        self.reporter.info("Testing wrong size", context="Test")

        try:
            TokenAccount.from_bytes(bytes(MINT_SIZE))
            assert False, "Should reject size"
        except ValueError:
            pass

    # ================================================================
    # Mint
    # ================================================================

    def test_mint_layout(self):
        """Test mint packs authority, supply and decimals."""
        self.reporter.info("Testing mint layout", context="Test")

        authority = Pubkey.new_unique()
        mint = Mint(decimals=6, mint_authority=authority, supply=42)
        data = mint.to_bytes()

        assert MINT_SIZE == 82
        assert len(data) == 82
        assert int.from_bytes(data[0:4], "little") == 1
        assert data[4:36] == bytes(authority)
        assert int.from_bytes(data[36:44], "little") == 42
        assert data[44] == 6
        assert Mint.from_bytes(data) == mint
        assert mint.with_supply(50).supply == 50

    # ================================================================
    # TokenAmount
    # ================================================================

    def test_token_amount_six_decimals(self):
        """Test 1_000_000 raw at 6 decimals reads as "1000000" / 1.0."""
        self.reporter.info("Testing TokenAmount", context="Test")

        balance = TokenAmount.from_raw(1_000_000, 6)

        assert balance.amount == "1000000"
        assert balance.decimals == 6
        assert balance.ui_amount == 1.0
        assert balance.ui_amount_string == "1"
        assert balance.raw == 1_000_000

    def test_token_amount_fractional(self):
        """Test fractional ui strings."""
        self.reporter.info("Testing fractional amount", context="Test")

        assert TokenAmount.from_raw(1_500_000, 6).ui_amount_string == "1.5"
        assert TokenAmount.from_raw(1, 6).ui_amount_string == "0.000001"
        assert TokenAmount.from_raw(0, 6).ui_amount_string == "0"
        assert TokenAmount.from_raw(1_000_000_000, 6).ui_amount_string == "1000"

    def test_token_amount_to_dict(self):
        """Test RPC-style keys."""
        self.reporter.info("Testing to_dict", context="Test")

        data = TokenAmount.from_raw(2_000_000, 6).to_dict()
        assert data == {
            "amount": "2000000",
            "decimals": 6,
            "uiAmount": 2.0,
            "uiAmountString": "2",
        }

    def test_token_amount_rejects_negative(self):
        """Test negative raw amounts raise ValueError."""
        self.reporter.info("Testing negative amount", context="Test")

        try:
            TokenAmount.from_raw(-1, 6)
            assert False, "Should reject negative amount"
        except ValueError:
            pass


if __name__ == "__main__":
    TestTokenState.run_as_main()
