"""
Unit tests for CancelEscrow use case.

Tests refunds, authorization and exclusivity with exchange.

Usage:
    pytest sequestre/tests/unit/application/test_cancel_escrow.py
"""

from dataclasses import replace

from sequestre.domain.entities.escrow_record import ESCROW_RECORD_SIZE
from sequestre.domain.entities.token_account import TOKEN_ACCOUNT_SIZE
from sequestre.domain.exceptions import (
    AccountMismatchError,
    AlreadyClosedError,
    CustodyViolationError,
    MissingSignerError,
    UnauthorizedError,
)
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import TOKEN_PROGRAM_ID
from sequestre.infrastructure.ledger.rent import Rent
from shared.tests import LaborantTest
from tests.helpers.escrow_world import INITIAL_SUPPLY, TRADE_AMOUNT, EscrowWorld


class TestCancelEscrow(LaborantTest):
    """Unit tests for CancelEscrow use case."""

    component_name = "sequestre"
    test_category = "unit"

    def setup_test(self):
        self.world = EscrowWorld()
        self.accounts = self.world.accounts

    # ================================================================
    # Helper Methods
    # ================================================================

    def _expect_rejection(self, error_type, **kwargs):
        before = self.world.balances()
        try:
            self.world.cancel(**kwargs)
            assert False, f"Should raise {error_type.__name__}"
        except error_type as e:
            assert self.world.balances() == before
            return e

    # ================================================================
    # Refund
    # ================================================================

    def test_cancel_returns_offer(self):
        """Test the offering party gets the whole vault back."""
        self.reporter.info("Testing cancel", context="Test")

        self.world.initialize()
        self.world.cancel()

        balances = self.world.balances()
        assert balances["offering_party_a"] == INITIAL_SUPPLY
        assert balances["vault"] == 0
        assert balances["counterparty_b"] == INITIAL_SUPPLY
        assert balances["counterparty_a"] == 0

    def test_cancel_closes_record_and_vault(self):
        """Test record and vault are gone and deposits refunded."""
        self.reporter.info("Testing closure", context="Test")

        self.world.initialize()
        before = self.world.lamports(self.world.offering_party)
        self.world.cancel()

        rent = Rent()
        refund = rent.minimum_balance(ESCROW_RECORD_SIZE) + rent.minimum_balance(
            TOKEN_ACCOUNT_SIZE
        )
        fee = self.world.ledger.lamports_per_signature

        assert self.world.ledger.get_account(self.accounts.escrow) is None
        assert self.world.ledger.get_account(self.accounts.vault) is None
        assert self.world.lamports(self.world.offering_party) == before + refund - fee

    def test_cancel_recreates_closed_holding_account(self):
        """Test refund works after the offering party closed their account."""
        self.reporter.info("Testing recreated refund account", context="Test")

        world = self.world
        world.initialize(amount_offered=INITIAL_SUPPLY)

        holding = self.accounts.offering_party_offered_account
        owner = world.offering_party.pubkey()
        with world.ledger.atomic():
            world.tokens.close_account(
                InvokeContext(program_id=TOKEN_PROGRAM_ID, signers=frozenset({owner})),
                holding,
                owner,
                owner,
            )
        assert world.tokens.get_token_account(holding) is None

        world.cancel()

        assert world.token_balance(holding) == INITIAL_SUPPLY

    # ================================================================
    # Rejections
    # ================================================================

    def test_counterparty_cannot_cancel(self):
        """Test only the stored offering party may cancel."""
        self.reporter.info("Testing unauthorized cancel", context="Test")

        self.world.initialize()
        accounts = replace(
            self.accounts.for_cancel(),
            offering_party=self.world.counterparty.pubkey(),
        )

        e = self._expect_rejection(
            UnauthorizedError, accounts=accounts, signers=[self.world.counterparty]
        )
        assert e.code == "UNAUTHORIZED"
        assert not isinstance(e, MissingSignerError)
        assert self.world.token_balance(self.accounts.vault) == TRADE_AMOUNT

    def test_unsigned_cancel_rejected(self):
        """Test the offering party's signature is required."""
        self.reporter.info("Testing unsigned cancel", context="Test")

        self.world.initialize()

        e = self._expect_rejection(
            MissingSignerError, signers=[self.world.counterparty]
        )
        assert isinstance(e, UnauthorizedError)

    def test_handler_requires_signer(self):
        """Test handler rejects a context without any signer."""
        self.reporter.info("Testing handler signer check", context="Test")

        self.world.initialize()
        ctx = InvokeContext(program_id=self.world.program_id)

        try:
            with self.world.ledger.atomic():
                self.world.container.cancel_escrow.execute(
                    ctx, self.accounts.for_cancel()
                )
            assert False, "Should raise MissingSignerError"
        except MissingSignerError:
            pass

    def test_cancel_after_exchange_rejected(self):
        """Test a settled escrow cannot be cancelled."""
        self.reporter.info("Testing cancel after exchange", context="Test")

        self.world.initialize()
        self.world.exchange()

        self._expect_rejection(AlreadyClosedError)

    def test_exchange_after_cancel_rejected(self):
        """Test a cancelled escrow cannot be exchanged."""
        self.reporter.info("Testing exchange after cancel", context="Test")

        self.world.initialize()
        self.world.cancel()

        before = self.world.balances()
        try:
            self.world.exchange()
            assert False, "Should raise AlreadyClosedError"
        except AlreadyClosedError:
            pass
        assert self.world.balances() == before

    def test_wrong_refund_account_rejected(self):
        """Test refunds go only to the offering party's own account."""
        self.reporter.info("Testing refund account", context="Test")

        self.world.initialize()
        accounts = replace(
            self.accounts.for_cancel(),
            offering_party_offered_account=self.accounts.counterparty_offered_account,
        )

        e = self._expect_rejection(AccountMismatchError, accounts=accounts)
        assert e.account_name == "offering party offered account"

    def test_custody_violation_rejected(self):
        """Test cancel re-checks the vault balance."""
        self.reporter.info("Testing custody re-check", context="Test")

        self.world.initialize()
        ledger = self.world.ledger
        account = ledger.get_account(self.accounts.vault)
        holding = self.world.tokens.get_token_account(self.accounts.vault)
        account.data = holding.with_amount(TRADE_AMOUNT - 1).to_bytes()
        ledger.put_account(self.accounts.vault, account)

        e = self._expect_rejection(CustodyViolationError)
        assert e.code == "CUSTODY_VIOLATION"

    def test_cancel_refunds_vault_surplus(self):
        """Test tokens minted into the vault go back with the offer."""
        self.reporter.info("Testing vault surplus refund", context="Test")

        world = self.world
        world.initialize()
        vault = world.faucet.mint_to_owner(
            world.authority,
            world.asset_a,
            world.authority,
            self.accounts.escrow,
            1,
        )
        assert vault == self.accounts.vault

        world.cancel()

        assert world.token_balance(self.accounts.offering_party_offered_account) == (
            INITIAL_SUPPLY + 1
        )
        assert world.ledger.get_account_info(self.accounts.vault) is None
        assert world.records.find(self.accounts.escrow) is None


if __name__ == "__main__":
    TestCancelEscrow.run_as_main()
