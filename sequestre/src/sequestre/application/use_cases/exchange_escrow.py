"""
Exchange Escrow use case.

Settles a trade: the counterparty pays the requested amount to the
offering party and receives the vault contents; vault and record are
closed with their deposits returned to the offering party.
"""

from sequestre.application.dto.escrow_accounts import (
    EscrowAccounts,
    SettlementResult,
)
from sequestre.application.use_cases.base import EscrowHandler
from sequestre.domain.exceptions import SequestreException
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import derive_vault_address


class ExchangeEscrow(EscrowHandler):
    """
    Settle an open escrow.

    Business rules:
    - Counterparty must sign
    - Record must be open; its stored terms must match the supplied accounts
    - Vault must hold exactly the escrowed amount
    - Holding accounts that receive funds are created if missing,
      paid for by the counterparty
    - Exactly one of exchange and cancel can succeed per record
    """

    def execute(
        self, ctx: InvokeContext, accounts: EscrowAccounts
    ) -> SettlementResult:
        """
        Execute the exchange.

        Args:
            ctx: Invocation context (escrow program, verified signers)
            accounts: Exchange account set

        Returns:
            SettlementResult describing what moved

        Raises:
            MissingSignerError: Counterparty did not sign
            AlreadyClosedError: Record is not open
            AccountMismatchError: Supplied account differs from the stored one
            CustodyViolationError: Vault balance differs from amount_offered
            InsufficientFundsError: Counterparty cannot pay amount_requested
        """
        try:
            return self._exchange(ctx, accounts)
        except SequestreException as e:
            self.reporter.warning(
                f"Exchange rejected ({e.code}): {e.message}", context=self.context
            )
            raise

    def _exchange(
        self, ctx: InvokeContext, accounts: EscrowAccounts
    ) -> SettlementResult:
        # 1. Authorization
        ctx.require_signer(accounts.counterparty, "counterparty")

        # 2. Open record
        record = self.escrow_records.get(accounts.escrow)

        # 3. Stored terms
        self.expect_address(
            "offering party", record.offering_party, accounts.offering_party
        )
        self.expect_address(
            "asset_offered", record.asset_offered, accounts.asset_offered
        )
        self.expect_address(
            "asset_requested", record.asset_requested, accounts.asset_requested
        )
        self.expect_record_address(record, accounts.escrow)

        # 4. Addresses
        self.expect_address(
            "vault",
            derive_vault_address(accounts.escrow, record.asset_offered),
            accounts.vault,
        )
        self.expect_holding(
            "offering party offered account",
            record.offering_party,
            record.asset_offered,
            accounts.offering_party_offered_account,
        )
        self.expect_holding(
            "offering party requested account",
            record.offering_party,
            record.asset_requested,
            accounts.offering_party_requested_account,
        )
        self.expect_holding(
            "counterparty offered account",
            accounts.counterparty,
            record.asset_offered,
            accounts.counterparty_offered_account,
        )
        self.expect_holding(
            "counterparty requested account",
            accounts.counterparty,
            record.asset_requested,
            accounts.counterparty_requested_account,
        )
        self.expect_programs(
            accounts.associated_token_program,
            accounts.token_program,
            accounts.system_program,
        )

        # 5. Custody and payment
        released = self.expect_custody(accounts.vault, record)
        self.require_balance(
            accounts.counterparty_requested_account, record.amount_requested
        )

        offered_mint = self.load_mint("asset_offered", record.asset_offered)
        requested_mint = self.load_mint("asset_requested", record.asset_requested)

        # 6. Receiving accounts
        self.token_service.create_associated_token_account(
            ctx,
            accounts.counterparty,
            accounts.counterparty,
            record.asset_offered,
            idempotent=True,
        )
        self.token_service.create_associated_token_account(
            ctx,
            accounts.counterparty,
            record.offering_party,
            record.asset_requested,
            idempotent=True,
        )

        # 7. Counterparty pays
        self.token_service.transfer_checked(
            ctx,
            source=accounts.counterparty_requested_account,
            mint=record.asset_requested,
            destination=accounts.offering_party_requested_account,
            authority=accounts.counterparty,
            amount=record.amount_requested,
            decimals=requested_mint.decimals,
        )

        # 8. Vault releases, signed by the record address
        escrow_ctx = ctx.with_signer_seeds(record.signer_seeds())
        self.token_service.transfer_checked(
            escrow_ctx,
            source=accounts.vault,
            mint=record.asset_offered,
            destination=accounts.counterparty_offered_account,
            authority=accounts.escrow,
            amount=released,
            decimals=offered_mint.decimals,
        )

        # 9. Close vault and record
        refunded = self.token_service.close_account(
            escrow_ctx, accounts.vault, record.offering_party, accounts.escrow
        )
        refunded += self.escrow_records.close(
            ctx, accounts.escrow, record.offering_party
        )

        self.reporter.info(
            f"Escrow {accounts.escrow} exchanged: {released} released to "
            f"{accounts.counterparty}, {record.amount_requested} paid to "
            f"{record.offering_party}",
            context=self.context,
        )
        return SettlementResult(
            escrow=accounts.escrow,
            amount_released=released,
            released_to=accounts.counterparty,
            amount_paid=record.amount_requested,
            lamports_refunded=refunded,
        )
