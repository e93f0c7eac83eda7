"""
Cancel Escrow use case.

Returns the vault contents to the offering party and closes the escrow.
"""

from sequestre.application.dto.escrow_accounts import (
    CancelAccounts,
    SettlementResult,
)
from sequestre.application.use_cases.base import EscrowHandler
from sequestre.domain.exceptions import SequestreException, UnauthorizedError
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import derive_vault_address


class CancelEscrow(EscrowHandler):
    """
    Cancel an open escrow.

    Business rules:
    - Only the stored offering party may cancel, and must sign
    - The full vault balance goes back to the offering party
    - Vault and record deposits are refunded to the offering party
    """

    def execute(
        self, ctx: InvokeContext, accounts: CancelAccounts
    ) -> SettlementResult:
        """
        Execute the cancellation.

        Args:
            ctx: Invocation context (escrow program, verified signers)
            accounts: Cancel account set

        Returns:
            SettlementResult describing the refund

        Raises:
            AlreadyClosedError: Record is not open
            UnauthorizedError: Signer is not the stored offering party
            AccountMismatchError: Supplied account differs from the derived one
            CustodyViolationError: Vault balance is below amount_offered
        """
        try:
            return self._cancel(ctx, accounts)
        except SequestreException as e:
            self.reporter.warning(
                f"Cancel rejected ({e.code}): {e.message}", context=self.context
            )
            raise

    def _cancel(
        self, ctx: InvokeContext, accounts: CancelAccounts
    ) -> SettlementResult:
        # 1. Open record
        record = self.escrow_records.get(accounts.escrow)

        # 2. Authorization
        ctx.require_signer(accounts.offering_party, "offering party")
        if accounts.offering_party != record.offering_party:
            raise UnauthorizedError(
                f"{accounts.offering_party} is not the offering party of "
                f"escrow {accounts.escrow}"
            )

        # 3. Addresses
        self.expect_record_address(record, accounts.escrow)
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
        self.expect_programs(
            accounts.associated_token_program,
            accounts.token_program,
            accounts.system_program,
        )

        # 4. Custody
        refund = self.expect_custody(accounts.vault, record, allow_surplus=True)
        offered_mint = self.load_mint("asset_offered", record.asset_offered)

        # 5. Refund
        self.token_service.create_associated_token_account(
            ctx,
            record.offering_party,
            record.offering_party,
            record.asset_offered,
            idempotent=True,
        )
        escrow_ctx = ctx.with_signer_seeds(record.signer_seeds())
        self.token_service.transfer_checked(
            escrow_ctx,
            source=accounts.vault,
            mint=record.asset_offered,
            destination=accounts.offering_party_offered_account,
            authority=accounts.escrow,
            amount=refund,
            decimals=offered_mint.decimals,
        )

        # 6. Close vault and record
        refunded = self.token_service.close_account(
            escrow_ctx, accounts.vault, record.offering_party, accounts.escrow
        )
        refunded += self.escrow_records.close(
            ctx, accounts.escrow, record.offering_party
        )

        self.reporter.info(
            f"Escrow {accounts.escrow} cancelled: {refund} returned to "
            f"{record.offering_party}",
            context=self.context,
        )
        return SettlementResult(
            escrow=accounts.escrow,
            amount_released=refund,
            released_to=record.offering_party,
            amount_paid=0,
            lamports_refunded=refunded,
        )
