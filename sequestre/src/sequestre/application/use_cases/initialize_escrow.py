"""
Initialize Escrow use case.

Opens a trade: allocates the escrow record at its derived address,
allocates the custody vault owned by that address, and moves the offered
amount into the vault.
"""

from sequestre.application.dto.escrow_accounts import EscrowAccounts
from sequestre.application.use_cases.base import EscrowHandler
from sequestre.domain.entities.escrow_record import EscrowRecord
from sequestre.domain.exceptions import (
    AlreadyExistsError,
    CustodyViolationError,
    SequestreException,
    ValidationError,
)
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import (
    U64_MAX,
    derive_escrow_address,
    derive_vault_address,
)


class InitializeEscrow(EscrowHandler):
    """
    Open an escrow.

    Business rules:
    - Amounts are in 1..2**64-1 and the two assets differ
    - Offering party must sign and fund the vault
    - Record and vault addresses must be unoccupied (seeds are never reused)
    - Record and vault storage deposits are paid by the offering party
    - After success the vault holds exactly ``amount_offered``
    """

    def execute(
        self,
        ctx: InvokeContext,
        accounts: EscrowAccounts,
        seed: int,
        amount_offered: int,
        amount_requested: int,
    ) -> EscrowRecord:
        """
        Execute escrow initialization.

        Args:
            ctx: Invocation context (escrow program, verified signers)
            accounts: Initialize account set
            seed: Caller-chosen u64 nonce
            amount_offered: Quantity moved into custody
            amount_requested: Quantity the counterparty must pay

        Returns:
            The stored EscrowRecord

        Raises:
            ValidationError: Malformed seed, zero amount or same asset twice
            MissingSignerError: Offering party did not sign
            AccountMismatchError: Supplied account differs from the derived one
            AlreadyExistsError: Record or vault address already occupied
            InsufficientFundsError: Offering party cannot fund the vault
        """
        try:
            return self._initialize(
                ctx, accounts, seed, amount_offered, amount_requested
            )
        except SequestreException as e:
            self.reporter.warning(
                f"Initialize rejected ({e.code}): {e.message}", context=self.context
            )
            raise

    def _initialize(
        self,
        ctx: InvokeContext,
        accounts: EscrowAccounts,
        seed: int,
        amount_offered: int,
        amount_requested: int,
    ) -> EscrowRecord:
        # 1. Arguments
        for name, value in (
            ("amount_offered", amount_offered),
            ("amount_requested", amount_requested),
        ):
            if not 0 < value <= U64_MAX:
                raise ValidationError(name, f"must be in 1..{U64_MAX}, got {value}")
        pda = derive_escrow_address(seed, self.program_id)

        # 2. Distinct assets
        if accounts.asset_offered == accounts.asset_requested:
            raise ValidationError(
                "asset_requested", "must differ from asset_offered"
            )

        # 3. Authorization
        ctx.require_signer(accounts.offering_party, "offering party")

        # 4. Addresses
        self.expect_address("escrow", pda.address, accounts.escrow)
        self.expect_address(
            "vault",
            derive_vault_address(pda.address, accounts.asset_offered),
            accounts.vault,
        )
        self.expect_holding(
            "offering party offered account",
            accounts.offering_party,
            accounts.asset_offered,
            accounts.offering_party_offered_account,
        )
        self.expect_holding(
            "offering party requested account",
            accounts.offering_party,
            accounts.asset_requested,
            accounts.offering_party_requested_account,
        )
        self.expect_holding(
            "counterparty offered account",
            accounts.counterparty,
            accounts.asset_offered,
            accounts.counterparty_offered_account,
        )
        self.expect_holding(
            "counterparty requested account",
            accounts.counterparty,
            accounts.asset_requested,
            accounts.counterparty_requested_account,
        )
        self.expect_programs(
            accounts.associated_token_program,
            accounts.token_program,
            accounts.system_program,
        )

        # 5. Mints
        offered_mint = self.load_mint("asset_offered", accounts.asset_offered)
        self.load_mint("asset_requested", accounts.asset_requested)

        # 6. Fresh addresses
        if self.account_service.get_account(accounts.escrow) is not None:
            raise AlreadyExistsError("Escrow record", str(accounts.escrow))
        if self.account_service.get_account(accounts.vault) is not None:
            raise AlreadyExistsError("Vault", str(accounts.vault))

        # 7. Funding
        self.require_balance(accounts.offering_party_offered_account, amount_offered)

        record = EscrowRecord(
            seed=seed,
            offering_party=accounts.offering_party,
            asset_offered=accounts.asset_offered,
            asset_requested=accounts.asset_requested,
            amount_offered=amount_offered,
            amount_requested=amount_requested,
            address_proof=pda.bump,
        )

        # 8. Allocate record and vault
        record_ctx = ctx.with_signer_seeds(pda.signer_seeds())
        self.escrow_records.create(
            record_ctx, accounts.offering_party, accounts.escrow, record
        )
        self.token_service.create_associated_token_account(
            ctx, accounts.offering_party, accounts.escrow, accounts.asset_offered
        )

        # 9. Move the offered amount into custody
        self.token_service.transfer_checked(
            ctx,
            source=accounts.offering_party_offered_account,
            mint=accounts.asset_offered,
            destination=accounts.vault,
            authority=accounts.offering_party,
            amount=amount_offered,
            decimals=offered_mint.decimals,
        )

        vault_balance = self.holding_balance(accounts.vault)
        if vault_balance != amount_offered:
            raise CustodyViolationError(
                str(accounts.vault), amount_offered, vault_balance
            )

        self.reporter.info(
            f"Escrow {accounts.escrow} opened: {amount_offered} of "
            f"{accounts.asset_offered} for {amount_requested} of "
            f"{accounts.asset_requested}",
            context=self.context,
        )
        return record
