"""
Token program adapter.

Implements ITokenService against the in-memory ledger with SPL Token
semantics: packed mint/holding-account data, associated holding
accounts, checked transfers and close-with-refund.
"""

from typing import Optional

from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.domain.entities.token_account import (
    MINT_SIZE,
    TOKEN_ACCOUNT_SIZE,
    Mint,
    TokenAccount,
)
from sequestre.domain.exceptions import (
    AccountInUseError,
    AccountMismatchError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAccountDataError,
    ValidationError,
)
from sequestre.domain.services.i_token_service import ITokenService
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    U64_MAX,
    ProgramAddress,
)
from sequestre.domain.value_objects.token_amount import TokenAmount
from sequestre.infrastructure.ledger.system_program import SystemProgram


class TokenProgram(ITokenService):
    """
    Token accounting on top of the system program.

    Holding accounts and mints are ledger accounts owned by the token
    program; all writes go through SystemProgram.write_data.
    """

    def __init__(
        self,
        system_program: SystemProgram,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize token program adapter.

        Args:
            system_program: Allocation service used for all account writes
            reporter: Optional SystemReporter
        """
        self.system = system_program
        self.reporter = reporter or SystemReporter(name="token_program")
        self._ctx = InvokeContext(program_id=TOKEN_PROGRAM_ID)

    @property
    def program_id(self) -> Pubkey:
        return TOKEN_PROGRAM_ID

    # ================================================================
    # Queries
    # ================================================================

    def get_mint(self, mint: Pubkey) -> Mint:
        account = self.system.get_account(mint)
        if account is None or account.owner != TOKEN_PROGRAM_ID:
            raise AccountNotFoundError(str(mint), kind="Mint")
        try:
            return Mint.from_bytes(account.data)
        except ValueError as e:
            raise InvalidAccountDataError(str(mint), str(e)) from e

    def get_token_account(self, address: Pubkey) -> Optional[TokenAccount]:
        account = self.system.get_account(address)
        if account is None or account.owner != TOKEN_PROGRAM_ID:
            return None
        if len(account.data) != TOKEN_ACCOUNT_SIZE:
            return None
        try:
            return TokenAccount.from_bytes(account.data)
        except ValueError as e:
            raise InvalidAccountDataError(str(address), str(e)) from e

    def get_balance(self, address: Pubkey) -> TokenAmount:
        holding = self._require_token_account(address)
        mint = self.get_mint(holding.mint)
        return TokenAmount.from_raw(holding.amount, mint.decimals)

    def get_token_account_balance(self, address: Pubkey) -> TokenAmount:
        """Alias matching the RPC method name."""
        return self.get_balance(address)

    # ================================================================
    # Account creation
    # ================================================================

    def create_mint(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        mint: Pubkey,
        decimals: int,
        mint_authority: Pubkey,
    ) -> None:
        if not 0 <= decimals <= 255:
            raise ValidationError("decimals", f"{decimals} does not fit in u8")

        self.system.create_account(ctx, payer, mint, MINT_SIZE, TOKEN_PROGRAM_ID)
        self.system.write_data(
            self._ctx,
            mint,
            Mint(decimals=decimals, mint_authority=mint_authority).to_bytes(),
        )
        self.reporter.debug(
            f"Mint {mint} created ({decimals} decimals)", context="TokenProgram"
        )

    def create_associated_token_account(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        owner: Pubkey,
        mint: Pubkey,
        idempotent: bool = False,
    ) -> Pubkey:
        self.get_mint(mint)

        pda = ProgramAddress.find(
            [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
            ASSOCIATED_TOKEN_PROGRAM_ID,
        )
        address = pda.address

        existing = self.get_token_account(address)
        if existing is not None:
            if idempotent and existing.owner == owner and existing.mint == mint:
                return address
            raise AccountInUseError(str(address))

        ata_ctx = InvokeContext(
            program_id=ASSOCIATED_TOKEN_PROGRAM_ID, signers=ctx.signers
        ).with_signer_seeds(pda.signer_seeds())

        self.system.create_account(
            ata_ctx, payer, address, TOKEN_ACCOUNT_SIZE, TOKEN_PROGRAM_ID
        )
        self._write_token_account(address, TokenAccount(mint=mint, owner=owner))

        self.reporter.debug(
            f"Holding account {address} created for {owner}", context="TokenProgram"
        )
        return address

    # ================================================================
    # Balance movements
    # ================================================================

    def mint_to(
        self, ctx: InvokeContext, mint: Pubkey, destination: Pubkey, amount: int
    ) -> None:
        if amount <= 0:
            raise ValidationError("amount", "mint amount must be positive")

        mint_state = self.get_mint(mint)
        if mint_state.mint_authority is None:
            raise ValidationError("mint", "supply is fixed")
        ctx.require_signer(mint_state.mint_authority, "mint authority")

        holding = self._require_token_account(destination)
        if holding.mint != mint:
            raise AccountMismatchError(
                "destination mint", str(mint), str(holding.mint)
            )
        if mint_state.supply + amount > U64_MAX:
            raise ValidationError("amount", "mint supply would overflow u64")

        supply = mint_state.supply + amount
        self.system.write_data(
            self._ctx, mint, mint_state.with_supply(supply).to_bytes()
        )
        self._write_token_account(
            destination, holding.with_amount(holding.amount + amount)
        )

    def transfer_checked(
        self,
        ctx: InvokeContext,
        source: Pubkey,
        mint: Pubkey,
        destination: Pubkey,
        authority: Pubkey,
        amount: int,
        decimals: int,
    ) -> None:
        if amount < 0:
            raise ValidationError("amount", "transfer amount cannot be negative")

        mint_state = self.get_mint(mint)
        if decimals != mint_state.decimals:
            raise AccountMismatchError(
                "decimals", str(mint_state.decimals), str(decimals)
            )

        source_account = self._require_token_account(source)
        destination_account = self._require_token_account(destination)

        if source_account.mint != mint:
            raise AccountMismatchError(
                "source mint", str(mint), str(source_account.mint)
            )
        if destination_account.mint != mint:
            raise AccountMismatchError(
                "destination mint", str(mint), str(destination_account.mint)
            )
        if source_account.owner != authority:
            raise AccountMismatchError(
                "source owner", str(source_account.owner), str(authority)
            )
        ctx.require_signer(authority, "transfer authority")

        if source_account.amount < amount:
            raise InsufficientFundsError(str(source), amount, source_account.amount)

        if source == destination:
            return

        self._write_token_account(
            source, source_account.with_amount(source_account.amount - amount)
        )
        self._write_token_account(
            destination,
            destination_account.with_amount(destination_account.amount + amount),
        )

    def close_account(
        self,
        ctx: InvokeContext,
        account: Pubkey,
        destination: Pubkey,
        authority: Pubkey,
    ) -> int:
        holding = self._require_token_account(account)

        allowed = holding.close_authority or holding.owner
        if authority != allowed:
            raise AccountMismatchError("close authority", str(allowed), str(authority))
        ctx.require_signer(authority, "close authority")

        if holding.amount != 0:
            raise ValidationError(
                "account", f"cannot close {account} with balance {holding.amount}"
            )

        return self.system.close_account(self._ctx, account, destination)

    # ================================================================
    # Helpers
    # ================================================================

    def _require_token_account(self, address: Pubkey) -> TokenAccount:
        holding = self.get_token_account(address)
        if holding is None:
            raise AccountNotFoundError(str(address), kind="Token account")
        return holding

    def _write_token_account(self, address: Pubkey, holding: TokenAccount) -> None:
        self.system.write_data(self._ctx, address, holding.to_bytes())
