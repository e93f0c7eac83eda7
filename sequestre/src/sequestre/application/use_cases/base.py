"""
Shared checks for escrow instruction handlers.
"""

from typing import Optional

from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.domain.entities.escrow_record import EscrowRecord
from sequestre.domain.entities.token_account import Mint
from sequestre.domain.exceptions import (
    AccountMismatchError,
    CustodyViolationError,
    InsufficientFundsError,
    LedgerError,
)
from sequestre.domain.repositories.i_escrow_record_repository import (
    IEscrowRecordRepository,
)
from sequestre.domain.services.i_account_service import IAccountService
from sequestre.domain.services.i_token_service import ITokenService
from sequestre.domain.value_objects.program_address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    derive_holding_address,
)


class EscrowHandler:
    """
    Base class for initialize, exchange and cancel.

    Subclasses validate every account before their first mutation; the
    host ledger rolls back whatever a failed instruction touched.
    """

    def __init__(
        self,
        escrow_records: IEscrowRecordRepository,
        token_service: ITokenService,
        account_service: IAccountService,
        program_id: Pubkey,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize handler with dependencies.

        Args:
            escrow_records: Repository for escrow records
            token_service: Token program (mints, holding accounts, transfers)
            account_service: System program (allocation, close-with-refund)
            program_id: Escrow program id used for address derivation
            reporter: Optional SystemReporter
        """
        self.escrow_records = escrow_records
        self.token_service = token_service
        self.account_service = account_service
        self.program_id = program_id
        self.reporter = reporter or SystemReporter(name="sequestre")

    @property
    def context(self) -> str:
        return type(self).__name__

    # ================================================================
    # Address checks
    # ================================================================

    @staticmethod
    def expect_address(account_name: str, expected: Pubkey, actual: Pubkey) -> None:
        if expected != actual:
            raise AccountMismatchError(account_name, str(expected), str(actual))

    def expect_holding(
        self, account_name: str, owner: Pubkey, mint: Pubkey, actual: Pubkey
    ) -> None:
        self.expect_address(account_name, derive_holding_address(owner, mint), actual)

    def expect_programs(
        self,
        associated_token_program: Pubkey,
        token_program: Pubkey,
        system_program: Pubkey,
    ) -> None:
        self.expect_address(
            "associated token program",
            ASSOCIATED_TOKEN_PROGRAM_ID,
            associated_token_program,
        )
        self.expect_address("token program", TOKEN_PROGRAM_ID, token_program)
        self.expect_address("system program", SYSTEM_PROGRAM_ID, system_program)

    def expect_record_address(self, record: EscrowRecord, actual: Pubkey) -> None:
        """Stored seed and bump must re-derive the supplied record address."""
        try:
            derived = record.program_address(self.program_id).address
        except ValueError as e:
            raise AccountMismatchError("escrow", "valid address proof", str(e)) from e
        self.expect_address("escrow", derived, actual)

    # ================================================================
    # State checks
    # ================================================================

    def load_mint(self, account_name: str, mint: Pubkey) -> Mint:
        try:
            return self.token_service.get_mint(mint)
        except LedgerError as e:
            raise AccountMismatchError(
                account_name, "initialized mint", str(mint)
            ) from e

    def holding_balance(self, address: Pubkey) -> int:
        """Raw balance of a holding account; 0 when it does not exist."""
        holding = self.token_service.get_token_account(address)
        return holding.amount if holding else 0

    def require_balance(self, address: Pubkey, required: int) -> None:
        available = self.holding_balance(address)
        if available < required:
            raise InsufficientFundsError(str(address), required, available)

    def expect_custody(
        self, vault: Pubkey, record: EscrowRecord, allow_surplus: bool = False
    ) -> int:
        """
        Vault must hold exactly the escrowed amount.

        With ``allow_surplus`` a vault holding more than the escrowed
        amount passes, so cancel can still return tokens sent to the
        vault from outside.

        Returns:
            Vault balance

        Raises:
            CustodyViolationError: If the vault is missing, holds the wrong
                mint or its balance does not cover ``record.amount_offered``
        """
        holding = self.token_service.get_token_account(vault)
        balance = holding.amount if holding else 0
        if allow_surplus:
            covered = balance >= record.amount_offered
        else:
            covered = balance == record.amount_offered
        if holding is None or holding.mint != record.asset_offered or not covered:
            raise CustodyViolationError(str(vault), record.amount_offered, balance)
        return balance
