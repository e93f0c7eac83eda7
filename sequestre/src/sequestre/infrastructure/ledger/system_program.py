"""
System program adapter.

Implements IAccountService against the in-memory ledger: allocation with
storage deposit, data writes by the owning program, close-with-refund and
wallet transfers.
"""

from typing import Optional

from solders.pubkey import Pubkey

from sequestre.domain.entities.account import Account
from sequestre.domain.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    InsufficientFundsError,
    UnauthorizedError,
    ValidationError,
)
from sequestre.domain.services.i_account_service import IAccountService
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import SYSTEM_PROGRAM_ID
from sequestre.infrastructure.ledger.in_memory_ledger import InMemoryLedger


class SystemProgram(IAccountService):
    """
    Storage allocation service.

    Every mutation goes through the ledger, so it is covered by the
    enclosing transaction's rollback.
    """

    def __init__(self, ledger: InMemoryLedger):
        """
        Initialize system program adapter.

        Args:
            ledger: Ledger holding account state
        """
        self.ledger = ledger

    @property
    def program_id(self) -> Pubkey:
        return SYSTEM_PROGRAM_ID

    def get_account(self, address: Pubkey) -> Optional[Account]:
        return self.ledger.get_account(address)

    def minimum_balance(self, space: int) -> int:
        return self.ledger.rent.minimum_balance(space)

    def create_account(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        new_account: Pubkey,
        space: int,
        owner: Pubkey,
    ) -> int:
        ctx.require_signer(payer, "payer")
        ctx.require_signer(new_account, "new account")

        existing = self.ledger.get_account(new_account)
        if existing is not None and (existing.lamports > 0 or existing.data):
            raise AccountInUseError(str(new_account))

        deposit = self.minimum_balance(space)
        self._debit(payer, deposit)
        self.ledger.put_account(
            new_account,
            Account(lamports=deposit, owner=owner, data=bytes(space)),
        )
        return deposit

    def write_data(self, ctx: InvokeContext, address: Pubkey, data: bytes) -> None:
        account = self._owned_account(ctx, address)
        if len(data) != account.space:
            raise ValidationError(
                "data", f"expected {account.space} bytes, got {len(data)}"
            )
        account.data = bytes(data)
        self.ledger.put_account(address, account)

    def close_account(
        self, ctx: InvokeContext, address: Pubkey, destination: Pubkey
    ) -> int:
        account = self._owned_account(ctx, address)

        self._credit(destination, account.lamports)
        self.ledger.remove_account(address)
        return account.lamports

    def transfer(
        self, ctx: InvokeContext, source: Pubkey, destination: Pubkey, lamports: int
    ) -> None:
        if lamports <= 0:
            raise ValidationError("lamports", "transfer amount must be positive")
        ctx.require_signer(source, "source")

        account = self.ledger.get_account(source)
        if account is not None and account.owner != SYSTEM_PROGRAM_ID:
            raise UnauthorizedError(f"{source} is not a system-owned wallet")

        self._debit(source, lamports)
        self._credit(destination, lamports)

    # ================================================================
    # Helpers
    # ================================================================

    def _owned_account(self, ctx: InvokeContext, address: Pubkey) -> Account:
        account = self.ledger.get_account(address)
        if account is None:
            raise AccountNotFoundError(str(address))
        if account.owner != ctx.program_id:
            raise UnauthorizedError(
                f"Program {ctx.program_id} does not own account {address}"
            )
        return account

    def _debit(self, address: Pubkey, lamports: int) -> None:
        if lamports == 0:
            return
        account = self.ledger.get_account(address)
        available = account.lamports if account else 0
        if account is None or available < lamports:
            raise InsufficientFundsError(str(address), lamports, available)
        account.lamports -= lamports
        self.ledger.put_account(address, account)

    def _credit(self, address: Pubkey, lamports: int) -> None:
        account = self.ledger.get_account(address) or Account(
            lamports=0, owner=SYSTEM_PROGRAM_ID
        )
        account.lamports += lamports
        self.ledger.put_account(address, account)
