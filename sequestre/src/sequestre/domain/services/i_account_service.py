"""
Account Service interface.

Defines contract for storage allocation, storage deposits and lamport
movements on the host ledger (the system program).
"""

from abc import ABC, abstractmethod
from typing import Optional

from solders.pubkey import Pubkey

from sequestre.domain.entities.account import Account
from sequestre.domain.value_objects.invoke_context import InvokeContext


class IAccountService(ABC):
    """
    Interface for allocating and releasing ledger accounts.

    Clean Architecture: Domain layer defines interface,
    Infrastructure layer implements it on top of a ledger.
    """

    @abstractmethod
    def get_account(self, address: Pubkey) -> Optional[Account]:
        """
        Get account state.

        Returns:
            Account, or None if nothing is stored at the address
        """

    @abstractmethod
    def minimum_balance(self, space: int) -> int:
        """Storage deposit (rent-exempt minimum) for ``space`` bytes."""

    @abstractmethod
    def create_account(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        new_account: Pubkey,
        space: int,
        owner: Pubkey,
    ) -> int:
        """
        Allocate an account funded with its storage deposit.

        Both ``payer`` and ``new_account`` must be signers of ``ctx``.

        Returns:
            Lamports deposited

        Raises:
            AccountInUseError: If the address is occupied
            InsufficientFundsError: If payer cannot cover the deposit
            MissingSignerError: If payer or new account did not sign
        """

    @abstractmethod
    def write_data(self, ctx: InvokeContext, address: Pubkey, data: bytes) -> None:
        """
        Overwrite the data of an account owned by ``ctx.program_id``.

        Raises:
            AccountNotFoundError: If the account does not exist
            UnauthorizedError: If the caller does not own the account
        """

    @abstractmethod
    def close_account(
        self, ctx: InvokeContext, address: Pubkey, destination: Pubkey
    ) -> int:
        """
        Release an account owned by ``ctx.program_id`` and refund its
        lamports to ``destination`` in one step.

        Returns:
            Lamports refunded
        """

    @abstractmethod
    def transfer(
        self, ctx: InvokeContext, source: Pubkey, destination: Pubkey, lamports: int
    ) -> None:
        """Move lamports out of a signing wallet."""
