"""
Token Service interface.

Defines contract for fungible-token holding accounts: creation, checked
transfers, closing with refund, and balance queries.
"""

from abc import ABC, abstractmethod
from typing import Optional

from solders.pubkey import Pubkey

from sequestre.domain.entities.token_account import Mint, TokenAccount
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.token_amount import TokenAmount


class ITokenService(ABC):
    """
    Interface for the token program.

    Clean Architecture: Domain layer defines interface,
    Infrastructure layer implements concrete token accounting.
    """

    @abstractmethod
    def get_mint(self, mint: Pubkey) -> Mint:
        """
        Raises:
            AccountNotFoundError: If no mint exists at the address
        """

    @abstractmethod
    def get_token_account(self, address: Pubkey) -> Optional[TokenAccount]:
        """Holding account at ``address``, or None if absent."""

    @abstractmethod
    def get_balance(self, address: Pubkey) -> TokenAmount:
        """
        Raises:
            AccountNotFoundError: If no holding account exists
        """

    @abstractmethod
    def create_mint(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        mint: Pubkey,
        decimals: int,
        mint_authority: Pubkey,
    ) -> None:
        """Allocate and initialize a mint."""

    @abstractmethod
    def create_associated_token_account(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        owner: Pubkey,
        mint: Pubkey,
        idempotent: bool = False,
    ) -> Pubkey:
        """
        Create the associated holding account of ``owner`` for ``mint``.

        Returns:
            Holding account address

        Raises:
            AccountInUseError: If it exists and ``idempotent`` is False
        """

    @abstractmethod
    def mint_to(
        self, ctx: InvokeContext, mint: Pubkey, destination: Pubkey, amount: int
    ) -> None:
        """Mint new supply; the mint authority must sign."""

    @abstractmethod
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
        """
        Move ``amount`` between two holding accounts of ``mint``.

        Raises:
            InsufficientFundsError: If source balance is too low
            AccountMismatchError: If mint, decimals or owner do not match
            MissingSignerError: If authority did not sign
        """

    @abstractmethod
    def close_account(
        self,
        ctx: InvokeContext,
        account: Pubkey,
        destination: Pubkey,
        authority: Pubkey,
    ) -> int:
        """
        Close an empty holding account, refunding its deposit.

        Returns:
            Lamports refunded
        """
