"""
Account sets passed to escrow instructions.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from sequestre.domain.value_objects.program_address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    derive_escrow_address,
    derive_holding_address,
    derive_vault_address,
)


@dataclass(frozen=True)
class EscrowAccounts:
    """
    Every account an escrow trade touches.

    Used as-is by initialize and exchange; cancel uses the subset
    returned by ``for_cancel()``.
    """

    offering_party: Pubkey
    counterparty: Pubkey
    asset_offered: Pubkey
    asset_requested: Pubkey
    offering_party_offered_account: Pubkey
    offering_party_requested_account: Pubkey
    counterparty_offered_account: Pubkey
    counterparty_requested_account: Pubkey
    escrow: Pubkey
    vault: Pubkey
    associated_token_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID
    token_program: Pubkey = TOKEN_PROGRAM_ID
    system_program: Pubkey = SYSTEM_PROGRAM_ID

    @classmethod
    def derive(
        cls,
        program_id: Pubkey,
        seed: int,
        offering_party: Pubkey,
        counterparty: Pubkey,
        asset_offered: Pubkey,
        asset_requested: Pubkey,
    ) -> "EscrowAccounts":
        """
        Derive the full account set for a trade.

        Args:
            program_id: Escrow program id
            seed: Random u64 chosen by the offering party
            offering_party: Wallet funding the vault
            counterparty: Wallet expected to settle
            asset_offered: Mint placed in custody
            asset_requested: Mint requested in return

        Returns:
            EscrowAccounts with record, vault and all holding accounts
        """
        escrow = derive_escrow_address(seed, program_id).address
        return cls(
            offering_party=offering_party,
            counterparty=counterparty,
            asset_offered=asset_offered,
            asset_requested=asset_requested,
            offering_party_offered_account=derive_holding_address(
                offering_party, asset_offered
            ),
            offering_party_requested_account=derive_holding_address(
                offering_party, asset_requested
            ),
            counterparty_offered_account=derive_holding_address(
                counterparty, asset_offered
            ),
            counterparty_requested_account=derive_holding_address(
                counterparty, asset_requested
            ),
            escrow=escrow,
            vault=derive_vault_address(escrow, asset_offered),
        )

    def for_cancel(self) -> "CancelAccounts":
        return CancelAccounts(
            offering_party=self.offering_party,
            escrow=self.escrow,
            vault=self.vault,
            offering_party_offered_account=self.offering_party_offered_account,
            associated_token_program=self.associated_token_program,
            token_program=self.token_program,
            system_program=self.system_program,
        )

    def to_dict(self) -> dict:
        return {name: str(value) for name, value in self.__dict__.items()}


@dataclass(frozen=True)
class CancelAccounts:
    """Accounts for cancel: the offering party, record, vault and refund target."""

    offering_party: Pubkey
    escrow: Pubkey
    vault: Pubkey
    offering_party_offered_account: Pubkey
    associated_token_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID
    token_program: Pubkey = TOKEN_PROGRAM_ID
    system_program: Pubkey = SYSTEM_PROGRAM_ID


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of an exchange or cancel."""

    escrow: Pubkey
    amount_released: int
    released_to: Pubkey
    amount_paid: int
    lamports_refunded: int

    def to_dict(self) -> dict:
        return {
            "escrow": str(self.escrow),
            "amount_released": self.amount_released,
            "released_to": str(self.released_to),
            "amount_paid": self.amount_paid,
            "lamports_refunded": self.lamports_refunded,
        }


# Initialize and exchange take the same accounts in different signer order.
InitializeAccounts = EscrowAccounts
ExchangeAccounts = EscrowAccounts
