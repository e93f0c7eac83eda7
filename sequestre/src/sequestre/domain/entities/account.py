"""
Account entity - one entry of ledger state.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey


@dataclass
class Account:
    """
    Ledger account: a lamport balance, an owning program and raw data.

    Wallets are owned by the system program and carry no data.
    """

    lamports: int
    owner: Pubkey
    data: bytes = b""

    def __post_init__(self):
        if self.lamports < 0:
            raise ValueError("Account lamports cannot be negative")

    @property
    def space(self) -> int:
        return len(self.data)

    def copy(self) -> "Account":
        return Account(lamports=self.lamports, owner=self.owner, data=self.data)
