"""
TokenAmount value object - RPC-style token balance.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class TokenAmount:
    """
    Balance of a holding account, shaped like getTokenAccountBalance.

    ``amount`` is the raw integer amount as a string ("1000000"),
    ``ui_amount`` the decimal-adjusted value (1.0 for 6 decimals).
    """

    amount: str
    decimals: int
    ui_amount: Optional[float]
    ui_amount_string: str

    @classmethod
    def from_raw(cls, amount: int, decimals: int) -> "TokenAmount":
        """Build from a raw integer amount and the mint's decimals."""
        if amount < 0:
            raise ValueError("Token amount cannot be negative")
        if decimals < 0:
            raise ValueError("Decimals cannot be negative")

        ui = Decimal(amount).scaleb(-decimals)
        ui_string = format(ui.normalize(), "f") if amount else "0"
        return cls(
            amount=str(amount),
            decimals=decimals,
            ui_amount=float(ui),
            ui_amount_string=ui_string,
        )

    @property
    def raw(self) -> int:
        return int(self.amount)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "decimals": self.decimals,
            "uiAmount": self.ui_amount,
            "uiAmountString": self.ui_amount_string,
        }
