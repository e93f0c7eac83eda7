"""
Domain entities for Sequestre.
"""

from sequestre.domain.entities.account import Account
from sequestre.domain.entities.escrow_record import (
    ESCROW_DISCRIMINATOR,
    ESCROW_RECORD_SIZE,
    EscrowRecord,
    RecordState,
)
from sequestre.domain.entities.token_account import (
    MINT_SIZE,
    TOKEN_ACCOUNT_SIZE,
    Mint,
    TokenAccount,
)

__all__ = [
    "Account",
    "EscrowRecord",
    "RecordState",
    "ESCROW_DISCRIMINATOR",
    "ESCROW_RECORD_SIZE",
    "TokenAccount",
    "Mint",
    "TOKEN_ACCOUNT_SIZE",
    "MINT_SIZE",
]
