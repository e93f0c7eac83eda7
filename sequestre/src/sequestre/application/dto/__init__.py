"""
Data transfer objects for escrow use cases.
"""

from sequestre.application.dto.escrow_accounts import (
    CancelAccounts,
    EscrowAccounts,
    ExchangeAccounts,
    InitializeAccounts,
    SettlementResult,
)

__all__ = [
    "EscrowAccounts",
    "InitializeAccounts",
    "ExchangeAccounts",
    "CancelAccounts",
    "SettlementResult",
]
