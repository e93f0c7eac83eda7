"""
Escrow use cases.
"""

from sequestre.application.use_cases.base import EscrowHandler
from sequestre.application.use_cases.cancel_escrow import CancelEscrow
from sequestre.application.use_cases.exchange_escrow import ExchangeEscrow
from sequestre.application.use_cases.initialize_escrow import InitializeEscrow

__all__ = [
    "EscrowHandler",
    "InitializeEscrow",
    "ExchangeEscrow",
    "CancelEscrow",
]
