"""
In-memory host ledger and its built-in programs.
"""

from sequestre.infrastructure.ledger.faucet import LAMPORTS_PER_SOL, Faucet
from sequestre.infrastructure.ledger.in_memory_ledger import (
    DEFAULT_LAMPORTS_PER_SIGNATURE,
    InMemoryLedger,
)
from sequestre.infrastructure.ledger.rent import Rent
from sequestre.infrastructure.ledger.system_program import SystemProgram
from sequestre.infrastructure.ledger.token_program import TokenProgram

__all__ = [
    "InMemoryLedger",
    "Rent",
    "SystemProgram",
    "TokenProgram",
    "Faucet",
    "LAMPORTS_PER_SOL",
    "DEFAULT_LAMPORTS_PER_SIGNATURE",
]
