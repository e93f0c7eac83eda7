"""
Domain exceptions package.
"""

# Base exceptions
from sequestre.domain.exceptions.base import (
    InvalidInstructionError,
    SequestreException,
    ValidationError,
)

# Escrow exceptions
from sequestre.domain.exceptions.escrow import (
    AccountMismatchError,
    AlreadyClosedError,
    AlreadyExistsError,
    CustodyViolationError,
    InsufficientFundsError,
    MissingSignerError,
    UnauthorizedError,
)

# Ledger exceptions
from sequestre.domain.exceptions.ledger import (
    AccountInUseError,
    AccountNotFoundError,
    InvalidAccountDataError,
    InvalidSignatureError,
    LedgerError,
    ProgramNotFoundError,
)

__all__ = [
    # Base
    "SequestreException",
    "ValidationError",
    "InvalidInstructionError",
    # Escrow
    "InsufficientFundsError",
    "AccountMismatchError",
    "CustodyViolationError",
    "UnauthorizedError",
    "MissingSignerError",
    "AlreadyClosedError",
    "AlreadyExistsError",
    # Ledger
    "LedgerError",
    "AccountNotFoundError",
    "AccountInUseError",
    "InvalidAccountDataError",
    "InvalidSignatureError",
    "ProgramNotFoundError",
]
