"""
Host ledger exceptions.

Raised by the ledger and its system/token services rather than by the
escrow program itself.
"""

from sequestre.domain.exceptions.base import SequestreException


class LedgerError(SequestreException):
    """Base exception for ledger operations."""


class AccountNotFoundError(LedgerError):
    """Raised when an account does not exist on the ledger."""

    def __init__(self, address: str, kind: str = "Account"):
        super().__init__(f"{kind} not found: {address}", code="ACCOUNT_NOT_FOUND")
        self.address = address


class AccountInUseError(LedgerError):
    """Raised when allocating an address that already holds an account."""

    def __init__(self, address: str):
        super().__init__(f"Account {address} already in use", code="ACCOUNT_IN_USE")
        self.address = address


class InvalidAccountDataError(LedgerError):
    """Raised when account data cannot be decoded as the expected type."""

    def __init__(self, address: str, reason: str):
        super().__init__(
            f"Invalid account data for {address}: {reason}",
            code="INVALID_ACCOUNT_DATA",
        )
        self.address = address


class InvalidSignatureError(LedgerError):
    """Raised when a transaction signature does not verify."""

    def __init__(self, signer: str):
        super().__init__(f"Invalid signature for {signer}", code="INVALID_SIGNATURE")
        self.signer = signer


class ProgramNotFoundError(LedgerError):
    """Raised when an instruction targets an unregistered program."""

    def __init__(self, program_id: str):
        super().__init__(f"Program not found: {program_id}", code="PROGRAM_NOT_FOUND")
        self.program_id = program_id
