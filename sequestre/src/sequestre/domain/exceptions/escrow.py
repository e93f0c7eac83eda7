"""
Escrow-related exceptions.

Defines the failure kinds an escrow instruction can be rejected with.
"""

from sequestre.domain.exceptions.base import SequestreException


class InsufficientFundsError(SequestreException):
    """Raised when a payer lacks the required token or lamport balance."""

    def __init__(self, account: str, required: int, available: int):
        """
        Initialize insufficient funds error.

        Args:
            account: Account that was debited
            required: Required amount
            available: Available balance
        """
        super().__init__(
            f"Insufficient funds in {account}: required {required}, "
            f"available {available}",
            code="INSUFFICIENT_FUNDS",
        )
        self.account = account
        self.required = required
        self.available = available


class AccountMismatchError(SequestreException):
    """Raised when a supplied account differs from the expected one."""

    def __init__(
        self,
        account_name: str,
        expected: str,
        actual: str,
        code: str = "ACCOUNT_MISMATCH",
    ):
        """
        Initialize account mismatch error.

        Args:
            account_name: Role of the account in the instruction
            expected: Expected address or value
            actual: Supplied address or value
        """
        super().__init__(
            f"Account mismatch for {account_name}: expected {expected}, "
            f"got {actual}",
            code=code,
        )
        self.account_name = account_name
        self.expected = expected
        self.actual = actual


class CustodyViolationError(AccountMismatchError):
    """Raised when a vault balance differs from the escrowed amount."""

    def __init__(self, vault: str, expected: int, actual: int):
        super().__init__(
            f"vault {vault}",
            str(expected),
            str(actual),
            code="CUSTODY_VIOLATION",
        )


class UnauthorizedError(SequestreException):
    """Raised when the signer is not allowed to perform the operation."""

    def __init__(self, message: str, code: str = "UNAUTHORIZED"):
        super().__init__(message, code=code)


class MissingSignerError(UnauthorizedError):
    """Raised when a required signature is absent from the transaction."""

    def __init__(self, account_name: str, address: str):
        super().__init__(
            f"Missing required signature for {account_name} ({address})",
            code="MISSING_SIGNER",
        )
        self.account_name = account_name
        self.address = address


class AlreadyClosedError(SequestreException):
    """Raised when the escrow record does not resolve to an open escrow."""

    def __init__(self, escrow_account: str):
        super().__init__(
            f"Escrow {escrow_account} is closed or was never opened",
            code="ALREADY_CLOSED",
        )
        self.escrow_account = escrow_account


class AlreadyExistsError(SequestreException):
    """Raised when initialize targets an occupied address."""

    def __init__(self, account_name: str, address: str):
        super().__init__(
            f"{account_name} {address} already exists",
            code="ALREADY_EXISTS",
        )
        self.account_name = account_name
        self.address = address
