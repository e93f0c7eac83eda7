"""
Rent schedule for storage deposits.
"""

from dataclasses import dataclass

# Bytes charged per account on top of its data (metadata overhead)
ACCOUNT_STORAGE_OVERHEAD = 128

DEFAULT_LAMPORTS_PER_BYTE_YEAR = 3480
DEFAULT_EXEMPTION_THRESHOLD = 2.0


@dataclass(frozen=True)
class Rent:
    """
    Storage deposit calculator.

    An account is kept alive by holding at least ``minimum_balance`` of
    its data size; the deposit is refunded in full when it is closed.
    """

    lamports_per_byte_year: int = DEFAULT_LAMPORTS_PER_BYTE_YEAR
    exemption_threshold: float = DEFAULT_EXEMPTION_THRESHOLD

    def minimum_balance(self, data_len: int) -> int:
        """
        Examples:
            >>> Rent().minimum_balance(165)
            2039280
        """
        if data_len < 0:
            raise ValueError("Data length cannot be negative")
        return int(
            (ACCOUNT_STORAGE_OVERHEAD + data_len)
            * self.lamports_per_byte_year
            * self.exemption_threshold
        )
