"""
Persistence adapters.
"""

from sequestre.infrastructure.persistence.escrow_record_repository import (
    EscrowRecordRepository,
)

__all__ = ["EscrowRecordRepository"]
