"""
Repository interfaces.
"""

from sequestre.domain.repositories.i_escrow_record_repository import (
    IEscrowRecordRepository,
)

__all__ = ["IEscrowRecordRepository"]
