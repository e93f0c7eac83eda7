"""
Escrow Record Repository interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from solders.pubkey import Pubkey

from sequestre.domain.entities.escrow_record import EscrowRecord, RecordState
from sequestre.domain.value_objects.invoke_context import InvokeContext


class IEscrowRecordRepository(ABC):
    """
    Repository for escrow records stored in program-owned accounts.

    An address resolves to an OPEN record while the account exists and
    decodes; once closed, the address is free again.
    """

    @abstractmethod
    def get_state(self, address: Pubkey) -> RecordState:
        """Lifecycle state of the record at ``address``."""

    @abstractmethod
    def find(self, address: Pubkey) -> Optional[EscrowRecord]:
        """Open record at ``address``, or None."""

    @abstractmethod
    def get(self, address: Pubkey) -> EscrowRecord:
        """
        Raises:
            AlreadyClosedError: If no open record exists at the address
        """

    @abstractmethod
    def create(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        address: Pubkey,
        record: EscrowRecord,
    ) -> int:
        """
        Allocate and populate a record. ``ctx`` must carry the record's
        signer seeds.

        Returns:
            Storage deposit paid by ``payer``

        Raises:
            AlreadyExistsError: If the address is occupied
        """

    @abstractmethod
    def close(self, ctx: InvokeContext, address: Pubkey, destination: Pubkey) -> int:
        """
        Destroy the record, refunding its deposit to ``destination``.

        Returns:
            Lamports refunded
        """
