"""
Ledger-backed Escrow Record repository.

Records live in accounts owned by the escrow program; the account data is
the packed EscrowRecord.
"""

from typing import Optional

from solders.pubkey import Pubkey

from sequestre.domain.entities.escrow_record import (
    ESCROW_RECORD_SIZE,
    EscrowRecord,
    RecordState,
)
from sequestre.domain.exceptions import AlreadyClosedError, AlreadyExistsError
from sequestre.domain.repositories.i_escrow_record_repository import (
    IEscrowRecordRepository,
)
from sequestre.domain.services.i_account_service import IAccountService
from sequestre.domain.value_objects.invoke_context import InvokeContext


class EscrowRecordRepository(IEscrowRecordRepository):
    """Reads and writes escrow records through the account service."""

    def __init__(self, account_service: IAccountService, program_id: Pubkey):
        """
        Initialize repository.

        Args:
            account_service: Storage allocation service
            program_id: Escrow program that owns the record accounts
        """
        self.accounts = account_service
        self.program_id = program_id

    def get_state(self, address: Pubkey) -> RecordState:
        return RecordState.OPEN if self.find(address) else RecordState.CLOSED

    def find(self, address: Pubkey) -> Optional[EscrowRecord]:
        account = self.accounts.get_account(address)
        if account is None or account.owner != self.program_id:
            return None
        try:
            return EscrowRecord.from_bytes(account.data)
        except ValueError:
            return None

    def get(self, address: Pubkey) -> EscrowRecord:
        record = self.find(address)
        if record is None:
            raise AlreadyClosedError(str(address))
        return record

    def is_occupied(self, address: Pubkey) -> bool:
        """True if any account, escrow or not, sits at ``address``."""
        return self.accounts.get_account(address) is not None

    def create(
        self,
        ctx: InvokeContext,
        payer: Pubkey,
        address: Pubkey,
        record: EscrowRecord,
    ) -> int:
        if self.is_occupied(address):
            raise AlreadyExistsError("Escrow record", str(address))

        deposit = self.accounts.create_account(
            ctx, payer, address, ESCROW_RECORD_SIZE, self.program_id
        )
        self.accounts.write_data(ctx, address, record.to_bytes())
        return deposit

    def close(self, ctx: InvokeContext, address: Pubkey, destination: Pubkey) -> int:
        self.get(address)
        return self.accounts.close_account(ctx, address, destination)
