"""
Escrow program.

Instruction surface registered with the host ledger: decodes instruction
data, names the ordered accounts and dispatches to one handler.
"""

from typing import Optional

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.application.dto.escrow_accounts import (
    CancelAccounts,
    EscrowAccounts,
)
from sequestre.application.use_cases import (
    CancelEscrow,
    ExchangeEscrow,
    InitializeEscrow,
)
from sequestre.domain.services.i_program import IProgram
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.program.instructions import (
    EscrowInstruction,
    decode_initialize_args,
    decode_instruction,
    map_accounts,
)


class EscrowProgram(IProgram):
    """Dispatches initialize, exchange and cancel."""

    def __init__(
        self,
        program_id: Pubkey,
        initialize_escrow: InitializeEscrow,
        exchange_escrow: ExchangeEscrow,
        cancel_escrow: CancelEscrow,
        reporter: Optional[SystemReporter] = None,
    ):
        self._program_id = program_id
        self.initialize_escrow = initialize_escrow
        self.exchange_escrow = exchange_escrow
        self.cancel_escrow = cancel_escrow
        self.reporter = reporter or SystemReporter(name="sequestre")

    @property
    def program_id(self) -> Pubkey:
        return self._program_id

    def process(self, ctx: InvokeContext, instruction: Instruction) -> None:
        """
        Execute one escrow instruction.

        Raises:
            InvalidInstructionError: Malformed data or too few accounts
            SequestreException: Whatever the handler rejects with
        """
        kind, args = decode_instruction(bytes(instruction.data))
        keys = [meta.pubkey for meta in instruction.accounts]
        named = map_accounts(kind, keys)

        self.reporter.debug(
            f"Processing {kind.value} ({len(keys)} accounts)", context="EscrowProgram"
        )

        if kind is EscrowInstruction.INITIALIZE:
            params = decode_initialize_args(args)
            self.initialize_escrow.execute(
                ctx,
                EscrowAccounts(**named),
                seed=params.seed,
                amount_offered=params.amount_offered,
                amount_requested=params.amount_requested,
            )
        elif kind is EscrowInstruction.EXCHANGE:
            self.exchange_escrow.execute(ctx, EscrowAccounts(**named))
        else:
            self.cancel_escrow.execute(ctx, CancelAccounts(**named))
