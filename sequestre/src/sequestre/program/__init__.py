"""
Escrow program: instruction codec, client builders and dispatcher.
"""

from sequestre.program.escrow_program import EscrowProgram
from sequestre.program.instructions import (
    EscrowInstruction,
    InitializeArgs,
    build_cancel_instruction,
    build_exchange_instruction,
    build_initialize_instruction,
    decode_initialize_args,
    decode_instruction,
    instruction_discriminator,
    map_accounts,
)

__all__ = [
    "EscrowProgram",
    "EscrowInstruction",
    "InitializeArgs",
    "build_initialize_instruction",
    "build_exchange_instruction",
    "build_cancel_instruction",
    "decode_instruction",
    "decode_initialize_args",
    "instruction_discriminator",
    "map_accounts",
]
