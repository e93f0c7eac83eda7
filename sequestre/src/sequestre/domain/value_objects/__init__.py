"""
Value objects for Sequestre domain.
"""

from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    STATE_SEED,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    U64_MAX,
    ProgramAddress,
    derive_escrow_address,
    derive_holding_address,
    derive_vault_address,
    seed_to_bytes,
)
from sequestre.domain.value_objects.token_amount import TokenAmount

__all__ = [
    "InvokeContext",
    "ProgramAddress",
    "TokenAmount",
    "STATE_SEED",
    "U64_MAX",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "derive_escrow_address",
    "derive_vault_address",
    "derive_holding_address",
    "seed_to_bytes",
]
