"""
Escrow instruction codec and client-side builders.

Instruction data is an 8-byte discriminator (``sha256("global:<name>")[:8]``)
followed by little-endian arguments. Account order is fixed per
instruction; the builders here and EscrowProgram share the same tables.
"""

import hashlib
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from sequestre.application.dto.escrow_accounts import (
    CancelAccounts,
    EscrowAccounts,
)
from sequestre.domain.exceptions import InvalidInstructionError

_INITIALIZE_ARGS = struct.Struct("<QQQ")


def instruction_discriminator(name: str) -> bytes:
    """First 8 bytes of sha256("global:<name>")."""
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


class EscrowInstruction(str, Enum):
    """Instructions exposed by the escrow program."""

    INITIALIZE = "initialize"
    EXCHANGE = "exchange"
    CANCEL = "cancel"

    @property
    def discriminator(self) -> bytes:
        return instruction_discriminator(self.value)


_BY_DISCRIMINATOR: Dict[bytes, EscrowInstruction] = {
    kind.discriminator: kind for kind in EscrowInstruction
}

# (field name, is_signer, is_writable) in wire order
AccountSpec = Tuple[str, bool, bool]

INITIALIZE_ACCOUNTS: List[AccountSpec] = [
    ("offering_party", True, True),
    ("counterparty", False, False),
    ("asset_offered", False, False),
    ("asset_requested", False, False),
    ("offering_party_offered_account", False, True),
    ("offering_party_requested_account", False, False),
    ("counterparty_offered_account", False, False),
    ("counterparty_requested_account", False, False),
    ("escrow", False, True),
    ("vault", False, True),
    ("associated_token_program", False, False),
    ("token_program", False, False),
    ("system_program", False, False),
]

EXCHANGE_ACCOUNTS: List[AccountSpec] = [
    ("counterparty", True, True),
    ("offering_party", False, True),
    ("asset_offered", False, False),
    ("asset_requested", False, False),
    ("offering_party_offered_account", False, False),
    ("offering_party_requested_account", False, True),
    ("counterparty_offered_account", False, True),
    ("counterparty_requested_account", False, True),
    ("escrow", False, True),
    ("vault", False, True),
    ("associated_token_program", False, False),
    ("token_program", False, False),
    ("system_program", False, False),
]

CANCEL_ACCOUNTS: List[AccountSpec] = [
    ("offering_party", True, True),
    ("escrow", False, True),
    ("vault", False, True),
    ("offering_party_offered_account", False, True),
    ("associated_token_program", False, False),
    ("token_program", False, False),
    ("system_program", False, False),
]

ACCOUNT_LAYOUTS: Dict[EscrowInstruction, List[AccountSpec]] = {
    EscrowInstruction.INITIALIZE: INITIALIZE_ACCOUNTS,
    EscrowInstruction.EXCHANGE: EXCHANGE_ACCOUNTS,
    EscrowInstruction.CANCEL: CANCEL_ACCOUNTS,
}


@dataclass(frozen=True)
class InitializeArgs:
    seed: int
    amount_offered: int
    amount_requested: int


# ================================================================
# Decoding
# ================================================================


def decode_instruction(data: bytes) -> Tuple[EscrowInstruction, bytes]:
    """
    Split instruction data into its kind and argument bytes.

    Raises:
        InvalidInstructionError: Data too short or unknown discriminator
    """
    if len(data) < 8:
        raise InvalidInstructionError(
            f"instruction data is {len(data)} bytes, need at least 8"
        )
    kind = _BY_DISCRIMINATOR.get(bytes(data[:8]))
    if kind is None:
        raise InvalidInstructionError(f"unknown discriminator {bytes(data[:8]).hex()}")
    return kind, bytes(data[8:])


def decode_initialize_args(args: bytes) -> InitializeArgs:
    if len(args) != _INITIALIZE_ARGS.size:
        raise InvalidInstructionError(
            f"initialize takes {_INITIALIZE_ARGS.size} argument bytes, "
            f"got {len(args)}"
        )
    seed, amount_offered, amount_requested = _INITIALIZE_ARGS.unpack(args)
    return InitializeArgs(seed, amount_offered, amount_requested)


def map_accounts(
    kind: EscrowInstruction, keys: Sequence[Pubkey]
) -> Dict[str, Pubkey]:
    """
    Name the ordered account keys of an instruction.

    Extra trailing accounts are ignored.

    Raises:
        InvalidInstructionError: Fewer accounts than the layout needs
    """
    layout = ACCOUNT_LAYOUTS[kind]
    if len(keys) < len(layout):
        raise InvalidInstructionError(
            f"{kind.value} needs {len(layout)} accounts, got {len(keys)}"
        )
    return {name: key for (name, _, _), key in zip(layout, keys)}


# ================================================================
# Client builders
# ================================================================


def _metas(layout: List[AccountSpec], accounts) -> List[AccountMeta]:
    return [
        AccountMeta(getattr(accounts, name), is_signer, is_writable)
        for name, is_signer, is_writable in layout
    ]


def build_initialize_instruction(
    program_id: Pubkey,
    accounts: EscrowAccounts,
    seed: int,
    amount_offered: int,
    amount_requested: int,
) -> Instruction:
    """
    Build an initialize instruction.

    Raises:
        InvalidInstructionError: If an argument does not fit in u64
    """
    try:
        args = _INITIALIZE_ARGS.pack(seed, amount_offered, amount_requested)
    except struct.error as e:
        raise InvalidInstructionError(f"initialize arguments: {e}") from e

    return Instruction(
        program_id,
        EscrowInstruction.INITIALIZE.discriminator + args,
        _metas(INITIALIZE_ACCOUNTS, accounts),
    )


def build_exchange_instruction(
    program_id: Pubkey, accounts: EscrowAccounts
) -> Instruction:
    return Instruction(
        program_id,
        EscrowInstruction.EXCHANGE.discriminator,
        _metas(EXCHANGE_ACCOUNTS, accounts),
    )


def build_cancel_instruction(
    program_id: Pubkey, accounts: CancelAccounts
) -> Instruction:
    return Instruction(
        program_id,
        EscrowInstruction.CANCEL.discriminator,
        _metas(CANCEL_ACCOUNTS, accounts),
    )
