"""
Program-derived addresses for escrow records and their vaults.

Record address:  find_program_address([b"state", seed_le_u64], program_id)
Vault address:   associated token address of (owner=record, mint=asset_offered)

Both derivations match the on-chain program bit for bit.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID
from spl.token.instructions import get_associated_token_address

from sequestre.domain.exceptions import ValidationError

STATE_SEED = b"state"
U64_MAX = 2**64 - 1

__all__ = [
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "STATE_SEED",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "U64_MAX",
    "ProgramAddress",
    "derive_escrow_address",
    "derive_holding_address",
    "derive_vault_address",
    "seed_to_bytes",
]


def seed_to_bytes(seed: int) -> bytes:
    """
    Encode an escrow seed as 8 little-endian bytes.

    Raises:
        ValidationError: If seed is not an integer in the u64 range
    """
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ValidationError("seed", f"expected integer, got {type(seed).__name__}")
    if seed < 0 or seed > U64_MAX:
        raise ValidationError("seed", f"{seed} is outside the u64 range")
    return seed.to_bytes(8, "little")


@dataclass(frozen=True)
class ProgramAddress:
    """
    An address derived from seeds and a program id, plus its bump.

    The bump is the proof that lets the owning program sign for the
    address later: ``signer_seeds()`` reproduces it exactly.
    """

    address: Pubkey
    bump: int
    seeds: Tuple[bytes, ...]

    @classmethod
    def find(cls, seeds: Sequence[bytes], program_id: Pubkey) -> "ProgramAddress":
        """Search for the canonical (highest valid) bump."""
        address, bump = Pubkey.find_program_address(list(seeds), program_id)
        return cls(address=address, bump=bump, seeds=tuple(seeds))

    def signer_seeds(self) -> List[bytes]:
        """Seeds including the bump byte, as used for signing."""
        return [*self.seeds, bytes([self.bump])]

    def verify(self, program_id: Pubkey) -> bool:
        """Re-derive the address from seeds and bump."""
        return (
            Pubkey.create_program_address(self.signer_seeds(), program_id)
            == self.address
        )

    def __str__(self) -> str:
        return str(self.address)


def derive_escrow_address(seed: int, program_id: Pubkey) -> ProgramAddress:
    """
    Derive the escrow record address for a seed.

    Args:
        seed: Caller-chosen u64 nonce
        program_id: Escrow program id

    Returns:
        ProgramAddress of the record

    Examples:
        >>> from solders.pubkey import Pubkey
        >>> program_id = Pubkey.from_string(
        ...     "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"
        ... )
        >>> pda = derive_escrow_address(42, program_id)
        >>> pda.seeds[0]
        b'state'
    """
    return ProgramAddress.find([STATE_SEED, seed_to_bytes(seed)], program_id)


def derive_vault_address(escrow: Pubkey, asset_offered: Pubkey) -> Pubkey:
    """Vault: the record's associated holding account for the offered mint."""
    return get_associated_token_address(escrow, asset_offered)


def derive_holding_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Associated holding account of ``owner`` for ``mint``."""
    return get_associated_token_address(owner, mint)
