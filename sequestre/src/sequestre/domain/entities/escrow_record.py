"""
EscrowRecord entity - Domain model for one open trade.
"""

import hashlib
import struct
from dataclasses import dataclass
from enum import Enum

from solders.pubkey import Pubkey

from sequestre.domain.value_objects.program_address import (
    STATE_SEED,
    U64_MAX,
    ProgramAddress,
    seed_to_bytes,
)

ESCROW_DISCRIMINATOR = hashlib.sha256(b"account:Escrow").digest()[:8]

# seed, offering_party, asset_offered, asset_requested,
# amount_offered, amount_requested, address_proof
_RECORD_LAYOUT = struct.Struct("<Q32s32s32sQQB")

ESCROW_RECORD_SIZE = len(ESCROW_DISCRIMINATOR) + _RECORD_LAYOUT.size


class RecordState(str, Enum):
    """
    Escrow record lifecycle states.

    A closed record leaves no account behind, so an address that never
    held a record also reads as CLOSED.
    """

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class EscrowRecord:
    """
    EscrowRecord entity holding the terms of one trade.

    Business rules:
    - Amounts are non-zero u64 values
    - Offered and requested assets differ
    - The record lives at the address derived from its seed; the
      address_proof (bump) re-derives that address without a key
    - Immutable while open; destroyed by exchange or cancel
    """

    seed: int
    offering_party: Pubkey
    asset_offered: Pubkey
    asset_requested: Pubkey
    amount_offered: int
    amount_requested: int
    address_proof: int

    def __post_init__(self):
        """Validate record data after initialization."""
        seed_to_bytes(self.seed)

        for name in ("amount_offered", "amount_requested"):
            value = getattr(self, name)
            if not 0 < value <= U64_MAX:
                raise ValueError(f"{name} must be in 1..{U64_MAX}, got {value}")

        if not 0 <= self.address_proof <= 255:
            raise ValueError(f"address_proof must fit in u8, got {self.address_proof}")

    def program_address(self, program_id: Pubkey) -> ProgramAddress:
        """
        Re-derive the record address from stored seed and bump.

        Raises:
            ValueError: If seed and bump do not yield an off-curve address
        """
        try:
            address = Pubkey.create_program_address(self.signer_seeds(), program_id)
        except Exception as e:
            raise ValueError(f"Stored address proof is invalid: {e}") from e
        return ProgramAddress(
            address=address,
            bump=self.address_proof,
            seeds=(STATE_SEED, seed_to_bytes(self.seed)),
        )

    def signer_seeds(self) -> list[bytes]:
        """Seeds the program presents to sign for the record address."""
        return [STATE_SEED, seed_to_bytes(self.seed), bytes([self.address_proof])]

    def to_bytes(self) -> bytes:
        """Serialize with the account discriminator prefix."""
        return ESCROW_DISCRIMINATOR + _RECORD_LAYOUT.pack(
            self.seed,
            bytes(self.offering_party),
            bytes(self.asset_offered),
            bytes(self.asset_requested),
            self.amount_offered,
            self.amount_requested,
            self.address_proof,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "EscrowRecord":
        """
        Deserialize account data.

        Raises:
            ValueError: If size or discriminator do not match
        """
        if len(data) != ESCROW_RECORD_SIZE:
            raise ValueError(
                f"Escrow record must be {ESCROW_RECORD_SIZE} bytes, got {len(data)}"
            )
        if data[:8] != ESCROW_DISCRIMINATOR:
            raise ValueError("Account discriminator does not match Escrow")

        (
            seed,
            offering_party,
            asset_offered,
            asset_requested,
            amount_offered,
            amount_requested,
            address_proof,
        ) = _RECORD_LAYOUT.unpack(data[8:])

        return cls(
            seed=seed,
            offering_party=Pubkey.from_bytes(offering_party),
            asset_offered=Pubkey.from_bytes(asset_offered),
            asset_requested=Pubkey.from_bytes(asset_requested),
            amount_offered=amount_offered,
            amount_requested=amount_requested,
            address_proof=address_proof,
        )

    def to_dict(self) -> dict:
        """Convert entity to dictionary representation."""
        return {
            "seed": self.seed,
            "offering_party": str(self.offering_party),
            "asset_offered": str(self.asset_offered),
            "asset_requested": str(self.asset_requested),
            "amount_offered": self.amount_offered,
            "amount_requested": self.amount_requested,
            "address_proof": self.address_proof,
        }
