"""
Token state entities - holding accounts and mints, packed like SPL Token.
"""

import struct
from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey

# mint, owner, amount, delegate option, delegate, state, is_native option,
# is_native, delegated_amount, close_authority option, close_authority
_ACCOUNT_LAYOUT = struct.Struct("<32s32sQI32sBIQQI32s")

# mint_authority option, mint_authority, supply, decimals, is_initialized,
# freeze_authority option, freeze_authority
_MINT_LAYOUT = struct.Struct("<I32sQBBI32s")

TOKEN_ACCOUNT_SIZE = _ACCOUNT_LAYOUT.size  # 165
MINT_SIZE = _MINT_LAYOUT.size  # 82

ACCOUNT_STATE_INITIALIZED = 1

_NO_KEY = bytes(32)


def _pack_option(key: Optional[Pubkey]) -> tuple[int, bytes]:
    return (1, bytes(key)) if key is not None else (0, _NO_KEY)


def _unpack_option(tag: int, raw: bytes) -> Optional[Pubkey]:
    return Pubkey.from_bytes(raw) if tag else None


@dataclass(frozen=True)
class TokenAccount:
    """
    Holding account: a balance of one mint for one owner.

    The owner is the authority that may move or close the balance; for a
    vault it is a program-derived address.
    """

    mint: Pubkey
    owner: Pubkey
    amount: int = 0
    close_authority: Optional[Pubkey] = None

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Token amount cannot be negative")

    def with_amount(self, amount: int) -> "TokenAccount":
        return TokenAccount(
            mint=self.mint,
            owner=self.owner,
            amount=amount,
            close_authority=self.close_authority,
        )

    def to_bytes(self) -> bytes:
        close_tag, close_key = _pack_option(self.close_authority)
        return _ACCOUNT_LAYOUT.pack(
            bytes(self.mint),
            bytes(self.owner),
            self.amount,
            0,
            _NO_KEY,
            ACCOUNT_STATE_INITIALIZED,
            0,
            0,
            0,
            close_tag,
            close_key,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "TokenAccount":
        if len(data) != TOKEN_ACCOUNT_SIZE:
            raise ValueError(
                f"Token account must be {TOKEN_ACCOUNT_SIZE} bytes, got {len(data)}"
            )
        (mint, owner, amount, _, _, state, _, _, _, close_tag, close_key) = (
            _ACCOUNT_LAYOUT.unpack(data)
        )
        if state != ACCOUNT_STATE_INITIALIZED:
            raise ValueError("Token account is not initialized")
        return cls(
            mint=Pubkey.from_bytes(mint),
            owner=Pubkey.from_bytes(owner),
            amount=amount,
            close_authority=_unpack_option(close_tag, close_key),
        )


@dataclass(frozen=True)
class Mint:
    """Fungible asset definition: supply, decimals and minting authority."""

    decimals: int
    mint_authority: Optional[Pubkey] = None
    supply: int = 0
    freeze_authority: Optional[Pubkey] = None

    def with_supply(self, supply: int) -> "Mint":
        return Mint(
            decimals=self.decimals,
            mint_authority=self.mint_authority,
            supply=supply,
            freeze_authority=self.freeze_authority,
        )

    def to_bytes(self) -> bytes:
        auth_tag, auth_key = _pack_option(self.mint_authority)
        freeze_tag, freeze_key = _pack_option(self.freeze_authority)
        return _MINT_LAYOUT.pack(
            auth_tag,
            auth_key,
            self.supply,
            self.decimals,
            1,
            freeze_tag,
            freeze_key,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Mint":
        if len(data) != MINT_SIZE:
            raise ValueError(f"Mint must be {MINT_SIZE} bytes, got {len(data)}")
        (auth_tag, auth_key, supply, decimals, initialized, freeze_tag, freeze_key) = (
            _MINT_LAYOUT.unpack(data)
        )
        if not initialized:
            raise ValueError("Mint is not initialized")
        return cls(
            decimals=decimals,
            mint_authority=_unpack_option(auth_tag, auth_key),
            supply=supply,
            freeze_authority=_unpack_option(freeze_tag, freeze_key),
        )
