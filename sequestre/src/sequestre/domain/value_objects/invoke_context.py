"""
InvokeContext value object - who is executing, and who has signed.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Sequence

from solders.pubkey import Pubkey

from sequestre.domain.exceptions import MissingSignerError


@dataclass(frozen=True)
class InvokeContext:
    """
    Execution context of one instruction.

    Business rules:
    - ``signers`` holds the keys whose signatures verified on the transaction
    - A program may add its own derived addresses as signers by presenting
      their seeds (``with_signer_seeds``); no private key is involved
    """

    program_id: Pubkey
    signers: FrozenSet[Pubkey] = field(default_factory=frozenset)

    def require_signer(self, key: Pubkey, account_name: str) -> None:
        """
        Raises:
            MissingSignerError: If ``key`` did not sign
        """
        if key not in self.signers:
            raise MissingSignerError(account_name, str(key))

    def with_signer_seeds(self, *signer_seeds: Sequence[bytes]) -> "InvokeContext":
        """
        Return a context where the addresses derived from ``signer_seeds``
        under this program are also signers.
        """
        derived = {
            Pubkey.create_program_address(list(seeds), self.program_id)
            for seeds in signer_seeds
        }
        return InvokeContext(
            program_id=self.program_id,
            signers=self.signers | frozenset(derived),
        )
