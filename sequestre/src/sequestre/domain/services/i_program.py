"""
Program interface.

Anything the ledger can dispatch an instruction to.
"""

from abc import ABC, abstractmethod

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from sequestre.domain.value_objects.invoke_context import InvokeContext


class IProgram(ABC):
    """On-ledger program that processes instructions addressed to it."""

    @property
    @abstractmethod
    def program_id(self) -> Pubkey:
        """Address the program is deployed at."""

    @abstractmethod
    def process(self, ctx: InvokeContext, instruction: Instruction) -> None:
        """
        Execute one instruction.

        Any exception aborts the enclosing transaction.
        """
