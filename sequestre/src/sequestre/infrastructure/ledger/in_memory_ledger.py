"""
In-memory host ledger.

Holds account state and executes signed transactions against registered
programs. Each transaction is applied under a single global lock and
either commits every account mutation or none of them.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.domain.entities.account import Account
from sequestre.domain.exceptions import (
    InsufficientFundsError,
    InvalidSignatureError,
    MissingSignerError,
    ProgramNotFoundError,
    SequestreException,
    ValidationError,
)
from sequestre.domain.services.i_program import IProgram
from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import SYSTEM_PROGRAM_ID
from sequestre.infrastructure.ledger.rent import Rent

DEFAULT_LAMPORTS_PER_SIGNATURE = 5000


class InMemoryLedger:
    """
    Account store with atomic, totally ordered transactions.

    Commit model:
    - ``send_transaction`` holds the ledger lock for the whole transaction,
      so transactions are applied one at a time in a single global order
    - State is snapshotted before the first instruction and restored if
      any instruction raises; the exception is then re-raised unchanged
    - The fee is charged inside the same atomic section, so a rejected
      transaction costs nothing
    """

    def __init__(
        self,
        rent: Optional[Rent] = None,
        lamports_per_signature: int = DEFAULT_LAMPORTS_PER_SIGNATURE,
        reporter: Optional[SystemReporter] = None,
    ) -> None:
        """
        Initialize ledger.

        Args:
            rent: Storage deposit schedule
            lamports_per_signature: Fee charged per transaction signature
            reporter: SystemReporter for ledger logs
        """
        self.rent = rent or Rent()
        self.lamports_per_signature = lamports_per_signature
        self.reporter = reporter or SystemReporter(name="ledger")

        self._accounts: Dict[Pubkey, Account] = {}
        self._programs: Dict[Pubkey, IProgram] = {}
        self._lock = threading.RLock()
        self._signatures: List[str] = []

    # ================================================================
    # Account state
    # ================================================================

    def get_account(self, address: Pubkey) -> Optional[Account]:
        """Copy of the account at ``address``, or None."""
        with self._lock:
            account = self._accounts.get(address)
            return account.copy() if account else None

    def get_account_info(self, address: Pubkey) -> Optional[Account]:
        """Alias matching the RPC method name."""
        return self.get_account(address)

    def put_account(self, address: Pubkey, account: Account) -> None:
        with self._lock:
            self._accounts[address] = account.copy()

    def remove_account(self, address: Pubkey) -> Optional[Account]:
        with self._lock:
            return self._accounts.pop(address, None)

    def get_balance(self, address: Pubkey) -> int:
        """Lamport balance (0 for a missing account)."""
        account = self.get_account(address)
        return account.lamports if account else 0

    def airdrop(self, address: Pubkey, lamports: int) -> int:
        """
        Credit lamports to a wallet, creating it if needed.

        Returns:
            New balance
        """
        if lamports <= 0:
            raise ValidationError("lamports", "airdrop amount must be positive")

        with self._lock:
            account = self._accounts.get(address)
            if account is None:
                account = Account(lamports=0, owner=SYSTEM_PROGRAM_ID)
                self._accounts[address] = account
            account.lamports += lamports

            self.reporter.debug(
                f"Airdropped {lamports} lamports to {address}",
                context="Ledger",
            )
            return account.lamports

    # ================================================================
    # Programs
    # ================================================================

    def register_program(self, program: IProgram) -> None:
        with self._lock:
            self._programs[program.program_id] = program
        self.reporter.info(
            f"Program registered: {program.program_id}", context="Ledger"
        )

    def get_program(self, program_id: Pubkey) -> Optional[IProgram]:
        return self._programs.get(program_id)

    # ================================================================
    # Transactions
    # ================================================================

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a block against a snapshot; roll back if it raises.

        Re-entrant: a nested block rolls back only its own changes.
        """
        with self._lock:
            snapshot = {k: v.copy() for k, v in self._accounts.items()}
            try:
                yield
            except BaseException:
                self._accounts = snapshot
                raise

    def send_transaction(
        self,
        instructions: Sequence[Instruction],
        signers: Sequence[Keypair],
    ) -> str:
        """
        Sign, verify and execute a transaction.

        Args:
            instructions: Instructions executed in order
            signers: Keypairs signing the message; the first pays the fee

        Returns:
            Transaction signature (base58 of the fee payer's signature)

        Raises:
            SequestreException: Whatever an instruction raised; no state
                change is kept
        """
        if not instructions:
            raise ValidationError("instructions", "transaction has no instructions")
        if not signers:
            raise ValidationError("signers", "transaction needs a fee payer")

        fee_payer = signers[0].pubkey()
        message_bytes = bytes(Message(list(instructions), fee_payer))

        # One signature per distinct key; repeats add no fee.
        signer_keys = set()
        signatures = []
        for keypair in signers:
            pubkey = keypair.pubkey()
            if pubkey in signer_keys:
                continue
            signature = keypair.sign_message(message_bytes)
            if not signature.verify(pubkey, message_bytes):
                raise InvalidSignatureError(str(pubkey))
            signer_keys.add(pubkey)
            signatures.append(signature)

        tx_signature = str(signatures[0])
        fee = self.lamports_per_signature * len(signatures)

        with self.atomic():
            try:
                self._charge_fee(fee_payer, fee)

                for index, instruction in enumerate(instructions):
                    self._execute(index, instruction, frozenset(signer_keys))

            except SequestreException as e:
                self.reporter.warning(
                    f"Transaction {tx_signature[:16]}... rejected: {e.code}",
                    context="Ledger",
                )
                raise

            self._signatures.append(tx_signature)

        self.reporter.debug(
            f"Transaction {tx_signature[:16]}... committed "
            f"({len(instructions)} instruction(s), fee {fee})",
            context="Ledger",
        )
        return tx_signature

    def _charge_fee(self, fee_payer: Pubkey, fee: int) -> None:
        if fee == 0:
            return
        account = self._accounts.get(fee_payer)
        available = account.lamports if account else 0
        if account is None or available < fee:
            raise InsufficientFundsError(str(fee_payer), fee, available)
        account.lamports -= fee

    def _execute(
        self, index: int, instruction: Instruction, signers: frozenset
    ) -> None:
        program = self._programs.get(instruction.program_id)
        if program is None:
            raise ProgramNotFoundError(str(instruction.program_id))

        for position, meta in enumerate(instruction.accounts):
            if meta.is_signer and meta.pubkey not in signers:
                raise MissingSignerError(
                    f"instruction {index} account {position}", str(meta.pubkey)
                )

        ctx = InvokeContext(program_id=instruction.program_id, signers=signers)
        program.process(ctx, instruction)

    @property
    def transaction_count(self) -> int:
        return len(self._signatures)
