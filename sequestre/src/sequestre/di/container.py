"""
Dependency Injection Container for Sequestre.

Wires settings, reporter, the in-memory ledger and its programs, the
escrow record repository, the escrow use cases and the escrow program.
"""

from typing import Optional

from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.application.use_cases.cancel_escrow import CancelEscrow
from sequestre.application.use_cases.exchange_escrow import ExchangeEscrow
from sequestre.application.use_cases.initialize_escrow import InitializeEscrow
from sequestre.config.settings import Settings, get_settings
from sequestre.domain.repositories.i_escrow_record_repository import (
    IEscrowRecordRepository,
)
from sequestre.infrastructure.ledger.faucet import Faucet
from sequestre.infrastructure.ledger.in_memory_ledger import InMemoryLedger
from sequestre.infrastructure.ledger.rent import Rent
from sequestre.infrastructure.ledger.system_program import SystemProgram
from sequestre.infrastructure.ledger.token_program import TokenProgram
from sequestre.infrastructure.persistence.escrow_record_repository import (
    EscrowRecordRepository,
)
from sequestre.program.escrow_program import EscrowProgram


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of the ledger, its services and the
    escrow program. Call ``initialize()`` to register the program with
    the ledger before sending transactions.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize container with None instances."""
        self._settings = settings

        # Infrastructure
        self._reporter: Optional[SystemReporter] = None
        self._ledger: Optional[InMemoryLedger] = None
        self._system_program: Optional[SystemProgram] = None
        self._token_program: Optional[TokenProgram] = None
        self._faucet: Optional[Faucet] = None

        # Repositories
        self._escrow_records: Optional[IEscrowRecordRepository] = None

        # Use Cases
        self._initialize_escrow: Optional[InitializeEscrow] = None
        self._exchange_escrow: Optional[ExchangeEscrow] = None
        self._cancel_escrow: Optional[CancelEscrow] = None

        # Program
        self._escrow_program: Optional[EscrowProgram] = None
        self._initialized = False

    def initialize(self) -> "DIContainer":
        """Register the escrow program with the ledger."""
        if not self._initialized:
            self.ledger.register_program(self.escrow_program)
            self._initialized = True
        return self

    # ================================================================
    # Infrastructure Getters
    # ================================================================

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def program_id(self) -> Pubkey:
        return self.settings.escrow_program_id

    @property
    def reporter(self) -> SystemReporter:
        """Get reporter configured from LOG_* settings."""
        if self._reporter is None:
            self._reporter = SystemReporter.from_level_name(
                name="sequestre",
                level_name=self.settings.LOG_LEVEL,
                log_dir=self.settings.LOG_DIR,
                verbose=self.settings.LOG_VERBOSE,
            )
        return self._reporter

    @property
    def ledger(self) -> InMemoryLedger:
        """Get ledger instance."""
        if self._ledger is None:
            self._ledger = InMemoryLedger(
                rent=Rent(
                    lamports_per_byte_year=self.settings.RENT_LAMPORTS_PER_BYTE_YEAR,
                    exemption_threshold=self.settings.RENT_EXEMPTION_THRESHOLD,
                ),
                lamports_per_signature=self.settings.LAMPORTS_PER_SIGNATURE,
                reporter=self.reporter,
            )
        return self._ledger

    @property
    def system_program(self) -> SystemProgram:
        if self._system_program is None:
            self._system_program = SystemProgram(self.ledger)
        return self._system_program

    @property
    def token_program(self) -> TokenProgram:
        if self._token_program is None:
            self._token_program = TokenProgram(
                self.system_program, reporter=self.reporter
            )
        return self._token_program

    @property
    def faucet(self) -> Faucet:
        if self._faucet is None:
            self._faucet = Faucet(
                self.ledger, self.token_program, reporter=self.reporter
            )
        return self._faucet

    # ================================================================
    # Repository Getters
    # ================================================================

    @property
    def escrow_records(self) -> IEscrowRecordRepository:
        if self._escrow_records is None:
            self._escrow_records = EscrowRecordRepository(
                self.system_program, self.program_id
            )
        return self._escrow_records

    # ================================================================
    # Use Case Getters
    # ================================================================

    def _handler_dependencies(self) -> dict:
        return {
            "escrow_records": self.escrow_records,
            "token_service": self.token_program,
            "account_service": self.system_program,
            "program_id": self.program_id,
            "reporter": self.reporter,
        }

    @property
    def initialize_escrow(self) -> InitializeEscrow:
        if self._initialize_escrow is None:
            self._initialize_escrow = InitializeEscrow(**self._handler_dependencies())
        return self._initialize_escrow

    @property
    def exchange_escrow(self) -> ExchangeEscrow:
        if self._exchange_escrow is None:
            self._exchange_escrow = ExchangeEscrow(**self._handler_dependencies())
        return self._exchange_escrow

    @property
    def cancel_escrow(self) -> CancelEscrow:
        if self._cancel_escrow is None:
            self._cancel_escrow = CancelEscrow(**self._handler_dependencies())
        return self._cancel_escrow

    # ================================================================
    # Program Getter
    # ================================================================

    @property
    def escrow_program(self) -> EscrowProgram:
        if self._escrow_program is None:
            self._escrow_program = EscrowProgram(
                program_id=self.program_id,
                initialize_escrow=self.initialize_escrow,
                exchange_escrow=self.exchange_escrow,
                cancel_escrow=self.cancel_escrow,
                reporter=self.reporter,
            )
        return self._escrow_program


_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance."""
    global _container
    if _container is None:
        _container = DIContainer().initialize()
    return _container


def reset_container() -> None:
    """Drop the global container (for testing)."""
    global _container
    _container = None
