"""
Faucet - wallet funding and mint setup for local ledgers.

Used by the demo CLI and by tests to reach a known starting state:
funded wallets, mints, and holding accounts with initial balances.
"""

from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from shared.reporter import SystemReporter

from sequestre.domain.value_objects.invoke_context import InvokeContext
from sequestre.domain.value_objects.program_address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from sequestre.infrastructure.ledger.in_memory_ledger import InMemoryLedger
from sequestre.infrastructure.ledger.token_program import TokenProgram

LAMPORTS_PER_SOL = 1_000_000_000


class Faucet:
    """Setup helper; every call commits atomically on the ledger."""

    def __init__(
        self,
        ledger: InMemoryLedger,
        token_program: TokenProgram,
        reporter: Optional[SystemReporter] = None,
    ):
        self.ledger = ledger
        self.token_program = token_program
        self.reporter = reporter or ledger.reporter

    def fund(self, wallet: Pubkey, lamports: int = LAMPORTS_PER_SOL // 100) -> int:
        """Airdrop lamports (default 0.01 SOL)."""
        return self.ledger.airdrop(wallet, lamports)

    def create_mint(
        self, payer: Keypair, authority: Keypair, decimals: int = 6
    ) -> Pubkey:
        """
        Create a new mint controlled by ``authority``.

        Returns:
            Mint address
        """
        mint = Keypair()
        ctx = InvokeContext(
            program_id=TOKEN_PROGRAM_ID,
            signers=frozenset({payer.pubkey(), mint.pubkey(), authority.pubkey()}),
        )
        with self.ledger.atomic():
            self.token_program.create_mint(
                ctx, payer.pubkey(), mint.pubkey(), decimals, authority.pubkey()
            )

        self.reporter.info(
            f"Mint {mint.pubkey()} created ({decimals} decimals)", context="Faucet"
        )
        return mint.pubkey()

    def create_holding_account(
        self, payer: Keypair, owner: Pubkey, mint: Pubkey
    ) -> Pubkey:
        """Create (idempotently) the associated holding account."""
        ctx = InvokeContext(
            program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
            signers=frozenset({payer.pubkey()}),
        )
        with self.ledger.atomic():
            return self.token_program.create_associated_token_account(
                ctx, payer.pubkey(), owner, mint, idempotent=True
            )

    def mint_to_owner(
        self,
        payer: Keypair,
        mint: Pubkey,
        authority: Keypair,
        owner: Pubkey,
        amount: int,
    ) -> Pubkey:
        """
        Create ``owner``'s holding account if needed and mint into it.

        Returns:
            Holding account address
        """
        ctx = InvokeContext(
            program_id=TOKEN_PROGRAM_ID,
            signers=frozenset({payer.pubkey(), authority.pubkey()}),
        )
        with self.ledger.atomic():
            holding = self.token_program.create_associated_token_account(
                ctx, payer.pubkey(), owner, mint, idempotent=True
            )
            self.token_program.mint_to(ctx, mint, holding, amount)

        self.reporter.info(f"Minted {amount} to {holding}", context="Faucet")
        return holding
