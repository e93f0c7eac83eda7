"""
Sequestre CLI - address derivation and a local escrow walkthrough.

Provides commands for:
- Deriving the escrow record and vault addresses for a seed
- Running a full initialize -> exchange (or cancel) on a fresh ledger

All output via SystemReporter.
"""

import argparse
import random
import sys
from typing import Dict, Optional, Sequence

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from shared.reporter.system_reporter import SystemReporter

from sequestre.application.dto.escrow_accounts import EscrowAccounts
from sequestre.config.settings import load_config
from sequestre.di.container import DIContainer
from sequestre.domain.exceptions import SequestreException
from sequestre.domain.value_objects.program_address import (
    U64_MAX,
    derive_escrow_address,
    derive_vault_address,
)
from sequestre.infrastructure.ledger.faucet import LAMPORTS_PER_SOL
from sequestre.program.instructions import (
    build_cancel_instruction,
    build_exchange_instruction,
    build_initialize_instruction,
)

DEMO_DECIMALS = 6
DEMO_SUPPLY = 1_000_000_000
DEMO_AMOUNT = 1_000_000


def derive(
    seed: int,
    program_id: Pubkey,
    mint: Optional[Pubkey],
    reporter: SystemReporter,
) -> int:
    """
    Print the record address (and vault, when a mint is given) for a seed.

    Returns:
        Exit code (0)
    """
    pda = derive_escrow_address(seed, program_id)

    reporter.info(f"Program: {program_id}", context="CLI", verbose_level=0)
    reporter.info(f"Seed:    {seed}", context="CLI", verbose_level=0)
    reporter.info(f"Escrow:  {pda.address}", context="CLI", verbose_level=0)
    reporter.info(f"Bump:    {pda.bump}", context="CLI", verbose_level=0)

    if mint is not None:
        vault = derive_vault_address(pda.address, mint)
        reporter.info(f"Vault:   {vault}", context="CLI", verbose_level=0)

    return 0


def run_demo(
    container: DIContainer, cancel: bool = False, seed: Optional[int] = None
) -> Dict[str, str]:
    """
    Run one escrow lifecycle on the container's ledger.

    Both parties receive ``DEMO_SUPPLY`` of their asset; the offering party
    escrows ``DEMO_AMOUNT`` of asset A for ``DEMO_AMOUNT`` of asset B.

    Returns:
        Final token balances keyed by holding role
    """
    ledger = container.ledger
    faucet = container.faucet
    tokens = container.token_program
    reporter = container.reporter
    program_id = container.program_id

    authority = Keypair()
    offering_party = Keypair()
    counterparty = Keypair()
    for wallet in (authority, offering_party, counterparty):
        faucet.fund(wallet.pubkey(), LAMPORTS_PER_SOL)

    asset_a = faucet.create_mint(authority, authority, DEMO_DECIMALS)
    asset_b = faucet.create_mint(authority, authority, DEMO_DECIMALS)
    faucet.mint_to_owner(
        authority, asset_a, authority, offering_party.pubkey(), DEMO_SUPPLY
    )
    faucet.mint_to_owner(
        authority, asset_b, authority, counterparty.pubkey(), DEMO_SUPPLY
    )

    if seed is None:
        seed = random.randint(0, U64_MAX)
    accounts = EscrowAccounts.derive(
        program_id,
        seed,
        offering_party.pubkey(),
        counterparty.pubkey(),
        asset_a,
        asset_b,
    )

    signature = ledger.send_transaction(
        [
            build_initialize_instruction(
                program_id, accounts, seed, DEMO_AMOUNT, DEMO_AMOUNT
            )
        ],
        [offering_party],
    )
    reporter.info(f"Initialize: {signature}", context="Demo", verbose_level=0)
    reporter.info(
        f"Vault {accounts.vault} holds "
        f"{tokens.get_balance(accounts.vault).amount}",
        context="Demo",
        verbose_level=0,
    )

    if cancel:
        instruction = build_cancel_instruction(program_id, accounts.for_cancel())
        signature = ledger.send_transaction([instruction], [offering_party])
        reporter.info(f"Cancel: {signature}", context="Demo", verbose_level=0)
    else:
        instruction = build_exchange_instruction(program_id, accounts)
        signature = ledger.send_transaction([instruction], [counterparty])
        reporter.info(f"Exchange: {signature}", context="Demo", verbose_level=0)

    balances = {}
    for role in (
        "offering_party_offered_account",
        "offering_party_requested_account",
        "counterparty_offered_account",
        "counterparty_requested_account",
    ):
        holding = getattr(accounts, role)
        if tokens.get_token_account(holding) is None:
            balances[role] = "0"
        else:
            balances[role] = tokens.get_balance(holding).amount
        reporter.info(f"{role}: {balances[role]}", context="Demo", verbose_level=0)

    return balances


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="sequestre",
        description="Two-party token escrow on a local ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sequestre derive --seed 42                  # Record address for seed 42
  sequestre derive --seed 42 --mint <MINT>    # Also print the vault
  sequestre demo                              # Initialize then exchange
  sequestre demo --cancel                     # Initialize then cancel
        """,
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to run", required=True
    )

    derive_parser = subparsers.add_parser("derive", help="Derive escrow addresses")
    derive_parser.add_argument("--seed", type=int, required=True, help="u64 seed")
    derive_parser.add_argument(
        "--program-id", help="Escrow program id (default: ESCROW_PROGRAM_ID)"
    )
    derive_parser.add_argument("--mint", help="Offered mint, to derive the vault")

    demo_parser = subparsers.add_parser("demo", help="Run a full escrow lifecycle")
    demo_parser.add_argument(
        "--cancel", action="store_true", help="Cancel instead of exchange"
    )
    demo_parser.add_argument("--seed", type=int, help="u64 seed (default: random)")

    parser.add_argument("--env", help="Config environment (default: $ENV)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    settings = load_config(env=args.env)
    if args.verbose:
        settings.LOG_LEVEL = "DEBUG"
        settings.LOG_VERBOSE = 3

    cli_reporter = SystemReporter.from_level_name(
        name="sequestre",
        level_name=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        verbose=settings.LOG_VERBOSE,
    )

    try:
        if args.command == "derive":
            program_id = (
                Pubkey.from_string(args.program_id)
                if args.program_id
                else settings.escrow_program_id
            )
            mint = Pubkey.from_string(args.mint) if args.mint else None
            return derive(args.seed, program_id, mint, cli_reporter)

        elif args.command == "demo":
            container = DIContainer(settings).initialize()
            run_demo(container, cancel=args.cancel, seed=args.seed)
            return 0

    except SequestreException as e:
        cli_reporter.error(f"{e.code}: {e.message}", context="CLI")
        return 1

    except ValueError as e:
        cli_reporter.error(f"Invalid argument: {e}", context="CLI")
        return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
