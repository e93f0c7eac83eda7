"""
Test helper utilities.

Contains shared utilities for tests:
- escrow_world: Fresh ledger with two funded parties and two mints
"""
