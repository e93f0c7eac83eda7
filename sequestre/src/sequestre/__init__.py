"""
Sequestre - two-party token escrow program on an in-memory ledger.
"""

__version__ = "0.1.0"
