"""
Application layer - escrow use cases.
"""
