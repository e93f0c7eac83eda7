"""Sequestre component tests."""
