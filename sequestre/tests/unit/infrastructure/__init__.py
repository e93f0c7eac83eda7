"""Unit tests for the infrastructure layer."""
