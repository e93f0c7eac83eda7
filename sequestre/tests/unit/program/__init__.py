"""Unit tests for the program layer."""
