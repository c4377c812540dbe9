"""Shared helpers used across the CLI and library modules."""
