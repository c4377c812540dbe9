"""Configured repositories: persisted list and manifest scanning."""
