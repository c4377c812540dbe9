"""Outdated dependency report rendering."""
