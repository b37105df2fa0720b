"""Shared test support helpers (fake Homebrew prefix, in-memory provider)."""
