"""
Metadata provider protocol.

The staging engine never talks to Homebrew directly. It receives package
records and the installation layout through an object implementing
``MetadataProvider``; ``HomebrewMetadataProvider`` is the production
implementation and tests substitute an in-memory one.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from brewpkg.models import HomebrewLayout, PackageRecord


@runtime_checkable
class MetadataProvider(Protocol):
    """Read-only source of formula metadata."""

    def layout(self) -> HomebrewLayout:
        """Prefix and Cellar of the installation the records live in."""
        ...

    def resolve(self, name: str) -> PackageRecord:
        """Return the record for ``name``.

        Raises:
            PackageNotFoundError: if ``name`` is not a known formula.
        """
        ...

    def is_installed(self, record: PackageRecord) -> bool:
        """True when any version of the formula is installed."""
        ...

    def recursive_dependencies(self, record: PackageRecord) -> list[PackageRecord]:
        """Recursive dependencies of ``record`` in dependency-graph order."""
        ...
