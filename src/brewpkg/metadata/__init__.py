"""Formula metadata sources for the staging engine."""

from brewpkg.metadata.base import MetadataProvider
from brewpkg.metadata.homebrew import BrewNotFoundError, HomebrewMetadataProvider

__all__ = ["BrewNotFoundError", "HomebrewMetadataProvider", "MetadataProvider"]
