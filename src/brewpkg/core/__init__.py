"""Ambient primitives shared by every brew-pkg module: errors, logging, settings."""

from brewpkg.core.errors import (
    BrewPkgError,
    ConfigError,
    ErrorCategory,
    MetadataError,
    PackageNotFoundError,
    PackageNotInstalledError,
    PackagingError,
    PackagingToolError,
    StagingError,
)

__all__ = [
    "BrewPkgError",
    "ConfigError",
    "ErrorCategory",
    "MetadataError",
    "PackageNotFoundError",
    "PackageNotInstalledError",
    "PackagingError",
    "PackagingToolError",
    "StagingError",
]
