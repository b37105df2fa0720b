"""
brew-pkg - build macOS installer packages from installed Homebrew formulae.

Stages an installed formula (and optionally its dependency closure) into a
temporary tree mirroring the Homebrew prefix, then runs ``pkgbuild`` on it.

Example:
    >>> from brewpkg import BuildOptions, HomebrewMetadataProvider, build_package
    >>> result = build_package("wget", BuildOptions(identifier_prefix="org.example"),
    ...                        HomebrewMetadataProvider())
    >>> result.package_path.name
    'wget-1.24.5.pkg'
"""

__version__ = "0.1.0"

from brewpkg.builder import build_package  # noqa: E402
from brewpkg.metadata import HomebrewMetadataProvider, MetadataProvider  # noqa: E402
from brewpkg.models import (  # noqa: E402
    BuildOptions,
    BuildResult,
    HomebrewLayout,
    OwnershipMode,
    PackageRecord,
    PackageSpec,
    ServicePlist,
)

__all__ = [
    "BuildOptions",
    "BuildResult",
    "HomebrewLayout",
    "HomebrewMetadataProvider",
    "MetadataProvider",
    "OwnershipMode",
    "PackageRecord",
    "PackageSpec",
    "ServicePlist",
    "__version__",
    "build_package",
]
