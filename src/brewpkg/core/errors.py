"""
Structured error types for brew-pkg.

Every fatal condition of a build surfaces as a ``BrewPkgError`` subclass so
the CLI can turn it into a single descriptive message and a non-zero exit
code. Recoverable conditions (missing install scripts, an invalid ownership
value) are never raised; they are logged as warnings and recorded on the
build result instead.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                       BrewPkgError                         │
        │               (category, context, cause)                   │
        ├───────────────────────────────────────────────────────────┤
        │  MetadataError          StagingError     PackagingError    │
        │  (METADATA)             (STAGING)        (PACKAGING)       │
        │       │                                       │            │
        │  PackageNotFoundError                  PackagingToolError  │
        │  PackageNotInstalledError                                  │
        │                                                            │
        │  ConfigError (CONFIG)                                      │
        └───────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Retry a failed copy or pkgbuild invocation
    ✅ DO: Raise once and let the staging root teardown run

    ❌ DON'T: Swallow the original ``OSError`` / ``CalledProcessError``
    ✅ DO: Pass it as ``cause=`` so the chain is preserved

Tags:
    error-handling, exception-hierarchy, brew-pkg
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for log routing and CLI messages."""

    METADATA = "METADATA"  # brew lookups, formula resolution
    STAGING = "STAGING"  # filesystem copies into the staging root
    PACKAGING = "PACKAGING"  # pkgbuild invocation
    CONFIG = "CONFIG"  # invalid settings or options
    INTERNAL = "INTERNAL"


class BrewPkgError(Exception):
    """Base exception for all brew-pkg errors.

    Carries a category, an optional chained cause and a free-form context
    dict (package name, paths, exit codes) that ends up in structured logs.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = dict(context or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BrewPkgError:
        """Attach extra context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = {k: str(v) for k, v in self.context.items()}
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# METADATA ERRORS
# =============================================================================


class MetadataError(BrewPkgError):
    """Formula metadata could not be obtained (brew failed or returned junk)."""

    default_category = ErrorCategory.METADATA


class PackageNotFoundError(MetadataError):
    """The package name does not resolve to a known formula."""

    def __init__(self, name: str, *, cause: Exception | None = None):
        super().__init__(
            f"No available formula with the name '{name}'.",
            context={"package": name},
            cause=cause,
        )
        self.name = name


class PackageNotInstalledError(MetadataError):
    """The primary package is known but has no installed version."""

    def __init__(self, name: str):
        super().__init__(
            f"{name} is not installed. First install it with 'brew install {name}'.",
            context={"package": name},
        )
        self.name = name


# =============================================================================
# STAGING / PACKAGING ERRORS
# =============================================================================


class StagingError(BrewPkgError):
    """A filesystem operation into the staging root failed."""

    default_category = ErrorCategory.STAGING


class PackagingError(BrewPkgError):
    """The installer package could not be assembled."""

    default_category = ErrorCategory.PACKAGING


class PackagingToolError(PackagingError):
    """``pkgbuild`` exited non-zero, could not be started, or timed out."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        cause: Exception | None = None,
    ):
        super().__init__(
            message,
            context={"returncode": returncode} if returncode is not None else None,
            cause=cause,
        )
        self.returncode = returncode
        self.stderr = stderr


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(BrewPkgError):
    """Invalid settings or command-line options."""

    default_category = ErrorCategory.CONFIG


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
