"""Environment-driven settings for brew-pkg.

``BrewPkgSettings`` holds the defaults the CLI falls back to when a flag is
not given. Every field can be overridden through a ``BREW_PKG_*`` environment
variable or a ``.env`` file in the working directory.

Precedence: CLI flags > environment / ``.env`` > field defaults.

Fields
──────
identifier_prefix   : Prefix for the package identifier (``org.homebrew``)
prefix              : Homebrew prefix; ``None`` asks ``brew --prefix``
cellar              : Homebrew Cellar; ``None`` asks ``brew --cellar``
brew_executable     : ``brew`` binary used by the metadata provider
pkgbuild_executable : ``pkgbuild`` binary used by the assembler
pkgbuild_timeout    : Seconds before a hung ``pkgbuild`` is killed (None = wait)
output_dir          : Directory the ``.pkg`` file is written to
log_level           : structlog level
json_logs           : Force JSON (True) or console (False) logs; None = auto

Examples:
    >>> import os
    >>> os.environ["BREW_PKG_IDENTIFIER_PREFIX"] = "org.example"
    >>> get_settings(_force_reload=True).identifier_prefix
    'org.example'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IDENTIFIER_PREFIX = "org.homebrew"


class BrewPkgSettings(BaseSettings):
    """Settings shared by the CLI and the programmatic API."""

    model_config = SettingsConfigDict(
        env_prefix="BREW_PKG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Packaging ────────────────────────────────────────────────
    identifier_prefix: str = DEFAULT_IDENTIFIER_PREFIX
    pkgbuild_executable: str = "pkgbuild"
    pkgbuild_timeout: float | None = Field(default=None, gt=0)
    output_dir: Path = Field(default_factory=Path.cwd)

    # ── Homebrew ─────────────────────────────────────────────────
    brew_executable: str = "brew"
    prefix: Path | None = None
    cellar: Path | None = None

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def _cached_settings() -> BrewPkgSettings:
    return BrewPkgSettings()


def get_settings(*, _force_reload: bool = False) -> BrewPkgSettings:
    """Return the process-wide settings, optionally re-reading the environment."""
    if _force_reload:
        _cached_settings.cache_clear()
    return _cached_settings()


__all__ = ["DEFAULT_IDENTIFIER_PREFIX", "BrewPkgSettings", "get_settings"]
