"""Data models for brew-pkg.

Frozen dataclasses describe things that are read, never mutated
(``PackageRecord``, ``HomebrewLayout``, ``PackageSpec``). Pydantic models
hold user input that needs validation (``BuildOptions``).

Key Concepts:
    PackageRecord: Read-only view of one installed formula.
    HomebrewLayout: Prefix / Cellar / linked-kegs / opt locations.
    BuildOptions: What the user asked for (prefix, deps, kegs, scripts, ownership).
    OwnershipMode: The ``pkgbuild --ownership`` values.
    PackageSpec: Final instruction handed to ``pkgbuild``.
    BuildResult: What a build produced, plus recoverable warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from brewpkg.core.settings import DEFAULT_IDENTIFIER_PREFIX

QUALIFIER_SEPARATOR = "@"


@dataclass(frozen=True)
class ServicePlist:
    """A launchd service definition shipped by a formula."""

    name: str  # e.g. "homebrew.mxcl.nginx", without the ".plist" suffix
    content: str

    @property
    def filename(self) -> str:
        return f"{self.name}.plist"


@dataclass(frozen=True)
class PackageRecord:
    """An installed formula as seen by the staging engine."""

    name: str
    version: str
    installed_path: Path
    revision: int = 0
    dependencies: tuple[PackageRecord, ...] = ()
    linked_path: Path | None = None
    opt_path: Path | None = None
    service_plist: ServicePlist | None = None

    @property
    def effective_version(self) -> str:
        """``version`` with ``_<revision>`` appended when the revision is non-zero."""
        if self.revision:
            return f"{self.version}_{self.revision}"
        return self.version

    @property
    def base_name(self) -> str:
        """Name without its version qualifier: ``python@3.12`` -> ``python``."""
        return self.name.split(QUALIFIER_SEPARATOR)[0]

    @property
    def qualifier(self) -> str:
        """Version qualifier after the separator, ``""`` when there is none."""
        parts = self.name.split(QUALIFIER_SEPARATOR)
        return parts[1] if len(parts) > 1 else ""


@dataclass(frozen=True)
class HomebrewLayout:
    """Filesystem locations of a Homebrew installation."""

    prefix: Path
    cellar: Path

    @classmethod
    def from_prefix(cls, prefix: Path | str, cellar: Path | str | None = None) -> HomebrewLayout:
        prefix = Path(prefix)
        return cls(prefix=prefix, cellar=Path(cellar) if cellar else prefix / "Cellar")

    @property
    def linked_kegs(self) -> Path:
        return self.prefix / "var" / "homebrew" / "linked"

    @property
    def opt(self) -> Path:
        return self.prefix / "opt"

    def keg_path(self, name: str, version: str) -> Path:
        return self.cellar / name / version


class OwnershipMode(str, Enum):
    """Values accepted by ``pkgbuild --ownership``."""

    RECOMMENDED = "recommended"
    PRESERVE = "preserve"
    PRESERVE_OTHER = "preserve-other"


class BuildOptions(BaseModel):
    """User-supplied options for one build.

    ``ownership`` stays a raw string: an invalid value is dropped with a
    warning by the assembler rather than rejected here.

    Example::

        options = BuildOptions(identifier_prefix="org.nagios", with_deps=True)
    """

    identifier_prefix: str = Field(
        default=DEFAULT_IDENTIFIER_PREFIX,
        description="Prefix joined with the formula name to form the package identifier",
    )
    with_deps: bool = Field(default=False, description="Stage the recursive dependency closure")
    without_kegs: bool = Field(default=False, description="Skip copying Cellar kegs")
    scripts: Path | None = Field(default=None, description="Directory with preinstall/postinstall")
    ownership: str | None = Field(default=None, description="pkgbuild --ownership value")

    @field_validator("identifier_prefix")
    @classmethod
    def _chomp_trailing_dot(cls, value: str) -> str:
        return value[:-1] if value.endswith(".") else value

    def identifier_for(self, name: str) -> str:
        return f"{self.identifier_prefix}.{name}"


@dataclass(frozen=True)
class PackageSpec:
    """Everything ``pkgbuild`` needs to produce one installer package."""

    root: Path
    identifier: str
    version: str
    output: str
    scripts_path: Path | None = None
    ownership: OwnershipMode | None = None

    @staticmethod
    def output_name(name: str, version: str) -> str:
        return f"{name}-{version}.pkg"

    def to_args(self) -> list[str]:
        """Arguments for ``pkgbuild``, without the executable itself."""
        args = [
            "--quiet",
            "--root", str(self.root),
            "--identifier", self.identifier,
            "--version", self.version,
        ]
        if self.scripts_path is not None:
            args += ["--scripts", str(self.scripts_path)]
        if self.ownership is not None:
            args += ["--ownership", self.ownership.value]
        args.append(self.output)
        return args


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    package_path: Path
    spec: PackageSpec
    staged: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


__all__ = [
    "BuildOptions",
    "BuildResult",
    "HomebrewLayout",
    "OwnershipMode",
    "PackageRecord",
    "PackageSpec",
    "QUALIFIER_SEPARATOR",
    "ServicePlist",
]
