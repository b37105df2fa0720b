"""
Package assembler: turn a populated staging root into a ``.pkg``.

Validates the optional ``--scripts`` and ``--ownership`` inputs, builds the
``pkgbuild`` argument list and runs ``pkgbuild`` synchronously.

Invalid optional inputs never fail a build: they are logged as warnings,
recorded on the assembler, and left out of the ``pkgbuild`` invocation.
A non-zero ``pkgbuild`` exit is fatal (``PackagingToolError``).
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from brewpkg.core.errors import PackagingToolError, StagingError
from brewpkg.core.logging import get_logger
from brewpkg.models import OwnershipMode, PackageRecord, PackageSpec

logger = get_logger(__name__)

SCRIPT_NAMES = ("preinstall", "postinstall")
SCRIPT_MODE = 0o755


class PackageAssembler:
    """Resolves build options into a ``PackageSpec``.

    Example::

        assembler = PackageAssembler()
        spec = assembler.build_spec(record, plan.root, "org.example", scripts=path)
        assembler.warnings   # recoverable problems found along the way
    """

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def resolve_scripts(self, scripts_path: Path | None) -> Path | None:
        """Make ``preinstall``/``postinstall`` executable; ``None`` if neither exists."""
        if scripts_path is None:
            return None
        found = False
        if scripts_path.is_dir():
            for script_name in SCRIPT_NAMES:
                script = scripts_path / script_name
                if not script.is_file():
                    continue
                try:
                    script.chmod(SCRIPT_MODE)
                except OSError as exc:
                    raise StagingError(f"Could not chmod {script}: {exc}", cause=exc) from exc
                logger.info("assembler.script_added", script=script_name, path=str(script))
                found = True
        if not found:
            self._warn(f"No scripts found in {scripts_path}", "assembler.scripts_missing", path=str(scripts_path))
            return None
        # pkgbuild runs in the output directory, not the caller's cwd.
        return scripts_path.absolute()

    def resolve_ownership(self, value: str | None) -> OwnershipMode | None:
        """Map ``value`` to an ``OwnershipMode``; invalid values are dropped."""
        if value is None:
            return None
        try:
            mode = OwnershipMode(value)
        except ValueError:
            self._warn(
                f"{value} is not a valid value for pkgbuild --ownership option, ignoring",
                "assembler.ownership_invalid",
                value=value,
            )
            return None
        logger.info("assembler.ownership", value=mode.value)
        return mode

    def build_spec(
        self,
        record: PackageRecord,
        root: Path,
        identifier_prefix: str,
        *,
        scripts: Path | None = None,
        ownership: str | None = None,
    ) -> PackageSpec:
        version = record.effective_version
        return PackageSpec(
            root=root,
            identifier=f"{identifier_prefix}.{record.name}",
            version=version,
            output=PackageSpec.output_name(record.name, version),
            scripts_path=self.resolve_scripts(scripts),
            ownership=self.resolve_ownership(ownership),
        )

    def _warn(self, message: str, event: str, **fields: str) -> None:
        self.warnings.append(message)
        logger.warning(event, message=message, **fields)


class PkgbuildRunner:
    """Runs ``pkgbuild`` for a ``PackageSpec``.

    Parameters
    ----------
    executable
        Name or path of ``pkgbuild``.
    timeout
        Seconds before a hung ``pkgbuild`` is killed; ``None`` waits forever.
    """

    def __init__(self, executable: str = "pkgbuild", timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def command(self, spec: PackageSpec) -> list[str]:
        return [self.executable, *spec.to_args()]

    def run(self, spec: PackageSpec, cwd: Path | None = None) -> Path:
        """Build the package; returns the path of the written ``.pkg``."""
        if shutil.which(self.executable) is None:
            raise PackagingToolError(f"{self.executable} not found on PATH. It ships with the Xcode command line tools.")
        cmd = self.command(spec)
        logger.info("pkgbuild.exec", cmd=" ".join(cmd), cwd=str(cwd) if cwd else None)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise PackagingToolError(
                f"{self.executable} timed out after {self.timeout}s", cause=exc
            ) from exc
        except OSError as exc:
            raise PackagingToolError(f"Could not run {self.executable}: {exc}", cause=exc) from exc

        if result.returncode != 0:
            raise PackagingToolError(
                f"{self.executable} failed (exit {result.returncode}): {result.stderr.strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return (cwd or Path.cwd()) / spec.output
