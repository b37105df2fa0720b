"""
Homebrew-backed metadata provider.

Resolves formulae by shelling out to the ``brew`` CLI (subprocess), the same
way the deploy tooling drives ``docker``: no Ruby bridge, no parsing of
Homebrew internals beyond its documented JSON output.

Commands used:
    - ``brew --prefix`` / ``brew --cellar``  → installation layout
    - ``brew info --json=v2 <names...>``      → versions, revision, installed kegs
    - ``brew deps --topological <name>``      → recursive dependency order

Service descriptors are read from the keg: Homebrew writes a formula's
launchd definition to ``<keg>/homebrew.mxcl.<name>.plist``.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

from brewpkg.core.errors import MetadataError, PackageNotFoundError
from brewpkg.core.logging import get_logger
from brewpkg.models import HomebrewLayout, PackageRecord, ServicePlist

logger = get_logger(__name__)

PLIST_PREFIX = "homebrew.mxcl."


class BrewNotFoundError(MetadataError):
    """Raised when the ``brew`` executable is not available."""


class HomebrewMetadataProvider:
    """``MetadataProvider`` backed by the ``brew`` command line.

    Parameters
    ----------
    brew
        Name or path of the ``brew`` executable.
    prefix, cellar
        Explicit layout; when omitted they are asked from ``brew``.
    timeout
        Seconds to wait for each ``brew`` call.
    """

    def __init__(
        self,
        brew: str = "brew",
        *,
        prefix: Path | None = None,
        cellar: Path | None = None,
        timeout: float = 120,
    ) -> None:
        self._brew = brew
        self._timeout = timeout
        self._layout = HomebrewLayout.from_prefix(prefix, cellar) if prefix else None
        self._cellar_override = cellar
        self._info: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # MetadataProvider
    # ------------------------------------------------------------------

    def layout(self) -> HomebrewLayout:
        if self._layout is None:
            prefix = Path(self._run_brew(["--prefix"]).strip())
            cellar = self._cellar_override or Path(self._run_brew(["--cellar"]).strip())
            self._layout = HomebrewLayout(prefix=prefix, cellar=cellar)
            logger.debug("brew.layout", prefix=str(prefix), cellar=str(cellar))
        return self._layout

    def resolve(self, name: str) -> PackageRecord:
        info = self._formula_info([name]).get(name)
        if info is None:
            raise PackageNotFoundError(name)
        return self._to_record(info)

    def is_installed(self, record: PackageRecord) -> bool:
        info = self._info.get(record.name)
        if info is None:
            info = self._formula_info([record.name]).get(record.name, {})
        return bool(info.get("installed"))

    def recursive_dependencies(self, record: PackageRecord) -> list[PackageRecord]:
        output = self._run_brew(["deps", "--topological", record.name])
        names = [line.strip() for line in output.splitlines() if line.strip()]
        if not names:
            return []
        infos = self._formula_info(names)
        deps = []
        for dep in names:
            info = infos.get(dep)
            if info is None:
                raise PackageNotFoundError(dep)
            deps.append(self._to_record(info))
        return deps

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _to_record(self, info: dict[str, Any]) -> PackageRecord:
        layout = self.layout()
        name = info["name"]
        try:
            version = info["versions"]["stable"]
        except (KeyError, TypeError) as exc:
            raise MetadataError(f"brew info returned no stable version for {name}", cause=exc) from exc
        if version is None:
            raise MetadataError(f"brew info returned no stable version for {name}")
        revision = int(info.get("revision") or 0)
        pkg_version = f"{version}_{revision}" if revision else str(version)
        keg = layout.keg_path(name, pkg_version)

        plist_name = f"{PLIST_PREFIX}{name}"
        plist_file = keg / f"{plist_name}.plist"
        service = None
        if plist_file.is_file():
            service = ServicePlist(name=plist_name, content=plist_file.read_text(encoding="utf-8"))

        return PackageRecord(
            name=name,
            version=str(version),
            revision=revision,
            installed_path=keg,
            linked_path=layout.linked_kegs / name,
            opt_path=layout.opt / name,
            service_plist=service,
        )

    def _formula_info(self, names: list[str]) -> dict[str, dict[str, Any]]:
        """Return ``brew info`` JSON for ``names``, keyed by formula name."""
        missing = [n for n in names if n not in self._info]
        if missing:
            try:
                output = self._run_brew(["info", "--json=v2", *missing])
            except MetadataError as exc:
                if "No available formula" in str(exc) and len(missing) == 1:
                    raise PackageNotFoundError(missing[0], cause=exc) from exc
                raise
            try:
                payload = json.loads(output)
            except json.JSONDecodeError as exc:
                raise MetadataError("brew info returned invalid JSON", cause=exc) from exc
            formulae = payload.get("formulae", [])
            for formula in formulae:
                self._info[formula["name"]] = formula
                aliases = formula.get("aliases") or []
                oldnames = formula.get("oldnames") or []
                for other in [formula.get("full_name"), *aliases, *oldnames]:
                    if other:
                        self._info.setdefault(other, formula)
            # brew also accepts names it reports under another key (tap-qualified names, renames).
            if len(missing) == 1 and len(formulae) == 1:
                self._info.setdefault(missing[0], formulae[0])
        return {n: self._info[n] for n in names if n in self._info}

    def _run_brew(self, args: list[str]) -> str:
        """Run a brew CLI command and return its stdout."""
        brew = shutil.which(self._brew)
        if brew is None:
            raise BrewNotFoundError(f"Homebrew executable '{self._brew}' not found on PATH.")
        cmd = [brew, *args]
        logger.debug("brew.exec", cmd=" ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise MetadataError(
                f"brew command timed out after {self._timeout}s: {' '.join(args)}", cause=exc
            ) from exc
        except OSError as exc:
            raise MetadataError(f"Could not run brew: {exc}", cause=exc) from exc
        if result.returncode != 0:
            raise MetadataError(
                f"brew command failed (exit {result.returncode}): "
                f"{' '.join(args)}\n{result.stderr.strip()}",
                context={"returncode": result.returncode},
            )
        return result.stdout
