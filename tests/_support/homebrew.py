"""
Fake Homebrew installation for tests.

``FakeHomebrew`` builds a real prefix/Cellar tree under ``tmp_path`` and
doubles as an in-memory ``MetadataProvider``, so the staging engine can be
exercised against actual files, directories and symlinks without ``brew``.

Usage::

    brew = FakeHomebrew(tmp_path / "homebrew")
    wget = brew.install("wget", "1.21.4", files=["bin/wget", "share/man/man1/wget.1"])
    brew.layout().prefix / "bin" / "wget"     # symlink into the keg
"""

from __future__ import annotations

import os
from pathlib import Path

from brewpkg.core.errors import PackageNotFoundError
from brewpkg.models import HomebrewLayout, PackageRecord, ServicePlist
from brewpkg.staging.tree import is_whitelisted


class FakeHomebrew:
    """A throwaway Homebrew prefix plus the metadata describing it."""

    def __init__(self, prefix: Path) -> None:
        self._layout = HomebrewLayout.from_prefix(prefix)
        self._layout.cellar.mkdir(parents=True, exist_ok=True)
        self.records: dict[str, PackageRecord] = {}
        self.installed: set[str] = set()
        self.deps: dict[str, list[str]] = {}

    # ------------------------------------------------------------------
    # MetadataProvider
    # ------------------------------------------------------------------

    def layout(self) -> HomebrewLayout:
        return self._layout

    def resolve(self, name: str) -> PackageRecord:
        try:
            return self.records[name]
        except KeyError:
            raise PackageNotFoundError(name) from None

    def is_installed(self, record: PackageRecord) -> bool:
        return record.name in self.installed

    def recursive_dependencies(self, record: PackageRecord) -> list[PackageRecord]:
        return [self.records[name] for name in self.deps.get(record.name, [])]

    # ------------------------------------------------------------------
    # Tree builders
    # ------------------------------------------------------------------

    def register(self, name: str, version: str, *, revision: int = 0, plist: str | None = None) -> PackageRecord:
        """Declare a formula without putting anything on disk."""
        effective = f"{version}_{revision}" if revision else version
        record = PackageRecord(
            name=name,
            version=version,
            revision=revision,
            installed_path=self._layout.keg_path(name, effective),
            linked_path=self._layout.linked_kegs / name,
            opt_path=self._layout.opt / name,
            service_plist=ServicePlist(f"homebrew.mxcl.{name}", plist) if plist is not None else None,
        )
        self.records[name] = record
        return record

    def install(
        self,
        name: str,
        version: str,
        *,
        revision: int = 0,
        files: tuple[str, ...] | list[str] = (),
        link: bool = True,
        linked_marker: bool = True,
        opt_link: bool = True,
        plist: str | None = None,
        depends_on: list[str] | None = None,
    ) -> PackageRecord:
        """Create a keg with ``files`` and optionally link it like ``brew link``."""
        record = self.register(name, version, revision=revision, plist=plist)
        keg = record.installed_path
        keg.mkdir(parents=True, exist_ok=True)
        (keg / "INSTALL_RECEIPT.json").write_text("{}")
        for rel in files:
            path = keg / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"{name} {rel}\n")
        if link:
            self._link_keg(keg, files)
        if linked_marker:
            self.symlink(self._layout.linked_kegs / name, keg)
        if opt_link:
            self.symlink(self._layout.opt / name, keg)
        self.installed.add(name)
        if depends_on:
            self.deps[name] = list(depends_on)
        return record

    def _link_keg(self, keg: Path, files: tuple[str, ...] | list[str]) -> None:
        for rel in files:
            parts = Path(rel).parts
            if len(parts) < 2 or not is_whitelisted(parts[0]):
                continue
            target = self.prefix_path(parts[0], parts[1])
            if len(parts) == 2:
                self.symlink(target, keg / parts[0] / parts[1])
            else:
                target.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Prefix helpers
    # ------------------------------------------------------------------

    def prefix_path(self, *parts: str) -> Path:
        return self._layout.prefix.joinpath(*parts)

    @staticmethod
    def symlink(link: Path, target: Path) -> Path:
        """Create ``link`` pointing at ``target`` with a relative path, as brew does."""
        link.parent.mkdir(parents=True, exist_ok=True)
        if link.is_symlink():
            link.unlink()
        os.symlink(os.path.relpath(target, link.parent), link)
        return link
