"""
Tree stager: mirror a keg's footprint in the prefix into the staging root.

Homebrew links a keg into the prefix by symlinking its files into shared
directories (``bin``, ``lib``, ``share`` …). Rebuilding that footprint for an
installer means walking the keg's top-level directories and, for every child,
asking what the *prefix* holds at the same relative path:

    ┌──────────────────────────────────┬──────────────────────────────────┐
    │ <prefix>/<dir>/<child> is ...    │ staged as                        │
    ├──────────────────────────────────┼──────────────────────────────────┤
    │ a directory (or link to one)     │ empty directory (mkdir -p)       │
    │ a symlink                        │ the symlink itself, unresolved   │
    │ a regular file, or absent        │ nothing                          │
    └──────────────────────────────────┴──────────────────────────────────┘

Shared directories are recreated empty; their contents belong to many
formulae and only this keg's links are staged inside them. Regular files that exist solely inside the keg are not mirrored into the
prefix tree. They still ship inside the Cellar copy unless kegs are excluded.

Only the whitelisted top-level directories are considered: ``bin etc sbin
include share lib`` by exact name and anything ending in ``Frameworks``.
Everything else in a keg (``.brew``, ``libexec``, ``INSTALL_RECEIPT.json`` …)
is Homebrew bookkeeping or private to the keg.

Finally the whole keg is copied to ``<prefix_root>/Cellar/<name>/<version>``
so Homebrew recognises the package once installed.
"""

from __future__ import annotations

from pathlib import Path

from brewpkg.core.logging import get_logger
from brewpkg.models import HomebrewLayout, PackageRecord
from brewpkg.staging import fs
from brewpkg.staging.plan import StagingPlan

logger = get_logger(__name__)

WHITELISTED_DIRS = frozenset({"bin", "etc", "sbin", "include", "share", "lib"})
FRAMEWORKS_SUFFIX = "Frameworks"

CELLAR_DIR = "Cellar"


def is_whitelisted(dirname: str) -> bool:
    """True for keg directories that are mirrored into the prefix tree."""
    return dirname in WHITELISTED_DIRS or dirname.endswith(FRAMEWORKS_SUFFIX)


class TreeStager:
    """Stages the prefix footprint and the Cellar keg of one package."""

    def __init__(
        self,
        layout: HomebrewLayout,
        plan: StagingPlan,
        *,
        include_kegs: bool = True,
    ) -> None:
        self.layout = layout
        self.plan = plan
        self.include_kegs = include_kegs

    def stage(self, record: PackageRecord) -> bool:
        """Stage ``record``; returns False when its keg is not on disk."""
        keg = record.installed_path
        if not keg.is_dir():
            logger.debug("staging.keg_missing", package=record.name, keg=str(keg))
            return False

        for subdir in self.selected_dirs(keg):
            logger.info("staging.copy_dir", package=record.name, dir=str(subdir))
            self._stage_dir(subdir)

        if self.include_kegs:
            self._stage_keg(record)
        return True

    @staticmethod
    def selected_dirs(keg: Path) -> list[Path]:
        """Immediate, whitelisted subdirectories of ``keg``."""
        return [child for child in fs.list_dir(keg) if child.is_dir() and is_whitelisted(child.name)]

    def _stage_dir(self, subdir: Path) -> None:
        rel_dir = subdir.name
        for child in fs.list_dir(subdir):
            in_prefix = self.layout.prefix / rel_dir / child.name
            staged = self.plan.prefix_root / rel_dir / child.name
            if in_prefix.is_dir():
                fs.ensure_dir(staged)
            elif in_prefix.is_symlink():
                fs.copy_link(in_prefix, staged)

    def _stage_keg(self, record: PackageRecord) -> None:
        dest_parent = fs.ensure_dir(self.plan.prefix_root / CELLAR_DIR / record.name)
        logger.info("staging.keg", package=record.name, keg=str(record.installed_path))
        fs.copy_tree(record.installed_path, dest_parent / record.installed_path.name)
