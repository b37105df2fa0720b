"""
Auxiliary stager: Homebrew state that lives outside a keg.

Four independent steps, each skipped silently when its input is absent:

- linked-keg markers from ``<prefix>/var/homebrew/linked``
- the shared site directory of runtimes that keep state in ``<prefix>/lib``
  (Python's ``lib/pythonX.Y``)
- opt symlinks from ``<prefix>/opt``
- the launchd service plist, written to ``Library/LaunchDaemons``

Linked-keg and opt entries are matched with ``*<base name>*``, so
``python@3.12`` also picks up ``python-tk@3.12``. Over-inclusion is accepted.
"""

from __future__ import annotations

from pathlib import Path

from brewpkg.core.logging import get_logger
from brewpkg.models import HomebrewLayout, PackageRecord
from brewpkg.staging import fs
from brewpkg.staging.plan import StagingPlan

logger = get_logger(__name__)

LINKED_KEGS_DIR = Path("var", "homebrew", "linked")
OPT_DIR = Path("opt")
LAUNCH_DAEMONS_DIR = Path("Library", "LaunchDaemons")

# Runtimes whose site directory is global in <prefix>/lib instead of the keg.
SHARED_LIB_RUNTIMES = frozenset({"python"})


class AuxiliaryStager:
    """Stages linked-keg links, runtime site dirs, opt links and service plists."""

    def __init__(self, layout: HomebrewLayout, plan: StagingPlan) -> None:
        self.layout = layout
        self.plan = plan

    def stage(self, record: PackageRecord) -> None:
        self.stage_linked_kegs(record)
        self.stage_runtime_lib(record)
        self.stage_opt_links(record)
        self.stage_service_plist(record)

    def stage_linked_kegs(self, record: PackageRecord) -> list[Path]:
        if record.linked_path is None or not _lexists(record.linked_path):
            return []
        dest_dir = fs.ensure_dir(self.plan.prefix_root / LINKED_KEGS_DIR)
        return self._copy_matches(self.layout.linked_kegs, record.base_name, dest_dir)

    def stage_runtime_lib(self, record: PackageRecord) -> Path | None:
        if record.base_name not in SHARED_LIB_RUNTIMES:
            return None
        dirname = f"{record.base_name}{record.qualifier}"
        source = self.layout.prefix / "lib" / dirname
        if not source.is_dir():
            logger.debug("staging.runtime_lib_missing", package=record.name, path=str(source))
            return None
        dest = self.plan.prefix_root / "lib" / dirname
        logger.info("staging.runtime_lib", package=record.name, path=str(source))
        fs.copy_tree(source, dest)
        return dest

    def stage_opt_links(self, record: PackageRecord) -> list[Path]:
        # exists() follows the link: a dangling opt link means nothing to stage
        if record.opt_path is None or not record.opt_path.exists():
            return []
        dest_dir = fs.ensure_dir(self.plan.prefix_root / OPT_DIR)
        return self._copy_matches(self.layout.opt, record.base_name, dest_dir)

    def stage_service_plist(self, record: PackageRecord) -> Path | None:
        plist = record.service_plist
        if plist is None:
            return None
        dest = self.plan.prefix_root / LAUNCH_DAEMONS_DIR / plist.filename
        logger.info("staging.service_plist", package=record.name, plist=plist.filename, dest=str(dest))
        fs.write_text(dest, plist.content)
        return dest

    @staticmethod
    def _copy_matches(source_dir: Path, base_name: str, dest_dir: Path) -> list[Path]:
        staged = []
        for entry in fs.glob_entries(source_dir, base_name):
            dest = dest_dir / entry.name
            fs.copy_entry(entry, dest)
            staged.append(dest)
        return staged


def _lexists(path: Path) -> bool:
    return path.is_symlink() or path.exists()
