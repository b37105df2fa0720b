"""
Filesystem primitives used by the stagers.

Everything here preserves symlinks instead of following them (the moral
equivalent of ``rsync -a``) and converts ``OSError`` into ``StagingError``
so a failed copy aborts the build with a descriptive message.
"""

from __future__ import annotations

import glob
import os
import shutil
from pathlib import Path

from brewpkg.core.errors import StagingError


def _fail(action: str, path: Path, exc: OSError) -> StagingError:
    return StagingError(f"Failed to {action} {path}: {exc}", context={"path": path}, cause=exc)


def ensure_dir(path: Path) -> Path:
    """``mkdir -p``: create ``path`` and missing ancestors, no error if present."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise _fail("create directory", path, exc) from exc
    return path


def _clear(dest: Path) -> None:
    # A directory at dest is merged into, anything else is replaced.
    if dest.is_symlink() or dest.is_file():
        dest.unlink()


def copy_link(src: Path, dest: Path) -> None:
    """Recreate the symlink ``src`` at ``dest`` with the same target, unresolved."""
    ensure_dir(dest.parent)
    try:
        _clear(dest)
        os.symlink(os.readlink(src), dest)
    except OSError as exc:
        raise _fail("copy symlink", src, exc) from exc


def copy_tree(src: Path, dest: Path) -> None:
    """Copy the directory ``src`` into ``dest`` recursively, keeping symlinks as links.

    Entries already present under ``dest`` are overwritten, so copying the
    same tree twice leaves the same result as copying it once.
    """
    try:
        _clear(dest)
        dest.mkdir(parents=True, exist_ok=True)
        children = sorted(src.iterdir())
    except OSError as exc:
        raise _fail("copy directory", src, exc) from exc
    for child in children:
        copy_entry(child, dest / child.name)
    try:
        shutil.copystat(src, dest, follow_symlinks=False)
    except OSError as exc:
        raise _fail("copy directory", src, exc) from exc


def copy_entry(src: Path, dest: Path) -> None:
    """Copy a symlink, directory or regular file ``src`` to ``dest``."""
    if src.is_symlink():
        copy_link(src, dest)
    elif src.is_dir():
        copy_tree(src, dest)
    else:
        ensure_dir(dest.parent)
        try:
            _clear(dest)
            shutil.copy2(src, dest, follow_symlinks=False)
        except OSError as exc:
            raise _fail("copy file", src, exc) from exc


def list_dir(path: Path) -> list[Path]:
    """Children of ``path`` in name order."""
    try:
        return sorted(path.iterdir())
    except OSError as exc:
        raise _fail("list", path, exc) from exc


def write_text(path: Path, content: str) -> None:
    """Write ``content`` verbatim to ``path``, creating parent directories."""
    ensure_dir(path.parent)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise _fail("write", path, exc) from exc


def glob_entries(directory: Path, substring: str) -> list[Path]:
    """Entries of ``directory`` whose name contains ``substring`` (``*substring*``)."""
    pattern = os.path.join(glob.escape(str(directory)), f"*{glob.escape(substring)}*")
    return [Path(p) for p in sorted(glob.glob(pattern))]


def remove_tree(path: Path) -> None:
    """``rm -rf``: remove ``path`` if it exists."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise _fail("remove", path, exc) from exc


__all__ = [
    "copy_entry",
    "copy_link",
    "copy_tree",
    "ensure_dir",
    "glob_entries",
    "list_dir",
    "remove_tree",
    "write_text",
]
