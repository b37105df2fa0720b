"""
Staging root lifecycle.

A ``StagingPlan`` owns one fresh temporary directory for the duration of a
build. The directory is created on ``__enter__`` and removed recursively on
``__exit__``, whether the build succeeded, a copy failed, or ``pkgbuild``
exited non-zero.

Layout::

    <root>/                        ← passed to pkgbuild --root
    └── <prefix, re-rooted>/       ← prefix_root, e.g. <root>/usr/local
        ├── bin/ lib/ share/ ...
        ├── Cellar/<name>/<version>/
        ├── opt/ var/homebrew/linked/
        └── Library/LaunchDaemons/
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from types import TracebackType

from brewpkg.core.errors import StagingError
from brewpkg.core.logging import get_logger
from brewpkg.core.settings import DEFAULT_IDENTIFIER_PREFIX
from brewpkg.models import HomebrewLayout
from brewpkg.staging import fs

logger = get_logger(__name__)


class StagingPlan:
    """Scoped staging root for one build.

    Example::

        with StagingPlan(layout, "org.example") as plan:
            TreeStager(layout, plan).stage(record)
            runner.run(spec_for(plan.root))
        # plan.root no longer exists here
    """

    def __init__(
        self,
        layout: HomebrewLayout,
        identifier_prefix: str = DEFAULT_IDENTIFIER_PREFIX,
        *,
        tmp_dir: Path | None = None,
    ) -> None:
        self.layout = layout
        self.identifier_prefix = identifier_prefix
        self._tmp_dir = tmp_dir
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise StagingError("Staging root is not active; use StagingPlan as a context manager")
        return self._root

    @property
    def prefix_root(self) -> Path:
        """``root`` + the Homebrew prefix; every staged path lives under here."""
        prefix = self.layout.prefix
        return self.root / prefix.relative_to(prefix.anchor)

    def __enter__(self) -> StagingPlan:
        try:
            self._root = Path(tempfile.mkdtemp(prefix="brew-pkg", dir=self._tmp_dir))
        except OSError as exc:
            raise StagingError(f"Could not create staging root: {exc}", cause=exc) from exc
        logger.info("staging.root_created", root=str(self._root), prefix=str(self.layout.prefix))
        try:
            fs.ensure_dir(self.prefix_root)
        except StagingError:
            self._teardown(suppress=True)
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._teardown(suppress=exc_type is not None)

    def _teardown(self, *, suppress: bool) -> None:
        root, self._root = self._root, None
        if root is None:
            return
        try:
            fs.remove_tree(root)
        except StagingError as err:
            # Never mask the exception that is already propagating.
            if not suppress:
                raise
            logger.error("staging.teardown_failed", root=str(root), error=str(err))
            return
        logger.debug("staging.root_removed", root=str(root))
