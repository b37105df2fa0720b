"""Directory selector: which packages a build stages."""

from __future__ import annotations

import dataclasses

from brewpkg.core.errors import PackageNotInstalledError
from brewpkg.core.logging import get_logger
from brewpkg.metadata.base import MetadataProvider
from brewpkg.models import PackageRecord

logger = get_logger(__name__)


def select_packages(
    provider: MetadataProvider,
    name: str,
    *,
    with_deps: bool = False,
) -> list[PackageRecord]:
    """Return the primary record followed by its recursive dependencies.

    Dependencies are only looked up when ``with_deps`` is set and keep the
    provider's order. Duplicates are passed through; staging is idempotent
    per path.

    Raises:
        PackageNotFoundError: ``name`` is not a known formula.
        PackageNotInstalledError: the formula has no installed version.
    """
    primary = provider.resolve(name)
    if not provider.is_installed(primary):
        raise PackageNotInstalledError(primary.name)

    if not with_deps:
        return [primary]

    deps = provider.recursive_dependencies(primary)
    primary = dataclasses.replace(primary, dependencies=tuple(deps))
    logger.info(
        "selector.dependencies",
        package=primary.name,
        count=len(deps),
        dependencies=[d.name for d in deps],
    )
    return [primary, *deps]
