"""
End-to-end build: formula name in, ``.pkg`` out.

Ties the pieces together in the order a build runs::

    select_packages ──► StagingPlan ──► TreeStager + AuxiliaryStager (per record)
                                    └─► PackageAssembler ──► PkgbuildRunner
                                    └─► staging root removed (always)

Everything the build needs is passed in explicitly (provider, options,
runner); nothing is read from module-level state.
"""

from __future__ import annotations

import uuid
from pathlib import Path

from brewpkg.assembler import PackageAssembler, PkgbuildRunner
from brewpkg.core.logging import LogContext, get_logger
from brewpkg.metadata.base import MetadataProvider
from brewpkg.models import BuildOptions, BuildResult
from brewpkg.staging.auxiliary import AuxiliaryStager
from brewpkg.staging.plan import StagingPlan
from brewpkg.staging.selector import select_packages
from brewpkg.staging.tree import TreeStager

logger = get_logger(__name__)


def build_package(
    name: str,
    options: BuildOptions,
    provider: MetadataProvider,
    *,
    runner: PkgbuildRunner | None = None,
    output_dir: Path | None = None,
    tmp_dir: Path | None = None,
) -> BuildResult:
    """Build an installer package for the installed formula ``name``.

    Args:
        name: Formula name.
        options: Identifier prefix, dependency/keg flags, scripts, ownership.
        provider: Source of formula metadata and the Homebrew layout.
        runner: ``pkgbuild`` runner (default: ``pkgbuild`` on PATH, no timeout).
        output_dir: Directory the ``.pkg`` is written to (default: cwd).
        tmp_dir: Parent directory for the staging root (default: system tmp).

    Raises:
        PackageNotFoundError, PackageNotInstalledError: before anything is staged.
        StagingError: a copy into the staging root failed.
        PackagingToolError: ``pkgbuild`` failed.
    """
    runner = runner or PkgbuildRunner()
    run_id = uuid.uuid4().hex[:12]

    with LogContext(package=name, run_id=run_id):
        records = select_packages(provider, name, with_deps=options.with_deps)
        primary = records[0]
        layout = provider.layout()

        with StagingPlan(layout, options.identifier_prefix, tmp_dir=tmp_dir) as plan:
            tree = TreeStager(layout, plan, include_kegs=not options.without_kegs)
            aux = AuxiliaryStager(layout, plan)

            staged: list[str] = []
            for record in records:
                logger.info("staging.package", name=record.name, version=record.effective_version)
                if not tree.stage(record):
                    continue
                aux.stage(record)
                staged.append(record.name)

            assembler = PackageAssembler()
            spec = assembler.build_spec(
                primary,
                plan.root,
                options.identifier_prefix,
                scripts=options.scripts,
                ownership=options.ownership,
            )
            logger.info("package.building", output=spec.output, identifier=spec.identifier)
            package_path = runner.run(spec, cwd=output_dir)

        logger.info("package.built", path=str(package_path), staged=staged)
        return BuildResult(
            package_path=package_path,
            spec=spec,
            staged=staged,
            warnings=list(assembler.warnings),
        )
