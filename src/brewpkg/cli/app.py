"""
Root Typer application for the ``brew-pkg`` CLI.

Homebrew runs any ``brew-<cmd>`` executable on PATH as ``brew <cmd>``, so
once installed the tool is reachable as both ``brew-pkg build wget`` and
``brew pkg build wget``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from brewpkg import __version__
from brewpkg.assembler import PkgbuildRunner
from brewpkg.builder import build_package
from brewpkg.core.errors import BrewPkgError
from brewpkg.core.logging import configure_logging, get_logger
from brewpkg.core.settings import get_settings
from brewpkg.metadata.homebrew import HomebrewMetadataProvider
from brewpkg.models import BuildOptions, OwnershipMode

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

app = typer.Typer(
    name="brew-pkg",
    help="Build a macOS installer package from an installed Homebrew formula.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_OWNERSHIP_VALUES = ", ".join(m.value for m in OwnershipMode)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"brew-pkg {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """brew-pkg: stage an installed formula and hand it to pkgbuild."""


@app.command("build")
def build(
    formula: str = typer.Argument(..., help="Name of an installed formula."),
    identifier_prefix: str | None = typer.Option(
        None,
        "--identifier-prefix",
        help="Prefix for the package identifier, e.g. 'org.nagios' gives 'org.nagios.nrpe'.",
    ),
    with_deps: bool = typer.Option(False, "--with-deps", help="Include all the formula's dependencies."),
    without_kegs: bool = typer.Option(False, "--without-kegs", help="Exclude the Cellar keg contents."),
    scripts: Path | None = typer.Option(
        None, "--scripts", help="Directory holding preinstall and/or postinstall scripts."
    ),
    ownership: str | None = typer.Option(
        None, "--ownership", help=f"pkgbuild --ownership value ({_OWNERSHIP_VALUES})."
    ),
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Where to write the .pkg."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines."),
) -> None:
    """Build an installer package from an already installed formula."""
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=True if json_logs else settings.json_logs,
    )

    options = BuildOptions(
        identifier_prefix=identifier_prefix or settings.identifier_prefix,
        with_deps=with_deps,
        without_kegs=without_kegs,
        scripts=scripts,
        ownership=ownership,
    )
    provider = HomebrewMetadataProvider(
        settings.brew_executable,
        prefix=settings.prefix,
        cellar=settings.cellar,
    )
    runner = PkgbuildRunner(settings.pkgbuild_executable, timeout=settings.pkgbuild_timeout)

    try:
        result = build_package(
            formula,
            options,
            provider,
            runner=runner,
            output_dir=output_dir or settings.output_dir,
        )
    except BrewPkgError as exc:
        logger.debug("build.failed", **exc.to_dict())
        err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {exc.message}")
        raise typer.Exit(code=1) from exc

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {warning}")
    console.print(f"[green]✓[/green] Built {result.package_path}")
    console.print(f"  identifier: {result.spec.identifier}")
    console.print(f"  version:    {result.spec.version}")
    console.print(f"  staged:     {', '.join(result.staged) or '(nothing)'}")
