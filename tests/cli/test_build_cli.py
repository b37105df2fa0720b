"""Tests for the ``brew-pkg`` Typer application."""

from __future__ import annotations

import importlib
import runpy
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from brewpkg import __version__
from brewpkg.cli.app import app
from brewpkg.core.errors import PackageNotInstalledError, PackagingToolError
from brewpkg.core.settings import BrewPkgSettings
from brewpkg.models import BuildResult, PackageSpec

runner = CliRunner()


def _result(tmp_path: Path, warnings=None) -> BuildResult:
    spec = PackageSpec(
        root=tmp_path / "root",
        identifier="org.example.foo",
        version="1.2.3",
        output="foo-1.2.3.pkg",
    )
    return BuildResult(
        package_path=tmp_path / "foo-1.2.3.pkg",
        spec=spec,
        staged=["foo"],
        warnings=list(warnings or []),
    )


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    value = BrewPkgSettings(identifier_prefix="org.homebrew", output_dir=tmp_path)
    with patch("brewpkg.cli.app.get_settings", return_value=value):
        yield value


@pytest.fixture
def build():
    with patch("brewpkg.cli.app.build_package") as mock:
        yield mock


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"brew-pkg {__version__}" in result.output


class TestBuildCommand:
    def test_minimal(self, settings, build, tmp_path):
        build.return_value = _result(tmp_path)

        result = runner.invoke(app, ["build", "foo"])

        assert result.exit_code == 0, result.output
        name, options, provider = build.call_args.args
        assert name == "foo"
        assert options.identifier_prefix == "org.homebrew"
        assert options.with_deps is False
        assert options.without_kegs is False
        assert options.scripts is None
        assert options.ownership is None
        assert build.call_args.kwargs["output_dir"] == tmp_path
        assert "org.example.foo" in result.stdout

    def test_all_flags(self, settings, build, tmp_path):
        build.return_value = _result(tmp_path)
        scripts = tmp_path / "scripts"

        result = runner.invoke(
            app,
            [
                "build",
                "--identifier-prefix", "org.example.",
                "--with-deps",
                "--without-kegs",
                "--scripts", str(scripts),
                "--ownership", "preserve",
                "foo",
            ],
        )

        assert result.exit_code == 0, result.output
        options = build.call_args.args[1]
        assert options.identifier_prefix == "org.example"
        assert options.with_deps is True
        assert options.without_kegs is True
        assert options.scripts == scripts
        assert options.ownership == "preserve"

    def test_settings_identifier_prefix(self, settings, build, tmp_path):
        settings.identifier_prefix = "org.fromenv"
        build.return_value = _result(tmp_path)

        runner.invoke(app, ["build", "foo"])

        assert build.call_args.args[1].identifier_prefix == "org.fromenv"

    def test_runner_uses_settings(self, settings, build, tmp_path):
        settings.pkgbuild_timeout = 60
        build.return_value = _result(tmp_path)

        runner.invoke(app, ["build", "foo"])

        pkgbuild = build.call_args.kwargs["runner"]
        assert pkgbuild.executable == "pkgbuild"
        assert pkgbuild.timeout == 60

    def test_warnings_do_not_fail(self, settings, build, tmp_path):
        build.return_value = _result(tmp_path, warnings=["bogus is not a valid value"])

        result = runner.invoke(app, ["build", "--ownership", "bogus", "foo"])

        assert result.exit_code == 0

    def test_not_installed_exits_nonzero(self, settings, build):
        build.side_effect = PackageNotInstalledError("foo")

        result = runner.invoke(app, ["build", "foo"])

        assert result.exit_code == 1

    def test_pkgbuild_failure_exits_nonzero(self, settings, build):
        build.side_effect = PackagingToolError("pkgbuild failed (exit 1)", returncode=1)

        result = runner.invoke(app, ["build", "foo"])

        assert result.exit_code == 1

    def test_formula_required(self, settings, build):
        result = runner.invoke(app, ["build"])

        assert result.exit_code != 0
        build.assert_not_called()


class TestModuleEntryPoint:
    def test_import_does_not_run_app(self):
        sys.modules.pop("brewpkg.__main__", None)
        with patch("brewpkg.cli.app.app") as fake_app:
            importlib.import_module("brewpkg.__main__")
        fake_app.assert_not_called()

    def test_run_as_module(self):
        sys.modules.pop("brewpkg.__main__", None)
        with patch("brewpkg.cli.app.app") as fake_app:
            runpy.run_module("brewpkg", run_name="__main__")
        fake_app.assert_called_once_with(prog_name="brew-pkg")
