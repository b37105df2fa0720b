"""
CLI layer for brew-pkg.

Handles terminal transport only: argument parsing, coloured output and exit
codes. Building happens in :mod:`brewpkg.builder`.

Entry point::

    brew-pkg --help
"""

from brewpkg.cli.app import app

__all__ = ["app"]
