"""Generate GitHub Flavored Markdown HTML fixtures from GitHub's renderer.

This package exposes the CLI entry points used by ``gfm-fixtures`` and the
library function that renders a folder of markdown fixtures through a gist.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``create_gfm_fixtures``: Generate fixtures for a folder from Python.

Examples
--------
>>> from pathlib import Path
>>> from gfm_fixtures import create_gfm_fixtures
>>> create_gfm_fixtures(Path("test/fixtures"))  # doctest: +SKIP
[PosixPath('test/fixtures/heading.html'), ...]
"""

from __future__ import annotations

from .cli import app, main
from .config import FixtureOptions, KeepConfig
from .orchestrator import create_gfm_fixtures

__all__ = ["FixtureOptions", "KeepConfig", "app", "create_gfm_fixtures", "main"]
