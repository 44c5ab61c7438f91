"""Cyclopts CLI entrypoint for generating GFM fixtures.

The ``gfm-fixtures`` console script defined here renders every markdown file
below a directory through GitHub and writes the cleaned HTML next to it.
Typical usage involves running ``gfm-fixtures generate test/fixtures`` with a
``GH_TOKEN`` that has the ``gist`` scope, and ``UPDATE=1`` (or ``--force``)
to refresh fixtures that already exist.

Examples
--------
Generate the missing fixtures in a folder:

>>> from gfm_fixtures.cli import main
>>> main()  # doctest: +SKIP

Regenerate everything, keeping heading anchors:

>>> from gfm_fixtures.cli import app
>>> app(
...     ["generate", "test/fixtures", "--force", "--keep", "heading"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import FixtureOptions, KeepConfig, load_fixture_config
from .gists import DEFAULT_API_BASE
from .orchestrator import FixtureGenerator

LOG_FORMAT = "[%(levelname)s] %(message)s"

app = App(
    name="gfm-fixtures",
    config=cyclopts.config.Env("INPUT_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_options(
    config: Path | None,
    keep: list[str] | None,
    *,
    control_pictures: bool,
    force: bool | None,
) -> FixtureOptions:
    """Merge the optional config file with command-line overrides."""
    options = load_fixture_config(config) if config else FixtureOptions()
    return dc.replace(
        options,
        keep=options.keep.merged(KeepConfig.from_names(keep or [])),
        control_pictures=options.control_pictures or control_pictures,
        force=force,
    )


@app.command(help="Render markdown fixtures through GitHub and write cleaned HTML.")
def generate(
    root: typ.Annotated[
        Path, Parameter(help="Folder holding *.md fixtures", env_var="INPUT_ROOT")
    ],
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to a fixture options file", env_var="INPUT_CONFIG"),
    ] = None,
    keep: typ.Annotated[
        list[str] | None,
        Parameter(
            help=f"Keep a part of GitHub's output ({', '.join(KeepConfig.names())})",
            env_var="INPUT_KEEP",
        ),
    ] = None,
    control_pictures: typ.Annotated[
        bool,
        Parameter(
            help="Replace control pictures with control characters",
            env_var="INPUT_CONTROL_PICTURES",
        ),
    ] = False,
    force: typ.Annotated[
        bool | None,
        Parameter(
            help="Regenerate existing fixtures (defaults to the UPDATE env flag)",
            env_var="INPUT_FORCE",
        ),
    ] = None,
    github_api_url: typ.Annotated[
        str,
        Parameter(
            help="Override the GitHub API base URL", env_var="INPUT_GITHUB_API_URL"
        ),
    ] = DEFAULT_API_BASE,
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug output", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Generate the fixtures below ``root`` that are missing or stale.

    Parameters
    ----------
    root : Path
        Folder searched recursively for ``*.md`` files.
    config : Path or None, optional
        YAML file with ``keep``, ``control_pictures`` and ``formatter``
        settings (overridable via ``INPUT_CONFIG``).
    keep : list[str] or None, optional
        Keep toggles to switch on in addition to those in ``config``; repeat
        ``--keep`` for several.
    control_pictures : bool, optional
        Replace Unicode control pictures before submitting markdown.
    force : bool or None, optional
        Regenerate fixtures that already exist. ``None`` (default) defers to
        the ``UPDATE`` environment flag.
    github_api_url : str, optional
        Base URL for the GitHub API, defaulting to ``https://api.github.com``;
        override when targeting GitHub Enterprise (``INPUT_GITHUB_API_URL``).
    verbose : bool, optional
        Log request-level detail.

    Returns
    -------
    None
        Writes fixtures and prints each written path.

    Raises
    ------
    FixtureConfigError
        If ``config`` or ``keep`` names unknown settings.
    CredentialError
        If fixtures need rendering and no GitHub token is set.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT
    )
    options = _resolve_options(
        config, keep, control_pictures=control_pictures, force=force
    )
    generator = FixtureGenerator(root, options, api_base=github_api_url)
    for path in generator.run():
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `gfm-fixtures` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
