"""Render markdown fixtures through a GitHub gist and write cleaned HTML.

The :class:`FixtureGenerator` ties the pipeline together: it discovers the
markdown sources below a root directory, uploads the file-mode sources as one
secret gist, posts the comment-mode sources as comments on it, downloads the
rendered page, deletes the gist, and writes one cleaned ``.html`` fixture per
source.

Example
-------
>>> from pathlib import Path
>>> from gfm_fixtures.orchestrator import create_gfm_fixtures
>>> create_gfm_fixtures(Path("test/fixtures"))  # doctest: +SKIP
[PosixPath('test/fixtures/heading.html'), ...]
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import PLACEHOLDER_CONTENT, SLOT_FILENAME_TEMPLATE, SLOT_NAME_TEMPLATE
from .cleaning.registry import active_rules, clean_fragment
from .cleaning.serializer import parse_document, to_html
from .config.models import FixtureOptions
from .extractor import extract_fragments
from .gists import DEFAULT_API_BASE, GistClient, resolve_token
from .intake import discover_sources
from .models import Correlation, MarkdownSource, RenderBatch, SourceMode

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import CreatedGist

logger = logging.getLogger(__name__)


def build_render_batch(sources: typ.Iterable[MarkdownSource]) -> RenderBatch:
    """Assign slots and comment ordinals to the sources that need rendering.

    Sources without ``generate`` are left out. File-mode sources become gist
    files ``slot-0.md``, ``slot-1.md`` and so on in order; comment-mode sources
    become comments in order. A gist needs at least one file, so a placeholder
    ``slot-0.md`` is added when every source is a comment; it gets no
    correlation and its rendering is ignored.
    """
    members = tuple(source for source in sources if source.generate)
    files: dict[str, dict[str, str]] = {}
    comments: list[str] = []
    correlations: list[Correlation] = []
    for index, source in enumerate(members):
        if source.mode is SourceMode.COMMENT:
            correlations.append(
                Correlation(source_index=index, comment_ordinal=len(comments))
            )
            comments.append(source.content)
            continue
        slot_index = len(files)
        files[SLOT_FILENAME_TEMPLATE.format(index=slot_index)] = {
            "content": source.content
        }
        correlations.append(
            Correlation(
                source_index=index,
                slot_name=SLOT_NAME_TEMPLATE.format(index=slot_index),
            )
        )
    if not files:
        files[SLOT_FILENAME_TEMPLATE.format(index=0)] = {
            "content": PLACEHOLDER_CONTENT
        }
    return RenderBatch(
        sources=members,
        files=files,
        comments=tuple(comments),
        correlations=tuple(correlations),
    )


def normalise_newline(html: str) -> str:
    """Append a trailing newline to non-empty output that lacks one."""
    if html and not html.endswith("\n"):
        return f"{html}\n"
    return html


class FixtureGenerator:
    """Generate the missing (or, when forced, all) fixtures below a root."""

    def __init__(
        self,
        root: Path,
        options: FixtureOptions | None = None,
        *,
        client: GistClient | None = None,
        api_base: str = DEFAULT_API_BASE,
    ) -> None:
        """Initialise the generator.

        Parameters
        ----------
        root : Path
            Directory searched recursively for ``*.md`` fixtures.
        options : FixtureOptions, optional
            Keep toggles, control-picture handling, serializer and force
            settings. Defaults to every cleaning rule active.
        client : GistClient, optional
            Gist client to use. When omitted, one is built on first use from
            the ``GH_TOKEN`` or ``GITHUB_TOKEN`` environment variable.
        api_base : str, optional
            GitHub API base URL for the default client.
        """
        self.root = root
        self.options = options or FixtureOptions()
        self.api_base = api_base
        self._client = client
        self.rules = active_rules(self.options.keep)

    @property
    def client(self) -> GistClient:
        """Return the gist client, resolving credentials on first access."""
        if self._client is None:
            self._client = GistClient(token=resolve_token(), api_base=self.api_base)
        return self._client

    def run(self) -> list[Path]:
        """Render, clean and write every fixture that needs generating.

        Returns
        -------
        list[Path]
            Written ``.html`` paths in discovery order; empty when nothing
            needed generating.

        Raises
        ------
        CredentialError
            If rendering is needed and no GitHub token is configured.
        GistError
            If a gist API call fails.
        RemoteContractError
            If GitHub's responses do not have the expected shape.

        Notes
        -----
        Nothing is written unless every fragment was extracted and cleaned,
        so a failed run leaves existing fixtures untouched.
        """
        sources = discover_sources(
            self.root,
            force=self.options.force,
            control_pictures=self.options.control_pictures,
        )
        batch = build_render_batch(sources)
        if not batch.sources:
            logger.info("all fixtures in %s are up to date", self.root)
            return []

        logger.info(
            "rendering %d fixture(s): %d file(s), %d comment(s)",
            len(batch.sources),
            len(batch.sources) - batch.comment_count,
            batch.comment_count,
        )
        page = self._render(batch)
        fragments = extract_fragments(parse_document(page), batch)
        outputs = [
            normalise_newline(
                to_html(clean_fragment(fragment, self.rules), self.options.formatter)
            )
            for fragment in fragments
        ]

        written: list[Path] = []
        for source, html in zip(batch.sources, outputs, strict=True):
            source.output_path.write_text(html, encoding="utf-8", newline="")
            written.append(source.output_path)
        return written

    def _render(self, batch: RenderBatch) -> str:
        """Submit ``batch`` and return the rendered gist page."""
        client = self.client
        gist = client.create(batch.files)
        try:
            page = self._comment_and_fetch(client, gist, batch)
        except Exception:
            client.discard(gist.gist_id)
            raise
        client.delete(gist.gist_id)
        return page

    @staticmethod
    def _comment_and_fetch(
        client: GistClient, gist: CreatedGist, batch: RenderBatch
    ) -> str:
        for body in batch.comments:
            client.create_comment(gist.gist_id, body)
        return client.fetch_page(gist.html_url)


def create_gfm_fixtures(
    root: Path, options: FixtureOptions | None = None
) -> list[Path]:
    """Generate fixtures below ``root``; see :class:`FixtureGenerator`."""
    return FixtureGenerator(root, options).run()


__all__ = [
    "FixtureGenerator",
    "build_render_batch",
    "create_gfm_fixtures",
    "normalise_newline",
]
