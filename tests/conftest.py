"""Shared fixtures: a fake gist client serving GitHub-shaped pages.

The fake mirrors the markup GitHub uses on a rendered gist page: one
``.file`` container per uploaded file, named through ``.gist-blob-name`` and
holding an ``article.markdown-body``, followed by one
``.comment-body.markdown-body`` per comment, padded with whitespace the way
GitHub pads it. Renderings are looked up by the submitted markdown.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from gfm_fixtures.gists import GistError
from gfm_fixtures.models import CreatedGist

if typ.TYPE_CHECKING:
    from pathlib import Path

HEADING_ANCHOR = (
    '<a id="user-content-{slug}" class="anchor" aria-label="Permalink: {slug}" '
    'href="#{slug}"><svg class="octicon octicon-link" viewBox="0 0 16 16" '
    'version="1.1" width="16" height="16" aria-hidden="true">'
    '<path d="m7.775 3.275"></path></svg></a>'
)

FILE_RENDERINGS = {
    ".": '<p dir="auto">.</p>\n',
    "a": '<p dir="auto">a</p>\n',
    "a\nb": '<p dir="auto">a\nb</p>\n',
    "a  \nb": '<p dir="auto">a<br>\nb</p>\n',
    "# hi": (
        '<div class="markdown-heading" dir="auto">'
        '<h1 class="heading-element" dir="auto">hi</h1>'
        + HEADING_ANCHOR.format(slug="hi")
        + "</div>\n"
    ),
    "* [x] a": (
        '<ul class="contains-task-list">\n'
        '<li class="task-list-item"><input type="checkbox" id="" disabled="" '
        'class="task-list-item-checkbox" checked=""> a</li>\n'
        "</ul>\n"
    ),
    '---\na: "b"\n---\n# c': (
        "<markdown-accessiblity-table><table>\n<thead>\n<tr>\n<th>a</th>\n"
        "</tr>\n</thead>\n<tbody>\n<tr>\n<td><div>b</div></td>\n</tr>\n"
        "</tbody>\n</table></markdown-accessiblity-table>\n\n"
        '<div class="markdown-heading" dir="auto">'
        '<h1 class="heading-element" dir="auto">c</h1>'
        + HEADING_ANCHOR.format(slug="c")
        + "</div>\n"
    ),
    "@wooorm": '<p dir="auto">@wooorm</p>\n',
}

COMMENT_RENDERINGS = {
    "a\nb": '<p dir="auto">a<br>\nb</p>',
    "a  \nb": '<p dir="auto">a<br>\nb</p>',
    "@wooorm": (
        '<p dir="auto"><a class="user-mention notranslate" '
        'data-hovercard-type="user" data-hovercard-url="/users/wooorm/hovercard" '
        'data-octo-click="hovercard-link-click" '
        'data-octo-dimensions="link_type:self" '
        'href="https://github.com/wooorm">@wooorm</a></p>'
    ),
}


def file_container(name: str, html: str) -> str:
    """Return the markup GitHub uses for one rendered gist file."""
    anchor = name.replace(".", "-")
    return (
        f'<div class="file my-2" id="file-{anchor}">\n'
        '<div class="file-header d-flex flex-md-items-center flex-items-start">'
        f'<div class="file-info"><a href="#file-{anchor}" class="Link--onHover">'
        '<strong class="user-select-contain gist-blob-name css-truncate-target">\n'
        f"            {name}\n          </strong></a></div></div>\n"
        f'<div id="file-{anchor}-readme" class="Box-body readme blob">'
        '<article class="markdown-body entry-content container-lg" '
        f'itemprop="text">{html}</article></div>\n</div>\n'
    )


def comment_container(html: str) -> str:
    """Return the markup GitHub uses for one rendered gist comment."""
    return (
        '<div class="timeline-comment-group js-minimizable-comment-group">'
        '<div class="edit-comment-hide"><task-lists disabled sortable>'
        '<div class="comment-body markdown-body js-comment-body soft-wrap '
        f'user-select-contain d-block">\n          {html}\n      </div>'
        "</task-lists></div></div>\n"
    )


def gist_page(files: list[tuple[str, str]], comments: list[str]) -> str:
    """Return a gist page rendering ``files`` then ``comments``."""
    return (
        "<!DOCTYPE html>\n<html lang=\"en\"><head><title>gist</title></head>"
        '<body><div id="gist-pjax-container">\n'
        + "".join(file_container(name, html) for name, html in files)
        + '<div class="js-discussion">\n'
        + "".join(comment_container(html) for html in comments)
        + "</div></div></body></html>\n"
    )


@dc.dataclass
class FakeGistClient:
    """In-memory stand-in for :class:`gfm_fixtures.gists.GistClient`.

    ``fail_on`` names a method that raises :class:`GistError`;
    ``reverse_files`` lists files on the page in reverse upload order.
    """

    fail_on: str | None = None
    reverse_files: bool = False
    files: dict[str, dict[str, str]] = dc.field(default_factory=dict)
    comments: list[str] = dc.field(default_factory=list)
    calls: list[str] = dc.field(default_factory=list)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            msg = f"GitHub {name} failed with status 502: bad gateway"
            raise GistError(msg)

    def create(self, files: dict[str, dict[str, str]]) -> CreatedGist:
        self._record("create")
        self.files = dict(files)
        return CreatedGist(
            gist_id="abc123",
            html_url="https://gist.github.com/someone/abc123",
            files={name: {"language": "Markdown"} for name in files},
        )

    def create_comment(self, gist_id: str, body: str) -> None:
        assert gist_id == "abc123", f"unexpected gist id {gist_id!r}"
        self._record("create_comment")
        self.comments.append(body)

    def fetch_page(self, html_url: str) -> str:
        self._record("fetch_page")
        rendered = [
            (name, FILE_RENDERINGS[info["content"]])
            for name, info in self.files.items()
        ]
        if self.reverse_files:
            rendered.reverse()
        return gist_page(
            rendered, [COMMENT_RENDERINGS[body] for body in self.comments]
        )

    def delete(self, gist_id: str) -> None:
        self._record("delete")

    def discard(self, gist_id: str) -> None:
        self.calls.append("discard")


@pytest.fixture
def fake_client() -> FakeGistClient:
    """Provide a gist client that renders from canned GitHub markup."""
    return FakeGistClient()


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Return an empty folder to hold markdown fixtures."""
    path = tmp_path / "fixtures"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's token and ``UPDATE`` flag out of the tests."""
    for name in ("GH_TOKEN", "GITHUB_TOKEN", "UPDATE"):
        monkeypatch.delenv(name, raising=False)
