"""Slice a rendered gist page into one fragment per batch member.

File slots are found through their visible name, so their order on the page
does not matter. Comments carry no identifier at all: they are taken in
document order, which GitHub keeps equal to posting order. A page that breaks
either assumption aborts the run with :class:`RemoteContractError`.
"""

from __future__ import annotations

import logging
import typing as typ

from bs4.element import NavigableString

from ._constants import SLOT_FILENAME_PATTERN
from .cleaning.serializer import empty_fragment
from .cleaning.traversal import children_of
from .gists import RemoteContractError

if typ.TYPE_CHECKING:
    from bs4 import BeautifulSoup
    from bs4.element import PageElement, Tag

    from .models import RenderBatch

FILE_SELECTOR = ".file"
FILE_NAME_SELECTOR = ".gist-blob-name"
BODY_SELECTOR = ".markdown-body"
COMMENT_SELECTOR = ".comment-body.markdown-body"

_WEIRD_CHARACTERS_HINT = (
    "this is likely because there are weird characters (such as control "
    "characters or lone surrogates) in it"
)

logger = logging.getLogger(__name__)


HTML_WHITESPACE = " \t\n\f\r"


def _is_whitespace(node: PageElement | None) -> bool:
    # Comments and CDATA subclass NavigableString; only plain text counts.
    # No-break and other Unicode spaces are content, not padding.
    return type(node) is NavigableString and not node.strip(HTML_WHITESPACE)


def _fragment_from(body: Tag) -> BeautifulSoup:
    fragment = empty_fragment()
    for child in children_of(body):
        fragment.append(child.extract())
    return fragment


def extract_slots(document: Tag) -> dict[int, BeautifulSoup]:
    """Return the rendered body of every gist file, keyed by slot index.

    Raises
    ------
    RemoteContractError
        If a file container has no name, a name that is not a slot filename,
        or no rendered markdown body.
    """
    slots: dict[int, BeautifulSoup] = {}
    for container in document.select(FILE_SELECTOR):
        name = container.select_one(FILE_NAME_SELECTOR)
        if name is None:
            msg = "expected github file to have a name"
            raise RemoteContractError(msg)
        file_name = name.get_text().strip()
        match = SLOT_FILENAME_PATTERN.match(file_name)
        if match is None:
            msg = f"expected gist file name `{file_name}` to match `slot-\\d+.md`"
            raise RemoteContractError(msg)
        body = container.select_one(BODY_SELECTOR)
        if body is None:
            msg = f"expected github to render body for `{file_name}`, it didn't; "
            msg += _WEIRD_CHARACTERS_HINT
            raise RemoteContractError(msg)
        slots[int(match.group(1))] = _fragment_from(body)
    return slots


def extract_comments(document: Tag) -> list[BeautifulSoup]:
    """Return the rendered comment bodies in document order.

    GitHub pads comment bodies with stray whitespace; a single whitespace-only
    text node at either end is dropped.
    """
    comments: list[BeautifulSoup] = []
    for body in document.select(COMMENT_SELECTOR):
        if body.contents and _is_whitespace(body.contents[0]):
            body.contents[0].extract()
        if body.contents and _is_whitespace(body.contents[-1]):
            body.contents[-1].extract()
        comments.append(_fragment_from(body))
    return comments


def extract_fragments(document: Tag, batch: RenderBatch) -> list[BeautifulSoup]:
    """Return one fragment per source of ``batch``, aligned with its sources.

    Parameters
    ----------
    document : Tag
        The parsed gist page. Its rendered bodies are moved into the returned
        fragments, so the document is consumed.
    batch : RenderBatch
        The batch that was submitted; its correlations say which rendering
        belongs to which source.

    Raises
    ------
    RemoteContractError
        If the page holds a different number of comments than were posted,
        or a slot correlation has no rendering.
    """
    slots = extract_slots(document)
    comments = extract_comments(document)
    if len(comments) != batch.comment_count:
        msg = (
            f"expected {batch.comment_count} rendered comment(s) on the gist "
            f"page, found {len(comments)}"
        )
        raise RemoteContractError(msg)

    fragments: list[BeautifulSoup] = []
    for correlation, source in zip(batch.correlations, batch.sources, strict=True):
        if correlation.comment_ordinal is not None:
            fragments.append(comments[correlation.comment_ordinal])
            continue
        fragment = slots.get(correlation.slot_index)
        if fragment is None:
            msg = (
                f"expected github to render `{correlation.slot_name}` for "
                f"{source.path}, it didn't; {_WEIRD_CHARACTERS_HINT}"
            )
            raise RemoteContractError(msg)
        fragments.append(fragment)
    logger.debug(
        "extracted %d slot(s) and %d comment(s)", len(slots), len(comments)
    )
    return fragments


__all__ = [
    "BODY_SELECTOR",
    "COMMENT_SELECTOR",
    "FILE_NAME_SELECTOR",
    "FILE_SELECTOR",
    "extract_comments",
    "extract_fragments",
    "extract_slots",
]
