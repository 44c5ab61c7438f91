"""Tree rewrites that strip GitHub-specific decoration from rendered markdown.

Each public function takes a parsed fragment and edits it in place. Rules are
independent of one another, idempotent, and deliberately narrow: they only
match markup GitHub is known to inject, so raw HTML authored in the markdown
source is left alone.
"""

from __future__ import annotations

import re
import typing as typ

from bs4.element import NavigableString, PreformattedString, Tag

from .traversal import children_of, walk

if typ.TYPE_CHECKING:
    from bs4.element import PageElement

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
TABLE_WRAPPER_TAG = "markdown-accessiblity-table"
EMOJI_TAG = "g-emoji"
HOVERCARD_ISSUE_TYPES = frozenset({"issue", "pull_request"})

MAX_WIDTH_STYLE_PATTERN = re.compile(r"^\s*max-width:\s*100%;?\s*$")
FOOTNOTE_HASH_PATTERN = re.compile(r"-[0-9a-f]{32}$")

_FOOTNOTE_SELECTOR = (
    "a[data-footnote-ref], a.data-footnote-backref, li[id^=user-content-fn]"
)
_TASKLIST_SELECTOR = (
    "ul.contains-task-list, li.task-list-item, input.task-list-item-checkbox"
)


def _tokens(value: object) -> list[str]:
    """Return the whitespace-separated tokens of a multi-valued attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list | tuple):
        return [str(token) for token in value]
    return []


def _has_class(element: Tag, name: str) -> bool:
    return name in _tokens(element.get("class"))


def _is_text(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


def strip_position_markers(tree: Tag) -> None:
    """Drop ``data-sourcepos``, whose offsets from GitHub are unreliable."""

    def _visit(element: Tag) -> None:
        element.attrs.pop("data-sourcepos", None)

    walk(tree, _visit)


def unwrap_camo_images(tree: Tag) -> None:
    """Restore image URLs that GitHub proxies through camo.

    ```
    <a target="_blank" rel="noopener noreferrer"
       href="https://camo.githubusercontent.com/7003.../6874...">
      <img src="https://camo.githubusercontent.com/7003.../6874..."
           alt="alpha" data-canonical-src="https://bravo.com">
    </a>
    ```

    The ``src`` takes the canonical value, and so does the parent link when it
    pointed at the same proxied URL.
    """

    def _visit(element: Tag) -> None:
        if element.name != "img":
            return
        original = element.get("data-canonical-src")
        if not original:
            return
        camo = element.get("src")
        element["src"] = original
        del element["data-canonical-src"]
        parent = element.parent
        if (
            isinstance(parent, Tag)
            and parent.name == "a"
            and parent.get("href") == camo
        ):
            parent["href"] = original

    walk(tree, _visit)


def strip_dir_auto(tree: Tag) -> None:
    """Remove ``dir="auto"``."""

    def _visit(element: Tag) -> None:
        if element.get("dir") == "auto":
            del element["dir"]

    walk(tree, _visit)


def strip_frontmatter_table(tree: Tag) -> None:
    """Remove the table GitHub renders from YAML frontmatter.

    Only a leading table wrapper holding ``table > tbody > tr > td > div``
    and followed by exactly ``"\\n\\n"`` is treated as frontmatter.
    """
    if len(tree.contents) < 2:
        return
    head, after = tree.contents[0], tree.contents[1]
    if (
        isinstance(head, Tag)
        and head.name == TABLE_WRAPPER_TAG
        and head.select_one("table > tbody > tr > td > div") is not None
        and _is_text(after)
        and str(after) == "\n\n"
    ):
        head.extract()
        after.extract()


def unwrap_heading_anchors(tree: Tag) -> None:
    """Replace ``div.markdown-heading`` wrappers with the heading they hold.

    ```
    <div class="markdown-heading">
      <h1 class="heading-element">hi</h1><a class="anchor" href="#hi">…</a>
    </div>
    ```
    """

    def _visit(element: Tag) -> list[PageElement] | None:
        if element.name != "div" or not _has_class(element, "markdown-heading"):
            return None
        if len(element.contents) < 2:
            return None
        first, second = element.contents[0], element.contents[1]
        if not (
            isinstance(first, Tag)
            and first.name in HEADING_TAGS
            and _has_class(first, "heading-element")
            and isinstance(second, Tag)
            and _has_class(second, "anchor")
        ):
            return None
        classes = [
            token for token in _tokens(first.get("class")) if token != "heading-element"
        ]
        if classes:
            first["class"] = classes
        else:
            del first["class"]
        return [first]

    walk(tree, _visit)


def strip_image_max_width_style(tree: Tag) -> None:
    """Drop the ``style="max-width: 100%;"`` GitHub puts on images."""

    def _visit(element: Tag) -> None:
        style = element.get("style")
        if (
            element.name == "img"
            and isinstance(style, str)
            and MAX_WIDTH_STYLE_PATTERN.match(style)
        ):
            del element["style"]

    walk(tree, _visit)


def unwrap_image_links(tree: Tag) -> None:
    """Replace ``<a target="_blank">`` wrappers around a lone image with the image."""

    def _visit(element: Tag) -> list[PageElement] | None:
        if element.name != "a" or element.get("target") != "_blank":
            return None
        if len(element.contents) != 1:
            return None
        child = element.contents[0]
        if isinstance(child, Tag) and child.name == "img":
            return [child]
        return None

    walk(tree, _visit)


def strip_issue_links(tree: Tag) -> None:
    """Unwrap ``.issue-link`` references and drop issue hovercard attributes.

    ``wooorm/linked-list#1`` renders as an ``a.issue-link`` carrying hovercard
    data; it is replaced by its text. A plain link to an issue or pull request
    keeps its ``href`` but loses ``data-hovercard-type`` and
    ``data-hovercard-url``.
    """

    def _visit(element: Tag) -> list[PageElement] | None:
        if element.name != "a":
            return None
        if _has_class(element, "issue-link"):
            return children_of(element)
        if element.get("data-hovercard-type") in HOVERCARD_ISSUE_TYPES:
            element.attrs.pop("data-hovercard-type", None)
            element.attrs.pop("data-hovercard-url", None)
        return None

    walk(tree, _visit)


def strip_link_nofollow(tree: Tag) -> None:
    """Remove ``rel`` from links GitHub marks ``nofollow``."""

    def _visit(element: Tag) -> None:
        if element.name == "a" and "nofollow" in _tokens(element.get("rel")):
            del element["rel"]

    walk(tree, _visit)


def strip_user_mentions(tree: Tag) -> None:
    """Reduce ``a.user-mention`` links to their ``href``."""

    def _visit(element: Tag) -> None:
        if element.name == "a" and _has_class(element, "user-mention"):
            href = element.get("href")
            element.attrs = {} if href is None else {"href": href}

    walk(tree, _visit)


def strip_footnote_id_hashes(tree: Tag) -> None:
    """Remove the per-render hash GitHub appends to footnote ids and links.

    ``#user-content-fn-1-15eeec68953e73b748987f03b6f5c0bd`` becomes
    ``#user-content-fn-1``.
    """

    def _visit(element: Tag) -> None:
        if not element.css.match(_FOOTNOTE_SELECTOR):
            return
        for field in ("href", "id"):
            value = element.get(field)
            if isinstance(value, str):
                element[field] = FOOTNOTE_HASH_PATTERN.sub("", value)

    walk(tree, _visit)


def unwrap_accessible_tables(tree: Tag) -> None:
    """Replace the ``markdown-accessiblity-table`` element with its children."""

    def _visit(element: Tag) -> list[PageElement] | None:
        if element.name == TABLE_WRAPPER_TAG:
            return children_of(element)
        return None

    walk(tree, _visit)


def strip_tasklist_decoration(tree: Tag) -> None:
    """Remove task list classes, and the empty ``id`` on checkboxes.

    ```
    <ul class="contains-task-list">
    <li class="task-list-item"><input type="checkbox" id="" disabled class="task-list-item-checkbox" checked> a</li>
    </ul>
    ```
    """

    def _visit(element: Tag) -> None:
        if not element.css.match(_TASKLIST_SELECTOR):
            return
        element.attrs.pop("class", None)
        if element.name == "input":
            element.attrs.pop("id", None)

    walk(tree, _visit)


def unwrap_gemoji(tree: Tag) -> None:
    """Replace ``<g-emoji>`` wrappers with the emoji text they contain."""

    def _visit(element: Tag) -> list[PageElement] | None:
        if element.name == EMOJI_TAG:
            return children_of(element)
        return None

    walk(tree, _visit)


__all__ = [
    "FOOTNOTE_HASH_PATTERN",
    "MAX_WIDTH_STYLE_PATTERN",
    "TABLE_WRAPPER_TAG",
    "strip_dir_auto",
    "strip_footnote_id_hashes",
    "strip_frontmatter_table",
    "strip_image_max_width_style",
    "strip_issue_links",
    "strip_link_nofollow",
    "strip_position_markers",
    "strip_tasklist_decoration",
    "strip_user_mentions",
    "unwrap_accessible_tables",
    "unwrap_camo_images",
    "unwrap_gemoji",
    "unwrap_heading_anchors",
    "unwrap_image_links",
]
