"""Parse and serialize HTML fragments for fixture output.

Fixtures are compared byte for byte by parser test suites, so serialization
is pinned down here: attributes keep their source order, void elements have no
closing slash, HTML boolean attributes are written without a value, and only
the characters that must be escaped are escaped (``&`` and ``<`` in text,
``&`` and ``"`` in attribute values) using hexadecimal references.

Example
-------
>>> from gfm_fixtures.cleaning.serializer import parse_fragment, to_html
>>> to_html(parse_fragment('<input type="checkbox" disabled="" checked="">'))
'<input type="checkbox" disabled checked>'
>>> to_html(parse_fragment('<p data-x="">a &amp; b</p>'))
'<p data-x="">a &#x26; b</p>'
"""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup
from bs4.element import NavigableString
from bs4.formatter import Formatter, HTMLFormatter

if typ.TYPE_CHECKING:
    from bs4.element import Tag

PARSER = "html.parser"

BOOLEAN_ATTRIBUTES = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)


class FixtureFormatter(HTMLFormatter):
    """Beautiful Soup formatter producing minimal, order-preserving HTML."""

    def __init__(self) -> None:
        super().__init__(void_element_close_prefix="")

    def substitute(self, ns: str) -> str:  # type: ignore[override]
        """Escape text content, leaving ``script`` and ``style`` bodies as-is."""
        if (
            isinstance(ns, NavigableString)
            and ns.parent is not None
            and ns.parent.name in self.cdata_containing_tags
        ):
            return ns
        return ns.replace("&", "&#x26;").replace("<", "&#x3C;")

    def attribute_value(self, value: str) -> str:
        """Escape an attribute value for use inside double quotes."""
        return value.replace("&", "&#x26;").replace('"', "&#x22;")

    def attributes(self, tag: Tag) -> list[tuple[str, str | None]]:  # type: ignore[override]
        """Return attributes in source order, collapsing empty booleans."""
        if tag.attrs is None:
            return []
        return [
            (key, None if key in BOOLEAN_ATTRIBUTES and value == "" else value)
            for key, value in tag.attrs.items()
        ]


FIXTURE_FORMATTER = FixtureFormatter()

FormatterOption = typ.Union[str, Formatter, None]


class _EveryTag:
    """Tag-name set matching every element, the document root included.

    Beautiful Soup collapses whitespace-only strings to a single space or
    newline outside the tags it is told to preserve. Fixtures must keep the
    rendering byte for byte, so every tag preserves whitespace.
    """

    def __contains__(self, name: object) -> bool:
        return True


PRESERVE_ALL_WHITESPACE = _EveryTag()


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(
        html, PARSER, preserve_whitespace_tags=PRESERVE_ALL_WHITESPACE
    )


def parse_document(html: str) -> BeautifulSoup:
    """Parse a full HTML page."""
    return _parse(html)


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse an HTML fragment; its top-level nodes are the root's contents.

    Whitespace-only text is kept verbatim:

    >>> to_html(parse_fragment("<p><code>  </code></p>\\n\\n<p>x</p>"))
    '<p><code>  </code></p>\\n\\n<p>x</p>'
    """
    return _parse(html)


def empty_fragment() -> BeautifulSoup:
    """Return a fragment root with no content, ready to receive nodes."""
    return _parse("")


def to_html(fragment: Tag, formatter: FormatterOption = None) -> str:
    """Serialize the children of ``fragment``.

    Parameters
    ----------
    fragment : Tag
        Fragment root (or any element) whose contents are serialized.
    formatter : str, Formatter or None, optional
        A Beautiful Soup formatter instance or registered name (for example
        ``"html5"``); ``None`` uses :data:`FIXTURE_FORMATTER`.
    """
    return fragment.decode_contents(formatter=formatter or FIXTURE_FORMATTER)


__all__ = [
    "BOOLEAN_ATTRIBUTES",
    "FIXTURE_FORMATTER",
    "FixtureFormatter",
    "FormatterOption",
    "PRESERVE_ALL_WHITESPACE",
    "empty_fragment",
    "parse_document",
    "parse_fragment",
    "to_html",
]
