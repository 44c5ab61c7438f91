"""Shared dataclasses used by the fixture generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path  # noqa: TC003 - used for runtime type metadata


class SourceMode(enum.StrEnum):
    """How a markdown source is submitted to GitHub."""

    FILE = "file"
    COMMENT = "comment"


@dc.dataclass(frozen=True, slots=True)
class MarkdownSource:
    """A discovered markdown fixture and the decision whether to render it.

    Attributes
    ----------
    path : Path
        Location of the ``.md`` input.
    output_path : Path
        Location of the ``.html`` fixture derived from ``path``.
    mode : SourceMode
        ``comment`` when the last stem segment is ``comment``, else ``file``.
    offline : bool
        ``True`` when any stem segment equals ``offline``.
    generate : bool
        Whether this run submits the source for rendering.
    content : str
        Raw markdown, only read for sources that will be generated.
    """

    path: Path
    output_path: Path
    mode: SourceMode
    offline: bool
    generate: bool
    content: str = ""


@dc.dataclass(frozen=True, slots=True)
class Correlation:
    """Tie one batch member to the rendering it will receive.

    Exactly one of ``slot_name`` and ``comment_ordinal`` is set. Comment
    ordinals rely on GitHub rendering comments in posting order; no stable
    identifier exists to check that.
    """

    source_index: int
    slot_name: str | None = None
    comment_ordinal: int | None = None

    @property
    def slot_index(self) -> int | None:
        """Return the numeric suffix of ``slot_name``, if any."""
        if self.slot_name is None:
            return None
        return int(self.slot_name.rsplit("-", 1)[1])


@dc.dataclass(frozen=True, slots=True)
class RenderBatch:
    """Ordered sources submitted together, plus their gist payload.

    Attributes
    ----------
    sources : tuple[MarkdownSource, ...]
        Sources with ``generate`` set, in discovery order.
    files : dict[str, dict[str, str]]
        Gist ``files`` payload keyed by slot filename. Never empty.
    comments : tuple[str, ...]
        Comment bodies in posting order.
    correlations : tuple[Correlation, ...]
        One record per source, aligned with ``sources``.
    """

    sources: tuple[MarkdownSource, ...]
    files: dict[str, dict[str, str]]
    comments: tuple[str, ...]
    correlations: tuple[Correlation, ...]

    @property
    def comment_count(self) -> int:
        return len(self.comments)


@dc.dataclass(frozen=True, slots=True)
class CreatedGist:
    """The fields of a created gist that the orchestrator depends on."""

    gist_id: str
    html_url: str
    files: dict[str, dict[str, object]]


__all__ = [
    "Correlation",
    "CreatedGist",
    "MarkdownSource",
    "RenderBatch",
    "SourceMode",
]
