r"""Discover markdown fixtures and decide which ones need rendering.

Every ``*.md`` file below a root directory is a candidate fixture. The dotted
segments of its stem select how it is rendered (``example.comment.md`` is
posted as a gist comment, anything else is uploaded as a gist file) and whether
it is rendered at all (``example.offline.md`` never is). A fixture whose
``.html`` output already exists is skipped unless regeneration is forced
through the ``UPDATE`` environment flag.

Example
-------
>>> from pathlib import Path
>>> from gfm_fixtures.intake import discover_sources
>>> sources = discover_sources(Path("test/fixtures"))  # doctest: +SKIP
>>> [source.mode for source in sources if source.generate]  # doctest: +SKIP
[<SourceMode.FILE: 'file'>, <SourceMode.COMMENT: 'comment'>]
>>> from gfm_fixtures.intake import replace_control_pictures
>>> replace_control_pictures("a␠␠\nb")
'a  \nb'
"""

from __future__ import annotations

import os
import typing as typ

from ._constants import (
    COMMENT_SEGMENT,
    FORCE_ENV_VAR,
    OFFLINE_SEGMENT,
    OUTPUT_SUFFIX,
)
from .models import MarkdownSource, SourceMode

if typ.TYPE_CHECKING:
    from pathlib import Path

_FALSY_FLAGS = frozenset({"", "0", "false", "no", "off"})

# U+2400..U+241F picture C0 controls, U+2420 space, U+2421 delete.
_CONTROL_PICTURES = {code: code - 0x2400 for code in range(0x2400, 0x2420)}
_CONTROL_PICTURES[0x2420] = 0x20
_CONTROL_PICTURES[0x2421] = 0x7F


def replace_control_pictures(text: str) -> str:
    """Swap Unicode control pictures for the control characters they depict."""
    return text.translate(_CONTROL_PICTURES)


def read_markdown(path: Path) -> str:
    r"""Return the raw markdown in ``path``.

    Line endings are kept as written (``\r\n`` and ``\r`` included), and
    bytes that are not valid UTF-8 become U+FFFD so the source still renders.
    """
    return path.read_bytes().decode("utf-8", errors="replace")


def force_regenerate_from_env(environ: typ.Mapping[str, str] | None = None) -> bool:
    """Return whether the ``UPDATE`` flag asks for existing fixtures to be rebuilt.

    The flag is off when unset, empty, or one of ``0``, ``false``, ``no`` and
    ``off`` (case-insensitive); any other value turns it on.
    """
    env = os.environ if environ is None else environ
    value = env.get(FORCE_ENV_VAR)
    if value is None:
        return False
    return value.strip().lower() not in _FALSY_FLAGS


def classify(path: Path) -> tuple[SourceMode, bool]:
    """Return the submission mode and offline flag encoded in ``path``'s stem."""
    segments = path.stem.split(".")
    offline = OFFLINE_SEGMENT in segments
    mode = SourceMode.COMMENT if segments[-1] == COMMENT_SEGMENT else SourceMode.FILE
    return mode, offline


def output_path_for(path: Path) -> Path:
    """Return the fixture output location for a markdown input."""
    return path.with_suffix(OUTPUT_SUFFIX)


def discover_sources(
    root: Path,
    *,
    force: bool | None = None,
    control_pictures: bool = False,
) -> list[MarkdownSource]:
    """Enumerate markdown fixtures below ``root`` with their generate decision.

    Parameters
    ----------
    root : Path
        Directory searched recursively for ``*.md`` files. Files or folders
        whose name starts with a dot are ignored.
    force : bool or None, optional
        Regenerate fixtures whose output already exists. ``None`` (default)
        reads the ``UPDATE`` environment flag.
    control_pictures : bool, optional
        Replace control pictures with real control characters in the content
        of sources that will be generated.

    Returns
    -------
    list[MarkdownSource]
        Every discovered source, sorted by path. Only sources with
        ``generate`` set carry their content.
    """
    if force is None:
        force = force_regenerate_from_env()

    sources: list[MarkdownSource] = []
    for path in sorted(root.rglob("*.md")):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if not path.is_file():
            continue
        mode, offline = classify(path)
        output_path = output_path_for(path)
        generate = not offline and (force or not output_path.exists())
        content = ""
        if generate:
            content = read_markdown(path)
            if control_pictures:
                content = replace_control_pictures(content)
        sources.append(
            MarkdownSource(
                path=path,
                output_path=output_path,
                mode=mode,
                offline=offline,
                generate=generate,
                content=content,
            )
        )
    return sources


__all__ = [
    "classify",
    "discover_sources",
    "force_regenerate_from_env",
    "output_path_for",
    "read_markdown",
    "replace_control_pictures",
]
