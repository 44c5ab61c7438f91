"""Typed dataclasses describing fixture generation options."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from gfm_fixtures.cleaning.serializer import FormatterOption


class FixtureConfigError(ValueError):
    """Raised when the fixture configuration is invalid."""


@dc.dataclass(frozen=True, slots=True)
class KeepConfig:
    """Parts of GitHub's output to keep instead of cleaning (default: none).

    Attributes
    ----------
    camo : bool
        Keep ``camo.githubusercontent.com`` image URLs.
    dir : bool
        Keep ``dir="auto"``.
    emoji : bool
        Keep ``<g-emoji>`` wrappers.
    frontmatter : bool
        Keep the table rendered from frontmatter.
    heading : bool
        Keep the ``.markdown-heading`` wrapper and ``.anchor`` link.
    image : bool
        Keep ``max-width: 100%`` on images and their ``a[target=_blank]``
        wrapper.
    issue : bool
        Keep ``.issue-link`` references and issue hovercard attributes.
    link : bool
        Keep ``rel="nofollow"`` on links.
    mention : bool
        Keep attributes on ``.user-mention`` links.
    table : bool
        Keep the ``markdown-accessiblity-table`` element around tables.
    tasklist : bool
        Keep classes on task list elements and ``id`` on their checkboxes.
    """

    camo: bool = False
    dir: bool = False
    emoji: bool = False
    frontmatter: bool = False
    heading: bool = False
    image: bool = False
    issue: bool = False
    link: bool = False
    mention: bool = False
    table: bool = False
    tasklist: bool = False

    @classmethod
    def names(cls) -> tuple[str, ...]:
        """Return the recognised toggle names."""
        return tuple(field.name for field in dc.fields(cls))

    @classmethod
    def from_names(cls, names: list[str] | tuple[str, ...]) -> KeepConfig:
        """Build a config with the named toggles switched on."""
        known = set(cls.names())
        unknown = sorted(set(names) - known)
        if unknown:
            msg = (
                f"Unknown keep toggle(s): {', '.join(unknown)}. "
                f"Known toggles: {', '.join(sorted(known))}"
            )
            raise FixtureConfigError(msg)
        return cls(**dict.fromkeys(names, True))

    def merged(self, other: KeepConfig) -> KeepConfig:
        """Return a config keeping everything either config keeps."""
        return KeepConfig(
            **{
                name: getattr(self, name) or getattr(other, name)
                for name in self.names()
            }
        )


@dc.dataclass(frozen=True, slots=True)
class FixtureOptions:
    """Options for a fixture generation run.

    Attributes
    ----------
    keep : KeepConfig
        Cleaning rules to switch off.
    control_pictures : bool
        Replace Unicode control pictures with control characters before
        submitting markdown.
    formatter : str, Formatter or None
        Passed through to the HTML serializer; ``None`` uses the fixture
        formatter.
    force : bool or None
        Regenerate fixtures that already exist. ``None`` reads ``UPDATE``
        from the environment.
    """

    keep: KeepConfig = dc.field(default_factory=KeepConfig)
    control_pictures: bool = False
    formatter: FormatterOption = None
    force: bool | None = None


__all__ = ["FixtureConfigError", "FixtureOptions", "KeepConfig"]
