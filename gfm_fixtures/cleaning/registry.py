"""Ordered registry of cleaning rules and their keep toggles."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from . import rules

if typ.TYPE_CHECKING:
    from bs4.element import Tag

    from gfm_fixtures.config.models import KeepConfig

Transform = typ.Callable[["Tag"], None]


@dc.dataclass(frozen=True, slots=True)
class CleaningRule:
    """A named tree rewrite, optionally switched off by a keep toggle.

    Attributes
    ----------
    name : str
        Identifier used in log messages.
    transform : Transform
        Function editing a fragment in place.
    toggle : str or None
        :class:`KeepConfig` field that disables the rule, or ``None`` for
        rules that always run.
    """

    name: str
    transform: Transform
    toggle: str | None = None

    def enabled(self, keep: KeepConfig) -> bool:
        """Return whether the rule runs under ``keep``."""
        return self.toggle is None or not getattr(keep, self.toggle)


RULES: tuple[CleaningRule, ...] = (
    CleaningRule("position", rules.strip_position_markers),
    CleaningRule("camo", rules.unwrap_camo_images, "camo"),
    CleaningRule("dir", rules.strip_dir_auto, "dir"),
    CleaningRule("frontmatter", rules.strip_frontmatter_table, "frontmatter"),
    CleaningRule("heading", rules.unwrap_heading_anchors, "heading"),
    CleaningRule("image-style", rules.strip_image_max_width_style, "image"),
    CleaningRule("image-link", rules.unwrap_image_links, "image"),
    CleaningRule("issue", rules.strip_issue_links, "issue"),
    CleaningRule("link", rules.strip_link_nofollow, "link"),
    CleaningRule("mention", rules.strip_user_mentions, "mention"),
    CleaningRule("footnote", rules.strip_footnote_id_hashes),
    CleaningRule("table", rules.unwrap_accessible_tables, "table"),
    CleaningRule("tasklist", rules.strip_tasklist_decoration, "tasklist"),
    CleaningRule("emoji", rules.unwrap_gemoji, "emoji"),
)


def active_rules(keep: KeepConfig) -> tuple[CleaningRule, ...]:
    """Return the registered rules ``keep`` leaves switched on, in order."""
    return tuple(rule for rule in RULES if rule.enabled(keep))


def clean_fragment(fragment: Tag, selected: typ.Iterable[CleaningRule]) -> Tag:
    """Apply the ``selected`` rules to ``fragment`` in order and return it."""
    for rule in selected:
        rule.transform(fragment)
    return fragment


__all__ = ["RULES", "CleaningRule", "Transform", "active_rules", "clean_fragment"]
