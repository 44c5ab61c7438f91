"""Clean GitHub-rendered HTML into portable fixtures."""

from __future__ import annotations

from .registry import RULES, CleaningRule, active_rules, clean_fragment
from .serializer import (
    FIXTURE_FORMATTER,
    empty_fragment,
    parse_document,
    parse_fragment,
    to_html,
)
from .traversal import walk

__all__ = [
    "FIXTURE_FORMATTER",
    "RULES",
    "CleaningRule",
    "active_rules",
    "clean_fragment",
    "empty_fragment",
    "parse_document",
    "parse_fragment",
    "to_html",
    "walk",
]
