"""Fixture generation options and their YAML loader."""

from __future__ import annotations

from .loader import load_fixture_config
from .models import FixtureConfigError, FixtureOptions, KeepConfig

__all__ = [
    "FixtureConfigError",
    "FixtureOptions",
    "KeepConfig",
    "load_fixture_config",
]
