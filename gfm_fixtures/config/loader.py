"""Load fixture options from a YAML file into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from .models import FixtureConfigError, FixtureOptions, KeepConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

_TOP_LEVEL_KEYS = frozenset({"control_pictures", "formatter", "keep"})


def load_fixture_config(path: Path) -> FixtureOptions:
    """Load fixture generation options from ``path``.

    Parameters
    ----------
    path : Path
        YAML file such as::

            control_pictures: true
            formatter: minimal
            keep:
              heading: true

    Returns
    -------
    FixtureOptions
        Parsed options; omitted keys take their defaults.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    FixtureConfigError
        If the document is not a mapping, has unknown keys, or holds values
        of the wrong type.
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise FixtureConfigError(msg)

    unknown = sorted(set(loaded) - _TOP_LEVEL_KEYS)
    if unknown:
        msg = f"Unknown configuration key(s): {', '.join(map(str, unknown))}"
        raise FixtureConfigError(msg)

    control_pictures = _require_bool(
        loaded.get("control_pictures", False), "control_pictures"
    )
    formatter = loaded.get("formatter")
    if formatter is not None and not isinstance(formatter, str):
        msg = "'formatter' must be the name of a Beautiful Soup formatter."
        raise FixtureConfigError(msg)

    return FixtureOptions(
        keep=_build_keep_config(loaded.get("keep")),
        control_pictures=control_pictures,
        formatter=formatter,
    )


def _build_keep_config(payload: object) -> KeepConfig:
    """Build a KeepConfig from a ``keep`` mapping or list of toggle names."""
    match payload:
        case None:
            return KeepConfig()
        case list():
            return KeepConfig.from_names([str(name) for name in payload])
        case dict():
            unknown = sorted(set(map(str, payload)) - set(KeepConfig.names()))
            if unknown:
                msg = f"Unknown keep toggle(s): {', '.join(unknown)}"
                raise FixtureConfigError(msg)
            return KeepConfig.from_names(
                [
                    str(name)
                    for name, value in payload.items()
                    if _require_bool(value, f"keep.{name}")
                ]
            )
        case _:
            msg = "'keep' must be a mapping of toggle names to booleans."
            raise FixtureConfigError(msg)


def _require_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false, got {value!r}."
        raise FixtureConfigError(msg)
    return value


__all__ = ["load_fixture_config"]
