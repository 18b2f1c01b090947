# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading, merging and environment parsing for configuration layers.

Each layer is a plain nested dict. Layers are merged lowest precedence first
and validated once, after the last merge.
"""

import copy
import json
import os
import tomllib
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Any, Final

from specweave.exceptions import ConfigLoadError

ENV_PREFIX: Final = "SPECWEAVE_"

# Separates nesting levels in environment variable names.
ENV_NESTING: Final = "__"

_BOOLEANS: Final = {"true": True, "false": False}


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse a TOML configuration layer.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path.name}: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def read_pyproject_section(
    path: Path,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Return the ``[tool.specweave]`` table of a pyproject.toml, or ``{}``."""
    match read_toml_file(path):
        case {"tool": {"specweave": dict() as section}}:
            return section
        case _:
            return {}


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Overlay one configuration layer on another.

    Tables merge key by key; lists and scalars from ``override`` replace the
    ``base`` value outright, so ``orphan_types = ["event"]`` narrows rather
    than extends the default. The result shares no mutable state with either
    input.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Coerce an environment variable string to a configuration value.

    ``true``/``false`` (any case) become booleans, digits become numbers, and
    bracketed text that parses as JSON becomes a list or table. Anything else
    stays a string.

    Examples:
        >>> parse_string_value("4")
        4
        >>> parse_string_value('["operation", "event"]')
        ['operation', 'event']
    """
    flag = _BOOLEANS.get(value.lower())
    if flag is not None:
        return flag

    digits = value.lstrip("+-")
    if digits.isdecimal():
        return int(value)
    if digits.replace(".", "", 1).isdecimal():
        return float(value)

    if value[:1] + value[-1:] in ("[]", "{}"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Assign ``value`` at a dotted path, replacing non-table values on the way.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "scan.max_workers", 4)
        >>> d
        {'scan': {'max_workers': 4}}
    """
    *parents, leaf = key_path.split(".")
    table = d
    for name in parents:
        child = table.get(name)
        if not isinstance(child, dict):
            child = table[name] = {}
        table = child
    table[leaf] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect configuration overrides from the environment.

    ``SPECWEAVE_SCAN__MAX_WORKERS=4`` sets ``scan.max_workers``. Names without
    a nesting separator, such as ``SPECWEAVE_DEBUG``, are process switches and
    are ignored here.
    """
    layer: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    for name, raw in sorted(os.environ.items()):
        if not name.startswith(prefix):
            continue
        suffix = name.removeprefix(prefix)
        if ENV_NESTING not in suffix:
            continue
        set_nested_key(layer, suffix.lower().replace(ENV_NESTING, "."), parse_string_value(raw))
    return layer
