"""Enumerations and records shared by the configuration models."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used at runtime in dataclass fields
from typing import Any


class LogLevel(StrEnum):
    """Minimum severity written to the log, lowest first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Layers a setting can come from.

    Members are listed strongest first: an explicit override beats the
    environment, which beats the workspace file, and so on down to the
    built-in defaults.
    """

    OVERRIDE = "override"
    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One layer as it was discovered.

    ``path`` is ``None`` for layers that do not live in a file. ``exists``
    reports whether the file was found, or for non-file layers whether it
    contributed any values.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]  # pyright: ignore[reportExplicitAny]
