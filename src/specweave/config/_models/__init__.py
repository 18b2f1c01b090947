"""Typed sections and the ``Config`` container."""

from specweave.config._models._common import (
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LogLevel,
)
from specweave.config._models._config import Config
from specweave.config._models._logging import LoggingConfig
from specweave.config._models._workspace import (
    FixConfiguration,
    ImplementationsConfiguration,
    IntegrityConfiguration,
    ScanConfiguration,
)

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "FixConfiguration",
    "ImplementationsConfiguration",
    "IntegrityConfiguration",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ScanConfiguration",
]
