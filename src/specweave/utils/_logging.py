"""structlog loggers for workspace components.

Every component builds its own logger with ``create_logger`` rather than
relying on global structlog configuration, so a library caller's own logging
setup is left alone.
"""

import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from specweave.config import LoggingConfig

LogFormatType = Literal["json", "text"]


def _threshold(level: str | None) -> int:
    """Pick the minimum level to emit.

    ``SPECWEAVE_DEBUG`` set to anything forces debug. An explicit ``level``
    beats ``SPECWEAVE_LOG_LEVEL``; unknown names fall back to info.
    """
    if getenv("SPECWEAVE_DEBUG"):
        return logging.DEBUG
    name = level or getenv("SPECWEAVE_LOG_LEVEL", "info")
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _renderers(log_format: LogFormatType) -> list[structlog.typing.Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    # 2026-01-01T00:00:00Z [info     ] inventory_built specs=3
    return [structlog.dev.ConsoleRenderer(colors=False)]


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    component: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Build a self-contained structlog logger.

    Args:
        level: ``debug``, ``info``, ``warning`` or ``error``.
        log_format: ``json`` lines or human-readable ``text``.
        log_file: Append to this file, creating parent directories.
            Empty writes to stderr.
        component: Bound as ``component`` on every entry when given.
    """
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        factory = structlog.WriteLoggerFactory(file=path.open("a"))
    else:
        factory = structlog.PrintLoggerFactory(file=sys.stderr)

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            factory(),
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                *_renderers(log_format),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(_threshold(level)),
            context_class=dict,
        ),
    )
    return logger.bind(component=component) if component else logger


def create_config_logger(
    config: "LoggingConfig",  # noqa: UP037
    *,
    component: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Build a logger from the ``[logging]`` configuration table."""
    return create_logger(
        level=config.level.value,
        log_format=cast("LogFormatType", config.format.value),
        log_file=config.file,
        component=component,
    )
