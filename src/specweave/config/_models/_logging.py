"""The ``[logging]`` table."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from specweave.config._models._common import LogFormat, LogLevel


class LoggingConfig(BaseModel):
    """Where component loggers write and how much.

    An empty ``file`` sends entries to stderr.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
