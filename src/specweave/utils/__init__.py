"""Shared utilities: workspace file access, ignore patterns, logging and text helpers."""

from ._fs import FileSystem, LocalFileSystem
from ._ignore import (
    DEFAULT_IGNORE_PATTERNS,
    IgnoreConfig,
    collect_patterns,
    create_pathspec,
    load_gitignore_patterns,
)
from ._logging import LogFormatType, create_config_logger, create_logger
from ._text import content_hash, to_kebab_case, to_pascal_case

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "FileSystem",
    "IgnoreConfig",
    "LocalFileSystem",
    "LogFormatType",
    "collect_patterns",
    "content_hash",
    "create_config_logger",
    "create_logger",
    "create_pathspec",
    "load_gitignore_patterns",
    "to_kebab_case",
    "to_pascal_case",
]
