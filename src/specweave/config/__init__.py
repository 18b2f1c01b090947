"""Layered settings for workspace scans, integrity checks and fixes.

Settings come from built-in defaults, the user config file, the workspace
(`specweave.toml` or `[tool.specweave]` in pyproject.toml), `SPECWEAVE_*`
environment variables and explicit overrides, in rising precedence.

Example:
    >>> from specweave.config import Config
    >>> config = Config.load()
    >>> config.scan.patterns
    ('**/*.yaml', '**/*.yml')
"""

from specweave.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import (
    discover_sources,
    find_project_root,
    get_user_config_path,
    get_worktree_root,
)
from ._load import safe_load_config
from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_pyproject_section,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    FixConfiguration,
    ImplementationsConfiguration,
    IntegrityConfiguration,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ScanConfiguration,
)
from ._validation import ValidationIssue, raise_if_validation_errors, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "FixConfiguration",
    "ImplementationsConfiguration",
    "IntegrityConfiguration",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ScanConfiguration",
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "find_project_root",
    "get_user_config_path",
    "get_worktree_root",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_pyproject_section",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
