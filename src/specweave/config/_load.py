import os
import sys
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import NoReturn

from specweave.exceptions import ConfigError

from ._models import Config

STRICT_ENV_VAR = "SPECWEAVE_STRICT_CONFIG"


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_root: Path | None = None,
    overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration for an entry point without crashing on bad files.

    A broken configuration normally degrades to the built-in defaults with a
    warning on stderr, and the warning text is returned alongside. With
    ``SPECWEAVE_STRICT_CONFIG=1`` the process exits instead. An explicit
    ``config_path`` that does not exist always exits.
    """
    if config_path is not None and not config_path.exists():
        _fail(f"Config file not found: {config_path}")

    try:
        if config_path is not None:
            config = Config.from_file(config_path)
        else:
            config = Config.load(project_root=project_root, overrides=overrides)
    except (ConfigError, OSError) as e:
        message = f"Failed to load config: {e}"
        if os.environ.get(STRICT_ENV_VAR, "0") == "1":
            _fail(message)
        print(f"Warning: {message}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}), message
    return config, None
