"""Locating the workspace root and the files configuration is read from.

A workspace is marked by ``specweave.toml``. Without one, the enclosing git
worktree is the workspace and settings may live under ``[tool.specweave]``
in its ``pyproject.toml``.
"""

from pathlib import Path
from typing import Any

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName

PROJECT_CONFIG_FILE = "specweave.toml"
PYPROJECT_FILE = "pyproject.toml"


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: cwd) to the nearest workspace marker.

    Falls back to the git worktree root, then to ``None``.
    """
    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if (candidate / PROJECT_CONFIG_FILE).is_file():
            return candidate
    return get_worktree_root(origin)


def get_worktree_root(path: Path | None = None) -> Path | None:
    """Return the working tree of the git repository containing ``path``."""
    from dulwich.errors import NotGitRepository  # noqa: PLC0415
    from dulwich.repo import Repo  # noqa: PLC0415

    try:
        repo = Repo.discover(str(path.resolve()) if path else ".")
    except NotGitRepository:
        return None
    root = repo.path
    return Path(root.decode() if isinstance(root, bytes) else root)


def get_user_config_path() -> Path:
    """Per-user settings file, e.g. ``~/.config/specweave/config.toml`` on Linux.

    The file need not exist.
    """
    return platformdirs.user_config_path("specweave") / "config.toml"


def _is_readable_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def _project_config_path(root: Path) -> Path:
    marker = root / PROJECT_CONFIG_FILE
    return marker if _is_readable_file(marker) else root / PYPROJECT_FILE


def _file_source(name: ConfigSourceName, path: Path) -> ConfigSource:
    return ConfigSource(name=name, path=path, exists=_is_readable_file(path), values={})


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """List configuration layers, strongest first.

    File layers are listed even when the file is missing so callers can
    report where settings would be read from. File and environment values
    are left empty here and read by ``Config.load``.
    """
    root = project_root or find_project_root()

    sources: list[ConfigSource] = []
    if overrides:
        sources.append(ConfigSource(ConfigSourceName.OVERRIDE, None, True, overrides))
    if include_env:
        sources.append(ConfigSource(ConfigSourceName.ENV, None, True, {}))
    if root:
        sources.append(_file_source(ConfigSourceName.PROJECT, _project_config_path(root)))
    sources.append(_file_source(ConfigSourceName.USER, get_user_config_path()))
    sources.append(ConfigSource(ConfigSourceName.DEFAULT, None, True, DEFAULT_CONFIG))
    return sources
