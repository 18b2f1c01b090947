"""Path exclusion for workspace scans.

Scans skip dependency trees, caches and VCS metadata. Patterns use gitignore
syntax and are compiled once per scan with pathspec.
"""

from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used at runtime in function parameters
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathspec import GitIgnoreSpec


DEFAULT_IGNORE_PATTERNS: frozenset[str] = frozenset(
    {
        "*.pyc",
        "*.egg-info/",
        ".git/",
        ".venv/",
        "__pycache__/",
        "node_modules/",
    }
)
"""Always excluded unless ``IgnoreConfig.include_defaults`` is off."""


@dataclass(frozen=True, slots=True)
class IgnoreConfig:
    """Where exclusion patterns come from.

    Attributes:
        include_defaults: Start from ``DEFAULT_IGNORE_PATTERNS``.
        workspace_gitignore: Read ``.gitignore`` at the workspace root.
        extra_patterns: Patterns from the ``scan.exclude`` setting.
    """

    include_defaults: bool = True
    workspace_gitignore: bool = True
    extra_patterns: tuple[str, ...] = ()


def load_gitignore_patterns(path: Path) -> list[str]:
    """Return the active lines of a gitignore file, or ``[]`` if it is absent."""
    if not path.is_file():
        return []
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def collect_patterns(root: Path, *, config: IgnoreConfig | None = None) -> list[str]:
    """Gather exclusion patterns for a workspace.

    Defaults come first (sorted), then the root ``.gitignore``, then extras.
    A pattern seen earlier is not repeated.
    """
    config = config or IgnoreConfig()

    sources: list[list[str] | tuple[str, ...]] = []
    if config.include_defaults:
        sources.append(sorted(DEFAULT_IGNORE_PATTERNS))
    if config.workspace_gitignore:
        sources.append(load_gitignore_patterns(root / ".gitignore"))
    sources.append(config.extra_patterns)

    # dict preserves first-seen order
    ordered: dict[str, None] = {}
    for source in sources:
        ordered.update(dict.fromkeys(source))
    return list(ordered)


def create_pathspec(
    root: Path,
    *,
    config: IgnoreConfig | None = None,
) -> "GitIgnoreSpec":  # noqa: UP037
    """Compile the workspace's exclusion patterns into a matcher."""
    from pathspec import GitIgnoreSpec  # noqa: PLC0415

    return GitIgnoreSpec.from_lines(collect_patterns(root, config=config))
