"""Workspace file system port.

The analysis engine never touches the disk directly: it goes through the
FileSystem protocol so callers can substitute in-memory or remote workspaces.
LocalFileSystem is the default implementation rooted at a directory on disk.
"""

import os
import tempfile
from collections.abc import Iterable  # noqa: TC003 - Used at runtime in type annotations
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from specweave.exceptions import SpecIOError
from specweave.utils._ignore import IgnoreConfig, create_pathspec

__all__ = ["FileSystem", "LocalFileSystem"]


@runtime_checkable
class FileSystem(Protocol):
    """File access used by the inventory builder, resolver and fixers.

    Relative paths are interpreted against ``root``.
    """

    @property
    def root(self) -> Path: ...

    def glob(
        self,
        patterns: Iterable[str],
        *,
        ignore: Iterable[str] = (),
    ) -> list[Path]: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def mkdir(self, path: Path) -> None: ...

    def remove(self, path: Path) -> None: ...


class LocalFileSystem:
    """FileSystem implementation backed by the local disk.

    Attributes:
        _root: Absolute workspace root.
        _use_gitignore: Whether the workspace .gitignore feeds glob exclusions.
    """

    __slots__: Final = ("_root", "_use_gitignore")

    _root: Path
    _use_gitignore: bool

    def __init__(self, root: Path, *, use_gitignore: bool = True) -> None:
        """Initialize the file system.

        Args:
            root: Workspace root directory.
            use_gitignore: Apply the workspace .gitignore when globbing.
        """
        self._root = root.resolve()
        self._use_gitignore = use_gitignore

    @property
    def root(self) -> Path:
        """Return the absolute workspace root."""
        return self._root

    def _absolute(self, path: Path) -> Path:
        return path if path.is_absolute() else self._root / path

    def glob(
        self,
        patterns: Iterable[str],
        *,
        ignore: Iterable[str] = (),
    ) -> list[Path]:
        """Find files matching gitignore-style patterns.

        Ignored directories are pruned during the walk, so dependency and
        build trees are never descended into.

        Args:
            patterns: Patterns selecting files (e.g. ``**/*.yaml``).
            ignore: Patterns excluding files and directories.

        Returns:
            Sorted absolute paths of matching files.
        """
        from pathspec import GitIgnoreSpec  # noqa: PLC0415

        include_spec = GitIgnoreSpec.from_lines(list(patterns))
        ignore_spec = create_pathspec(
            self._root,
            config=IgnoreConfig(
                workspace_gitignore=self._use_gitignore,
                extra_patterns=tuple(ignore),
            ),
        )

        matches: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            current = Path(dirpath)
            rel_dir = current.relative_to(self._root)

            dirnames[:] = [
                name
                for name in dirnames
                if not ignore_spec.match_file(f"{(rel_dir / name).as_posix()}/")
            ]

            for name in filenames:
                rel = (rel_dir / name).as_posix()
                if ignore_spec.match_file(rel):
                    continue
                if include_spec.match_file(rel):
                    matches.append(current / name)

        return sorted(matches)

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file.

        Raises:
            SpecIOError: If the file cannot be read or decoded.
        """
        target = self._absolute(path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Failed to read file: {e}"
            raise SpecIOError(msg, path=target, operation="read", cause=e) from e

    def write_text(self, path: Path, content: str) -> None:
        """Replace ``path`` with ``content`` so readers never see a partial file.

        The content lands in a sibling temp file first and is renamed over the
        target. Missing parent directories are created.

        Raises:
            SpecIOError: If the file cannot be written.
        """
        target = self._absolute(path)
        temp_path: Path | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=target.parent,
                delete=False,
                suffix=".tmp",
                encoding="utf-8",
            ) as f:
                _ = f.write(content)
                temp_path = Path(f.name)

            _ = temp_path.replace(target)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            msg = f"Failed to write file: {e}"
            raise SpecIOError(msg, path=target, operation="write", cause=e) from e

    def exists(self, path: Path) -> bool:
        """Return whether a path exists, treating permission errors as absent."""
        try:
            return self._absolute(path).exists()
        except OSError:
            return False

    def is_dir(self, path: Path) -> bool:
        """Return whether a path is a directory."""
        try:
            return self._absolute(path).is_dir()
        except OSError:
            return False

    def mkdir(self, path: Path) -> None:
        """Create a directory and its parents.

        Raises:
            SpecIOError: If the directory cannot be created.
        """
        target = self._absolute(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create directory: {e}"
            raise SpecIOError(msg, path=target, operation="mkdir", cause=e) from e

    def remove(self, path: Path) -> None:
        """Delete a file; missing files are ignored.

        Raises:
            SpecIOError: If the file exists but cannot be deleted.
        """
        target = self._absolute(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Failed to delete file: {e}"
            raise SpecIOError(msg, path=target, operation="delete", cause=e) from e
