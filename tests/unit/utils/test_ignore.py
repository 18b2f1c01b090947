"""Scan exclusion patterns."""

import warnings
from pathlib import Path

from pyfakefs.fake_filesystem import FakeFilesystem  # noqa: TC002 - Used at runtime in type annotations

from specweave.utils import (
    DEFAULT_IGNORE_PATTERNS,
    IgnoreConfig,
    collect_patterns,
    create_pathspec,
    load_gitignore_patterns,
)


class TestDefaultIgnorePatterns:
    def test_excludes_dependency_and_vcs_dirs(self) -> None:
        assert "__pycache__/" in DEFAULT_IGNORE_PATTERNS
        assert ".git/" in DEFAULT_IGNORE_PATTERNS
        assert "node_modules/" in DEFAULT_IGNORE_PATTERNS
        assert ".venv/" in DEFAULT_IGNORE_PATTERNS

    def test_cannot_be_mutated(self) -> None:
        assert isinstance(DEFAULT_IGNORE_PATTERNS, frozenset)


class TestLoadGitignorePatterns:
    def test_skips_comments_and_blank_lines(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/ws/.gitignore", contents="# build output\n\ndist/\n*.log\n")

        assert load_gitignore_patterns(Path("/ws/.gitignore")) == ["dist/", "*.log"]

    def test_missing_file_yields_nothing(self, fs: FakeFilesystem) -> None:
        assert load_gitignore_patterns(Path("/ws/.gitignore")) == []


class TestCollectPatterns:
    def test_defaults_then_gitignore_then_extra(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/ws/.gitignore", contents="dist/\n")

        patterns = collect_patterns(
            Path("/ws"), config=IgnoreConfig(extra_patterns=("drafts/",))
        )

        assert patterns[: len(DEFAULT_IGNORE_PATTERNS)] == sorted(DEFAULT_IGNORE_PATTERNS)
        assert patterns[-2:] == ["dist/", "drafts/"]

    def test_deduplicates_patterns(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/ws/.gitignore", contents="node_modules/\n")

        patterns = collect_patterns(Path("/ws"))

        assert patterns.count("node_modules/") == 1

    def test_sources_can_be_disabled(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/ws/.gitignore", contents="dist/\n")

        patterns = collect_patterns(
            Path("/ws"),
            config=IgnoreConfig(include_defaults=False, workspace_gitignore=False),
        )

        assert patterns == []


class TestCreatePathspec:
    def test_matches_directories_and_files(self, fs: FakeFilesystem) -> None:
        spec = create_pathspec(
            Path("/ws"),
            config=IgnoreConfig(workspace_gitignore=False, extra_patterns=("*.tmp",)),
        )

        assert spec.match_file("node_modules/pkg/index.yaml")
        assert spec.match_file("specs/scratch.tmp")
        assert not spec.match_file("specs/charge.operation.yaml")

    def test_builds_without_deprecation_warnings(self, fs: FakeFilesystem) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)

            spec = create_pathspec(Path("/ws"))

        assert spec.match_file(".git/HEAD")
