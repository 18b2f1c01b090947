"""Data models for integrity issue remediation."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Literal

from specweave.enums import FileAction, FixStrategyType, SpecType
from specweave.workspace import IntegrityIssue, RefInfo


@dataclass(frozen=True, slots=True)
class FixableIssue:
    """An integrity issue carrying everything a strategy needs.

    Attributes:
        issue: The original issue.
        ref: The dangling reference.
        spec_type: Type of the referenced spec.
        feature_file: Feature document that declares the reference.
        feature_key: Key of that feature.
        available_strategies: Strategies that apply, in preference order.
    """

    issue: IntegrityIssue
    ref: RefInfo
    spec_type: SpecType
    feature_file: Path
    feature_key: str
    available_strategies: tuple[FixStrategyType, ...]


@dataclass(frozen=True, slots=True)
class FileChange:
    """One entry of a fix's file-change ledger.

    Attributes:
        path: File that was (or would be) changed.
        action: Kind of change.
        previous_content: Content before a modification or deletion.
    """

    path: Path
    action: FileAction
    previous_content: str | None = None


@dataclass(frozen=True, slots=True)
class FixResult:
    """Outcome of applying one strategy to one issue.

    Attributes:
        success: Whether the strategy completed.
        strategy: Strategy that was attempted, if one was resolved.
        issue: The issue being fixed.
        files_changed: Ledger of file changes, in application order.
        error: Failure description when unsuccessful.
        dry_run: True when changes were reported but not written.
    """

    success: bool
    strategy: FixStrategyType | None
    issue: IntegrityIssue
    files_changed: tuple[FileChange, ...] = ()
    error: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BatchFixResult:
    """Aggregate outcome of a batch fix, results in input order."""

    total: int
    succeeded: int
    failed: int
    results: tuple[FixResult, ...]


@dataclass(frozen=True, slots=True)
class FixLink:
    """A hint pointing at how an issue can be fixed."""

    link_type: Literal["cli"]
    label: str
    value: str


type StrategySelector = Callable[
    [FixableIssue, tuple[FixStrategyType, ...]], FixStrategyType | None
]
"""Chooses among several available strategies; None defers to the default."""

type SpecGenerator = Callable[[FixableIssue], str]
"""Produces spec document content for a missing spec."""
