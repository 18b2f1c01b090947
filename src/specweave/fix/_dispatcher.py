"""Fix dispatcher.

Each issue moves through Detected -> Strategized -> Resolved -> Applied or
Failed: an IntegrityIssue becomes a FixableIssue, a strategy is resolved for
it, and the strategy is applied. Failures never escape as exceptions; they
are recorded on the FixResult.
"""

from collections.abc import Iterable
from typing import Final

from structlog.typing import FilteringBoundLogger  # noqa: TC002 - Used at runtime in type annotations

from specweave.config import Config, FixConfiguration
from specweave.enums import FileAction, FixStrategyType, IssueType
from specweave.exceptions import FixError, SpecError, StrategyNotFoundError
from specweave.fix._models import (
    BatchFixResult,
    FileChange,
    FixableIssue,
    FixResult,
    SpecGenerator,
    StrategySelector,
)
from specweave.fix._strategies import implement_ai, implement_skeleton, remove_reference
from specweave.utils import FileSystem, create_config_logger, create_logger
from specweave.workspace import IntegrityIssue

ISSUE_STRATEGIES: Final[dict[IssueType, tuple[FixStrategyType, ...]]] = {
    IssueType.UNRESOLVED_REF: (
        FixStrategyType.REMOVE_REFERENCE,
        FixStrategyType.IMPLEMENT_SKELETON,
        FixStrategyType.IMPLEMENT_AI,
    ),
    IssueType.BROKEN_LINK: (
        FixStrategyType.REMOVE_REFERENCE,
        FixStrategyType.IMPLEMENT_SKELETON,
    ),
}
"""Strategies available per issue type, in default preference order."""


def available_strategies(issue: IntegrityIssue) -> tuple[FixStrategyType, ...]:
    """Return the strategies that apply to an issue's type."""
    return ISSUE_STRATEGIES.get(issue.issue_type, ())


def to_fixable(issue: IntegrityIssue) -> FixableIssue | None:
    """Build a FixableIssue, or return None when the issue cannot be fixed.

    Only issues naming a reference, the declaring feature and the spec type
    are fixable, which excludes orphans and missing tests.
    """
    if issue.ref is None or issue.feature_key is None or issue.spec_type is None:
        return None

    strategies = available_strategies(issue)
    if not strategies:
        return None

    return FixableIssue(
        issue=issue,
        ref=issue.ref,
        spec_type=issue.spec_type,
        feature_file=issue.file,
        feature_key=issue.feature_key,
        available_strategies=strategies,
    )


class FixDispatcher:
    """Resolves and applies remediation strategies for integrity issues.

    Attributes:
        _fs: Workspace file system.
        _config: Remediation settings.
        _selector: Chooses among several strategies when no rule decides.
        _generator: Produces spec content for implement-ai.
        _logger: Logger for remediation progress.
    """

    __slots__: Final = ("_config", "_fs", "_generator", "_logger", "_selector")

    _fs: FileSystem
    _config: FixConfiguration
    _selector: StrategySelector | None
    _generator: SpecGenerator | None
    _logger: FilteringBoundLogger

    def __init__(
        self,
        fs: FileSystem,
        *,
        config: FixConfiguration | None = None,
        selector: StrategySelector | None = None,
        generator: SpecGenerator | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            fs: File system fixes are applied through.
            config: Remediation settings. Uses defaults if None.
            selector: Interactive strategy selector.
            generator: Spec content generator for implement-ai.
            logger: Logger instance. Created if None.
        """
        self._fs = fs
        self._config = config if config is not None else FixConfiguration()
        self._selector = selector
        self._generator = generator
        self._logger = logger if logger is not None else create_logger(component="fix")

    @classmethod
    def from_config(
        cls,
        fs: FileSystem,
        config: Config,
        *,
        selector: StrategySelector | None = None,
        generator: SpecGenerator | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> "FixDispatcher":  # noqa: UP037
        """Create a dispatcher from a loaded configuration."""
        return cls(
            fs,
            config=config.fix,
            selector=selector,
            generator=generator,
            logger=(
                logger
                if logger is not None
                else create_config_logger(config.logging, component="fix")
            ),
        )

    def to_fixable(self, issue: IntegrityIssue) -> FixableIssue | None:
        """Build a FixableIssue for an issue, or None if it is unfixable."""
        return to_fixable(issue)

    def resolve_strategy(
        self,
        fixable: FixableIssue,
        *,
        strategy: FixStrategyType | None = None,
    ) -> FixStrategyType:
        """Choose the strategy to apply.

        Precedence: the ``strategy`` argument; the configured default when it
        is available for this issue; implement-ai when AI is preferred and
        available; the only available strategy; the selector's choice; the
        first available strategy.

        Raises:
            StrategyNotFoundError: If ``strategy`` is not available.
        """
        available = fixable.available_strategies

        if strategy is not None:
            if strategy not in available:
                msg = (
                    f"Strategy '{strategy}' is not available for "
                    f"{fixable.issue.issue_type} issues"
                )
                raise StrategyNotFoundError(
                    msg,
                    strategy=str(strategy),
                    available=tuple(str(s) for s in available),
                )
            return strategy

        default = self._config.default_strategy
        if default is not None and default in available:
            return default

        if self._config.prefer_ai and FixStrategyType.IMPLEMENT_AI in available:
            return FixStrategyType.IMPLEMENT_AI

        if len(available) == 1:
            return available[0]

        if self._selector is not None:
            chosen = self._selector(fixable, available)
            if chosen is not None and chosen in available:
                return chosen

        return available[0]

    def apply(
        self,
        fixable: FixableIssue,
        strategy: FixStrategyType,
        *,
        dry_run: bool | None = None,
    ) -> FixResult:
        """Apply a strategy and record the outcome.

        Args:
            fixable: Issue to fix.
            strategy: Strategy to apply.
            dry_run: Report changes without writing. Defaults to the
                configured value.

        Returns:
            A successful result with the change ledger, or a failed result
            carrying the error.
        """
        effective_dry_run = self._config.dry_run if dry_run is None else dry_run
        try:
            match strategy:
                case FixStrategyType.REMOVE_REFERENCE:
                    changes = remove_reference(fixable, self._fs, dry_run=effective_dry_run)
                case FixStrategyType.IMPLEMENT_SKELETON:
                    changes = implement_skeleton(fixable, self._fs, dry_run=effective_dry_run)
                case FixStrategyType.IMPLEMENT_AI:
                    changes = implement_ai(
                        fixable,
                        self._fs,
                        generator=self._generator,
                        dry_run=effective_dry_run,
                    )
        except (FixError, SpecError) as e:
            self._logger.warning(
                "Fix failed",
                strategy=str(strategy),
                ref=fixable.ref.display,
                error=str(e),
            )
            return FixResult(
                success=False,
                strategy=strategy,
                issue=fixable.issue,
                error=str(e),
                dry_run=effective_dry_run,
            )

        self._logger.info(
            "Fix applied",
            strategy=str(strategy),
            ref=fixable.ref.display,
            files=[str(change.path) for change in changes],
            dry_run=effective_dry_run,
        )
        return FixResult(
            success=True,
            strategy=strategy,
            issue=fixable.issue,
            files_changed=changes,
            dry_run=effective_dry_run,
        )

    def fix(
        self,
        issue: IntegrityIssue,
        *,
        strategy: FixStrategyType | None = None,
        dry_run: bool | None = None,
    ) -> FixResult:
        """Fix one issue end to end.

        Unfixable issues and unavailable forced strategies produce failed
        results rather than exceptions.
        """
        fixable = self.to_fixable(issue)
        if fixable is None:
            return FixResult(
                success=False,
                strategy=strategy,
                issue=issue,
                error=f"Issue of type '{issue.issue_type}' cannot be fixed automatically",
            )

        try:
            chosen = self.resolve_strategy(fixable, strategy=strategy)
        except StrategyNotFoundError as e:
            return FixResult(success=False, strategy=strategy, issue=issue, error=str(e))

        return self.apply(fixable, chosen, dry_run=dry_run)

    def batch_fix(
        self,
        issues: Iterable[IntegrityIssue],
        *,
        strategy: FixStrategyType | None = None,
        dry_run: bool | None = None,
    ) -> BatchFixResult:
        """Fix issues one after another.

        An exception raised while fixing one issue becomes that issue's failed
        result; the remaining issues are still processed.

        Returns:
            Aggregate counts and per-issue results in input order.
        """
        results: list[FixResult] = []
        for issue in issues:
            try:
                result = self.fix(issue, strategy=strategy, dry_run=dry_run)
            except Exception as e:  # noqa: BLE001 - one issue must not abort the batch
                self._logger.warning("Fix raised", error=str(e), message=issue.message)
                result = FixResult(success=False, strategy=strategy, issue=issue, error=str(e))
            results.append(result)

        succeeded = sum(1 for r in results if r.success)
        return BatchFixResult(
            total=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded,
            results=tuple(results),
        )

    def undo(self, result: FixResult) -> tuple[FileChange, ...]:
        """Revert the changes recorded by a fix.

        Modified and deleted files get their previous content back; created
        files are removed. Changes are reverted in reverse order. Dry-run and
        failed results have nothing to revert.

        Returns:
            The changes made while reverting.

        Raises:
            SpecIOError: If a file cannot be restored.
        """
        if result.dry_run or not result.success:
            return ()

        reverted: list[FileChange] = []
        for change in reversed(result.files_changed):
            if change.action is FileAction.CREATED:
                previous = self._fs.read_text(change.path) if self._fs.exists(change.path) else None
                self._fs.remove(change.path)
                reverted.append(
                    FileChange(path=change.path, action=FileAction.DELETED, previous_content=previous)
                )
            elif change.previous_content is not None:
                current = self._fs.read_text(change.path) if self._fs.exists(change.path) else None
                self._fs.write_text(change.path, change.previous_content)
                reverted.append(
                    FileChange(
                        path=change.path,
                        action=FileAction.MODIFIED if current is not None else FileAction.CREATED,
                        previous_content=current,
                    )
                )
        return tuple(reverted)
