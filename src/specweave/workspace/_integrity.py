"""Workspace integrity analysis.

IntegrityAnalyzer runs the full pipeline over a workspace: build the
inventory, validate feature references, index tests by target, then flag
orphans and untested specs and count coverage.
"""

from collections.abc import Iterable
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from types import MappingProxyType
from typing import Final

from structlog.typing import FilteringBoundLogger  # noqa: TC002 - Used at runtime in type annotations

from specweave.config import Config, IntegrityConfiguration, ScanConfiguration
from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.utils import FileSystem, create_config_logger, create_logger
from specweave.workspace._classifier import FeatureClassifier, SourceClassifier
from specweave.workspace._coverage import analyze_coverage
from specweave.workspace._inventory import InventoryBuilder, SpecInventory
from specweave.workspace._models import (
    IntegrityAnalysisResult,
    IntegrityIssue,
    SpecLocation,
)
from specweave.workspace._references import referenced_key, validate_references
from specweave.workspace._test_index import build_test_index


class IntegrityAnalyzer:
    """Analyzes referential integrity across a workspace.

    Attributes:
        _builder: Inventory builder used for each run.
        _config: Integrity settings.
        _logger: Logger for analysis progress.
    """

    __slots__: Final = ("_builder", "_config", "_logger")

    _builder: InventoryBuilder
    _config: IntegrityConfiguration
    _logger: FilteringBoundLogger

    def __init__(
        self,
        fs: FileSystem,
        *,
        scan: ScanConfiguration | None = None,
        integrity: IntegrityConfiguration | None = None,
        classifier: SourceClassifier | None = None,
        feature_classifier: FeatureClassifier | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            fs: File system the workspace is read through.
            scan: Scan settings. Uses defaults if None.
            integrity: Integrity settings. Uses defaults if None.
            classifier: Spec classifier passed to the inventory builder.
            feature_classifier: Feature classifier passed to the builder.
            logger: Logger instance. Created if None.
        """
        self._logger = logger if logger is not None else create_logger(component="integrity")
        self._config = integrity if integrity is not None else IntegrityConfiguration()
        self._builder = InventoryBuilder(
            fs,
            config=scan,
            classifier=classifier,
            feature_classifier=feature_classifier,
            logger=self._logger,
        )

    @classmethod
    def from_config(
        cls,
        fs: FileSystem,
        config: Config,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> "IntegrityAnalyzer":  # noqa: UP037
        """Create an analyzer from a loaded configuration."""
        return cls(
            fs,
            scan=config.scan,
            integrity=config.integrity,
            logger=(
                logger
                if logger is not None
                else create_config_logger(config.logging, component="integrity")
            ),
        )

    def analyze(
        self,
        *,
        feature_key: str | None = None,
        spec_type: SpecType | None = None,
        paths: Iterable[Path] | None = None,
    ) -> IntegrityAnalysisResult:
        """Run integrity analysis.

        Args:
            feature_key: Only validate the feature with this key. Orphan
                detection then only counts references from that feature.
            spec_type: Only report issues and orphans of this spec type.
            paths: Files to scan. Discovered from the workspace if None.

        Returns:
            The complete analysis result.
        """
        self._logger.info(
            "Starting integrity analysis",
            feature_key=feature_key,
            spec_type=spec_type,
        )

        scan = self._builder.build(paths)
        inventory = scan.inventory

        features = (
            tuple(f for f in scan.features if f.key == feature_key)
            if feature_key is not None
            else scan.features
        )

        validation = validate_references(inventory, features)
        test_index = build_test_index(inventory.test_specs.values(), inventory)
        coverage = analyze_coverage(
            inventory,
            validation.referenced_specs,
            test_index,
            orphan_types=self._config.orphan_types,
            require_tests_for=self._config.require_tests_for,
        )

        issues = validation.issues + coverage.issues
        orphaned_specs = coverage.orphaned_specs
        if spec_type is not None:
            issues = tuple(i for i in issues if i.spec_type == spec_type)
            orphaned_specs = tuple(s for s in orphaned_specs if s.spec_type == spec_type)

        healthy = not any(i.severity is IssueSeverity.ERROR for i in issues)

        self._logger.info(
            "Integrity analysis complete",
            features=len(scan.features),
            total_specs=coverage.coverage.total,
            orphaned=len(orphaned_specs),
            issues=len(issues),
            healthy=healthy,
        )

        return IntegrityAnalysisResult(
            inventory=inventory,
            features=features,
            coverage=coverage.coverage,
            issues=issues,
            orphaned_specs=orphaned_specs,
            test_index=test_index,
            healthy=healthy,
        )


def get_all_specs(inventory: SpecInventory) -> tuple[SpecLocation, ...]:
    """Return every inventory entry as a flat tuple, category by category."""
    return tuple(inventory)


def filter_issues_by_type(
    issues: Iterable[IntegrityIssue], issue_type: IssueType
) -> tuple[IntegrityIssue, ...]:
    """Return the issues of one type, in their original order."""
    return tuple(i for i in issues if i.issue_type is issue_type)


def filter_issues_by_severity(
    issues: Iterable[IntegrityIssue], severity: IssueSeverity
) -> tuple[IntegrityIssue, ...]:
    """Return the issues at exactly ``severity``, in their original order."""
    return tuple(i for i in issues if i.severity is severity)


def find_duplicate_specs(
    inventory: SpecInventory,
) -> MappingProxyType[str, tuple[SpecLocation, ...]]:
    """Report spec identities declared more than once.

    Duplicates are not integrity issues: the inventory keeps the last
    declaration. This report lists every declaration of each duplicated
    identity in scan order, the kept one last.

    Returns:
        Mapping of ``type:key@version`` to the declarations.
    """
    duplicates: dict[str, list[SpecLocation]] = {}
    for previous, replacement in inventory.replaced:
        entries = duplicates.setdefault(
            referenced_key(previous.spec_type, previous.id), [previous]
        )
        entries.append(replacement)
    return MappingProxyType({key: tuple(entries) for key, entries in duplicates.items()})
