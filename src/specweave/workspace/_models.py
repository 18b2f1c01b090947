"""Data models for workspace integrity analysis and implementation resolution.

All models are frozen dataclasses with slots. Collection fields are tuples,
frozensets or read-only mappings so results can be shared freely once built.
"""

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from types import MappingProxyType
from typing import TYPE_CHECKING

from specweave.enums import (
    ImplementationSource,
    ImplementationStatus,
    ImplementationType,
    IssueSeverity,
    IssueType,
    ReferenceKind,
    SpecType,
)

if TYPE_CHECKING:
    from specweave.workspace._inventory import SpecInventory


def spec_id(key: str, version: str) -> str:
    """Return the inventory identity ``key@version``."""
    return f"{key}@{version}"


def display_ref(key: str, version: str) -> str:
    """Return the human-readable form ``key.vVERSION``."""
    return f"{key}.v{version}"


def _empty_mapping() -> MappingProxyType[str, object]:
    return MappingProxyType({})


# =============================================================================
# References and Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class RefInfo:
    """A ``{key, version}`` reference declared by a feature.

    Attributes:
        key: Dotted spec key (e.g. "billing.charge").
        version: Spec version as written in the document.
    """

    key: str
    version: str

    @property
    def id(self) -> str:
        """Inventory identity of the referenced spec."""
        return spec_id(self.key, self.version)

    @property
    def display(self) -> str:
        """Human-readable form used in issue messages."""
        return display_ref(self.key, self.version)


@dataclass(frozen=True, slots=True)
class TestTarget:
    """The spec a test spec exercises.

    Attributes:
        target_type: Kind of the target; only "operation" and "workflow" resolve.
        key: Target spec key.
        version: Target version, or None to use the test's own version.
    """

    __test__ = False

    target_type: str
    key: str
    version: str | None = None


@dataclass(frozen=True, slots=True)
class ImplementationRef:
    """An implementation declared inside a spec document."""

    path: str
    impl_type: ImplementationType
    description: str | None = None


@dataclass(frozen=True, slots=True)
class SpecRecord:
    """A single spec declaration produced by a source classifier.

    Attributes:
        key: Spec key.
        version: Spec version.
        spec_type: Classified spec kind.
        file_path: File that declares the spec.
        stability: Optional stability marker (e.g. "beta").
        test_target: Target of a test spec, if declared.
        implementations: Implementations declared in the document.
    """

    key: str
    version: str
    spec_type: SpecType
    file_path: Path
    stability: str | None = None
    test_target: TestTarget | None = None
    implementations: tuple[ImplementationRef, ...] = ()

    @property
    def id(self) -> str:
        """Inventory identity of the record."""
        return spec_id(self.key, self.version)


@dataclass(frozen=True, slots=True)
class SpecLocation:
    """An inventory entry locating one declared spec."""

    key: str
    version: str
    spec_type: SpecType
    file_path: Path
    stability: str | None = None
    test_target: TestTarget | None = None

    @property
    def id(self) -> str:
        """Inventory identity of the entry."""
        return spec_id(self.key, self.version)

    @classmethod
    def from_record(cls, record: SpecRecord) -> "SpecLocation":  # noqa: UP037
        """Create an inventory entry from a classifier record."""
        return cls(
            key=record.key,
            version=record.version,
            spec_type=record.spec_type,
            file_path=record.file_path,
            stability=record.stability,
            test_target=record.test_target,
        )


@dataclass(frozen=True, slots=True)
class OpPresentationLink:
    """An operation-to-presentation link declared by a feature."""

    op: RefInfo
    pres: RefInfo


@dataclass(frozen=True, slots=True)
class FeatureRecord:
    """A feature document and the references it declares.

    Attributes:
        key: Feature key.
        file_path: Feature document path.
        title: Optional display title.
        operations: Referenced operations.
        events: Referenced events.
        presentations: Referenced presentations.
        experiments: Referenced experiments.
        capabilities_provided: Capabilities this feature provides.
        capabilities_required: Capabilities this feature expects elsewhere.
        op_to_presentation_links: Operation to presentation links.
    """

    key: str
    file_path: Path
    title: str | None = None
    operations: tuple[RefInfo, ...] = ()
    events: tuple[RefInfo, ...] = ()
    presentations: tuple[RefInfo, ...] = ()
    experiments: tuple[RefInfo, ...] = ()
    capabilities_provided: tuple[RefInfo, ...] = ()
    capabilities_required: tuple[RefInfo, ...] = ()
    op_to_presentation_links: tuple[OpPresentationLink, ...] = ()


# =============================================================================
# Integrity Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntegrityIssue:
    """A structural defect found during integrity analysis.

    Attributes:
        severity: Error or warning.
        issue_type: Issue category.
        message: Human-readable description.
        file: Document the issue belongs to.
        spec_key: Key of the affected spec (orphans and missing tests).
        spec_type: Type of the affected or referenced spec.
        ref: The dangling reference (unresolved refs and broken links).
        feature_key: Key of the feature that declared the reference.
    """

    severity: IssueSeverity
    issue_type: IssueType
    message: str
    file: Path
    spec_key: str | None = None
    spec_type: SpecType | None = None
    ref: RefInfo | None = None
    feature_key: str | None = None


@dataclass(frozen=True, slots=True)
class CoverageByType:
    """Coverage counters for one spec category."""

    total: int = 0
    covered: int = 0
    orphaned: int = 0
    missing_test: int = 0


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate coverage across all analyzed categories."""

    total: int = 0
    linked_to_feature: int = 0
    orphaned: int = 0
    by_type: MappingProxyType[SpecType, CoverageByType] = field(
        default_factory=_empty_mapping  # pyright: ignore[reportAssignmentType]
    )


@dataclass(frozen=True, slots=True)
class TestToTargetIndex:
    """Bidirectional index between test specs and the specs they exercise.

    Keys on both sides are inventory identities (``key@version``). Every test
    appears in exactly one of ``test_to_target``, ``orphaned_tests`` and
    ``tests_without_target``.
    """

    __test__ = False

    target_to_tests: MappingProxyType[str, frozenset[str]] = field(
        default_factory=_empty_mapping  # pyright: ignore[reportAssignmentType]
    )
    test_to_target: MappingProxyType[str, str] = field(
        default_factory=_empty_mapping  # pyright: ignore[reportAssignmentType]
    )
    orphaned_tests: tuple[str, ...] = ()
    tests_without_target: tuple[str, ...] = ()

    def has_tests(self, target_id: str) -> bool:
        """Return whether any test targets ``target_id``."""
        return bool(self.target_to_tests.get(target_id))


@dataclass(frozen=True, slots=True)
class IntegrityAnalysisResult:
    """Complete result of one integrity analysis run.

    Attributes:
        inventory: Every spec found in the workspace.
        features: Features considered by the analysis (after key filtering).
        coverage: Coverage counters.
        issues: Issues in detection order.
        orphaned_specs: Specs not referenced by any considered feature.
        test_index: Test to target index.
        healthy: True when no issue has error severity.
    """

    inventory: "SpecInventory"  # noqa: UP037
    features: tuple[FeatureRecord, ...]
    coverage: CoverageSummary
    issues: tuple[IntegrityIssue, ...]
    orphaned_specs: tuple[SpecLocation, ...]
    test_index: TestToTargetIndex
    healthy: bool


# =============================================================================
# Implementation Resolution
# =============================================================================


@dataclass(frozen=True, slots=True)
class CodeReference:
    """A textual reference to a spec key found in a source file.

    Attributes:
        file_path: Workspace-relative POSIX path of the source file.
        reference_type: How the file refers to the spec.
        line: 1-based line of the first match.
        impl_type: Implementation type inferred from the file path.
        matched_key: The key or key variant that matched.
    """

    file_path: str
    reference_type: ReferenceKind
    line: int
    impl_type: ImplementationType
    matched_key: str


@dataclass(frozen=True, slots=True)
class ResolvedImplementation:
    """One implementation candidate for a spec.

    Attributes:
        path: Workspace-relative POSIX path.
        impl_type: Kind of artifact.
        source: Evidence source that produced the candidate first.
        exists: Whether the file exists.
        content_hash: SHA-256 of the file when hashing is enabled.
        description: Optional description from an explicit declaration.
    """

    path: str
    impl_type: ImplementationType
    source: ImplementationSource
    exists: bool
    content_hash: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class SpecImplementationResult:
    """Implementations resolved for one spec document."""

    spec_key: str
    spec_version: str
    spec_path: Path
    spec_type: SpecType
    implementations: tuple[ResolvedImplementation, ...]
    status: ImplementationStatus
    spec_hash: str | None = None


@dataclass(frozen=True, slots=True)
class ImplementationSummary:
    """Status counts over a batch of resolution results."""

    total: int
    implemented: int
    partial: int
    missing: int
    coverage_percent: int
