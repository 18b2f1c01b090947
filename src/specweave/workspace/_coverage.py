"""Orphan detection, missing-test detection and coverage counters."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.workspace._inventory import SpecInventory
from specweave.workspace._models import (
    CoverageByType,
    CoverageSummary,
    IntegrityIssue,
    SpecLocation,
    TestToTargetIndex,
    spec_id,
)
from specweave.workspace._references import referenced_key


@dataclass(frozen=True, slots=True)
class CoverageAnalysis:
    """Result of orphan and coverage analysis.

    Attributes:
        issues: Orphan and missing-test issues.
        orphaned_specs: Orphan-eligible specs no feature references.
        coverage: Per-type and aggregate counters.
    """

    issues: tuple[IntegrityIssue, ...]
    orphaned_specs: tuple[SpecLocation, ...]
    coverage: CoverageSummary


def has_convention_test(inventory: SpecInventory, location: SpecLocation) -> bool:
    """Return whether a ``<key>.test`` test spec exists at the same version."""
    return inventory.contains(
        SpecType.TEST_SPEC, spec_id(f"{location.key}.test", location.version)
    )


def analyze_coverage(
    inventory: SpecInventory,
    referenced_specs: frozenset[str],
    test_index: TestToTargetIndex,
    *,
    orphan_types: Sequence[SpecType],
    require_tests_for: Iterable[SpecType] = (),
) -> CoverageAnalysis:
    """Flag orphans and untested specs and count coverage per type.

    Every entry of an orphan-eligible type missing from ``referenced_specs`` is
    an ``orphaned`` warning. For types in ``require_tests_for``, an entry is
    tested when the test index targets it or a ``<key>.test`` test spec exists
    at its version; otherwise it is a ``missing-test`` warning. Types that
    require tests but are not orphan-eligible get a coverage row without
    orphan issues. Aggregate totals cover the orphan-eligible types only.

    Args:
        inventory: Specs found in the workspace.
        referenced_specs: ``type:key@version`` entries referenced by features.
        test_index: Test to target index.
        orphan_types: Types checked for orphans.
        require_tests_for: Types that must have a test.

    Returns:
        The issues, orphaned specs and coverage counters.
    """
    issues: list[IntegrityIssue] = []
    orphaned_specs: list[SpecLocation] = []
    by_type: dict[SpecType, CoverageByType] = {}

    tested_types = tuple(dict.fromkeys(require_tests_for))
    orphan_eligible = tuple(dict.fromkeys(orphan_types))
    row_types = orphan_eligible + tuple(t for t in tested_types if t not in orphan_eligible)

    for spec_type in row_types:
        flag_orphans = spec_type in orphan_eligible
        require_tests = spec_type in tested_types
        covered = 0
        missing_test = 0

        for location in inventory.view(spec_type).values():
            if referenced_key(spec_type, location.id) in referenced_specs:
                covered += 1
            elif flag_orphans:
                orphaned_specs.append(location)
                issues.append(
                    IntegrityIssue(
                        severity=IssueSeverity.WARNING,
                        issue_type=IssueType.ORPHANED,
                        message=(
                            f"{spec_type} {location.key}.v{location.version} "
                            "is not linked to any feature"
                        ),
                        file=location.file_path,
                        spec_key=location.key,
                        spec_type=location.spec_type,
                    )
                )

            if not require_tests:
                continue
            if test_index.has_tests(location.id) or has_convention_test(inventory, location):
                continue
            missing_test += 1
            issues.append(
                IntegrityIssue(
                    severity=IssueSeverity.WARNING,
                    issue_type=IssueType.MISSING_TEST,
                    message=f"{spec_type} {location.key}.v{location.version} has no test",
                    file=location.file_path,
                    spec_key=location.key,
                    spec_type=location.spec_type,
                )
            )

        total = inventory.category_size(spec_type)
        by_type[spec_type] = CoverageByType(
            total=total,
            covered=covered,
            orphaned=total - covered,
            missing_test=missing_test,
        )

    total = sum(by_type[t].total for t in orphan_eligible)
    linked = sum(by_type[t].covered for t in orphan_eligible)
    coverage = CoverageSummary(
        total=total,
        linked_to_feature=linked,
        orphaned=total - linked,
        by_type=MappingProxyType(by_type),
    )
    return CoverageAnalysis(
        issues=tuple(issues),
        orphaned_specs=tuple(orphaned_specs),
        coverage=coverage,
    )
