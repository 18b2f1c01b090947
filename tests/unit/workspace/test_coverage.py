from collections.abc import Callable

from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.workspace import (
    CoverageByType,
    SpecInventory,
    SpecLocation,
    TestTarget,
    TestToTargetIndex,
    analyze_coverage,
    build_test_index,
    has_convention_test,
)

ORPHAN_TYPES = (SpecType.OPERATION, SpecType.EVENT, SpecType.PRESENTATION, SpecType.EXPERIMENT)


class TestHasConventionTest:
    def test_matches_key_dot_test_at_same_version(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge")
        inventory = SpecInventory(
            [operation, make_location("billing.charge.test", spec_type=SpecType.TEST_SPEC)]
        )

        assert has_convention_test(inventory, operation)

    def test_other_version_does_not_match(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge", version="2")
        inventory = SpecInventory(
            [operation, make_location("billing.charge.test", spec_type=SpecType.TEST_SPEC)]
        )

        assert not has_convention_test(inventory, operation)


class TestAnalyzeCoverage:
    def test_unreferenced_specs_are_orphans(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        linked = make_location("billing.charge")
        orphan = make_location("billing.refund")
        inventory = SpecInventory([linked, orphan])

        result = analyze_coverage(
            inventory,
            frozenset({"operation:billing.charge@1"}),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
        )

        assert result.orphaned_specs == (orphan,)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity is IssueSeverity.WARNING
        assert issue.issue_type is IssueType.ORPHANED
        assert issue.message == "operation billing.refund.v1 is not linked to any feature"
        assert issue.file == orphan.file_path
        assert issue.spec_key == "billing.refund"
        assert issue.spec_type is SpecType.OPERATION
        assert issue.ref is None

    def test_counts_coverage_per_type(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory(
            [
                make_location("a"),
                make_location("b"),
                make_location("e", spec_type=SpecType.EVENT),
            ]
        )

        result = analyze_coverage(
            inventory,
            frozenset({"operation:a@1"}),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
        )

        by_type = result.coverage.by_type
        assert by_type[SpecType.OPERATION] == CoverageByType(total=2, covered=1, orphaned=1)
        assert by_type[SpecType.EVENT] == CoverageByType(total=1, covered=0, orphaned=1)
        assert by_type[SpecType.PRESENTATION] == CoverageByType()
        assert result.coverage.total == 3
        assert result.coverage.linked_to_feature == 1
        assert result.coverage.orphaned == 2

    def test_types_outside_orphan_set_are_ignored(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("wf", spec_type=SpecType.WORKFLOW)])

        result = analyze_coverage(
            inventory, frozenset(), TestToTargetIndex(), orphan_types=ORPHAN_TYPES
        )

        assert result.issues == ()
        assert SpecType.WORKFLOW not in result.coverage.by_type
        assert result.coverage.total == 0

    def test_reference_must_match_type(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge")])

        result = analyze_coverage(
            inventory,
            frozenset({"event:billing.charge@1"}),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
        )

        assert len(result.orphaned_specs) == 1

    def test_missing_test_warning(self, make_location: Callable[..., SpecLocation]) -> None:
        operation = make_location("billing.charge")
        inventory = SpecInventory([operation])

        result = analyze_coverage(
            inventory,
            frozenset({"operation:billing.charge@1"}),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
            require_tests_for=(SpecType.OPERATION,),
        )

        assert [(i.issue_type, i.message) for i in result.issues] == [
            (IssueType.MISSING_TEST, "operation billing.charge.v1 has no test"),
        ]
        assert result.issues[0].severity is IssueSeverity.WARNING
        assert result.coverage.by_type[SpecType.OPERATION].missing_test == 1

    def test_targeted_test_satisfies_requirement(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge")
        test = make_location(
            "billing.charge.happy",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("operation", "billing.charge", "1"),
        )
        inventory = SpecInventory([operation, test])

        result = analyze_coverage(
            inventory,
            frozenset({"operation:billing.charge@1"}),
            build_test_index([test], inventory),
            orphan_types=ORPHAN_TYPES,
            require_tests_for=(SpecType.OPERATION,),
        )

        assert result.issues == ()
        assert result.coverage.by_type[SpecType.OPERATION].missing_test == 0

    def test_convention_test_satisfies_requirement(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge")
        test = make_location("billing.charge.test", spec_type=SpecType.TEST_SPEC)
        inventory = SpecInventory([operation, test])

        result = analyze_coverage(
            inventory,
            frozenset({"operation:billing.charge@1"}),
            build_test_index([test], inventory),
            orphan_types=ORPHAN_TYPES,
            require_tests_for=(SpecType.OPERATION,),
        )

        assert result.coverage.by_type[SpecType.OPERATION].missing_test == 0

    def test_orphan_can_also_miss_tests(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge")])

        result = analyze_coverage(
            inventory,
            frozenset(),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
            require_tests_for=(SpecType.OPERATION,),
        )

        assert [i.issue_type for i in result.issues] == [
            IssueType.ORPHANED,
            IssueType.MISSING_TEST,
        ]

    def test_tested_type_outside_orphan_set_gets_row(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.flow", spec_type=SpecType.WORKFLOW)])

        result = analyze_coverage(
            inventory,
            frozenset(),
            TestToTargetIndex(),
            orphan_types=ORPHAN_TYPES,
            require_tests_for=(SpecType.WORKFLOW,),
        )

        assert [i.issue_type for i in result.issues] == [IssueType.MISSING_TEST]
        assert result.orphaned_specs == ()
        assert result.coverage.by_type[SpecType.WORKFLOW].missing_test == 1
        assert result.coverage.total == 0
