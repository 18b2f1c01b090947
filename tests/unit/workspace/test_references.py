from collections.abc import Callable
from pathlib import Path

from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.workspace import (
    FeatureRecord,
    OpPresentationLink,
    RefInfo,
    SpecInventory,
    SpecLocation,
    referenced_key,
    validate_references,
)

FEATURE_FILE = Path("/specs/billing/billing.feature.yaml")


def _feature(**sections: object) -> FeatureRecord:
    return FeatureRecord(key="billing", file_path=FEATURE_FILE, **sections)  # pyright: ignore[reportArgumentType]


class TestReferencedKey:
    def test_formats_type_and_identity(self) -> None:
        assert referenced_key(SpecType.OPERATION, "billing.charge@1") == (
            "operation:billing.charge@1"
        )


class TestValidateReferences:
    def test_missing_operation_is_unresolved_error(self) -> None:
        feature = _feature(operations=(RefInfo("billing.charge", "1"),))

        result = validate_references(SpecInventory(), [feature])

        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity is IssueSeverity.ERROR
        assert issue.issue_type is IssueType.UNRESOLVED_REF
        assert issue.message == "Operation billing.charge.v1 not found"
        assert issue.file == FEATURE_FILE
        assert issue.spec_type is SpecType.OPERATION
        assert issue.ref == RefInfo("billing.charge", "1")
        assert issue.feature_key == "billing"

    def test_reports_each_reference_kind(self) -> None:
        feature = _feature(
            events=(RefInfo("billing.charged", "1"),),
            presentations=(RefInfo("billing.checkout", "1"),),
            experiments=(RefInfo("billing.pricing", "1"),),
        )

        result = validate_references(SpecInventory(), [feature])

        assert [i.message for i in result.issues] == [
            "Event billing.charged.v1 not found",
            "Presentation billing.checkout.v1 not found",
            "Experiment billing.pricing.v1 not found",
        ]

    def test_resolved_references_produce_no_issues(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge")])
        feature = _feature(operations=(RefInfo("billing.charge", "1"),))

        result = validate_references(inventory, [feature])

        assert result.issues == ()
        assert result.referenced_specs == {"operation:billing.charge@1"}

    def test_version_mismatch_is_unresolved(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge", version="1")])
        feature = _feature(operations=(RefInfo("billing.charge", "2"),))

        result = validate_references(inventory, [feature])

        assert [i.message for i in result.issues] == ["Operation billing.charge.v2 not found"]

    def test_type_mismatch_is_unresolved(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge", spec_type=SpecType.EVENT)])
        feature = _feature(operations=(RefInfo("billing.charge", "1"),))

        assert len(validate_references(inventory, [feature]).issues) == 1

    def test_missing_provided_capability_is_warning(self) -> None:
        feature = _feature(capabilities_provided=(RefInfo("payments", "1"),))

        result = validate_references(SpecInventory(), [feature])

        assert len(result.issues) == 1
        assert result.issues[0].severity is IssueSeverity.WARNING
        assert result.issues[0].issue_type is IssueType.UNRESOLVED_REF
        assert result.issues[0].message == "Provided capability payments.v1 not found"
        assert result.issues[0].spec_type is SpecType.CAPABILITY

    def test_required_capabilities_are_referenced_not_validated(self) -> None:
        feature = _feature(capabilities_required=(RefInfo("auth", "1.0.0"),))

        result = validate_references(SpecInventory(), [feature])

        assert result.issues == ()
        assert result.referenced_specs == {"capability:auth@1.0.0"}

    def test_broken_link_checks_both_sides(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        inventory = SpecInventory([make_location("billing.charge")])
        feature = _feature(
            op_to_presentation_links=(
                OpPresentationLink(
                    op=RefInfo("billing.charge", "1"),
                    pres=RefInfo("billing.checkout", "1"),
                ),
                OpPresentationLink(
                    op=RefInfo("billing.refund", "1"),
                    pres=RefInfo("billing.receipt", "1"),
                ),
            )
        )

        result = validate_references(inventory, [feature])

        assert [(i.issue_type, i.spec_type, i.message) for i in result.issues] == [
            (
                IssueType.BROKEN_LINK,
                SpecType.PRESENTATION,
                "Linked presentation billing.checkout.v1 not found",
            ),
            (
                IssueType.BROKEN_LINK,
                SpecType.OPERATION,
                "Linked operation billing.refund.v1 not found",
            ),
            (
                IssueType.BROKEN_LINK,
                SpecType.PRESENTATION,
                "Linked presentation billing.receipt.v1 not found",
            ),
        ]
        assert all(i.severity is IssueSeverity.ERROR for i in result.issues)

    def test_links_do_not_count_as_references(self) -> None:
        feature = _feature(
            op_to_presentation_links=(
                OpPresentationLink(
                    op=RefInfo("billing.charge", "1"),
                    pres=RefInfo("billing.checkout", "1"),
                ),
            )
        )

        assert validate_references(SpecInventory(), [feature]).referenced_specs == frozenset()

    def test_references_recorded_even_when_missing(self) -> None:
        feature = _feature(operations=(RefInfo("billing.charge", "1"),))

        result = validate_references(SpecInventory(), [feature])

        assert result.referenced_specs == {"operation:billing.charge@1"}

    def test_issues_follow_feature_order(self) -> None:
        first = FeatureRecord(
            key="a", file_path=Path("/a.feature.yaml"), operations=(RefInfo("x", "1"),)
        )
        second = FeatureRecord(
            key="b", file_path=Path("/b.feature.yaml"), operations=(RefInfo("y", "1"),)
        )

        result = validate_references(SpecInventory(), [first, second])

        assert [i.feature_key for i in result.issues] == ["a", "b"]
