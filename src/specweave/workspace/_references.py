"""Validation of feature references against the spec inventory."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.workspace._inventory import SpecInventory
from specweave.workspace._models import FeatureRecord, IntegrityIssue, RefInfo

_SPEC_LABELS: Final[dict[SpecType, str]] = {
    SpecType.OPERATION: "Operation",
    SpecType.EVENT: "Event",
    SpecType.PRESENTATION: "Presentation",
    SpecType.EXPERIMENT: "Experiment",
}


def referenced_key(spec_type: SpecType, identity: str) -> str:
    """Return the ``type:key@version`` entry recorded for a reference."""
    return f"{spec_type}:{identity}"


@dataclass(frozen=True, slots=True)
class ReferenceValidation:
    """Result of validating feature references.

    Attributes:
        issues: Unresolved references and broken links, in feature order.
        referenced_specs: ``type:key@version`` entries for every reference.
    """

    issues: tuple[IntegrityIssue, ...]
    referenced_specs: frozenset[str]


def _feature_refs(feature: FeatureRecord) -> Iterable[tuple[SpecType, RefInfo]]:
    for ref in feature.operations:
        yield SpecType.OPERATION, ref
    for ref in feature.events:
        yield SpecType.EVENT, ref
    for ref in feature.presentations:
        yield SpecType.PRESENTATION, ref
    for ref in feature.experiments:
        yield SpecType.EXPERIMENT, ref


def validate_references(
    inventory: SpecInventory,
    features: Iterable[FeatureRecord],
) -> ReferenceValidation:
    """Check every reference declared by ``features`` against ``inventory``.

    Missing operations, events, presentations and experiments are
    ``unresolved-ref`` errors. A missing provided capability is an
    ``unresolved-ref`` warning. Each side of an operation to presentation link
    is checked independently and reported as a ``broken-link`` error. Required
    capabilities are recorded as referenced without validation, since another
    feature is expected to provide them.

    Args:
        inventory: Specs found in the workspace.
        features: Features to validate.

    Returns:
        The issues found and the set of referenced specs.
    """
    issues: list[IntegrityIssue] = []
    referenced: set[str] = set()

    for feature in features:
        for spec_type, ref in _feature_refs(feature):
            referenced.add(referenced_key(spec_type, ref.id))
            if not inventory.contains(spec_type, ref.id):
                issues.append(
                    IntegrityIssue(
                        severity=IssueSeverity.ERROR,
                        issue_type=IssueType.UNRESOLVED_REF,
                        message=f"{_SPEC_LABELS[spec_type]} {ref.display} not found",
                        file=feature.file_path,
                        spec_type=spec_type,
                        ref=ref,
                        feature_key=feature.key,
                    )
                )

        for ref in feature.capabilities_provided:
            referenced.add(referenced_key(SpecType.CAPABILITY, ref.id))
            if not inventory.contains(SpecType.CAPABILITY, ref.id):
                issues.append(
                    IntegrityIssue(
                        severity=IssueSeverity.WARNING,
                        issue_type=IssueType.UNRESOLVED_REF,
                        message=f"Provided capability {ref.display} not found",
                        file=feature.file_path,
                        spec_type=SpecType.CAPABILITY,
                        ref=ref,
                        feature_key=feature.key,
                    )
                )

        for ref in feature.capabilities_required:
            referenced.add(referenced_key(SpecType.CAPABILITY, ref.id))

        for link in feature.op_to_presentation_links:
            for spec_type, ref, label in (
                (SpecType.OPERATION, link.op, "operation"),
                (SpecType.PRESENTATION, link.pres, "presentation"),
            ):
                if inventory.contains(spec_type, ref.id):
                    continue
                issues.append(
                    IntegrityIssue(
                        severity=IssueSeverity.ERROR,
                        issue_type=IssueType.BROKEN_LINK,
                        message=f"Linked {label} {ref.display} not found",
                        file=feature.file_path,
                        spec_type=spec_type,
                        ref=ref,
                        feature_key=feature.key,
                    )
                )

    return ReferenceValidation(issues=tuple(issues), referenced_specs=frozenset(referenced))
