from collections.abc import Callable
from pathlib import Path

import pytest

from specweave.enums import IssueSeverity, IssueType, SpecType
from specweave.workspace import IntegrityIssue, RefInfo, SpecLocation, TestTarget


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def make_location() -> Callable[..., SpecLocation]:
    """Return a factory function to create SpecLocation entries with defaults."""

    def _make(
        key: str = "billing.charge",
        version: str = "1",
        spec_type: SpecType = SpecType.OPERATION,
        file_path: Path | None = None,
        test_target: TestTarget | None = None,
    ) -> SpecLocation:
        return SpecLocation(
            key=key,
            version=version,
            spec_type=spec_type,
            file_path=file_path or Path(f"/specs/{key}.{spec_type}.yaml"),
            test_target=test_target,
        )

    return _make


@pytest.fixture
def make_issue() -> Callable[..., IntegrityIssue]:
    """Return a factory function to create unresolved-ref issues with defaults."""

    def _make(
        key: str = "billing.charge",
        version: str = "1",
        spec_type: SpecType | None = SpecType.OPERATION,
        issue_type: IssueType = IssueType.UNRESOLVED_REF,
        severity: IssueSeverity = IssueSeverity.ERROR,
        file: Path | None = None,
        feature_key: str | None = "billing",
        with_ref: bool = True,
    ) -> IntegrityIssue:
        return IntegrityIssue(
            severity=severity,
            issue_type=issue_type,
            message=f"Operation {key}.v{version} not found",
            file=file or Path("/specs/billing/billing.feature.yaml"),
            spec_type=spec_type,
            ref=RefInfo(key=key, version=version) if with_ref else None,
            feature_key=feature_key,
        )

    return _make
