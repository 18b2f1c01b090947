"""Shared test fixtures for specweave tests."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml
from dulwich.repo import Repo

from specweave.utils import LocalFileSystem


def _ref(key: str, version: str = "1") -> dict[str, str]:
    return {"key": key, "version": version}


@dataclass(frozen=True, slots=True)
class SpecWorkspace:
    """A workspace directory on disk with helpers to author documents."""

    root: Path
    fs: LocalFileSystem

    def write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content, encoding="utf-8")
        return path

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")

    def write_spec(
        self,
        relative: str,
        kind: str,
        key: str,
        version: str = "1",
        **fields: Any,  # pyright: ignore[reportAny,reportExplicitAny]
    ) -> Path:
        document = {"kind": kind, "key": key, "version": version, **fields}
        return self.write(relative, yaml.safe_dump(document, sort_keys=False))

    def write_feature(
        self,
        relative: str,
        key: str,
        **sections: Any,  # pyright: ignore[reportAny,reportExplicitAny]
    ) -> Path:
        document = {"key": key, **sections}
        return self.write(relative, yaml.safe_dump(document, sort_keys=False))


@pytest.fixture
def workspace(tmp_path: Path) -> SpecWorkspace:
    """Create an empty workspace rooted in a temporary directory.

    Structure:
        tmp_path/
            workspace/       # LocalFileSystem root, no .gitignore
    """
    root = (tmp_path / "workspace").resolve()
    root.mkdir()
    return SpecWorkspace(root=root, fs=LocalFileSystem(root))


@pytest.fixture
def billing_workspace(workspace: SpecWorkspace) -> SpecWorkspace:
    """Create a small, fully consistent billing workspace.

    Structure:
        specs/billing/
            billing.feature.yaml            # refs charge op, charged event, checkout pres
            operations/charge.operation.yaml
            events/charged.event.yaml
            presentations/checkout.presentation.yaml
            tests/charge.test-spec.yaml     # targets billing.charge@1
    """
    _ = workspace.write_spec(
        "specs/billing/operations/charge.operation.yaml", "operation", "billing.charge"
    )
    _ = workspace.write_spec(
        "specs/billing/events/charged.event.yaml", "event", "billing.charged"
    )
    _ = workspace.write_spec(
        "specs/billing/presentations/checkout.presentation.yaml",
        "presentation",
        "billing.checkout",
    )
    _ = workspace.write_spec(
        "specs/billing/tests/charge.test-spec.yaml",
        "test-spec",
        "billing.charge.happy-path",
        target={"type": "operation", "key": "billing.charge", "version": "1"},
    )
    _ = workspace.write_feature(
        "specs/billing/billing.feature.yaml",
        "billing",
        title="Billing",
        operations=[_ref("billing.charge")],
        events=[_ref("billing.charged")],
        presentations=[_ref("billing.checkout")],
        op_to_presentation=[
            {"op": _ref("billing.charge"), "pres": _ref("billing.checkout")},
        ],
    )
    return workspace


@pytest.fixture
def git_project(tmp_path: Path) -> Path:
    """Create a directory holding a real git repository and no config marker."""
    root = (tmp_path / "repo").resolve()
    root.mkdir()
    _ = Repo.init(str(root))
    return root
