"""Workspace analysis configuration models.

This module provides Pydantic models for scanning, integrity analysis,
implementation resolution, and remediation settings.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from specweave.enums import FixStrategyType, SpecType


class ScanConfiguration(BaseModel):
    """File discovery settings for the inventory builder."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    patterns: tuple[str, ...] = Field(
        default=("**/*.yaml", "**/*.yml"),
        description="Glob patterns for spec and feature documents.",
    )
    ignore: tuple[str, ...] = Field(
        default=(
            ".git/",
            "node_modules/",
            ".venv/",
            "__pycache__/",
            "dist/",
            "build/",
            "*.egg-info/",
        ),
        description="Gitignore-style patterns excluded from every scan.",
    )
    feature_suffixes: tuple[str, ...] = Field(
        default=(".feature.yaml", ".feature.yml"),
        description="File name suffixes that mark feature documents.",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Worker threads for per-file classification.",
    )


class IntegrityConfiguration(BaseModel):
    """Integrity analysis settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    orphan_types: tuple[SpecType, ...] = Field(
        default=(
            SpecType.OPERATION,
            SpecType.EVENT,
            SpecType.PRESENTATION,
            SpecType.EXPERIMENT,
        ),
        description="Spec types flagged when no feature references them.",
    )
    require_tests_for: tuple[SpecType, ...] = Field(
        default=(),
        description="Spec types that must have at least one test spec.",
    )


class ImplementationsConfiguration(BaseModel):
    """Implementation resolution settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    output_dir: str = Field(
        default="./src",
        description="Root directory for convention-based implementation paths.",
    )
    extension: str = Field(
        default=".py",
        pattern=r"^\.[A-Za-z0-9]+$",
        description="File extension for convention-based implementation paths.",
    )
    source_patterns: tuple[str, ...] = Field(
        default=("**/*.py",),
        description="Glob patterns for source files searched during discovery.",
    )
    include_explicit: bool = Field(
        default=True, description="Include implementations declared in the spec."
    )
    include_discovered: bool = Field(
        default=True, description="Include implementations found by scanning."
    )
    include_convention: bool = Field(
        default=True, description="Include convention-based implementation paths."
    )
    compute_hashes: bool = Field(
        default=True, description="Compute SHA-256 hashes of existing files."
    )


class FixConfiguration(BaseModel):
    """Remediation settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    prefer_ai: bool = Field(
        default=False,
        description="Prefer AI-assisted implementation when it is available.",
    )
    dry_run: bool = Field(
        default=False,
        description="Report intended writes without touching the workspace.",
    )
    default_strategy: FixStrategyType | None = Field(
        default=None,
        description="Preferred strategy, used for issues where it is available.",
    )
