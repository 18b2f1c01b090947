"""Workspace integrity analysis and implementation resolution.

Basic usage:
    from pathlib import Path

    from specweave.utils import LocalFileSystem
    from specweave.workspace import ImplementationResolver, IntegrityAnalyzer

    fs = LocalFileSystem(Path("."))
    result = IntegrityAnalyzer(fs).analyze()
    for issue in result.issues:
        print(issue.severity, issue.message)

    resolver = ImplementationResolver(fs)
    results = resolver.resolve_all([Path("specs/billing/charge.operation.yaml")])
    print(resolver.summarize(results).coverage_percent)
"""

from ._classifier import (
    DEFAULT_FEATURE_SUFFIXES,
    FeatureClassifier,
    SourceClassifier,
    YamlFeatureClassifier,
    YamlSourceClassifier,
    is_feature_file,
    parse_spec_type,
)
from ._coverage import CoverageAnalysis, analyze_coverage, has_convention_test
from ._integrity import (
    IntegrityAnalyzer,
    filter_issues_by_severity,
    filter_issues_by_type,
    find_duplicate_specs,
    get_all_specs,
)
from ._inventory import CATEGORY_TYPES, InventoryBuilder, InventoryScan, SpecInventory
from ._models import (
    CodeReference,
    CoverageByType,
    CoverageSummary,
    FeatureRecord,
    ImplementationRef,
    ImplementationSummary,
    IntegrityAnalysisResult,
    IntegrityIssue,
    OpPresentationLink,
    RefInfo,
    ResolvedImplementation,
    SpecImplementationResult,
    SpecLocation,
    SpecRecord,
    TestTarget,
    TestToTargetIndex,
    display_ref,
    spec_id,
)
from ._references import ReferenceValidation, referenced_key, validate_references
from ._resolver import (
    ConventionPath,
    ImplementationResolver,
    determine_status,
    get_convention_paths,
    summarize_implementations,
)
from ._scanner import (
    RegexSourceScanner,
    SourceScanner,
    get_spec_key_variants,
    infer_implementation_type,
)
from ._test_index import TARGET_CATEGORIES, build_test_index

__all__ = [
    "CATEGORY_TYPES",
    "DEFAULT_FEATURE_SUFFIXES",
    "TARGET_CATEGORIES",
    "CodeReference",
    "ConventionPath",
    "CoverageAnalysis",
    "CoverageByType",
    "CoverageSummary",
    "FeatureClassifier",
    "FeatureRecord",
    "ImplementationRef",
    "ImplementationResolver",
    "ImplementationSummary",
    "IntegrityAnalysisResult",
    "IntegrityAnalyzer",
    "IntegrityIssue",
    "InventoryBuilder",
    "InventoryScan",
    "OpPresentationLink",
    "RefInfo",
    "ReferenceValidation",
    "RegexSourceScanner",
    "ResolvedImplementation",
    "SourceClassifier",
    "SourceScanner",
    "SpecImplementationResult",
    "SpecInventory",
    "SpecLocation",
    "SpecRecord",
    "TestTarget",
    "TestToTargetIndex",
    "YamlFeatureClassifier",
    "YamlSourceClassifier",
    "analyze_coverage",
    "build_test_index",
    "determine_status",
    "display_ref",
    "filter_issues_by_severity",
    "filter_issues_by_type",
    "find_duplicate_specs",
    "get_all_specs",
    "get_convention_paths",
    "get_spec_key_variants",
    "has_convention_test",
    "infer_implementation_type",
    "is_feature_file",
    "parse_spec_type",
    "referenced_key",
    "spec_id",
    "summarize_implementations",
    "validate_references",
]
