"""Automated remediation of integrity issues.

Basic usage:
    from specweave.fix import FixDispatcher

    dispatcher = FixDispatcher(fs)
    batch = dispatcher.batch_fix(result.issues, dry_run=True)
    print(batch.succeeded, batch.failed)
"""

from ._dispatcher import ISSUE_STRATEGIES, FixDispatcher, available_strategies, to_fixable
from ._links import STRATEGY_LABELS, generate_fix_links
from ._models import (
    BatchFixResult,
    FileChange,
    FixableIssue,
    FixLink,
    FixResult,
    SpecGenerator,
    StrategySelector,
)
from ._skeleton import (
    CATEGORY_DIRS,
    SKELETON_TEMPLATES,
    SkeletonContext,
    render_skeleton,
    skeleton_path,
    supports_skeleton,
)
from ._strategies import implement_ai, implement_skeleton, remove_reference
from ._yaml_edit import link_side_matches, matches_ref, remove_sequence_item

__all__ = [
    "CATEGORY_DIRS",
    "ISSUE_STRATEGIES",
    "SKELETON_TEMPLATES",
    "STRATEGY_LABELS",
    "BatchFixResult",
    "FileChange",
    "FixDispatcher",
    "FixLink",
    "FixResult",
    "FixableIssue",
    "SkeletonContext",
    "SpecGenerator",
    "StrategySelector",
    "available_strategies",
    "generate_fix_links",
    "implement_ai",
    "implement_skeleton",
    "link_side_matches",
    "matches_ref",
    "remove_reference",
    "remove_sequence_item",
    "render_skeleton",
    "skeleton_path",
    "supports_skeleton",
    "to_fixable",
]
