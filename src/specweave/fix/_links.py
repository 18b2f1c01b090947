"""Human-facing hints for fixing integrity issues."""

from typing import Final

from specweave.enums import FixStrategyType
from specweave.fix._dispatcher import to_fixable
from specweave.fix._models import FixLink
from specweave.workspace import IntegrityIssue

CLI_NAME: Final = "specweave"

STRATEGY_LABELS: Final[dict[FixStrategyType, str]] = {
    FixStrategyType.REMOVE_REFERENCE: "Remove the reference from the feature",
    FixStrategyType.IMPLEMENT_SKELETON: "Generate a skeleton spec",
    FixStrategyType.IMPLEMENT_AI: "Implement the spec with AI assistance",
}


def generate_fix_links(
    issue: IntegrityIssue,
    *,
    include_cli: bool = True,
) -> tuple[FixLink, ...]:
    """Return one command hint per strategy available for an issue.

    Unfixable issues get no links.

    Example:
        ``specweave fix --strategy remove-reference --feature billing --ref billing.charge.v1``
    """
    fixable = to_fixable(issue)
    if fixable is None or not include_cli:
        return ()

    return tuple(
        FixLink(
            link_type="cli",
            label=STRATEGY_LABELS[strategy],
            value=(
                f"{CLI_NAME} fix --strategy {strategy} "
                f"--feature {fixable.feature_key} --ref {fixable.ref.display}"
            ),
        )
        for strategy in fixable.available_strategies
    )
