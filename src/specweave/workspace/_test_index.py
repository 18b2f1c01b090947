"""Index linking test specs to the operations and workflows they exercise."""

from collections.abc import Iterable
from types import MappingProxyType
from typing import Final

from specweave.enums import SpecType
from specweave.workspace._inventory import SpecInventory
from specweave.workspace._models import SpecLocation, TestToTargetIndex, spec_id

# Only these target kinds resolve; anything else is treated as orphaned.
TARGET_CATEGORIES: Final[MappingProxyType[str, SpecType]] = MappingProxyType(
    {
        "operation": SpecType.OPERATION,
        "workflow": SpecType.WORKFLOW,
    }
)


def build_test_index(
    tests: Iterable[SpecLocation],
    inventory: SpecInventory,
) -> TestToTargetIndex:
    """Build the bidirectional test to target index.

    A test without a target is listed in ``tests_without_target``; naming
    conventions are left to the coverage analyzer. A target without a version
    uses the test's own version. Targets of an unsupported kind, or absent
    from the inventory, put the test in ``orphaned_tests``.

    Args:
        tests: Test spec entries.
        inventory: Inventory the targets are looked up in.

    Returns:
        The populated index.
    """
    target_to_tests: dict[str, set[str]] = {}
    test_to_target: dict[str, str] = {}
    orphaned: list[str] = []
    without_target: list[str] = []

    for test in tests:
        target = test.test_target
        if target is None:
            without_target.append(test.id)
            continue

        target_id = spec_id(target.key, target.version or test.version)
        category = TARGET_CATEGORIES.get(target.target_type)
        if category is None or not inventory.contains(category, target_id):
            orphaned.append(test.id)
            continue

        test_to_target[test.id] = target_id
        target_to_tests.setdefault(target_id, set()).add(test.id)

    return TestToTargetIndex(
        target_to_tests=MappingProxyType(
            {target: frozenset(keys) for target, keys in target_to_tests.items()}
        ),
        test_to_target=MappingProxyType(test_to_target),
        orphaned_tests=tuple(orphaned),
        tests_without_target=tuple(without_target),
    )
