from collections.abc import Callable

from specweave.enums import SpecType
from specweave.workspace import SpecInventory, SpecLocation, TestTarget, build_test_index


class TestBuildTestIndex:
    def test_links_test_to_operation(self, make_location: Callable[..., SpecLocation]) -> None:
        operation = make_location("billing.charge")
        test = make_location(
            "billing.charge.happy",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("operation", "billing.charge", "1"),
        )
        inventory = SpecInventory([operation, test])

        index = build_test_index(inventory.test_specs.values(), inventory)

        assert index.test_to_target == {"billing.charge.happy@1": "billing.charge@1"}
        assert index.target_to_tests == {"billing.charge@1": frozenset({"billing.charge.happy@1"})}
        assert index.has_tests("billing.charge@1")
        assert not index.has_tests("billing.refund@1")

    def test_links_test_to_workflow(self, make_location: Callable[..., SpecLocation]) -> None:
        workflow = make_location("billing.flow", spec_type=SpecType.WORKFLOW)
        test = make_location(
            "billing.flow.test",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("workflow", "billing.flow", "1"),
        )
        inventory = SpecInventory([workflow, test])

        index = build_test_index([test], inventory)

        assert index.test_to_target == {"billing.flow.test@1": "billing.flow@1"}

    def test_target_version_defaults_to_test_version(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge", version="2")
        test = make_location(
            "billing.charge.test",
            version="2",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("operation", "billing.charge"),
        )
        inventory = SpecInventory([operation, test])

        index = build_test_index([test], inventory)

        assert index.test_to_target == {"billing.charge.test@2": "billing.charge@2"}

    def test_many_tests_share_one_target(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        operation = make_location("billing.charge")
        tests = [
            make_location(
                f"billing.charge.case{n}",
                spec_type=SpecType.TEST_SPEC,
                test_target=TestTarget("operation", "billing.charge", "1"),
            )
            for n in range(3)
        ]
        inventory = SpecInventory([operation, *tests])

        index = build_test_index(tests, inventory)

        assert index.target_to_tests["billing.charge@1"] == {t.id for t in tests}

    def test_missing_target_is_orphaned(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        test = make_location(
            "billing.charge.test",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("operation", "billing.charge", "1"),
        )

        index = build_test_index([test], SpecInventory([test]))

        assert index.orphaned_tests == ("billing.charge.test@1",)
        assert index.test_to_target == {}

    def test_unsupported_target_kind_is_orphaned(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        presentation = make_location("billing.checkout", spec_type=SpecType.PRESENTATION)
        test = make_location(
            "billing.checkout.test",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("presentation", "billing.checkout", "1"),
        )

        index = build_test_index([test], SpecInventory([presentation, test]))

        assert index.orphaned_tests == ("billing.checkout.test@1",)

    def test_target_kind_must_match_category(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        workflow = make_location("billing.charge", spec_type=SpecType.WORKFLOW)
        test = make_location(
            "billing.charge.test",
            spec_type=SpecType.TEST_SPEC,
            test_target=TestTarget("operation", "billing.charge", "1"),
        )

        index = build_test_index([test], SpecInventory([workflow, test]))

        assert index.orphaned_tests == ("billing.charge.test@1",)

    def test_test_without_target_is_listed_separately(
        self, make_location: Callable[..., SpecLocation]
    ) -> None:
        test = make_location("billing.charge.test", spec_type=SpecType.TEST_SPEC)

        index = build_test_index([test], SpecInventory([test]))

        assert index.tests_without_target == ("billing.charge.test@1",)
        assert index.orphaned_tests == ()
        assert index.test_to_target == {}
