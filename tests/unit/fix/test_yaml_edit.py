from collections.abc import Callable

import yaml
from yaml.nodes import Node

from specweave.fix import link_side_matches, matches_ref, remove_sequence_item
from specweave.workspace import RefInfo

CHARGE = RefInfo(key="billing.charge", version="1")
CHECKOUT = RefInfo(key="billing.checkout", version="1")


def _removes(ref: RefInfo) -> Callable[[Node], bool]:
    return lambda node: matches_ref(node, ref)


class TestMatchesRef:
    def test_ignores_field_order_and_quoting(self) -> None:
        node = yaml.compose('{version: "1", key: billing.charge}')

        assert node is not None
        assert matches_ref(node, CHARGE)

    def test_numeric_version_matches_string(self) -> None:
        node = yaml.compose("key: billing.charge\nversion: 1\n")

        assert node is not None
        assert matches_ref(node, CHARGE)

    def test_other_version_does_not_match(self) -> None:
        node = yaml.compose("{key: billing.charge, version: 2}")

        assert node is not None
        assert not matches_ref(node, CHARGE)

    def test_scalar_does_not_match(self) -> None:
        node = yaml.compose("billing.charge")

        assert node is not None
        assert not matches_ref(node, CHARGE)


class TestRemoveSequenceItemFlow:
    def test_removes_first_item_and_separator(self) -> None:
        content = (
            "key: billing\n"
            'operations: [{key: billing.charge, version: "1"}, '
            '{key: billing.refund, version: "1"}]\n'
        )

        updated = remove_sequence_item(content, ("operations",), _removes(CHARGE))

        assert updated == 'key: billing\noperations: [{key: billing.refund, version: "1"}]\n'

    def test_removes_last_item_and_separator(self) -> None:
        content = (
            'operations: [{key: billing.refund, version: "1"}, '
            '{key: billing.charge, version: "1"}]\n'
        )

        updated = remove_sequence_item(content, ("operations",), _removes(CHARGE))

        assert updated == 'operations: [{key: billing.refund, version: "1"}]\n'

    def test_removing_only_item_leaves_empty_sequence(self) -> None:
        content = 'operations: [{key: billing.charge, version: "1"}]\nevents: []\n'

        updated = remove_sequence_item(content, ("operations",), _removes(CHARGE))

        assert updated == "operations: []\nevents: []\n"


class TestRemoveSequenceItemBlock:
    def test_removes_item_lines(self) -> None:
        content = (
            "key: billing\n"
            "# billing operations\n"
            "operations:\n"
            "  - key: billing.charge\n"
            '    version: "1"\n'
            "  - key: billing.refund\n"
            '    version: "1"\n'
            "events: []\n"
        )

        updated = remove_sequence_item(content, ("operations",), _removes(CHARGE))

        assert updated == (
            "key: billing\n"
            "# billing operations\n"
            "operations:\n"
            "  - key: billing.refund\n"
            '    version: "1"\n'
            "events: []\n"
        )

    def test_removing_only_item_leaves_empty_sequence(self) -> None:
        content = "key: billing\noperations:\n- key: billing.charge\n  version: '1'\nevents: []\n"

        updated = remove_sequence_item(content, ("operations",), _removes(CHARGE))

        assert updated == "key: billing\noperations: []\nevents: []\n"

    def test_removes_nested_section_item(self) -> None:
        content = (
            "capabilities:\n"
            "  provides:\n"
            "    - key: payments\n"
            '      version: "1"\n'
            "  requires: []\n"
        )

        updated = remove_sequence_item(
            content,
            ("capabilities", "provides"),
            _removes(RefInfo(key="payments", version="1")),
        )

        assert updated == "capabilities:\n  provides: []\n  requires: []\n"

    def test_removes_whole_link(self) -> None:
        content = (
            "op_to_presentation:\n"
            "- op:\n"
            "    key: billing.charge\n"
            "    version: '1'\n"
            "  pres:\n"
            "    key: billing.checkout\n"
            "    version: '1'\n"
            "- op: {key: billing.refund, version: '1'}\n"
            "  pres: {key: billing.checkout, version: '1'}\n"
        )

        updated = remove_sequence_item(
            content, ("op_to_presentation",), link_side_matches("pres", CHECKOUT)
        )

        assert updated is not None
        assert yaml.safe_load(updated) == {
            "op_to_presentation": [
                {
                    "op": {"key": "billing.refund", "version": "1"},
                    "pres": {"key": "billing.checkout", "version": "1"},
                },
            ],
        }


class TestRemoveSequenceItemNoMatch:
    def test_no_matching_item(self) -> None:
        content = "operations:\n  - {key: billing.refund, version: '1'}\n"

        assert remove_sequence_item(content, ("operations",), _removes(CHARGE)) is None

    def test_missing_section(self) -> None:
        assert remove_sequence_item("key: billing\n", ("operations",), _removes(CHARGE)) is None

    def test_section_that_is_not_a_sequence(self) -> None:
        content = "operations: billing.charge\n"

        assert remove_sequence_item(content, ("operations",), _removes(CHARGE)) is None

    def test_invalid_yaml(self) -> None:
        assert remove_sequence_item("operations: [\n", ("operations",), _removes(CHARGE)) is None

    def test_empty_document(self) -> None:
        assert remove_sequence_item("", ("operations",), _removes(CHARGE)) is None
