"""Structural text edits on YAML feature documents.

Edits locate their target through the PyYAML node graph, whose marks carry
exact source positions, and then splice the original text. Formatting,
comments and the order of everything else in the document are preserved.
"""

from collections.abc import Callable, Sequence

import yaml
from yaml.error import Mark
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from specweave.workspace import RefInfo

type NodePredicate = Callable[[Node], bool]


def mapping_get(node: Node, key: str) -> Node | None:
    """Return the value node stored under ``key`` in a mapping node."""
    if not isinstance(node, MappingNode):
        return None
    for key_node, value_node in node.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return value_node
    return None


def _scalar(node: Node, key: str) -> str | None:
    value = mapping_get(node, key)
    if isinstance(value, ScalarNode):
        return str(value.value).strip()
    return None


def matches_ref(node: Node, ref: RefInfo) -> bool:
    """Return whether a node is a ``{key, version}`` mapping for ``ref``.

    Field order, quoting and flow or block style do not matter.
    """
    return _scalar(node, "key") == ref.key and _scalar(node, "version") == ref.version


def link_side_matches(side: str, ref: RefInfo) -> NodePredicate:
    """Build a predicate matching link items whose ``side`` points at ``ref``."""

    def predicate(node: Node) -> bool:
        target = mapping_get(node, side)
        return target is not None and matches_ref(target, ref)

    return predicate


def _find_sequence(root: Node, section: Sequence[str]) -> tuple[SequenceNode, ScalarNode] | None:
    node: Node | None = root
    key_node: ScalarNode | None = None
    for name in section:
        if not isinstance(node, MappingNode):
            return None
        found: Node | None = None
        for candidate_key, candidate_value in node.value:
            if isinstance(candidate_key, ScalarNode) and candidate_key.value == name:
                key_node = candidate_key
                found = candidate_value
                break
        node = found

    if not isinstance(node, SequenceNode) or key_node is None:
        return None
    return node, key_node


def _content_end(node: Node) -> Mark:
    # Block collections end at the next token, which may be far below.
    if isinstance(node, MappingNode) and not node.flow_style and node.value:
        return _content_end(node.value[-1][1])
    if isinstance(node, SequenceNode) and not node.flow_style and node.value:
        return _content_end(node.value[-1])
    return node.end_mark


def _remove_flow_item(content: str, sequence: SequenceNode, index: int) -> str:
    items = sequence.value
    item = items[index]
    if index + 1 < len(items):
        start, end = item.start_mark.index, items[index + 1].start_mark.index
    elif index > 0:
        start, end = items[index - 1].end_mark.index, item.end_mark.index
    else:
        start, end = item.start_mark.index, item.end_mark.index
    return content[:start] + content[end:]


def _remove_block_item(
    content: str,
    sequence: SequenceNode,
    index: int,
    key_node: ScalarNode,
) -> str:
    lines = content.splitlines(keepends=True)
    item = sequence.value[index]

    start = item.start_mark.line
    if (
        start > 0
        and not lines[start][: item.start_mark.column].strip()
        and lines[start - 1].strip() == "-"
    ):
        start -= 1

    end_mark = _content_end(item)
    end = end_mark.line + 1 if end_mark.column > 0 else end_mark.line

    remaining = lines[:start] + lines[end:]

    if len(sequence.value) == 1:
        key_line = key_node.end_mark.line
        text = remaining[key_line]
        body = text.rstrip("\r\n")
        if body.rstrip().endswith(":"):
            remaining[key_line] = f"{body.rstrip()} []{text[len(body):]}"

    return "".join(remaining)


def remove_sequence_item(
    content: str,
    section: Sequence[str],
    predicate: NodePredicate,
) -> str | None:
    """Remove the first item of a sequence that satisfies ``predicate``.

    Flow sequences lose the item and one adjacent separator. Block sequences
    lose the lines spanned by the item; a sequence left empty becomes ``[]``.

    Args:
        content: YAML document text.
        section: Mapping keys leading from the root to the sequence, e.g.
            ``("capabilities", "provides")``.
        predicate: Selects the item to remove.

    Returns:
        The edited text, or None if the document does not parse or no item
        matches.
    """
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        return None
    if root is None:
        return None

    located = _find_sequence(root, section)
    if located is None:
        return None
    sequence, key_node = located

    for index, item in enumerate(sequence.value):
        if not predicate(item):
            continue
        if sequence.flow_style:
            return _remove_flow_item(content, sequence, index)
        return _remove_block_item(content, sequence, index, key_node)
    return None
