"""Remediation strategies.

Each strategy applies one fix to the workspace and returns the file-change
ledger. Failures are raised as FixError or SpecError subclasses; the
dispatcher turns them into failed results.
"""

from typing import Final

from specweave.enums import FileAction, IssueType, SpecType
from specweave.exceptions import FixError, ReferenceNotFoundError, SkeletonExistsError
from specweave.fix._models import FileChange, FixableIssue, SpecGenerator
from specweave.fix._skeleton import SkeletonContext, render_skeleton, skeleton_path
from specweave.fix._yaml_edit import link_side_matches, matches_ref, remove_sequence_item
from specweave.utils import FileSystem

# Feature document sequences holding each kind of reference.
REFERENCE_SECTIONS: Final[dict[SpecType, tuple[str, ...]]] = {
    SpecType.OPERATION: ("operations",),
    SpecType.EVENT: ("events",),
    SpecType.PRESENTATION: ("presentations",),
    SpecType.EXPERIMENT: ("experiments",),
    SpecType.CAPABILITY: ("capabilities", "provides"),
}

LINK_SECTION: Final = ("op_to_presentation",)

LINK_SIDES: Final[dict[SpecType, str]] = {
    SpecType.OPERATION: "op",
    SpecType.PRESENTATION: "pres",
}


def _remove_reference_text(content: str, fixable: FixableIssue) -> str | None:
    ref = fixable.ref
    if fixable.issue.issue_type is IssueType.BROKEN_LINK:
        side = LINK_SIDES.get(fixable.spec_type)
        if side is None:
            return None
        return remove_sequence_item(content, LINK_SECTION, link_side_matches(side, ref))

    section = REFERENCE_SECTIONS.get(fixable.spec_type)
    if section is None:
        return None
    return remove_sequence_item(content, section, lambda node: matches_ref(node, ref))


def remove_reference(
    fixable: FixableIssue,
    fs: FileSystem,
    *,
    dry_run: bool = False,
) -> tuple[FileChange, ...]:
    """Delete the dangling reference from the feature document.

    For a broken link the whole operation to presentation link is removed,
    since a link with one side missing is meaningless.

    Raises:
        ReferenceNotFoundError: If the reference cannot be located.
        SpecIOError: If the feature document cannot be read or written.
    """
    path = fixable.feature_file
    content = fs.read_text(path)

    updated = _remove_reference_text(content, fixable)
    if updated is None:
        msg = f"Reference {fixable.ref.display} not found in {path}"
        raise ReferenceNotFoundError(msg, path=path, ref=fixable.ref.display)

    if not dry_run:
        fs.write_text(path, updated)
    return (FileChange(path=path, action=FileAction.MODIFIED, previous_content=content),)


def _write_new_spec(
    fixable: FixableIssue,
    fs: FileSystem,
    content: str,
    *,
    dry_run: bool,
) -> tuple[FileChange, ...]:
    path = skeleton_path(fixable.feature_file, fixable.spec_type, fixable.ref.key)
    if fs.exists(path):
        msg = f"Spec file already exists: {path}"
        raise SkeletonExistsError(msg, path=path)

    if not dry_run:
        fs.mkdir(path.parent)
        fs.write_text(path, content)
    return (FileChange(path=path, action=FileAction.CREATED),)


def implement_skeleton(
    fixable: FixableIssue,
    fs: FileSystem,
    *,
    dry_run: bool = False,
) -> tuple[FileChange, ...]:
    """Write a stub spec document for the missing spec.

    Raises:
        UnsupportedSpecTypeError: If no stub exists for the spec type.
        SkeletonExistsError: If the stub path is already taken.
        SpecIOError: If the stub cannot be written.
    """
    content = render_skeleton(
        fixable.spec_type,
        SkeletonContext(
            key=fixable.ref.key,
            version=fixable.ref.version,
            feature_key=fixable.feature_key,
        ),
    )
    return _write_new_spec(fixable, fs, content, dry_run=dry_run)


def implement_ai(
    fixable: FixableIssue,
    fs: FileSystem,
    *,
    generator: SpecGenerator | None,
    dry_run: bool = False,
) -> tuple[FileChange, ...]:
    """Write a spec document produced by an external generator.

    Raises:
        FixError: If no generator is configured.
        SkeletonExistsError: If the target path is already taken.
    """
    if generator is None:
        msg = "AI-assisted implementation is not configured"
        raise FixError(msg)
    return _write_new_spec(fixable, fs, generator(fixable), dry_run=dry_run)
