"""Textual discovery of spec references in Python source files.

The default scanner uses a fixed set of regular expressions, one per
reference kind. It is deliberately shallow: it finds evidence that a file
mentions a spec key, not proof that the file implements it.
"""

import re
from typing import Final, Protocol, runtime_checkable

from specweave.enums import ImplementationType, ReferenceKind
from specweave.utils import to_pascal_case
from specweave.workspace._models import CodeReference

_STRIPPED_SUFFIXES: Final[tuple[str, ...]] = ("Spec", "Contract", "Command", "Query")


@runtime_checkable
class SourceScanner(Protocol):
    """Finds references to a spec key in one source file."""

    def find_references(
        self, content: str, path: str, spec_key: str
    ) -> tuple[CodeReference, ...]: ...


def get_spec_key_variants(spec_key: str) -> tuple[str, ...]:
    """Return alternative spellings of a spec key worth searching for.

    Known suffixes (Spec, Contract, Command, Query) are stripped one after
    another; when anything was stripped, the base and its Spec and Contract
    forms are variants. Dotted keys also yield their PascalCase join.

    Examples:
        >>> get_spec_key_variants("CreateUserCommand")
        ('CreateUser', 'CreateUserSpec', 'CreateUserContract')
        >>> get_spec_key_variants("billing.charge")
        ('BillingCharge',)
    """
    variants: list[str] = []

    base = spec_key
    for suffix in _STRIPPED_SUFFIXES:
        base = base.removesuffix(suffix)

    if base != spec_key:
        variants.extend((base, f"{base}Spec", f"{base}Contract"))

    if "." in spec_key:
        variants.append(to_pascal_case(spec_key))

    return tuple(dict.fromkeys(v for v in variants if v and v != spec_key))


def infer_implementation_type(path: str) -> ImplementationType:
    """Infer what kind of artifact a source file is from its path."""
    lowered = path.lower()
    name = lowered.rsplit("/", 1)[-1]

    if (
        name.startswith("test_")
        or name.endswith("_test.py")
        or ".test." in name
        or ".spec." in name
        or "/tests/" in f"/{lowered}"
    ):
        return ImplementationType.TEST
    if "handler" in lowered:
        return ImplementationType.HANDLER
    if "component" in lowered:
        return ImplementationType.COMPONENT
    if ".form." in name or "/forms/" in f"/{lowered}":
        return ImplementationType.FORM
    if "hook" in lowered:
        return ImplementationType.HOOK
    if "service" in lowered:
        return ImplementationType.SERVICE
    return ImplementationType.OTHER


def _reference_patterns(spec_key: str) -> tuple[tuple[ReferenceKind, re.Pattern[str]], ...]:
    key = re.escape(spec_key)
    loose = rf"(?<!\w){key}(?!\w)"
    exact = rf"(?<![\w.]){key}(?![\w.])"
    return (
        (
            ReferenceKind.IMPORT,
            re.compile(rf"^[ \t]*(?:from|import)[ \t][^\n]*{loose}", re.MULTILINE),
        ),
        (
            ReferenceKind.TYPE,
            re.compile(rf"(?::|->)[ \t]*(?:[\w.]+\[)*[\"']?{exact}"),
        ),
        (
            ReferenceKind.HANDLER,
            re.compile(
                rf"(?:^[ \t]*@[\w.]+\([ \t]*|\b\w*(?i:handler|handle|implement|register)\w*\([ \t\n]*)"
                rf"[\"']?{exact}",
                re.MULTILINE,
            ),
        ),
        (
            ReferenceKind.ASSIGNMENT,
            re.compile(
                rf"(?:\b[A-Za-z_]\w*[ \t]*(?::[^=\n]*)?=|[\"']key[\"'][ \t]*:)"
                rf"[ \t]*[\"']{exact}[\"']"
            ),
        ),
    )


class RegexSourceScanner:
    """Regex-based SourceScanner for Python sources.

    Recognises import statements, type annotations, handler decorators and
    registration calls, and assignment of the key as a string literal. At most
    one reference of each kind is reported per file.
    """

    __slots__: Final = ("_cache",)

    _cache: dict[str, tuple[tuple[ReferenceKind, re.Pattern[str]], ...]]

    def __init__(self) -> None:
        self._cache = {}

    def _patterns(self, spec_key: str) -> tuple[tuple[ReferenceKind, re.Pattern[str]], ...]:
        patterns = self._cache.get(spec_key)
        if patterns is None:
            patterns = _reference_patterns(spec_key)
            self._cache[spec_key] = patterns
        return patterns

    def find_references(
        self, content: str, path: str, spec_key: str
    ) -> tuple[CodeReference, ...]:
        """Find references to ``spec_key`` in one file.

        Args:
            content: Source file content.
            path: Workspace-relative POSIX path of the file.
            spec_key: Key or key variant to search for.

        Returns:
            One reference per matching kind, in kind order.
        """
        if spec_key not in content:
            return ()

        impl_type = infer_implementation_type(path)
        references: list[CodeReference] = []
        for kind, pattern in self._patterns(spec_key):
            match = pattern.search(content)
            if match is None:
                continue
            references.append(
                CodeReference(
                    file_path=path,
                    reference_type=kind,
                    line=content.count("\n", 0, match.start()) + 1,
                    impl_type=impl_type,
                    matched_key=spec_key,
                )
            )
        return tuple(references)
