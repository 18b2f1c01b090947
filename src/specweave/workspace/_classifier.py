"""Classification of workspace documents into spec and feature records.

Spec documents are YAML files holding one or more ``---`` separated
documents. Each document declares a ``kind`` (the spec type), a ``key`` and a
``version``. Feature documents are recognised by file name suffix and list the
specs that make up a feature.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Final, Protocol, runtime_checkable

import yaml

from specweave.enums import ImplementationType, SpecType
from specweave.exceptions import SpecParseError
from specweave.workspace._models import (
    FeatureRecord,
    ImplementationRef,
    OpPresentationLink,
    RefInfo,
    SpecRecord,
    TestTarget,
)

DEFAULT_FEATURE_SUFFIXES: Final[tuple[str, ...]] = (".feature.yaml", ".feature.yml")

# Version used for capability requirements that name only a key.
DEFAULT_REQUIRED_VERSION: Final = "1.0.0"

_KIND_ALIASES: Final[Mapping[str, SpecType]] = {
    "test": SpecType.TEST_SPEC,
    "test_spec": SpecType.TEST_SPEC,
    "data_view": SpecType.DATA_VIEW,
    "dataview": SpecType.DATA_VIEW,
    "app_config": SpecType.APP_CONFIG,
    "command": SpecType.OPERATION,
    "query": SpecType.OPERATION,
}


class SpecLoader(yaml.SafeLoader):
    """SafeLoader that keeps int and float scalars as their source text.

    Versions are compared as strings, so ``version: 1.10`` must stay
    ``"1.10"`` rather than become the float ``1.1``.
    """


def _numeric_as_text(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)


for _tag in ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float"):
    SpecLoader.add_constructor(_tag, _numeric_as_text)


@runtime_checkable
class SourceClassifier(Protocol):
    """Turns file content into zero or more spec records.

    Implementations never raise: unknown or unparsable content yields an empty
    tuple.
    """

    def classify(self, content: str, path: Path) -> tuple[SpecRecord, ...]: ...


@runtime_checkable
class FeatureClassifier(Protocol):
    """Turns a feature document into a feature record."""

    def classify_feature(self, content: str, path: Path) -> FeatureRecord: ...


def is_feature_file(
    path: Path,
    suffixes: Sequence[str] = DEFAULT_FEATURE_SUFFIXES,
) -> bool:
    """Return whether a path names a feature document."""
    name = path.name
    return any(name.endswith(suffix) for suffix in suffixes)


def parse_spec_type(kind: object) -> SpecType:
    """Map a document ``kind`` value to a spec type.

    Unrecognised values map to ``SpecType.UNKNOWN``.
    """
    if not isinstance(kind, str):
        return SpecType.UNKNOWN

    normalized = kind.strip().lower()
    if normalized in _KIND_ALIASES:
        return _KIND_ALIASES[normalized]
    try:
        return SpecType(normalized.replace("_", "-"))
    except ValueError:
        return SpecType.UNKNOWN


def _as_version(value: object) -> str | None:
    # SpecLoader keeps numbers as text; "version: yes" still loads as a bool
    if isinstance(value, str):
        return value.strip() or None
    return None


def _as_key(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_ref(value: object, *, default_version: str | None = None) -> RefInfo | None:
    if isinstance(value, str) and default_version is not None:
        key = _as_key(value)
        return RefInfo(key=key, version=default_version) if key else None

    if not isinstance(value, Mapping):
        return None

    key = _as_key(value.get("key"))  # pyright: ignore[reportUnknownMemberType]
    version = _as_version(value.get("version")) or default_version  # pyright: ignore[reportUnknownMemberType]
    if key is None or version is None:
        return None
    return RefInfo(key=key, version=version)


def _parse_refs(
    values: object, *, default_version: str | None = None
) -> tuple[RefInfo, ...]:
    if not isinstance(values, list):
        return ()
    refs = (_parse_ref(item, default_version=default_version) for item in values)  # pyright: ignore[reportUnknownVariableType]
    return tuple(ref for ref in refs if ref is not None)


def _parse_test_target(value: object) -> TestTarget | None:
    if not isinstance(value, Mapping):
        return None

    target_type = value.get("type", value.get("target_type"))  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
    key = _as_key(value.get("key"))  # pyright: ignore[reportUnknownMemberType]
    if not isinstance(target_type, str) or key is None:
        return None
    return TestTarget(
        target_type=target_type.strip().lower(),
        key=key,
        version=_as_version(value.get("version")),  # pyright: ignore[reportUnknownMemberType]
    )


def _parse_implementations(value: object) -> tuple[ImplementationRef, ...]:
    if not isinstance(value, list):
        return ()

    implementations: list[ImplementationRef] = []
    for item in value:  # pyright: ignore[reportUnknownVariableType]
        if not isinstance(item, Mapping):
            continue
        path = item.get("path")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        if not isinstance(path, str) or not path.strip():
            continue
        try:
            impl_type = ImplementationType(str(item.get("type", "other")))  # pyright: ignore[reportUnknownMemberType,reportUnknownArgumentType]
        except ValueError:
            impl_type = ImplementationType.OTHER
        description = item.get("description")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        implementations.append(
            ImplementationRef(
                path=path.strip(),
                impl_type=impl_type,
                description=description if isinstance(description, str) else None,
            )
        )
    return tuple(implementations)


class YamlSourceClassifier:
    """Classifies YAML spec documents.

    Every mapping document with a recognised ``kind``, a ``key`` and a
    ``version`` produces one record. Feature documents and anything else are
    ignored.
    """

    __slots__: Final = ()

    def classify(self, content: str, path: Path) -> tuple[SpecRecord, ...]:
        """Classify every document in ``content``.

        Args:
            content: Raw file content.
            path: Path of the file, recorded on each record.

        Returns:
            Records in document order; empty when nothing can be classified.
        """
        try:
            documents = list(yaml.load_all(content, Loader=SpecLoader))  # noqa: S506
        except yaml.YAMLError:
            return ()

        records: list[SpecRecord] = []
        for document in documents:
            record = self._classify_document(document, path)
            if record is not None:
                records.append(record)
        return tuple(records)

    def _classify_document(self, document: object, path: Path) -> SpecRecord | None:
        if not isinstance(document, Mapping):
            return None

        spec_type = parse_spec_type(document.get("kind"))  # pyright: ignore[reportUnknownMemberType]
        if spec_type in (SpecType.UNKNOWN, SpecType.FEATURE):
            return None

        key = _as_key(document.get("key"))  # pyright: ignore[reportUnknownMemberType]
        version = _as_version(document.get("version"))  # pyright: ignore[reportUnknownMemberType]
        if key is None or version is None:
            return None

        stability = document.get("stability")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        test_target = (
            _parse_test_target(document.get("target"))  # pyright: ignore[reportUnknownMemberType]
            if spec_type is SpecType.TEST_SPEC
            else None
        )

        return SpecRecord(
            key=key,
            version=version,
            spec_type=spec_type,
            file_path=path,
            stability=stability if isinstance(stability, str) else None,
            test_target=test_target,
            implementations=_parse_implementations(document.get("implementations")),  # pyright: ignore[reportUnknownMemberType]
        )


class YamlFeatureClassifier:
    """Classifies YAML feature documents.

    A feature document is a single mapping::

        key: billing
        title: Billing
        operations:
          - {key: billing.charge, version: 1}
        capabilities:
          provides: [{key: payments, version: 1}]
          requires: [auth]
        op_to_presentation:
          - op: {key: billing.charge, version: 1}
            pres: {key: billing.checkout, version: 1}
    """

    __slots__: Final = ("_suffixes",)

    _suffixes: tuple[str, ...]

    def __init__(self, suffixes: Sequence[str] = DEFAULT_FEATURE_SUFFIXES) -> None:
        self._suffixes = tuple(suffixes)

    def _default_key(self, path: Path) -> str:
        name = path.name
        for suffix in self._suffixes:
            if name.endswith(suffix):
                return name[: -len(suffix)]
        return path.stem

    def classify_feature(self, content: str, path: Path) -> FeatureRecord:
        """Parse a feature document.

        Malformed reference entries are dropped. The key falls back to the
        file name without its feature suffix.

        Raises:
            SpecParseError: If the content is not valid YAML or not a mapping.
        """
        try:
            document: object = yaml.load(content, Loader=SpecLoader)  # noqa: S506
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            msg = f"Invalid YAML in feature document: {e}"
            raise SpecParseError(msg, path=path, line=line, cause=e) from e

        if document is None:
            document = {}
        if not isinstance(document, Mapping):
            msg = "Feature document must be a mapping"
            raise SpecParseError(msg, path=path)

        key = _as_key(document.get("key")) or self._default_key(path)  # pyright: ignore[reportUnknownMemberType]
        title = document.get("title")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]

        capabilities = document.get("capabilities")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        if not isinstance(capabilities, Mapping):
            capabilities = {}

        links: list[OpPresentationLink] = []
        raw_links = document.get("op_to_presentation")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        if isinstance(raw_links, list):
            for item in raw_links:  # pyright: ignore[reportUnknownVariableType]
                if not isinstance(item, Mapping):
                    continue
                op = _parse_ref(item.get("op"))  # pyright: ignore[reportUnknownMemberType]
                pres = _parse_ref(item.get("pres"))  # pyright: ignore[reportUnknownMemberType]
                if op is not None and pres is not None:
                    links.append(OpPresentationLink(op=op, pres=pres))

        return FeatureRecord(
            key=key,
            file_path=path,
            title=title if isinstance(title, str) else None,
            operations=_parse_refs(document.get("operations")),  # pyright: ignore[reportUnknownMemberType]
            events=_parse_refs(document.get("events")),  # pyright: ignore[reportUnknownMemberType]
            presentations=_parse_refs(document.get("presentations")),  # pyright: ignore[reportUnknownMemberType]
            experiments=_parse_refs(document.get("experiments")),  # pyright: ignore[reportUnknownMemberType]
            capabilities_provided=_parse_refs(capabilities.get("provides")),  # pyright: ignore[reportUnknownMemberType]
            capabilities_required=_parse_refs(
                capabilities.get("requires"),  # pyright: ignore[reportUnknownMemberType]
                default_version=DEFAULT_REQUIRED_VERSION,
            ),
            op_to_presentation_links=tuple(links),
        )
