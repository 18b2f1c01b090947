"""Implementation resolution for spec documents.

For one spec, candidate implementation files come from three sources, in
precedence order:

1. Explicit: the ``implementations`` list declared in the spec document.
2. Discovered: workspace source files that reference the spec key.
3. Convention: paths derived from the key and spec type.

Candidates are deduplicated by path (first source wins), checked for
existence and optionally content-hashed. The spec's status follows from
which candidates exist.
"""

import math
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Final

from structlog.typing import FilteringBoundLogger  # noqa: TC002 - Used at runtime in type annotations

from specweave.config import Config, ImplementationsConfiguration, ScanConfiguration
from specweave.enums import (
    ImplementationSource,
    ImplementationStatus,
    ImplementationType,
    SpecType,
)
from specweave.exceptions import SpecError, SpecNotFoundError
from specweave.utils import (
    FileSystem,
    content_hash,
    create_config_logger,
    create_logger,
    to_kebab_case,
)
from specweave.workspace._classifier import SourceClassifier, YamlSourceClassifier
from specweave.workspace._models import (
    ImplementationSummary,
    ResolvedImplementation,
    SpecImplementationResult,
)
from specweave.workspace._scanner import (
    RegexSourceScanner,
    SourceScanner,
    get_spec_key_variants,
)

DEFAULT_SPEC_VERSION: Final = "1.0.0"


@dataclass(frozen=True, slots=True)
class ConventionPath:
    """An expected implementation path derived from naming conventions."""

    path: str
    impl_type: ImplementationType


def get_convention_paths(
    spec_type: SpecType,
    spec_key: str,
    output_dir: str,
    extension: str = ".py",
) -> tuple[ConventionPath, ...]:
    """Return the conventional implementation and test paths for a spec.

    Args:
        spec_type: Spec type; only operations, events, presentations and
            forms have conventions.
        spec_key: Spec key, kebab-cased into the file name.
        output_dir: Root directory of implementation sources.
        extension: File extension including the dot.

    Returns:
        The implementation path followed by its test path, or nothing.
    """
    kebab = to_kebab_case(spec_key)
    out = output_dir.rstrip("/") or "."

    match spec_type:
        case SpecType.OPERATION | SpecType.EVENT:
            return (
                ConventionPath(
                    f"{out}/handlers/{kebab}.handler{extension}", ImplementationType.HANDLER
                ),
                ConventionPath(
                    f"{out}/handlers/{kebab}.handler.test{extension}", ImplementationType.TEST
                ),
            )
        case SpecType.PRESENTATION:
            return (
                ConventionPath(
                    f"{out}/components/{kebab}{extension}", ImplementationType.COMPONENT
                ),
                ConventionPath(
                    f"{out}/components/{kebab}.test{extension}", ImplementationType.TEST
                ),
            )
        case SpecType.FORM:
            return (
                ConventionPath(f"{out}/forms/{kebab}.form{extension}", ImplementationType.FORM),
                ConventionPath(
                    f"{out}/forms/{kebab}.form.test{extension}", ImplementationType.TEST
                ),
            )
        case _:
            return ()


def determine_status(
    implementations: Sequence[ResolvedImplementation],
) -> ImplementationStatus:
    """Derive a spec's status from its candidates.

    A spec is missing when no non-test candidate exists (an existing test on
    its own does not count), implemented when every candidate exists, and
    partial otherwise.
    """
    if not any(i.exists and i.impl_type is not ImplementationType.TEST for i in implementations):
        return ImplementationStatus.MISSING
    if all(i.exists for i in implementations):
        return ImplementationStatus.IMPLEMENTED
    return ImplementationStatus.PARTIAL


def summarize_implementations(
    results: Sequence[SpecImplementationResult],
) -> ImplementationSummary:
    """Count statuses over a batch of results.

    Coverage is the rounded percentage of implemented specs, or 100 for an
    empty batch.
    """
    implemented = sum(1 for r in results if r.status is ImplementationStatus.IMPLEMENTED)
    partial = sum(1 for r in results if r.status is ImplementationStatus.PARTIAL)
    missing = sum(1 for r in results if r.status is ImplementationStatus.MISSING)
    total = len(results)
    coverage = math.floor(implemented / total * 100 + 0.5) if total else 100
    return ImplementationSummary(
        total=total,
        implemented=implemented,
        partial=partial,
        missing=missing,
        coverage_percent=coverage,
    )


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


class _Accumulator:
    """Ordered dedup-by-path collection of candidates."""

    __slots__: Final = ("_compute_hashes", "_fs", "_items")

    _fs: FileSystem
    _compute_hashes: bool
    _items: dict[str, ResolvedImplementation]

    def __init__(self, fs: FileSystem, *, compute_hashes: bool) -> None:
        self._fs = fs
        self._compute_hashes = compute_hashes
        self._items = {}

    def add(
        self,
        path: str,
        impl_type: ImplementationType,
        source: ImplementationSource,
        description: str | None = None,
    ) -> None:
        key = _normalize(path)
        if key in self._items:
            return

        target = Path(key)
        exists = self._fs.exists(target)
        digest: str | None = None
        if exists and self._compute_hashes:
            try:
                digest = content_hash(self._fs.read_text(target))
            except SpecError:
                digest = None

        self._items[key] = ResolvedImplementation(
            path=key,
            impl_type=impl_type,
            source=source,
            exists=exists,
            content_hash=digest,
            description=description,
        )

    def result(self) -> tuple[ResolvedImplementation, ...]:
        return tuple(self._items.values())


class ImplementationResolver:
    """Resolves implementation candidates for spec documents.

    Attributes:
        _fs: Workspace file system.
        _config: Implementation resolution settings.
        _scan: Scan settings; spec patterns and ignores are excluded from
            source discovery.
        _classifier: Classifier used to read the spec document.
        _scanner: Scanner used for reference discovery.
        _logger: Logger for resolution diagnostics.
    """

    __slots__: Final = (
        "_classifier",
        "_config",
        "_fs",
        "_logger",
        "_scan",
        "_scanner",
    )

    _fs: FileSystem
    _config: ImplementationsConfiguration
    _scan: ScanConfiguration
    _classifier: SourceClassifier
    _scanner: SourceScanner
    _logger: FilteringBoundLogger

    def __init__(
        self,
        fs: FileSystem,
        *,
        config: ImplementationsConfiguration | None = None,
        scan: ScanConfiguration | None = None,
        classifier: SourceClassifier | None = None,
        scanner: SourceScanner | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            fs: File system the workspace is read through.
            config: Resolution settings. Uses defaults if None.
            scan: Scan settings. Uses defaults if None.
            classifier: Spec classifier. Defaults to YamlSourceClassifier.
            scanner: Source scanner. Defaults to RegexSourceScanner.
            logger: Logger instance. Created if None.
        """
        self._fs = fs
        self._config = config if config is not None else ImplementationsConfiguration()
        self._scan = scan if scan is not None else ScanConfiguration()
        self._classifier = classifier if classifier is not None else YamlSourceClassifier()
        self._scanner = scanner if scanner is not None else RegexSourceScanner()
        self._logger = logger if logger is not None else create_logger(component="resolver")

    @classmethod
    def from_config(
        cls,
        fs: FileSystem,
        config: Config,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> "ImplementationResolver":  # noqa: UP037
        """Create a resolver from a loaded configuration."""
        return cls(
            fs,
            config=config.implementations,
            scan=config.scan,
            logger=(
                logger
                if logger is not None
                else create_config_logger(config.logging, component="resolver")
            ),
        )

    def _relative(self, path: Path) -> str:
        absolute = path if path.is_absolute() else self._fs.root / path
        try:
            return absolute.relative_to(self._fs.root).as_posix()
        except ValueError:
            return absolute.as_posix()

    def load_sources(self) -> tuple[tuple[str, str], ...]:
        """Read the workspace source files searched during discovery.

        Spec documents and ignored paths are excluded. Unreadable files are
        skipped.

        Returns:
            Pairs of (workspace-relative POSIX path, content).
        """
        ignore = (*self._scan.ignore, *self._scan.patterns)
        sources: list[tuple[str, str]] = []
        for path in self._fs.glob(self._config.source_patterns, ignore=ignore):
            try:
                content = self._fs.read_text(path)
            except SpecError as e:
                self._logger.debug("Skipping unreadable source", path=str(path), error=str(e))
                continue
            sources.append((self._relative(path), content))
        return tuple(sources)

    def _discover(
        self,
        spec_key: str,
        spec_path: str,
        sources: Iterable[tuple[str, str]],
    ) -> list[tuple[str, ImplementationType]]:
        keys = (spec_key, *get_spec_key_variants(spec_key))
        found: list[tuple[str, ImplementationType]] = []
        for key in keys:
            for path, content in sources:
                if path == spec_path:
                    continue
                found.extend(
                    (ref.file_path, ref.impl_type)
                    for ref in self._scanner.find_references(content, path, key)
                )
        return found

    def resolve(
        self,
        spec_file: Path,
        *,
        sources: Sequence[tuple[str, str]] | None = None,
    ) -> SpecImplementationResult:
        """Resolve implementations for one spec document.

        Args:
            spec_file: Spec document path.
            sources: Pre-loaded source files from load_sources(). Loaded on
                demand if None and discovery is enabled.

        Returns:
            The resolved candidates and status.

        Raises:
            SpecNotFoundError: If the spec document does not exist.
            SpecIOError: If the spec document cannot be read.
        """
        if not self._fs.exists(spec_file):
            msg = f"Spec file not found: {spec_file}"
            raise SpecNotFoundError(msg, path=spec_file)

        content = self._fs.read_text(spec_file)
        spec_hash = content_hash(content) if self._config.compute_hashes else None
        records = self._classifier.classify(content, spec_file)
        record = records[0] if records else None

        spec_key = record.key if record is not None else spec_file.stem
        spec_version = record.version if record is not None else DEFAULT_SPEC_VERSION
        spec_type = record.spec_type if record is not None else SpecType.OPERATION

        accumulator = _Accumulator(self._fs, compute_hashes=self._config.compute_hashes)

        if self._config.include_explicit and record is not None:
            for impl in record.implementations:
                accumulator.add(
                    impl.path,
                    impl.impl_type,
                    ImplementationSource.EXPLICIT,
                    impl.description,
                )

        if self._config.include_discovered:
            if sources is None:
                sources = self.load_sources()
            spec_path = self._relative(spec_file)
            for path, impl_type in self._discover(spec_key, spec_path, sources):
                accumulator.add(path, impl_type, ImplementationSource.DISCOVERED)

        if self._config.include_convention:
            for convention in get_convention_paths(
                spec_type, spec_key, self._config.output_dir, self._config.extension
            ):
                accumulator.add(
                    convention.path, convention.impl_type, ImplementationSource.CONVENTION
                )

        implementations = accumulator.result()
        return SpecImplementationResult(
            spec_key=spec_key,
            spec_version=spec_version,
            spec_path=spec_file,
            spec_type=spec_type,
            implementations=implementations,
            status=determine_status(implementations),
            spec_hash=spec_hash,
        )

    def resolve_all(self, spec_files: Iterable[Path]) -> list[SpecImplementationResult]:
        """Resolve implementations for many specs.

        Source files are read once for the whole batch. A spec that fails to
        resolve is logged and skipped; the others keep their input order.
        """
        sources = self.load_sources() if self._config.include_discovered else ()
        results: list[SpecImplementationResult] = []
        for spec_file in spec_files:
            try:
                results.append(self.resolve(spec_file, sources=sources))
            except SpecError as e:
                self._logger.warning(
                    "Failed to resolve implementations",
                    spec_file=str(spec_file),
                    error=str(e),
                )
        return results

    def summarize(self, results: Sequence[SpecImplementationResult]) -> ImplementationSummary:
        """Return status counts for a batch of results."""
        return summarize_implementations(results)
