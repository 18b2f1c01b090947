"""Spec inventory and the builder that fills it from a workspace scan.

The inventory is a single arena of SpecLocation entries with a per-category
index keyed by ``key@version``. Category views are read-only mappings derived
from the index on demand.
"""

from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from types import MappingProxyType
from typing import Final

from structlog.typing import FilteringBoundLogger  # noqa: TC002 - Used at runtime in type annotations

from specweave.config import ScanConfiguration
from specweave.enums import SpecType
from specweave.exceptions import SpecError
from specweave.utils import FileSystem, create_logger
from specweave.workspace._classifier import (
    FeatureClassifier,
    SourceClassifier,
    YamlFeatureClassifier,
    YamlSourceClassifier,
    is_feature_file,
)
from specweave.workspace._models import FeatureRecord, SpecLocation, SpecRecord


CATEGORY_TYPES: Final[tuple[SpecType, ...]] = (
    SpecType.OPERATION,
    SpecType.EVENT,
    SpecType.PRESENTATION,
    SpecType.CAPABILITY,
    SpecType.WORKFLOW,
    SpecType.DATA_VIEW,
    SpecType.FORM,
    SpecType.MIGRATION,
    SpecType.EXPERIMENT,
    SpecType.INTEGRATION,
    SpecType.KNOWLEDGE,
    SpecType.TELEMETRY,
    SpecType.APP_CONFIG,
    SpecType.POLICY,
    SpecType.TEST_SPEC,
)
"""Spec types stored in the inventory, in reporting order."""


class SpecInventory:
    """Every spec declared in a workspace, grouped by category.

    Entries live in one arena; each category keeps an index from
    ``key@version`` to an arena slot. Adding an entry whose identity already
    exists in its category replaces it (last write wins) and records the
    replaced entry so duplicates can be reported.
    """

    __slots__: Final = ("_entries", "_index", "_replaced")

    _entries: list[SpecLocation]
    _index: dict[SpecType, dict[str, int]]
    _replaced: list[tuple[SpecLocation, SpecLocation]]

    def __init__(self, locations: Iterable[SpecLocation] = ()) -> None:
        self._entries = []
        self._index = {spec_type: {} for spec_type in CATEGORY_TYPES}
        self._replaced = []
        for location in locations:
            self.add(location)

    def add(self, location: SpecLocation) -> None:
        """Insert an entry into the category implied by its spec type.

        Raises:
            ValueError: If the spec type has no inventory category.
        """
        category = self._index.get(location.spec_type)
        if category is None:
            msg = f"Spec type {location.spec_type!r} has no inventory category"
            raise ValueError(msg)

        slot = category.get(location.id)
        if slot is None:
            category[location.id] = len(self._entries)
            self._entries.append(location)
            return

        previous = self._entries[slot]
        self._entries[slot] = location
        self._replaced.append((previous, location))

    def get(self, spec_type: SpecType, identity: str) -> SpecLocation | None:
        """Return the entry stored under ``key@version`` in a category."""
        category = self._index.get(spec_type)
        if category is None:
            return None
        slot = category.get(identity)
        return self._entries[slot] if slot is not None else None

    def contains(self, spec_type: SpecType, identity: str) -> bool:
        """Return whether a category holds ``key@version``."""
        category = self._index.get(spec_type)
        return category is not None and identity in category

    def view(self, spec_type: SpecType) -> MappingProxyType[str, SpecLocation]:
        """Return a read-only ``key@version`` mapping for one category.

        Unknown categories yield an empty view.
        """
        category = self._index.get(spec_type, {})
        return MappingProxyType(
            {identity: self._entries[slot] for identity, slot in category.items()}
        )

    def category_size(self, spec_type: SpecType) -> int:
        """Return the number of entries in a category."""
        return len(self._index.get(spec_type, {}))

    @property
    def replaced(self) -> tuple[tuple[SpecLocation, SpecLocation], ...]:
        """Pairs of (replaced, replacement) entries sharing an identity."""
        return tuple(self._replaced)

    @property
    def operations(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.OPERATION)

    @property
    def events(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.EVENT)

    @property
    def presentations(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.PRESENTATION)

    @property
    def capabilities(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.CAPABILITY)

    @property
    def workflows(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.WORKFLOW)

    @property
    def data_views(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.DATA_VIEW)

    @property
    def forms(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.FORM)

    @property
    def migrations(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.MIGRATION)

    @property
    def experiments(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.EXPERIMENT)

    @property
    def integrations(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.INTEGRATION)

    @property
    def knowledge(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.KNOWLEDGE)

    @property
    def telemetry(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.TELEMETRY)

    @property
    def app_configs(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.APP_CONFIG)

    @property
    def policies(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.POLICY)

    @property
    def test_specs(self) -> MappingProxyType[str, SpecLocation]:
        return self.view(SpecType.TEST_SPEC)

    def as_dict(self) -> dict[SpecType, dict[str, SpecLocation]]:
        """Return a plain copy of every non-empty category."""
        return {
            spec_type: dict(self.view(spec_type))
            for spec_type in CATEGORY_TYPES
            if self._index[spec_type]
        }

    def __iter__(self) -> Iterator[SpecLocation]:
        for spec_type in CATEGORY_TYPES:
            yield from self.view(spec_type).values()

    def __len__(self) -> int:
        return sum(len(category) for category in self._index.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpecInventory):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None  # pyright: ignore[reportAssignmentType]

    def __repr__(self) -> str:
        sizes = ", ".join(
            f"{spec_type}={len(self._index[spec_type])}"
            for spec_type in CATEGORY_TYPES
            if self._index[spec_type]
        )
        return f"SpecInventory({sizes})"


@dataclass(frozen=True, slots=True)
class InventoryScan:
    """Result of one inventory build.

    Attributes:
        inventory: Specs found in the scanned files.
        features: Feature documents in scan order.
        files_scanned: Number of regular files read.
    """

    inventory: SpecInventory
    features: tuple[FeatureRecord, ...]
    files_scanned: int = 0


@dataclass(frozen=True, slots=True)
class _FileScan:
    feature: FeatureRecord | None = None
    records: tuple[SpecRecord, ...] = ()


class InventoryBuilder:
    """Builds a SpecInventory and feature list from workspace files.

    Attributes:
        _fs: Workspace file system.
        _config: Scan configuration.
        _classifier: Multi-record spec classifier.
        _feature_classifier: Feature document classifier.
        _logger: Logger for scan diagnostics.
    """

    __slots__: Final = (
        "_classifier",
        "_config",
        "_feature_classifier",
        "_fs",
        "_logger",
    )

    _fs: FileSystem
    _config: ScanConfiguration
    _classifier: SourceClassifier
    _feature_classifier: FeatureClassifier
    _logger: FilteringBoundLogger

    def __init__(
        self,
        fs: FileSystem,
        *,
        config: ScanConfiguration | None = None,
        classifier: SourceClassifier | None = None,
        feature_classifier: FeatureClassifier | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            fs: File system the workspace is read through.
            config: Scan settings. Uses defaults if None.
            classifier: Spec classifier. Defaults to YamlSourceClassifier.
            feature_classifier: Feature classifier. Defaults to
                YamlFeatureClassifier using the configured suffixes.
            logger: Logger instance. Created if None.
        """
        self._fs = fs
        self._config = config if config is not None else ScanConfiguration()
        self._classifier = classifier if classifier is not None else YamlSourceClassifier()
        self._feature_classifier = (
            feature_classifier
            if feature_classifier is not None
            else YamlFeatureClassifier(self._config.feature_suffixes)
        )
        self._logger = logger if logger is not None else create_logger(component="inventory")

    @property
    def config(self) -> ScanConfiguration:
        """Return the scan configuration."""
        return self._config

    def discover_files(self) -> list[Path]:
        """List candidate spec and feature files under the workspace root."""
        return self._fs.glob(self._config.patterns, ignore=self._config.ignore)

    def build(self, paths: Iterable[Path] | None = None) -> InventoryScan:
        """Scan files and accumulate the inventory.

        Per-file classification runs on a thread pool when
        ``max_workers > 1``; results are merged in input order.

        Args:
            paths: Files to scan. Discovered from the workspace if None.

        Returns:
            The populated inventory and the feature records.
        """
        file_list = list(paths) if paths is not None else self.discover_files()

        if self._config.max_workers > 1 and len(file_list) > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
                scans = list(pool.map(self._scan_file, file_list))
        else:
            scans = [self._scan_file(path) for path in file_list]

        inventory = SpecInventory()
        features: list[FeatureRecord] = []
        files_scanned = 0

        for scan in scans:
            if scan is None:
                continue
            files_scanned += 1
            if scan.feature is not None:
                features.append(scan.feature)
                continue
            for record in scan.records:
                if record.spec_type in (SpecType.UNKNOWN, SpecType.FEATURE):
                    continue
                inventory.add(SpecLocation.from_record(record))

        if inventory.replaced:
            self._logger.debug(
                "Duplicate spec identities replaced",
                count=len(inventory.replaced),
            )

        self._logger.debug(
            "Inventory built",
            files=files_scanned,
            specs=len(inventory),
            features=len(features),
        )
        return InventoryScan(
            inventory=inventory,
            features=tuple(features),
            files_scanned=files_scanned,
        )

    def _scan_file(self, path: Path) -> _FileScan | None:
        if self._fs.is_dir(path):
            return None

        try:
            content = self._fs.read_text(path)
        except SpecError as e:
            self._logger.debug("Skipping unreadable file", path=str(path), error=str(e))
            return None

        if is_feature_file(path, self._config.feature_suffixes):
            try:
                feature = self._feature_classifier.classify_feature(content, path)
            except SpecError as e:
                self._logger.debug("Skipping unparsable feature", path=str(path), error=str(e))
                return None
            return _FileScan(feature=feature)

        return _FileScan(records=self._classifier.classify(content, path))
