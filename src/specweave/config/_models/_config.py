# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""The ``Config`` container handed to every component."""

from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Any, ClassVar, Self, TypeVar, overload

from pydantic import BaseModel, ConfigDict, PrivateAttr

from specweave.config._defaults import DEFAULT_CONFIG
from specweave.config._loader import deep_merge, parse_env_vars, read_toml_file
from specweave.config._models._common import ConfigSource, ConfigSourceName
from specweave.config._models._logging import LoggingConfig
from specweave.config._models._workspace import (
    FixConfiguration,
    ImplementationsConfiguration,
    IntegrityConfiguration,
    ScanConfiguration,
)

T = TypeVar("T")

_VALUE_LAYERS = frozenset({ConfigSourceName.DEFAULT, ConfigSourceName.OVERRIDE})


def _read_layer(source: ConfigSource) -> dict[str, Any]:
    """Return the raw values a discovered layer contributes."""
    from specweave.config._loader import read_pyproject_section  # noqa: PLC0415
    from specweave.config._validation import (  # noqa: PLC0415
        raise_if_validation_errors,
        validate_config,
    )

    if source.name in _VALUE_LAYERS:
        return source.values
    if source.name is ConfigSourceName.ENV:
        return parse_env_vars()
    if source.path is None or not source.exists:
        return {}

    if source.path.name == "pyproject.toml":
        values = read_pyproject_section(source.path)
    else:
        values = read_toml_file(source.path)
    raise_if_validation_errors(validate_config(values, source=source.name.value))
    return values


class Config(BaseModel):
    """Merged, validated settings with one typed section per table.

    Build instances with ``from_dict``, ``from_file`` or ``load``. Values not
    covered by a section stay reachable through ``get``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _scan: ScanConfiguration = PrivateAttr(default_factory=ScanConfiguration)
    _integrity: IntegrityConfiguration = PrivateAttr(default_factory=IntegrityConfiguration)
    _implementations: ImplementationsConfiguration = PrivateAttr(
        default_factory=ImplementationsConfiguration
    )
    _fix: FixConfiguration = PrivateAttr(default_factory=FixConfiguration)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
    ) -> None:
        super().__init__()
        self._data = _data or {}
        self._sources = _sources

        section = self._data.get
        self._logging = LoggingConfig.model_validate(section("logging", {}))
        self._scan = ScanConfiguration.model_validate(section("scan", {}))
        self._integrity = IntegrityConfiguration.model_validate(section("integrity", {}))
        self._implementations = ImplementationsConfiguration.model_validate(
            section("implementations", {})
        )
        self._fix = FixConfiguration.model_validate(section("fix", {}))

    @classmethod
    def _build(
        cls,
        merged: dict[str, Any],
        sources: tuple[ConfigSource, ...] = (),
        *,
        validate: bool = True,
        source_label: str | None = None,
    ) -> Self:
        from specweave.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        if validate:
            raise_if_validation_errors(validate_config(merged), source=source_label)
        return cls(_data=merged, _sources=sources)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, validate: bool = True) -> Self:
        """Overlay ``data`` on the built-in defaults.

        Raises:
            ConfigValidationError: If a value is rejected and ``validate`` is set.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), validate=validate)

    @classmethod
    def from_file(cls, path: Path, *, validate: bool = True) -> Self:
        """Use a single TOML file on top of the defaults, ignoring other layers.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ConfigLoadError: If ``path`` is not valid TOML.
            ConfigValidationError: If a value is rejected and ``validate`` is set.
        """
        data = read_toml_file(path)
        source = ConfigSource(ConfigSourceName.PROJECT, path, True, data)
        return cls._build(
            deep_merge(DEFAULT_CONFIG, data),
            (source,),
            validate=validate,
            source_label=str(path),
        )

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        include_env: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Merge every discovered layer: defaults, user, project, env, overrides.

        ``project_root`` defaults to the nearest ``specweave.toml`` or git
        worktree above the current directory. Each file layer is validated on
        its own first so errors name the layer, then the merged result is
        validated as a whole.

        Raises:
            ConfigLoadError: If a configuration file cannot be parsed.
            ConfigValidationError: If a layer or the merged result is invalid.
        """
        from specweave.config._discovery import discover_sources  # noqa: PLC0415

        discovered = discover_sources(
            project_root=project_root,
            include_env=include_env,
            overrides=overrides,
        )

        merged: dict[str, Any] = {}
        loaded: list[ConfigSource] = []
        # weakest layer first
        for source in reversed(discovered):
            values = _read_layer(source)
            loaded.append(ConfigSource(source.name, source.path, source.exists, values))
            if values:
                merged = deep_merge(merged, values)

        return cls._build(merged, tuple(reversed(loaded)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Layers that were considered, strongest first."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def scan(self) -> ScanConfiguration:
        return self._scan

    @property
    def integrity(self) -> IntegrityConfiguration:
        return self._integrity

    @property
    def implementations(self) -> ImplementationsConfiguration:
        return self._implementations

    @property
    def fix(self) -> FixConfiguration:
        return self._fix

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a raw value by dotted key, e.g. ``config.get("scan.max_workers")``."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node
