"""Exception hierarchy.

Everything raised on purpose derives from ``SpecweaveError``. Subclasses
carry the context a caller needs to report the failure without parsing the
message.
"""

from pathlib import Path  # noqa: TC003 - Used at runtime in type annotations
from typing import Any


class SpecweaveError(Exception):
    pass


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(SpecweaveError):
    """A configuration layer could not be used."""


class ConfigLoadError(ConfigError):
    """A configuration file is unreadable or not valid TOML.

    ``line`` and ``column`` locate the syntax error when the parser reports one.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """A configuration value was rejected by the schema.

    Attributes:
        key: Dotted key of the rejected value.
        value: The rejected value.
        expected: What would have been accepted.
        source: Layer or file the value came from, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Spec documents
# =============================================================================


class SpecError(SpecweaveError):
    """A spec document could not be located, read or understood."""


class SpecIOError(SpecError):
    """Reading, writing or deleting a workspace file failed.

    ``operation`` is one of ``read``, ``write`` or ``delete``; ``cause`` is the
    ``OSError`` behind it.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path = path
        self.operation: str = operation
        self.cause: Exception | None = cause


class SpecParseError(SpecError):
    """A spec document is not well-formed YAML.

    Attributes:
        path: Offending document.
        line: One-based line of the syntax error, when the parser gives one.
        content_type: Format that failed to parse.
        cause: The parser's own exception.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        line: int | None = None,
        content_type: str = "yaml",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path = path
        self.line: int | None = line
        self.content_type: str = content_type
        self.cause: Exception | None = cause


class SpecNotFoundError(SpecError, KeyError):
    """No spec document exists for the requested key, or at ``path``."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path: Path | None = path

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Remediation
# =============================================================================


class FixError(SpecweaveError):
    """Base exception for remediation failures."""


class StrategyNotFoundError(FixError, KeyError):
    """Raised when a fix strategy is unknown or not available for an issue.

    Attributes:
        strategy: The requested strategy name.
        available: Strategies that were available for the issue.
    """

    def __init__(
        self,
        message: str,
        *,
        strategy: str,
        available: tuple[str, ...] = (),
    ) -> None:
        """Initialize with error message and strategy context."""
        super().__init__(message)
        self.strategy: str = strategy
        self.available: tuple[str, ...] = available

    def __str__(self) -> str:
        """Return the plain message instead of the KeyError repr."""
        return str(self.args[0]) if self.args else ""


class UnsupportedSpecTypeError(FixError, ValueError):
    """Raised when a skeleton cannot be generated for a spec type.

    Attributes:
        spec_type: The unsupported spec type.
    """

    def __init__(self, message: str, *, spec_type: str) -> None:
        """Initialize with error message and spec type."""
        super().__init__(message)
        self.spec_type: str = spec_type


class ReferenceNotFoundError(FixError, LookupError):
    """Raised when a reference literal cannot be located in a feature document.

    Attributes:
        path: Path of the feature document that was searched.
        ref: Display form of the reference that was not found.
    """

    def __init__(self, message: str, *, path: Path, ref: str) -> None:
        """Initialize with error message and reference context."""
        super().__init__(message)
        self.path: Path = path
        self.ref: str = ref


class SkeletonExistsError(FixError):
    """Raised when a skeleton would overwrite an existing document.

    Attributes:
        path: Path of the existing document.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        """Initialize with error message and target path."""
        super().__init__(message)
        self.path: Path = path
