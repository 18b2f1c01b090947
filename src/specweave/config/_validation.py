# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownMemberType=false, reportUnknownVariableType=false
"""Schema checks for merged configuration layers.

Layers are plain dicts until the very end. Checking them against
``ConfigSchema`` here lets a bad value be reported with the layer it came
from, before the frozen ``Config`` is built.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from specweave.config._models._logging import LoggingConfig
from specweave.config._models._workspace import (
    FixConfiguration,
    ImplementationsConfiguration,
    IntegrityConfiguration,
    ScanConfiguration,
)
from specweave.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single rejected configuration value.

    Attributes:
        key: Dotted location, for example ``scan.max_workers``.
        message: What pydantic objected to.
        expected: The accepted type, literal set or pattern, when known.
        actual: The rejected value.
        source: Layer name the value came from, if known.
        severity: ``error`` blocks loading; ``warning`` is advisory.
    """

    key: str
    message: str
    expected: str | None
    actual: Any
    source: str | None
    severity: Literal["error", "warning"]


class ConfigSchema(BaseModel):
    """Top-level tables accepted in a configuration file.

    Tables this version does not know are ignored so older binaries can read
    newer files.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    scan: ScanConfiguration = ScanConfiguration()
    integrity: IntegrityConfiguration = IntegrityConfiguration()
    implementations: ImplementationsConfiguration = ImplementationsConfiguration()
    fix: FixConfiguration = FixConfiguration()


def _expected_from(error: "ErrorDetails") -> str | None:  # noqa: UP037
    match error.get("ctx"):
        case {"expected": expected}:
            return str(expected)
        case {"pattern": pattern}:
            return f"pattern: {pattern}"
        case _:
            return None


def _pydantic_error_to_issue(
    error: "ErrorDetails",  # noqa: UP037
    source: str | None,
) -> ValidationIssue:
    return ValidationIssue(
        key=".".join(map(str, error.get("loc", ()))),
        message=str(error.get("msg", "Validation error")),
        expected=_expected_from(error),
        actual=error.get("input"),
        source=source,
        severity="error",
    )


def validate_config(
    config: dict[str, Any],
    *,
    source: str | None = None,
) -> list[ValidationIssue]:
    """Check a configuration dict and list everything wrong with it.

    An empty list means the dict would build a valid ``Config``. Each issue
    carries ``source`` so callers validating one layer at a time can say
    which file is at fault.
    """
    try:
        _ = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return [_pydantic_error_to_issue(err, source=source) for err in e.errors()]
    return []


def raise_if_validation_errors(
    issues: list[ValidationIssue],
    source: str | None = None,
) -> None:
    """Turn the first error in ``issues`` into a ConfigValidationError.

    Warnings never raise.
    """
    issue = next((i for i in issues if i.severity == "error"), None)
    if issue is None:
        return
    msg = f"Invalid configuration value for '{issue.key}'"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
        source=source or issue.source,
    )
