"""Enumeration types for specweave."""

from enum import StrEnum


class SpecType(StrEnum):
    """Specification document kinds understood by the classifier.

    ``FEATURE`` documents group other specs and are never stored in the
    inventory. ``UNKNOWN`` marks documents the classifier could not place.
    """

    OPERATION = "operation"
    EVENT = "event"
    PRESENTATION = "presentation"
    CAPABILITY = "capability"
    WORKFLOW = "workflow"
    DATA_VIEW = "data-view"
    FORM = "form"
    MIGRATION = "migration"
    EXPERIMENT = "experiment"
    INTEGRATION = "integration"
    KNOWLEDGE = "knowledge"
    TELEMETRY = "telemetry"
    APP_CONFIG = "app-config"
    POLICY = "policy"
    TEST_SPEC = "test-spec"
    FEATURE = "feature"
    UNKNOWN = "unknown"


class IssueSeverity(StrEnum):
    """Integrity issue severity."""

    ERROR = "error"
    WARNING = "warning"


class IssueType(StrEnum):
    """Integrity issue categories."""

    ORPHANED = "orphaned"
    UNRESOLVED_REF = "unresolved-ref"
    MISSING_FEATURE = "missing-feature"
    BROKEN_LINK = "broken-link"
    MISSING_TEST = "missing-test"


class ImplementationType(StrEnum):
    """Kinds of implementation artifacts a spec can have."""

    HANDLER = "handler"
    COMPONENT = "component"
    FORM = "form"
    SERVICE = "service"
    HOOK = "hook"
    TEST = "test"
    OTHER = "other"


class ImplementationSource(StrEnum):
    """Where an implementation candidate came from, in precedence order."""

    EXPLICIT = "explicit"
    DISCOVERED = "discovered"
    CONVENTION = "convention"


class ImplementationStatus(StrEnum):
    """Overall implementation status of a spec."""

    MISSING = "missing"
    PARTIAL = "partial"
    IMPLEMENTED = "implemented"


class ReferenceKind(StrEnum):
    """How a source file refers to a spec."""

    IMPORT = "import"
    TYPE = "type"
    HANDLER = "handler"
    ASSIGNMENT = "assignment"


class FixStrategyType(StrEnum):
    """Remediation strategies for integrity issues."""

    REMOVE_REFERENCE = "remove-reference"
    IMPLEMENT_SKELETON = "implement-skeleton"
    IMPLEMENT_AI = "implement-ai"


class FileAction(StrEnum):
    """Kinds of change recorded in a fix ledger."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
