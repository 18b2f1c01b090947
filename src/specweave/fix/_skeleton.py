"""Stub spec documents for missing specs.

Rendering is pure: a template is chosen by spec type and filled from a
SkeletonContext. Writing the result is the caller's concern.
"""

from pathlib import Path
from types import MappingProxyType
from typing import ClassVar, Final, cast

from jinja2 import Environment, StrictUndefined
from pydantic import BaseModel, ConfigDict

from specweave.enums import SpecType
from specweave.exceptions import UnsupportedSpecTypeError
from specweave.utils import to_kebab_case

_HEADER: Final = """\
# Generated stub for {{ key }}.v{{ version }}{% if feature_key %} (feature {{ feature_key }}){% endif %}.
kind: {{ spec_type }}
key: {{ key | tojson }}
version: {{ version | tojson }}
stability: experimental
description: {{ description | tojson }}
"""

SKELETON_TEMPLATES: Final[MappingProxyType[SpecType, str]] = MappingProxyType(
    {
        SpecType.OPERATION: _HEADER
        + """\
io:
  input: {}
  output: {}
""",
        SpecType.EVENT: _HEADER
        + """\
payload: {}
""",
        SpecType.PRESENTATION: _HEADER
        + """\
target: component
source: {}
""",
        SpecType.EXPERIMENT: _HEADER
        + """\
variants:
  - key: control
  - key: treatment
""",
        SpecType.CAPABILITY: _HEADER
        + """\
provides: []
""",
    }
)
"""Skeleton templates keyed by the spec types that can be stubbed."""

CATEGORY_DIRS: Final[MappingProxyType[SpecType, str]] = MappingProxyType(
    {
        SpecType.OPERATION: "operations",
        SpecType.EVENT: "events",
        SpecType.PRESENTATION: "presentations",
        SpecType.EXPERIMENT: "experiments",
        SpecType.CAPABILITY: "capabilities",
    }
)


class SkeletonContext(BaseModel):
    """Values available to skeleton templates."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    key: str
    version: str
    feature_key: str | None = None
    description: str = "Stub generated for a missing spec."


_ENVIRONMENT: Final = Environment(  # noqa: S701 - YAML output, not HTML
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def supports_skeleton(spec_type: SpecType) -> bool:
    """Return whether a stub can be rendered for ``spec_type``."""
    return spec_type in SKELETON_TEMPLATES


def render_skeleton(spec_type: SpecType, context: SkeletonContext) -> str:
    """Render the stub document for a spec.

    Args:
        spec_type: Type of the missing spec.
        context: Template values.

    Returns:
        YAML document text.

    Raises:
        UnsupportedSpecTypeError: If no template exists for ``spec_type``.
    """
    template_str = SKELETON_TEMPLATES.get(spec_type)
    if template_str is None:
        msg = f"Cannot generate a skeleton for spec type '{spec_type}'"
        raise UnsupportedSpecTypeError(msg, spec_type=str(spec_type))

    template = _ENVIRONMENT.from_string(template_str)
    return cast(
        "str",
        template.render(spec_type=str(spec_type), **context.model_dump()),
    )


def skeleton_path(feature_file: Path, spec_type: SpecType, key: str) -> Path:
    """Return where the stub for a spec referenced by a feature is written.

    The stub lives next to the feature document under the spec type's
    category directory: ``{feature_dir}/{category_dir}/{kebab}.{type}.yaml``.

    Raises:
        UnsupportedSpecTypeError: If the spec type has no category directory.
    """
    category_dir = CATEGORY_DIRS.get(spec_type)
    if category_dir is None:
        msg = f"Cannot generate a skeleton for spec type '{spec_type}'"
        raise UnsupportedSpecTypeError(msg, spec_type=str(spec_type))
    return feature_file.parent / category_dir / f"{to_kebab_case(key)}.{spec_type}.yaml"
