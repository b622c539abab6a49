"""Document formats and the closed set of serialization feature toggles.

Feature names match the serialization feature names used by existing
formatter configurations (``INDENT_OUTPUT``, ``ORDER_MAP_ENTRIES_BY_KEYS``,
...), so a configuration written for those tools keeps working here.
Lookup is an exact, case-sensitive match against :data:`FEATURE_TABLE`.
"""

from __future__ import annotations

from enum import StrEnum
from typing import NamedTuple

from structfmt.exceptions import ConfigurationError


class DocumentFormat(StrEnum):
    """Syntax handled by a formatter step."""

    JSON = "json"
    YAML = "yaml"


class Feature(StrEnum):
    """Named boolean switches that alter serialization."""

    INDENT_OUTPUT = "INDENT_OUTPUT"
    ORDER_MAP_ENTRIES_BY_KEYS = "ORDER_MAP_ENTRIES_BY_KEYS"
    ESCAPE_NON_ASCII = "ESCAPE_NON_ASCII"
    WRITE_DOC_START_MARKER = "WRITE_DOC_START_MARKER"
    INDENT_ARRAYS = "INDENT_ARRAYS"
    SPLIT_LINES = "SPLIT_LINES"


class FeatureSpec(NamedTuple):
    """Default value, supported formats and help text of a feature."""

    default: bool
    formats: frozenset[DocumentFormat]
    description: str


_BOTH = frozenset({DocumentFormat.JSON, DocumentFormat.YAML})
_YAML_ONLY = frozenset({DocumentFormat.YAML})

FEATURE_TABLE: dict[Feature, FeatureSpec] = {
    Feature.INDENT_OUTPUT: FeatureSpec(
        True, _BOTH, "Pretty-print with a two-space indent (YAML: block style)."
    ),
    Feature.ORDER_MAP_ENTRIES_BY_KEYS: FeatureSpec(
        False, _BOTH, "Sort mapping entries by key instead of keeping parse order."
    ),
    Feature.ESCAPE_NON_ASCII: FeatureSpec(
        False, _BOTH, "Escape non-ASCII characters instead of writing them verbatim."
    ),
    Feature.WRITE_DOC_START_MARKER: FeatureSpec(
        True, _YAML_ONLY, "Start the document with a '---' marker."
    ),
    Feature.INDENT_ARRAYS: FeatureSpec(
        False, _YAML_ONLY, "Indent sequence items under their parent key."
    ),
    Feature.SPLIT_LINES: FeatureSpec(
        True, _YAML_ONLY, "Fold long scalars at 80 columns."
    ),
}


def lookup_feature(name: str | Feature) -> Feature:
    """Return the feature called *name*, whatever format it applies to.

    Raises:
        ConfigurationError: If *name* is not a known feature.
    """
    try:
        return Feature(name)
    except ValueError:
        known = ", ".join(f.value for f in Feature)
        msg = f"Unknown feature '{name}'. Known features: {known}"
        raise ConfigurationError(msg, key=str(name)) from None


def resolve_feature(name: str | Feature, fmt: DocumentFormat) -> Feature:
    """Resolve a feature name for *fmt*, failing fast on unknown names.

    Raises:
        ConfigurationError: If *name* is not a known feature, or the
            feature does not apply to *fmt*.  ``key`` is set to *name*.
    """
    feature = lookup_feature(name)
    if fmt not in FEATURE_TABLE[feature].formats:
        msg = f"Feature '{feature.value}' is not supported for {fmt.value}"
        raise ConfigurationError(msg, key=feature.value)
    return feature


def features_for(fmt: DocumentFormat) -> list[Feature]:
    """Return the features applicable to *fmt*, in declaration order."""
    return [f for f, spec in FEATURE_TABLE.items() if fmt in spec.formats]
