"""Core data models for structfmt."""

from .config import FormatterConfig
from .diagnostics import FileResult, PipelineDiagnostics, StepDiagnostic, SyntaxDiagnostic
from .features import (
    FEATURE_TABLE,
    DocumentFormat,
    Feature,
    FeatureSpec,
    features_for,
    lookup_feature,
    resolve_feature,
)

__all__ = [
    "FEATURE_TABLE",
    "DocumentFormat",
    "Feature",
    "FeatureSpec",
    "FileResult",
    "FormatterConfig",
    "PipelineDiagnostics",
    "StepDiagnostic",
    "SyntaxDiagnostic",
    "features_for",
    "lookup_feature",
    "resolve_feature",
]
