"""structfmt: configuration-driven canonical formatting for JSON and YAML.

Steps:
    FormatterStep, new_step, json_step, yaml_step, ensure_single_eol,
    same_document

Configuration:
    FormatterConfig, resolve_config, DocumentFormat, Feature, FeatureSpec,
    FEATURE_TABLE, resolve_feature, lookup_feature

Engines:
    CanonicalizationEngine, JsonEngine, YamlEngine, YamlOmap, YamlPairs,
    build_engine

Pipeline:
    FormatPipeline, PipelineCallback, FileResult, PipelineDiagnostics,
    StepDiagnostic, SyntaxDiagnostic

Exceptions:
    StructFmtError, ConfigurationError, FormatFailure, ParseFailure,
    SerializeFailure, PipelineExecutionError
"""

from importlib.metadata import PackageNotFoundError, version

from structfmt.engines import JsonEngine, YamlEngine, YamlOmap, YamlPairs, build_engine
from structfmt.exceptions import (
    ConfigurationError,
    FormatFailure,
    ParseFailure,
    PipelineExecutionError,
    SerializeFailure,
    StructFmtError,
)
from structfmt.models import (
    FEATURE_TABLE,
    DocumentFormat,
    Feature,
    FeatureSpec,
    FileResult,
    FormatterConfig,
    PipelineDiagnostics,
    StepDiagnostic,
    SyntaxDiagnostic,
    lookup_feature,
    resolve_feature,
)
from structfmt.pipeline import FormatPipeline, PipelineCallback
from structfmt.protocols import CanonicalizationEngine
from structfmt.resolve import resolve_config
from structfmt.steps import (
    FormatterStep,
    ensure_single_eol,
    json_step,
    new_step,
    same_document,
    yaml_step,
)

try:
    __version__ = version("structfmt")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "FEATURE_TABLE",
    "CanonicalizationEngine",
    "ConfigurationError",
    "DocumentFormat",
    "Feature",
    "FeatureSpec",
    "FileResult",
    "FormatFailure",
    "FormatPipeline",
    "FormatterConfig",
    "FormatterStep",
    "JsonEngine",
    "ParseFailure",
    "PipelineCallback",
    "PipelineDiagnostics",
    "PipelineExecutionError",
    "SerializeFailure",
    "StepDiagnostic",
    "StructFmtError",
    "SyntaxDiagnostic",
    "YamlEngine",
    "YamlOmap",
    "YamlPairs",
    "build_engine",
    "ensure_single_eol",
    "json_step",
    "lookup_feature",
    "new_step",
    "resolve_config",
    "resolve_feature",
    "same_document",
    "yaml_step",
]
