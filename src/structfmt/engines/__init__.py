"""Canonicalization engines for JSON and YAML."""

from __future__ import annotations

import json
import logging

import yaml
from packaging.version import Version

from structfmt.exceptions import ConfigurationError
from structfmt.models.config import FormatterConfig
from structfmt.models.features import DocumentFormat
from structfmt.protocols.engine import CanonicalizationEngine

from .json_engine import JsonEngine
from .yaml_engine import YamlEngine, YamlOmap, YamlPairs

logger = logging.getLogger(__name__)

__all__ = [
    "JsonEngine",
    "YamlEngine",
    "YamlOmap",
    "YamlPairs",
    "build_engine",
    "installed_engine_version",
]


def installed_engine_version(fmt: DocumentFormat) -> str:
    """Return the version of the library backing the engine for *fmt*."""
    if fmt is DocumentFormat.YAML:
        return yaml.__version__
    return json.__version__


def build_engine(config: FormatterConfig) -> CanonicalizationEngine:
    """Build a fully configured, read-only engine for *config*.

    Every applicable toggle is applied through ``configure`` so the engine
    does not depend on its own defaults.

    Raises:
        ConfigurationError: If ``config.engine_version`` asks for a newer
            engine than the one installed.
    """
    installed = installed_engine_version(config.format)
    if config.engine_version is not None and (
        Version(installed) < Version(config.engine_version)
    ):
        msg = (
            f"{config.format.value} engine {config.engine_version} requested "
            f"but {installed} is installed"
        )
        raise ConfigurationError(msg, key="engine_version")

    engine: CanonicalizationEngine
    if config.format is DocumentFormat.YAML:
        engine = YamlEngine()
    else:
        engine = JsonEngine(space_before_separator=config.space_before_separator)

    for feature, enabled in config.effective_features().items():
        engine = engine.configure(feature, enabled)

    logger.debug("Built %r (engine version %s)", engine, installed)
    return engine
