"""Tests for structfmt.engines.build_engine."""

from __future__ import annotations

import json

import pytest
import yaml
from packaging.version import Version

from structfmt.engines import JsonEngine, YamlEngine, build_engine, installed_engine_version
from structfmt.exceptions import ConfigurationError
from structfmt.models.config import FormatterConfig
from structfmt.models.features import DocumentFormat, Feature


class TestBuildEngine:
    def test_json_config_builds_json_engine(self) -> None:
        assert isinstance(build_engine(FormatterConfig()), JsonEngine)

    def test_yaml_config_builds_yaml_engine(self) -> None:
        assert isinstance(build_engine(FormatterConfig(format="yaml")), YamlEngine)

    def test_every_effective_toggle_applied(self) -> None:
        config = FormatterConfig(
            format="yaml", features={"INDENT_ARRAYS": True, "SPLIT_LINES": False}
        )
        engine = build_engine(config)
        assert engine.is_enabled(Feature.INDENT_OUTPUT) is True
        assert engine.is_enabled(Feature.INDENT_ARRAYS) is True
        assert engine.is_enabled(Feature.SPLIT_LINES) is False
        assert engine.is_enabled(Feature.WRITE_DOC_START_MARKER) is True

    def test_space_before_separator_reaches_json_engine(self) -> None:
        engine = build_engine(FormatterConfig(space_before_separator=True))
        assert engine.serialize({"a": 1}) == '{\n  "a" : 1\n}'


class TestEngineVersion:
    def test_installed_versions(self) -> None:
        assert installed_engine_version(DocumentFormat.JSON) == json.__version__
        assert installed_engine_version(DocumentFormat.YAML) == yaml.__version__

    def test_older_requested_version_accepted(self) -> None:
        assert isinstance(build_engine(FormatterConfig(engine_version="1.0")), JsonEngine)

    def test_versions_compare_numerically(self) -> None:
        installed = Version(json.__version__)
        *head, last = installed.release
        newer = ".".join(str(part) for part in (*head, last + 10))
        with pytest.raises(ConfigurationError) as exc_info:
            build_engine(FormatterConfig(engine_version=newer))
        assert exc_info.value.key == "engine_version"

    def test_newer_requested_version_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="999.0") as exc_info:
            build_engine(FormatterConfig(format="yaml", engine_version="999.0"))
        assert exc_info.value.key == "engine_version"
