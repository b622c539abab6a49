"""Tests for structfmt.resolve."""

from __future__ import annotations

import pytest

from structfmt.exceptions import ConfigurationError
from structfmt.models.features import DocumentFormat, Feature
from structfmt.resolve import resolve_config


class TestResolveConfig:
    """resolve_config turns raw option mappings into FormatterConfig."""

    def test_none_gives_defaults(self) -> None:
        config = resolve_config(None)
        assert config.format is DocumentFormat.JSON
        assert config.end_with_eol is True
        assert config.is_enabled(Feature.INDENT_OUTPUT) is True

    def test_features_merge_over_defaults(self) -> None:
        config = resolve_config({"features": {"ORDER_MAP_ENTRIES_BY_KEYS": True}})
        assert config.is_enabled(Feature.ORDER_MAP_ENTRIES_BY_KEYS) is True
        assert config.is_enabled(Feature.INDENT_OUTPUT) is True

    def test_camel_case_aliases(self) -> None:
        config = resolve_config(
            {
                "featureToToggle": {"INDENT_OUTPUT": False},
                "endWithEol": False,
                "spaceBeforeSeparator": True,
            }
        )
        assert config.is_enabled(Feature.INDENT_OUTPUT) is False
        assert config.end_with_eol is False
        assert config.space_before_separator is True

    def test_version_alias(self) -> None:
        assert resolve_config({"version": "2.0"}).engine_version == "2.0"

    def test_format_keyword(self) -> None:
        config = resolve_config({"features": {"INDENT_ARRAYS": True}}, format="yaml")
        assert config.format is DocumentFormat.YAML
        assert config.is_enabled(Feature.INDENT_ARRAYS) is True

    def test_format_in_raw_mapping(self) -> None:
        assert resolve_config({"format": "yaml"}).format is DocumentFormat.YAML

    def test_matching_formats_accepted(self) -> None:
        config = resolve_config({"format": "json"}, format=DocumentFormat.JSON)
        assert config.format is DocumentFormat.JSON


class TestResolveConfigErrors:
    """Every failure names the offending key."""

    def test_unknown_feature_named(self) -> None:
        with pytest.raises(ConfigurationError, match="NOT_A_REAL_FEATURE") as exc_info:
            resolve_config({"features": {"NOT_A_REAL_FEATURE": True}})
        assert exc_info.value.key == "NOT_A_REAL_FEATURE"

    def test_unknown_option_named(self) -> None:
        with pytest.raises(ConfigurationError, match="indentSize") as exc_info:
            resolve_config({"indentSize": 4})
        assert exc_info.value.key == "indentSize"

    def test_option_given_twice(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"endWithEol": True, "end_with_eol": False})
        assert exc_info.value.key in {"endWithEol", "end_with_eol"}

    def test_features_must_be_mapping(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"features": ["INDENT_OUTPUT"]})
        assert exc_info.value.key == "features"

    def test_string_boolean_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"features": {"INDENT_OUTPUT": "false"}})
        assert exc_info.value.key == "INDENT_OUTPUT"

    def test_conflicting_formats(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"format": "yaml"}, format="json")
        assert exc_info.value.key == "format"

    def test_unknown_format_keyword(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config(None, format="xml")
        assert exc_info.value.key == "format"

    def test_json_only_rules_for_yaml(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"spaceBeforeSeparator": True}, format="yaml")
        assert exc_info.value.key == "space_before_separator"
