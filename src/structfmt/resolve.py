"""Configuration resolution: raw option mappings to a validated FormatterConfig.

Raw configurations come from a build tool, a CLI or a settings file and
are plain mappings of option names to primitive values.  Both the
snake_case names used by this package and the camelCase names used by
existing formatter plugin configurations are accepted::

    resolve_config({
        "features": {"ORDER_MAP_ENTRIES_BY_KEYS": True},
        "endWithEol": True,
        "version": "2.0",
    })
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from structfmt.exceptions import ConfigurationError
from structfmt.models.config import FormatterConfig
from structfmt.models.features import DocumentFormat

logger = logging.getLogger(__name__)

_ALIASES: dict[str, str] = {
    "features": "features",
    "feature_to_toggle": "features",
    "featureToToggle": "features",
    "end_with_eol": "end_with_eol",
    "endWithEol": "end_with_eol",
    "space_before_separator": "space_before_separator",
    "spaceBeforeSeparator": "space_before_separator",
    "engine_version": "engine_version",
    "version": "engine_version",
    "format": "format",
}


def resolve_config(
    raw: Mapping[str, Any] | None = None,
    *,
    format: DocumentFormat | str | None = None,  # noqa: A002
) -> FormatterConfig:
    """Translate a raw option mapping into a :class:`FormatterConfig`.

    Feature toggles listed in ``features`` override the defaults; toggles
    not listed keep their default values.  Boolean values are taken as-is:
    the string ``"true"`` is rejected, not coerced.

    Parameters:
        raw: Option mapping, or ``None`` for an all-defaults configuration.
        format: Target format.  When ``raw`` also names a format the two
            must agree.

    Raises:
        ConfigurationError: Naming the offending key, for unknown options,
            unknown or inapplicable feature names, non-boolean flags,
            malformed versions and conflicting formats.
    """
    data: dict[str, Any] = {}
    for key, value in (raw or {}).items():
        canonical = _ALIASES.get(key)
        if canonical is None:
            known = ", ".join(sorted(_ALIASES))
            msg = f"Unknown configuration option '{key}'. Known options: {known}"
            raise ConfigurationError(msg, key=key)
        if canonical in data:
            msg = f"Configuration option '{canonical}' given more than once (as '{key}')"
            raise ConfigurationError(msg, key=key)
        data[canonical] = value

    if format is not None:
        fmt = _coerce_format(format)
        if "format" in data and _coerce_format(data["format"]) is not fmt:
            msg = f"Configuration is for '{data['format']}' but a {fmt.value} step was requested"
            raise ConfigurationError(msg, key="format")
        data["format"] = fmt

    features = data.get("features")
    if features is not None and not isinstance(features, Mapping):
        msg = f"'features' must be a mapping of feature name to boolean, got {type(features).__name__}"
        raise ConfigurationError(msg, key="features")
    if features is not None:
        data["features"] = dict(features)

    config = FormatterConfig(**data)
    logger.debug("Resolved %s configuration %s", config.format.value, config.fingerprint()[:12])
    return config


def _coerce_format(value: Any) -> DocumentFormat:
    try:
        return DocumentFormat(value)
    except ValueError:
        known = ", ".join(f.value for f in DocumentFormat)
        msg = f"Unknown format '{value}'. Known formats: {known}"
        raise ConfigurationError(msg, key="format") from None
