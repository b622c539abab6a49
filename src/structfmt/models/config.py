"""Formatter configuration model."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Self

from packaging.version import InvalidVersion, Version
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from structfmt.exceptions import ConfigurationError

from .features import FEATURE_TABLE, DocumentFormat, Feature, features_for, resolve_feature


class FormatterConfig(BaseModel):
    """Validated, immutable settings for one formatter step.

    Built once when the pipeline is assembled and shared read-only by every
    ``apply`` call of the step it parameterizes.  Invalid settings raise
    :class:`~structfmt.exceptions.ConfigurationError` naming the offending
    key, never a bare pydantic ``ValidationError``.

    Toggles not listed in ``features`` fall back to the defaults in
    :data:`~structfmt.models.features.FEATURE_TABLE`.
    """

    format: DocumentFormat = DocumentFormat.JSON
    features: dict[Feature, StrictBool] = Field(default_factory=dict)
    end_with_eol: StrictBool = True
    space_before_separator: StrictBool = False
    engine_version: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise _as_configuration_error(exc) from exc

    @field_validator("features", mode="before")
    @classmethod
    def _resolve_feature_names(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, dict):
            return value
        fmt = info.data.get("format", DocumentFormat.JSON)
        return {resolve_feature(name, fmt): toggle for name, toggle in value.items()}

    @field_validator("engine_version")
    @classmethod
    def _check_engine_version(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            Version(value)
        except InvalidVersion:
            msg = f"Malformed engine version '{value}'; expected a version like '6.0'"
            raise ConfigurationError(msg, key="engine_version") from None
        return value

    @model_validator(mode="after")
    def _check_format_flags(self) -> Self:
        if self.format is DocumentFormat.YAML and self.space_before_separator:
            msg = "space_before_separator is not supported for yaml"
            raise ConfigurationError(msg, key="space_before_separator")
        return self

    def is_enabled(self, feature: Feature) -> bool:
        """Return the explicit toggle for *feature* or its default."""
        return self.features.get(feature, FEATURE_TABLE[feature].default)

    def effective_features(self) -> dict[Feature, bool]:
        """Every toggle applicable to this format, defaults filled in."""
        return {f: self.is_enabled(f) for f in features_for(self.format)}

    def fingerprint(self) -> str:
        """Stable digest of the effective configuration.

        Equal configurations always produce the same fingerprint, so a host
        can tell whether files formatted earlier need formatting again.
        """
        payload = {
            "format": self.format.value,
            "features": {f.value: v for f, v in self.effective_features().items()},
            "end_with_eol": self.end_with_eol,
            "space_before_separator": self.space_before_separator,
            "engine_version": self.engine_version,
        }
        raw = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def _as_configuration_error(exc: ValidationError) -> ConfigurationError:
    """Translate a pydantic ValidationError into a ConfigurationError."""
    errors = exc.errors()
    for error in errors:
        original = error.get("ctx", {}).get("error")
        if isinstance(original, ConfigurationError):
            return original

    first = errors[0]
    loc = first.get("loc", ())
    key = str(loc[-1]) if loc else None
    msg = f"Invalid configuration value for '{key}': {first['msg']}"
    return ConfigurationError(msg, key=key)
