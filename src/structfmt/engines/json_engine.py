"""JSON engine backed by the standard library ``json`` module."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Self

from structfmt.exceptions import ParseFailure, SerializeFailure
from structfmt.models.diagnostics import SyntaxDiagnostic
from structfmt.models.features import DocumentFormat, Feature, resolve_feature

logger = logging.getLogger(__name__)

INDENT = 2


def _reject_constant(name: str) -> Any:
    msg = f"Non-numeric value '{name}' is not valid JSON"
    raise ValueError(msg)


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        msg = f"Number '{literal}' is out of range for a double"
        raise ValueError(msg)
    return value


class JsonEngine:
    """Parses and writes JSON documents.

    Object keys keep their parse order unless ``ORDER_MAP_ENTRIES_BY_KEYS``
    is enabled; a key repeated in the input keeps its first position and
    its last value.  ``NaN`` and ``Infinity`` are rejected on both sides.

    Numbers are read as Python ``float``/``int``: a literal outside the
    double range (``1e400``) or an integer longer than the interpreter's
    int-conversion limit (4300 digits by default) is a parse failure.

    Instances are immutable: :meth:`configure` returns a new engine.
    """

    __slots__ = ("_features", "_space_before_separator")

    def __init__(
        self,
        features: Mapping[Feature, bool] | None = None,
        *,
        space_before_separator: bool = False,
    ) -> None:
        self._features: dict[Feature, bool] = {}
        for feature, enabled in (features or {}).items():
            self._features[resolve_feature(feature, DocumentFormat.JSON)] = enabled
        self._space_before_separator = space_before_separator

    @property
    def name(self) -> str:
        return "json"

    def __repr__(self) -> str:
        toggles = ", ".join(f"{f.value}={v}" for f, v in self._features.items())
        return f"JsonEngine({toggles})"

    def is_enabled(self, feature: Feature) -> bool:
        return self._features.get(feature, False)

    def configure(self, feature: Feature, enabled: bool) -> Self:
        resolved = resolve_feature(feature, DocumentFormat.JSON)
        logger.debug("Configuring json engine: %s=%s", resolved.value, enabled)
        return type(self)(
            {**self._features, resolved: enabled},
            space_before_separator=self._space_before_separator,
        )

    def parse(self, text: str) -> Any:
        if not text.strip():
            diagnostic = SyntaxDiagnostic(message="No content to parse", engine=self.name)
            raise ParseFailure(text, engine=self.name, diagnostic=diagnostic)
        try:
            return json.loads(
                text, parse_float=_parse_finite_float, parse_constant=_reject_constant
            )
        except json.JSONDecodeError as exc:
            diagnostic = SyntaxDiagnostic(
                message=exc.msg, engine=self.name, line=exc.lineno, column=exc.colno
            )
            raise ParseFailure(text, engine=self.name, diagnostic=diagnostic) from exc
        except ValueError as exc:
            diagnostic = SyntaxDiagnostic(message=str(exc), engine=self.name)
            raise ParseFailure(text, engine=self.name, diagnostic=diagnostic) from exc

    def serialize(self, document: Any) -> str:
        indent = INDENT if self.is_enabled(Feature.INDENT_OUTPUT) else None
        if indent is None:
            separators = (",", ":")
        elif self._space_before_separator:
            separators = (",", " : ")
        else:
            separators = (",", ": ")

        try:
            return json.dumps(
                document,
                indent=indent,
                separators=separators,
                sort_keys=self.is_enabled(Feature.ORDER_MAP_ENTRIES_BY_KEYS),
                ensure_ascii=self.is_enabled(Feature.ESCAPE_NON_ASCII),
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            diagnostic = SyntaxDiagnostic(message=str(exc), engine=self.name)
            raise SerializeFailure(
                repr(document), engine=self.name, diagnostic=diagnostic
            ) from exc
