"""Formatter steps: configured ``text -> text`` units for a format pipeline."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from structfmt.engines import build_engine
from structfmt.exceptions import FormatFailure, ParseFailure, SerializeFailure
from structfmt.models.config import FormatterConfig
from structfmt.models.features import DocumentFormat
from structfmt.protocols.engine import CanonicalizationEngine
from structfmt.resolve import resolve_config

logger = logging.getLogger(__name__)

_LINE_TERMINATORS = "\r\n"


def ensure_single_eol(text: str) -> str:
    """Strip trailing line terminators and append exactly one ``\\n``."""
    return text.rstrip(_LINE_TERMINATORS) + "\n"


def same_document(left: Any, right: Any) -> bool:
    """Compare two parsed documents by value and container type.

    Unlike ``==``, a list never matches a tuple or a list subclass, ``1``
    never matches ``1.0`` or ``True``, NaN matches NaN, and mapping key
    order is ignored.
    """
    if type(left) is not type(right):
        return False
    if isinstance(left, float):
        return left == right or (math.isnan(left) and math.isnan(right))
    if isinstance(left, Mapping):
        return left.keys() == right.keys() and all(
            same_document(value, right[key]) for key, value in left.items()
        )
    if isinstance(left, (list, tuple)):
        return len(left) == len(right) and all(
            same_document(a, b) for a, b in zip(left, right)
        )
    return left == right


@dataclass(slots=True, frozen=True)
class FormatterStep:
    """A named canonicalization step for one document format.

    The step owns an immutable :class:`FormatterConfig` and the engine
    built from it.  The engine is configured once, at construction, and
    only read afterwards, so one step may be applied to many files from
    many threads at the same time.

    ``apply`` is deterministic and idempotent: for valid input ``x``,
    ``apply(apply(x)) == apply(x)``.
    """

    name: str
    config: FormatterConfig
    engine: CanonicalizationEngine = field(repr=False, compare=False)

    @property
    def fingerprint(self) -> str:
        """Digest of the step name and its effective configuration."""
        return f"{self.name}:{self.config.fingerprint()}"

    def apply(self, text: str) -> str:
        """Format one file's text.

        The output is read back and written again before it is returned;
        any difference means the engine could not reproduce the document
        faithfully, and the call fails instead of returning that output.

        Raises:
            ParseFailure: If *text* is not valid for the step's format.
            SerializeFailure: If the document cannot be written back, or
                the written text does not read back to the same values and
                the same output.
        """
        try:
            document = self.engine.parse(text)
        except FormatFailure:
            logger.debug("Step '%s' could not parse its input", self.name)
            raise
        except Exception as e:
            raise ParseFailure(
                text, engine=self.engine.name, reason=f"{type(e).__name__}: {e}"
            ) from e

        output = self._render(text, document)
        self._verify_stable(text, document, output)
        return output

    __call__ = apply

    def _render(self, text: str, document: Any) -> str:
        """Serialize *document* and apply the end-of-line policy."""
        try:
            output = self.engine.serialize(document)
        except FormatFailure as e:
            raise SerializeFailure(
                text, engine=self.engine.name, diagnostic=e.diagnostic
            ) from e
        except Exception as e:
            raise SerializeFailure(
                text, engine=self.engine.name, reason=f"{type(e).__name__}: {e}"
            ) from e

        if self.config.end_with_eol:
            output = ensure_single_eol(output)
        return output

    def _verify_stable(self, text: str, document: Any, output: str) -> None:
        """Fail unless *output* reads back to *document* and renders to itself."""
        try:
            reread = self.engine.parse(output)
        except Exception as e:
            raise SerializeFailure(
                text,
                engine=self.engine.name,
                reason="formatted output could not be read back",
            ) from e
        if not same_document(document, reread):
            logger.debug("Step '%s' changed the document while formatting", self.name)
            raise SerializeFailure(
                text,
                engine=self.engine.name,
                reason="formatted output does not preserve the document's values",
            )
        if self._render(text, reread) != output:
            logger.debug("Step '%s' produced unstable output", self.name)
            raise SerializeFailure(
                text,
                engine=self.engine.name,
                reason="formatted output does not read back to the same document",
            )


def new_step(config: FormatterConfig, name: str | None = None) -> FormatterStep:
    """Build a step from a resolved configuration.

    All configuration problems surface here, before any file is processed.

    Raises:
        ConfigurationError: If the engine cannot be configured.
    """
    engine = build_engine(config)
    step_name = name or config.format.value
    logger.debug("Created step '%s' (%s)", step_name, config.fingerprint()[:12])
    return FormatterStep(name=step_name, config=config, engine=engine)


def json_step(raw: Mapping[str, Any] | None = None, **options: Any) -> FormatterStep:
    """Create a JSON step from raw options (see :func:`resolve_config`)."""
    merged = {**(raw or {}), **options}
    return new_step(resolve_config(merged, format=DocumentFormat.JSON))


def yaml_step(raw: Mapping[str, Any] | None = None, **options: Any) -> FormatterStep:
    """Create a YAML step from raw options (see :func:`resolve_config`)."""
    merged = {**(raw or {}), **options}
    return new_step(resolve_config(merged, format=DocumentFormat.YAML))
