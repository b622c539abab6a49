"""Custom exceptions for structfmt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from structfmt.models.diagnostics import SyntaxDiagnostic

__all__ = [
    "ConfigurationError",
    "FormatFailure",
    "ParseFailure",
    "PipelineExecutionError",
    "SerializeFailure",
    "StructFmtError",
]

EXCERPT_LIMIT = 200
"""Number of input characters kept on a FormatFailure for diagnostics."""


def make_excerpt(text: str, limit: int = EXCERPT_LIMIT) -> str:
    """Return the first *limit* characters of *text*, marking truncation."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more chars]"


class StructFmtError(Exception):
    """Base exception for all structfmt errors."""


class ConfigurationError(StructFmtError, ValueError):
    """Raised when a step cannot be built from its configuration.

    ``key`` names the offending option or feature toggle, when known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class FormatFailure(StructFmtError):
    """Raised when one input cannot be formatted.

    Carries a bounded excerpt of the input and, when the engine reports
    one, the syntax diagnostic with line and column.
    """

    def __init__(
        self,
        input_text: str,
        *,
        engine: str,
        diagnostic: SyntaxDiagnostic | None = None,
        reason: str | None = None,
    ) -> None:
        self.input_excerpt = make_excerpt(input_text)
        self.engine = engine
        self.diagnostic = diagnostic
        detail = reason or (diagnostic.describe() if diagnostic is not None else "unknown error")
        super().__init__(
            f"Unable to format {engine} input: {detail}. input='{self.input_excerpt}'"
        )


class ParseFailure(FormatFailure):
    """The input is not valid syntax for the target format."""


class SerializeFailure(FormatFailure):
    """The parsed document could not be written back to text."""


class PipelineExecutionError(StructFmtError):
    """Error during pipeline execution with partial diagnostics attached."""

    def __init__(self, message: str, diagnostics: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics or {}
