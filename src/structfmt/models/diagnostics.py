"""Diagnostic and result models for structfmt."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypedDict


class StepDiagnostic(TypedDict):
    """Diagnostics for a single pipeline step."""

    name: str
    time_ms: float
    changed: bool


class PipelineDiagnostics(TypedDict, total=False):
    """Typed schema for the diagnostics dict produced by a format pipeline run."""

    steps: list[StepDiagnostic]
    failed_step: str


class SyntaxDiagnostic(BaseModel):
    """A parse or serialization problem reported by an engine.

    ``line`` and ``column`` are 1-based and ``None`` when the engine
    could not locate the problem.
    """

    message: str
    engine: str
    line: int | None = Field(default=None, ge=1)
    column: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"{self.message} (line {self.line})"
        return f"{self.message} (line {self.line}, column {self.column})"


class FileResult(BaseModel):
    """Outcome of formatting one named input in ``FormatPipeline.apply_many``."""

    name: str
    output: str | None = None
    changed: bool = False
    error: str | None = None
    time_ms: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error is None
