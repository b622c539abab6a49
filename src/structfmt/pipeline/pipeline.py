"""FormatPipeline -- chains formatter steps over one or many texts."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, cast

from structfmt.exceptions import PipelineExecutionError, StructFmtError
from structfmt.models.diagnostics import FileResult, PipelineDiagnostics
from structfmt.steps.step import FormatterStep

from .callbacks import PipelineCallback

logger = logging.getLogger(__name__)


class FormatPipeline:
    """Applies an ordered list of formatter steps to text.

    Usage::

        pipeline = (
            FormatPipeline()
            .add_step(json_step(features={"ORDER_MAP_ENTRIES_BY_KEYS": True}))
        )
        formatted = pipeline.apply('{"b": 1, "a": 2}')
        results = pipeline.apply_many({"a.json": "...", "b.json": "..."})

    Steps are immutable and may be shared, so ``apply_many`` runs files on
    a thread pool without copying them.  A ``FormatFailure`` raised by a
    step propagates unchanged from ``apply``; ``apply_many`` records it in
    that file's :class:`FileResult` and carries on with the other files.
    """

    def __init__(self, steps: Iterable[FormatterStep] | None = None) -> None:
        self._steps: list[FormatterStep] = list(steps or [])
        self._callbacks: list[PipelineCallback] = []

    @property
    def steps(self) -> list[FormatterStep]:
        """A copy of the registered steps."""
        return list(self._steps)

    def __repr__(self) -> str:
        names = ", ".join(step.name for step in self._steps)
        return f"FormatPipeline(steps=[{names}])"

    def add_step(self, step: FormatterStep) -> FormatPipeline:
        """Append a step. Returns self for chaining."""
        self._steps.append(step)
        return self

    def add_callback(self, callback: PipelineCallback) -> FormatPipeline:
        """Register an event callback. Returns self for chaining."""
        self._callbacks.append(callback)
        return self

    def _fire(self, method: str, *args: Any) -> None:
        """Notify every callback that implements *method*; failures are only logged."""
        for callback in self._callbacks:
            handler = getattr(callback, method, None)
            if not callable(handler):
                continue
            try:
                handler(*args)
            except Exception:
                logger.warning("Callback %r.%s failed", callback, method, exc_info=True)

    def run(self, text: str) -> tuple[str, PipelineDiagnostics]:
        """Apply every step in order and return the text with step diagnostics."""
        diagnostics: dict[str, Any] = {"steps": []}
        for step in self._steps:
            step_start = time.monotonic()
            self._fire("on_step_start", step.name, text)
            try:
                formatted = step.apply(text)
            except StructFmtError as exc:
                self._fire("on_step_error", step.name, exc)
                diagnostics["failed_step"] = step.name
                raise
            except Exception as e:
                self._fire("on_step_error", step.name, e)
                diagnostics["failed_step"] = step.name
                msg = f"Pipeline failed at step '{step.name}'"
                raise PipelineExecutionError(msg, diagnostics=diagnostics) from e

            step_time = (time.monotonic() - step_start) * 1000
            self._fire("on_step_end", step.name, formatted, step_time)
            diagnostics["steps"].append({
                "name": step.name,
                "time_ms": round(step_time, 2),
                "changed": formatted != text,
            })
            text = formatted
        return text, cast(PipelineDiagnostics, diagnostics)

    def apply(self, text: str) -> str:
        """Apply every step in order and return the formatted text."""
        formatted, _ = self.run(text)
        return formatted

    def is_clean(self, text: str) -> bool:
        """Return True when formatting would leave *text* unchanged."""
        return self.apply(text) == text

    def apply_many(
        self,
        texts: Mapping[str, str] | Iterable[tuple[str, str]],
        *,
        max_workers: int | None = None,
    ) -> list[FileResult]:
        """Format many named texts concurrently.

        Parameters:
            texts: ``name -> text`` mapping or iterable of ``(name, text)``
                pairs.  Names are only used to label results.
            max_workers: Thread pool size; ``None`` uses the executor default.

        Returns:
            One :class:`FileResult` per input, in input order.
        """
        pairs = list(texts.items()) if isinstance(texts, Mapping) else list(texts)
        if not pairs:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda pair: self._format_one(*pair), pairs))

    def _format_one(self, name: str, text: str) -> FileResult:
        start = time.monotonic()
        try:
            formatted = self.apply(text)
        except StructFmtError as exc:
            logger.warning("Formatting '%s' failed: %s", name, exc)
            return FileResult(
                name=name,
                error=str(exc),
                time_ms=round((time.monotonic() - start) * 1000, 2),
            )
        return FileResult(
            name=name,
            output=formatted,
            changed=formatted != text,
            time_ms=round((time.monotonic() - start) * 1000, 2),
        )
