"""Pipeline callback protocol for observability and event hooks."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PipelineCallback(Protocol):
    """Protocol for format pipeline event callbacks.

    Callbacks are looked up by method name, so an implementation only needs
    the methods it cares about.  Exceptions raised by a callback are logged
    and never interrupt formatting.  With ``apply_many`` callbacks are
    invoked from worker threads.
    """

    def on_step_start(self, step_name: str, text: str) -> None: ...
    def on_step_end(self, step_name: str, text: str, time_ms: float) -> None: ...
    def on_step_error(self, step_name: str, error: Exception) -> None: ...
