"""Formatter steps."""

from .step import (
    FormatterStep,
    ensure_single_eol,
    json_step,
    new_step,
    same_document,
    yaml_step,
)

__all__ = [
    "FormatterStep",
    "ensure_single_eol",
    "json_step",
    "new_step",
    "same_document",
    "yaml_step",
]
