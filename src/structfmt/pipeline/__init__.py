"""Format pipeline orchestration."""

from .callbacks import PipelineCallback
from .pipeline import FormatPipeline

__all__ = [
    "FormatPipeline",
    "PipelineCallback",
]
