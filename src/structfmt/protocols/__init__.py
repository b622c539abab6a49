"""Protocol definitions for structfmt's pluggable architecture."""

from .engine import CanonicalizationEngine

__all__ = [
    "CanonicalizationEngine",
]
