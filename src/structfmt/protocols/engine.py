"""CanonicalizationEngine protocol definition.

An engine parses text into a document tree and serializes a tree back to
text under a set of feature toggles.  Any object with the members below
can back a formatter step -- no inheritance required (PEP 544 structural
subtyping).
"""

from __future__ import annotations

from typing import Any, Protocol, Self, runtime_checkable

from structfmt.models.features import Feature


@runtime_checkable
class CanonicalizationEngine(Protocol):
    """Protocol for parse/serialize engines used by formatter steps.

    Engines must be immutable after construction: ``configure`` returns a
    new engine instead of mutating the receiver, so a single configured
    engine can be shared by concurrent ``apply`` calls.
    """

    @property
    def name(self) -> str:
        """Identifier used in diagnostics (e.g. ``'json'``, ``'yaml'``)."""
        ...

    def configure(self, feature: Feature, enabled: bool) -> Self:
        """Return a copy of this engine with *feature* set to *enabled*."""
        ...

    def parse(self, text: str) -> Any:
        """Parse *text* into a document tree.

        Raises:
            ParseFailure: If *text* is not valid syntax for this engine.
        """
        ...

    def serialize(self, document: Any) -> str:
        """Serialize a document tree produced by :meth:`parse` back to text.

        Raises:
            SerializeFailure: If the document cannot be written.
        """
        ...
