"""Shared fixtures for structfmt tests."""

from __future__ import annotations

from typing import Any

import pytest

from structfmt.models.config import FormatterConfig
from structfmt.models.features import DocumentFormat, Feature
from structfmt.steps.step import FormatterStep, new_step

JSON_SAMPLES: list[str] = [
    '{"b":1,"a":2}',
    '{"name": "widget", "tags": ["x", "y"], "price": 9.5, "stock": null, "active": true}',
    '{"nested": {"deep": {"deeper": [1, {"k": "v"}, [], {}]}}, "empty": ""}',
    '{"unicode": "caf\\u00e9 \\u2603", "escaped": "line\\nbreak \\"quoted\\""}',
    '{"numbers": [0, -1, 3.14, 1e10, 12345678901234567890, -0.5]}',
    '[1, "two", {"three": 3}]',
    '"just a string"',
]

YAML_SAMPLES: list[str] = [
    "b: 1\na: 2\n",
    "name: widget\ntags:\n  - x\n  - y\nprice: 9.5\nstock: null\nactive: true\n",
    "---\nnested:\n  deep:\n    deeper: [1, {k: v}, [], {}]\nempty: ''\n",
    "unicode: café ☃\nmultiline: |\n  first line\n  second line\n",
    "when: 2024-01-15\nversion: '1.0'\ncount: 0x1F\n",
    "- one\n- two: 2\n- [three]\n",
    "plain scalar\n",
    "text: " + " ".join(["word"] * 40) + "\n",
    "order: !!omap\n  - z: 1\n  - a: 2\n",
    "!!pairs\n- a: 1\n- a: 2\n",
    'breaks: "next\\x85line\\u2028sep\\u2029para"\n',
]


class FakeEngine:
    """Engine stand-in whose parse/serialize behaviour is scripted by the test."""

    def __init__(
        self,
        *,
        parse_error: Exception | None = None,
        serialize_error: Exception | None = None,
        outputs: list[str] | None = None,
        documents: list[Any] | None = None,
    ) -> None:
        self.parse_error = parse_error
        self.serialize_error = serialize_error
        self.outputs = list(outputs or [])
        self.documents = list(documents or [])
        self.parse_calls = 0
        self.serialize_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def configure(self, feature: Feature, enabled: bool) -> FakeEngine:
        return self

    def parse(self, text: str) -> Any:
        self.parse_calls += 1
        if self.parse_error is not None:
            raise self.parse_error
        if self.documents:
            return self.documents.pop(0)
        return {"fake": True}

    def serialize(self, document: Any) -> str:
        self.serialize_calls += 1
        if self.serialize_error is not None:
            raise self.serialize_error
        if self.outputs:
            return self.outputs.pop(0)
        return "fixed\n"


class RecordingCallback:
    """Pipeline callback that records every event it receives."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []
        self.errors: list[Exception] = []

    def on_step_start(self, step_name: str, text: str) -> None:
        self.events.append(("start", step_name))

    def on_step_end(self, step_name: str, text: str, time_ms: float) -> None:
        self.events.append(("end", step_name))

    def on_step_error(self, step_name: str, error: Exception) -> None:
        self.events.append(("error", step_name))
        self.errors.append(error)


def make_step(fmt: DocumentFormat = DocumentFormat.JSON, **config: Any) -> FormatterStep:
    """Build a step from FormatterConfig keyword arguments."""
    return new_step(FormatterConfig(format=fmt, **config))


@pytest.fixture
def json_format_step() -> FormatterStep:
    """A JSON step with the default configuration."""
    return make_step(DocumentFormat.JSON)


@pytest.fixture
def yaml_format_step() -> FormatterStep:
    """A YAML step with the default configuration."""
    return make_step(DocumentFormat.YAML)
