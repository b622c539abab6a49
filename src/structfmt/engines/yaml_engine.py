"""YAML engine backed by PyYAML's safe loader and dumper."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Mapping
from typing import Any, Self

import yaml

from structfmt.exceptions import ParseFailure, SerializeFailure
from structfmt.models.diagnostics import SyntaxDiagnostic
from structfmt.models.features import DocumentFormat, Feature, resolve_feature

logger = logging.getLogger(__name__)

INDENT = 2
_DOCUMENT_END = "\n...\n"
# YAML reads these as line breaks unless they are escaped.
_UNICODE_BREAKS = frozenset("\x85\u2028\u2029")


class YamlOmap(list):
    """An ``!!omap`` sequence: ``(key, value)`` pairs with unique keys."""

    tag = "tag:yaml.org,2002:omap"


class YamlPairs(list):
    """A ``!!pairs`` sequence: ``(key, value)`` pairs, keys may repeat."""

    tag = "tag:yaml.org,2002:pairs"


def _construct_pairs(
    loader: yaml.SafeLoader, node: yaml.Node, cls: type[list]
) -> Iterator[list]:
    data = cls()
    yield data
    if cls is YamlOmap:
        builder = loader.construct_yaml_omap(node)
    else:
        builder = loader.construct_yaml_pairs(node)
    pairs = next(builder)
    # The builtin constructors fill their list on the second step.
    next(builder, None)
    data.extend(pairs)


class _Loader(yaml.SafeLoader):
    """SafeLoader that keeps ``!!omap`` and ``!!pairs`` distinguishable."""


_Loader.add_constructor(
    YamlOmap.tag, lambda loader, node: _construct_pairs(loader, node, YamlOmap)
)
_Loader.add_constructor(
    YamlPairs.tag, lambda loader, node: _construct_pairs(loader, node, YamlPairs)
)


def _represent_pairs(dumper: yaml.SafeDumper, data: list) -> yaml.Node:
    return dumper.represent_sequence(data.tag, [{key: value} for key, value in data])


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.Node:
    if _UNICODE_BREAKS.intersection(data):
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')
    return dumper.represent_str(data)


class _Dumper(yaml.SafeDumper):
    """SafeDumper that writes tagged pair lists and escapes Unicode breaks."""


_Dumper.add_representer(YamlOmap, _represent_pairs)
_Dumper.add_representer(YamlPairs, _represent_pairs)
_Dumper.add_representer(str, _represent_str)


class _IndentedSequenceDumper(_Dumper):
    """Dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


class YamlEngine:
    """Parses and writes single-document YAML.

    Only the safe subset of YAML is accepted: no Python-specific tags.
    Multi-document streams, empty documents and comment-only input are
    rejected with :class:`~structfmt.exceptions.ParseFailure`.  Comments
    are not preserved.  ``!!omap`` and ``!!pairs`` sequences load as
    :class:`YamlOmap` and :class:`YamlPairs` and are written back with
    their tags.

    Instances are immutable: :meth:`configure` returns a new engine.
    """

    __slots__ = ("_features",)

    def __init__(self, features: Mapping[Feature, bool] | None = None) -> None:
        self._features: dict[Feature, bool] = {}
        for feature, enabled in (features or {}).items():
            self._features[resolve_feature(feature, DocumentFormat.YAML)] = enabled

    @property
    def name(self) -> str:
        return "yaml"

    def __repr__(self) -> str:
        toggles = ", ".join(f"{f.value}={v}" for f, v in self._features.items())
        return f"YamlEngine({toggles})"

    def is_enabled(self, feature: Feature) -> bool:
        return self._features.get(feature, False)

    def configure(self, feature: Feature, enabled: bool) -> Self:
        resolved = resolve_feature(feature, DocumentFormat.YAML)
        logger.debug("Configuring yaml engine: %s=%s", resolved.value, enabled)
        return type(self)({**self._features, resolved: enabled})

    def parse(self, text: str) -> Any:
        loader = _Loader(text)
        try:
            node = loader.get_single_node()
            if node is None:
                diagnostic = SyntaxDiagnostic(message="No content to parse", engine=self.name)
                raise ParseFailure(text, engine=self.name, diagnostic=diagnostic)
            return loader.construct_document(node)
        except yaml.YAMLError as exc:
            raise ParseFailure(text, engine=self.name, diagnostic=_diagnostic_for(exc)) from exc
        finally:
            loader.dispose()

    def serialize(self, document: Any) -> str:
        dumper = (
            _IndentedSequenceDumper
            if self.is_enabled(Feature.INDENT_ARRAYS)
            else _Dumper
        )
        try:
            output = yaml.dump(
                document,
                Dumper=dumper,
                indent=INDENT,
                default_flow_style=not self.is_enabled(Feature.INDENT_OUTPUT),
                sort_keys=self.is_enabled(Feature.ORDER_MAP_ENTRIES_BY_KEYS),
                allow_unicode=not self.is_enabled(Feature.ESCAPE_NON_ASCII),
                explicit_start=self.is_enabled(Feature.WRITE_DOC_START_MARKER),
                width=None if self.is_enabled(Feature.SPLIT_LINES) else sys.maxsize,
            )
        except yaml.YAMLError as exc:
            diagnostic = SyntaxDiagnostic(message=str(exc), engine=self.name)
            raise SerializeFailure(
                repr(document), engine=self.name, diagnostic=diagnostic
            ) from exc

        # A bare top-level scalar is followed by an explicit document end.
        if output.endswith(_DOCUMENT_END):
            output = output[: -len(_DOCUMENT_END)] + "\n"
        return output


def _diagnostic_for(exc: yaml.YAMLError) -> SyntaxDiagnostic:
    """Build a SyntaxDiagnostic from a PyYAML error, keeping its position."""
    if isinstance(exc, yaml.MarkedYAMLError) and exc.problem_mark is not None:
        mark = exc.problem_mark
        message = exc.problem or str(exc)
        if exc.context:
            message = f"{exc.context}: {message}"
        return SyntaxDiagnostic(
            message=message, engine="yaml", line=mark.line + 1, column=mark.column + 1
        )
    return SyntaxDiagnostic(message=str(exc), engine="yaml")
