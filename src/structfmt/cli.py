"""CLI interface for structfmt.

Requires the 'cli' extra: pip install structfmt[cli]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

try:
    import typer
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install structfmt[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from structfmt import __version__
from structfmt.exceptions import ConfigurationError
from structfmt.models.features import FEATURE_TABLE, DocumentFormat, lookup_feature
from structfmt.pipeline import FormatPipeline
from structfmt.resolve import resolve_config
from structfmt.steps import new_step

app = typer.Typer(
    name="structfmt",
    help="Canonical formatting for JSON and YAML documents.",
    add_completion=False,
)
console = Console()

SUFFIXES: dict[str, DocumentFormat] = {
    ".json": DocumentFormat.JSON,
    ".yaml": DocumentFormat.YAML,
    ".yml": DocumentFormat.YAML,
}

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    if version:
        console.print(f"structfmt {__version__}")
        raise typer.Exit()
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def parse_feature_option(value: str) -> tuple[str, bool]:
    """Parse a ``NAME=BOOL`` command-line toggle."""
    name, sep, raw = value.partition("=")
    if not sep:
        return name.strip(), True
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return name.strip(), True
    if lowered in _FALSE:
        return name.strip(), False
    msg = f"Feature '{name}' needs a boolean value, got '{raw}'"
    raise typer.BadParameter(msg)


def toggles_for(toggles: dict[str, bool], doc_format: DocumentFormat) -> dict[str, bool]:
    """Drop known toggles that do not apply to *doc_format*.

    Unknown names are kept so configuration resolution rejects them.
    """
    kept: dict[str, bool] = {}
    for name, value in toggles.items():
        spec = FEATURE_TABLE.get(name)  # type: ignore[call-overload]
        if spec is not None and doc_format not in spec.formats:
            continue
        kept[name] = value
    return kept


def collect_files(paths: list[Path], fmt: DocumentFormat | None) -> dict[DocumentFormat, list[Path]]:
    """Group the given files (and files under given directories) by format."""
    grouped: dict[DocumentFormat, list[Path]] = {}
    for path in paths:
        candidates = sorted(p for p in path.rglob("*") if p.is_file()) if path.is_dir() else [path]
        for candidate in candidates:
            detected = fmt or SUFFIXES.get(candidate.suffix.lower())
            if detected is None:
                if not path.is_dir():
                    console.print(f"[yellow]Skipping {candidate}: unknown format[/yellow]")
                continue
            grouped.setdefault(detected, []).append(candidate)
    return grouped


@app.command("format")
def format_files(
    paths: list[Path] = typer.Argument(..., help="Files or directories to format"),  # noqa: B008
    fmt: Optional[str] = typer.Option(  # noqa: UP007
        None, "--format", "-f", help="Force a format: json|yaml (default: by file suffix)"
    ),
    feature: Optional[list[str]] = typer.Option(  # noqa: UP007
        None, "--feature", "-F", help="Feature toggle NAME=true|false (repeatable)"
    ),
    no_eol: bool = typer.Option(False, "--no-eol", help="Do not force a trailing newline"),
    space_before_separator: bool = typer.Option(
        False, "--space-before-separator", help="Write 'key : value' in indented JSON"
    ),
    check: bool = typer.Option(False, "--check", help="Report files that would change"),
) -> None:
    """Format JSON and YAML files in place (or check them with --check)."""
    for path in paths:
        if not path.exists():
            console.print(f"[red]Error: {path} does not exist[/red]")
            raise typer.Exit(code=1)

    try:
        forced = DocumentFormat(fmt) if fmt else None
    except ValueError:
        console.print(f"[red]Error: unknown format '{fmt}'[/red]")
        raise typer.Exit(code=2) from None

    toggles = dict(parse_feature_option(value) for value in feature or [])

    pipelines: dict[DocumentFormat, FormatPipeline] = {}
    try:
        for name in toggles:
            lookup_feature(name)
        grouped = collect_files(paths, forced)
        for doc_format in grouped:
            raw = {
                "features": toggles_for(toggles, doc_format),
                "end_with_eol": not no_eol,
                "space_before_separator": space_before_separator,
            }
            if doc_format is DocumentFormat.YAML:
                raw.pop("space_before_separator")
            config = resolve_config(raw, format=doc_format)
            pipelines[doc_format] = FormatPipeline([new_step(config)])
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error: {exc}[/red]")
        raise typer.Exit(code=2) from None

    failed = 0
    changed = 0
    for doc_format, files in grouped.items():
        texts = {str(path): path.read_text(encoding="utf-8") for path in files}
        for result in pipelines[doc_format].apply_many(texts):
            if not result.ok:
                failed += 1
                console.print(f"[red]Failed {escape(result.name)}[/red]: {escape(result.error or '')}")
                continue
            if not result.changed:
                continue
            changed += 1
            if check:
                console.print(f"Would reformat {result.name}")
            else:
                Path(result.name).write_text(result.output or "", encoding="utf-8")
                console.print(f"Formatted {result.name}")

    total = sum(len(files) for files in grouped.values())
    verb = "would change" if check else "changed"
    console.print(f"[dim]{total} file(s) checked, {changed} {verb}, {failed} failed[/dim]")
    if failed or (check and changed):
        raise typer.Exit(code=1)


@app.command()
def features() -> None:
    """List the known feature toggles."""
    table = Table(title="structfmt features")
    table.add_column("Feature", style="cyan")
    table.add_column("Default", style="green")
    table.add_column("Formats")
    table.add_column("Description")
    for feature, spec in FEATURE_TABLE.items():
        formats = ", ".join(sorted(f.value for f in spec.formats))
        table.add_row(feature.value, str(spec.default).lower(), formats, spec.description)
    console.print(table)


if __name__ == "__main__":
    app()
