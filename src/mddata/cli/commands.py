"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mddata.config import Settings, load_config
from mddata.core.document import Document
from mddata.core.export import dump_data
from mddata.core.pipeline import run_render
from mddata.csv.read import read_file
from mddata.csv.typed import typed_files
from mddata.exceptions import MddataError
from mddata.util.fs import resolve


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling; configures logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _load(path: str, settings: Settings) -> Document:
    try:
        return Document.from_file(Path(path), settings.max_key_length)
    except MddataError as e:
        _fail(str(e))


def html_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to render")],
    url_base: Annotated[Optional[str], typer.Option("--url-base", help="Link headers under this URL")] = None,
    numbered: Annotated[Optional[bool], typer.Option("--numbered/--plain", help="Number headers")] = None,
    ):
    """Render a document to HTML on stdout."""
    settings = _settings(overrides={"url_base": url_base, "numbered": numbered})
    doc = _load(path, settings)
    typer.echo(doc.html(url_base=settings.url_base, numbered=settings.numbered), nl=False)


def data_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    fmt: Annotated[str, typer.Option("--format", help="json or yaml")] = "json",
    no_text: Annotated[bool, typer.Option("--no-text", help="Leave paragraphs out")] = False,
    ):
    """Print the data tree of a document."""
    settings = _settings(overrides={"include_text": False if no_text else None})
    doc = _load(path, settings)
    typer.echo(dump_data(doc.data(text=settings.include_text), fmt), nl=False)


def part_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    section: Annotated[str, typer.Argument(help="Dotted header path, e.g. intro.scope")],
    fmt: Annotated[str, typer.Option("--format", help="html, json or yaml")] = "html",
    ):
    """Print one section of a document."""
    settings = _settings()
    part = _load(path, settings).part(section)
    if part.is_empty:
        _fail(f"Section not found: {section}")
    if fmt == "html":
        typer.echo(part.html(url_base=settings.url_base, numbered=settings.numbered), nl=False)
    else:
        typer.echo(dump_data(part.data(text=settings.include_text), fmt), nl=False)


def check_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to check")],
    reference: Annotated[str, typer.Argument(help="Markdown file whose headers are required")],
    ):
    """Check that a document has every header of a reference document."""
    settings = _settings()
    ok, report = _load(path, settings).check_structure(_load(reference, settings))
    if not ok:
        typer.echo(report, nl=False)
        raise typer.Exit(1)
    typer.echo("Structure OK")


def events_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    tree: Annotated[bool, typer.Option("--tree", help="Print the stream as a JSON tree")] = False,
    ):
    """Print the flat event stream of a document."""
    settings = _settings()
    doc = _load(path, settings)
    if tree:
        typer.echo(json.dumps(doc.tree().to_list(), indent=2, ensure_ascii=False))
    else:
        typer.echo(doc.stream().text(), nl=False)


def get_cmd(
    root: Annotated[str, typer.Argument(help="Root directory")],
    path: Annotated[str, typer.Argument(help="Slash path, e.g. docs/guide/install or docs/guide/_")],
    ):
    """Resolve a path to a directory listing, a document section or data."""
    settings = _settings()
    try:
        found = resolve(Path(root), path)
    except (MddataError, ValueError) as e:
        _fail(f"Cannot resolve {path}", e)
    if found is None or found.value is None:
        _fail(f"Not found: {path}")
    if isinstance(found.value, Document) and found.value.is_empty:
        _fail(f"Not found: {path}")

    if found.kind == "dir":
        for name in found.value:
            typer.echo(name)
    elif found.kind == "document":
        typer.echo(found.value.html(url_base=settings.url_base, numbered=settings.numbered), nl=False)
    elif found.kind == "data":
        typer.echo(dump_data(found.value), nl=False)
    else:
        typer.echo(found.value.decode("utf-8", errors="replace"), nl=False)
    for name, value in found.params.items():
        typer.echo(f"{name}={value}", err=True)


def csv_cmd(
    files: Annotated[list[Path], typer.Argument(help="CSV files; with --typed the first lists instances")],
    typed: Annotated[bool, typer.Option("--typed", help="Resolve 'type' inheritance across files")] = False,
    ):
    """Print CSV records as JSON."""
    _settings()
    try:
        records = typed_files(files) if typed else [r for f in files for r in read_file(f)]
    except MddataError as e:
        _fail("CSV read failed", e)
    typer.echo(dump_data(records), nl=False)


def build_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to render")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    url_base: Annotated[Optional[str], typer.Option("--url-base", help="Link headers under this URL")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Sidecar format: html (json sidecar), json or yaml")] = None,
    ):
    """Render HTML + data sidecars for every .md file under path."""
    settings = _settings(overrides={"output_dir": out, "url_base": url_base, "output_format": fmt})
    output_dir = Path(settings.output_dir)
    try:
        results = run_render(path, output_dir, settings)
    except RuntimeError as e:
        _fail(str(e))
    for src, html_path in results:
        typer.echo(f"  {src} -> {html_path}")
    typer.echo(f"Rendered {len(results)} document(s) to {output_dir}/")
