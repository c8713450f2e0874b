from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from vizspec.config import HostConfig, load_host_config
from vizspec.exceptions import ConfigError, SpecParseError
from vizspec.patch.codec import decode_update
from vizspec.patch.engine import apply_update
from vizspec.render.decision import MODE_OPTION, PageRef
from vizspec.render.ingest import INTERACTIVE_MODE, ingest
from vizspec.render.pipeline import OccurrenceInput, render_document
from vizspec.runtime.json_io import dump_json_pretty, load_tolerant_json
from vizspec.schema import HashResponseDTO, HostMetadataDTO, RenderResponseDTO

app = typer.Typer(add_completion=False)

_STDIN_ALIAS = "-"


def _read_text(path: Path) -> str:
    if str(path) == _STDIN_ALIAS:
        return sys.stdin.read()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}") from exc


def _host_config(config: Optional[Path]) -> HostConfig:
    try:
        return load_host_config(config_path=config)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _load_document(path: Path, what: str) -> object:
    try:
        return load_tolerant_json(_read_text(path))
    except SpecParseError as exc:
        typer.echo(f"{what}: {exc.display_text}", err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Render and patch embedded visualization specifications."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def render(
    paths: List[Path] = typer.Argument(..., help="Specification files; '-' reads stdin."),
    preview: bool = typer.Option(False, "--preview", help="Render as a preview."),
    interactive: bool = typer.Option(
        False, "--interactive", help="Request interactive mode for every occurrence."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    host: str = typer.Option("", "--host"),
    title: Optional[str] = typer.Option(None, "--title"),
    revision: Optional[int] = typer.Option(None, "--revision"),
) -> None:
    """Render each file as one occurrence of a single document."""
    host_config = _host_config(config)
    options = {MODE_OPTION: INTERACTIVE_MODE} if interactive else {}
    occurrences = [OccurrenceInput(text=_read_text(path), options=options) for path in paths]
    result = render_document(
        occurrences,
        host_config,
        is_preview=preview,
        page=PageRef(host=host, title=title, revision=revision),
    )
    response = RenderResponseDTO(
        markup=result.markup,
        metadata=HostMetadataDTO(**result.metadata.to_json()),
    )
    typer.echo(response.model_dump_json(indent=2))


@app.command()
def patch(
    base: Path = typer.Argument(..., help="Specification to patch."),
    update: Path = typer.Argument(
        ..., help='Partial update; {"$delete": true} removes a field.'
    ),
) -> None:
    """Apply a partial update and print the resulting specification."""
    document = _load_document(base, "base")
    partial = decode_update(_load_document(update, "update"))
    typer.echo(dump_json_pretty(apply_update(document, partial), indent=2))


@app.command("hash")
def hash_command(
    path: Path = typer.Argument(..., help="Specification file; '-' reads stdin."),
    interactive: bool = typer.Option(False, "--interactive"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the content hash and generation the render pass would assign."""
    host_config = _host_config(config)
    try:
        result = ingest(
            _read_text(path),
            INTERACTIVE_MODE if interactive else None,
            host_config,
        )
    except SpecParseError as exc:
        typer.echo(exc.display_text, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(
        HashResponseDTO(
            content_hash=result.content_hash, generation=result.generation
        ).model_dump_json()
    )


def run() -> None:
    app()


if __name__ == "__main__":
    run()
