"""CLI interface."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from lottie_engine.codec import LottieFormat, decode_document, encode_document, output_filename
from lottie_engine.edit_transforms import apply_edits
from lottie_engine.errors import LottieError
from lottie_engine.interactions.embed import render_embed
from lottie_engine.normalizer import normalize_in_place
from lottie_engine.services.editing_session import EditingSession
from lottie_engine.services.render_scheduler import ImmediateScheduler
from lottie_engine.utils.config import settings
from lottie_engine.validator import check_document

app = typer.Typer(add_completion=False, help="Inspect and edit Lottie animations.")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _fail(exc: LottieError) -> None:
    typer.secho(f"{exc.code}: {exc.message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _read(path: Path) -> bytes:
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_bytes()


def _open(path: Path, metadata: Optional[Dict[str, Any]] = None) -> EditingSession:
    try:
        return EditingSession.open(_read(path), path.name, metadata=metadata, scheduler=ImmediateScheduler())
    except LottieError as exc:
        _fail(exc)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(_read(path).decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}")


def _write(session: EditingSession, output: Path) -> Dict[str, Any]:
    result = session.persist()
    output.write_bytes(result.content)
    return {"output": str(output), "format": result.format.value, "bytes": len(result.content)}


@app.command()
def validate(file: Path = typer.Argument(..., help="Path to a .json or .lottie file.")):
    """Check that a file is a well-formed animation."""
    outcome = check_document(_read(file), file.name)
    typer.echo(
        json.dumps(
            {
                "valid": outcome.valid,
                "format": outcome.format,
                "code": outcome.code,
                "error": outcome.error,
            },
            indent=2,
        )
    )
    if not outcome.valid:
        raise typer.Exit(code=1)


@app.command()
def inspect(file: Path = typer.Argument(...)):
    """List layers, colors and text of an animation."""
    session = _open(file)
    document = session.document
    summary = {
        "format": session.format.value,
        "version": document.get("v"),
        "frameRate": document.get("fr"),
        "width": document.get("w"),
        "height": document.get("h"),
        "inPoint": document.get("ip"),
        "outPoint": document.get("op"),
        "layers": [layer.to_dict() for layer in session.layers()],
        "colors": session.colors(),
        "texts": [
            {"span": index, "layer": span.layer_name, "keyframe": span.keyframe_index, "text": span.text}
            for index, span in enumerate(session.text_spans())
        ],
    }
    typer.echo(json.dumps(summary, indent=2, ensure_ascii=False))


@app.command("replace-color")
def replace_color(
    file: Path = typer.Argument(...),
    old: str = typer.Option(..., "--from", help="Color to replace, #rrggbb."),
    new: str = typer.Option(..., "--to", help="Replacement color, #rrggbb."),
    output: Path = typer.Option(..., "--output", "-o"),
):
    """Replace every occurrence of a color."""
    session = _open(file)
    try:
        count = session.replace_color(old, new)
    except LottieError as exc:
        _fail(exc)
    typer.echo(json.dumps({"replaced": count, **_write(session, output)}, indent=2))


@app.command("set-text")
def set_text(
    file: Path = typer.Argument(...),
    span: int = typer.Option(..., "--span", help="Span index as listed by inspect."),
    text: str = typer.Option(..., "--text"),
    output: Path = typer.Option(..., "--output", "-o"),
):
    """Change the text of one text span."""
    session = _open(file)
    spans = session.text_spans()
    if not 0 <= span < len(spans):
        raise typer.BadParameter(f"Span {span} not found; the animation has {len(spans)} text spans")
    try:
        updated = session.update_text(spans[span], text)
    except LottieError as exc:
        _fail(exc)
    typer.echo(json.dumps({"layer": updated.layer_name, "text": updated.text, **_write(session, output)}, indent=2))


@app.command("hide-layer")
def hide_layer(
    file: Path = typer.Argument(...),
    index: int = typer.Option(..., "--index", help="Root layer index as listed by inspect."),
    show: bool = typer.Option(False, "--show", help="Show the layer instead of hiding it."),
    output: Path = typer.Option(..., "--output", "-o"),
):
    """Hide (or show) a root layer."""
    session = _open(file)
    try:
        session.set_layer_hidden(index, not show)
    except IndexError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(json.dumps({"index": index, "visible": show, **_write(session, output)}, indent=2))


@app.command()
def normalize(
    file: Path = typer.Argument(...),
    output: Path = typer.Option(..., "--output", "-o"),
):
    """Add missing animated discriminators, keeping the container format."""
    try:
        decoded = decode_document(_read(file), file.name)
    except LottieError as exc:
        _fail(exc)
    repaired = normalize_in_place(decoded.document)
    content = encode_document(decoded.document, decoded.format)
    output.write_bytes(content)
    typer.echo(json.dumps({"repaired": repaired, "output": str(output), "format": decoded.format.value}, indent=2))


@app.command()
def convert(
    file: Path = typer.Argument(...),
    to: LottieFormat = typer.Option(..., "--to", help="Target container format."),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
):
    """Convert between plain JSON and compressed .lottie."""
    try:
        decoded = decode_document(_read(file), file.name)
    except LottieError as exc:
        _fail(exc)
    target = output or file.with_name(output_filename(file.name, to))
    content = encode_document(decoded.document, to)
    target.write_bytes(content)
    typer.echo(json.dumps({"from": decoded.format.value, "to": to.value, "output": str(target)}, indent=2))


@app.command()
def apply(
    file: Path = typer.Argument(...),
    edits: Path = typer.Option(..., "--edits", help="JSON file with a list of {action, ...} edits."),
    output: Path = typer.Option(..., "--output", "-o"),
):
    """Apply a list of declarative edits."""
    edit_list = _read_json(edits)
    if not isinstance(edit_list, list):
        raise typer.BadParameter("Edits file must contain a JSON array")
    session = _open(file)
    try:
        new_document, patches = apply_edits(session.document, edit_list)
    except LottieError as exc:
        _fail(exc)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    session.document = new_document
    typer.echo(json.dumps({"patches": patches, **_write(session, output)}, indent=2, ensure_ascii=False))


@app.command()
def embed(
    file: Path = typer.Argument(...),
    metadata: Optional[Path] = typer.Option(None, "--metadata", help="JSON file with backgroundColor, speed, interactions."),
    element_id: Optional[str] = typer.Option(None, "--id", help="Container element id."),
    loop: bool = typer.Option(True, "--loop/--no-loop"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
):
    """Render an HTML snippet that plays the animation."""
    record = _read_json(metadata) if metadata else None
    if record is not None and not isinstance(record, dict):
        raise typer.BadParameter("Metadata file must contain a JSON object")
    session = _open(file, metadata=record)
    options: Dict[str, Any] = {"loop": loop, "id": element_id}
    snippet = render_embed(session.document, session.metadata, options)
    if output:
        output.write_text(snippet, encoding="utf-8")
        typer.echo(json.dumps({"output": str(output)}, indent=2))
    else:
        typer.echo(snippet)


if __name__ == "__main__":
    app()
