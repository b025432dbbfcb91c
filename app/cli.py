from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.filesystem.document_repository import FileSystemDocumentRepository
from adapters.filesystem.json_utils import encode_json, read_json
from app.config import load_settings
from app.editor_wiring import build_editor_runtime
from app.session_commands import parse_commands, run_commands
from domain.models import Document

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log editor transitions."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@app.command("replay")
def replay(
    document_path: Path = typer.Argument(..., help="Layout document JSON to start from."),
    script_path: Path = typer.Argument(..., help="JSON list of editor commands."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Where to write the resulting document. Prints it if omitted.",
    ),
    config: Path | None = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    for path in (document_path, script_path):
        if not path.exists():
            console.print(f"[red]File not found:[/] {path}")
            raise typer.Exit(code=1)

    repository = FileSystemDocumentRepository()
    try:
        settings = load_settings(config)
        document = repository.load(document_path)
        commands = parse_commands(read_json(script_path))
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Replay failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    runtime = build_editor_runtime(settings, document)
    try:
        result = run_commands(runtime, commands)
    finally:
        runtime.session.close()

    if output is None:
        typer.echo(encode_json(result.to_payload()).decode("utf-8"), nl=False)
        return
    repository.save(result, output)
    console.print(
        f"[green]Wrote[/] {output} ({len(result.elements)} elements, {len(commands)} commands)"
    )


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="Layout document or command script to validate."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        data = read_json(input_path)
        if isinstance(data, list) or (isinstance(data, dict) and "commands" in data):
            commands = parse_commands(data)
            console.print(f"[green]Valid command script ({len(commands)} commands):[/] {input_path}")
        else:
            document = Document.model_validate(data)
            console.print(
                f"[green]Valid layout document ({len(document.elements)} elements):[/] {input_path}"
            )
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
