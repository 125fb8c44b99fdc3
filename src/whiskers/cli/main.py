"""CLI entry point for whiskers-lang.

Invoked as::

    whiskers [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m whiskers.cli.main

Commands
--------
tokenize    Show the token stream of a source file
parse       Dump the parsed AST to JSON or YAML
validate    Parse and validate a source file
compile     Compile one source file to HTML and JavaScript
build       Compile a multi-sprite project manifest
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from whiskers.diagnostics import Diagnostic

if TYPE_CHECKING:
    from whiskers.facade import CompileResult
    from whiskers.options import CompileOptions

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a source file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFO": "blue",
    }
    return colors.get(severity_name, "white")


def _print_diagnostics(title: str, diagnostics: list[Diagnostic]) -> None:
    table = Table(title=title, show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=6)
    table.add_column("Location", min_width=8)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        loc = f"{d.span.line}:{d.span.col}"
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            loc,
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    errors = sum(1 for d in diagnostics if d.is_error)
    console.print(
        f"\n[bold]Summary:[/bold] {errors} error(s), {len(diagnostics) - errors} warning(s)"
    )


def _load_options_or_exit(config: str | None, **overrides: Any) -> "CompileOptions":
    from whiskers.options import CompileOptions, OptionsError, load_options

    try:
        base = load_options(config) if config else CompileOptions()
        return base.merged(**overrides)
    except OptionsError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _write_outputs(result: "CompileResult", output_dir: Path, stem: str, js_only: bool) -> None:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        targets = [(output_dir / f"{stem}.js", result.js)]
        if not js_only:
            targets.append((output_dir / f"{stem}.html", result.html))
        for dest, content in targets:
            dest.write_text(content, encoding="utf-8")
            console.print(f"[green]Written:[/green] {dest}")
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot write output: {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="whiskers-lang")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Whiskers: compile Scratch-like block scripts to JavaScript and HTML."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from whiskers import __version__
    from whiskers.compiler import available_targets

    table = Table(show_header=False, box=None)
    table.add_row("[bold]whiskers-lang[/bold]", f"v{__version__}")
    table.add_row("Targets", ", ".join(available_targets()))
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# tokenize command
# ---------------------------------------------------------------------------


@cli.command(name="tokenize")
@click.argument("file", type=click.Path(exists=False))
def tokenize_command(file: str) -> None:
    """Show the tokens of a source file.

    FILE is the path to the .wsk source file.
    """
    from whiskers.lexer import tokenize

    tokens, diagnostics = tokenize(_read_source(file))

    table = Table(title=f"Tokens: {file}")
    table.add_column("Location", min_width=8)
    table.add_column("Type", style="bold")
    table.add_column("Value")
    for tok in tokens:
        table.add_row(f"{tok.line}:{tok.col}", tok.type.name, repr(tok.value))
    console.print(table)

    if diagnostics:
        _print_diagnostics(f"Lexical diagnostics: {file}", diagnostics)
        sys.exit(1)


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="AST output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def parse_command(file: str, output_format: str, output: str | None) -> None:
    """Parse a source file and dump the AST.

    FILE is the path to the .wsk source file.
    """
    from whiskers.ast import AstSerializer
    from whiskers.diagnostics import has_errors
    from whiskers.parser import parse_source

    program, diagnostics = parse_source(_read_source(file))
    if has_errors(diagnostics):
        _print_diagnostics(f"Parse errors: {file}", diagnostics)
        sys.exit(1)

    serializer = AstSerializer()

    if output_format.lower() == "json":
        text = serializer.to_json(program, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(program)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]AST written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
@click.option("--stage", is_flag=True, default=False, help="Validate the file as the Stage")
def validate_command(file: str, strict: bool, stage: bool) -> None:
    """Parse and validate a source file.

    FILE is the path to the .wsk source file.
    """
    from whiskers.diagnostics import has_errors
    from whiskers.parser import parse_source
    from whiskers.validator import scan_placeholders, validate

    source = _read_source(file)
    diagnostics = scan_placeholders(source)
    if not diagnostics:
        program, diagnostics = parse_source(source)
        if not has_errors(diagnostics):
            diagnostics = diagnostics + validate(
                program,
                source,
                sprite_name="Stage" if stage else Path(file).stem,
                is_stage=stage,
                strict=strict,
            )

    if not diagnostics:
        console.print(f"[green]OK[/green] {file}: no issues found")
        sys.exit(0)

    _print_diagnostics(f"Validation: {file}", diagnostics)
    if has_errors(diagnostics):
        sys.exit(1)


# ---------------------------------------------------------------------------
# compile command
# ---------------------------------------------------------------------------


@cli.command(name="compile")
@click.argument("file", type=click.Path(exists=False))
@click.option("--output", "-o", default=".", help="Output directory (default: current)")
@click.option("--js-only", is_flag=True, default=False, help="Write only the JavaScript file")
@click.option("--config", "config", default=None, help="YAML file with compile options")
@click.option("--sprite-name", default=None, help="Name of the compiled sprite")
@click.option("--title", default=None, help="Title of the generated page")
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def compile_command(
    file: str,
    output: str,
    js_only: bool,
    config: str | None,
    sprite_name: str | None,
    title: str | None,
    strict: bool,
) -> None:
    """Compile a source file to a runnable page.

    FILE is the path to the .wsk source file.  Writes ``<name>.js`` and
    ``<name>.html`` into the output directory.
    """
    from whiskers.facade import compile as whiskers_compile

    source = _read_source(file)
    options = _load_options_or_exit(config, sprite_name=sprite_name, title=title, strict=strict or None)
    result = whiskers_compile(source, options=options)

    if result.diagnostics:
        _print_diagnostics(f"Compile: {file}", result.diagnostics)
    if not result.success:
        sys.exit(1)

    _write_outputs(result, Path(output), Path(file).stem, js_only)


# ---------------------------------------------------------------------------
# build command
# ---------------------------------------------------------------------------


def _load_manifest_or_exit(path: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(_read_source(path))
    except yaml.YAMLError as exc:
        err_console.print(f"[red]Error:[/red] Invalid YAML in {path}: {exc}")
        sys.exit(1)
    if not isinstance(data, dict) or not isinstance(data.get("sprites"), list) or not data["sprites"]:
        err_console.print(f"[red]Error:[/red] {path} must define a non-empty 'sprites' list")
        sys.exit(1)
    return data


@cli.command(name="build")
@click.argument("project", type=click.Path(exists=False))
@click.option("--output", "-o", default=".", help="Output directory (default: current)")
@click.option("--js-only", is_flag=True, default=False, help="Write only the JavaScript file")
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def build_command(project: str, output: str, js_only: bool, strict: bool) -> None:
    """Compile a multi-sprite project.

    PROJECT is a YAML manifest::

        title: Chase
        sprites:
          - name: Stage
            file: stage.wsk
            stage: true
            costumes: [backdrop1, night]
          - name: Cat
            file: cat.wsk
            sounds: [meow]
    """
    from whiskers.facade import SpriteSource, compile_multi_sprite

    manifest = _load_manifest_or_exit(project)
    base = Path(project).parent
    sprites: list[SpriteSource] = []
    for index, entry in enumerate(manifest["sprites"], start=1):
        if not isinstance(entry, dict) or "name" not in entry or "file" not in entry:
            err_console.print(
                f"[red]Error:[/red] sprite #{index} in {project} needs 'name' and 'file'"
            )
            sys.exit(1)
        sprites.append(
            SpriteSource(
                name=str(entry["name"]),
                code=_read_source(str(base / entry["file"])),
                is_stage=bool(entry.get("stage", False)),
                costume_names=tuple(str(c) for c in entry.get("costumes") or ()),
                sound_names=tuple(str(s) for s in entry.get("sounds") or ()),
            )
        )

    options = _load_options_or_exit(None, title=manifest.get("title"), strict=strict or None)
    result = compile_multi_sprite(sprites, options=options)

    if result.diagnostics:
        _print_diagnostics(f"Build: {project}", result.diagnostics)
    if not result.success:
        sys.exit(1)

    _write_outputs(result, Path(output), Path(project).stem, js_only)
    console.print(f"\n[bold]Built[/bold] {len(sprites)} sprite(s)")


if __name__ == "__main__":
    cli()
