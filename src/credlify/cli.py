"""
credlify.cli - Command Line Interface
=====================================

Command-line entry point built with Typer. Run it inside an npm package
(or any directory below one) to scaffold the gulp/webpack/sass build.

Usage Examples
--------------
Interactive mode (prompts for every path):
    $ credlify

Accept all defaults:
    $ credlify --yes

Only copy the build files, no directories and no npm install:
    $ credlify --no-dirs --no-deps

Show help:
    $ credlify --help

See Also
--------
- generator.py: The scaffolding pipeline
- models.py: RunOptions and UserInput
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import questionary
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from credlify import __version__
from credlify.generator import run_project
from credlify.manifest import ManifestMissingError, find_manifest
from credlify.models import (
    INVALID_PATH_MESSAGE,
    YES_NO_MESSAGE,
    RunOptions,
    UserInput,
    is_yes_no,
    sanitize_rel_path,
    validate_path,
)


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="credlify",
    help="Scaffold a gulp + webpack + sass build pipeline into an npm package.",
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

# Prompted path fields, in prompt order
PATH_FIELDS = ["src", "dest", "src_js", "dest_js", "src_sass", "dest_sass"]


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]credlify[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Build pipeline scaffolding for npm packages[/]\n"
            f"[dim]Toolchain: gulp + webpack + babel + dart-sass[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def _validate_path_answer(value: str) -> bool | str:
    return validate_path(sanitize_rel_path(value)) or INVALID_PATH_MESSAGE


def _validate_yes_no_answer(value: str) -> bool | str:
    return is_yes_no(value) or YES_NO_MESSAGE


def prompt_path(field_name: str) -> str:
    """
    Prompt for one path field, using the model's description and default.

    Returns
    -------
    str
        The sanitized answer.
    """
    model_field = UserInput.model_fields[field_name]

    result = questionary.text(
        f"{model_field.description}:",
        default=model_field.default,
        validate=_validate_path_answer,
    ).ask()

    if result is None:
        raise typer.Abort()

    return sanitize_rel_path(result)


def prompt_server_task() -> str:
    """Prompt for the optional live server task."""
    model_field = UserInput.model_fields["server_task"]

    result = questionary.text(
        f"{model_field.description}:",
        default=model_field.default,
        validate=_validate_yes_no_answer,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


# =============================================================================
# Main Command
# =============================================================================

@app.command()
def main(
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Project root (default: current directory)",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    dirs: Annotated[
        bool,
        typer.Option("--dirs/--no-dirs", help="Create the source/destination directories"),
    ] = True,
    files: Annotated[
        bool,
        typer.Option("--files/--no-files", help="Copy the build template files"),
    ] = True,
    deps: Annotated[
        bool,
        typer.Option("--deps/--no-deps", help="Install dependencies with npm"),
    ] = True,
    manifest: Annotated[
        bool,
        typer.Option("--manifest/--no-manifest", help="Add module type and import alias to package.json"),
    ] = True,
    indent: Annotated[
        str | None,
        typer.Option("--indent", help="package.json indentation: number of spaces or 'tab' (default: detect)"),
    ] = None,
    templates: Annotated[
        Path | None,
        typer.Option(
            "--templates",
            help="Use templates from this directory instead of the bundled ones",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    src: Annotated[str | None, typer.Option("--src", help="Source directory")] = None,
    dest: Annotated[str | None, typer.Option("--dest", help="Destination directory")] = None,
    src_js: Annotated[str | None, typer.Option("--src-js", help="JavaScript source directory")] = None,
    dest_js: Annotated[str | None, typer.Option("--dest-js", help="JavaScript bundle directory")] = None,
    src_sass: Annotated[str | None, typer.Option("--src-sass", help="SASS source directory")] = None,
    dest_sass: Annotated[str | None, typer.Option("--dest-sass", help="Stylesheet bundle directory")] = None,
    server: Annotated[
        bool | None,
        typer.Option("--server/--no-server", help="Add the live server gulp task"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip all prompts, use defaults"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    Scaffold a build pipeline into the current npm package.

    Copies gulp, webpack and babel configuration, creates the source and
    destination directories, updates package.json and installs the build
    dependencies. Existing files are never overwritten.

    [bold]Examples:[/]

        credlify
        credlify --yes --no-server
        credlify --src app --dest public --no-deps
    """
    project_root = (root or Path.cwd()).resolve()

    try:
        manifest_path = find_manifest(project_root)
    except ManifestMissingError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    try:
        options = RunOptions(
            root=project_root,
            create_dirs=dirs,
            copy_files=files,
            install_deps=deps,
            patch_manifest=manifest,
            indent=indent,
            template_root=templates,
        )
    except ValidationError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    # Resolve answers: explicit option, then default (--yes), then prompt
    given = {
        "src": src,
        "dest": dest,
        "src_js": src_js,
        "dest_js": dest_js,
        "src_sass": src_sass,
        "dest_sass": dest_sass,
    }
    answers: dict[str, str] = {}
    for field_name in PATH_FIELDS:
        if given[field_name] is not None:
            answers[field_name] = given[field_name]
        elif not yes:
            answers[field_name] = prompt_path(field_name)

    if server is not None:
        answers["server_task"] = "yes" if server else "no"
    elif not yes:
        answers["server_task"] = prompt_server_task()

    try:
        user_input = UserInput(**answers)
    except ValidationError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if not yes:
        console.print()
        table = Table(title="Build Configuration", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        for field_name in PATH_FIELDS:
            table.add_row(UserInput.model_fields[field_name].description, getattr(user_input, field_name))
        table.add_row("Live server task", user_input.server_task)
        console.print(table)
        console.print()

    # Errors are printed by the pipeline itself
    try:
        run_project(options, user_input, manifest_path=manifest_path)
    except (OSError, ValueError):
        raise typer.Exit(1)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
