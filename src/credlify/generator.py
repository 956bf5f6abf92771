"""
credlify.generator - Scaffolding Pipeline
=========================================

This module runs the whole scaffolding of a build pipeline into an npm
package, in a fixed order. A step that fails stops the run; nothing after
it executes.

Architecture
------------
The pipeline follows these steps:

    1. Read package.json (name, description, license)
    2. Look up the license text (failure only warns)
    3. Check every template destination for collisions
    4. Render config.js and read the project paths from it
    5. Create the source/destination directory structure
    6. Render and copy the templates
    7. Write entry points and captured files into the new directories
    8. Patch package.json (module type, import alias)
    9. Install dependencies with npm

Steps 5-9 can each be switched off through ``RunOptions``.

Usage Example
-------------
>>> from credlify.generator import run_project
>>> from credlify.models import RunOptions, UserInput
>>> result = run_project(RunOptions(install_deps=False), UserInput())  # doctest: +SKIP
>>> result.success  # doctest: +SKIP
True

See Also
--------
- materializer.py: File and directory creation
- models.py: RunOptions, UserInput, ProjectConfig
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from credlify.config_loader import CONFIG_TEMPLATE, ConfigEvaluationError, load_project_config
from credlify.installer import InstallResult, install_all
from credlify.licenses import LICENSE_LIST_URL, fetch_license_text
from credlify.manifest import find_manifest, manifest_issues, manifest_values, patch_manifest, read_manifest
from credlify.materializer import (
    check_collisions,
    copy_templates,
    create_structure,
    populate_structure,
    render_template,
)
from credlify.models import ProjectConfig, RunOptions, UserInput
from credlify.store import TemplateError, TemplateStore


console = Console()


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class GenerationResult:
    """
    Result of a scaffolding run.

    Attributes
    ----------
    success : bool
        Whether every enabled step completed. File level skips and a
        failed npm install do not make a run unsuccessful.

    project_path : Path
        Root of the target project.

    config : ProjectConfig | None
        Paths read from the rendered config template.

    files_created : list[Path]
        Files written into the project.

    dirs_created : list[Path]
        Directories created for the structure.

    skipped : list[str]
        Messages for templates that were not written.

    unresolved : dict[str, list[str]]
        Placeholders left in written files.

    manifest_changes : list[str]
        Changes applied to package.json.

    install : InstallResult | None
        Exit codes of the install runs, if installation ran.

    warnings : list[str]
        Non-fatal problems.

    errors : list[str]
        The error that stopped the run, if any.
    """

    success: bool
    project_path: Path
    config: ProjectConfig | None = None
    files_created: list[Path] = field(default_factory=list)
    dirs_created: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unresolved: dict[str, list[str]] = field(default_factory=dict)
    manifest_changes: list[str] = field(default_factory=list)
    install: InstallResult | None = None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Pipeline Steps
# =============================================================================


async def resolve_license(user_input: UserInput, result: GenerationResult) -> UserInput:
    """Fill in ``license_text``, warning when no text could be found."""
    if not user_input.license:
        return user_input

    text = await fetch_license_text(user_input.license)
    if not text:
        msg = (
            f"No valid OSI license ID found in package.json ('{user_input.license}'); "
            f"an empty license file was generated. See {LICENSE_LIST_URL}"
        )
        result.warnings.append(msg)
        console.print(f"[yellow]Warning:[/] {msg}")

    return user_input.model_copy(update={"license_text": text})


async def resolve_project_config(
    root: Path,
    store: TemplateStore,
    values: dict[str, str],
) -> ProjectConfig | None:
    """Render the config template and read the project paths from it."""
    if CONFIG_TEMPLATE not in store.list_templates():
        console.print(f"[yellow]Warning:[/] No {CONFIG_TEMPLATE} template, project paths unknown")
        return None

    try:
        rendered = await asyncio.to_thread(render_template, store, CONFIG_TEMPLATE, values)
    except TemplateError as e:
        console.print(f"[yellow]Warning:[/] Config data could not be loaded: {e}")
        return None

    return await asyncio.to_thread(load_project_config, root, rendered.content)


# =============================================================================
# Main Generation Function
# =============================================================================


async def create_project(
    options: RunOptions,
    user_input: UserInput,
    *,
    manifest_path: Path | None = None,
    verbose: bool = True,
) -> GenerationResult:
    """
    Scaffold the build pipeline into the project at ``options.root``.

    Parameters
    ----------
    options : RunOptions
        Target root and step toggles.

    user_input : UserInput
        Answers from the prompts. Manifest derived fields are filled in
        here.

    manifest_path : Path | None
        package.json to use. Found from ``options.root`` when omitted.

    verbose : bool, default=True
        Show the header and summary panels.

    Returns
    -------
    GenerationResult
        Details of what was created.

    Raises
    ------
    ManifestMissingError, ManifestInvalidError
        If package.json cannot be found or read. Nothing is written.
    CollisionError
        If template destinations exist. Nothing is written.
    ConfigEvaluationError
        If the directory structure is requested but the project paths
        could not be read from the config template.
    ExistingDirectoryError, StructureError
        If the directory structure could not be created.
    """
    root = options.root.resolve()
    result = GenerationResult(success=False, project_path=root)

    try:
        if manifest_path is None:
            manifest_path = find_manifest(root)
        manifest = read_manifest(manifest_path)

        user_input = user_input.model_copy(update=manifest_values(manifest))

        if verbose:
            console.print()
            console.print(
                Panel(
                    f"[bold blue]Scaffolding build pipeline:[/] [green]{user_input.app_name or root.name}[/]\n"
                    f"[dim]Source: {user_input.src} | Destination: {user_input.dest} | "
                    f"Live server: {user_input.server_task}[/]",
                    title="[bold]credlify[/]",
                    border_style="blue",
                )
            )
            console.print()

        if options.copy_files:
            user_input = await resolve_license(user_input, result)

        values = user_input.to_values()
        store = TemplateStore(options.template_root)

        # Step 1: Make sure no existing files will be overwritten
        if options.copy_files:
            await check_collisions(root, store)

        # Step 2: Project paths from the config template
        result.config = await resolve_project_config(root, store, values)

        # Step 3: Directory structure
        if options.create_dirs:
            if result.config is None:
                raise ConfigEvaluationError(
                    "Project paths could not be read from the config template, "
                    "cannot create the directory structure"
                )
            result.dirs_created = await create_structure(root, result.config)
        else:
            console.print("[dim]Skipped project structure generation[/]")

        # Step 4: Template files
        captured: dict[str, str] = {}
        if options.copy_files:
            copied = await copy_templates(root, store, values)
            result.files_created.extend(copied.files_created)
            result.skipped.extend(copied.errors)
            result.unresolved.update(copied.unresolved)
            captured = copied.captured

            for name, placeholders in copied.unresolved.items():
                console.print(
                    f"  [dim]{name} keeps unresolved placeholders: {', '.join(placeholders)}[/]"
                )
        else:
            console.print("[dim]Skipped template file creation[/]")

        # Step 5: Files inside the new directories
        if options.create_dirs and result.config is not None:
            result.files_created.extend(
                await populate_structure(root, result.config, captured)
            )

        # Step 6: package.json
        if options.patch_manifest:
            result.manifest_changes = patch_manifest(manifest_path, options.indent)
            for change in result.manifest_changes:
                console.print(f"  [dim]{manifest_path.name}: {change}[/]")
        else:
            for issue in manifest_issues(manifest):
                msg = f"{manifest_path.name}: {issue}, the build files may not load"
                result.warnings.append(msg)
                console.print(f"[yellow]Warning:[/] {msg}")

        # Step 7: Dependencies
        if options.install_deps:
            result.install = await install_all(package_manager=options.package_manager)
            if not result.install.success:
                msg = "Dependency installation exited with a non-zero status"
                result.warnings.append(msg)
                console.print(f"[yellow]Warning:[/] {msg}")
        else:
            console.print("[dim]Skipped dependency installation[/]")

        result.success = True

        if verbose:
            console.print()
            console.print(
                Panel(
                    f"[bold green]Build pipeline created![/]\n\n"
                    f"[dim]Location:[/] {root}\n"
                    f"[dim]Files:[/] {len(result.files_created)} created, "
                    f"{len(result.skipped)} skipped\n\n"
                    f"[bold]Next steps:[/]\n"
                    f"  npx gulp",
                    title="[bold green]Success[/]",
                    border_style="green",
                )
            )

    except Exception as e:
        result.errors.append(str(e))
        if verbose:
            console.print(f"\n[bold red]Error:[/] {e}")
        raise

    return result


def run_project(
    options: RunOptions,
    user_input: UserInput,
    *,
    manifest_path: Path | None = None,
    verbose: bool = True,
) -> GenerationResult:
    """Synchronous wrapper around :func:`create_project`."""
    return asyncio.run(
        create_project(options, user_input, manifest_path=manifest_path, verbose=verbose)
    )
