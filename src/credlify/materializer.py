"""
credlify.materializer - Writing Templates and Directories into a Project
========================================================================

This module turns templates, user values and the project config into
files on disk. It never overwrites anything: every file is created with
an exclusive-create write, and whole steps refuse to start when their
targets already exist.

Steps
-----
1. ``check_collisions``   - every template destination is checked before
                            any write; all collisions are reported at once.
2. ``create_structure``   - source/destination roots, then the JS and
                            stylesheet subdirectories.
3. ``copy_templates``     - render and write each template; captured
                            templates are kept in memory.
4. ``populate_structure`` - entry points, ``.gitkeep`` and ``index.html``
                            inside the new directories.

File level failures (unreadable template, existing file) are reported and
skipped. Step level failures raise and stop the pipeline.

Blocking file system calls run in worker threads via ``asyncio.to_thread``
so that independent operations can be issued together with
``asyncio.gather`` and their outcomes collected.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from credlify.models import ProjectConfig, TemplateFile, TemplateKind
from credlify.store import TemplateError, TemplateStore
from credlify.substitution import find_placeholders, substitute


console = Console()

DIR_MODE = 0o755


# =============================================================================
# Errors
# =============================================================================


class CollisionError(FileExistsError):
    """One or more template destinations already exist."""

    def __init__(self, paths: list[str]) -> None:
        self.paths = paths
        super().__init__(
            "\n".join([
                "The following files already exist:\n",
                *paths,
                "\nExiting to avoid breaking anything",
            ])
        )


class ExistingDirectoryError(FileExistsError):
    """The source or destination root directory already exists."""

    def __init__(self, path: Path, label: str) -> None:
        self.path = path
        self.label = label
        super().__init__(
            f"{label} directory '{path}' already exists, exiting to avoid breaking anything"
        )


class StructureError(OSError):
    """Some directory structure operations failed. All failures are kept."""

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = errors
        super().__init__(
            "Project structure generation failed:\n"
            + "\n".join(f"  {e}" for e in errors)
        )


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class RenderedTemplate:
    """A template with its placeholders substituted."""

    template: TemplateFile
    content: str

    @property
    def target_name(self) -> str:
        return self.template.target_name


@dataclass
class CopyResult:
    """
    Outcome of the template copy pass.

    Attributes
    ----------
    files_created : list[Path]
        Files written into the project.

    captured : dict[str, str]
        Rendered captured templates keyed by their unprefixed name.

    errors : list[str]
        Messages for templates that were skipped.

    unresolved : dict[str, list[str]]
        Placeholders left in written files, keyed by file name.
    """

    files_created: list[Path] = field(default_factory=list)
    captured: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    unresolved: dict[str, list[str]] = field(default_factory=dict)


# =============================================================================
# Helpers
# =============================================================================


async def gather_outcomes(*operations: Awaitable[object]) -> list[BaseException]:
    """
    Run independent operations together and return every failure.

    No operation is cancelled because another one failed.
    """
    results = await asyncio.gather(*operations, return_exceptions=True)
    return [r for r in results if isinstance(r, BaseException)]


def write_exclusive(path: Path, content: str) -> None:
    """Create ``path`` with ``content``; fails with FileExistsError if it exists."""
    with path.open("x", encoding="utf-8") as f:
        f.write(content)


def make_dirs(path: Path) -> None:
    path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)


def destination_of(root: Path, template: TemplateFile) -> Path | None:
    """Where a template is written in the project, or None for captured ones."""
    if template.kind == TemplateKind.CAPTURED:
        return None
    return root / template.target_name


def render_template(store: TemplateStore, name: str, values: Mapping[str, object]) -> RenderedTemplate:
    """Load a template and substitute its placeholders."""
    template = store.load_template(name)
    return RenderedTemplate(template=template, content=substitute(template.raw_content, values))


# =============================================================================
# Pre-flight Collision Scan
# =============================================================================


async def find_collisions(root: Path, store: TemplateStore) -> list[str]:
    """
    Check every template destination for an existing file.

    All paths are checked before returning, so the full list of
    collisions is reported in one go.

    Returns
    -------
    list[str]
        Colliding paths relative to ``root``, in template order.
    """
    candidates: list[str] = []
    for name in store.list_templates():
        kind = TemplateKind.from_name(Path(name).name)
        if kind == TemplateKind.CAPTURED:
            continue
        candidates.append(TemplateFile(relative_path=name, raw_content="").target_name)

    exists = await asyncio.gather(
        *(asyncio.to_thread(os.path.lexists, root / c) for c in candidates)
    )
    return [c for c, found in zip(candidates, exists, strict=True) if found]


async def check_collisions(root: Path, store: TemplateStore) -> None:
    """
    Raise if any template destination already exists.

    Raises
    ------
    CollisionError
        Listing every colliding path.
    """
    collisions = await find_collisions(root, store)
    if collisions:
        raise CollisionError(collisions)


# =============================================================================
# Directory Structure
# =============================================================================


async def create_structure(root: Path, config: ProjectConfig) -> list[Path]:
    """
    Create the source and destination directory structure.

    Parameters
    ----------
    root : Path
        Target project root.

    config : ProjectConfig
        Paths read from the rendered config template.

    Returns
    -------
    list[Path]
        Directories that were requested, roots first.

    Raises
    ------
    ExistingDirectoryError
        If the source or destination root exists. Nothing is created.
    StructureError
        If any directory could not be created. Every failure is included.
    """
    src = config.PATH.SRC
    dest = config.PATH.DEST
    src_dir = root / src.ROOT
    dest_dir = root / dest.ROOT

    if await asyncio.to_thread(src_dir.exists):
        raise ExistingDirectoryError(src_dir, "Source")
    if await asyncio.to_thread(dest_dir.exists):
        raise ExistingDirectoryError(dest_dir, "Destination")

    console.print("[bold]Creating source/destination directories...[/]")

    errors = await gather_outcomes(
        asyncio.to_thread(make_dirs, src_dir),
        asyncio.to_thread(make_dirs, dest_dir),
    )

    subdirs = [
        root / src.JS / "node_modules" / "app",
        root / src.SASS,
        root / dest.JS,
        root / dest.SASS,
    ]
    errors += await gather_outcomes(*(asyncio.to_thread(make_dirs, d) for d in subdirs))

    if errors:
        raise StructureError(errors)

    created = [src_dir, dest_dir, *subdirs]
    for d in created:
        console.print(f"  [dim]Created {d.relative_to(root).as_posix()}/[/]")
    return created


async def populate_structure(
    root: Path,
    config: ProjectConfig,
    captured: Mapping[str, str],
) -> list[Path]:
    """
    Write the entry points and captured files into the new directories.

    The ``index.html`` is only written when it was captured from the
    template set. Files are created exclusively.

    Returns
    -------
    list[Path]
        Files that were written.

    Raises
    ------
    StructureError
        If any file could not be written. Every failure is included.
    """
    src_js = root / config.PATH.SRC.JS
    files: dict[Path, str] = {
        src_js / "index.js": "",
        root / config.PATH.SRC.SASS / "index.scss": "",
        src_js / "node_modules" / "app" / ".gitkeep": captured.get(".gitkeep", ""),
    }
    if "index.html" in captured:
        files[root / config.PATH.DEST.ROOT / "index.html"] = captured["index.html"]

    paths = list(files)
    errors = await gather_outcomes(
        *(asyncio.to_thread(write_exclusive, p, files[p]) for p in paths)
    )
    if errors:
        raise StructureError(errors)

    for p in paths:
        console.print(f"  [dim]Created {p.relative_to(root).as_posix()}[/]")
    return paths


# =============================================================================
# Template Copy
# =============================================================================


async def copy_templates(
    root: Path,
    store: TemplateStore,
    values: Mapping[str, object],
) -> CopyResult:
    """
    Render every template and write it into the project.

    Templates are processed in store order. Captured templates are
    stored in the result instead of being written. A template that
    cannot be read, or whose destination cannot be created, is reported
    and skipped; the rest of the batch continues.

    Parameters
    ----------
    root : Path
        Target project root.

    store : TemplateStore
        Source of the templates.

    values : Mapping[str, object]
        Placeholder values.

    Returns
    -------
    CopyResult
        Written files, captured templates and skip messages.
    """
    console.print("[bold]Creating build pipeline files...[/]")
    result = CopyResult()

    for name in store.list_templates():
        try:
            rendered = await asyncio.to_thread(render_template, store, name, values)
        except TemplateError:
            msg = f"Template file '{name}' could not be copied"
            console.print(f"  [red]{msg}[/]")
            result.errors.append(msg)
            continue

        dest_file = destination_of(root, rendered.template)
        if dest_file is None:
            result.captured[rendered.target_name] = rendered.content
            continue

        try:
            await asyncio.to_thread(make_dirs, dest_file.parent)
            await asyncio.to_thread(write_exclusive, dest_file, rendered.content)
        except FileExistsError:
            msg = f"File at '{dest_file}' already exists"
            console.print(f"  [red]{msg}[/]")
            result.errors.append(msg)
            continue
        except OSError:
            msg = f"Could not create file at '{dest_file}'"
            console.print(f"  [red]{msg}[/]")
            result.errors.append(msg)
            continue

        result.files_created.append(dest_file)
        leftover = find_placeholders(rendered.content)
        if leftover:
            result.unresolved[rendered.target_name] = leftover
        console.print(f"  [dim]Created {rendered.target_name}[/]")

    return result
