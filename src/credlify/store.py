"""
credlify.store - Template Store
===============================

Enumerates and loads the template files copied into a project.

Templates are plain files under a template root. The bundled set lives in
``credlify/templates`` and is loaded with Jinja2's ``PackageLoader``; a
custom directory can be used instead through ``FileSystemLoader``. We only
use the loader API (listing and reading source), never Jinja2 rendering,
because templates use ``%%[name]%%`` placeholders.

File naming convention
----------------------
- ``config.js``    - copied as ``config.js``
- ``_.gitignore``  - marker stripped, copied as ``.gitignore``
- ``__index.html`` - captured as ``index.html`` for the directory step

>>> store = TemplateStore()
>>> "config.js" in store.list_templates()
True
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, TemplateNotFound

from credlify.models import TemplateFile


# Entries in the template root that are never templates
IGNORED_PARTS = {"__pycache__", ".DS_Store"}
IGNORED_SUFFIXES = {".pyc", ".pyo"}


class TemplateError(Exception):
    """Base class for template loading failures."""


class TemplateNotFoundError(TemplateError):
    """The requested template does not exist under the template root."""


class TemplateReadError(TemplateError):
    """The template exists but could not be read."""


def create_loader(template_root: Path | None = None) -> BaseLoader:
    """
    Create the Jinja2 loader for a template root.

    Parameters
    ----------
    template_root : Path | None
        Custom template directory. None selects the bundled templates.

    Raises
    ------
    NotADirectoryError
        If a custom root is given that is not a directory.
    """
    if template_root is None:
        return PackageLoader("credlify", "templates")

    if not template_root.is_dir():
        raise NotADirectoryError(f"Template directory '{template_root}' does not exist")

    return FileSystemLoader(str(template_root), encoding="utf-8")


class TemplateStore:
    """
    Lists and loads templates from one template root.

    The listing is computed once, so repeated calls within a run return
    the same order. Each template is read at most once.

    Parameters
    ----------
    template_root : Path | None
        Custom template directory. None selects the bundled templates.
    """

    def __init__(self, template_root: Path | None = None) -> None:
        self.loader = create_loader(template_root)
        self.env = Environment(loader=self.loader, keep_trailing_newline=True)
        self._names: list[str] | None = None
        self._cache: dict[str, TemplateFile] = {}

    def list_templates(self) -> list[str]:
        """Relative paths of all templates, sorted."""
        if self._names is None:
            self._names = [
                name for name in self.loader.list_templates()
                if not IGNORED_PARTS.intersection(name.split("/"))
                and Path(name).suffix not in IGNORED_SUFFIXES
            ]
        return list(self._names)

    def load_template(self, relative_path: str) -> TemplateFile:
        """
        Load a template's raw text.

        Raises
        ------
        TemplateNotFoundError
            If the template does not exist.
        TemplateReadError
            If the file could not be read or decoded.
        """
        cached = self._cache.get(relative_path)
        if cached is not None:
            return cached

        try:
            source, _, _ = self.loader.get_source(self.env, relative_path)
        except TemplateNotFound as e:
            raise TemplateNotFoundError(f"Template '{relative_path}' not found") from e
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadError(f"Template '{relative_path}' could not be read: {e}") from e

        template = TemplateFile(relative_path=relative_path, raw_content=source)
        self._cache[relative_path] = template
        return template
