"""
credlify.manifest - package.json Discovery and Patching
=======================================================

The generated build files are ES modules that import each other through
the ``#root/*`` alias, so the project's package.json needs::

    "type": "module",
    "imports": { "#root/*": "./*.js" }

This module finds the nearest package.json, reads the metadata used in
templates (name, description, license) and adds the missing fields.
Existing key order is kept and the file's indentation is detected and
reused unless another indentation is requested.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any


MANIFEST_NAME = "package.json"

MODULE_TYPE = "module"
IMPORT_ALIAS = "#root/*"
IMPORT_TARGET = "./*.js"

DEFAULT_INDENT = 2

_INDENT_PATTERN = re.compile(r"^([ \t]+)\S", re.MULTILINE)


class ManifestMissingError(FileNotFoundError):
    """No package.json in the directory or any of its ancestors."""


class ManifestInvalidError(ValueError):
    """package.json exists but is not a JSON object."""


def find_manifest(start: Path) -> Path:
    """
    Find the nearest package.json.

    The start directory is checked first, then each parent up to the
    file system root.

    Raises
    ------
    ManifestMissingError
        If no package.json is found.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate

    raise ManifestMissingError("No package.json file found, run 'npm init' first")


def read_manifest(path: Path) -> dict[str, Any]:
    """
    Parse a package.json file.

    Raises
    ------
    ManifestInvalidError
        If the file is not valid JSON or not an object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestInvalidError(f"Invalid {MANIFEST_NAME} at '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ManifestInvalidError(f"Invalid {MANIFEST_NAME} at '{path}': expected an object")
    return data


def detect_indent(text: str) -> int | str:
    """
    Indentation used by a JSON document.

    Returns the number of spaces of the first indented line, ``"\\t"`` for
    tab indentation, or 2 when nothing is indented.
    """
    match = _INDENT_PATTERN.search(text)
    if match is None:
        return DEFAULT_INDENT

    indent = match.group(1)
    if "\t" in indent:
        return "\t"
    return len(indent)


def manifest_issues(data: dict[str, Any]) -> list[str]:
    """Describe what the manifest is missing for the generated build files."""
    issues = []
    if data.get("type") != MODULE_TYPE:
        issues.append(f'"type" is not "{MODULE_TYPE}"')

    imports = data.get("imports")
    if not isinstance(imports, dict) or imports.get(IMPORT_ALIAS) != IMPORT_TARGET:
        issues.append(f'"imports" does not map "{IMPORT_ALIAS}" to "{IMPORT_TARGET}"')
    return issues


def patch_manifest(path: Path, indent: int | str | None = None) -> list[str]:
    """
    Add the module type and import alias to package.json.

    Parameters
    ----------
    path : Path
        package.json to patch.

    indent : int | str | None
        Indentation for the rewritten file. None keeps the current style.

    Returns
    -------
    list[str]
        Changes that were applied. Empty when the file already had both
        fields, in which case it is left untouched.
    """
    text = path.read_text(encoding="utf-8")
    data = read_manifest(path)
    changes: list[str] = []

    if data.get("type") != MODULE_TYPE:
        data["type"] = MODULE_TYPE
        changes.append(f'Set "type" to "{MODULE_TYPE}"')

    imports = data.get("imports")
    if not isinstance(imports, dict):
        imports = {}
    if imports.get(IMPORT_ALIAS) != IMPORT_TARGET:
        imports[IMPORT_ALIAS] = IMPORT_TARGET
        data["imports"] = imports
        changes.append(f'Mapped import "{IMPORT_ALIAS}" to "{IMPORT_TARGET}"')

    if not changes:
        return changes

    if indent is None:
        indent = detect_indent(text)

    path.write_text(
        json.dumps(data, indent=indent, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return changes


def manifest_values(data: dict[str, Any]) -> dict[str, str]:
    """Template values taken from the manifest."""
    license_ = data.get("license", "")
    return {
        "app_name": str(data.get("name") or ""),
        "description": str(data.get("description") or ""),
        "license": license_ if isinstance(license_, str) else "",
    }
