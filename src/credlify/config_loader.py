"""
credlify.config_loader - Reading ProjectConfig from the Config Template
=======================================================================

The directory structure is driven by the same paths the generated build
reads from ``config.js``. Rather than executing JavaScript, the rendered
config template is read as data: the object literal assigned to
``CONFIG`` is kept JSON compatible and parsed with ``json``.

The rendered text still makes a round trip through a uniquely named file
in the target root (``config-<uuid>.js``), so the parsed data is exactly
what would be written to disk. That file is always removed afterwards.
"""

from __future__ import annotations

import json
import re
import uuid
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from credlify.models import ProjectConfig


console = Console()

# Name of the template whose rendered text defines the project paths
CONFIG_TEMPLATE = "config.js"

_CONFIG_ASSIGNMENT = re.compile(r"\bCONFIG\s*=\s*(?=\{)")


class ConfigEvaluationError(ValueError):
    """The rendered config template does not contain a usable CONFIG object."""


def parse_config_text(text: str) -> ProjectConfig:
    """
    Parse the ``CONFIG`` object literal of a rendered config template.

    Parameters
    ----------
    text : str
        Rendered config.js text.

    Returns
    -------
    ProjectConfig
        Paths with roots normalized and sub paths joined to their root.

    Raises
    ------
    ConfigEvaluationError
        If no ``CONFIG = {...}`` literal is present, it is not valid JSON,
        or it lacks the ``PATH.SRC``/``PATH.DEST`` groups.
    """
    match = _CONFIG_ASSIGNMENT.search(text)
    if match is None:
        raise ConfigEvaluationError("No CONFIG object found in config template")

    try:
        data, _ = json.JSONDecoder(strict=False).raw_decode(text, match.end())
    except json.JSONDecodeError as e:
        raise ConfigEvaluationError(f"CONFIG object is not valid data: {e}") from e

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigEvaluationError(f"CONFIG object is missing paths: {e}") from e


def temp_config_path(root: Path) -> Path:
    """Collision free temporary file name for the rendered config."""
    return root / f"config-{uuid.uuid4()}.js"


def load_project_config(root: Path, text: str) -> ProjectConfig | None:
    """
    Write the rendered config to a temporary file, read it back and parse it.

    The temporary file is created exclusively and deleted whether or not
    parsing succeeded. A file that cannot be deleted is reported and left
    in place.

    Parameters
    ----------
    root : Path
        Target project root, where the temporary file is created.

    text : str
        Rendered config template text.

    Returns
    -------
    ProjectConfig | None
        The parsed config, or None if the temporary file could not be
        created or its content could not be parsed (a warning is printed).
    """
    temp_path = temp_config_path(root)
    config: ProjectConfig | None = None
    created = False

    try:
        with temp_path.open("x", encoding="utf-8") as f:
            created = True
            f.write(text)
        config = parse_config_text(temp_path.read_text(encoding="utf-8"))

    except FileExistsError:
        console.print(
            f"[yellow]Warning:[/] File at '{temp_path}' already exists (the chances "
            "of this are monumentally small, try running the script again)"
        )
    except ConfigEvaluationError as e:
        console.print(f"[yellow]Warning:[/] Config data could not be loaded: {e}")
    except OSError:
        console.print(
            f"[yellow]Warning:[/] Could not create temporary config file at '{temp_path}'"
        )

    finally:
        if created:
            try:
                temp_path.unlink()
            except OSError:
                console.print(
                    f"[yellow]Warning:[/] Temporary config file at '{temp_path}' could "
                    "not be deleted, and must be removed manually"
                )

    return config
