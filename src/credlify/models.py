"""
credlify.models - Pydantic Models for Scaffolding Configuration
===============================================================

This module defines the data models passed through the scaffolding
pipeline. Pydantic gives us validation of user input with clear error
messages and a single place where path values get normalized.

Architecture Notes
------------------
The models are organized as follows:

    RunOptions (how the tool runs: target root, step toggles, indentation)
    UserInput (answers to the prompts, sanitized path fields)
    ProjectConfig (paths read back from the rendered config template)
    ├── PathSet
    │   ├── SRC: PathGroup (ROOT, JS, SASS)
    │   └── DEST: PathGroup (ROOT, JS, SASS)
    TemplateFile (one template, its marker kind and its raw text)

Usage Example
-------------
>>> from credlify.models import UserInput
>>> user_input = UserInput(src=" /src/ ", server_task="no")
>>> user_input.src
'src'
>>> user_input.to_values()["serverTask"]
''
"""

from __future__ import annotations

import re
import sys
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from credlify.substitution import substitute


# =============================================================================
# Constants
# =============================================================================

# Characters that may not appear in a user supplied path
INVALID_PATH_CHARS = '\\:*?"<>|\n'

INVALID_PATH_MESSAGE = (
    "Path may not contain any of the following characters: "
    '\\:*?"<>| or newlines'
)

YES_NO_MESSAGE = "Choose 'yes' or 'no'"

_YES_NO_PATTERN = re.compile(r"^(y|n|yes|no)$", re.IGNORECASE)

_EDGE_PATTERN = re.compile(r"^[/\s]+|[/\s]+$")

# Marker character that encodes the copy behaviour in template file names
TEMPLATE_MARKER = "_"

# Live reload gulp task appended to the gulpfile when requested.
# %%[dest]%% is resolved before the task is inserted.
SERVER_TASK = """
/* Live reload server.
*/
gulp.task("server", (done) => {
    liveServer.start({
        port: 8080,
        host: "localhost",
        root: "%%[dest]%%",
        open: false,
        file: "index.html",
        wait: 250
    });

    done();
});
"""

SERVER_IMPORT = '\nimport liveServer from "live-server";'

SERVER_TASK_NAME = '"server", '


# =============================================================================
# Path Helpers
# =============================================================================


def sanitize_rel_path(path: Any) -> str:
    """
    Sanitize a relative path string.

    Leading and trailing slashes and whitespace are removed. Anything
    that is not a string sanitizes to an empty string.

    Examples
    --------
    >>> sanitize_rel_path("  /assets/js/ ")
    'assets/js'
    """
    if not isinstance(path, str):
        return ""
    return _EDGE_PATTERN.sub("", path)


def validate_path(path: str) -> bool:
    """Return True if ``path`` is non-empty and free of blacklisted characters."""
    return bool(path) and not any(char in path for char in INVALID_PATH_CHARS)


def is_yes_no(value: str) -> bool:
    """Return True for y, n, yes or no (any case)."""
    return bool(_YES_NO_PATTERN.match(value.strip()))


def default_package_manager() -> str:
    """npm executable name for the current platform."""
    return "npm.cmd" if sys.platform == "win32" else "npm"


# =============================================================================
# Enumerations
# =============================================================================


class TemplateKind(str, Enum):
    """
    How a template file is materialized in the project.

    Attributes
    ----------
    DIRECT : str
        No marker prefix. Written at the same relative path in the
        project root.

    ROOT_RELATIVE : str
        One leading marker (``_.gitignore``). The marker is stripped and
        the file is written at the remaining relative path.

    CAPTURED : str
        Two leading markers (``__index.html``). Never written directly;
        the rendered text is kept for the directory structure step.
    """

    DIRECT = "direct"
    ROOT_RELATIVE = "root_relative"
    CAPTURED = "captured"

    @classmethod
    def from_name(cls, name: str) -> TemplateKind:
        """Decide the kind from a template's file name."""
        if name.startswith(TEMPLATE_MARKER * 2):
            return cls.CAPTURED
        if name.startswith(TEMPLATE_MARKER):
            return cls.ROOT_RELATIVE
        return cls.DIRECT


# =============================================================================
# Template Model
# =============================================================================


class TemplateFile(BaseModel):
    """
    A single template loaded from the template store.

    Attributes
    ----------
    relative_path : str
        Path beneath the template root, using ``/`` separators. This is
        the template's identity.

    raw_content : str
        Unrendered template text.

    kind : TemplateKind
        Copy behaviour, derived from the file name when omitted.
    """

    model_config = ConfigDict(frozen=True)

    relative_path: str
    raw_content: str
    kind: TemplateKind

    @model_validator(mode="before")
    @classmethod
    def derive_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("kind") is None and "relative_path" in data:
            data = {**data, "kind": TemplateKind.from_name(Path(data["relative_path"]).name)}
        return data

    @property
    def target_name(self) -> str:
        """
        Relative path with the marker prefix removed from the file name.

        For captured templates this is the name they are captured under.
        """
        path = Path(self.relative_path)
        name = path.name
        if self.kind == TemplateKind.CAPTURED:
            name = name.removeprefix(TEMPLATE_MARKER * 2)
        elif self.kind == TemplateKind.ROOT_RELATIVE:
            name = name.removeprefix(TEMPLATE_MARKER)
        return (path.parent / name).as_posix()


# =============================================================================
# Run Options
# =============================================================================


class RunOptions(BaseModel):
    """
    How a scaffolding run behaves.

    Built once by the CLI and passed down the pipeline explicitly.

    Attributes
    ----------
    root : Path
        Target project root. Defaults to the current directory.

    create_dirs : bool
        Create the source/destination directory structure.

    copy_files : bool
        Copy the template files into the project.

    install_deps : bool
        Install the build dependencies with the package manager.

    patch_manifest : bool
        Add the module type and import alias map to package.json.

    indent : int | str | None
        Indentation used when rewriting package.json: a number of
        spaces, ``"\\t"``, or None to keep the file's current style.

    package_manager : str
        Executable used for dependency installation.

    template_root : Path | None
        Custom template directory replacing the bundled templates.
    """

    root: Path = Field(default_factory=Path.cwd)
    create_dirs: bool = True
    copy_files: bool = True
    install_deps: bool = True
    patch_manifest: bool = True
    indent: int | str | None = None
    package_manager: str = Field(default_factory=default_package_manager)
    template_root: Path | None = None

    @field_validator("indent", mode="before")
    @classmethod
    def validate_indent(cls, v: Any) -> int | str | None:
        """Accept a non-negative number of spaces, 'tab' or a tab character."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            if v.lower() in {"tab", "\t"}:
                return "\t"
            if not v.isdigit():
                msg = f"Invalid indent '{v}'. Use a number of spaces or 'tab'."
                raise ValueError(msg)
            v = int(v)
        if v < 0:
            msg = "Indent must not be negative."
            raise ValueError(msg)
        return v


# =============================================================================
# User Input
# =============================================================================


class UserInput(BaseModel):
    """
    Values collected from the user, plus fields derived from the manifest.

    Path fields are sanitized before validation, so ``" /src/ "`` becomes
    ``"src"``. The live reload answer is normalized to ``"yes"`` or
    ``"no"``.

    Examples
    --------
    >>> UserInput(dest_js="/assets/js/").dest_js
    'assets/js'
    """

    src: str = Field(default="src", description="Source directory (relative to project root)")
    dest: str = Field(default="dist", description="Destination directory (relative to project root)")
    src_js: str = Field(default="js", description="JavaScript source directory (relative to source)")
    dest_js: str = Field(
        default="assets/js",
        description="JavaScript bundle destination directory (relative to destination)",
    )
    src_sass: str = Field(default="sass", description="SASS source directory (relative to source)")
    dest_sass: str = Field(
        default="assets/css",
        description="Stylesheet bundle destination directory (relative to destination)",
    )
    server_task: str = Field(
        default="yes",
        description="Add optional live server gulp task ('yes' or 'no')",
    )

    # Derived from package.json and the license lookup
    app_name: str = ""
    description: str = ""
    license: str = ""
    license_text: str = ""

    @field_validator("src", "dest", "src_js", "dest_js", "src_sass", "dest_sass", mode="before")
    @classmethod
    def sanitize_path_field(cls, v: Any) -> str:
        v = sanitize_rel_path(v)
        if not validate_path(v):
            raise ValueError(INVALID_PATH_MESSAGE)
        return v

    @field_validator("server_task", mode="before")
    @classmethod
    def normalize_server_task(cls, v: Any) -> str:
        if isinstance(v, bool):
            return "yes" if v else "no"
        if not isinstance(v, str) or not is_yes_no(v):
            raise ValueError(YES_NO_MESSAGE)
        return "yes" if v.strip().lower().startswith("y") else "no"

    @property
    def wants_server(self) -> bool:
        return self.server_task == "yes"

    def to_values(self) -> dict[str, str]:
        """
        Build the placeholder mapping used to render templates.

        Keys follow the template-facing names (``srcJs``, ``appName``...).
        The live reload task body has its own placeholders resolved here,
        because substitution never re-expands inserted values.

        Returns
        -------
        dict[str, str]
            Placeholder name to replacement text.
        """
        values = {
            "src": self.src,
            "dest": self.dest,
            "srcJs": self.src_js,
            "destJs": self.dest_js,
            "srcSass": self.src_sass,
            "destSass": self.dest_sass,
            "appName": self.app_name,
            "description": self.description,
            "license": self.license,
            "licenseText": self.license_text,
        }

        if self.wants_server:
            values["serverImport"] = SERVER_IMPORT
            values["serverTask"] = substitute(SERVER_TASK, values)
            values["serverTaskName"] = SERVER_TASK_NAME
        else:
            values["serverImport"] = ""
            values["serverTask"] = ""
            values["serverTaskName"] = ""

        return values


# =============================================================================
# Project Config (read back from the config template)
# =============================================================================


class PathGroup(BaseModel):
    """
    One group of build paths (source or destination).

    ``ROOT`` loses trailing slashes, and ``JS``/``SASS`` are made relative
    to the project root by prefixing them with ``ROOT``, the same way the
    generated config.js resolves them at build time.
    """

    ROOT: str = ""
    JS: str = ""
    SASS: str = ""

    @model_validator(mode="after")
    def join_to_root(self) -> PathGroup:
        root = self.ROOT.rstrip("/")
        self.ROOT = root
        self.JS = f"{root}/{self.JS.lstrip('/')}"
        self.SASS = f"{root}/{self.SASS.lstrip('/')}"
        return self


class PathSet(BaseModel):
    SRC: PathGroup
    DEST: PathGroup


class ProjectConfig(BaseModel):
    """
    Structured path configuration of the generated project.

    Mirrors the ``CONFIG`` object of the config.js template, so the
    directory structure step creates exactly the paths the build uses.

    Examples
    --------
    >>> config = ProjectConfig.model_validate(
    ...     {"PATH": {"SRC": {"ROOT": "src/", "JS": "js", "SASS": "sass"},
    ...               "DEST": {"ROOT": "dist", "JS": "assets/js", "SASS": "assets/css"}}}
    ... )
    >>> config.PATH.SRC.ROOT, config.PATH.SRC.JS
    ('src', 'src/js')
    """

    PATH: PathSet
