"""
credlify - Build Pipeline Scaffolding for npm Packages
======================================================

A CLI tool that adds a ready-to-run gulp + webpack + babel + dart-sass
build to an existing npm package.

Features
--------
- **Never Overwrites**: Every file is created exclusively; existing files
  and directories stop the run before anything is written
- **Configurable Paths**: Source and destination layout chosen at prompt
- **Live Server**: Optional live reload gulp task
- **Manifest Aware**: package.json gets the module type and import alias

Quick Start
-----------
```bash
cd my-npm-package
credlify
```

Example
-------
>>> from credlify import RunOptions, UserInput, run_project
>>> run_project(RunOptions(install_deps=False), UserInput(server_task="no"))  # doctest: +SKIP

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``generator``: The scaffolding pipeline
- ``materializer``: Collision checks, directories and file writes
- ``store``: Template enumeration and loading
- ``substitution``: ``%%[name]%%`` placeholder replacement
- ``config_loader``: Project paths read from the rendered config.js
- ``manifest``: package.json discovery and patching
- ``licenses``: License text lookup
- ``installer``: npm dependency installation
- ``models``: Pydantic models for configuration

License
-------
MIT License - see LICENSE file for details.
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "Technical-1"
__email__ = "jacobkanfer8@gmail.com"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from credlify.generator import create_project, run_project
from credlify.models import ProjectConfig, RunOptions, UserInput
from credlify.substitution import substitute


__all__ = [
    "ProjectConfig",
    "RunOptions",
    "UserInput",
    "__author__",
    "__version__",
    "create_project",
    "run_project",
    "substitute",
]
