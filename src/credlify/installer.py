"""
credlify.installer - Dependency Installation
============================================

Installs the packages the generated build files need by running the
package manager's ``install`` command. The child process inherits our
stdin/stdout/stderr so the user sees npm's own output.

Regular and development dependencies are installed one after the other,
never at the same time, since both runs modify package.json and the
lock file. There is no timeout: the step waits for npm to exit.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console


console = Console()

DEPENDENCIES: list[str] = [
    "@babel/runtime",
]

DEV_DEPENDENCIES: list[str] = [
    "@babel/core",
    "@babel/plugin-proposal-class-properties",
    "@babel/plugin-proposal-export-default-from",
    "@babel/plugin-proposal-object-rest-spread",
    "@babel/plugin-syntax-dynamic-import",
    "@babel/plugin-transform-runtime",
    "@babel/preset-env",
    "@babel/register",
    "babel-loader",
    "babel-plugin-root-import",
    "del",
    "gulp",
    "gulp-clean-css",
    "gulp-dart-sass",
    "gulp-plumber",
    "gulp-sourcemaps",
    "live-server",
    "minimist",
    "minimist-options",
    "terser-webpack-plugin",
    "webpack",
    "webpack-stream",
]

# Exit code reported when the package manager executable is missing
COMMAND_NOT_FOUND = 127


@dataclass
class InstallResult:
    """Exit codes of both install runs. None means the run was skipped."""

    dependencies: int | None = None
    dev_dependencies: int | None = None

    @property
    def success(self) -> bool:
        return all(code in (None, 0) for code in (self.dependencies, self.dev_dependencies))


def sanitize_packages(packages: Iterable[str]) -> list[str]:
    """Strip package names and drop empty ones or ones containing whitespace."""
    cleaned = []
    for name in packages:
        name = name.strip()
        if name and not any(char.isspace() for char in name):
            cleaned.append(name)
    return cleaned


def build_command(packages: list[str], as_dev: bool, package_manager: str = "npm") -> list[str]:
    return [package_manager, "install", "--save-dev" if as_dev else "--save", *packages]


async def install(
    packages: Iterable[str],
    as_dev: bool = False,
    package_manager: str = "npm",
) -> int | None:
    """
    Install packages with the package manager.

    Parameters
    ----------
    packages : Iterable[str]
        Package names. Names with whitespace are dropped.

    as_dev : bool
        Save as development dependencies instead of regular ones.

    package_manager : str
        Executable to run.

    Returns
    -------
    int | None
        The process exit code, or None if no package was left to install.
    """
    names = sanitize_packages(packages)
    if not names:
        return None

    cmd = build_command(names, as_dev, package_manager)

    try:
        process = await asyncio.create_subprocess_exec(*cmd)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] '{package_manager}' was not found on PATH")
        return COMMAND_NOT_FOUND

    return await process.wait()


async def install_all(
    dependencies: Iterable[str] = DEPENDENCIES,
    dev_dependencies: Iterable[str] = DEV_DEPENDENCIES,
    package_manager: str = "npm",
) -> InstallResult:
    """Install regular dependencies, then development dependencies."""
    console.print("[bold]Installing dependencies...[/]")

    result = InstallResult()
    result.dependencies = await install(dependencies, as_dev=False, package_manager=package_manager)
    result.dev_dependencies = await install(
        dev_dependencies, as_dev=True, package_manager=package_manager
    )
    return result
