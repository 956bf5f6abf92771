"""
pytest configuration and shared fixtures for credlify tests.

Fixtures
--------
npm_project : Path
    A temporary npm package root containing a package.json.

template_dir : Path
    A small custom template set covering every naming convention.

default_options : RunOptions
    Options targeting ``npm_project`` with dependency installation off.
"""

import json
from pathlib import Path

import pytest

from credlify.models import RunOptions


CONFIG_TEMPLATE_TEXT = '''/* config.js */
const CONFIG = {
    "PATH": {
        "SRC": {"ROOT": "%%[src]%%", "SASS": "%%[srcSass]%%", "JS": "%%[srcJs]%%"},
        "DEST": {"ROOT": "%%[dest]%%", "SASS": "%%[destSass]%%", "JS": "%%[destJs]%%"}
    }
};

export default CONFIG;
'''


@pytest.fixture
def npm_project(tmp_path: Path) -> Path:
    """
    Create a temporary npm package.

    The package.json has no license field, so no license lookup is made.

    Returns
    -------
    Path
        Resolved path to the package root.
    """
    root = tmp_path / "demo-app"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps(
            {"name": "demo-app", "version": "1.0.0", "description": "A demo app"},
            indent=2,
        ) + "\n",
        encoding="utf-8",
    )
    return root.resolve()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """
    Create a custom template set.

    Contains a direct template, a root-relative one, two captured ones
    and the config template.
    """
    tpl = tmp_path / "tpl"
    tpl.mkdir()
    (tpl / "config.js").write_text(CONFIG_TEMPLATE_TEXT, encoding="utf-8")
    (tpl / "build.js").write_text("// build %%[appName]%% into %%[dest]%%\n", encoding="utf-8")
    (tpl / "_.gitignore").write_text("%%[dest]%%/\n", encoding="utf-8")
    (tpl / "__index.html").write_text("<title>%%[appName]%%</title>\n", encoding="utf-8")
    (tpl / "__.gitkeep").write_text("", encoding="utf-8")
    return tpl


@pytest.fixture
def config_text() -> str:
    """Unrendered config template text with every path placeholder."""
    return CONFIG_TEMPLATE_TEXT


@pytest.fixture
def default_options(npm_project: Path) -> RunOptions:
    """Run options for ``npm_project`` without npm install."""
    return RunOptions(root=npm_project, install_deps=False)


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks end-to-end scaffolding tests"
    )
