"""
Tests for credlify.cli
======================

Tests use Typer's CliRunner. Dependency installation is always disabled
with ``--no-deps`` and prompts are answered through a mocked questionary.

Test Organization
-----------------
- TestVersionCommand: Tests for --version flag
- TestHelpOutput: Tests for help text
- TestNonInteractive: Runs with --yes and explicit options
- TestInteractive: Runs answering the prompts
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from credlify import __version__
from credlify.cli import _validate_path_answer, _validate_yes_no_answer, app


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


def answers(*values: str | None) -> list[MagicMock]:
    """One questionary prompt mock per answer, in prompt order."""
    prompts = []
    for value in values:
        prompt = MagicMock()
        prompt.ask.return_value = value
        prompts.append(prompt)
    return prompts


# =============================================================================
# Version and Help
# =============================================================================

class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_short_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestHelpOutput:
    """Tests for help text output."""

    def test_main_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--no-deps" in result.stdout
        assert "--server" in result.stdout

    def test_short_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0


# =============================================================================
# Non-interactive Runs
# =============================================================================

class TestNonInteractive:
    """Runs that never prompt."""

    def test_defaults(self, runner: CliRunner, npm_project: Path) -> None:
        with patch("credlify.cli.questionary.text") as text:
            result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 0, result.stdout
        text.assert_not_called()
        assert (npm_project / "gulpfile.babel.js").is_file()
        assert (npm_project / "src/js/index.js").is_file()
        assert (npm_project / "dist/index.html").is_file()
        assert 'gulp.task("server"' in (npm_project / "gulpfile.babel.js").read_text(encoding="utf-8")

    def test_explicit_paths(self, runner: CliRunner, npm_project: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--yes",
                "--no-deps",
                "--no-server",
                "--root", str(npm_project),
                "--src", "/app/",
                "--dest", "public",
            ],
        )

        assert result.exit_code == 0, result.stdout
        assert (npm_project / "app/js/index.js").is_file()
        assert (npm_project / "public/index.html").is_file()
        assert "liveServer" not in (npm_project / "gulpfile.babel.js").read_text(encoding="utf-8")

    def test_from_subdirectory(self, runner: CliRunner, npm_project: Path) -> None:
        nested = npm_project / "packages"
        nested.mkdir()

        result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(nested)])

        assert result.exit_code == 0, result.stdout
        data = json.loads((npm_project / "package.json").read_text(encoding="utf-8"))
        assert data["type"] == "module"
        assert (nested / "config.js").is_file()

    def test_no_manifest_patch(self, runner: CliRunner, npm_project: Path) -> None:
        before = (npm_project / "package.json").read_text(encoding="utf-8")

        result = runner.invoke(
            app, ["--yes", "--no-deps", "--no-manifest", "--root", str(npm_project)]
        )

        assert result.exit_code == 0
        assert (npm_project / "package.json").read_text(encoding="utf-8") == before
        assert "Warning" in result.stdout

    def test_missing_manifest(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(Path, "is_file", lambda self: False)

        result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(tmp_path)])

        assert result.exit_code == 1
        assert "npm init" in result.stdout

    def test_invalid_path(self, runner: CliRunner, npm_project: Path) -> None:
        result = runner.invoke(
            app, ["--yes", "--no-deps", "--root", str(npm_project), "--src", "a:b"]
        )

        assert result.exit_code == 1
        assert not (npm_project / "config.js").exists()

    def test_invalid_indent(self, runner: CliRunner, npm_project: Path) -> None:
        result = runner.invoke(
            app, ["--yes", "--no-deps", "--root", str(npm_project), "--indent", "wide"]
        )

        assert result.exit_code == 1

    def test_collision_exits(self, runner: CliRunner, npm_project: Path) -> None:
        (npm_project / "args.js").write_text("mine", encoding="utf-8")

        result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 1
        assert "args.js" in result.stdout
        assert "already exist" in result.stdout
        assert not (npm_project / "src").exists()

    def test_existing_source_exits(self, runner: CliRunner, npm_project: Path) -> None:
        (npm_project / "src").mkdir()

        result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 1
        assert not (npm_project / "dist").exists()

    def test_invalid_manifest_exits(self, runner: CliRunner, npm_project: Path) -> None:
        (npm_project / "package.json").write_text("[1, 2]", encoding="utf-8")

        result = runner.invoke(app, ["--yes", "--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 1
        assert "expected an object" in result.stdout
        assert not (npm_project / "config.js").exists()

    def test_broken_config_template_exits(
        self, runner: CliRunner, npm_project: Path, tmp_path: Path
    ) -> None:
        templates = tmp_path / "broken-tpl"
        templates.mkdir()
        (templates / "config.js").write_text("export default {};\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["--yes", "--no-deps", "--root", str(npm_project), "--templates", str(templates)],
        )

        assert result.exit_code == 1
        assert not (npm_project / "src").exists()


# =============================================================================
# Interactive Runs
# =============================================================================

class TestInteractive:
    """Runs answering the questionary prompts."""

    def test_answers_used(self, runner: CliRunner, npm_project: Path) -> None:
        prompts = answers("source", "build", "js", "js", "scss", "css", "n")

        with patch("credlify.cli.questionary.text", side_effect=prompts) as text:
            result = runner.invoke(app, ["--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 0, result.stdout
        assert text.call_count == 7
        assert (npm_project / "source/scss/index.scss").is_file()
        assert (npm_project / "build/css").is_dir()
        assert "Build Configuration" in result.stdout

    def test_prompt_defaults_and_descriptions(self, runner: CliRunner, npm_project: Path) -> None:
        prompts = answers("src", "dist", "js", "assets/js", "sass", "assets/css", "yes")

        with patch("credlify.cli.questionary.text", side_effect=prompts) as text:
            runner.invoke(app, ["--no-deps", "--root", str(npm_project)])

        first = text.call_args_list[0]
        assert first.args[0].startswith("Source directory")
        assert first.kwargs["default"] == "src"

    def test_options_skip_prompts(self, runner: CliRunner, npm_project: Path) -> None:
        prompts = answers("dist", "js", "assets/js", "sass", "assets/css")

        with patch("credlify.cli.questionary.text", side_effect=prompts) as text:
            result = runner.invoke(
                app, ["--no-deps", "--root", str(npm_project), "--src", "src", "--no-server"]
            )

        assert result.exit_code == 0, result.stdout
        assert text.call_count == 5

    def test_cancel_aborts(self, runner: CliRunner, npm_project: Path) -> None:
        with patch("credlify.cli.questionary.text", side_effect=answers("src", None)):
            result = runner.invoke(app, ["--no-deps", "--root", str(npm_project)])

        assert result.exit_code == 1
        assert not (npm_project / "config.js").exists()

    def test_answer_validation(self) -> None:
        assert _validate_path_answer(" /assets/js/ ") is True
        assert isinstance(_validate_path_answer("a|b"), str)
        assert isinstance(_validate_path_answer(""), str)
        assert _validate_yes_no_answer("Y") is True
        assert _validate_yes_no_answer("maybe") == "Choose 'yes' or 'no'"
