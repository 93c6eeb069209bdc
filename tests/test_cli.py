"""Tests for the wphmr command line interface."""

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from wphmr.cli import main
from wphmr.config import WpHmrConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.upper().startswith("WPHMR_"):
            monkeypatch.delenv(key)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A project directory with a wphmr.yml, used as the working directory."""
    (tmp_path / "wphmr.yml").write_text(
        "output_dir: wp-content/mu-plugins\ncss_reload_events: [wp:css-update]\n"
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestPrint:
    def test_print_without_config(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(main, ["print", "--origin", "https://mysite.local:3000"])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("<?php")
        assert "https://mysite.local:3000/@vite/client" in result.output
        assert not (tmp_path / "vite-hmr.php").exists()

    def test_print_uses_config_in_cwd(self, runner, project):
        result = runner.invoke(main, ["print"])

        assert result.exit_code == 0, result.output
        assert 'hot.on("wp:css-update"' in result.output

    def test_print_invalid_origin(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(main, ["print", "--origin", "localhost:5173"])

        assert result.exit_code == 1
        assert "Invalid dev server origin" in result.output


class TestGenerate:
    def test_generate_from_config(self, runner, project):
        result = runner.invoke(main, ["generate"])

        assert result.exit_code == 0, result.output
        plugin = project / "wp-content" / "mu-plugins" / "vite-hmr.php"
        assert plugin.exists()
        assert 'hot.on("wp:css-update"' in plugin.read_text(encoding="utf-8")

    def test_generate_with_explicit_config(self, runner, project):
        result = runner.invoke(
            main,
            [
                "generate",
                "-c",
                str(project / "wphmr.yml"),
                "--origin",
                "http://127.0.0.1:4000",
            ],
        )

        assert result.exit_code == 0, result.output
        plugin = project / "wp-content" / "mu-plugins" / "vite-hmr.php"
        assert "@fsockopen( '127.0.0.1', 4000" in plugin.read_text(encoding="utf-8")

    def test_generate_output_dir_option(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(main, ["generate", "--output-dir", str(tmp_path / "mu")])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "mu" / "vite-hmr.php").exists()

    def test_generate_output_dir_relative_to_cwd(self, runner, tmp_path, monkeypatch):
        """A relative --output-dir is not moved next to the config file."""
        (tmp_path / "site").mkdir()
        (tmp_path / "site" / "wphmr.yml").write_text("output_dir: mu\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(
            main, ["generate", "-c", "site/wphmr.yml", "-o", "build"]
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "build" / "vite-hmr.php").exists()
        assert not (tmp_path / "site" / "build").exists()
        assert not (tmp_path / "site" / "mu").exists()

    def test_generate_shows_paths_verbatim(self, runner, tmp_path, monkeypatch):
        """Brackets in paths are printed, not read as console markup."""
        (tmp_path / "[dim]site").mkdir()
        (tmp_path / "[dim]site" / "wphmr.yml").write_text("output_dir: mu\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(main, ["generate", "-c", "[dim]site/wphmr.yml"])

        assert result.exit_code == 0, result.output
        assert "[dim]site/wphmr.yml" in result.output
        assert (tmp_path / "[dim]site" / "mu" / "vite-hmr.php").exists()

    def test_generate_without_output_dir(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(main, ["generate"])

        assert result.exit_code == 1
        assert "output_dir" in result.output

    def test_generate_invalid_config(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "wphmr.yml").write_text("output_dir: [unclosed\n")

        result = runner.invoke(main, ["generate"])

        assert result.exit_code == 1
        assert "Could not load" in result.output


class TestClean:
    def test_clean_removes_plugin(self, runner, project):
        runner.invoke(main, ["generate"])
        plugin = project / "wp-content" / "mu-plugins" / "vite-hmr.php"
        assert plugin.exists()

        result = runner.invoke(main, ["clean"])

        assert result.exit_code == 0, result.output
        assert not plugin.exists()
        assert "Removed" in result.output

    def test_clean_nothing_to_remove(self, runner, project):
        result = runner.invoke(main, ["clean"])

        assert result.exit_code == 0, result.output
        assert "Nothing to remove" in result.output


class TestDev:
    def test_dev_runs_session(self, runner, project):
        run = AsyncMock()
        with patch("wphmr.cli.HmrSession.run", run):
            result = runner.invoke(main, ["dev", "--no-watch", "--follow"])

        assert result.exit_code == 0, result.output
        run.assert_awaited_once()

    def test_dev_passes_flags_to_config(self, runner, project):
        with patch("wphmr.cli.HmrSession") as session_class:
            session_class.return_value.run = AsyncMock()
            result = runner.invoke(main, ["dev", "--no-watch", "--follow"])

        assert result.exit_code == 0, result.output
        config, overrides = session_class.call_args.args
        assert config.watch_config is False
        assert config.follow_server is True
        assert overrides == {"watch_config": False, "follow_server": True}

    def test_dev_keyboard_interrupt(self, runner, project):
        run = AsyncMock(side_effect=KeyboardInterrupt)
        with patch("wphmr.cli.HmrSession.run", run):
            result = runner.invoke(main, ["dev"])

        assert result.exit_code == 0, result.output
        assert "Development session stopped" in result.output


class TestInit:
    def test_init_writes_loadable_config(self, runner, tmp_path):
        result = runner.invoke(main, ["init", str(tmp_path)])

        assert result.exit_code == 0, result.output
        config_file = tmp_path / "wphmr.yml"
        assert config_file.exists()

        config = WpHmrConfig(config_file=config_file)
        assert config.output_dir == tmp_path / "wp-content" / "mu-plugins"
        assert config.file_name == "vite-hmr.php"
        assert config.cache_ttl == 5

    def test_init_does_not_overwrite(self, runner, tmp_path):
        config_file = tmp_path / "wphmr.yml"
        config_file.write_text("output_dir: custom\n")

        result = runner.invoke(main, ["init", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "already exists" in result.output
        assert config_file.read_text() == "output_dir: custom\n"

    def test_init_force(self, runner, tmp_path):
        config_file = tmp_path / "wphmr.yml"
        config_file.write_text("output_dir: custom\n")

        result = runner.invoke(main, ["init", str(tmp_path), "--force", "-o", "mu"])

        assert result.exit_code == 0, result.output
        assert WpHmrConfig(config_file=config_file).output_dir == Path(tmp_path) / "mu"
