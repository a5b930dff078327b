"""Tests for the command line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from logtails.cli import app
from logtails.commands.view import apply_overrides, is_url
from logtails.config import load_config
from logtails.models import AppConfig

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "config"
    monkeypatch.setenv("LOGTAILS_CONFIG_DIR", str(path))
    return path


class TestExportCommand:
    def test_exports_non_empty_lines(self, sample_log_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.log"
        result = runner.invoke(app, ["export", str(sample_log_file), "-o", str(out)])
        assert result.exit_code == 0
        assert "Exported 7 lines" in result.output
        text = out.read_text(encoding="utf-8")
        assert "    indented continuation line\n" in text
        assert "\t" not in text

    def test_capacity_keeps_tail(self, sample_log_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.log"
        result = runner.invoke(app, ["export", str(sample_log_file), "-o", str(out), "--capacity", "2"])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "    indented continuation line\nplain text with nothing special\n"

    def test_search_filters(self, sample_log_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.log"
        result = runner.invoke(app, ["export", str(sample_log_file), "-o", str(out), "-s", "ERROR"])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "request failed with error 500\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["export", str(tmp_path / "nope.log"), "-o", str(tmp_path / "out.log")])
        assert result.exit_code == 1
        assert "is not a file" in result.output

    def test_unknown_format(self, sample_log_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["export", str(sample_log_file), "-o", str(tmp_path / "out"), "--format", "html"]
        )
        assert result.exit_code == 1
        assert "unknown format" in result.output


class TestServeCommand:
    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["serve", str(tmp_path / "nope.log")])
        assert result.exit_code == 1
        assert "path not found" in result.output

    def test_runs_server(self, sample_log_file: Path) -> None:
        with patch("logtails.commands.serve.run_server") as run_server:
            result = runner.invoke(app, ["serve", str(sample_log_file), "--port", "9000"])
        assert result.exit_code == 0
        run_server.assert_called_once_with(sample_log_file, host="0.0.0.0", port=9000)  # noqa: S104


class TestViewCommand:
    def test_rejects_unknown_source(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["view", str(tmp_path / "nope.log")])
        assert result.exit_code == 1
        assert "not a file or http(s) URL" in result.output

    def test_rejects_bad_rules(self, sample_log_file: Path, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[[rules]]\nstyle_tag = "error"\npattern = "boom"\n')
        result = runner.invoke(app, ["view", str(sample_log_file)])
        assert result.exit_code == 1
        assert "invalid highlight rules" in result.output

    def test_rejects_incomplete_rule_table(self, sample_log_file: Path, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('capacity = 5\n\n[[rules]]\nstyle_tag = "x"\n')
        result = runner.invoke(app, ["view", str(sample_log_file)])
        assert result.exit_code == 1
        assert "invalid highlight rules" in result.output

    def test_launches_app(self, sample_log_file: Path) -> None:
        with patch("logtails.app.LogTailsApp.run") as run:
            result = runner.invoke(app, ["view", str(sample_log_file), "-c", "10", "-s", "error"])
        assert result.exit_code == 0
        run.assert_called_once_with(mouse=False)


class TestConfigCommand:
    def test_shows_defaults_without_saving(self, config_dir: Path) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "capacity = 40000" in result.output
        assert not (config_dir / "config.toml").exists()

    def test_saves_options(self, config_dir: Path) -> None:
        result = runner.invoke(app, ["config", "--capacity", "500", "--reconnect", "--theme", "nord"])
        assert result.exit_code == 0
        assert "Saved" in result.output
        saved = load_config()
        assert saved.capacity == 500
        assert saved.reconnect is True
        assert saved.theme == "nord"
        assert (config_dir / "config.toml").exists()

    def test_keeps_existing_settings(self) -> None:
        runner.invoke(app, ["config", "--capacity", "500"])
        runner.invoke(app, ["config", "--debounce", "0.5"])
        saved = load_config()
        assert saved.capacity == 500
        assert saved.debounce_seconds == 0.5

    def test_rejects_bad_rules(self, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[[rules]]\nstyle_tag = "x"\n')
        result = runner.invoke(app, ["config", "--capacity", "10"])
        assert result.exit_code == 1
        assert "invalid highlight rules" in result.output


class TestHelpers:
    def test_is_url(self) -> None:
        assert is_url("http://localhost:8080/sse")
        assert is_url("https://example.com/sse")
        assert not is_url("/var/log/syslog")

    def test_overrides_applied(self) -> None:
        config = apply_overrides(AppConfig(), capacity=10, warmup=0, reconnect=True)
        assert config.capacity == 10
        assert config.warmup_seconds == 0
        assert config.reconnect is True
        assert config.debounce_seconds == 1.0

    def test_overrides_validated(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            apply_overrides(AppConfig(), capacity=0)
