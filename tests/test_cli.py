"""
Tests for the work-suite command line.
"""

from typer.testing import CliRunner

import work_suite.cli as cli_module
from conftest import make_settings
from work_suite.cli import app

runner = CliRunner()


def test_presets():
    result = runner.invoke(app, ["presets"])
    assert result.exit_code == 0
    assert "midnight" in result.output
    assert "typewriter" in result.output


def test_presets_by_category():
    result = runner.invoke(app, ["presets", "--category", "light"])
    assert result.exit_code == 0
    assert "paper" in result.output
    assert "midnight" not in result.output


def test_apps():
    result = runner.invoke(app, ["apps"])
    assert result.exit_code == 0
    for app_id in ("notes", "kanban", "timeline", "slides"):
        assert app_id in result.output


def test_init_db(tmp_path, monkeypatch):
    settings = make_settings(tmp_path / "data")
    monkeypatch.setattr(cli_module, "get_settings", lambda: settings)

    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "data" / "worksuite.db").is_file()
    assert (tmp_path / "data" / "files" / "there").is_dir()
