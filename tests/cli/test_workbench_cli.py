from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from sqlbench.shared import paths
from sqlbench.workbench.main import cli


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)
    (root / "data" / "etfs.csv").write_text("ticker,price\nSPY,500\nQQQ,400\n", encoding="utf-8")
    (root / "scripts").mkdir()
    (root / "scripts" / "count.sql").write_text(
        "select count(*) as n from 'data/etfs.csv'", encoding="utf-8"
    )
    return root


@pytest.fixture()
def invoke(workspace: Path, tmp_path: Path):
    runner = CliRunner()
    env = {
        paths.CONFIG_FILE_ENV: str(tmp_path / "absent.yaml"),
        paths.WORKSPACE_ROOT_ENV: None,
    }

    def _invoke(*args: str):
        return runner.invoke(cli, ["--root", str(workspace), *args], env=env)

    return _invoke


def test_run_prints_markup(invoke) -> None:
    result = invoke("run", "select 42 as answer", "--format", "html")

    assert result.exit_code == 0, result.output
    assert '<table id="table"' in result.stdout
    assert "<th>answer</th>" in result.stdout
    assert "<td>42</td>" in result.stdout


def test_run_default_query_as_table(invoke) -> None:
    result = invoke("run")

    assert result.exit_code == 0, result.output
    assert "ticker" in result.stdout
    assert "SPY" in result.stdout
    assert "QQQ" in result.stdout


def test_run_loads_listed_script(invoke) -> None:
    result = invoke("run", "--file", "scripts/count.sql", "--format", "html")

    assert result.exit_code == 0, result.output
    assert "<th>n</th>" in result.stdout
    assert "<td>2</td>" in result.stdout


def test_run_unknown_script_fails(invoke) -> None:
    result = invoke("run", "--file", "scripts/missing.sql")

    assert result.exit_code == 1
    assert "scripts/missing.sql" in result.output


def test_run_reports_backend_message(invoke) -> None:
    result = invoke("run", "selec 1")

    assert result.exit_code == 1
    assert "syntax error" in result.output.lower()


def test_files_lists_scripts(invoke) -> None:
    result = invoke("files")

    assert result.exit_code == 0, result.output
    assert "count.sql" in result.stdout
    assert "scripts/count.sql" in result.stdout


def test_files_empty_workspace(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["--root", str(empty), "files"],
        env={paths.CONFIG_FILE_ENV: str(tmp_path / "absent.yaml")},
    )

    assert result.exit_code == 0, result.output
    assert "No scripts found." in result.stdout


def test_snapshot_writes_page(invoke, tmp_path: Path) -> None:
    output = tmp_path / "page.html"

    result = invoke("snapshot", "--output", str(output))

    assert result.exit_code == 0, result.output
    document = output.read_text(encoding="utf-8")
    assert document.startswith("<!doctype html>")
    assert 'data-path="scripts/count.sql"' in document
    assert "<td>SPY</td>" in document
    assert "modal-message" not in document


def test_snapshot_includes_error_modal(invoke) -> None:
    result = invoke("snapshot", "select * from 'data/missing.csv'")

    assert result.exit_code == 0, result.output
    assert "modal-message" in result.stdout
    assert "<table" not in result.stdout


def test_snapshot_without_running(invoke) -> None:
    result = invoke("snapshot", "--no-run")

    assert result.exit_code == 0, result.output
    assert 'class="sql-file"' in result.stdout
    assert "<table" not in result.stdout
