"""Backend commands exposed to the workbench over the command channel.

Each command is a plain synchronous function. ``command_table`` binds them
to a config for :class:`~sqlbench.workbench.bridge.LocalChannel`, which runs them
off the event loop and turns any exception into a channel failure whose
message is ``str(exc)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import duckdb

from sqlbench.shared.config import AppConfig
from sqlbench.shared.exceptions import QueryError

from . import render
from .types import DataFileEntry, DirectoryNode, QueryResult, ScriptEntry

SCRIPT_SUFFIXES = frozenset({".sql"})
DATA_SUFFIXES = frozenset({".csv", ".xlsx", ".parquet"})
NO_RESULTS_MESSAGE = "No results returned"


def create_table(query: str, *, root: Path, row_limit: int | None = None) -> str:
    """Execute ``query`` against an in-memory DuckDB and return table markup."""
    return render.render_result_table(execute_query(query, root=root, row_limit=row_limit))


def execute_query(query: str, *, root: Path, row_limit: int | None = None) -> QueryResult:
    """Run ``query`` with relative file paths resolved against ``root``."""
    # file_search_path is a comma-separated list.
    if "," in str(root):
        raise QueryError(f"Workspace root may not contain a comma: {root}")
    try:
        connection = duckdb.connect(database=":memory:")
    except duckdb.Error as exc:
        raise QueryError(str(exc)) from exc

    try:
        try:
            connection.execute(f"SET file_search_path = {_sql_literal(str(root))}")
            connection.execute(query)
        except duckdb.Error as exc:
            raise QueryError(str(exc)) from exc

        description = connection.description
        rows, truncated = _fetch_rows(connection, row_limit) if description else ([], False)
        # DDL and SET report a description but no rows.
        if not rows:
            raise QueryError(NO_RESULTS_MESSAGE)
    finally:
        connection.close()

    return QueryResult(
        columns=tuple(str(column[0]) for column in description),
        rows=[tuple(row) for row in rows],
        limit_value=row_limit,
        truncated=truncated,
    )


def list_files(directory: str | Path | None = None, *, root: Path) -> str:
    """Return the file-browser markup for ``directory`` (default: ``root``)."""
    return render.render_listing(scan_directory(directory, root=root))


def scan_directory(directory: str | Path | None = None, *, root: Path) -> DirectoryNode:
    """Walk ``directory`` and build the structured listing."""
    base = Path(directory) if directory else root
    if not base.is_absolute():
        base = root / base
    try:
        children = _scan_children(base, root=root)
    except OSError as exc:
        raise QueryError(str(exc)) from exc
    return DirectoryNode(name=base.name or str(base), **children)


def read_file(path: str | Path, *, root: Path) -> str:
    """Read a script as UTF-8 text; relative paths resolve against ``root``."""
    target = Path(path)
    if not target.is_absolute():
        target = root / target
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise QueryError(str(exc)) from exc


def command_table(config: AppConfig) -> dict[str, Any]:
    """Bind the commands to ``config`` under their channel names."""
    root = config.workspace.root
    row_limit = config.backend.row_limit

    def _create_table(query: str) -> str:
        return create_table(query, root=root, row_limit=row_limit)

    def _list_files(directory: str | None = None) -> str:
        return list_files(directory, root=root)

    def _read_file(path: str) -> str:
        return read_file(path, root=root)

    return {
        "create_table": _create_table,
        "list_files": _list_files,
        "read_file": _read_file,
    }


# ---------------------------------------------------------------------------
# Internal helpers


def _sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _fetch_rows(connection: Any, limit: int | None) -> tuple[Sequence[tuple[Any, ...]], bool]:
    if limit is None:
        return connection.fetchall(), False

    rows = connection.fetchmany(limit + 1)
    truncated = len(rows) > limit
    return rows[:limit], truncated


def _scan_children(path: Path, *, root: Path) -> dict[str, tuple]:
    directories: list[DirectoryNode] = []
    scripts: list[ScriptEntry] = []
    data_files: list[DataFileEntry] = []

    for entry in sorted(path.iterdir(), key=lambda item: item.name.lower()):
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            node = DirectoryNode(name=entry.name, **_scan_children(entry, root=root))
            if not node.is_empty:
                directories.append(node)
            continue
        suffix = entry.suffix.lower()
        if suffix in SCRIPT_SUFFIXES:
            scripts.append(ScriptEntry(path=_display_path(entry, root), label=entry.name))
        elif suffix in DATA_SUFFIXES:
            data_files.append(DataFileEntry(path=_display_path(entry, root), label=entry.name))

    return {
        "directories": tuple(directories),
        "scripts": tuple(scripts),
        "data_files": tuple(data_files),
    }


def _display_path(entry: Path, root: Path) -> str:
    try:
        return entry.relative_to(root).as_posix()
    except ValueError:
        return str(entry)
