"""Jinja rendering for backend payloads (result tables, script listings)."""

from __future__ import annotations

from sqlbench.shared.templating import render_template

from .types import DirectoryNode, QueryResult

TABLE_TEMPLATE_NAME = "table.html.j2"
BROWSER_TEMPLATE_NAME = "browser.html.j2"


def render_result_table(result: QueryResult) -> str:
    """Render a result set to the table markup shown in the results region."""
    rows = [[_stringify(cell) for cell in row] for row in result.rows]
    return render_template(
        TABLE_TEMPLATE_NAME,
        columns=result.columns,
        rows=rows,
        truncated=result.truncated,
        limit_value=result.limit_value,
    )


def render_listing(root: DirectoryNode) -> str:
    """Render the directory tree to the file-browser markup."""
    return render_template(BROWSER_TEMPLATE_NAME, root=root)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
