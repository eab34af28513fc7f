from __future__ import annotations

import io

from sqlbench.workbench import render
from sqlbench.workbench.types import ScriptEntry


class StubLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))


TABLE_MARKUP = (
    '<table id="table" class="table table-md table-pin-rows">'
    "<caption>Showing the first 1 rows.</caption>"
    "<thead><tr><th>ticker</th><th>note</th></tr></thead>"
    "<tbody><tr><td>SPY</td><td>a &amp; [b]</td></tr></tbody>"
    "</table>"
)


def test_extract_table_reads_cells_and_caption() -> None:
    columns, rows, caption = render.extract_table(TABLE_MARKUP)

    assert columns == ["ticker", "note"]
    assert rows == [["SPY", "a & [b]"]]
    assert caption == "Showing the first 1 rows."


def test_render_results_html_passthrough() -> None:
    buffer = io.StringIO()
    logger = StubLogger()

    render.render_results(TABLE_MARKUP, output_format="html", logger=logger, stream=buffer)

    assert buffer.getvalue() == TABLE_MARKUP + "\n"
    assert logger.messages == []


def test_render_results_table_warns_on_caption() -> None:
    buffer = io.StringIO()
    logger = StubLogger()

    render.render_results(TABLE_MARKUP, output_format="table", logger=logger, stream=buffer)

    output = buffer.getvalue()
    assert "ticker" in output
    assert "a & [b]" in output
    assert ("warning", "Showing the first 1 rows.") in logger.messages


def test_render_results_reports_empty_result() -> None:
    buffer = io.StringIO()
    logger = StubLogger()
    markup = "<table><thead><tr><th>x</th></tr></thead><tbody></tbody></table>"

    render.render_results(markup, output_format="table", logger=logger, stream=buffer)

    assert ("info", "Query returned zero rows.") in logger.messages


def test_render_scripts_lists_entries() -> None:
    buffer = io.StringIO()

    render.render_scripts([ScriptEntry(path="scripts/count.sql", label="count.sql")], stream=buffer)

    output = buffer.getvalue()
    assert "count.sql" in output
    assert "scripts/count.sql" in output


def test_render_scripts_empty() -> None:
    buffer = io.StringIO()

    render.render_scripts([], stream=buffer)

    assert buffer.getvalue().strip() == "No scripts found."
