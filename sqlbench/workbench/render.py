"""Terminal rendering of workbench regions."""

from __future__ import annotations

import sys
from html.parser import HTMLParser
from typing import IO, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlbench.shared.logging import Logger

from .types import ScriptEntry


class _TableExtractor(HTMLParser):
    """Pull header and body cells out of result-table markup."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.columns: list[str] = []
        self.rows: list[list[str]] = []
        self.caption = ""
        self._cell: list[str] | None = None
        self._in_caption = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "tr" and self.columns:
            self.rows.append([])
        elif tag in {"th", "td"}:
            self._cell = []
        elif tag == "caption":
            self._in_caption = True

    def handle_endtag(self, tag: str) -> None:
        if tag in {"th", "td"} and self._cell is not None:
            value = "".join(self._cell).strip()
            if tag == "th":
                self.columns.append(value)
            elif self.rows:
                self.rows[-1].append(value)
            self._cell = None
        elif tag == "caption":
            self._in_caption = False

    def handle_data(self, data: str) -> None:
        if self._cell is not None:
            self._cell.append(data)
        elif self._in_caption:
            self.caption += data


def extract_table(markup: str) -> tuple[list[str], list[list[str]], str]:
    """Return ``(columns, rows, caption)`` from result markup."""
    parser = _TableExtractor()
    parser.feed(markup)
    parser.close()
    return parser.columns, parser.rows, parser.caption.strip()


def render_results(markup: str, *, output_format: str, logger: Logger, stream: IO[str] | None = None) -> None:
    """Print the results region as raw markup or as a terminal table."""
    output_stream = stream or sys.stdout
    if output_format == "html":
        output_stream.write(markup)
        output_stream.write("\n")
        return

    columns, rows, caption = extract_table(markup)
    console = Console(file=output_stream, highlight=False, force_terminal=False)
    table = Table(box=box.SIMPLE_HEAVY, show_header=bool(columns), header_style="bold")
    for column in columns:
        table.add_column(escape(column))
    for row in rows:
        table.add_row(*(escape(cell) for cell in row))
    console.print(table)
    if not rows:
        logger.info("Query returned zero rows.")
    if caption:
        logger.warning(caption)


def render_scripts(entries: Sequence[ScriptEntry], *, stream: IO[str] | None = None) -> None:
    """Print the scripts listed in the file browser."""
    output_stream = stream or sys.stdout
    if not entries:
        print("No scripts found.", file=output_stream)
        return
    console = Console(file=output_stream, highlight=False, force_terminal=False)
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Script", style="bold")
    table.add_column("Path")
    for entry in entries:
        table.add_row(entry.label, entry.path)
    console.print(table)
