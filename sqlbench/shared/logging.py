"""Rich-based logging helpers shared across the workbench."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "debug": "dim",
    }
)

# stderr is the diagnostic channel; stdout is left to rendered payloads.
_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(slots=True)
class Logger:
    """Lightweight logger facade over a Rich stderr console."""

    verbose: bool = False

    def info(self, message: str) -> None:
        _console.print(message, style="info", markup=False)

    def success(self, message: str) -> None:
        _console.print(message, style="success", markup=False)

    def warning(self, message: str) -> None:
        _console.print(message, style="warning", markup=False)

    def error(self, message: str) -> None:
        _console.print(message, style="error", markup=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            _console.print(message, style="debug", markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose)
