"""Project-wide custom exceptions."""

from __future__ import annotations


class SqlBenchError(Exception):
    """Base exception for the SQL workbench."""


class ConfigurationError(SqlBenchError):
    """Raised when configuration loading or validation fails."""


class WorkbenchError(SqlBenchError):
    """Raised for controller wiring problems (missing regions, bad state)."""


class EditorNotReadyError(WorkbenchError):
    """Raised when the editor is used before initialisation has completed."""


class BackendError(SqlBenchError):
    """Raised by the host bridge when a backend command fails.

    The message is the backend's own, forwarded verbatim.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QueryError(SqlBenchError):
    """Raised inside the backend when a command cannot complete."""
