"""Data structures shared across workbench modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sqlbench.backend.types import ScriptEntry

SQL_LANGUAGE = "sql"


@dataclass(frozen=True, slots=True)
class EditorState:
    """Snapshot of the Editor Session."""

    text: str
    language: str = SQL_LANGUAGE
    initialized: bool = False


@dataclass(frozen=True, slots=True)
class Success:
    """Backend returned result markup."""

    markup: str


@dataclass(frozen=True, slots=True)
class Failure:
    """Backend rejected the query; ``message`` is the backend's, unescaped."""

    message: str


ExecutionResult = Union[Success, Failure]

__all__ = ["EditorState", "ExecutionResult", "Failure", "SQL_LANGUAGE", "ScriptEntry", "Success"]
