"""Data structures shared across backend modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Structured result set produced by the executor before rendering."""

    columns: tuple[str, ...]
    rows: Sequence[tuple[Any, ...]]
    limit_value: int | None = None
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class ScriptEntry:
    """A saved query file addressable by path."""

    path: str
    label: str


@dataclass(frozen=True, slots=True)
class DataFileEntry:
    """A queryable data file (csv, xlsx, parquet); listed but not selectable."""

    path: str
    label: str


@dataclass(frozen=True, slots=True)
class DirectoryNode:
    """One directory level of the script listing."""

    name: str
    directories: tuple[DirectoryNode, ...] = field(default_factory=tuple)
    scripts: tuple[ScriptEntry, ...] = field(default_factory=tuple)
    data_files: tuple[DataFileEntry, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.directories or self.scripts or self.data_files)

    def iter_scripts(self):
        """Yield every script below this node, depth first."""
        for directory in self.directories:
            yield from directory.iter_scripts()
        yield from self.scripts
