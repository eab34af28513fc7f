"""Host bridge: the asynchronous command channel to the query backend."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from sqlbench.shared.exceptions import BackendError, SqlBenchError

CREATE_TABLE = "create_table"
LIST_FILES = "list_files"
READ_FILE = "read_file"


class ChannelError(SqlBenchError):
    """A command invocation was rejected; ``message`` is the remote error text."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CommandChannel(Protocol):
    """One-shot request/response transport to the backend."""

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        ...


class LocalChannel:
    """Serve command handlers in-process, each call on a worker thread."""

    def __init__(self, handlers: Mapping[str, Callable[..., Any]]) -> None:
        self._handlers = dict(handlers)

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(sorted(self._handlers))

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        handler = self._handlers.get(command)
        if handler is None:
            raise ChannelError(f"command {command} not found")
        try:
            return await asyncio.to_thread(handler, **dict(args))
        except Exception as exc:
            raise ChannelError(str(exc)) from exc


class HostBridge:
    """Typed adapter over a :class:`CommandChannel`.

    Every call is a single attempt with no caching and no retry. Failures
    surface as :class:`BackendError` carrying the backend message verbatim.
    """

    def __init__(self, channel: CommandChannel) -> None:
        self._channel = channel

    async def create_table(self, query: str) -> str:
        return await self._call(CREATE_TABLE, {"query": query})

    async def list_files(self, directory: str | None = None) -> str:
        args = {"directory": directory} if directory is not None else {}
        return await self._call(LIST_FILES, args)

    async def read_file(self, path: str) -> str:
        return await self._call(READ_FILE, {"path": path})

    async def _call(self, command: str, args: Mapping[str, Any]) -> str:
        try:
            payload = await self._channel.invoke(command, args)
        except ChannelError as exc:
            raise BackendError(exc.message) from exc
        if not isinstance(payload, str):
            raise BackendError(f"{command} returned {type(payload).__name__}, expected str")
        return payload
