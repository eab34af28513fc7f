"""Shared fixtures for workbench controller tests.

Two channel doubles are provided. ``StubChannel`` answers immediately from a
table of canned responses. ``ManualChannel`` parks every call on a future so a
test decides when, and in which order, responses arrive.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from sqlbench.workbench.bridge import ChannelError
from sqlbench.workbench.editor import EditorSession
from sqlbench.workbench.page import Page

SCRIPT_LISTING = (
    '<li><details open><summary>workspace</summary><ul class="menu">'
    '<li><a class="sql-file" data-path="data/query1.sql">query1.sql</a></li>'
    '<li><a class="sql-file" data-path="data/query2.sql">query2.sql</a></li>'
    '<li><a class="data-file">etfs.csv</a></li>'
    "</ul></details></li>"
)


class StubChannel:
    """Answer each command from ``responses``.

    A response may be a string, an exception instance (raised), or a callable
    receiving the command arguments.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        self.calls.append((command, dict(args)))
        if command not in self.responses:
            raise ChannelError(f"command {command} not found")
        response = self.responses[command]
        if callable(response):
            response = response(**args)
        if isinstance(response, BaseException):
            raise response
        return response

    def count(self, command: str) -> int:
        return sum(1 for name, _ in self.calls if name == command)


class ManualChannel:
    """Hold every call open until the test responds to it."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._pending: list[tuple[str, asyncio.Future[Any]]] = []

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.calls.append((command, dict(args)))
        self._pending.append((command, future))
        return await future

    def waiting(self, command: str) -> list[asyncio.Future[Any]]:
        return [future for name, future in self._pending if name == command and not future.done()]

    def respond(self, command: str, value: Any, *, call: int) -> None:
        """Resolve the ``call``-th invocation (0-based, in call order) of ``command``."""
        self._future(command, call).set_result(value)

    def fail(self, command: str, message: str, *, call: int) -> None:
        self._future(command, call).set_exception(ChannelError(message))

    def _future(self, command: str, call: int) -> asyncio.Future[Any]:
        futures = [future for name, future in self._pending if name == command]
        return futures[call]


async def _drain(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture()
def drain() -> Callable[..., Any]:
    """Awaitable helper letting scheduled tasks run until they block on a channel future."""
    return _drain


@pytest.fixture()
def script_listing() -> str:
    return SCRIPT_LISTING


@pytest.fixture()
def stub_channel() -> type[StubChannel]:
    return StubChannel


@pytest.fixture()
def manual_channel() -> ManualChannel:
    return ManualChannel()


@pytest.fixture()
def page() -> Page:
    return Page()


@pytest.fixture()
def editor(page: Page) -> EditorSession:
    """An editor session on ``page`` that has not been initialised yet."""
    return EditorSession(page.editor_container)
