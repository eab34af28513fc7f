from __future__ import annotations

import asyncio

from sqlbench.shared.logging import get_logger
from sqlbench.workbench.bridge import ChannelError, HostBridge
from sqlbench.workbench.editor import EditorSession
from sqlbench.workbench.execution import QueryExecutionFlow
from sqlbench.workbench.notifier import ErrorNotifier
from sqlbench.workbench.page import Event, Page
from sqlbench.workbench.results import ResultsPresenter
from sqlbench.workbench.types import Failure, Success

RESULT_MARKUP = "<table><thead><tr><th>ticker</th></tr></thead><tbody><tr><td>SPY</td></tr></tbody></table>"


def _flow(page: Page, editor: EditorSession, channel, *, discard_stale: bool = False) -> QueryExecutionFlow:
    presenter = ResultsPresenter(page.results, ErrorNotifier(page), discard_stale=discard_stale)
    return QueryExecutionFlow(editor, HostBridge(channel), presenter, get_logger())


def test_submit_routes_markup_to_results(page, editor, stub_channel) -> None:
    channel = stub_channel({"create_table": RESULT_MARKUP})
    flow = _flow(page, editor, channel)

    async def scenario():
        await editor.initialize()
        return await flow.submit()

    result = asyncio.run(scenario())

    assert result == Success(RESULT_MARKUP)
    assert channel.calls == [("create_table", {"query": "select * from 'data/etfs.csv'"})]
    assert page.results.markup == RESULT_MARKUP


def test_failure_opens_one_modal_and_keeps_results(page, editor, stub_channel) -> None:
    channel = stub_channel({"create_table": ChannelError("syntax error at line 1")})
    flow = _flow(page, editor, channel)
    page.results.replace("<p>previous</p>")

    async def scenario():
        await editor.initialize()
        return await flow.submit()

    result = asyncio.run(scenario())

    assert result == Failure("syntax error at line 1")
    assert page.results.markup == "<p>previous</p>"
    assert len(page.overlays) == 1
    assert "syntax error at line 1" in page.overlays[0].markup


def test_submit_before_initialisation_is_a_logged_no_op(page, editor, stub_channel, capfd) -> None:
    channel = stub_channel({"create_table": RESULT_MARKUP})
    flow = _flow(page, editor, channel)

    result = asyncio.run(flow.submit())

    assert result is None
    assert channel.calls == []
    assert page.results.markup == ""
    assert page.overlays == ()
    assert "Editor not initialized" in capfd.readouterr().err


def test_form_submission_is_intercepted(page, editor, stub_channel) -> None:
    flow = _flow(page, editor, stub_channel({"create_table": RESULT_MARKUP}))
    page.form.add_event_listener("submit", flow.on_submit)

    async def scenario() -> Event:
        await editor.initialize()
        event = Event("submit")
        page.form.dispatch(event)
        await page.settle()
        return event

    event = asyncio.run(scenario())

    assert event.default_prevented is True
    assert page.results.markup == RESULT_MARKUP


def test_racing_submissions_last_response_wins(page, editor, manual_channel, drain) -> None:
    flow = _flow(page, editor, manual_channel)

    async def scenario() -> None:
        await editor.initialize()
        editor.set_text("select 1")
        first = asyncio.create_task(flow.submit())
        await drain()
        editor.set_text("select 2")
        second = asyncio.create_task(flow.submit())
        await drain()

        manual_channel.respond("create_table", "<p>two</p>", call=1)
        await drain()
        manual_channel.respond("create_table", "<p>one</p>", call=0)
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert [args["query"] for _, args in manual_channel.calls] == ["select 1", "select 2"]
    assert page.results.markup == "<p>one</p>"


def test_racing_submissions_with_stale_discard(page, editor, manual_channel, drain) -> None:
    flow = _flow(page, editor, manual_channel, discard_stale=True)

    async def scenario() -> None:
        await editor.initialize()
        first = asyncio.create_task(flow.submit())
        await drain()
        second = asyncio.create_task(flow.submit())
        await drain()

        manual_channel.respond("create_table", "<p>two</p>", call=1)
        await drain()
        manual_channel.fail("create_table", "late failure", call=0)
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert page.results.markup == "<p>two</p>"
    assert page.overlays == ()
