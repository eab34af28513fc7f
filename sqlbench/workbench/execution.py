"""Query Execution Flow: editor text -> backend -> results or error modal."""

from __future__ import annotations

import itertools

from sqlbench.shared.exceptions import BackendError
from sqlbench.shared.logging import Logger, get_logger

from .bridge import HostBridge
from .editor import EditorSession
from .page import Event
from .results import ResultsPresenter
from .types import ExecutionResult, Failure, Success


class QueryExecutionFlow:
    """Run the editor's query through the bridge and present the outcome.

    There is no debounce, retry or cancellation. Overlapping submissions race
    and the last response to arrive wins, unless the presenter discards stale
    tokens.
    """

    def __init__(
        self,
        editor: EditorSession,
        bridge: HostBridge,
        presenter: ResultsPresenter,
        logger: Logger | None = None,
    ) -> None:
        self._editor = editor
        self._bridge = bridge
        self._presenter = presenter
        self._logger = logger or get_logger()
        self._tokens = itertools.count(1)

    async def on_submit(self, event: Event) -> ExecutionResult | None:
        event.prevent_default()
        return await self.submit()

    async def submit(self) -> ExecutionResult | None:
        """Execute the current query; returns None when the editor is not ready."""
        if not self._editor.ready:
            self._logger.error("Editor not initialized")
            return None

        query = self._editor.get_text()
        token = next(self._tokens)
        self._logger.debug(f"Submitting query #{token}: {query!r}")

        result: ExecutionResult
        try:
            result = Success(await self._bridge.create_table(query))
        except BackendError as exc:
            result = Failure(exc.message)

        self._presenter.present(result, token)
        return result
