"""Workbench Controller: wires the page, editor, browser and execution flow."""

from __future__ import annotations

from sqlbench.backend.commands import command_table
from sqlbench.shared.config import AppConfig
from sqlbench.shared.logging import Logger, get_logger

from .bridge import CommandChannel, HostBridge, LocalChannel
from .browser import FileBrowserSync
from .editor import EditorFactory, EditorOptions, EditorSession
from .execution import QueryExecutionFlow
from .notifier import ErrorNotifier
from .page import Page
from .results import ResultsPresenter
from .types import ExecutionResult


class Workbench:
    """Own one page and the components bound to its regions."""

    def __init__(
        self,
        channel: CommandChannel,
        *,
        page: Page | None = None,
        editor_factory: EditorFactory | None = None,
        editor_options: EditorOptions | None = None,
        discard_stale: bool = False,
        logger: Logger | None = None,
    ) -> None:
        self.logger = logger or get_logger()
        self.page = page or Page()
        self.bridge = HostBridge(channel)
        self.editor = EditorSession(self.page.editor_container, editor_factory, editor_options)
        self.notifier = ErrorNotifier(self.page)
        self.presenter = ResultsPresenter(
            self.page.results,
            self.notifier,
            discard_stale=discard_stale,
            logger=self.logger,
        )
        self.browser = FileBrowserSync(self.page.file_browser, self.bridge, self.editor, self.logger)
        self.execution = QueryExecutionFlow(self.editor, self.bridge, self.presenter, self.logger)
        self._started = False

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        logger: Logger | None = None,
        editor_factory: EditorFactory | None = None,
    ) -> Workbench:
        """Build a workbench served by the in-process DuckDB backend."""
        return cls(
            LocalChannel(command_table(config)),
            editor_factory=editor_factory,
            editor_options=EditorOptions.from_settings(config.editor),
            discard_stale=config.workbench.discard_stale_responses,
            logger=logger,
        )

    async def start(self) -> None:
        """Initialise the editor, populate the browser, then accept submissions.

        Initialisation failures propagate to the caller unhandled.
        """
        await self.editor.initialize()
        await self.browser.refresh()
        if not self._started:
            self.page.form.add_event_listener("submit", self.execution.on_submit)
            self._started = True
        self.logger.debug("Workbench started.")

    async def submit(self) -> ExecutionResult | None:
        return await self.execution.submit()

    async def refresh(self) -> None:
        await self.browser.refresh()

    async def open(self, path: str) -> None:
        await self.browser.open(path)

    def close(self) -> None:
        self.editor.dispose()
