"""File Browser Sync: keeps the script listing current and loads selections."""

from __future__ import annotations

from sqlbench.shared.exceptions import BackendError, WorkbenchError
from sqlbench.shared.logging import Logger, get_logger

from .bridge import HostBridge
from .editor import EditorSession
from .page import Element, Event, Region
from .types import ScriptEntry

SCRIPT_SELECTOR = ".sql-file"
PATH_ATTRIBUTE = "path"


class FileBrowserSync:
    """Populate the browser region and wire script selection into the editor.

    Listing and read failures are logged to the diagnostic channel only;
    they never raise a modal.
    """

    def __init__(
        self,
        region: Region,
        bridge: HostBridge,
        editor: EditorSession,
        logger: Logger | None = None,
    ) -> None:
        self._region = region
        self._bridge = bridge
        self._editor = editor
        self._logger = logger or get_logger()

    @property
    def entries(self) -> list[ScriptEntry]:
        return [
            ScriptEntry(path=element.dataset.get(PATH_ATTRIBUTE, ""), label=element.text)
            for element in self._region.query_selector_all(SCRIPT_SELECTOR)
        ]

    async def refresh(self) -> None:
        try:
            markup = await self._bridge.list_files()
        except BackendError as exc:
            self._logger.error(f"Error updating file explorer: {exc.message}")
            return

        # Replacing the region drops the old elements and their listeners with it.
        self._region.replace(markup)
        for element in self._region.query_selector_all(SCRIPT_SELECTOR):
            element.add_event_listener("click", self.select)
        self._logger.debug(f"File explorer refreshed ({len(self.entries)} scripts).")

    async def select(self, event: Event) -> None:
        event.prevent_default()
        element = event.current_target
        path = element.dataset.get(PATH_ATTRIBUTE) if element is not None else None
        if not path:
            self._logger.error("Selected script has no path.")
            return
        await self._load(path)

    async def open(self, path: str) -> None:
        """Select the listed script at ``path`` as if it had been clicked."""
        element = self._find(path)
        event = Event("click", target=element)
        event.current_target = element
        await self.select(event)

    def _find(self, path: str) -> Element:
        for element in self._region.query_selector_all(SCRIPT_SELECTOR):
            if element.dataset.get(PATH_ATTRIBUTE) == path:
                return element
        raise WorkbenchError(f"Script '{path}' is not listed in the file explorer.")

    async def _load(self, path: str) -> None:
        try:
            content = await self._bridge.read_file(path)
        except BackendError as exc:
            self._logger.error(f"Error reading {path}: {exc.message}")
            return
        self._editor.set_text(content)
        self._logger.debug(f"Loaded {path} into the editor.")
