"""In-process model of the workbench page.

The controller talks to four fixed regions (editor container, results,
file browser, submission form) plus a stack of body overlays. Regions are
only ever replaced wholesale: ``Region.replace`` re-parses the markup and
drops every element (and its listeners) that belonged to the old markup.
"""

from __future__ import annotations

import asyncio
import inspect
from html.parser import HTMLParser
from typing import Any, Awaitable, Callable

from sqlbench.shared.exceptions import WorkbenchError
from sqlbench.shared.templating import render_template

EDITOR_CONTAINER_ID = "monaco-editor-container"
RESULTS_CONTAINER_ID = "table-container"
FILE_BROWSER_ID = "file-explorer"
QUERY_FORM_ID = "create-table-form"
PAGE_TEMPLATE_NAME = "page.html.j2"

Handler = Callable[["Event"], Any]


class Event:
    """A dispatched UI event."""

    def __init__(self, type: str, target: Element | None = None) -> None:
        self.type = type
        self.target = target
        self.current_target: Element | None = None
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def __repr__(self) -> str:
        return f"Event(type={self.type!r}, default_prevented={self.default_prevented})"


class Element:
    """A node that can carry event listeners."""

    def __init__(
        self,
        tag: str,
        attrs: dict[str, str] | None = None,
        *,
        page: Page | None = None,
    ) -> None:
        self.tag = tag
        self.attrs = dict(attrs or {})
        self._page = page
        self._text_parts: list[str] = []
        self._listeners: dict[str, list[Handler]] = {}

    @property
    def id(self) -> str | None:
        return self.attrs.get("id")

    @property
    def classes(self) -> frozenset[str]:
        return frozenset(self.attrs.get("class", "").split())

    @property
    def dataset(self) -> dict[str, str]:
        return {
            name[len("data-"):]: value
            for name, value in self.attrs.items()
            if name.startswith("data-")
        }

    @property
    def text(self) -> str:
        return "".join(self._text_parts).strip()

    def matches(self, selector: str) -> bool:
        """Match ``tag``, ``#id``, ``.class`` or ``tag.class`` selectors."""
        if selector.startswith("#"):
            return self.id == selector[1:]
        tag, _, class_name = selector.partition(".")
        if tag and tag != self.tag:
            return False
        return not class_name or class_name in self.classes

    def add_event_listener(self, event_type: str, handler: Handler) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def listeners(self, event_type: str) -> tuple[Handler, ...]:
        return tuple(self._listeners.get(event_type, ()))

    def dispatch(self, event: Event) -> list[asyncio.Task[Any]]:
        """Invoke listeners in registration order.

        Coroutine handlers are scheduled on the page and not awaited here.
        """
        if event.target is None:
            event.target = self
        event.current_target = self
        scheduled: list[asyncio.Task[Any]] = []
        for handler in self.listeners(event.type):
            outcome = handler(event)
            if inspect.isawaitable(outcome):
                if self._page is None:
                    raise WorkbenchError(f"Element <{self.tag}> is not attached to a page.")
                scheduled.append(self._page.schedule(outcome))
        return scheduled

    def click(self) -> list[asyncio.Task[Any]]:
        return self.dispatch(Event("click"))

    def __repr__(self) -> str:
        return f"Element(tag={self.tag!r}, attrs={self.attrs!r})"


class _SelectableParser(HTMLParser):
    """Collect every element that carries a ``class`` or ``id`` attribute."""

    def __init__(self, page: Page | None) -> None:
        super().__init__(convert_charrefs=True)
        self._page = page
        self._stack: list[tuple[str, Element | None]] = []
        self.elements: list[Element] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = self._make_element(tag, attrs)
        self._stack.append((tag, element))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._make_element(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index][0] == tag:
                del self._stack[index:]
                return

    def handle_data(self, data: str) -> None:
        for _, element in self._stack:
            if element is not None:
                element._text_parts.append(data)

    def _make_element(self, tag: str, attrs: list[tuple[str, str | None]]) -> Element | None:
        attributes = {name: value or "" for name, value in attrs}
        if "class" not in attributes and "id" not in attributes:
            return None
        element = Element(tag, attributes, page=self._page)
        self.elements.append(element)
        return element


def parse_elements(markup: str, page: Page | None = None) -> list[Element]:
    """Parse ``markup`` into its addressable elements, in document order."""
    parser = _SelectableParser(page)
    parser.feed(markup)
    parser.close()
    return parser.elements


class Region:
    """A page region whose content is replaced wholesale, never patched."""

    def __init__(self, region_id: str, page: Page) -> None:
        self.id = region_id
        self._page = page
        self._markup = ""
        self._elements: list[Element] = []

    @property
    def markup(self) -> str:
        return self._markup

    @property
    def elements(self) -> tuple[Element, ...]:
        return tuple(self._elements)

    def replace(self, markup: str) -> None:
        self._elements = parse_elements(markup, self._page)
        self._markup = markup

    def query_selector_all(self, selector: str) -> list[Element]:
        return [element for element in self._elements if element.matches(selector)]

    def __repr__(self) -> str:
        return f"Region(id={self.id!r}, elements={len(self._elements)})"


DISMISS_SELECTOR = ".modal-dismiss"


class Overlay:
    """One modal appended to the page body.

    Clicking any ``.modal-dismiss`` element inside the markup dismisses it.
    """

    def __init__(self, markup: str, page: Page) -> None:
        self.markup = markup
        self._page = page
        self._elements = parse_elements(markup, page)
        for element in self.query_selector_all(DISMISS_SELECTOR):
            element.add_event_listener("click", self._on_dismiss)

    @property
    def elements(self) -> tuple[Element, ...]:
        return tuple(self._elements)

    def query_selector_all(self, selector: str) -> list[Element]:
        return [element for element in self._elements if element.matches(selector)]

    @property
    def attached(self) -> bool:
        return self in self._page.overlays

    def dismiss(self) -> None:
        """Remove the overlay entirely. Dismissing twice is a no-op."""
        self._page._remove_overlay(self)

    def _on_dismiss(self, event: Event) -> None:
        event.prevent_default()
        self.dismiss()


class Page:
    """The workbench document: regions, form, overlays and pending handlers."""

    def __init__(self, title: str = "SQL Workbench") -> None:
        self.title = title
        self._regions = {
            region_id: Region(region_id, self)
            for region_id in (EDITOR_CONTAINER_ID, RESULTS_CONTAINER_ID, FILE_BROWSER_ID)
        }
        self._form = Element("form", {"id": QUERY_FORM_ID}, page=self)
        self._overlays: list[Overlay] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def region(self, region_id: str) -> Region:
        try:
            return self._regions[region_id]
        except KeyError as exc:
            raise WorkbenchError(f"Page has no region '{region_id}'.") from exc

    @property
    def editor_container(self) -> Region:
        return self._regions[EDITOR_CONTAINER_ID]

    @property
    def results(self) -> Region:
        return self._regions[RESULTS_CONTAINER_ID]

    @property
    def file_browser(self) -> Region:
        return self._regions[FILE_BROWSER_ID]

    @property
    def form(self) -> Element:
        return self._form

    @property
    def overlays(self) -> tuple[Overlay, ...]:
        return tuple(self._overlays)

    def append_overlay(self, markup: str) -> Overlay:
        overlay = Overlay(markup, self)
        self._overlays.append(overlay)
        return overlay

    def _remove_overlay(self, overlay: Overlay) -> None:
        if overlay in self._overlays:
            self._overlays.remove(overlay)

    def schedule(self, awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
        """Run a handler coroutine as a fire-and-forget task on the running loop."""
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def settle(self) -> None:
        """Wait until every scheduled handler, including ones they spawn, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def render(self) -> str:
        """Render the whole document, region markup inserted as-is."""
        return render_template(
            PAGE_TEMPLATE_NAME,
            title=self.title,
            editor_markup=self.editor_container.markup,
            browser_markup=self.file_browser.markup,
            results_markup=self.results.markup,
            overlays=[overlay.markup for overlay in self._overlays],
            form_id=QUERY_FORM_ID,
        )
