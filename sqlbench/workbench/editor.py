"""Editor Session: owns the single text-editing component instance."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlbench.shared.config import DEFAULT_QUERY, EditorSettings
from sqlbench.shared.exceptions import EditorNotReadyError

from .notifier import escape_html
from .page import Region
from .types import SQL_LANGUAGE, EditorState


@dataclass(frozen=True, slots=True)
class ScrollbarOptions:
    vertical: str = "hidden"
    horizontal: str = "hidden"
    vertical_scrollbar_size: int = 0
    horizontal_scrollbar_size: int = 0


@dataclass(frozen=True, slots=True)
class EditorOptions:
    """Construction options handed to the text-editing component."""

    value: str = DEFAULT_QUERY
    language: str = SQL_LANGUAGE
    theme: str = "vs-light"
    automatic_layout: bool = True
    scroll_beyond_last_line: bool = False
    minimap_enabled: bool = False
    font_size: int = 14
    line_numbers: str = "on"
    word_wrap: str = "off"
    scrollbar: ScrollbarOptions = field(default_factory=ScrollbarOptions)
    padding_top: int = 10

    @classmethod
    def from_settings(cls, settings: EditorSettings) -> EditorOptions:
        return cls(
            value=settings.default_query,
            theme=settings.theme,
            font_size=settings.font_size,
        )

    def as_dict(self) -> dict[str, Any]:
        """Options in the component's own configuration shape."""
        return {
            "value": self.value,
            "language": self.language,
            "theme": self.theme,
            "automaticLayout": self.automatic_layout,
            "scrollBeyondLastLine": self.scroll_beyond_last_line,
            "minimap": {"enabled": self.minimap_enabled},
            "fontSize": self.font_size,
            "lineNumbers": self.line_numbers,
            "wordWrap": self.word_wrap,
            "scrollbar": {
                "vertical": self.scrollbar.vertical,
                "horizontal": self.scrollbar.horizontal,
                "verticalScrollbarSize": self.scrollbar.vertical_scrollbar_size,
                "horizontalScrollbarSize": self.scrollbar.horizontal_scrollbar_size,
            },
            "padding": {"top": self.padding_top},
        }


class TextEditor(Protocol):
    def get_value(self) -> str:
        ...

    def set_value(self, text: str) -> None:
        ...

    def dispose(self) -> None:
        ...


class EditorFactory(Protocol):
    async def create(self, container: Region, options: EditorOptions) -> TextEditor:
        ...


class BufferEditor:
    """Plain in-memory text buffer standing in for a rich editing widget."""

    def __init__(self, options: EditorOptions) -> None:
        self.options = options
        self._value = options.value
        self.disposed = False

    def get_value(self) -> str:
        return self._value

    def set_value(self, text: str) -> None:
        self._value = text

    def dispose(self) -> None:
        self.disposed = True


class BufferEditorFactory:
    """Mount a :class:`BufferEditor` into the container region."""

    async def create(self, container: Region, options: EditorOptions) -> TextEditor:
        # Component construction completes on a later loop iteration, like a module loader.
        await asyncio.sleep(0)
        container.replace(
            f'<div class="editor" data-language="{escape_html(options.language)}" '
            f'data-theme="{escape_html(options.theme)}"></div>'
        )
        return BufferEditor(options)


class EditorSession:
    """Single owner of the editor instance; get/set are only valid once ready."""

    def __init__(
        self,
        container: Region,
        factory: EditorFactory | None = None,
        options: EditorOptions | None = None,
    ) -> None:
        self._container = container
        self._factory = factory or BufferEditorFactory()
        self._options = options or EditorOptions()
        self._instance: TextEditor | None = None
        self._pending: asyncio.Task[TextEditor] | None = None
        self._generation = 0

    @property
    def options(self) -> EditorOptions:
        return self._options

    @property
    def ready(self) -> bool:
        return self._instance is not None

    async def initialize(self) -> None:
        """Construct the component; concurrent callers share one construction."""
        if self._instance is not None:
            return
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._factory.create(self._container, self._options))
        pending = self._pending
        generation = self._generation
        try:
            instance = await asyncio.shield(pending)
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise
        if generation != self._generation:
            # Disposed while construction was in flight.
            instance.dispose()
            raise EditorNotReadyError("Editor disposed during initialization")
        if self._instance is None:
            self._instance = instance

    def get_text(self) -> str:
        return self._require().get_value()

    def set_text(self, content: str) -> None:
        self._require().set_value(content)

    @property
    def state(self) -> EditorState:
        text = self._instance.get_value() if self._instance is not None else ""
        return EditorState(text=text, language=self._options.language, initialized=self.ready)

    def dispose(self) -> None:
        self._generation += 1
        if self._instance is not None:
            self._instance.dispose()
        self._instance = None
        self._pending = None

    def _require(self) -> TextEditor:
        if self._instance is None:
            raise EditorNotReadyError("Editor not initialized")
        return self._instance
