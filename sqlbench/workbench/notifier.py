"""Error Notifier: one dismissible modal per failure message."""

from __future__ import annotations

from sqlbench.shared.templating import render_template

from .page import Overlay, Page

MODAL_TEMPLATE_NAME = "error_modal.html.j2"

# Order matters: "&" first so entities produced below are not re-escaped.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(unsafe: str) -> str:
    """Escape ``& < > " '`` to their entities; nothing else is touched."""
    escaped = unsafe
    for raw, entity in _HTML_ESCAPES:
        escaped = escaped.replace(raw, entity)
    return escaped


class ErrorNotifier:
    """Append an error overlay to the page for every ``show`` call."""

    def __init__(self, page: Page, title: str = "Error") -> None:
        self._page = page
        self._title = title

    def show(self, message: str) -> Overlay:
        markup = render_template(MODAL_TEMPLATE_NAME, title=self._title, message=escape_html(message))
        return self._page.append_overlay(markup)
