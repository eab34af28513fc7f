"""Public exports for the workbench controller."""

from .bridge import ChannelError, CommandChannel, HostBridge, LocalChannel
from .browser import FileBrowserSync
from .controller import Workbench
from .editor import BufferEditorFactory, EditorOptions, EditorSession
from .execution import QueryExecutionFlow
from .notifier import ErrorNotifier, escape_html
from .page import Event, Page
from .results import ResultsPresenter
from .types import EditorState, ExecutionResult, Failure, ScriptEntry, Success

__all__ = [
    "BufferEditorFactory",
    "ChannelError",
    "CommandChannel",
    "EditorOptions",
    "EditorSession",
    "EditorState",
    "ErrorNotifier",
    "Event",
    "ExecutionResult",
    "Failure",
    "FileBrowserSync",
    "HostBridge",
    "LocalChannel",
    "Page",
    "QueryExecutionFlow",
    "ResultsPresenter",
    "ScriptEntry",
    "Success",
    "Workbench",
    "escape_html",
]
