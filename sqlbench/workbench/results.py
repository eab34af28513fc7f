"""Results Presenter: routes an execution outcome to the results region or the notifier."""

from __future__ import annotations

from sqlbench.shared.logging import Logger, get_logger

from .notifier import ErrorNotifier
from .page import Region
from .types import ExecutionResult, Failure, Success


class ResultsPresenter:
    """Apply execution outcomes to the page.

    Backend markup is trusted and inserted verbatim; only failure messages
    are escaped (by the notifier). With ``discard_stale`` a response whose
    token is older than the last applied one is dropped instead of
    overwriting newer output.
    """

    def __init__(
        self,
        region: Region,
        notifier: ErrorNotifier,
        *,
        discard_stale: bool = False,
        logger: Logger | None = None,
    ) -> None:
        self._region = region
        self._notifier = notifier
        self._discard_stale = discard_stale
        self._logger = logger or get_logger()
        self._last_applied = 0

    @property
    def last_applied(self) -> int:
        return self._last_applied

    def present(self, result: ExecutionResult, token: int | None = None) -> bool:
        """Apply ``result``; return False when it was dropped as stale."""
        if token is not None:
            if self._discard_stale and token < self._last_applied:
                self._logger.debug(
                    f"Dropping stale response #{token} (already showing #{self._last_applied})."
                )
                return False
            self._last_applied = max(self._last_applied, token)

        if isinstance(result, Success):
            self._region.replace(result.markup)
        elif isinstance(result, Failure):
            self._notifier.show(result.message)
        else:  # pragma: no cover - ExecutionResult is a closed union
            raise TypeError(f"Unsupported execution result {result!r}")
        return True
