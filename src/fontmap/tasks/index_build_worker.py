"""Background worker that builds a cluster index off the GUI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ..core.cluster_index import ClusterIndexBuilder

LOGGER = logging.getLogger(__name__)


class IndexBuildSignals(QObject):
    """Qt signal container used by :class:`IndexBuildWorker` to report progress."""

    started = Signal(int)
    progress = Signal(int, int, int)
    finished = Signal(int, object)
    cancelled = Signal(int)
    error = Signal(int, str)


class IndexBuildWorker(QRunnable):
    """Run a :class:`ClusterIndexBuilder` level by level on a pool thread."""

    def __init__(
        self,
        request_id: int,
        builder: ClusterIndexBuilder,
        signals: IndexBuildSignals,
    ) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._request_id = int(request_id)
        self._builder = builder
        self._signals = signals
        self._is_cancelled = False

    @property
    def signals(self) -> IndexBuildSignals:
        """Return the signal bundle associated with the worker."""

        return self._signals

    @property
    def request_id(self) -> int:
        return self._request_id

    def cancel(self) -> None:
        """Request cancellation; checked between zoom levels."""

        self._is_cancelled = True

    def run(self) -> None:
        """Build the index and emit it together with the request id."""

        self._signals.started.emit(self._request_id)
        try:
            for step in self._builder.steps():
                self._signals.progress.emit(self._request_id, step.completed, step.total)
                if self._is_cancelled:
                    LOGGER.debug("Index build %d cancelled at zoom %d", self._request_id, step.zoom)
                    self._signals.cancelled.emit(self._request_id)
                    return
        except Exception as exc:  # pragma: no cover - surfaced through the error signal
            LOGGER.exception("Index build %d failed", self._request_id)
            self._signals.error.emit(self._request_id, str(exc))
            return
        self._signals.finished.emit(self._request_id, self._builder.result)


__all__ = ["IndexBuildSignals", "IndexBuildWorker"]
