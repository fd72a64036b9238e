"""Controller that rebuilds the published index in the background."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from ..engine import FountainMap
from ..models import Feature
from .index_build_worker import IndexBuildSignals, IndexBuildWorker

LOGGER = logging.getLogger(__name__)


class IndexController(QObject):
    """Schedule index rebuilds and swap in results for the latest request only.

    Queries keep hitting the previously published index until the newest build
    completes.  Starting another rebuild cancels the running one and any late
    result from it is ignored.
    """

    indexChanged = Signal(int)
    buildProgress = Signal(int, int)
    buildFailed = Signal(str)

    def __init__(
        self,
        fountain_map: FountainMap,
        *,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._map = fountain_map
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        # Workers stay referenced until they report back, even when cancelled.
        self._active: Dict[int, IndexBuildWorker] = {}
        self._request_id = 0

    @property
    def fountain_map(self) -> FountainMap:
        return self._map

    @property
    def current_request_id(self) -> int:
        return self._request_id

    def is_building(self) -> bool:
        return self._request_id in self._active

    def set_features(self, features: Iterable[Feature]) -> int:
        """Start rebuilding the index for *features* and return the request id."""

        self.cancel()
        generation, builder = self._map.begin_rebuild(features)
        self._request_id = generation

        signals = IndexBuildSignals()
        signals.progress.connect(self._handle_progress)
        signals.finished.connect(self._handle_finished)
        signals.cancelled.connect(self._handle_cancelled)
        signals.error.connect(self._handle_error)
        worker = IndexBuildWorker(generation, builder, signals)
        self._active[generation] = worker
        self._thread_pool.start(worker)
        return generation

    def cancel(self) -> None:
        """Interrupt running builds; the published index stays in place."""

        for worker in self._active.values():
            worker.cancel()

    def shutdown(self) -> None:
        """Stop outstanding work so the application can exit cleanly."""

        self.cancel()
        self._thread_pool.waitForDone()
        self._active.clear()

    def _handle_progress(self, request_id: int, completed: int, total: int) -> None:
        if request_id == self._request_id:
            self.buildProgress.emit(completed, total)

    def _handle_finished(self, request_id: int, index: object) -> None:
        self._active.pop(request_id, None)
        if request_id != self._request_id:
            return
        if self._map.publish(request_id, index):  # type: ignore[arg-type]
            self.indexChanged.emit(request_id)

    def _handle_cancelled(self, request_id: int) -> None:
        self._active.pop(request_id, None)

    def _handle_error(self, request_id: int, message: str) -> None:
        self._active.pop(request_id, None)
        if request_id != self._request_id:
            return
        LOGGER.error("Index rebuild %d failed: %s", request_id, message)
        self.buildFailed.emit(message)


__all__ = ["IndexController"]
