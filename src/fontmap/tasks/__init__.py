"""Background tasks and workers."""

from __future__ import annotations

from .index_build_worker import IndexBuildSignals, IndexBuildWorker
from .index_controller import IndexController

__all__ = ["IndexBuildSignals", "IndexBuildWorker", "IndexController"]
