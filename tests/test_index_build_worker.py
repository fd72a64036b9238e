import os

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for background build tests", exc_type=ImportError)

from PySide6.QtCore import QCoreApplication, QThreadPool

from fontmap.core.cluster_index import ClusterIndex, ClusterIndexBuilder
from fontmap.engine import FountainMap
from fontmap.models import Coordinate, Feature
from fontmap.settings import ClusterOptions
from fontmap.tasks import IndexBuildSignals, IndexBuildWorker, IndexController


@pytest.fixture(scope="module")
def qapp() -> QCoreApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def _record(signal) -> list[tuple]:
    received: list[tuple] = []
    signal.connect(lambda *args: received.append(args))
    return received


def _spread(count: int) -> list[Feature]:
    return [
        Feature(id=f"f{i}", coordinate=Coordinate(0.5 + (i % 10) * 0.2, 40.6 + (i // 10) * 0.2))
        for i in range(count)
    ]


def test_worker_reports_progress_and_result(qapp, three_points) -> None:
    options = ClusterOptions(cluster_max_zoom=5, max_zoom=8)
    builder = ClusterIndexBuilder(three_points, options)
    signals = IndexBuildSignals()
    started = _record(signals.started)
    progress = _record(signals.progress)
    finished = _record(signals.finished)
    worker = IndexBuildWorker(7, builder, signals)

    worker.run()

    assert started == [(7,)]
    assert [step[1] for step in progress] == list(range(1, builder.total_steps + 1))
    assert all(step[0] == 7 and step[2] == builder.total_steps for step in progress)
    assert len(finished) == 1
    request_id, index = finished[0]
    assert request_id == 7
    assert isinstance(index, ClusterIndex)
    assert index.feature_count == 3


def test_cancelled_worker_emits_no_result(qapp, three_points) -> None:
    signals = IndexBuildSignals()
    cancelled = _record(signals.cancelled)
    finished = _record(signals.finished)
    worker = IndexBuildWorker(3, ClusterIndexBuilder(three_points), signals)

    worker.cancel()
    worker.run()

    assert cancelled == [(3,)]
    assert finished == []


def test_controller_publishes_latest_request_only(qapp, three_points) -> None:
    pool = QThreadPool()
    fountain_map = FountainMap()
    controller = IndexController(fountain_map, thread_pool=pool)
    changed = _record(controller.indexChanged)

    first = controller.set_features(_spread(400))
    second = controller.set_features(three_points)
    pool.waitForDone()
    qapp.processEvents()

    assert second > first
    assert controller.current_request_id == second
    assert changed == [(second,)]
    assert fountain_map.generation == second
    assert fountain_map.index.feature_count == 3
    assert not controller.is_building()
    controller.shutdown()


def test_queries_keep_old_index_while_building(qapp, three_points) -> None:
    pool = QThreadPool()
    fountain_map = FountainMap(three_points)
    controller = IndexController(fountain_map, thread_pool=pool)
    before = fountain_map.snapshot()

    controller.set_features(_spread(50))

    # Nothing is published until the queued result reaches the controller.
    pool.waitForDone()
    assert fountain_map.snapshot() is before

    qapp.processEvents()

    assert fountain_map.index.feature_count == 50
    controller.shutdown()
