"""Tests for the background batch worker and channel supersession."""

from __future__ import annotations

import threading
from typing import Any
from unittest.mock import patch

import pytest

from zone_geometry.core.config import GeometryConfig
from zone_geometry.core.exceptions import BatchCancelledError
from zone_geometry.models.entity import EntityRecord
from zone_geometry.models.projection import ProjectionParameters
from zone_geometry.models.vertex import PlanarPoint
from zone_geometry.orchestrators import worker as worker_module
from zone_geometry.orchestrators.worker import BatchHandle, BatchWorker

TIMEOUT = 5.0


def _entities(*keys: str) -> list[EntityRecord]:
    return [EntityRecord(key=k, planar_point=PlanarPoint(505_000.0, 305_000.0)) for k in keys]


class _Gate:
    """Blocks every run_batch call until released."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self._real = worker_module.run_batch

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        self.started.set()
        self.release.wait(TIMEOUT)
        return self._real(*args, **kwargs)


class TestBatchWorker:
    def test_returns_batch(self, morocco_params: ProjectionParameters) -> None:
        with BatchWorker() as worker:
            handle = worker.submit(_entities("a", "b"), morocco_params, correlation_id="req-1")
            batch = handle.result(timeout=TIMEOUT)
        assert [f.key for f in batch.features] == ["a", "b"]
        assert handle.correlation_id == "req-1"
        assert handle.done()

    def test_snapshot_taken_at_submit(self, morocco_params: ProjectionParameters) -> None:
        gate = _Gate()
        records = _entities("a")
        with patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate):
            worker = BatchWorker()
            handle = worker.submit(records, morocco_params)
            records.append(_entities("late")[0])
            gate.release.set()
            batch = handle.result(timeout=TIMEOUT)
            worker.shutdown()
        assert [f.key for f in batch.features] == ["a"]

    def test_tolerance_override(self, morocco_params: ProjectionParameters) -> None:
        with patch("zone_geometry.orchestrators.worker.run_batch") as mock_run:
            worker = BatchWorker(tolerance=0.5)
            worker.submit([], morocco_params).result(timeout=TIMEOUT)
            worker.submit([], morocco_params, tolerance=0.25).result(timeout=TIMEOUT)
            worker.shutdown()
        assert mock_run.call_args_list[0].kwargs["tolerance"] == 0.5
        assert mock_run.call_args_list[1].kwargs["tolerance"] == 0.25

    def test_invalid_max_workers(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            BatchWorker(max_workers=0)

    def test_from_config(self) -> None:
        config = GeometryConfig(simplify_tolerance_deg=0.001, worker_max_workers=3)
        worker = BatchWorker.from_config(config)
        try:
            assert worker.tolerance == 0.001
            assert worker._executor._max_workers == 3
        finally:
            worker.shutdown()


class TestSupersession:
    def test_newer_batch_on_same_channel_wins(self, morocco_params: ProjectionParameters) -> None:
        gate = _Gate()
        with patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate):
            worker = BatchWorker(max_workers=2)
            first = worker.submit(_entities("old"), morocco_params, channel="home-map")
            assert gate.started.wait(TIMEOUT)
            second = worker.submit(_entities("new"), morocco_params, channel="home-map")
            gate.release.set()

            with pytest.raises(BatchCancelledError):
                first.result(timeout=TIMEOUT)
            batch = second.result(timeout=TIMEOUT)
            worker.shutdown()

        assert first.cancelled
        assert not second.cancelled
        assert [f.key for f in batch.features] == ["new"]

    def test_different_channels_are_independent(self, morocco_params: ProjectionParameters) -> None:
        with BatchWorker(max_workers=2) as worker:
            zones = worker.submit(_entities("zone"), morocco_params, channel="zones")
            parcels = worker.submit(_entities("parcel"), morocco_params, channel="parcels")
            assert zones.result(timeout=TIMEOUT).features[0].key == "zone"
            assert parcels.result(timeout=TIMEOUT).features[0].key == "parcel"

    def test_unchannelled_batches_never_supersede(self, morocco_params: ProjectionParameters) -> None:
        with BatchWorker() as worker:
            first = worker.submit(_entities("a"), morocco_params)
            second = worker.submit(_entities("b"), morocco_params)
            assert first.result(timeout=TIMEOUT).features[0].key == "a"
            assert second.result(timeout=TIMEOUT).features[0].key == "b"

    def test_supersession_is_logged(
        self, morocco_params: ProjectionParameters, caplog: pytest.LogCaptureFixture
    ) -> None:
        gate = _Gate()
        with (
            caplog.at_level("INFO", logger="zone_geometry.orchestrators.worker"),
            patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate),
        ):
            worker = BatchWorker()
            worker.submit(_entities("a"), morocco_params, channel="map", correlation_id="r1")
            worker.submit(_entities("b"), morocco_params, channel="map", correlation_id="r2")
            gate.release.set()
            worker.shutdown()
        assert "Batch superseded" in caplog.text
        assert "previous=r1" in caplog.text


class TestBatchHandle:
    def test_cancel_discards_result(self, morocco_params: ProjectionParameters) -> None:
        gate = _Gate()
        with patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate):
            worker = BatchWorker()
            handle = worker.submit(_entities("a"), morocco_params, correlation_id="req-9")
            handle.cancel()
            gate.release.set()
            with pytest.raises(BatchCancelledError) as excinfo:
                handle.result(timeout=TIMEOUT)
            worker.shutdown()
        assert excinfo.value.correlation_id == "req-9"
        assert excinfo.value.category == "cancelled"

    def test_done_callback_receives_handle(self, morocco_params: ProjectionParameters) -> None:
        seen: list[BatchHandle] = []
        finished = threading.Event()

        def on_done(handle: BatchHandle) -> None:
            seen.append(handle)
            finished.set()

        with BatchWorker() as worker:
            handle = worker.submit(_entities("a"), morocco_params)
            handle.add_done_callback(on_done)
            assert finished.wait(TIMEOUT)
        assert seen == [handle]

    def test_shutdown_cancel_pending(self, morocco_params: ProjectionParameters) -> None:
        gate = _Gate()
        with patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate):
            worker = BatchWorker()
            handle = worker.submit(_entities("a"), morocco_params, channel="map")
            assert gate.started.wait(TIMEOUT)
            worker.shutdown(wait=False, cancel_pending=True)
            gate.release.set()
        assert handle.cancelled
        with pytest.raises(BatchCancelledError):
            handle.result()

    def test_shutdown_cancels_unchannelled_batches(self, morocco_params: ProjectionParameters) -> None:
        gate = _Gate()
        with patch("zone_geometry.orchestrators.worker.run_batch", side_effect=gate):
            worker = BatchWorker()
            running = worker.submit(_entities("a"), morocco_params)
            assert gate.started.wait(TIMEOUT)
            queued = worker.submit(_entities("b"), morocco_params)
            worker.shutdown(wait=False, cancel_pending=True)
            gate.release.set()
        assert running.cancelled
        assert queued.cancelled
        for handle in (running, queued):
            with pytest.raises(BatchCancelledError):
                handle.result()

    def test_finished_batches_are_released(self, morocco_params: ProjectionParameters) -> None:
        with BatchWorker() as worker:
            handle = worker.submit(_entities("a"), morocco_params)
            handle.result(timeout=TIMEOUT)
            finished = threading.Event()
            handle.add_done_callback(lambda _handle: finished.set())
            assert finished.wait(TIMEOUT)
            with worker._lock:
                assert handle not in worker._live
