"""Background batch worker.

Offloads ``run_batch`` to a thread pool so that large batches (hundreds
of polygons) do not block interactive request handling. Results come
back through a ``concurrent.futures.Future`` wrapped in a ``BatchHandle``.

Batches may be submitted on a named *channel* (e.g. one per map view).
A newer submission on the same channel supersedes the in-flight one:
the older batch is told to stop at its next entity boundary and its
results are discarded. A channel forgets a batch once it completes.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from zone_geometry.core.constants import DEFAULT_SIMPLIFY_TOLERANCE_DEG
from zone_geometry.core.exceptions import BatchCancelledError
from zone_geometry.orchestrators.pipeline import run_batch

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from zone_geometry.core.config import GeometryConfig
    from zone_geometry.models.entity import EntityRecord
    from zone_geometry.models.feature import FeatureBatch
    from zone_geometry.models.projection import ProjectionParameters

logger = logging.getLogger("zone_geometry.orchestrators.worker")


class BatchHandle:
    """Caller-side handle on one submitted batch."""

    def __init__(
        self,
        future: Future[FeatureBatch],
        cancel_event: threading.Event,
        *,
        channel: str | None = None,
        correlation_id: str = "",
    ) -> None:
        self._future = future
        self._cancel_event = cancel_event
        self.channel = channel
        self.correlation_id = correlation_id

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> None:
        """Stop the batch at its next entity boundary and discard its results."""
        self._cancel_event.set()
        self._future.cancel()

    def add_done_callback(self, fn: Callable[[BatchHandle], Any]) -> None:
        """Call *fn* with this handle once the batch finishes or is cancelled."""
        self._future.add_done_callback(lambda _future: fn(self))

    def result(self, timeout: float | None = None) -> FeatureBatch:
        """Wait for and return the batch result.

        Raises:
            BatchCancelledError: If the batch was cancelled or superseded.
            TimeoutError: If *timeout* elapses first.
        """
        if self.cancelled:
            raise BatchCancelledError("Batch was superseded", correlation_id=self.correlation_id)
        try:
            batch = self._future.result(timeout=timeout)
        except CancelledError as exc:
            raise BatchCancelledError("Batch was cancelled", correlation_id=self.correlation_id) from exc
        if self.cancelled:
            raise BatchCancelledError("Batch was superseded", correlation_id=self.correlation_id)
        return batch


class BatchWorker:
    """Thread-pool executor for geometry batches.

    Usage::

        with BatchWorker(max_workers=2) as worker:
            handle = worker.submit(records, get_parameters("MA"), channel="home-map")
            batch = handle.result()
    """

    def __init__(
        self,
        max_workers: int = 1,
        *,
        tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    ) -> None:
        if max_workers < 1:
            msg = f"max_workers must be >= 1, got {max_workers}"
            raise ValueError(msg)
        self.tolerance = tolerance
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="zone-geometry")
        self._channels: dict[str, BatchHandle] = {}
        self._live: set[BatchHandle] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: GeometryConfig) -> BatchWorker:
        return cls(config.worker_max_workers, tolerance=config.simplify_tolerance_deg)

    def submit(
        self,
        entities: Iterable[EntityRecord | dict[str, Any]],
        params: ProjectionParameters,
        *,
        channel: str | None = None,
        tolerance: float | None = None,
        correlation_id: str = "",
    ) -> BatchHandle:
        """Queue a batch and return its handle.

        The entity iterable is materialised here, on the caller's thread,
        so later changes to the caller's collection cannot leak in.

        Args:
            entities: Records to process.
            params: Projection parameters supplied with the batch.
            channel: Optional supersession key; a newer batch on the same
                channel cancels the previous one.
            tolerance: RDP tolerance override (degrees).
            correlation_id: Request identifier for logs and errors.
        """
        snapshot = list(entities)
        cancel_event = threading.Event()
        future = self._executor.submit(
            run_batch,
            snapshot,
            params,
            tolerance=self.tolerance if tolerance is None else tolerance,
            cancel_event=cancel_event,
            correlation_id=correlation_id,
        )
        handle = BatchHandle(future, cancel_event, channel=channel, correlation_id=correlation_id)

        previous = None
        with self._lock:
            self._live.add(handle)
            if channel is not None:
                previous = self._channels.get(channel)
                self._channels[channel] = handle
        if previous is not None:
            previous.cancel()
            logger.info(
                "Batch superseded | channel=%s | previous=%s | current=%s",
                channel,
                previous.correlation_id,
                correlation_id,
            )
        future.add_done_callback(lambda _future: self._release(handle))

        logger.debug(
            "Batch submitted | entities=%d | country=%s | channel=%s | correlation_id=%s",
            len(snapshot),
            params.country_code,
            channel,
            correlation_id,
        )
        return handle

    def _release(self, handle: BatchHandle) -> None:
        with self._lock:
            self._live.discard(handle)
            if handle.channel is not None and self._channels.get(handle.channel) is handle:
                del self._channels[handle.channel]

    def shutdown(self, *, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting batches; optionally cancel every one still queued or running."""
        if cancel_pending:
            with self._lock:
                handles = list(self._live)
            for handle in handles:
                handle.cancel()
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)

    def __enter__(self) -> BatchWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
