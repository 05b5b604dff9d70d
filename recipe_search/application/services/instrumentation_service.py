"""
Instrumentation of search operations.

Every wrapped operation produces a ``PerformanceRecord`` and a
``SearchEvent``. Records go into a bounded in-process queue drained by a
background task, so writing analytics never delays or fails a request.
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Union

from ...core.entities import PerformanceRecord, SearchEvent
from ...core.interfaces import InstrumentationSinkInterface
from ...shared.logging import LoggerInterface, configure_logging

AnalyticsRecord = Union[PerformanceRecord, SearchEvent]


@dataclass
class Measurement:
    """Values the wrapped operation reports back before it finishes."""
    result_count: int = 0
    cache_hit: bool = False


class InstrumentationService:
    """
    Fire-and-forget analytics for search operations.

    ``record`` never blocks and never raises: when the queue is full the
    record is dropped with a warning, and sink failures are logged by the
    consumer and discarded.
    """

    def __init__(
        self,
        sink: InstrumentationSinkInterface,
        queue_size: int = 1000,
        slow_query_threshold_ms: float = 1000,
        enabled: bool = True,
        logger: Optional[LoggerInterface] = None
    ):
        """
        Initialize the service.

        Args:
            sink: Destination for records
            queue_size: Maximum number of records waiting to be written
            slow_query_threshold_ms: Operations slower than this are logged as warnings
            enabled: When false, nothing is queued
            logger: Logger for local diagnostics
        """
        self.sink = sink
        self.slow_query_threshold_ms = slow_query_threshold_ms
        self.enabled = enabled
        self.logger = logger or configure_logging(__name__)
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._consumer: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        """Number of records waiting to be written."""
        return self._queue.qsize()

    async def start(self) -> None:
        """Start the background consumer on the running loop."""
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.create_task(self._consume())

    async def flush(self) -> None:
        """Wait until every queued record has been handed to the sink."""
        if self._consumer is not None and not self._consumer.done():
            await self._queue.join()

    async def stop(self) -> None:
        """Drain the queue and stop the consumer."""
        await self.flush()
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None

    def record(self, record: AnalyticsRecord) -> None:
        """
        Enqueue a record without waiting.

        Args:
            record: Performance record or search event
        """
        if not self.enabled:
            return
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self.logger.warning(
                "Analytics queue full, dropping record",
                record_type=type(record).__name__,
                queue_size=self._queue.maxsize
            )

    @contextlib.contextmanager
    def measure(
        self,
        operation: str,
        query: str = "",
        filters: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None
    ) -> Iterator[Measurement]:
        """
        Time the wrapped block and emit its records.

        Records are emitted whether the block succeeds or raises; a failure
        is recorded with ``successful=False`` and the error message, then
        re-raised unchanged.

        Args:
            operation: Operation name, e.g. ``"search"``
            query: Search text or other query description
            filters: Filters applied by the operation
            user_id: Optional user id
            session_id: Optional session id, ``"anonymous"`` when absent

        Yields:
            Measurement: Set ``result_count`` before the block ends
        """
        measurement = Measurement()
        error: Optional[BaseException] = None
        started = time.perf_counter()
        try:
            yield measurement
        except BaseException as e:
            error = e
            raise
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._emit(
                operation=operation,
                query=query or "",
                filters=filters or {},
                user_id=user_id,
                session_id=session_id or "anonymous",
                measurement=measurement,
                elapsed_ms=elapsed_ms,
                error=error
            )

    def _emit(
        self,
        operation: str,
        query: str,
        filters: Dict[str, Any],
        user_id: Optional[str],
        session_id: str,
        measurement: Measurement,
        elapsed_ms: float,
        error: Optional[BaseException]
    ) -> None:
        try:
            successful = error is None
            message = None if successful else str(error) or type(error).__name__

            if elapsed_ms > self.slow_query_threshold_ms:
                self.logger.warning(
                    "Slow query detected",
                    operation=operation,
                    query=query,
                    filters=filters,
                    response_time_ms=round(elapsed_ms, 2)
                )

            self.record(PerformanceRecord(
                operation=operation,
                query=query,
                filters=filters,
                response_time=elapsed_ms,
                successful=successful,
                result_count=measurement.result_count,
                user_id=user_id,
                cache_hit=measurement.cache_hit,
                error=message
            ))
            self.record(SearchEvent(
                query=query,
                filters=filters,
                result_count=measurement.result_count,
                execution_time_ms=elapsed_ms,
                successful=successful,
                session_id=session_id,
                user_id=user_id,
                error=message
            ))
        except Exception as e:
            self.logger.exception("Failed to emit analytics", exc_info=e, operation=operation)

    async def _consume(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                if isinstance(record, PerformanceRecord):
                    await self.sink.write_performance(record)
                else:
                    await self.sink.write_event(record)
            except Exception as e:
                self.logger.exception(
                    "Failed to write analytics record",
                    exc_info=e,
                    record_type=type(record).__name__
                )
            finally:
                self._queue.task_done()
