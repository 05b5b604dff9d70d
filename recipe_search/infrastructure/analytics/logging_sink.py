"""
Logging analytics sink.

Writes every record as a structured log line; used where no analytics
store is available.
"""

from typing import Optional

from ...core.entities import PerformanceRecord, SearchEvent
from ...core.interfaces import InstrumentationSinkInterface
from ...shared.logging import LoggerInterface, configure_logging


class LoggingInstrumentationSink(InstrumentationSinkInterface):
    """Emits records through a structured logger."""

    def __init__(self, logger: Optional[LoggerInterface] = None):
        self.logger = logger or configure_logging("recipe_search.analytics")

    async def write_performance(self, record: PerformanceRecord) -> None:
        self.logger.info("query_performance", **record.to_dict())

    async def write_event(self, event: SearchEvent) -> None:
        self.logger.info("search_event", **event.to_dict())
