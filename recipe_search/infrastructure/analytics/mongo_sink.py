"""
MongoDB analytics sink.

Appends performance records and search events to their own collections.
Records are never read back by the engine.
"""

import logging

from ...core.entities import PerformanceRecord, SearchEvent
from ...core.interfaces import InstrumentationSinkInterface
from ..database.factory import ConnectionFactory

logger = logging.getLogger(__name__)

PERFORMANCE_COLLECTION = "query_performance"
EVENTS_COLLECTION = "search_events"


class MongoInstrumentationSink(InstrumentationSinkInterface):
    """Append-only writer for analytics collections."""

    def __init__(
        self,
        connections: ConnectionFactory,
        performance_collection: str = PERFORMANCE_COLLECTION,
        events_collection: str = EVENTS_COLLECTION
    ):
        self.connections = connections
        self.performance_collection = performance_collection
        self.events_collection = events_collection

    async def write_performance(self, record: PerformanceRecord) -> None:
        database = await self.connections.mongo_database()
        await database[self.performance_collection].insert_one(record.to_dict())

    async def write_event(self, event: SearchEvent) -> None:
        database = await self.connections.mongo_database()
        await database[self.events_collection].insert_one(event.to_dict())
