"""
Analytics sink interface.
"""

from abc import ABC, abstractmethod

from ..entities import PerformanceRecord, SearchEvent


class InstrumentationSinkInterface(ABC):
    """Destination for performance records and search events."""

    @abstractmethod
    async def write_performance(self, record: PerformanceRecord) -> None:
        """Persist one performance record."""
        pass

    @abstractmethod
    async def write_event(self, event: SearchEvent) -> None:
        """Persist one search event."""
        pass
