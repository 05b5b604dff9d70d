"""
Performance and analytics records emitted around every search operation.

Both records are write-once; the engine hands them to a sink and never
reads them back.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PerformanceRecord:
    """Timing of a single search, facet, suggestion or scoring operation."""
    operation: str
    query: str
    filters: Dict[str, Any]
    response_time: float
    successful: bool
    result_count: int = 0
    user_id: Optional[str] = None
    cache_hit: bool = False
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': self.operation,
            'query': self.query,
            'filters': self.filters,
            'response_time': self.response_time,
            'timestamp': self.timestamp,
            'user_id': self.user_id,
            'successful': self.successful,
            'result_count': self.result_count,
            'cache_hit': self.cache_hit,
            'error': self.error
        }


@dataclass(frozen=True)
class SearchEvent:
    """Analytics event describing what a user searched for."""
    query: str
    filters: Dict[str, Any]
    result_count: int
    execution_time_ms: float
    successful: bool
    session_id: str = "anonymous"
    user_id: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'query': self.query,
            'filters': self.filters,
            'result_count': self.result_count,
            'execution_time_ms': self.execution_time_ms,
            'session_id': self.session_id,
            'successful': self.successful,
            'error': self.error,
            'timestamp': self.timestamp
        }
