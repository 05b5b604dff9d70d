from .search_errors import (
    SearchEngineError,
    ValidationError,
    DatabaseError,
    ScoringError
)
from .error_handler import database_operation, scoring_operation

__all__ = [
    'SearchEngineError',
    'ValidationError',
    'DatabaseError',
    'ScoringError',
    'database_operation',
    'scoring_operation'
]
