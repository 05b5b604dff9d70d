"""
Error handling decorators.

These decorators translate arbitrary exceptions raised inside backend
and scoring code into the engine's error taxonomy, so callers only ever
see ``SearchEngineError`` subclasses.
"""

from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from ..logging.structured_logger import configure_logging
from .search_errors import DatabaseError, ScoringError, SearchEngineError

T = TypeVar('T')

logger = configure_logging(__name__)


def database_operation(
    operation: str
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for coroutine methods that talk to a search backend.

    Engine errors pass through untouched; anything else is logged with
    its traceback and re-raised as ``DatabaseError``.

    Args:
        operation: Operation name used in the log record and error message

    Returns:
        Callable: Decorator
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except SearchEngineError:
                raise
            except Exception as e:
                logger.exception("Backend operation failed", exc_info=e, operation=operation)
                raise DatabaseError.from_exception(operation, e) from e

        return wrapper

    return decorator


def scoring_operation(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for scoring functions.

    Any exception raised while computing the score is re-raised as
    ``ScoringError`` naming ``operation``.

    Args:
        operation: Scoring operation name, e.g. ``"similarity score"``

    Returns:
        Callable: Decorator
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except ScoringError:
                raise
            except Exception as e:
                raise ScoringError(operation, e) from e

        return wrapper

    return decorator
