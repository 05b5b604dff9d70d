from .facet_service import FACET_DIMENSIONS, FacetDimension, FacetService
from .highlight_service import HighlightService, tokenize
from .query_compiler import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, QueryCompiler
from .query_validator import QueryValidator

__all__ = [
    'FACET_DIMENSIONS',
    'FacetDimension',
    'FacetService',
    'HighlightService',
    'tokenize',
    'DEFAULT_PAGE_SIZE',
    'MAX_PAGE_SIZE',
    'QueryCompiler',
    'QueryValidator'
]
