"""
Search orchestration.

Public entry point of the engine: validates a query, compiles it for the
selected backend, executes it, highlights and assembles the results and
wraps the whole sequence in instrumentation.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ...core.entities import (
    CompiledQuery,
    SearchFacets,
    SearchFilters,
    SearchQuery,
    SearchResult,
    SearchResults,
    Suggestion
)
from ...core.interfaces import BackendPage, SearchBackendInterface
from ...domain.search import FacetService, HighlightService, QueryCompiler, QueryValidator
from ...shared.exceptions import ValidationError
from ...shared.logging import configure_logging
from .instrumentation_service import InstrumentationService

logger = configure_logging(__name__)


def _describe(query: Any) -> Tuple[str, Dict[str, Any]]:
    """Text and filters of a possibly malformed query, for analytics."""
    text = getattr(query, "text", None)
    filters = getattr(query, "filters", None)
    return (
        text if isinstance(text, str) else "",
        filters.to_dict() if isinstance(filters, SearchFilters) else {}
    )


class SearchApplicationService:
    """
    Application service for recipe search.

    Backends are registered by name; the configured default is used
    unless a call names another one. Validation problems surface as
    ``ValidationError`` before any backend call, backend failures as
    ``DatabaseError``.
    """

    def __init__(
        self,
        backends: Mapping[str, SearchBackendInterface],
        default_backend: str,
        instrumentation: InstrumentationService,
        validator: Optional[QueryValidator] = None,
        highlighter: Optional[HighlightService] = None,
        facet_service: Optional[FacetService] = None,
        suggester: Optional[Any] = None,
        suggestion_limit: int = 5
    ):
        """
        Initialize the service.

        Args:
            backends: Search backends by name
            default_backend: Name of the backend used when a call names none
            instrumentation: Instrumentation wrapper
            validator: Query validator
            highlighter: Highlight service
            facet_service: Facet normalizer
            suggester: Object with an async ``suggest(prefix, limit)``,
                usually the full-text backend
            suggestion_limit: Default number of suggestions
        """
        if default_backend not in backends:
            raise ValueError(f"Default backend '{default_backend}' is not registered")

        self.backends = dict(backends)
        self.default_backend = default_backend
        self.instrumentation = instrumentation
        self.validator = validator or QueryValidator()
        self.highlighter = highlighter or HighlightService()
        self.facet_service = facet_service or FacetService()
        self.suggester = suggester
        self.suggestion_limit = suggestion_limit

    def backend(self, name: Optional[str] = None) -> SearchBackendInterface:
        """
        Resolve a backend by name.

        Raises:
            ValidationError: If no backend has that name
        """
        name = name or self.default_backend
        try:
            return self.backends[name]
        except KeyError:
            raise ValidationError(f"Unknown search backend: {name}") from None

    async def search(
        self,
        query: SearchQuery,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        backend: Optional[str] = None
    ) -> SearchResults:
        """
        Search recipes.

        Args:
            query: Search query
            user_id: Optional user id for analytics
            session_id: Optional session id for analytics
            backend: Optional backend name overriding the default

        Returns:
            SearchResults: One page of results

        Raises:
            ValidationError: If the query is malformed
            DatabaseError: If the backend call fails
        """
        text, filters = _describe(query)
        with self.instrumentation.measure(
            "search", query=text, filters=filters, user_id=user_id, session_id=session_id
        ) as measurement:
            selected = self._prepare(query, backend)
            results = await self._search(selected, query)
            measurement.result_count = results.total

        logger.debug(
            "Search completed",
            backend=selected.name,
            total=results.total,
            page=results.page
        )
        return results

    async def get_facets(
        self,
        query: SearchQuery,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        backend: Optional[str] = None
    ) -> SearchFacets:
        """
        Compute facets over the filtered result set.

        Args:
            query: Search query; pagination and sort are ignored
            user_id: Optional user id for analytics
            session_id: Optional session id for analytics
            backend: Optional backend name overriding the default

        Returns:
            SearchFacets: Buckets for every facet dimension

        Raises:
            ValidationError: If the query is malformed
            DatabaseError: If the aggregation fails
        """
        text, filters = _describe(query)
        with self.instrumentation.measure(
            "facets", query=text, filters=filters, user_id=user_id, session_id=session_id
        ) as measurement:
            selected = self._prepare(query, backend)
            facets = await self._facets(selected, query)
            measurement.result_count = sum(len(buckets) for buckets in facets.to_dict().values())

        return facets

    async def search_with_facets(
        self,
        query: SearchQuery,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        backend: Optional[str] = None
    ) -> Tuple[SearchResults, SearchFacets]:
        """
        Fetch a page of results and the facets concurrently.

        The pair is recorded as one ``search_with_facets`` operation, so a
        single user search produces a single analytics event.

        Returns:
            Tuple[SearchResults, SearchFacets]: Results and facets
        """
        text, filters = _describe(query)
        with self.instrumentation.measure(
            "search_with_facets", query=text, filters=filters, user_id=user_id, session_id=session_id
        ) as measurement:
            selected = self._prepare(query, backend)
            results, facets = await asyncio.gather(
                self._search(selected, query),
                self._facets(selected, query)
            )
            measurement.result_count = results.total

        return results, facets

    async def suggest(
        self,
        prefix: str,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None
    ) -> List[Suggestion]:
        """
        Autocomplete suggestions for a prefix.

        Args:
            prefix: Text typed so far
            limit: Maximum number of suggestions
            user_id: Optional user id for analytics
            session_id: Optional session id for analytics

        Returns:
            List[Suggestion]: Suggestions

        Raises:
            ValidationError: If prefix or limit are malformed
            DatabaseError: If the backend call fails
        """
        with self.instrumentation.measure(
            "suggest",
            query=prefix if isinstance(prefix, str) else "",
            user_id=user_id,
            session_id=session_id
        ) as measurement:
            if not isinstance(prefix, str):
                raise ValidationError("prefix must be a string")
            limit = self.suggestion_limit if limit is None else limit
            if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
                raise ValidationError("limit must be a positive integer")
            if self.suggester is None:
                raise ValidationError("Suggestions are not available")

            suggestions = await self.suggester.suggest(prefix, limit)
            measurement.result_count = len(suggestions)

        return suggestions

    def _prepare(self, query: SearchQuery, backend: Optional[str]) -> SearchBackendInterface:
        # Validation happens before any backend I/O
        self.validator.check(query)
        return self.backend(backend)

    async def _search(self, selected: SearchBackendInterface, query: SearchQuery) -> SearchResults:
        compiled = selected.compile(query)
        page = await selected.execute(compiled)
        return self._assemble(page, compiled)

    async def _facets(self, selected: SearchBackendInterface, query: SearchQuery) -> SearchFacets:
        raw = await selected.facet(selected.compile_facets(query))
        return self.facet_service.normalize(raw)

    def _assemble(self, page: BackendPage, compiled: CompiledQuery) -> SearchResults:
        results = []
        for document in page.documents[:compiled.limit]:
            score = document.get("score") if compiled.text else None
            results.append(SearchResult(
                id=str(document.get("_id")),
                title=document.get("title") or "",
                description=document.get("description") or "",
                score=float(score) if score is not None else None,
                highlights=self.highlighter.highlight(document, compiled.text) if compiled.text else None
            ))

        return SearchResults(
            results=tuple(results),
            total=page.total,
            page=compiled.page,
            total_pages=QueryCompiler.total_pages(page.total, compiled.limit)
        )
