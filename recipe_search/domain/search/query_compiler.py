"""
Query compiler.

Translates a validated ``SearchQuery`` into a backend-neutral pipeline of
stages. Backends render the pipeline in their own query language, so the
filter semantics defined here hold on every search path.
"""

import math
from typing import List, Optional, Tuple

from ...core.entities import (
    COUNT_FIELD,
    KEY_FIELD,
    RELEVANCE_FIELD,
    AllPredicate,
    CompiledQuery,
    FacetStage,
    GroupStage,
    InPredicate,
    LimitStage,
    MatchStage,
    PipelineStage,
    Predicate,
    RangePredicate,
    SearchQuery,
    SkipStage,
    SortDirection,
    SortKey,
    SortStage,
    UnwindStage
)
from ...shared.exceptions import ValidationError
from .facet_service import FACET_DIMENSIONS, FacetDimension

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Query filter name -> stored document field
FILTER_FIELDS = {
    "category": "category",
    "cuisine": "cuisine",
    "difficulty": "difficulty",
}
INGREDIENT_FIELD = "ingredients.name"
TOTAL_TIME_FIELD = "totalTime"


class QueryCompiler:
    """
    Compiles search queries into pipelines.

    The compiler expects queries that already passed ``QueryValidator``;
    it still rejects filter combinations it cannot express.
    """

    def __init__(
        self,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
        tie_breaker_field: Optional[str] = None
    ):
        """
        Initialize the compiler.

        Args:
            default_limit: Page size used when the query has none
            max_limit: Upper bound applied to every page size
            tie_breaker_field: Field appended as a last ascending sort key
                so equal sort values paginate deterministically
        """
        self.max_limit = max_limit
        self.default_limit = min(default_limit, max_limit)
        self.tie_breaker_field = tie_breaker_field

    def compile(self, query: SearchQuery) -> CompiledQuery:
        """
        Compile a query into a result pipeline.

        Args:
            query: Validated search query

        Returns:
            CompiledQuery: ``MatchStage`` then optional ``SortStage`` then
                ``SkipStage`` and ``LimitStage``
        """
        page, limit = self.pagination(query)
        match = self.compile_match(query)

        stages: List[PipelineStage] = [match]
        sort = self.compile_sort(query)
        if sort is not None:
            stages.append(sort)
        stages.append(SkipStage((page - 1) * limit))
        stages.append(LimitStage(limit))

        return CompiledQuery(stages=tuple(stages), page=page, limit=limit, text=match.text)

    def compile_facets(
        self,
        query: SearchQuery,
        dimensions: Tuple[FacetDimension, ...] = FACET_DIMENSIONS
    ) -> CompiledQuery:
        """
        Compile a query into a facet pipeline over the filtered base set.

        Each dimension becomes a sub-pipeline: optional ``UnwindStage`` for
        array fields, ``GroupStage``, ``SortStage`` by count descending then
        key ascending, and ``LimitStage`` when the dimension is capped.

        Args:
            query: Validated search query
            dimensions: Facet dimensions to compute

        Returns:
            CompiledQuery: ``MatchStage`` followed by a ``FacetStage``
        """
        match = self.compile_match(query)

        facets = []
        for dimension in dimensions:
            sub: List[PipelineStage] = []
            if dimension.is_array:
                sub.append(UnwindStage(dimension.field))
            sub.append(GroupStage(dimension.field))
            sub.append(SortStage((
                SortKey(COUNT_FIELD, SortDirection.DESC),
                SortKey(KEY_FIELD, SortDirection.ASC)
            )))
            if dimension.limit is not None:
                sub.append(LimitStage(dimension.limit))
            facets.append((dimension.name, tuple(sub)))

        page, limit = self.pagination(query)
        return CompiledQuery(
            stages=(match, FacetStage(tuple(facets))),
            page=page,
            limit=limit,
            text=match.text
        )

    def compile_match(self, query: SearchQuery) -> MatchStage:
        """Build the match stage shared by result and facet pipelines."""
        predicates: List[Predicate] = []
        filters = query.filters

        if filters is not None:
            for name, field in FILTER_FIELDS.items():
                values = getattr(filters, name)
                if values:
                    predicates.append(InPredicate(field, tuple(values)))

            if filters.ingredients:
                predicates.append(AllPredicate(INGREDIENT_FIELD, tuple(filters.ingredients)))

            time = filters.time
            if time is not None and (time.min is not None or time.max is not None):
                if time.min is not None and time.max is not None and time.min > time.max:
                    raise ValidationError("time.min must not exceed time.max")
                predicates.append(RangePredicate(TOTAL_TIME_FIELD, time.min, time.max))

        text = query.text.strip() if query.has_text else None
        return MatchStage(predicates=tuple(predicates), text=text)

    def compile_sort(self, query: SearchQuery) -> Optional[SortStage]:
        """
        Build the sort stage.

        Without an explicit sort, results are ordered by relevance when the
        query has text; without text there is no sort stage at all.
        """
        keys: List[SortKey] = []
        if query.sort is not None:
            keys.append(SortKey(query.sort.field, SortDirection.from_name(query.sort.direction)))
        elif query.has_text:
            keys.append(SortKey(RELEVANCE_FIELD, SortDirection.DESC))

        if not keys:
            return None

        if self.tie_breaker_field and all(key.field != self.tie_breaker_field for key in keys):
            keys.append(SortKey(self.tie_breaker_field, SortDirection.ASC))

        return SortStage(tuple(keys))

    def pagination(self, query: SearchQuery) -> Tuple[int, int]:
        """
        Effective page and page size for a query.

        Returns:
            Tuple[int, int]: 1-based page and page size clamped to ``max_limit``
        """
        page = int(query.page) if query.page is not None else 1
        limit = int(query.limit) if query.limit is not None else self.default_limit
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers")
        return page, min(limit, self.max_limit)

    @staticmethod
    def total_pages(total: int, limit: int) -> int:
        """Number of pages needed to show ``total`` results ``limit`` at a time."""
        return math.ceil(total / limit) if limit else 0
