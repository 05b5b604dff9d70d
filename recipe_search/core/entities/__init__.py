from .search_entity import (
    TimeRange,
    SearchFilters,
    SortOption,
    SearchQuery,
    Highlights,
    SearchResult,
    SearchResults,
    FacetBucket,
    SearchFacets,
    Suggestion
)
from .pipeline_entity import (
    SortDirection,
    RELEVANCE_FIELD,
    COUNT_FIELD,
    KEY_FIELD,
    InPredicate,
    AllPredicate,
    RangePredicate,
    Predicate,
    MatchStage,
    SortKey,
    SortStage,
    SkipStage,
    LimitStage,
    UnwindStage,
    GroupStage,
    FacetStage,
    PipelineStage,
    CompiledQuery
)
from .recipe_entity import (
    Recipe,
    Preferences,
    History,
    RecommendationContext,
    MatchFactors,
    ScoredRecipe
)
from .instrumentation_entity import PerformanceRecord, SearchEvent

__all__ = [
    'TimeRange',
    'SearchFilters',
    'SortOption',
    'SearchQuery',
    'Highlights',
    'SearchResult',
    'SearchResults',
    'FacetBucket',
    'SearchFacets',
    'Suggestion',
    'SortDirection',
    'RELEVANCE_FIELD',
    'COUNT_FIELD',
    'KEY_FIELD',
    'InPredicate',
    'AllPredicate',
    'RangePredicate',
    'Predicate',
    'MatchStage',
    'SortKey',
    'SortStage',
    'SkipStage',
    'LimitStage',
    'UnwindStage',
    'GroupStage',
    'FacetStage',
    'PipelineStage',
    'CompiledQuery',
    'Recipe',
    'Preferences',
    'History',
    'RecommendationContext',
    'MatchFactors',
    'ScoredRecipe',
    'PerformanceRecord',
    'SearchEvent'
]
