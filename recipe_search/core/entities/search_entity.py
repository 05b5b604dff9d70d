"""
Data models for recipe search.

This module contains the query model consumed by the compiler and the
backends, and the result, facet and suggestion models returned to
callers. All models are immutable once constructed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ...shared.exceptions import ValidationError


def _freeze(value: Any) -> Any:
    """Turn list inputs into tuples, leave anything else for the validator."""
    if isinstance(value, list):
        return tuple(value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True)
class TimeRange:
    """Bounds on a recipe's total time (prep + cook) in minutes."""
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in (("min", self.min), ("max", self.max)) if value is not None}


@dataclass(frozen=True)
class SearchFilters:
    """
    Structured filters applied on top of free-text search.

    ``category``, ``cuisine`` and ``difficulty`` are inclusion sets,
    ``ingredients`` must all be present on a matching recipe.
    """
    category: Optional[Tuple[str, ...]] = None
    cuisine: Optional[Tuple[str, ...]] = None
    difficulty: Optional[Tuple[str, ...]] = None
    ingredients: Optional[Tuple[str, ...]] = None
    time: Optional[TimeRange] = None

    def __post_init__(self):
        for name in ("category", "cuisine", "difficulty", "ingredients"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    def is_empty(self) -> bool:
        """Whether no filter is set."""
        return not any((self.category, self.cuisine, self.difficulty, self.ingredients, self.time))

    def to_dict(self) -> Dict[str, Any]:
        """Convert filters to dictionary representation, omitting unset filters."""
        result: Dict[str, Any] = {}
        for name in ("category", "cuisine", "difficulty", "ingredients"):
            value = getattr(self, name)
            if value is not None:
                result[name] = _thaw(value)
        if self.time is not None:
            result["time"] = self.time.to_dict() if isinstance(self.time, TimeRange) else self.time
        return result


@dataclass(frozen=True)
class SortOption:
    """Explicit sort order; absence means relevance descending."""
    field: str
    direction: str = "desc"

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "direction": self.direction}


@dataclass(frozen=True)
class SearchQuery:
    """
    Represents a search query with all its parameters.

    Values are kept as given; ``QueryValidator`` decides whether they are
    acceptable before anything is compiled.
    """
    text: Optional[str] = None
    filters: Optional[SearchFilters] = None
    sort: Optional[SortOption] = None
    page: Optional[int] = None
    limit: Optional[int] = None

    @property
    def has_text(self) -> bool:
        """Whether the query carries non-blank search text."""
        return isinstance(self.text, str) and bool(self.text.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Convert query to dictionary representation."""
        filters = self.filters.to_dict() if isinstance(self.filters, SearchFilters) else self.filters
        sort = self.sort.to_dict() if isinstance(self.sort, SortOption) else self.sort
        return {
            'text': self.text,
            'filters': filters,
            'sort': sort,
            'page': self.page,
            'limit': self.limit
        }

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchQuery":
        """
        Build a query from loosely typed request parameters.

        Recognised keys: ``q``/``text``, ``category``, ``cuisine``,
        ``difficulty``, ``ingredients`` (lists or comma separated strings),
        ``min_time``, ``max_time``, ``sort`` (``field`` or ``field:dir``),
        ``direction``, ``page`` and ``limit``.

        Args:
            params: Request parameters

        Returns:
            SearchQuery: Parsed query

        Raises:
            ValidationError: If a numeric parameter cannot be parsed
        """
        text = params.get("q", params.get("text"))

        lists = {name: _split(params.get(name)) for name in ("category", "cuisine", "difficulty", "ingredients")}
        min_time = _number(params.get("min_time"), "min_time")
        max_time = _number(params.get("max_time"), "max_time")
        time = TimeRange(min=min_time, max=max_time) if min_time is not None or max_time is not None else None

        filters = SearchFilters(time=time, **lists)

        sort = None
        sort_param = params.get("sort")
        if sort_param:
            sort_field, _, direction = str(sort_param).partition(":")
            sort = SortOption(field=sort_field, direction=direction or params.get("direction") or "desc")

        return cls(
            text=text,
            filters=None if filters.is_empty() else filters,
            sort=sort,
            page=_integer(params.get("page"), "page"),
            limit=_integer(params.get("limit"), "limit")
        )


def _split(value: Any) -> Optional[List[str]]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",")]
        return [item for item in items if item] or None
    return list(value)


def _number(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number") from None
    return int(number) if number.is_integer() else number


def _integer(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


@dataclass(frozen=True)
class Highlights:
    """
    Whole-field highlights for a search result.

    A field is ``None`` when no search token matched it; matched fields
    always hold at least one entry.
    """
    title: Optional[Tuple[str, ...]] = None
    description: Optional[Tuple[str, ...]] = None
    ingredients: Optional[Tuple[str, ...]] = None
    instructions: Optional[Tuple[str, ...]] = None

    FIELDS = ("title", "description", "ingredients", "instructions")

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.FIELDS)

    def to_dict(self) -> Dict[str, List[str]]:
        """Matched fields only; unmatched fields are absent, not empty."""
        return {
            name: list(getattr(self, name))
            for name in self.FIELDS
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class SearchResult:
    """A single recipe hit."""
    id: str
    title: str
    description: str = ""
    score: Optional[float] = None
    highlights: Optional[Highlights] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result: Dict[str, Any] = {
            'id': self.id,
            'title': self.title,
            'description': self.description
        }
        if self.score is not None:
            result['score'] = self.score
        if self.highlights is not None:
            result['highlights'] = self.highlights.to_dict()
        return result


@dataclass(frozen=True)
class SearchResults:
    """A page of search results."""
    results: Tuple[SearchResult, ...]
    total: int
    page: int
    total_pages: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': [result.to_dict() for result in self.results],
            'total': self.total,
            'page': self.page,
            'total_pages': self.total_pages
        }


@dataclass(frozen=True)
class FacetBucket:
    """One value of a facet dimension and the number of matching recipes."""
    value: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'count': self.count}


@dataclass(frozen=True)
class SearchFacets:
    """Bucket lists for the five facet dimensions, most frequent first."""
    cuisine_types: Tuple[FacetBucket, ...] = ()
    meal_types: Tuple[FacetBucket, ...] = ()
    dietary_restrictions: Tuple[FacetBucket, ...] = ()
    difficulty: Tuple[FacetBucket, ...] = ()
    tags: Tuple[FacetBucket, ...] = ()

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            'cuisine_types': [bucket.to_dict() for bucket in self.cuisine_types],
            'meal_types': [bucket.to_dict() for bucket in self.meal_types],
            'dietary_restrictions': [bucket.to_dict() for bucket in self.dietary_restrictions],
            'difficulty': [bucket.to_dict() for bucket in self.difficulty],
            'tags': [bucket.to_dict() for bucket in self.tags]
        }


@dataclass(frozen=True)
class Suggestion:
    """Autocomplete suggestion returned by the full-text backend."""
    id: str
    text: str
    type: str
    highlights: Dict[str, Sequence[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'type': self.type,
            'highlights': {key: list(value) for key, value in self.highlights.items()}
        }
