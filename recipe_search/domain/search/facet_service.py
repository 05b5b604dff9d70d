"""
Facet aggregation.

Defines the five facet dimensions and turns the raw bucket lists a
backend returns into sorted, capped ``SearchFacets``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ...core.entities import FacetBucket, SearchFacets
from ...shared.exceptions import DatabaseError
from ...shared.logging import configure_logging

logger = configure_logging(__name__)


@dataclass(frozen=True)
class FacetDimension:
    """
    One facet dimension.

    Attributes:
        name: Key in ``SearchFacets``
        field: Stored document field grouped on
        limit: Maximum number of buckets, ``None`` for no cap
        is_array: Whether the field holds a list that must be un-nested
    """
    name: str
    field: str
    limit: Optional[int] = None
    is_array: bool = False


FACET_DIMENSIONS: Tuple[FacetDimension, ...] = (
    FacetDimension("cuisine_types", "cuisine", limit=20),
    FacetDimension("meal_types", "mealType", limit=10),
    FacetDimension("dietary_restrictions", "dietaryRestrictions", limit=10, is_array=True),
    FacetDimension("difficulty", "difficulty"),
    FacetDimension("tags", "tags", limit=30, is_array=True),
)


class FacetService:
    """Normalizes raw facet buckets into ``SearchFacets``."""

    def __init__(self, dimensions: Tuple[FacetDimension, ...] = FACET_DIMENSIONS):
        self.dimensions = dimensions

    def normalize(self, raw: Dict[str, List[Dict[str, Any]]]) -> SearchFacets:
        """
        Build ``SearchFacets`` from raw ``{"_id": key, "count": n}`` buckets.

        Buckets whose key is null, empty or not a string are dropped; the
        rest are sorted by count descending (ties by value) and capped.

        Args:
            raw: Raw buckets per dimension name

        Returns:
            SearchFacets: Normalized facets

        Raises:
            DatabaseError: If a dimension is missing from the backend output
        """
        missing = [d.name for d in self.dimensions if d.name not in (raw or {})]
        if missing:
            logger.error("Facet aggregation returned incomplete output", missing=missing)
            raise DatabaseError(f"Facet aggregation failed: missing dimensions {', '.join(missing)}")

        return SearchFacets(**{
            dimension.name: self._buckets(raw[dimension.name], dimension.limit)
            for dimension in self.dimensions
        })

    @staticmethod
    def _buckets(raw_buckets: List[Dict[str, Any]], limit: Optional[int]) -> Tuple[FacetBucket, ...]:
        buckets = [
            FacetBucket(value=bucket.get("_id"), count=int(bucket.get("count", 0)))
            for bucket in raw_buckets or ()
            if isinstance(bucket.get("_id"), str) and bucket.get("_id").strip()
        ]
        buckets.sort(key=lambda bucket: (-bucket.count, bucket.value))
        if limit is not None:
            buckets = buckets[:limit]
        return tuple(buckets)
