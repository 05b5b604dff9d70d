"""
Search backend interface.

This module defines the contract shared by the aggregation (document
store) and full-text (inverted index) search paths. The orchestrator only
talks to this interface and picks an implementation by name.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..entities import CompiledQuery, SearchQuery


@dataclass
class BackendPage:
    """
    Raw page of documents returned by a backend.

    Each document carries its stored fields plus ``_id`` and, when the
    query had text, a numeric ``score``.
    """
    documents: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0


# Raw facet output: dimension name -> list of {"_id": key, "count": n}
RawFacets = Dict[str, List[Dict[str, Any]]]


class SearchBackendInterface(ABC):
    """Interface for search backends."""

    name: str = ""

    @abstractmethod
    def compile(self, query: SearchQuery) -> CompiledQuery:
        """
        Compile a validated query into a result pipeline.

        Args:
            query: Validated search query

        Returns:
            CompiledQuery: Pipeline of match, sort, skip and limit stages
        """
        pass

    @abstractmethod
    def compile_facets(self, query: SearchQuery) -> CompiledQuery:
        """
        Compile a validated query into a facet pipeline.

        Args:
            query: Validated search query

        Returns:
            CompiledQuery: Match stage followed by a facet stage
        """
        pass

    @abstractmethod
    async def execute(self, compiled: CompiledQuery) -> BackendPage:
        """
        Run a compiled result pipeline.

        Args:
            compiled: Output of ``compile``

        Returns:
            BackendPage: Matching documents for the page and the total match count

        Raises:
            DatabaseError: If the backend call fails
        """
        pass

    @abstractmethod
    async def facet(self, compiled: CompiledQuery) -> RawFacets:
        """
        Run a compiled facet pipeline.

        Args:
            compiled: Output of ``compile_facets``

        Returns:
            RawFacets: Unnormalized buckets per facet dimension

        Raises:
            DatabaseError: If the backend call fails
        """
        pass
