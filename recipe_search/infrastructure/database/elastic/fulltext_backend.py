"""
Full-text search backend.

Renders compiled pipelines as Elasticsearch queries: free text becomes a
fuzzy, field-weighted ``multi_match`` and filters become ``bool`` filter
clauses on keyword sub-fields. Also serves autocomplete suggestions.
"""

import logging
from typing import Any, Dict, List, Optional

from ....core.entities import (
    AllPredicate,
    CompiledQuery,
    GroupStage,
    InPredicate,
    LimitStage,
    MatchStage,
    RangePredicate,
    SearchQuery,
    SortDirection,
    SortStage,
    Suggestion
)
from ....core.interfaces import BackendPage, RawFacets, SearchBackendInterface
from ....domain.search import QueryCompiler
from ....shared.exceptions import database_operation
from ..factory import ConnectionFactory

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["title^3", "description^2", "ingredients.name", "tags"]
SUGGESTION_FIELDS = ["title^3", "ingredients.name^2", "tags"]
HIGHLIGHT_FIELDS = ["title", "ingredients.name", "tags"]
# Bucket count used for facet dimensions without a cap
UNBOUNDED_BUCKETS = 1000


def keyword(field: str) -> str:
    """Exact-match sub-field of a text field."""
    return f"{field}.keyword"


class FullTextBackend(SearchBackendInterface):
    """
    Inverted-index search path.

    Relevance comes from the engine's ``_score``; equal scores keep
    whatever order the engine returns.
    """

    name = "fulltext"

    def __init__(
        self,
        connections: ConnectionFactory,
        compiler: QueryCompiler,
        recipes_index: str = "recipes",
        ingredients_index: str = "ingredients"
    ):
        """
        Initialize the backend.

        Args:
            connections: Provider of the Elasticsearch client
            compiler: Query compiler
            recipes_index: Index holding recipe documents
            ingredients_index: Index holding ingredient documents
        """
        self.connections = connections
        self.compiler = compiler
        self.recipes_index = recipes_index
        self.ingredients_index = ingredients_index

    def compile(self, query: SearchQuery) -> CompiledQuery:
        return self.compiler.compile(query)

    def compile_facets(self, query: SearchQuery) -> CompiledQuery:
        return self.compiler.compile_facets(query)

    @database_operation("search")
    async def execute(self, compiled: CompiledQuery) -> BackendPage:
        """
        Run a result query.

        Args:
            compiled: Compiled result pipeline

        Returns:
            BackendPage: Page of documents with the total hit count
        """
        request = self.render_search(compiled)
        logger.debug("Running search request: %s", request)

        client = await self.connections.elasticsearch()
        response = await client.search(index=self.recipes_index, **request)

        hits = response["hits"]
        documents = []
        for hit in hits["hits"]:
            document = dict(hit.get("_source") or {})
            document["_id"] = hit["_id"]
            if compiled.text and hit.get("_score") is not None:
                document["score"] = hit["_score"]
            documents.append(document)

        return BackendPage(documents=documents, total=self._total(hits))

    @database_operation("facet aggregation")
    async def facet(self, compiled: CompiledQuery) -> RawFacets:
        """
        Run a facet query as terms aggregations.

        Args:
            compiled: Compiled facet pipeline

        Returns:
            RawFacets: Buckets per facet dimension
        """
        request = self.render_facets(compiled)
        logger.debug("Running facet request: %s", request)

        client = await self.connections.elasticsearch()
        response = await client.search(index=self.recipes_index, **request)

        aggregations = response["aggregations"]
        return {
            name: [
                {"_id": bucket["key"], "count": bucket["doc_count"]}
                for bucket in aggregation["buckets"]
            ]
            for name, aggregation in aggregations.items()
        }

    @database_operation("suggestion")
    async def suggest(self, prefix: str, limit: int = 5) -> List[Suggestion]:
        """
        Autocomplete suggestions over recipes and ingredients.

        Args:
            prefix: Text typed so far
            limit: Maximum number of suggestions

        Returns:
            List[Suggestion]: Suggestions, empty for a blank prefix
        """
        if not prefix or not prefix.strip():
            return []

        client = await self.connections.elasticsearch()
        response = await client.search(
            index=[self.recipes_index, self.ingredients_index],
            query={
                "multi_match": {
                    "query": prefix.strip(),
                    "fields": SUGGESTION_FIELDS,
                    "type": "phrase_prefix"
                }
            },
            highlight={"fields": {field: {} for field in HIGHLIGHT_FIELDS}},
            size=limit
        )

        suggestions = []
        for hit in response["hits"]["hits"]:
            source = hit.get("_source") or {}
            suggestions.append(Suggestion(
                id=hit["_id"],
                text=source.get("title") or source.get("name") or "",
                type="recipe" if hit.get("_index") == self.recipes_index else "ingredient",
                highlights=hit.get("highlight") or {}
            ))
        return suggestions

    def render_search(self, compiled: CompiledQuery) -> Dict[str, Any]:
        """
        Render a result pipeline as search request keyword arguments.

        Args:
            compiled: Compiled result pipeline

        Returns:
            Dict[str, Any]: ``query``, ``from_``, ``size``,
                ``track_total_hits`` and, when sorted, ``sort``
        """
        request: Dict[str, Any] = {
            "query": self.render_query(compiled.match),
            "from_": compiled.skip,
            "size": compiled.limit,
            "track_total_hits": True
        }

        sort = self.render_sort(compiled.sort)
        if sort is not None:
            request["sort"] = sort
            # Keep _score populated when sorting by another field
            if compiled.text:
                request["track_scores"] = True

        return request

    def render_facets(self, compiled: CompiledQuery) -> Dict[str, Any]:
        """Render a facet pipeline as a size 0 search with terms aggregations."""
        aggregations: Dict[str, Any] = {}
        facet = compiled.facet
        for name, stages in (facet.facets if facet is not None else ()):
            group = next(stage for stage in stages if isinstance(stage, GroupStage))
            limit = next((stage.count for stage in stages if isinstance(stage, LimitStage)), None)
            aggregations[name] = {
                "terms": {
                    "field": keyword(group.field),
                    "size": limit or UNBOUNDED_BUCKETS,
                    "order": [{"_count": "desc"}, {"_key": "asc"}]
                }
            }

        return {
            "query": self.render_query(compiled.match),
            "aggs": aggregations,
            "size": 0
        }

    def render_query(self, match: MatchStage) -> Dict[str, Any]:
        """Render a match stage as a ``bool`` query."""
        if match.text:
            must = {
                "multi_match": {
                    "query": match.text,
                    "fields": SEARCH_FIELDS,
                    "fuzziness": "AUTO"
                }
            }
        else:
            must = {"match_all": {}}

        filters: List[Dict[str, Any]] = []
        for predicate in match.predicates:
            if isinstance(predicate, InPredicate):
                filters.append({"terms": {keyword(predicate.field): list(predicate.values)}})
            elif isinstance(predicate, AllPredicate):
                # one term clause per value gives all-of semantics
                filters.extend(
                    {"term": {keyword(predicate.field): value}} for value in predicate.values
                )
            elif isinstance(predicate, RangePredicate):
                bounds = {}
                if predicate.minimum is not None:
                    bounds["gte"] = predicate.minimum
                if predicate.maximum is not None:
                    bounds["lte"] = predicate.maximum
                filters.append({"range": {predicate.field: bounds}})
            else:
                raise TypeError(f"Unsupported predicate: {predicate!r}")

        return {"bool": {"must": [must], "filter": filters}}

    @staticmethod
    def render_sort(sort: Optional[SortStage]) -> Optional[List[Dict[str, Any]]]:
        if sort is None:
            return None
        rendered = []
        for key in sort.keys:
            field = "_score" if key.is_relevance else key.field
            order = "asc" if key.direction == SortDirection.ASC else "desc"
            rendered.append({field: {"order": order}})
        return rendered

    @staticmethod
    def _total(hits: Dict[str, Any]) -> int:
        total = hits.get("total", 0)
        if isinstance(total, dict):
            return total.get("value", 0)
        return total
