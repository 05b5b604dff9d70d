"""
Aggregation search backend.

Renders compiled pipelines as MongoDB aggregation pipelines and runs
them against the recipes collection. Free text is delegated to the
collection's ``$text`` index; the text score is exposed as ``score``.
"""

import logging
from typing import Any, Dict, List

from ....core.entities import (
    AllPredicate,
    CompiledQuery,
    FacetStage,
    GroupStage,
    InPredicate,
    LimitStage,
    MatchStage,
    PipelineStage,
    RangePredicate,
    SearchQuery,
    SkipStage,
    SortDirection,
    SortStage,
    UnwindStage
)
from ....core.interfaces import BackendPage, RawFacets, SearchBackendInterface
from ....domain.search import QueryCompiler
from ....shared.exceptions import database_operation
from ..factory import ConnectionFactory

logger = logging.getLogger(__name__)

SCORE_FIELD = "score"


class AggregationBackend(SearchBackendInterface):
    """
    Document store search path.

    A page of results and the total match count are fetched with a
    single aggregation using a ``$facet`` stage.
    """

    name = "aggregation"

    def __init__(self, connections: ConnectionFactory, compiler: QueryCompiler):
        """
        Initialize the backend.

        Args:
            connections: Provider of the recipes collection
            compiler: Query compiler, usually with ``_id`` as tie breaker
        """
        self.connections = connections
        self.compiler = compiler

    def compile(self, query: SearchQuery) -> CompiledQuery:
        return self.compiler.compile(query)

    def compile_facets(self, query: SearchQuery) -> CompiledQuery:
        return self.compiler.compile_facets(query)

    @database_operation("search")
    async def execute(self, compiled: CompiledQuery) -> BackendPage:
        """
        Run a result pipeline.

        Args:
            compiled: Compiled result pipeline

        Returns:
            BackendPage: Page of documents with the total match count
        """
        pipeline = self.render_pipeline(compiled)
        logger.debug("Running search pipeline: %s", pipeline)

        collection = await self.connections.recipes_collection()
        cursor = await collection.aggregate(pipeline)
        output = await cursor.to_list(length=None)

        page = output[0] if output else {}
        counts = page.get("total") or []
        documents = [self._normalize(document) for document in page.get("results", [])]
        return BackendPage(documents=documents, total=counts[0]["count"] if counts else 0)

    @database_operation("facet aggregation")
    async def facet(self, compiled: CompiledQuery) -> RawFacets:
        """
        Run a facet pipeline.

        Args:
            compiled: Compiled facet pipeline

        Returns:
            RawFacets: Buckets per facet dimension
        """
        pipeline = self.render_pipeline(compiled)
        logger.debug("Running facet pipeline: %s", pipeline)

        collection = await self.connections.recipes_collection()
        cursor = await collection.aggregate(pipeline)
        output = await cursor.to_list(length=None)
        return output[0] if output else {}

    def render_pipeline(self, compiled: CompiledQuery) -> List[Dict[str, Any]]:
        """
        Render a compiled query as a MongoDB aggregation pipeline.

        Result pipelines become ``$match`` (plus the text score) followed
        by a ``$facet`` producing ``results`` and ``total``; facet
        pipelines render their own ``$facet`` stage.

        Args:
            compiled: Compiled query

        Returns:
            List[Dict[str, Any]]: Aggregation pipeline
        """
        match = compiled.match
        pipeline: List[Dict[str, Any]] = [{"$match": self.render_match(match)}]
        if match.text:
            pipeline.append({"$addFields": {SCORE_FIELD: {"$meta": "textScore"}}})

        facet = compiled.facet
        if facet is not None:
            pipeline.append(self.render_stage(facet))
            return pipeline

        page_stages = [
            self.render_stage(stage)
            for stage in compiled.stages
            if isinstance(stage, (SortStage, SkipStage, LimitStage))
        ]
        pipeline.append({
            "$facet": {
                "results": page_stages,
                "total": [{"$count": "count"}]
            }
        })
        return pipeline

    def render_match(self, match: MatchStage) -> Dict[str, Any]:
        """Render a match stage as a ``$match`` filter document."""
        conditions: Dict[str, Any] = {}
        if match.text:
            conditions["$text"] = {"$search": match.text}

        for predicate in match.predicates:
            if isinstance(predicate, InPredicate):
                conditions[predicate.field] = {"$in": list(predicate.values)}
            elif isinstance(predicate, AllPredicate):
                conditions[predicate.field] = {"$all": list(predicate.values)}
            elif isinstance(predicate, RangePredicate):
                bounds = {}
                if predicate.minimum is not None:
                    bounds["$gte"] = predicate.minimum
                if predicate.maximum is not None:
                    bounds["$lte"] = predicate.maximum
                conditions[predicate.field] = bounds
            else:
                raise TypeError(f"Unsupported predicate: {predicate!r}")

        return conditions

    def render_stage(self, stage: PipelineStage) -> Dict[str, Any]:
        """Render a single non-match stage."""
        if isinstance(stage, SortStage):
            sort: Dict[str, Any] = {}
            for key in stage.keys:
                field = SCORE_FIELD if key.is_relevance else key.field
                sort[field] = 1 if key.direction == SortDirection.ASC else -1
            return {"$sort": sort}
        if isinstance(stage, SkipStage):
            return {"$skip": stage.count}
        if isinstance(stage, LimitStage):
            return {"$limit": stage.count}
        if isinstance(stage, UnwindStage):
            return {"$unwind": f"${stage.field}"}
        if isinstance(stage, GroupStage):
            return {"$group": {"_id": f"${stage.field}", "count": {"$sum": 1}}}
        if isinstance(stage, FacetStage):
            return {
                "$facet": {
                    name: [self.render_stage(sub) for sub in stages]
                    for name, stages in stage.facets
                }
            }
        if isinstance(stage, MatchStage):
            return {"$match": self.render_match(stage)}
        raise TypeError(f"Unsupported stage: {stage!r}")

    @staticmethod
    def _normalize(document: Dict[str, Any]) -> Dict[str, Any]:
        normalized = dict(document)
        normalized["_id"] = str(document.get("_id"))
        return normalized
