"""
MongoDB implementation of the recipe repository.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from ....core.entities import Recipe, RecommendationContext
from ....core.interfaces import RecipeRepositoryInterface
from ....shared.exceptions import database_operation
from ..factory import ConnectionFactory

logger = logging.getLogger(__name__)


def to_object_id(value: Any) -> Any:
    """Convert a 24 hex character id to ``ObjectId``, leave others as they are."""
    # ObjectId(None) would mint a fresh id
    if not isinstance(value, str):
        return value
    try:
        return ObjectId(value)
    except InvalidId:
        return value


class MongoRecipeRepository(RecipeRepositoryInterface):
    """
    Recipe lookups against the recipes collection.

    Ids are accepted as strings and matched both as ``ObjectId`` and as
    plain strings, so collections with either id style work.
    """

    def __init__(self, connections: ConnectionFactory):
        """
        Initialize the repository.

        Args:
            connections: Provider of the recipes collection
        """
        self.connections = connections

    @database_operation("recipe lookup")
    async def get_by_id(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        collection = await self.connections.recipes_collection()
        return await collection.find_one({"_id": {"$in": self._id_variants(recipe_id)}})

    @database_operation("similar recipes lookup")
    async def find_similar_candidates(self, recipe: Recipe, limit: int) -> List[Dict[str, Any]]:
        """
        Find recipes sharing cuisine, any tag or difficulty with ``recipe``.

        Args:
            recipe: Reference recipe
            limit: Maximum number of candidates

        Returns:
            List[Dict[str, Any]]: Candidate documents
        """
        alternatives: List[Dict[str, Any]] = []
        if recipe.cuisine:
            alternatives.append({"cuisine": recipe.cuisine})
        if recipe.tags:
            alternatives.append({"tags": {"$in": list(recipe.tags)}})
        if recipe.difficulty:
            alternatives.append({"difficulty": recipe.difficulty})
        if not alternatives:
            return []

        query = {
            "_id": {"$nin": self._id_variants(recipe.id)},
            "$or": alternatives
        }
        return await self._find(query, limit)

    @database_operation("recommended recipes lookup")
    async def find_recommendation_candidates(
        self,
        context: RecommendationContext,
        limit: int
    ) -> List[Dict[str, Any]]:
        """
        Find recipes matching the user's preferences.

        Args:
            context: Recommendation context
            limit: Maximum number of candidates

        Returns:
            List[Dict[str, Any]]: Candidate documents
        """
        query: Dict[str, Any] = {}
        preferences = context.preferences
        if preferences is not None:
            if preferences.cuisines:
                query["cuisine"] = {"$in": list(preferences.cuisines)}
            if preferences.difficulty:
                query["difficulty"] = {"$in": list(preferences.difficulty)}
            if preferences.max_time:
                query["$expr"] = {
                    "$lte": [
                        {"$add": [{"$ifNull": ["$prepTime", 0]}, {"$ifNull": ["$cookTime", 0]}]},
                        preferences.max_time
                    ]
                }

        if context.history is not None and context.history.viewed:
            excluded: List[Any] = []
            for recipe_id in context.history.viewed:
                excluded.extend(self._id_variants(recipe_id))
            query["_id"] = {"$nin": excluded}

        return await self._find(query, limit)

    async def _find(self, query: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
        logger.debug("Finding candidates: %s (limit %d)", query, limit)
        collection = await self.connections.recipes_collection()
        cursor = collection.find(query).limit(limit)
        return await cursor.to_list(length=None)

    @staticmethod
    def _id_variants(recipe_id: Any) -> List[Any]:
        converted = to_object_id(recipe_id)
        variants = [converted]
        if converted != recipe_id:
            variants.append(recipe_id)
        return variants
