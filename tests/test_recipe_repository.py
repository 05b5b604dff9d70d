"""
Tests for the MongoDB recipe repository.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from bson import ObjectId

from recipe_search.core.entities import History, Preferences, Recipe, RecommendationContext
from recipe_search.infrastructure.database.mongo import MongoRecipeRepository
from recipe_search.infrastructure.database.mongo.recipe_repository import to_object_id
from recipe_search.shared.exceptions import DatabaseError

OBJECT_ID = "64b7f0c2a1b2c3d4e5f60718"


@pytest.fixture
def collection():
    collection = Mock()
    collection.find_one = AsyncMock(return_value=None)
    cursor = Mock()
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    return collection


@pytest.fixture
def repository(collection):
    connections = Mock()
    connections.recipes_collection = AsyncMock(return_value=collection)
    return MongoRecipeRepository(connections)


def test_to_object_id():
    assert to_object_id(OBJECT_ID) == ObjectId(OBJECT_ID)
    assert to_object_id("slug-id") == "slug-id"
    assert to_object_id(None) is None


class TestMongoRecipeRepository:
    """Test suite for MongoRecipeRepository."""

    @pytest.mark.asyncio
    async def test_get_by_id_matches_both_id_styles(self, repository, collection):
        collection.find_one.return_value = {"_id": ObjectId(OBJECT_ID), "title": "Soup"}

        document = await repository.get_by_id(OBJECT_ID)

        assert document["title"] == "Soup"
        collection.find_one.assert_awaited_once_with(
            {"_id": {"$in": [ObjectId(OBJECT_ID), OBJECT_ID]}}
        )

    @pytest.mark.asyncio
    async def test_similar_candidates_query(self, repository, collection):
        recipe = Recipe(id="slug", cuisine="Thai", difficulty="easy", tags=("curry",))

        await repository.find_similar_candidates(recipe, 10)

        collection.find.assert_called_once_with({
            "_id": {"$nin": ["slug"]},
            "$or": [
                {"cuisine": "Thai"},
                {"tags": {"$in": ["curry"]}},
                {"difficulty": "easy"}
            ]
        })
        collection.find.return_value.limit.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_similar_candidates_without_attributes(self, repository, collection):
        assert await repository.find_similar_candidates(Recipe(id="bare"), 10) == []
        collection.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_recommendation_candidates_query(self, repository, collection):
        context = RecommendationContext(
            preferences=Preferences(cuisines=("Italian",), difficulty=("easy",), max_time=30),
            history=History(viewed=("seen",))
        )

        await repository.find_recommendation_candidates(context, 20)

        query = collection.find.call_args.args[0]
        assert query["cuisine"] == {"$in": ["Italian"]}
        assert query["difficulty"] == {"$in": ["easy"]}
        assert query["$expr"]["$lte"][1] == 30
        assert query["_id"] == {"$nin": ["seen"]}

    @pytest.mark.asyncio
    async def test_recommendation_candidates_without_preferences(self, repository, collection):
        await repository.find_recommendation_candidates(RecommendationContext(), 5)
        collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_failure_is_database_error(self, repository, collection):
        collection.find_one.side_effect = RuntimeError("socket timeout")

        with pytest.raises(DatabaseError, match="^Recipe lookup failed$"):
            await repository.get_by_id("slug")
