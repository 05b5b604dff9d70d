"""
Tests for the Elasticsearch full-text backend.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from recipe_search.core.entities import SearchFilters, SearchQuery, SortOption, TimeRange
from recipe_search.domain.search import QueryCompiler
from recipe_search.infrastructure.database.elastic import FullTextBackend
from recipe_search.infrastructure.database.elastic.fulltext_backend import SEARCH_FIELDS
from recipe_search.shared.exceptions import DatabaseError


@pytest.fixture
def client():
    client = Mock()
    client.search = AsyncMock(return_value={"hits": {"total": {"value": 0}, "hits": []}})
    return client


@pytest.fixture
def backend(client):
    connections = Mock()
    connections.elasticsearch = AsyncMock(return_value=client)
    return FullTextBackend(connections, QueryCompiler(), recipes_index="recipes", ingredients_index="ingredients")


class TestRenderSearch:
    """Test suite for request rendering."""

    def test_text_query(self, backend):
        request = backend.render_search(backend.compile(SearchQuery(text="spicy chicken", page=3, limit=5)))

        assert request["query"] == {"bool": {
            "must": [{"multi_match": {"query": "spicy chicken", "fields": SEARCH_FIELDS, "fuzziness": "AUTO"}}],
            "filter": []
        }}
        assert request["from_"] == 10
        assert request["size"] == 5
        assert request["sort"] == [{"_score": {"order": "desc"}}]
        assert request["track_total_hits"] is True
        assert request["track_scores"] is True

    def test_match_all_without_text(self, backend):
        request = backend.render_search(backend.compile(SearchQuery()))

        assert request["query"]["bool"]["must"] == [{"match_all": {}}]
        assert "sort" not in request
        assert "track_scores" not in request

    def test_filters(self, backend):
        request = backend.render_search(backend.compile(SearchQuery(filters=SearchFilters(
            cuisine=["Mexican", "Thai"],
            ingredients=["chicken", "lime"],
            time=TimeRange(min=5)
        ))))

        assert request["query"]["bool"]["filter"] == [
            {"terms": {"cuisine.keyword": ["Mexican", "Thai"]}},
            {"term": {"ingredients.name.keyword": "chicken"}},
            {"term": {"ingredients.name.keyword": "lime"}},
            {"range": {"totalTime": {"gte": 5}}}
        ]

    def test_explicit_sort(self, backend):
        request = backend.render_search(backend.compile(SearchQuery(sort=SortOption("rating", "asc"))))
        assert request["sort"] == [{"rating": {"order": "asc"}}]

    def test_facet_request(self, backend):
        request = backend.render_facets(backend.compile_facets(SearchQuery()))

        assert request["size"] == 0
        assert request["aggs"]["tags"] == {"terms": {
            "field": "tags.keyword",
            "size": 30,
            "order": [{"_count": "desc"}, {"_key": "asc"}]
        }}
        assert request["aggs"]["difficulty"]["terms"]["size"] == 1000
        assert set(request["aggs"]) == {
            "cuisine_types", "meal_types", "dietary_restrictions", "difficulty", "tags"
        }


class TestExecute:
    """Test suite for running requests."""

    @pytest.mark.asyncio
    async def test_maps_hits_to_documents(self, backend, client):
        client.search.return_value = {"hits": {
            "total": {"value": 12, "relation": "eq"},
            "hits": [
                {"_id": "r1", "_score": 3.2, "_source": {"title": "Chicken Tacos"}},
                {"_id": "r2", "_score": 1.1, "_source": {"title": "Spicy Soup"}},
            ]
        }}

        page = await backend.execute(backend.compile(SearchQuery(text="chicken")))

        assert page.total == 12
        assert page.documents == [
            {"_id": "r1", "title": "Chicken Tacos", "score": 3.2},
            {"_id": "r2", "title": "Spicy Soup", "score": 1.1},
        ]
        assert client.search.await_args.kwargs["index"] == "recipes"

    @pytest.mark.asyncio
    async def test_no_score_without_text(self, backend, client):
        client.search.return_value = {"hits": {
            "total": {"value": 1},
            "hits": [{"_id": "r1", "_score": 1.0, "_source": {"title": "Soup"}}]
        }}

        page = await backend.execute(backend.compile(SearchQuery()))

        assert page.documents == [{"_id": "r1", "title": "Soup"}]

    @pytest.mark.asyncio
    async def test_failure_is_database_error(self, backend, client):
        client.search.side_effect = ConnectionError("cluster unavailable")

        with pytest.raises(DatabaseError, match="^Search failed$"):
            await backend.execute(backend.compile(SearchQuery()))

    @pytest.mark.asyncio
    async def test_facet_maps_buckets(self, backend, client):
        client.search.return_value = {"hits": {"hits": []}, "aggregations": {
            "difficulty": {"buckets": [{"key": "easy", "doc_count": 4}, {"key": "hard", "doc_count": 1}]},
            "tags": {"buckets": []}
        }}

        raw = await backend.facet(backend.compile_facets(SearchQuery()))

        assert raw == {
            "difficulty": [{"_id": "easy", "count": 4}, {"_id": "hard", "count": 1}],
            "tags": []
        }


class TestSuggest:
    """Test suite for autocomplete suggestions."""

    @pytest.mark.asyncio
    async def test_suggests_recipes_and_ingredients(self, backend, client):
        client.search.return_value = {"hits": {"hits": [
            {"_id": "r1", "_index": "recipes", "_source": {"title": "Chicken Tacos"},
             "highlight": {"title": ["<em>Chick</em>en Tacos"]}},
            {"_id": "i1", "_index": "ingredients", "_source": {"name": "chickpeas"}},
        ]}}

        suggestions = await backend.suggest("chick", limit=3)

        assert [(s.id, s.text, s.type) for s in suggestions] == [
            ("r1", "Chicken Tacos", "recipe"),
            ("i1", "chickpeas", "ingredient"),
        ]
        assert suggestions[0].highlights == {"title": ["<em>Chick</em>en Tacos"]}

        kwargs = client.search.await_args.kwargs
        assert kwargs["index"] == ["recipes", "ingredients"]
        assert kwargs["size"] == 3
        assert kwargs["query"]["multi_match"]["type"] == "phrase_prefix"

    @pytest.mark.asyncio
    async def test_blank_prefix_skips_request(self, backend, client):
        assert await backend.suggest("   ") == []
        client.search.assert_not_awaited()
