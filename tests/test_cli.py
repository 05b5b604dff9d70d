"""
Tests for the command line interface.
"""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
from click.testing import CliRunner

from recipe_search.core.entities import (
    Highlights,
    MatchFactors,
    Recipe,
    ScoredRecipe,
    SearchFilters,
    SearchQuery,
    SearchResult,
    SearchResults,
    Suggestion
)
from recipe_search.presentation.cli.main import cli
from recipe_search.shared.exceptions import DatabaseError, ValidationError


class FakeContainer:
    """Stands in for SearchContainer without touching any backend."""

    def __init__(self):
        self.search_service = Mock()
        self.search_service.search = AsyncMock(return_value=SearchResults(
            results=(SearchResult(
                id="r1",
                title="Spicy Chicken Tacos",
                score=2.0,
                highlights=Highlights(title=("Spicy Chicken Tacos",))
            ),),
            total=1,
            page=1,
            total_pages=1
        ))
        self.search_service.suggest = AsyncMock(return_value=[
            Suggestion(id="r1", text="Chicken Tacos", type="recipe")
        ])
        self.recommendation_service = Mock()
        self.recommendation_service.recommended_recipes = AsyncMock(return_value=[
            ScoredRecipe(
                recipe=Recipe(id="r2", title="Lasagna", cuisine="Italian"),
                match_score=0.3,
                match_factors=MatchFactors(1.0, 0.5, 0.0, 0.5, 0.5, 0.5)
            )
        ])

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None


@pytest.fixture
def container():
    return FakeContainer()


@pytest.fixture
def runner(container):
    with patch("recipe_search.presentation.cli.main.SearchContainer", return_value=container):
        yield CliRunner()


class TestCli:
    """Test suite for the recipe-search command."""

    def test_search_prints_json(self, runner, container):
        result = runner.invoke(cli, [
            "--json", "search", "spicy chicken", "--cuisine", "Mexican", "--limit", "10"
        ])

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["total"] == 1
        assert output["results"][0]["highlights"] == {"title": ["Spicy Chicken Tacos"]}

        query = container.search_service.search.await_args.args[0]
        assert query == SearchQuery(
            text="spicy chicken",
            filters=SearchFilters(cuisine=["Mexican"]),
            limit=10
        )

    def test_search_plain_table(self, runner):
        result = runner.invoke(cli, ["--plain", "search", "tacos"])

        assert result.exit_code == 0
        assert "Spicy Chicken Tacos" in result.output
        assert "Found 1 recipes" in result.output

    def test_invalid_query_exits_with_2(self, runner, container):
        container.search_service.search.side_effect = ValidationError(
            "Invalid search query: page must be a positive integer"
        )

        result = runner.invoke(cli, ["--plain", "search", "tacos", "--page", "0"])

        assert result.exit_code == 2
        assert "page must be a positive integer" in result.output

    def test_backend_failure_exits_with_1(self, runner, container):
        container.search_service.search.side_effect = DatabaseError("Search failed")

        result = runner.invoke(cli, ["--plain", "search", "tacos"])

        assert result.exit_code == 1
        assert "Search failed" in result.output

    def test_suggest(self, runner, container):
        result = runner.invoke(cli, ["--json", "suggest", "chick", "--limit", "3"])

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["text"] == "Chicken Tacos"
        container.search_service.suggest.assert_awaited_once_with("chick", limit=3)

    def test_recommend_builds_context(self, runner, container):
        result = runner.invoke(cli, [
            "--json", "recommend", "--user-id", "u1", "--cuisine", "Italian",
            "--max-time", "30", "--viewed", "r9"
        ])

        assert result.exit_code == 0
        context = container.recommendation_service.recommended_recipes.await_args.args[0]
        assert context.user_id == "u1"
        assert context.preferences.cuisines == ("Italian",)
        assert context.preferences.max_time == 30
        assert context.history.viewed == ("r9",)
        assert json.loads(result.output)[0]["recipe"]["id"] == "r2"

    def test_invalid_configuration(self):
        with patch(
            "recipe_search.presentation.cli.main.SearchContainer",
            side_effect=ValueError("Search default backend must be one of: aggregation, fulltext")
        ):
            result = CliRunner().invoke(cli, ["search", "tacos"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
