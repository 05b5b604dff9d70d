"""
Search commands for CLI.

This module provides command handlers for search, facet, suggestion
and recommendation operations.
"""

from typing import Any, Dict, List, Mapping, Optional

from ...cli.handlers.cli_handler import CommandHandler, CommandResult
from ...cli.formatters.output_formatter import OutputFormatter
from ....application.services import RecommendationApplicationService, SearchApplicationService
from ....core.entities import RecommendationContext, ScoredRecipe, SearchFacets, SearchQuery


def _facet_rows(facets: SearchFacets) -> List[Dict[str, Any]]:
    return [
        {"Dimension": dimension, "Value": bucket["value"], "Count": bucket["count"]}
        for dimension, buckets in facets.to_dict().items()
        for bucket in buckets
    ]


def _scored_rows(recipes: List[ScoredRecipe]) -> List[Dict[str, Any]]:
    return [
        {
            "ID": item.recipe.id,
            "Title": item.recipe.title,
            "Cuisine": item.recipe.cuisine or "",
            "Score": f"{item.match_score:.4f}"
        }
        for item in recipes
    ]


class SearchCommand(CommandHandler):
    """Command handler for recipe search."""

    def __init__(self, formatter: OutputFormatter, search_service: SearchApplicationService):
        super().__init__(formatter)
        self.search_service = search_service

    async def run(
        self,
        params: Mapping[str, Any],
        backend: Optional[str] = None,
        user_id: Optional[str] = None,
        with_facets: bool = False,
        **kwargs: Any
    ) -> CommandResult:
        """
        Run a search and print one page of results.

        Args:
            params: Request parameters accepted by ``SearchQuery.from_params``
            backend: Optional backend name
            user_id: Optional user id for analytics
            with_facets: Whether facets are fetched alongside the results

        Returns:
            CommandResult: Results (and facets) as dictionaries
        """
        query = SearchQuery.from_params(params)
        facets = None
        if with_facets:
            results, facets = await self.search_service.search_with_facets(
                query, user_id=user_id, backend=backend
            )
        else:
            results = await self.search_service.search(query, user_id=user_id, backend=backend)

        data = results.to_dict()
        if facets is not None:
            data["facets"] = facets.to_dict()

        rows = [
            {
                "ID": result.id,
                "Title": result.title,
                "Score": f"{result.score:.2f}" if result.score is not None else "",
                "Matched": ", ".join(result.highlights.to_dict()) if result.highlights else ""
            }
            for result in results.results
        ]
        self.formatter.print_data(data, rows, title=f"Page {results.page} of {results.total_pages}")
        if facets is not None and not self.formatter.as_json:
            self.formatter.print(self.formatter.format_table(_facet_rows(facets), title="Facets"))

        return self.handle_success(f"Found {results.total} recipes", data=data)


class FacetsCommand(CommandHandler):
    """Command handler for facet computation."""

    def __init__(self, formatter: OutputFormatter, search_service: SearchApplicationService):
        super().__init__(formatter)
        self.search_service = search_service

    async def run(self, params: Mapping[str, Any], backend: Optional[str] = None, **kwargs: Any) -> CommandResult:
        query = SearchQuery.from_params(params)
        facets = await self.search_service.get_facets(query, backend=backend)
        data = facets.to_dict()
        self.formatter.print_data(data, _facet_rows(facets), title="Facets")
        return self.handle_success("Facets computed", data=data)


class SuggestCommand(CommandHandler):
    """Command handler for autocomplete suggestions."""

    def __init__(self, formatter: OutputFormatter, search_service: SearchApplicationService):
        super().__init__(formatter)
        self.search_service = search_service

    async def run(self, prefix: str, limit: Optional[int] = None, **kwargs: Any) -> CommandResult:
        suggestions = await self.search_service.suggest(prefix, limit=limit)
        data = [suggestion.to_dict() for suggestion in suggestions]
        rows = [
            {"ID": suggestion.id, "Text": suggestion.text, "Type": suggestion.type}
            for suggestion in suggestions
        ]
        self.formatter.print_data(data, rows, title="Suggestions")
        return self.handle_success(f"{len(suggestions)} suggestions", data=data)


class SimilarCommand(CommandHandler):
    """Command handler for similar recipes."""

    def __init__(
        self,
        formatter: OutputFormatter,
        recommendation_service: RecommendationApplicationService
    ):
        super().__init__(formatter)
        self.recommendation_service = recommendation_service

    async def run(self, recipe_id: str, limit: int = 5, **kwargs: Any) -> CommandResult:
        recipes = await self.recommendation_service.similar_recipes(recipe_id, limit=limit)
        data = [item.to_dict() for item in recipes]
        self.formatter.print_data(data, _scored_rows(recipes), title=f"Similar to {recipe_id}")
        return self.handle_success(f"{len(recipes)} similar recipes", data=data)


class RecommendCommand(CommandHandler):
    """Command handler for personalized recommendations."""

    def __init__(
        self,
        formatter: OutputFormatter,
        recommendation_service: RecommendationApplicationService
    ):
        super().__init__(formatter)
        self.recommendation_service = recommendation_service

    async def run(self, context: RecommendationContext, limit: int = 10, **kwargs: Any) -> CommandResult:
        recipes = await self.recommendation_service.recommended_recipes(context, limit=limit)
        data = [item.to_dict() for item in recipes]
        self.formatter.print_data(data, _scored_rows(recipes), title="Recommended recipes")
        return self.handle_success(f"{len(recipes)} recommendations", data=data)
