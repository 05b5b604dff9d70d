"""
Command line entry point.

``recipe-search`` wires the search container to click commands. Invalid
input exits with status 2, backend failures with status 1.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional

import click

from ..containers import SearchContainer
from .commands.search_commands import (
    FacetsCommand,
    RecommendCommand,
    SearchCommand,
    SimilarCommand,
    SuggestCommand
)
from .formatters.output_formatter import OutputFormatter
from .handlers.cli_handler import CommandHandler
from ...core.entities import RecommendationContext

BACKENDS = click.Choice(["aggregation", "fulltext"])


@dataclass
class CliSettings:
    config_dir: str
    environment: Optional[str]
    formatter: OutputFormatter


async def _execute(
    settings: CliSettings,
    build: Callable[[SearchContainer, OutputFormatter], CommandHandler],
    **kwargs: Any
) -> int:
    try:
        container = SearchContainer(
            config_dir=settings.config_dir,
            environment=settings.environment
        )
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    async with container:
        result = await build(container, settings.formatter).execute(**kwargs)
    return result.exit_code


def _run(ctx: click.Context, build: Callable[[SearchContainer, OutputFormatter], CommandHandler], **kwargs: Any) -> None:
    ctx.exit(asyncio.run(_execute(ctx.obj, build, **kwargs)))


def _filter_params(category, cuisine, difficulty, ingredient, min_time, max_time) -> dict:
    return {
        "category": list(category) or None,
        "cuisine": list(cuisine) or None,
        "difficulty": list(difficulty) or None,
        "ingredients": list(ingredient) or None,
        "min_time": min_time,
        "max_time": max_time
    }


def filter_options(func: Callable) -> Callable:
    """Options shared by commands that accept search filters."""
    options = [
        click.option("--category", multiple=True, help="Category to include (repeatable)"),
        click.option("--cuisine", multiple=True, help="Cuisine to include (repeatable)"),
        click.option("--difficulty", multiple=True, help="Difficulty to include (repeatable)"),
        click.option("--ingredient", multiple=True, help="Ingredient that must be present (repeatable)"),
        click.option("--min-time", type=float, help="Minimum total time in minutes"),
        click.option("--max-time", type=float, help="Maximum total time in minutes"),
        click.option("--backend", type=BACKENDS, help="Search backend, defaults to configuration"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--config-dir", default="config", envvar="RECIPE_SEARCH_CONFIG_DIR", show_default=True,
              help="Directory holding base.yaml and environment overlays")
@click.option("--env", "environment", default=None, help="Configuration environment, defaults to APP_ENV")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.option("--plain", is_flag=True, help="Disable rich formatting")
@click.pass_context
def cli(ctx: click.Context, config_dir: str, environment: Optional[str], as_json: bool, plain: bool) -> None:
    """Search, facet and recommend recipes."""
    ctx.obj = CliSettings(
        config_dir=config_dir,
        environment=environment,
        formatter=OutputFormatter(use_rich=not plain, as_json=as_json)
    )


@cli.command()
@click.argument("text", required=False)
@filter_options
@click.option("--sort", help="Sort as field or field:asc|desc")
@click.option("--page", type=int, help="Page number, starting at 1")
@click.option("--limit", type=int, help="Results per page")
@click.option("--user-id", help="User id recorded with analytics")
@click.option("--facets", "with_facets", is_flag=True, help="Also compute facets")
@click.pass_context
def search(ctx, text, category, cuisine, difficulty, ingredient, min_time, max_time, backend,
           sort, page, limit, user_id, with_facets):
    """Search recipes by TEXT and filters."""
    params = _filter_params(category, cuisine, difficulty, ingredient, min_time, max_time)
    params.update({"text": text, "sort": sort, "page": page, "limit": limit})
    _run(
        ctx,
        lambda container, formatter: SearchCommand(formatter, container.search_service),
        params=params,
        backend=backend,
        user_id=user_id,
        with_facets=with_facets
    )


@cli.command()
@click.argument("text", required=False)
@filter_options
@click.pass_context
def facets(ctx, text, category, cuisine, difficulty, ingredient, min_time, max_time, backend):
    """Facet counts for TEXT and filters."""
    params = _filter_params(category, cuisine, difficulty, ingredient, min_time, max_time)
    params["text"] = text
    _run(
        ctx,
        lambda container, formatter: FacetsCommand(formatter, container.search_service),
        params=params,
        backend=backend
    )


@cli.command()
@click.argument("prefix")
@click.option("--limit", type=int, help="Maximum number of suggestions")
@click.pass_context
def suggest(ctx, prefix, limit):
    """Autocomplete suggestions for PREFIX."""
    _run(
        ctx,
        lambda container, formatter: SuggestCommand(formatter, container.search_service),
        prefix=prefix,
        limit=limit
    )


@cli.command()
@click.argument("recipe_id")
@click.option("--limit", type=int, default=5, show_default=True)
@click.pass_context
def similar(ctx, recipe_id, limit):
    """Recipes similar to RECIPE_ID."""
    _run(
        ctx,
        lambda container, formatter: SimilarCommand(formatter, container.recommendation_service),
        recipe_id=recipe_id,
        limit=limit
    )


@cli.command()
@click.option("--user-id", help="User the recommendations are for")
@click.option("--cuisine", multiple=True, help="Preferred cuisine (repeatable)")
@click.option("--difficulty", multiple=True, help="Preferred difficulty (repeatable)")
@click.option("--max-time", type=float, help="Maximum total time in minutes")
@click.option("--season", help="Current season")
@click.option("--liked", multiple=True, help="Id of a liked recipe (repeatable)")
@click.option("--viewed", multiple=True, help="Id of a viewed recipe to exclude (repeatable)")
@click.option("--limit", type=int, default=10, show_default=True)
@click.pass_context
def recommend(ctx, user_id, cuisine, difficulty, max_time, season, liked, viewed, limit):
    """Personalized recipe recommendations."""
    context = RecommendationContext.from_dict({
        "user_id": user_id,
        "preferences": {
            "cuisines": list(cuisine),
            "difficulty": list(difficulty),
            "max_time": max_time
        } if cuisine or difficulty or max_time else None,
        "history": {"liked": list(liked), "viewed": list(viewed)} if liked or viewed else None,
        "season": season
    })
    _run(
        ctx,
        lambda container, formatter: RecommendCommand(formatter, container.recommendation_service),
        context=context,
        limit=limit
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
