"""
Recipe scoring.

Pure computations of recipe-to-recipe similarity and context-aware
recommendation scores, each paired with a match-factor breakdown. Scores
and factors always lie in [0, 1].
"""

from numbers import Real
from typing import Optional

from ...core.entities import MatchFactors, Recipe, RecommendationContext
from ...shared.exceptions import scoring_operation

CUISINE_WEIGHT = 0.30
TAG_WEIGHT = 0.30
DIFFICULTY_WEIGHT = 0.20
TIME_WEIGHT = 0.20
# Similarity time term loses this much per hour of difference
TIME_DECAY_PER_HOUR = 0.10
POPULARITY_WEIGHT = 0.10
SEASON_WEIGHT = 0.20
MAX_RATING = 5

NEUTRAL = 0.5


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _minutes(value) -> float:
    if value is None:
        return 0
    if not isinstance(value, Real) or isinstance(value, bool):
        raise TypeError(f"time must be a number, got {type(value).__name__}")
    return value


def total_time(recipe: Recipe) -> float:
    """Preparation plus cooking time; missing times count as zero."""
    return _minutes(recipe.prep_time) + _minutes(recipe.cook_time)


def _rating(recipe: Recipe) -> float:
    average = recipe.rating_average
    if average is None:
        return 0
    if not isinstance(average, Real) or isinstance(average, bool):
        raise TypeError(f"rating must be a number, got {type(average).__name__}")
    return clamp(average / MAX_RATING)


def _same(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a == b


class RecipeScoringService:
    """
    Scores recipes against each other or against a user context.

    Any failure inside a computation is raised as ``ScoringError`` naming
    the operation.
    """

    @scoring_operation("similarity score")
    def similarity_score(self, recipe_a: Recipe, recipe_b: Recipe) -> float:
        """
        Symmetric similarity of two recipes.

        Args:
            recipe_a: First recipe
            recipe_b: Second recipe

        Returns:
            float: Score in [0, 1]
        """
        score = 0.0

        if _same(recipe_a.cuisine, recipe_b.cuisine):
            score += CUISINE_WEIGHT

        tags_a, tags_b = set(recipe_a.tags), set(recipe_b.tags)
        larger = max(len(tags_a), len(tags_b))
        if larger:
            score += TAG_WEIGHT * len(tags_a & tags_b) / larger

        if _same(recipe_a.difficulty, recipe_b.difficulty):
            score += DIFFICULTY_WEIGHT

        difference = abs(total_time(recipe_a) - total_time(recipe_b))
        score += max(0.0, TIME_WEIGHT - (difference / 60) * TIME_DECAY_PER_HOUR)

        return clamp(score)

    @scoring_operation("match factors")
    def similarity_factors(self, recipe_a: Recipe, recipe_b: Recipe) -> MatchFactors:
        """
        Factor breakdown accompanying ``similarity_score``.

        History and seasonality do not apply to recipe pairs and stay
        neutral; popularity reflects the candidate ``recipe_b``.
        """
        difference = abs(total_time(recipe_a) - total_time(recipe_b))
        return MatchFactors(
            preferences=1.0 if _same(recipe_a.cuisine, recipe_b.cuisine) else 0.0,
            history=NEUTRAL,
            popularity=_rating(recipe_b),
            seasonality=NEUTRAL,
            difficulty=1.0 if _same(recipe_a.difficulty, recipe_b.difficulty) else 0.0,
            timing=clamp(1 - difference / 60)
        )

    @scoring_operation("context score")
    def context_score(self, recipe: Recipe, context: RecommendationContext) -> float:
        """
        Recommendation score of a recipe for a user context.

        Args:
            recipe: Candidate recipe
            context: User preferences, history and season

        Returns:
            float: Score in [0, 1]
        """
        score = 0.0
        preferences = context.preferences

        if preferences is not None:
            if recipe.cuisine and recipe.cuisine in preferences.cuisines:
                score += CUISINE_WEIGHT
            if recipe.difficulty and recipe.difficulty in preferences.difficulty:
                score += DIFFICULTY_WEIGHT
            if preferences.max_time:
                minutes = total_time(recipe)
                if minutes <= preferences.max_time:
                    score += TIME_WEIGHT * clamp(1 - minutes / preferences.max_time)

        score += POPULARITY_WEIGHT * _rating(recipe)

        if context.season and context.season in recipe.seasons:
            score += SEASON_WEIGHT

        return clamp(score)

    @scoring_operation("context factors")
    def context_factors(self, recipe: Recipe, context: RecommendationContext) -> MatchFactors:
        """
        Factor breakdown accompanying ``context_score``.

        Missing history, season, difficulty or time preferences yield a
        neutral 0.5; only an explicit mismatch yields 0.
        """
        preferences = context.preferences
        liked = context.history.liked if context.history is not None else ()

        if liked:
            history = 1.0 if recipe.id in liked else 0.0
        else:
            history = NEUTRAL

        if context.season:
            seasonality = 1.0 if context.season in recipe.seasons else 0.0
        else:
            seasonality = NEUTRAL

        if preferences is not None and preferences.difficulty:
            difficulty = 1.0 if recipe.difficulty in preferences.difficulty else 0.0
        else:
            difficulty = NEUTRAL

        if preferences is not None and preferences.max_time:
            timing = clamp(1 - total_time(recipe) / preferences.max_time)
        else:
            timing = NEUTRAL

        cuisines = preferences.cuisines if preferences is not None else ()
        return MatchFactors(
            preferences=1.0 if recipe.cuisine and recipe.cuisine in cuisines else 0.0,
            history=history,
            popularity=_rating(recipe),
            seasonality=seasonality,
            difficulty=difficulty,
            timing=timing
        )
