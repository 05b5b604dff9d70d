"""
Recipe recommendations.

Fetches candidate recipes from the store and ranks them with the
scoring service, either against a reference recipe or against a user
context.
"""

from typing import Any, Dict, List, Optional

from ...core.entities import Recipe, RecommendationContext, ScoredRecipe
from ...core.interfaces import RecipeRepositoryInterface
from ...domain.scoring import RecipeScoringService
from ...shared.exceptions import ValidationError
from ...shared.logging import configure_logging
from .instrumentation_service import InstrumentationService

logger = configure_logging(__name__)

# Candidates fetched per requested recommendation
CANDIDATE_FACTOR = 2


def _check_limit(limit: Any) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValidationError("limit must be a positive integer")
    return limit


def _rank(scored: List[ScoredRecipe], limit: int) -> List[ScoredRecipe]:
    return sorted(scored, key=lambda item: (-item.match_score, item.recipe.id))[:limit]


class RecommendationApplicationService:
    """Application service for similar and personalized recipes."""

    def __init__(
        self,
        repository: RecipeRepositoryInterface,
        instrumentation: InstrumentationService,
        scoring: Optional[RecipeScoringService] = None
    ):
        self.repository = repository
        self.instrumentation = instrumentation
        self.scoring = scoring or RecipeScoringService()

    async def similar_recipes(
        self,
        recipe_id: str,
        limit: int = 5,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None
    ) -> List[ScoredRecipe]:
        """
        Recipes most similar to a reference recipe.

        Args:
            recipe_id: Id of the reference recipe
            limit: Maximum number of recipes returned
            user_id: Optional user id for analytics
            session_id: Optional session id for analytics

        Returns:
            List[ScoredRecipe]: Best matches first

        Raises:
            ValidationError: If the limit is invalid or the recipe does not exist
            DatabaseError: If the store fails
            ScoringError: If a candidate cannot be scored
        """
        with self.instrumentation.measure(
            "similar recipes",
            query=str(recipe_id),
            filters={"limit": limit},
            user_id=user_id,
            session_id=session_id
        ) as measurement:
            limit = _check_limit(limit)
            document = await self.repository.get_by_id(recipe_id)
            if document is None:
                raise ValidationError("Recipe not found")

            reference = Recipe.from_document(document)
            candidates = await self.repository.find_similar_candidates(
                reference, limit * CANDIDATE_FACTOR
            )

            scored = []
            for candidate in map(Recipe.from_document, candidates):
                if candidate.id == reference.id:
                    continue
                scored.append(ScoredRecipe(
                    recipe=candidate,
                    match_score=self.scoring.similarity_score(reference, candidate),
                    match_factors=self.scoring.similarity_factors(reference, candidate)
                ))

            ranked = _rank(scored, limit)
            measurement.result_count = len(ranked)

        logger.debug("Similar recipes ranked", recipe_id=str(recipe_id), candidates=len(scored))
        return ranked

    async def recommended_recipes(
        self,
        context: RecommendationContext,
        limit: int = 10,
        session_id: Optional[str] = None
    ) -> List[ScoredRecipe]:
        """
        Recipes recommended for a user context.

        Args:
            context: Preferences, history and season of the user
            limit: Maximum number of recipes returned
            session_id: Optional session id for analytics

        Returns:
            List[ScoredRecipe]: Best matches first

        Raises:
            ValidationError: If the limit is invalid
            DatabaseError: If the store fails
            ScoringError: If a candidate cannot be scored
        """
        with self.instrumentation.measure(
            "recommended recipes",
            filters=self._describe(context, limit),
            user_id=context.user_id,
            session_id=session_id
        ) as measurement:
            limit = _check_limit(limit)
            candidates = await self.repository.find_recommendation_candidates(
                context, limit * CANDIDATE_FACTOR
            )

            scored = [
                ScoredRecipe(
                    recipe=recipe,
                    match_score=self.scoring.context_score(recipe, context),
                    match_factors=self.scoring.context_factors(recipe, context)
                )
                for recipe in map(Recipe.from_document, candidates)
            ]

            ranked = _rank(scored, limit)
            measurement.result_count = len(ranked)

        return ranked

    @staticmethod
    def _describe(context: RecommendationContext, limit: Any) -> Dict[str, Any]:
        described: Dict[str, Any] = {"limit": limit}
        if context.preferences is not None:
            described["cuisines"] = list(context.preferences.cuisines)
            described["difficulty"] = list(context.preferences.difficulty)
            described["max_time"] = context.preferences.max_time
        if context.season:
            described["season"] = context.season
        return described
