"""
Repository interface for recipe lookups used by recommendations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..entities import Recipe, RecommendationContext


class RecipeRepositoryInterface(ABC):
    """
    Read-only access to stored recipe documents.

    Implementations raise ``DatabaseError`` when the store fails.
    """

    @abstractmethod
    async def get_by_id(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a recipe document by id.

        Args:
            recipe_id: Recipe identifier

        Returns:
            Optional[Dict[str, Any]]: The document if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_similar_candidates(self, recipe: Recipe, limit: int) -> List[Dict[str, Any]]:
        """
        Find recipes sharing cuisine, any tag or difficulty with ``recipe``.

        Args:
            recipe: Reference recipe, never part of the result
            limit: Maximum number of candidates

        Returns:
            List[Dict[str, Any]]: Candidate documents
        """
        pass

    @abstractmethod
    async def find_recommendation_candidates(
        self,
        context: RecommendationContext,
        limit: int
    ) -> List[Dict[str, Any]]:
        """
        Find recipes matching the user's preferences, excluding viewed ones.

        Args:
            context: Recommendation context
            limit: Maximum number of candidates

        Returns:
            List[Dict[str, Any]]: Candidate documents
        """
        pass
