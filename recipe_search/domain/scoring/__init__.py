from .recipe_scoring_service import RecipeScoringService, clamp, total_time

__all__ = ['RecipeScoringService', 'clamp', 'total_time']
