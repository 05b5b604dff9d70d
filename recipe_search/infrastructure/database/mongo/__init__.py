from .aggregation_backend import AggregationBackend
from .recipe_repository import MongoRecipeRepository

__all__ = ['AggregationBackend', 'MongoRecipeRepository']
