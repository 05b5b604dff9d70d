"""
Recipe view and recommendation models.

``Recipe`` is a read-only projection of a stored recipe document holding
only the attributes the scoring and recommendation code look at.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


def _names(items: Any, key: str) -> Tuple[str, ...]:
    names = []
    for item in items or ():
        if isinstance(item, Mapping):
            value = item.get(key)
        else:
            value = item
        if isinstance(value, str):
            names.append(value)
    return tuple(names)


@dataclass(frozen=True)
class Recipe:
    """
    Recipe attributes used for scoring.

    Times are kept as stored; a missing time counts as zero and a
    non-numeric time makes scoring fail.
    """
    id: str
    title: str = ""
    description: str = ""
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    meal_type: Optional[str] = None
    tags: Tuple[str, ...] = ()
    seasons: Tuple[str, ...] = ()
    dietary_restrictions: Tuple[str, ...] = ()
    ingredients: Tuple[str, ...] = ()
    instructions: Tuple[str, ...] = ()
    prep_time: Any = 0
    cook_time: Any = 0
    rating_average: Optional[float] = None

    @property
    def total_time(self) -> float:
        """Preparation plus cooking time in minutes."""
        return (self.prep_time or 0) + (self.cook_time or 0)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Recipe":
        """
        Build a recipe view from a stored document.

        Args:
            document: Recipe document as stored in the recipes collection

        Returns:
            Recipe: Recipe view
        """
        ratings = document.get("ratings")
        rating_average = ratings.get("average") if isinstance(ratings, Mapping) else None

        return cls(
            id=str(document.get("_id", document.get("id", ""))),
            title=document.get("title") or "",
            description=document.get("description") or "",
            cuisine=document.get("cuisine"),
            difficulty=document.get("difficulty"),
            meal_type=document.get("mealType"),
            tags=_names(document.get("tags"), "name"),
            seasons=_names(document.get("seasons"), "name"),
            dietary_restrictions=_names(document.get("dietaryRestrictions"), "name"),
            ingredients=_names(document.get("ingredients"), "name"),
            instructions=_names(document.get("instructions"), "text"),
            prep_time=document.get("prepTime"),
            cook_time=document.get("cookTime"),
            rating_average=rating_average
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'cuisine': self.cuisine,
            'difficulty': self.difficulty,
            'meal_type': self.meal_type,
            'tags': list(self.tags),
            'seasons': list(self.seasons),
            'total_time': self._safe_total_time(),
            'rating_average': self.rating_average
        }

    def _safe_total_time(self) -> Optional[float]:
        try:
            return self.total_time
        except TypeError:
            return None


@dataclass(frozen=True)
class Preferences:
    """User preferences driving recommendations."""
    cuisines: Tuple[str, ...] = ()
    difficulty: Tuple[str, ...] = ()
    max_time: Optional[float] = None


@dataclass(frozen=True)
class History:
    """Recipe ids the user interacted with."""
    viewed: Tuple[str, ...] = ()
    liked: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationContext:
    """Everything known about the user when asking for recommendations."""
    user_id: Optional[str] = None
    preferences: Optional[Preferences] = None
    history: Optional[History] = None
    season: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecommendationContext":
        """
        Build a context from a loosely structured mapping.

        Accepts both ``max_time`` and ``maxTime`` style keys for the
        nested preference and history sections.
        """
        preferences = None
        raw_preferences = data.get("preferences")
        if raw_preferences:
            preferences = Preferences(
                cuisines=tuple(raw_preferences.get("cuisines") or ()),
                difficulty=tuple(raw_preferences.get("difficulty") or ()),
                max_time=raw_preferences.get("max_time", raw_preferences.get("maxTime"))
            )

        history = None
        raw_history = data.get("history")
        if raw_history:
            history = History(
                viewed=tuple(str(i) for i in raw_history.get("viewed", raw_history.get("viewedRecipes")) or ()),
                liked=tuple(str(i) for i in raw_history.get("liked", raw_history.get("likedRecipes")) or ())
            )

        return cls(
            user_id=data.get("user_id", data.get("userId")),
            preferences=preferences,
            history=history,
            season=data.get("season")
        )


@dataclass(frozen=True)
class MatchFactors:
    """Explainability vector for a recommendation, each factor in [0, 1]."""
    preferences: float
    history: float
    popularity: float
    seasonality: float
    difficulty: float
    timing: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'preferences': self.preferences,
            'history': self.history,
            'popularity': self.popularity,
            'seasonality': self.seasonality,
            'difficulty': self.difficulty,
            'timing': self.timing
        }


@dataclass(frozen=True)
class ScoredRecipe:
    recipe: Recipe
    match_score: float
    match_factors: MatchFactors = field(compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'recipe': self.recipe.to_dict(),
            'match_score': self.match_score,
            'match_factors': self.match_factors.to_dict()
        }
