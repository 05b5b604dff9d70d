"""
Tests for recipe similarity and recommendation scoring.
"""

import pytest

from recipe_search.core.entities import (
    History,
    Preferences,
    Recipe,
    RecommendationContext
)
from recipe_search.domain.scoring import RecipeScoringService, clamp, total_time
from recipe_search.shared.exceptions import ScoringError


@pytest.fixture
def scoring():
    return RecipeScoringService()


def _recipe(**kwargs):
    defaults = {"id": "r1", "cuisine": "Italian", "difficulty": "easy", "prep_time": 10, "cook_time": 10}
    defaults.update(kwargs)
    return Recipe(**defaults)


class TestSimilarityScore:
    """Test suite for recipe-to-recipe similarity."""

    def test_time_difference_decays_time_term(self, scoring):
        """Same cuisine and difficulty, disjoint tags, 90 minutes apart."""
        a = _recipe(id="a", tags=("pasta",), prep_time=10, cook_time=20)
        b = _recipe(id="b", tags=("soup",), prep_time=60, cook_time=60)

        assert scoring.similarity_score(a, b) == pytest.approx(0.55)

    def test_identical_recipes_score_one(self, scoring):
        a = _recipe(id="a", tags=("quick", "pasta"))
        b = _recipe(id="b", tags=("pasta", "quick"))
        assert scoring.similarity_score(a, b) == pytest.approx(1.0)

    def test_tag_overlap_uses_larger_set(self, scoring):
        a = _recipe(id="a", cuisine="Thai", difficulty="hard", tags=("a", "b", "c", "d"))
        b = _recipe(id="b", cuisine="Greek", difficulty="easy", tags=("a", "b"))
        # 0.3 * 2/4 plus the full time term
        assert scoring.similarity_score(a, b) == pytest.approx(0.35)

    def test_empty_tags_contribute_nothing(self, scoring):
        a = _recipe(id="a", cuisine=None, difficulty=None)
        b = _recipe(id="b", cuisine=None, difficulty=None)
        assert scoring.similarity_score(a, b) == pytest.approx(0.2)

    def test_missing_cuisine_never_matches(self, scoring):
        a = _recipe(id="a", cuisine="", difficulty="medium", prep_time=0, cook_time=0)
        b = _recipe(id="b", cuisine="", difficulty="hard", prep_time=0, cook_time=300)
        assert scoring.similarity_score(a, b) == 0.0

    def test_is_symmetric(self, scoring):
        a = _recipe(id="a", cuisine="Thai", tags=("curry", "spicy", "rice"), prep_time=15, cook_time=25)
        b = _recipe(id="b", cuisine="Thai", difficulty="hard", tags=("spicy",), prep_time=30, cook_time=45)
        assert scoring.similarity_score(a, b) == scoring.similarity_score(b, a)

    def test_missing_times_count_as_zero(self, scoring):
        a = _recipe(id="a", prep_time=None, cook_time=None)
        b = _recipe(id="b", prep_time=0, cook_time=0)
        assert scoring.similarity_score(a, b) == pytest.approx(0.7)

    def test_non_numeric_time_raises_scoring_error(self, scoring):
        a = _recipe(id="a", prep_time="ten")
        with pytest.raises(ScoringError) as exc_info:
            scoring.similarity_score(a, _recipe(id="b"))

        assert exc_info.value.operation == "similarity score"
        assert exc_info.value.message.startswith("Failed to calculate similarity score")
        assert isinstance(exc_info.value.cause, TypeError)

    def test_factors(self, scoring):
        a = _recipe(id="a", prep_time=10, cook_time=20)
        b = _recipe(id="b", difficulty="hard", prep_time=30, cook_time=30, rating_average=4.0)

        factors = scoring.similarity_factors(a, b)

        assert factors.preferences == 1.0
        assert factors.difficulty == 0.0
        assert factors.history == 0.5
        assert factors.seasonality == 0.5
        assert factors.popularity == pytest.approx(0.8)
        assert factors.timing == pytest.approx(0.5)

    def test_factors_error_names_operation(self, scoring):
        with pytest.raises(ScoringError) as exc_info:
            scoring.similarity_factors(_recipe(id="a", cook_time=[1]), _recipe(id="b"))
        assert exc_info.value.operation == "match factors"


class TestContextScore:
    """Test suite for context-aware recommendation scoring."""

    def test_cuisine_and_time_terms(self, scoring):
        recipe = _recipe(cuisine="Italian", difficulty="hard", prep_time=5, cook_time=15)
        context = RecommendationContext(preferences=Preferences(cuisines=("Italian",), max_time=30))

        assert scoring.context_score(recipe, context) == pytest.approx(0.3667, abs=1e-4)

    def test_over_time_gets_no_time_term(self, scoring):
        recipe = _recipe(cuisine="Greek", prep_time=30, cook_time=30)
        context = RecommendationContext(preferences=Preferences(max_time=30))
        assert scoring.context_score(recipe, context) == 0.0

    def test_time_term_never_exceeds_its_weight(self, scoring):
        recipe = _recipe(prep_time=-60)
        context = RecommendationContext(preferences=Preferences(max_time=30))

        assert scoring.context_score(recipe, context) == pytest.approx(0.2)
        assert scoring.context_factors(recipe, context).timing == 1.0

    def test_all_terms_clamped_to_one(self, scoring):
        recipe = _recipe(
            cuisine="Italian", difficulty="easy", prep_time=0, cook_time=0,
            rating_average=5.0, seasons=("summer",)
        )
        context = RecommendationContext(
            preferences=Preferences(cuisines=("Italian",), difficulty=("easy",), max_time=60),
            season="summer"
        )
        assert scoring.context_score(recipe, context) == pytest.approx(1.0)

    def test_rating_and_season(self, scoring):
        recipe = _recipe(rating_average=2.5, seasons=("winter",))
        context = RecommendationContext(season="winter")
        assert scoring.context_score(recipe, context) == pytest.approx(0.25)

    def test_rating_above_maximum_is_clamped(self, scoring):
        recipe = _recipe(rating_average=9)
        assert scoring.context_score(recipe, RecommendationContext()) == pytest.approx(0.1)

    def test_bad_rating_raises_scoring_error(self, scoring):
        recipe = _recipe(rating_average="great")
        with pytest.raises(ScoringError) as exc_info:
            scoring.context_score(recipe, RecommendationContext())
        assert exc_info.value.operation == "context score"

    def test_factors_without_context_are_neutral(self, scoring):
        factors = scoring.context_factors(_recipe(), RecommendationContext())

        assert factors.history == 0.5
        assert factors.seasonality == 0.5
        assert factors.difficulty == 0.5
        assert factors.timing == 0.5
        assert factors.preferences == 0.0
        assert factors.popularity == 0.0

    def test_factors_explicit_mismatch_is_zero(self, scoring):
        recipe = _recipe(id="r9", difficulty="hard", seasons=("winter",), prep_time=40, cook_time=40)
        context = RecommendationContext(
            preferences=Preferences(cuisines=("Italian",), difficulty=("easy",), max_time=60),
            history=History(liked=("r1",)),
            season="summer"
        )

        factors = scoring.context_factors(recipe, context)

        assert factors.preferences == 1.0
        assert factors.history == 0.0
        assert factors.seasonality == 0.0
        assert factors.difficulty == 0.0
        assert factors.timing == 0.0

    def test_factors_within_bounds(self, scoring):
        recipe = _recipe(rating_average=4.5, prep_time=5, cook_time=5)
        context = RecommendationContext(preferences=Preferences(max_time=40))

        for value in scoring.context_factors(recipe, context).to_dict().values():
            assert 0.0 <= value <= 1.0


def test_clamp():
    assert clamp(1.7) == 1.0
    assert clamp(-0.2) == 0.0
    assert clamp(0.4) == 0.4


def test_total_time():
    assert total_time(_recipe(prep_time=15, cook_time=None)) == 15
