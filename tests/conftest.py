"""
Test configuration and fixtures for recipe search tests.
"""

from collections import Counter
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from recipe_search.application.services import InstrumentationService, SearchApplicationService
from recipe_search.core.entities import (
    CompiledQuery,
    GroupStage,
    InPredicate,
    AllPredicate,
    LimitStage,
    MatchStage,
    PerformanceRecord,
    RangePredicate,
    SearchEvent,
    SkipStage,
    SortDirection,
    SortStage,
    UnwindStage
)
from recipe_search.core.interfaces import (
    BackendPage,
    InstrumentationSinkInterface,
    RawFacets,
    SearchBackendInterface
)
from recipe_search.domain.search import QueryCompiler
from recipe_search.domain.search.highlight_service import tokenize
from recipe_search.infrastructure.config import EnvironmentConfig
from recipe_search.shared.exceptions import database_operation

TEXT_FIELDS = ("title", "description")

MEXICAN_DISHES = [
    "Tacos", "Enchiladas", "Quesadillas", "Burritos", "Tostadas",
    "Fajitas", "Tamales", "Pozole", "Chilaquiles", "Sopes",
    "Flautas", "Gorditas", "Tortas", "Nachos", "Mole"
]
DIFFICULTIES = ["easy", "medium", "hard"]


def make_recipe(
    recipe_id: str,
    title: str,
    cuisine: str,
    description: str = "",
    ingredients: Optional[List[str]] = None,
    difficulty: str = "easy",
    category: str = "main",
    meal_type: str = "dinner",
    tags: Optional[List[str]] = None,
    dietary: Optional[List[str]] = None,
    prep_time: int = 10,
    cook_time: int = 20,
    rating: Optional[float] = 4.0
) -> Dict[str, Any]:
    """Build a stored recipe document."""
    return {
        "_id": recipe_id,
        "title": title,
        "description": description,
        "cuisine": cuisine,
        "category": category,
        "difficulty": difficulty,
        "mealType": meal_type,
        "tags": tags or [],
        "dietaryRestrictions": dietary or [],
        "seasons": [],
        "ingredients": [{"name": name, "amount": 1} for name in ingredients or []],
        "instructions": [{"step": 1, "text": f"Prepare the {title.lower()}."}],
        "prepTime": prep_time,
        "cookTime": cook_time,
        "totalTime": prep_time + cook_time,
        "ratings": {"average": rating, "count": 10} if rating is not None else None
    }


def _field_values(document: Dict[str, Any], path: str) -> List[Any]:
    values: List[Any] = [document]
    for part in path.split("."):
        next_values = []
        for value in values:
            if isinstance(value, dict) and part in value:
                item = value[part]
                if isinstance(item, list):
                    next_values.extend(item)
                else:
                    next_values.append(item)
        values = next_values
    return values


def _order(value: Any):
    return (value is None, value)


class InMemoryBackend(SearchBackendInterface):
    """
    Search backend interpreting compiled pipelines over a list of documents.

    Text matches when any token is a substring of the title, description
    or an ingredient name; the score is the number of matching tokens.
    """

    name = "memory"

    def __init__(self, documents: List[Dict[str, Any]], compiler: Optional[QueryCompiler] = None):
        self.documents = documents
        self.compiler = compiler or QueryCompiler(tie_breaker_field="_id")
        self.executed: List[CompiledQuery] = []
        self.faceted: List[CompiledQuery] = []
        self.error: Optional[Exception] = None

    def compile(self, query):
        return self.compiler.compile(query)

    def compile_facets(self, query):
        return self.compiler.compile_facets(query)

    @database_operation("search")
    async def execute(self, compiled: CompiledQuery) -> BackendPage:
        self.executed.append(compiled)
        if self.error is not None:
            raise self.error

        matched = self._match(compiled.match)
        rows = matched
        for stage in compiled.stages:
            if isinstance(stage, (SortStage, SkipStage, LimitStage)):
                rows = self._apply(stage, rows)
        return BackendPage(documents=rows, total=len(matched))

    @database_operation("facet aggregation")
    async def facet(self, compiled: CompiledQuery) -> RawFacets:
        self.faceted.append(compiled)
        if self.error is not None:
            raise self.error

        matched = self._match(compiled.match)
        output = {}
        for name, stages in compiled.facet.facets:
            rows = matched
            for stage in stages:
                rows = self._apply(stage, rows)
            output[name] = rows
        return output

    def _match(self, match: MatchStage) -> List[Dict[str, Any]]:
        tokens = tokenize(match.text)
        matched = []
        for document in self.documents:
            if not all(self._satisfies(document, predicate) for predicate in match.predicates):
                continue
            if tokens:
                haystack = [document.get(name) or "" for name in TEXT_FIELDS]
                haystack.extend(_field_values(document, "ingredients.name"))
                lowered = " ".join(haystack).lower()
                score = sum(1 for token in tokens if token in lowered)
                if not score:
                    continue
                matched.append({**document, "score": float(score)})
            else:
                matched.append(dict(document))
        return matched

    @staticmethod
    def _satisfies(document: Dict[str, Any], predicate) -> bool:
        values = _field_values(document, predicate.field)
        if isinstance(predicate, InPredicate):
            return any(value in predicate.values for value in values)
        if isinstance(predicate, AllPredicate):
            return all(value in values for value in predicate.values)
        if isinstance(predicate, RangePredicate):
            if not values or not isinstance(values[0], (int, float)):
                return False
            if predicate.minimum is not None and values[0] < predicate.minimum:
                return False
            if predicate.maximum is not None and values[0] > predicate.maximum:
                return False
            return True
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    @staticmethod
    def _apply(stage, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if isinstance(stage, SortStage):
            ordered = list(rows)
            for key in reversed(stage.keys):
                field = "score" if key.is_relevance else key.field
                ordered.sort(
                    key=lambda row: _order(row.get(field)),
                    reverse=key.direction == SortDirection.DESC
                )
            return ordered
        if isinstance(stage, SkipStage):
            return rows[stage.count:]
        if isinstance(stage, LimitStage):
            return rows[:stage.count]
        if isinstance(stage, UnwindStage):
            return [
                {**row, stage.field: item}
                for row in rows
                for item in row.get(stage.field) or []
            ]
        if isinstance(stage, GroupStage):
            counts = Counter(row.get(stage.field) for row in rows)
            return [{"_id": key, "count": count} for key, count in counts.items()]
        raise TypeError(f"Unsupported stage: {stage!r}")


class RecordingSink(InstrumentationSinkInterface):
    """Sink keeping every record in memory."""

    def __init__(self):
        self.performance: List[PerformanceRecord] = []
        self.events: List[SearchEvent] = []
        self.fail = False

    async def write_performance(self, record: PerformanceRecord) -> None:
        if self.fail:
            raise RuntimeError("sink unavailable")
        self.performance.append(record)

    async def write_event(self, event: SearchEvent) -> None:
        if self.fail:
            raise RuntimeError("sink unavailable")
        self.events.append(event)


@pytest.fixture
def spicy_chicken_corpus() -> List[Dict[str, Any]]:
    """
    Fifteen Mexican recipes mentioning spicy or chicken, plus distractors.

    Distractors are Mexican recipes without either word and non-Mexican
    recipes that do mention them.
    """
    documents = []
    for index, dish in enumerate(MEXICAN_DISHES):
        if index % 3 == 0:
            title = f"Spicy Chicken {dish}"
        elif index % 3 == 1:
            title = f"Chicken {dish}"
        else:
            title = f"Spicy {dish}"
        documents.append(make_recipe(
            f"mx{index:02d}",
            title,
            "Mexican",
            description="A weeknight favourite.",
            ingredients=["tortilla", "onion"],
            difficulty=DIFFICULTIES[index % 3]
        ))

    documents.extend([
        make_recipe("mx90", "Guacamole", "Mexican", ingredients=["avocado", "lime"]),
        make_recipe("mx91", "Churros", "Mexican", category="dessert", ingredients=["flour", "sugar"]),
        make_recipe("mx92", "Horchata", "Mexican", category="drink", ingredients=["rice", "cinnamon"]),
        make_recipe("it01", "Chicken Parmesan", "Italian", ingredients=["chicken", "cheese"]),
        make_recipe("it02", "Spicy Arrabbiata", "Italian", ingredients=["pasta", "chili"]),
        make_recipe("it03", "Mushroom Risotto", "Italian", ingredients=["rice", "mushroom"]),
    ])
    return documents


@pytest.fixture
def facet_corpus() -> List[Dict[str, Any]]:
    """Small corpus with known facet counts."""
    return [
        make_recipe("f1", "Pad Thai", "Thai", difficulty="medium", meal_type="dinner",
                    tags=["noodles", "quick"], dietary=["dairy-free"]),
        make_recipe("f2", "Green Curry", "Thai", difficulty="medium", meal_type="dinner",
                    tags=["curry"], dietary=["dairy-free", "gluten-free"]),
        make_recipe("f3", "Mango Sticky Rice", "Thai", difficulty="easy", meal_type="dessert",
                    tags=["sweet"], dietary=["vegan"]),
        make_recipe("f4", "Margherita Pizza", "Italian", difficulty="hard", meal_type="dinner",
                    tags=["quick", "baked"]),
        make_recipe("f5", "Pancakes", "", difficulty="easy", meal_type="breakfast",
                    tags=["sweet", "quick"]),
    ]


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Sink recording analytics in memory."""
    return RecordingSink()


@pytest_asyncio.fixture
async def instrumentation(recording_sink):
    """Running instrumentation service writing to the recording sink."""
    service = InstrumentationService(sink=recording_sink, queue_size=100)
    await service.start()
    yield service
    await service.stop()


@pytest.fixture
def memory_backend(spicy_chicken_corpus) -> InMemoryBackend:
    """In-memory backend over the spicy chicken corpus."""
    return InMemoryBackend(spicy_chicken_corpus)


@pytest.fixture
def search_service(memory_backend, instrumentation) -> SearchApplicationService:
    """Search service with the in-memory backend as default."""
    return SearchApplicationService(
        backends={memory_backend.name: memory_backend},
        default_backend=memory_backend.name,
        instrumentation=instrumentation
    )


@pytest.fixture
def test_config(monkeypatch) -> EnvironmentConfig:
    """Configuration with test names and no environment overrides."""
    for variable in (
        "MONGODB_URI", "MONGODB_DATABASE", "ELASTICSEARCH_URL", "ELASTICSEARCH_USERNAME",
        "ELASTICSEARCH_PASSWORD", "SEARCH_DEFAULT_BACKEND", "LOG_LEVEL"
    ):
        monkeypatch.delenv(variable, raising=False)

    return EnvironmentConfig({
        "database": {
            "mongodb": {
                "uri": "mongodb://test:27017",
                "database": "recipes_test",
                "recipes_collection": "recipes"
            },
            "elasticsearch": {
                "url": "http://test:9200",
                "recipes_index": "recipes_test",
                "ingredients_index": "ingredients_test",
                "request_timeout": 5
            }
        },
        "search": {"default_limit": 10, "max_limit": 50, "default_backend": "aggregation", "stable_sort": True},
        "instrumentation": {"enabled": True, "sink": "logging", "queue_size": 100},
        "logging": {"level": "ERROR"}
    })


@pytest.fixture
def backend_factory():
    """Factory for in-memory backends over a given corpus."""
    return InMemoryBackend
