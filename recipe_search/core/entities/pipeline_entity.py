"""
Backend-neutral query pipeline.

The query compiler produces a ``CompiledQuery`` made of the stage variants
below; each backend adapter interprets the stages in its own dialect.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type, TypeVar, Union


class SortDirection(Enum):
    """Sort direction for a single sort key."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_name(cls, name: str) -> "SortDirection":
        return cls(name.lower())


# Pseudo field standing for the backend's relevance score
RELEVANCE_FIELD = "_relevance"
# Pseudo field standing for the bucket size produced by a GroupStage
COUNT_FIELD = "count"
# Pseudo field standing for the bucket key produced by a GroupStage
KEY_FIELD = "_id"


@dataclass(frozen=True)
class InPredicate:
    """Document field value must be one of ``values``."""
    field: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class AllPredicate:
    """Every one of ``values`` must appear in the document's array field."""
    field: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class RangePredicate:
    """Inclusive numeric range; a missing bound leaves that side open."""
    field: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None


Predicate = Union[InPredicate, AllPredicate, RangePredicate]


@dataclass(frozen=True)
class MatchStage:
    """Filter documents by all predicates and, when set, by free text."""
    predicates: Tuple[Predicate, ...] = ()
    text: Optional[str] = None


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: SortDirection = SortDirection.DESC

    @property
    def is_relevance(self) -> bool:
        return self.field == RELEVANCE_FIELD


@dataclass(frozen=True)
class SortStage:
    keys: Tuple[SortKey, ...]


@dataclass(frozen=True)
class SkipStage:
    count: int


@dataclass(frozen=True)
class LimitStage:
    count: int


@dataclass(frozen=True)
class UnwindStage:
    """Emit one document per element of an array field."""
    field: str


@dataclass(frozen=True)
class GroupStage:
    """Group documents by ``field`` and count each group."""
    field: str


@dataclass(frozen=True)
class FacetStage:
    """Run several named sub-pipelines over the same input documents."""
    facets: Tuple[Tuple[str, Tuple["PipelineStage", ...]], ...]

    def as_dict(self) -> Dict[str, Tuple["PipelineStage", ...]]:
        return dict(self.facets)


PipelineStage = Union[
    MatchStage, SortStage, SkipStage, LimitStage, FacetStage, GroupStage, UnwindStage
]

S = TypeVar("S")


@dataclass(frozen=True)
class CompiledQuery:
    """
    Ordered pipeline plus the pagination it was compiled with.

    ``page`` and ``limit`` are the effective values after defaults and
    clamping, so callers can compute page counts without recompiling.
    """
    stages: Tuple[PipelineStage, ...]
    page: int = 1
    limit: int = 0
    text: Optional[str] = None

    def first(self, stage_type: Type[S]) -> Optional[S]:
        """Return the first stage of the given type, if any."""
        for stage in self.stages:
            if isinstance(stage, stage_type):
                return stage
        return None

    @property
    def match(self) -> MatchStage:
        return self.first(MatchStage) or MatchStage()

    @property
    def sort(self) -> Optional[SortStage]:
        return self.first(SortStage)

    @property
    def skip(self) -> int:
        stage = self.first(SkipStage)
        return stage.count if stage else 0

    @property
    def facet(self) -> Optional[FacetStage]:
        return self.first(FacetStage)
