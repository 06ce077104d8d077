"""
Leaderboard data models for the ranked account listing.

Provides immutable data transfer objects for query parameters, the
structured query handed to the score store, ranked rows, pages and the
tagged result returned to the HTTP layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class RawQueryParams:
    """Query-string values exactly as the client sent them (None when absent)."""
    page: Optional[str] = None
    limit: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None
    order: Optional[str] = None
    class_filter: Optional[str] = None
    min_score: Optional[str] = None
    max_score: Optional[str] = None


class SortKey(Enum):
    RANK = "rank"
    USERNAME = "username"
    CLASS_ID = "classId"
    SCORE = "score"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SearchPredicate:
    """Case-insensitive substring match against username or email."""
    text: str


@dataclass(frozen=True)
class ClassPredicate:
    class_id: int


@dataclass(frozen=True)
class MinScorePredicate:
    """Inclusive lower score bound."""
    value: int


@dataclass(frozen=True)
class MaxScorePredicate:
    """Inclusive upper score bound."""
    value: int


Predicate = Union[SearchPredicate, ClassPredicate, MinScorePredicate, MaxScorePredicate]


@dataclass(frozen=True)
class SortClause:
    key: SortKey = SortKey.RANK
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class WindowClause:
    offset: int
    limit: int


@dataclass(frozen=True)
class QuerySpec:
    """Structured query handed to the score store adapter."""
    predicates: Tuple[Predicate, ...]
    sort: SortClause
    window: WindowClause


@dataclass(frozen=True)
class ResolvedQuery:
    """Validated and normalized listing request."""
    page: int
    limit: int
    predicates: Tuple[Predicate, ...] = ()
    sort: SortClause = field(default_factory=SortClause)
    raw: RawQueryParams = field(default_factory=RawQueryParams)


@dataclass(frozen=True)
class RankedRow:
    """Single ranked (account, class) row."""
    account_id: int
    username: str
    email: str
    class_id: int
    score: int
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "AccID": self.account_id,
            "Username": self.username,
            "Email": self.email,
            "ClassID": self.class_id,
            "Score": self.score,
            "Rank": self.rank,
        }


@dataclass(frozen=True)
class LeaderboardPage:
    """Paginated leaderboard data."""
    entries: List[RankedRow]
    total: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [entry.to_dict() for entry in self.entries],
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }


class ErrorKind(Enum):
    VALIDATION = "validation"
    STORE = "store"


@dataclass(frozen=True)
class PageResult:
    """Serialized page payload and whether it came from the cache."""
    payload: bytes
    cache_hit: bool


@dataclass(frozen=True)
class ErrorResult:
    kind: ErrorKind
    message: str


LeaderboardResult = Union[PageResult, ErrorResult]
