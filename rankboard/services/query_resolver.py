"""
Filter/sort resolution for the account leaderboard listing.

Turns raw query-string values into a ResolvedQuery. Page and limit are
validated strictly and rejected with ValidationError; the remaining filters
are lenient and fall back to their defaults when malformed.
"""

import logging
import re
from typing import Iterable, List, Optional

from rankboard.config import Config
from rankboard.constants import PaginationConstants, SortConstants
from rankboard.data_models.leaderboard import (
    RawQueryParams, ResolvedQuery, SortClause, SortKey, SortOrder,
    Predicate, SearchPredicate, ClassPredicate, MinScorePredicate, MaxScorePredicate
)
from rankboard.utils.leaderboard_exceptions import ValidationError

logger = logging.getLogger(__name__)

# Optional sign followed by ASCII digits, nothing else
_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')

_SORT_KEYS = {key.value: key for key in SortKey}
_SORT_KEYS[SortConstants.CLASS_ID_ALIAS] = SortKey.CLASS_ID


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a signed 64-bit decimal integer string, returning None for anything else."""
    if value is None or not _INTEGER_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if not PaginationConstants.MIN_SQL_INTEGER <= number <= PaginationConstants.MAX_SQL_INTEGER:
        return None
    return number


class QueryResolver:
    """Validates and normalizes leaderboard query parameters."""

    def __init__(
        self,
        class_ids: Optional[Iterable[int]] = None,
        default_page: int = None,
        default_limit: int = None,
        max_limit: int = None
    ):
        self.class_ids = frozenset(class_ids if class_ids is not None else Config.CLASS_IDS)
        self.default_page = Config.DEFAULT_PAGE if default_page is None else default_page
        self.default_limit = Config.DEFAULT_LIMIT if default_limit is None else default_limit
        self.max_limit = Config.MAX_RESULTS_PER_PAGE if max_limit is None else max_limit

    def resolve(self, raw: RawQueryParams) -> ResolvedQuery:
        """Validate page/limit and build predicates and the sort clause."""
        page = self.resolve_page(raw.page)
        limit = self.resolve_limit(raw.limit)

        return ResolvedQuery(
            page=page,
            limit=limit,
            predicates=tuple(self.resolve_predicates(raw)),
            sort=self.resolve_sort(raw.sort, raw.order),
            raw=raw
        )

    def resolve_page(self, value: Optional[str]) -> int:
        if not value:
            return self.default_page
        page = parse_int(value)
        if page is None or page < 1:
            raise ValidationError(PaginationConstants.PARAM_PAGE, "must be a positive integer")
        return page

    def resolve_limit(self, value: Optional[str]) -> int:
        if not value:
            return self.default_limit
        limit = parse_int(value)
        if limit is None or limit < 1 or limit > self.max_limit:
            raise ValidationError(
                PaginationConstants.PARAM_LIMIT,
                f"must be between 1 and {self.max_limit}"
            )
        return limit

    @staticmethod
    def resolve_sort(sort: Optional[str], order: Optional[str]) -> SortClause:
        """Whitelisted sort key (default rank) and direction (default ascending)."""
        key = _SORT_KEYS.get(sort or SortConstants.DEFAULT_SORT_KEY, SortKey.RANK)
        direction = SortOrder.DESC if order == SortConstants.DESCENDING_TOKEN else SortOrder.ASC
        return SortClause(key=key, order=direction)

    def resolve_predicates(self, raw: RawQueryParams) -> List[Predicate]:
        predicates: List[Predicate] = []

        if raw.search:
            predicates.append(SearchPredicate(raw.search))

        if raw.class_filter:
            class_id = parse_int(raw.class_filter)
            if class_id is None or class_id not in self.class_ids:
                logger.info(f"Ignoring invalid class value: {raw.class_filter!r}")
            else:
                predicates.append(ClassPredicate(class_id))

        if raw.min_score:
            min_score = parse_int(raw.min_score)
            if min_score is None:
                logger.info(f"Ignoring invalid minScore value: {raw.min_score!r}")
            else:
                predicates.append(MinScorePredicate(min_score))

        if raw.max_score:
            max_score = parse_int(raw.max_score)
            if max_score is None:
                logger.info(f"Ignoring invalid maxScore value: {raw.max_score!r}")
            else:
                predicates.append(MaxScorePredicate(max_score))

        return predicates
