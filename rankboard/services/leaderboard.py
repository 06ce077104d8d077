"""
Leaderboard service for the ranked account listing.

Resolves request parameters, serves pages through the result cache, and on a
miss queries the score store and serializes the page. Errors are converted
into a tagged result here so the HTTP layer only has to pick a status code.
"""

import json
import logging

from rankboard.data_models.leaderboard import (
    RawQueryParams, ResolvedQuery, QuerySpec, LeaderboardPage,
    LeaderboardResult, PageResult, ErrorResult, ErrorKind
)
from rankboard.services.pagination import Paginator
from rankboard.services.query_resolver import QueryResolver
from rankboard.services.result_cache import ResultCache
from rankboard.services.score_store import ScoreStore
from rankboard.utils.leaderboard_exceptions import ValidationError, StoreError

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Cached, paginated leaderboard queries."""

    def __init__(self, store: ScoreStore, cache: ResultCache, resolver: QueryResolver = None):
        self.store = store
        self.cache = cache
        self.resolver = resolver or QueryResolver()

    async def list_accounts(self, raw: RawQueryParams) -> LeaderboardResult:
        """Validated, cached page for the given raw parameters."""
        try:
            query = self.resolver.resolve(raw)
        except ValidationError as e:
            return ErrorResult(kind=ErrorKind.VALIDATION, message=e.user_message)

        cache_key = ResultCache.derive_key(raw, query.page, query.limit)

        try:
            payload, cache_hit = await self.cache.fetch(
                cache_key, lambda: self._compute_payload(query)
            )
        except StoreError as e:
            logger.error(f"Failed to fetch accounts: {e}")
            return ErrorResult(kind=ErrorKind.STORE, message=e.user_message)

        return PageResult(payload=payload, cache_hit=cache_hit)

    async def get_page(self, query: ResolvedQuery) -> LeaderboardPage:
        """Uncached page for an already resolved query."""
        spec = QuerySpec(
            predicates=query.predicates,
            sort=query.sort,
            window=Paginator.window(query.page, query.limit)
        )
        rows, total = await self.store.fetch_page(spec)
        return Paginator.build_page(rows, total, query.page, query.limit)

    async def _compute_payload(self, query: ResolvedQuery) -> bytes:
        page = await self.get_page(query)
        return json.dumps(page.to_dict(), separators=(',', ':')).encode('utf-8')
