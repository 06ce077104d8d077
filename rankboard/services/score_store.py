"""
Score store adapter for the ranked account listing.

Executes the ranked-rows queries built by RankingUtility and maps database
failures onto StoreError.
"""

import logging
from typing import Iterable, List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from rankboard.services.base import BaseService
from rankboard.data_models.leaderboard import QuerySpec, RankedRow, Predicate
from rankboard.utils.ranking import RankingUtility
from rankboard.utils.leaderboard_exceptions import StoreError

logger = logging.getLogger(__name__)


class ScoreStore(BaseService):
    """Read-only access to ranked rows over accounts, characters and scores."""

    async def fetch_rows(self, spec: QuerySpec) -> List[RankedRow]:
        """Ranked rows matching the query predicates, sorted and windowed."""
        try:
            async with self.read_session() as session:
                return await self._fetch_rows(session, spec)
        except (SQLAlchemyError, OSError, OverflowError) as e:
            logger.error(f"Ranked rows query failed: {e}", exc_info=True)
            raise StoreError("ranked rows query", str(e)) from e

    async def count_rows(self, predicates: Iterable[Predicate]) -> int:
        """Number of ranked rows matching the predicates."""
        try:
            async with self.read_session() as session:
                return await session.scalar(RankingUtility.build_count_query(predicates))
        except (SQLAlchemyError, OSError, OverflowError) as e:
            logger.error(f"Ranked rows count failed: {e}", exc_info=True)
            raise StoreError("ranked rows count", str(e)) from e

    async def fetch_page(self, spec: QuerySpec) -> Tuple[List[RankedRow], int]:
        """Window rows and the filtered total, read within a single session."""
        try:
            async with self.read_session() as session:
                total = await session.scalar(RankingUtility.build_count_query(spec.predicates))
                rows = await self._fetch_rows(session, spec)
                return rows, total or 0
        except (SQLAlchemyError, OSError, OverflowError) as e:
            logger.error(f"Ranked page query failed: {e}", exc_info=True)
            raise StoreError("ranked page query", str(e)) from e

    @staticmethod
    async def _fetch_rows(session, spec: QuerySpec) -> List[RankedRow]:
        result = await session.execute(RankingUtility.build_page_query(spec))
        return [
            RankedRow(
                account_id=row.acc_id,
                username=row.username,
                email=row.email,
                class_id=row.class_id,
                score=row.score,
                rank=row.rank
            )
            for row in result
        ]
