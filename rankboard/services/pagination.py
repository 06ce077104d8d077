"""
Pagination arithmetic shared by the store query and the response payload.
"""

from typing import List

from rankboard.constants import PaginationConstants
from rankboard.data_models.leaderboard import LeaderboardPage, RankedRow, WindowClause


class Paginator:
    """Converts (page, limit) into a window and computes page metadata."""

    @staticmethod
    def window(page: int, limit: int) -> WindowClause:
        """Row window for a page; the offset is clamped to the SQL integer range."""
        offset = min((page - 1) * limit, PaginationConstants.MAX_SQL_INTEGER)
        return WindowClause(offset=offset, limit=limit)

    @staticmethod
    def total_pages(total: int, limit: int) -> int:
        """Ceiling division; zero rows means zero pages."""
        return (total + limit - 1) // limit if total > 0 else 0

    @staticmethod
    def build_page(rows: List[RankedRow], total: int, page: int, limit: int) -> LeaderboardPage:
        """
        Wrap an already windowed row list with pagination metadata.

        `total` is the filtered row count before windowing; a page past the end
        simply carries an empty row list.
        """
        total_pages = Paginator.total_pages(total, limit)
        return LeaderboardPage(
            entries=list(rows),
            total=total,
            total_pages=total_pages,
            current_page=page,
            has_next_page=page < total_pages,
            has_previous_page=page > 1
        )
