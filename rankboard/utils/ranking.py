"""
Shared ranking utilities for the account leaderboard.

Provides the ranked-rows CTE and translates a structured QuerySpec into
SQLAlchemy Core selects so the listing and count queries stay consistent.
"""

from typing import Any, Dict, Iterable, List
from sqlalchemy import select, func, or_
from sqlalchemy.sql import Select
from sqlalchemy.sql.expression import CTE, ColumnElement

from rankboard.database.models import Account, Character, Score
from rankboard.data_models.leaderboard import (
    QuerySpec, SortKey, SortOrder, Predicate,
    SearchPredicate, ClassPredicate, MinScorePredicate, MaxScorePredicate
)


class RankingUtility:
    """Shared ranking logic for listing and count queries."""

    @staticmethod
    def create_ranked_rows_cte() -> CTE:
        """
        Create a CTE ranking every (account, character) pair by best score.

        Characters without score rows are kept with a score of 0. Rank is
        computed over the whole population with RANK(), so ties share a rank
        and the next distinct score skips ahead. Filters must be applied on
        top of this CTE, never inside it, so filtered rows keep global ranks.
        """
        best_score = func.coalesce(func.max(Score.reward_score), 0)

        query = (
            select(
                Account.acc_id.label('acc_id'),
                Account.username.label('username'),
                Account.email.label('email'),
                Character.class_id.label('class_id'),
                best_score.label('score'),
                func.rank().over(order_by=best_score.desc()).label('rank'),
            )
            .select_from(Account)
            .join(Character, Character.acc_id == Account.acc_id)
            .outerjoin(Score, Score.char_id == Character.char_id)
            .group_by(
                Account.acc_id,
                Account.username,
                Account.email,
                Character.char_id,
                Character.class_id
            )
        )

        return query.cte('ranked_accounts')

    @staticmethod
    def get_sort_column_mapping(ranked: CTE) -> Dict[SortKey, Any]:
        """Map whitelisted sort keys onto CTE columns."""
        return {
            SortKey.RANK: ranked.c.rank,
            SortKey.USERNAME: ranked.c.username,
            SortKey.CLASS_ID: ranked.c.class_id,
            SortKey.SCORE: ranked.c.score,
        }

    @staticmethod
    def predicate_clauses(ranked: CTE, predicates: Iterable[Predicate]) -> List[ColumnElement]:
        """Translate typed predicates into WHERE clauses over the ranked CTE."""
        clauses = []
        for predicate in predicates:
            if isinstance(predicate, SearchPredicate):
                clauses.append(or_(
                    ranked.c.username.icontains(predicate.text, autoescape=True),
                    ranked.c.email.icontains(predicate.text, autoescape=True),
                ))
            elif isinstance(predicate, ClassPredicate):
                clauses.append(ranked.c.class_id == predicate.class_id)
            elif isinstance(predicate, MinScorePredicate):
                clauses.append(ranked.c.score >= predicate.value)
            elif isinstance(predicate, MaxScorePredicate):
                clauses.append(ranked.c.score <= predicate.value)
            else:
                raise TypeError(f"Unsupported predicate: {predicate!r}")
        return clauses

    @staticmethod
    def build_page_query(spec: QuerySpec) -> Select:
        """Filtered, sorted and windowed select over the ranked CTE."""
        ranked = RankingUtility.create_ranked_rows_cte()
        sort_column = RankingUtility.get_sort_column_mapping(ranked)[spec.sort.key]
        direction = sort_column.desc() if spec.sort.order == SortOrder.DESC else sort_column.asc()

        return (
            select(
                ranked.c.acc_id,
                ranked.c.username,
                ranked.c.email,
                ranked.c.class_id,
                ranked.c.score,
                ranked.c.rank,
            )
            .where(*RankingUtility.predicate_clauses(ranked, spec.predicates))
            # Tie-break on the row identity so every page boundary is stable
            .order_by(direction, ranked.c.acc_id.asc(), ranked.c.class_id.asc())
            .limit(spec.window.limit)
            .offset(spec.window.offset)
        )

    @staticmethod
    def build_count_query(predicates: Iterable[Predicate]) -> Select:
        """Count of ranked rows matching the predicates, independent of the window."""
        ranked = RankingUtility.create_ranked_rows_cte()
        return (
            select(func.count())
            .select_from(ranked)
            .where(*RankingUtility.predicate_clauses(ranked, predicates))
        )
