"""
Integration tests for the ranked-rows query against a real SQLite store.
"""

import itertools

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from rankboard.data_models.leaderboard import (
    QuerySpec, SortClause, SortKey, SortOrder, WindowClause,
    SearchPredicate, ClassPredicate, MinScorePredicate, MaxScorePredicate
)
from rankboard.services.score_store import ScoreStore
from rankboard.utils.leaderboard_exceptions import StoreError


def _spec(predicates=(), key=SortKey.RANK, order=SortOrder.ASC, offset=0, limit=100):
    return QuerySpec(
        predicates=tuple(predicates),
        sort=SortClause(key=key, order=order),
        window=WindowClause(offset=offset, limit=limit)
    )


@pytest_asyncio.fixture
async def mixed_population(make_account):
    """Accounts spread over several classes with ties and multiple scores per character."""
    await make_account("AlphaWolf", {1: [300, 500], 2: [450]})
    await make_account("betaHawk", {1: [500], 3: [120]}, email="beta@wolfpack.io")
    await make_account("gamma", {2: [450], 3: [10, 20, 30]})
    await make_account("delta_knight", {1: [75], 4: []})
    await make_account("100%club", {5: [999]})


@pytest.mark.asyncio
class TestRankComputation:
    """Best score per character and competition ranking over everyone."""

    async def test_best_score_and_ranks(self, store, mixed_population):
        rows = await store.fetch_rows(_spec())
        ranked = [(row.username, row.class_id, row.score, row.rank) for row in rows]

        assert ranked == [
            ("100%club", 5, 999, 1),
            ("AlphaWolf", 1, 500, 2),
            ("betaHawk", 1, 500, 2),
            ("AlphaWolf", 2, 450, 4),
            ("gamma", 2, 450, 4),
            ("betaHawk", 3, 120, 6),
            ("delta_knight", 1, 75, 7),
            ("gamma", 3, 30, 8),
            ("delta_knight", 4, 0, 9),
        ]

    async def test_character_without_scores_ranks_at_zero(self, store, mixed_population):
        rows = await store.fetch_rows(_spec([ClassPredicate(4)]))
        assert [(row.username, row.score) for row in rows] == [("delta_knight", 0)]

    async def test_rank_monotonic_in_score(self, store, mixed_population):
        rows = await store.fetch_rows(_spec())
        for a, b in itertools.permutations(rows, 2):
            if a.score > b.score:
                assert a.rank < b.rank
            elif a.score == b.score:
                assert a.rank == b.rank
        for row in rows:
            assert row.rank == 1 + sum(1 for other in rows if other.score > row.score)

    async def test_empty_store(self, store):
        rows, total = await store.fetch_page(_spec())
        assert rows == []
        assert total == 0


@pytest.mark.asyncio
class TestFiltering:
    """Filters apply after ranking and match case-insensitively."""

    @pytest.mark.parametrize("predicates", [
        [ClassPredicate(3)],
        [SearchPredicate("WOLF")],
        [MinScorePredicate(100), MaxScorePredicate(460)],
        [SearchPredicate("a"), ClassPredicate(1)],
    ])
    async def test_filtered_rows_keep_global_rank(self, store, mixed_population, predicates):
        everyone = {(row.account_id, row.class_id): row.rank for row in await store.fetch_rows(_spec())}
        filtered = await store.fetch_rows(_spec(predicates))

        assert filtered
        for row in filtered:
            assert row.rank == everyone[(row.account_id, row.class_id)]

    async def test_search_matches_username_or_email(self, store, mixed_population):
        rows = await store.fetch_rows(_spec([SearchPredicate("wolf")]))
        assert sorted({row.username for row in rows}) == ["AlphaWolf", "betaHawk"]

    async def test_search_wildcards_match_literally(self, store, mixed_population):
        rows = await store.fetch_rows(_spec([SearchPredicate("%")]))
        assert [row.username for row in rows] == ["100%club"]
        assert await store.fetch_rows(_spec([SearchPredicate("_")])) == [
            row for row in await store.fetch_rows(_spec()) if "_" in row.username
        ]

    async def test_score_bounds_inclusive(self, store, mixed_population):
        rows = await store.fetch_rows(_spec([MinScorePredicate(450), MaxScorePredicate(500)]))
        assert sorted(row.score for row in rows) == [450, 450, 500, 500]

    async def test_count_matches_filter_not_window(self, store, mixed_population):
        predicates = [MinScorePredicate(100)]
        rows, total = await store.fetch_page(_spec(predicates, limit=2))

        assert len(rows) == 2
        assert total == 6
        assert await store.count_rows(predicates) == 6


@pytest.mark.asyncio
class TestOrdering:
    """Every sort key yields a deterministic total order across pages."""

    @pytest.mark.parametrize("key", list(SortKey))
    @pytest.mark.parametrize("order", list(SortOrder))
    async def test_pages_concatenate_to_full_listing(self, store, mixed_population, key, order):
        full, total = await store.fetch_page(_spec(key=key, order=order))
        limit = 4
        collected = []
        for page in range((total + limit - 1) // limit):
            rows = await store.fetch_rows(_spec(key=key, order=order, offset=page * limit, limit=limit))
            collected.extend(rows)

        assert collected == full
        assert len(collected) == total
        assert len({(row.account_id, row.class_id) for row in collected}) == total

    async def test_sort_by_score_desc(self, store, mixed_population):
        rows = await store.fetch_rows(_spec(key=SortKey.SCORE, order=SortOrder.DESC))
        scores = [row.score for row in rows]
        assert scores == sorted(scores, reverse=True)

    async def test_sort_by_class_asc(self, store, mixed_population):
        rows = await store.fetch_rows(_spec(key=SortKey.CLASS_ID))
        classes = [row.class_id for row in rows]
        assert classes == sorted(classes)


@pytest.mark.asyncio
async def test_query_failure_raises_store_error(tmp_path):
    """A store without the leaderboard tables surfaces as StoreError."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        store = ScoreStore(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
        with pytest.raises(StoreError):
            await store.fetch_page(_spec())
        with pytest.raises(StoreError):
            await store.count_rows(())
    finally:
        await engine.dispose()
