"""
Shared fixtures for the rankboard test suite.

Each test gets its own file-backed SQLite database under tmp_path, a fresh
result cache driven by a manual clock, and the services wired on top.
"""

import os
import tempfile
from typing import Dict, List

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="rankboard-logs-"))

import pytest
import pytest_asyncio

from rankboard.database.database import Database
from rankboard.database.models import Account, Character, Score
from rankboard.services.leaderboard import LeaderboardService
from rankboard.services.result_cache import ResultCache
from rankboard.services.score_store import ScoreStore
from rankboard.services.scores import ScoreService


class ManualClock:
    """Monotonic clock that only moves when a test advances it."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl=300, cleanup_interval=600, clock=clock)


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'rankboard_test.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def store(database):
    return ScoreStore(database.session_factory)


@pytest.fixture
def service(store, cache):
    return LeaderboardService(store, cache)


@pytest.fixture
def score_service(database):
    return ScoreService(database.session_factory)


@pytest.fixture
def make_account(database):
    """Create an account with {class_id: [reward scores]} and return its id."""

    async def _make_account(username: str, scores_by_class: Dict[int, List[int]], email: str = None) -> int:
        async with database.transaction() as session:
            account = Account(username=username, email=email or f"{username}@example.com")
            for class_id, scores in scores_by_class.items():
                character = Character(class_id=class_id)
                for value in scores:
                    character.scores.append(Score(reward_score=value))
                account.characters.append(character)
            session.add(account)
            await session.flush()
            return account.acc_id

    return _make_account


@pytest_asyncio.fixture
async def class_three_population(make_account):
    """25 accounts in class 3 scoring 100, 100, 90, 89, ... 68."""
    scores = [100, 100] + [90 - offset for offset in range(23)]
    for index, value in enumerate(scores):
        await make_account(f"player{index:02d}", {3: [value]})
    return scores
