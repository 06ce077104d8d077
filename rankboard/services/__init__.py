"""
Services package for the rankboard leaderboard API.
"""

from .base import BaseService
from .leaderboard import LeaderboardService
from .pagination import Paginator
from .query_resolver import QueryResolver
from .result_cache import ResultCache
from .score_store import ScoreStore
from .scores import ScoreService

__all__ = [
    'BaseService', 'LeaderboardService', 'Paginator', 'QueryResolver',
    'ResultCache', 'ScoreStore', 'ScoreService'
]
