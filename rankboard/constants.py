"""
Service-wide constants for the rankboard leaderboard API.

This module contains the magic numbers and fixed vocabularies used throughout
the codebase to improve maintainability and clarity.
"""

class PaginationConstants:
    """Constants for paginated listings."""

    # Query-string parameter names accepted by the listing endpoint
    PARAM_PAGE = "page"
    PARAM_LIMIT = "limit"
    PARAM_CLASS = "class"
    PARAM_MIN_SCORE = "minScore"
    PARAM_MAX_SCORE = "maxScore"

    # Signed 64-bit range accepted for integer parameters and SQL bind values
    MIN_SQL_INTEGER = -2**63
    MAX_SQL_INTEGER = 2**63 - 1

class SortConstants:
    """Constants for leaderboard ordering."""

    DEFAULT_SORT_KEY = "rank"

    # Only this token selects descending order; everything else is ascending
    DESCENDING_TOKEN = "desc"

    # Legacy spelling of the class sort key still sent by older clients
    CLASS_ID_ALIAS = "class_id"

class CacheConstants:
    """Constants for caching behavior."""

    # Maximum cache size (number of entries)
    DEFAULT_MAX_CACHE_SIZE = 1000

class ResponseConstants:
    """Constants for HTTP responses."""

    WELCOME_MESSAGE = "Welcome to the API!"
    STORE_FAILURE_MESSAGE = "Failed to fetch accounts"
    CACHE_HEADER = "X-Cache"
