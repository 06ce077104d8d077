"""
Custom exceptions for the leaderboard query pipeline with client-safe error messages.
"""

from rankboard.constants import ResponseConstants

class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ValidationError(LeaderboardException):
    """Raised when a strictly validated query parameter is malformed."""
    def __init__(self, parameter: str, reason: str):
        super().__init__(
            f"Invalid '{parameter}' parameter: {reason}",
            f"invalid '{parameter}' parameter: {reason}"
        )
        self.parameter = parameter

class StoreError(LeaderboardException):
    """Raised when the score store cannot be reached or a query fails."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Store error during {operation}: {details}",
            ResponseConstants.STORE_FAILURE_MESSAGE
        )
        self.operation = operation
