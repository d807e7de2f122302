"""
Custom exceptions for the leaderboard engine with client-facing error codes.
"""

class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    code = "UNKNOWN_ERROR"
    status = 500

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ValidationError(LeaderboardException):
    """Raised when query parameters are missing or malformed."""
    code = "VALIDATION_FAILED"
    status = 400

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid parameter '{field}': {reason}",
            f"Invalid query parameter '{field}': {reason}"
        )
        self.field = field
        self.reason = reason

class NotAuthorizedError(LeaderboardException):
    """Raised when the caller is not a member of the requested league."""
    code = "API_FORBIDDEN"
    status = 403

    def __init__(self, league_id: str, user_id: str = None):
        super().__init__(
            f"User {user_id} is not a member of league {league_id}",
            "You are not a member of this league"
        )
        self.league_id = league_id

class DataSourceError(LeaderboardException):
    """Raised when a storage read fails. Internal detail never reaches the client."""
    code = "DB_QUERY_FAILED"
    status = 500

    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            "Unable to load leaderboard. Please try again later."
        )
        self.operation = operation
