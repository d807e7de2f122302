"""
Centralized error responses for consistent error handling at the request boundary.

Maps engine exceptions to a status code and a client-facing body so validation,
authorization and storage failures stay distinguishable without leaking internals.
"""

import logging
from typing import Any, Dict, Tuple

from stepleague.utils.leaderboard_exceptions import LeaderboardException

logger = logging.getLogger(__name__)


class ErrorResponses:
    """Centralized error response factory."""

    @staticmethod
    def from_exception(exc: Exception) -> Tuple[int, Dict[str, Any]]:
        """Build a (status, body) pair for any exception raised by the engine."""
        if isinstance(exc, LeaderboardException):
            return exc.status, ErrorResponses._body(exc.code, exc.user_message)

        logger.error(f"Unhandled error while building leaderboard: {exc}", exc_info=exc)
        return 500, ErrorResponses._body("UNKNOWN_ERROR", "An unexpected error occurred.")

    @staticmethod
    def _body(code: str, message: str) -> Dict[str, Any]:
        return {"error": {"code": code, "message": message}}


def build_error_response(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    return ErrorResponses.from_exception(exc)
